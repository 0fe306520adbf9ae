"""
Applicant Profile Models

Personal and guardian details of an applicant. One profile per applicant user.
"""

import enum
from datetime import date

from sqlalchemy import Date, ForeignKey, String, Text
from sqlalchemy import Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column

from app.modules.shared import BaseModel


class SchoolLevel(str, enum.Enum):
    """School level the applicant is applying to."""

    JUNIOR_HIGH = "JUNIOR_HIGH"
    SENIOR_HIGH = "SENIOR_HIGH"


class ApplicantProfile(BaseModel):
    """Applicant profile linked one-to-one with a user account."""

    __tablename__ = "applicant_profiles"

    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
    )

    date_of_birth: Mapped[date] = mapped_column(Date, nullable=False)
    address: Mapped[str] = mapped_column(Text, nullable=False)
    phone_number: Mapped[str] = mapped_column(String(30), nullable=False)

    # Parent / guardian
    parent_full_name: Mapped[str] = mapped_column(String(200), nullable=False)
    parent_phone_number: Mapped[str] = mapped_column(String(30), nullable=False)
    parent_email: Mapped[str] = mapped_column(String(255), nullable=False)

    school_level: Mapped[SchoolLevel] = mapped_column(
        SAEnum(SchoolLevel, name="school_level"),
        nullable=False,
        index=True,
    )

    def __repr__(self) -> str:
        return f"<ApplicantProfile(id={self.id}, user_id={self.user_id})>"
