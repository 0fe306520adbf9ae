"""
User Models

Database models for portal accounts and authentication.
"""

from enum import Enum

from sqlalchemy import Boolean, String, Text
from sqlalchemy import Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column

from app.modules.shared import BaseModel


class UserRole(str, Enum):
    """User roles in the system."""

    APPLICANT = "APPLICANT"
    ADMIN = "ADMIN"
    ADMISSION_COMMITTEE = "ADMISSION_COMMITTEE"


# Roles allowed on the admin surface
STAFF_ROLES = frozenset({UserRole.ADMIN, UserRole.ADMISSION_COMMITTEE})


class User(BaseModel):
    """
    User model for authentication and authorization.

    Applicants carry their admission data in a linked ApplicantProfile;
    staff accounts (ADMIN, ADMISSION_COMMITTEE) have no profile.
    """

    __tablename__ = "users"

    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        index=True,
        nullable=False,
    )
    password_hash: Mapped[str] = mapped_column(
        Text,
        nullable=False,
    )
    full_name: Mapped[str] = mapped_column(
        String(200),
        nullable=False,
    )
    role: Mapped[UserRole] = mapped_column(
        SAEnum(UserRole, name="user_role"),
        nullable=False,
        default=UserRole.APPLICANT,
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email}, role={self.role.value})>"

    @property
    def is_staff(self) -> bool:
        """Whether the user may use the admin surface."""
        return self.role in STAFF_ROLES
