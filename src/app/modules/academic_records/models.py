"""
Academic Record Models
"""

from sqlalchemy import ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from app.modules.shared import BaseModel


class AcademicRecord(BaseModel):
    """One subject grade for a semester, reported on an application."""

    __tablename__ = "academic_records"

    application_id: Mapped[int] = mapped_column(
        ForeignKey("applications.id", ondelete="CASCADE"),
        nullable=False,
    )
    subject: Mapped[str] = mapped_column(String(100), nullable=False)
    grade: Mapped[str] = mapped_column(String(20), nullable=False)
    semester: Mapped[str] = mapped_column(String(50), nullable=False)
    academic_year: Mapped[str] = mapped_column(String(20), nullable=False)

    __table_args__ = (
        Index("ix_academic_records_application_created", "application_id", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<AcademicRecord(id={self.id}, application_id={self.application_id}, subject={self.subject})>"
