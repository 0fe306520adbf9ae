"""
Application Models

Admission applications and their append-only status history.
"""

import enum
from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String, Text, func
from sqlalchemy import Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column

from app.core.database import Base
from app.modules.shared import BaseModel, utcnow


class ApplicationStatus(str, enum.Enum):
    """Lifecycle stage of an application, in admission order."""

    INITIAL_REGISTRATION = "INITIAL_REGISTRATION"
    DOCUMENT_UPLOAD = "DOCUMENT_UPLOAD"
    SELECTION = "SELECTION"
    ANNOUNCEMENT = "ANNOUNCEMENT"
    RE_REGISTRATION = "RE_REGISTRATION"

    @property
    def position(self) -> int:
        """Zero-based index of this stage in the admission sequence."""
        return list(ApplicationStatus).index(self)


# Shared by applications.status and both history columns
application_status_enum = SAEnum(ApplicationStatus, name="application_status")


class Application(BaseModel):
    """
    One admission attempt by an applicant.

    ``status`` is only changed through the transition functions in
    ``service``, which always append an ApplicationStatusHistory row in the
    same transaction.
    """

    __tablename__ = "applications"

    applicant_id: Mapped[int] = mapped_column(
        ForeignKey("applicant_profiles.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    application_number: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)

    status: Mapped[ApplicationStatus] = mapped_column(
        application_status_enum,
        nullable=False,
        default=ApplicationStatus.INITIAL_REGISTRATION,
    )
    submitted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    # Set by the submission reminder job
    reminder_sent_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    __table_args__ = (
        Index("ix_applications_status", "status"),
        Index("ix_applications_created_at", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<Application(id={self.id}, number={self.application_number}, status={self.status})>"


class ApplicationStatusHistory(Base):
    """
    Audit record of one status transition.

    Rows are inserted, never updated or deleted. Ordered by ``created_at``
    (then ``id`` for rows written in the same transaction) they form a chain:
    each row's ``new_status`` is the next row's ``previous_status``.
    """

    __tablename__ = "application_status_history"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    application_id: Mapped[int] = mapped_column(
        ForeignKey("applications.id", ondelete="CASCADE"),
        nullable=False,
    )
    previous_status: Mapped[ApplicationStatus | None] = mapped_column(
        application_status_enum, nullable=True
    )
    new_status: Mapped[ApplicationStatus] = mapped_column(application_status_enum, nullable=False)
    changed_by_user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id"),
        nullable=False,
        index=True,
    )
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
        nullable=False,
    )

    __table_args__ = (
        Index("ix_application_status_history_application_created", "application_id", "created_at"),
    )

    def __repr__(self) -> str:
        return (
            f"<ApplicationStatusHistory(application_id={self.application_id}, "
            f"{self.previous_status} -> {self.new_status})>"
        )
