"""
Document Models

Metadata of documents attached to an application. File contents are not
stored by this service.
"""

import enum
from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Integer, String, func
from sqlalchemy import Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column

from app.core.database import Base
from app.modules.shared import utcnow


class DocumentType(str, enum.Enum):
    """Kinds of supporting documents."""

    BIRTH_CERTIFICATE = "BIRTH_CERTIFICATE"
    REPORT_CARD = "REPORT_CARD"
    PHOTO = "PHOTO"
    PARENT_ID = "PARENT_ID"
    OTHER = "OTHER"


class Document(Base):
    """An uploaded document's metadata."""

    __tablename__ = "documents"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    application_id: Mapped[int] = mapped_column(
        ForeignKey("applications.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    document_type: Mapped[DocumentType] = mapped_column(
        SAEnum(DocumentType, name="document_type"), nullable=False
    )
    original_filename: Mapped[str] = mapped_column(String(255), nullable=False)
    stored_filename: Mapped[str] = mapped_column(String(255), nullable=False)
    file_size: Mapped[int] = mapped_column(Integer, nullable=False)
    mime_type: Mapped[str] = mapped_column(String(100), nullable=False)
    uploaded_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<Document(id={self.id}, application_id={self.application_id}, type={self.document_type})>"
