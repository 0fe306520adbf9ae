"""
Document Schemas
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from app.modules.documents.models import DocumentType

MAX_FILE_SIZE_BYTES = 10 * 1024 * 1024


class DocumentUpload(BaseModel):
    """
    Request body for POST /applications/{id}/documents.

    ``stored_filename`` is generated when omitted.
    """

    document_type: DocumentType
    original_filename: str = Field(..., min_length=1, max_length=255)
    stored_filename: str | None = Field(None, min_length=1, max_length=255)
    file_size: int = Field(..., ge=0, le=MAX_FILE_SIZE_BYTES)
    mime_type: str = Field(..., min_length=1, max_length=100)


class DocumentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    application_id: int
    document_type: DocumentType
    original_filename: str
    stored_filename: str
    file_size: int
    mime_type: str
    uploaded_at: datetime
