"""
Documents Service Layer

Document metadata for applications. Applicants manage documents of their
own applications; staff can read and delete any.

Only metadata is persisted. Downloads return a placeholder body.
"""

import logging
import os
import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.applications import service as application_service
from app.modules.documents import repository
from app.modules.documents.models import Document, DocumentType
from app.modules.documents.schemas import DocumentUpload
from app.modules.shared import NotFoundError

logger = logging.getLogger(__name__)


class DocumentNotFoundError(NotFoundError):
    def __init__(self, document_id: int):
        super().__init__(
            message=f"Document with ID {document_id} not found",
            error_code="DOCUMENT_NOT_FOUND",
        )


def _generate_stored_filename(original_filename: str) -> str:
    _, extension = os.path.splitext(original_filename)
    return f"{uuid.uuid4().hex}{extension.lower()}"


async def upload_document(
    db: AsyncSession,
    application_id: int,
    data: DocumentUpload,
    user_id: int,
    is_staff: bool,
) -> Document:
    """
    Record a document for an application.

    Raises:
        ApplicationNotFoundError: If the application does not exist
        ForbiddenError: If an applicant uploads to someone else's application
    """
    await application_service.ensure_can_access(db, application_id, user_id, is_staff)

    document = await repository.create(
        db,
        application_id=application_id,
        document_type=data.document_type,
        original_filename=data.original_filename,
        stored_filename=data.stored_filename or _generate_stored_filename(data.original_filename),
        file_size=data.file_size,
        mime_type=data.mime_type,
    )

    logger.info(
        f"Recorded {document.document_type.value} document {document.id} "
        f"for application {application_id}"
    )
    return document


async def list_documents(
    db: AsyncSession,
    application_id: int,
    user_id: int,
    is_staff: bool,
    document_type: DocumentType | None = None,
) -> list[Document]:
    """Documents of an application, optionally of one type."""
    await application_service.ensure_can_access(db, application_id, user_id, is_staff)
    return await repository.get_by_application(db, application_id, document_type)


async def get_document(
    db: AsyncSession, document_id: int, user_id: int, is_staff: bool
) -> Document:
    document = await repository.get_by_id(db, document_id)

    if not document:
        raise DocumentNotFoundError(document_id)

    await application_service.ensure_can_access(db, document.application_id, user_id, is_staff)
    return document


async def delete_document(db: AsyncSession, document_id: int, user_id: int, is_staff: bool) -> bool:
    document = await get_document(db, document_id, user_id, is_staff)
    await repository.delete(db, document)
    logger.info(f"Deleted document {document_id} by user {user_id}")
    return True


async def download_document(
    db: AsyncSession, document_id: int, user_id: int, is_staff: bool
) -> tuple[Document, bytes]:
    """Return the document and a placeholder file body."""
    document = await get_document(db, document_id, user_id, is_staff)
    return document, f"Mock file content for {document.original_filename}".encode()
