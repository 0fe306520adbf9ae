"""
Documents Repository
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from .models import Document, DocumentType


async def create(
    db: AsyncSession,
    *,
    application_id: int,
    document_type: DocumentType,
    original_filename: str,
    stored_filename: str,
    file_size: int,
    mime_type: str,
) -> Document:
    """Record an uploaded document."""
    document = Document(
        application_id=application_id,
        document_type=document_type,
        original_filename=original_filename,
        stored_filename=stored_filename,
        file_size=file_size,
        mime_type=mime_type,
    )

    db.add(document)
    await db.commit()
    await db.refresh(document)

    return document


async def get_by_id(db: AsyncSession, document_id: int) -> Document | None:
    return await db.get(Document, document_id)


async def get_by_application(
    db: AsyncSession, application_id: int, document_type: DocumentType | None = None
) -> list[Document]:
    """Documents of an application, oldest first, optionally of one type."""
    query = select(Document).where(Document.application_id == application_id)

    if document_type:
        query = query.where(Document.document_type == document_type)

    result = await db.execute(query.order_by(Document.uploaded_at.asc(), Document.id.asc()))
    return list(result.scalars().all())


async def delete(db: AsyncSession, document: Document) -> None:
    await db.delete(document)
    await db.commit()
