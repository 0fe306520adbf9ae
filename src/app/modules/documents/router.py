"""
Documents Router

- POST   /applications/{id}/documents             - Record a document
- GET    /applications/{id}/documents?type=...    - List documents
- GET    /documents/{id}                          - Get document metadata
- GET    /documents/{id}/download                 - Download (placeholder body)
- DELETE /documents/{id}                          - Delete a document
"""

import logging
from urllib.parse import quote

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import CurrentUser, get_current_user
from app.core.database import get_db
from app.modules.documents import service
from app.modules.documents.models import DocumentType
from app.modules.documents.schemas import DocumentResponse, DocumentUpload
from app.modules.shared import ServiceError, handle_service_error, internal_error

logger = logging.getLogger(__name__)

application_documents_router = APIRouter()
router = APIRouter()


@application_documents_router.post(
    "/{application_id}/documents",
    response_model=DocumentResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Upload Document",
    responses={404: {"description": "Application not found"}},
)
async def upload_document(
    application_id: int,
    data: DocumentUpload,
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
) -> DocumentResponse:
    try:
        document = await service.upload_document(db, application_id, data, user.id, user.is_staff)
        return DocumentResponse.model_validate(document)
    except ServiceError as e:
        handle_service_error(e)
    except Exception as e:
        logger.exception(f"Error recording document for application {application_id}: {e}")
        raise internal_error() from e


@application_documents_router.get(
    "/{application_id}/documents",
    response_model=list[DocumentResponse],
    summary="List Documents",
    responses={404: {"description": "Application not found"}},
)
async def list_documents(
    application_id: int,
    document_type: DocumentType | None = Query(None, alias="type"),
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
) -> list[DocumentResponse]:
    try:
        documents = await service.list_documents(
            db, application_id, user.id, user.is_staff, document_type
        )
        return [DocumentResponse.model_validate(d) for d in documents]
    except ServiceError as e:
        handle_service_error(e)
    except Exception as e:
        logger.exception(f"Error listing documents for application {application_id}: {e}")
        raise internal_error() from e


@router.get(
    "/{document_id}",
    response_model=DocumentResponse,
    summary="Get Document",
    responses={404: {"description": "Document not found"}},
)
async def get_document(
    document_id: int,
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
) -> DocumentResponse:
    try:
        document = await service.get_document(db, document_id, user.id, user.is_staff)
        return DocumentResponse.model_validate(document)
    except ServiceError as e:
        handle_service_error(e)
    except Exception as e:
        logger.exception(f"Error loading document {document_id}: {e}")
        raise internal_error() from e


@router.get(
    "/{document_id}/download",
    summary="Download Document",
    response_class=Response,
    responses={404: {"description": "Document not found"}},
)
async def download_document(
    document_id: int,
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
) -> Response:
    try:
        document, content = await service.download_document(
            db, document_id, user.id, user.is_staff
        )
        return Response(
            content=content,
            media_type=document.mime_type,
            headers={
                "Content-Disposition": (
                    f"attachment; filename*=UTF-8''{quote(document.original_filename)}"
                )
            },
        )
    except ServiceError as e:
        handle_service_error(e)
    except Exception as e:
        logger.exception(f"Error downloading document {document_id}: {e}")
        raise internal_error() from e


@router.delete(
    "/{document_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Document",
    responses={404: {"description": "Document not found"}},
)
async def delete_document(
    document_id: int,
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
) -> Response:
    try:
        await service.delete_document(db, document_id, user.id, user.is_staff)
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    except ServiceError as e:
        handle_service_error(e)
    except Exception as e:
        logger.exception(f"Error deleting document {document_id}: {e}")
        raise internal_error() from e
