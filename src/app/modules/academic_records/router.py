"""
Academic Records Router

- POST   /applications/{id}/academic-records   - Add a record
- GET    /applications/{id}/academic-records   - List records (oldest first)
- PATCH  /academic-records/{id}                - Update a record
- DELETE /academic-records/{id}                - Delete a record
- POST   /admin/academic-records/bulk          - Import records (staff)
"""

import logging

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import CurrentUser, get_current_admin_user, get_current_user
from app.core.database import get_db
from app.modules.academic_records import service
from app.modules.academic_records.schemas import (
    AcademicRecordCreate,
    AcademicRecordResponse,
    AcademicRecordUpdate,
    BulkAcademicRecordCreate,
)
from app.modules.shared import ServiceError, handle_service_error, internal_error

logger = logging.getLogger(__name__)

application_records_router = APIRouter()
router = APIRouter()
admin_router = APIRouter()


@application_records_router.post(
    "/{application_id}/academic-records",
    response_model=AcademicRecordResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add Academic Record",
)
async def create_record(
    application_id: int,
    data: AcademicRecordCreate,
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
) -> AcademicRecordResponse:
    try:
        record = await service.create_record(db, application_id, data, user.id, user.is_staff)
        return AcademicRecordResponse.model_validate(record)
    except ServiceError as e:
        handle_service_error(e)
    except Exception as e:
        logger.exception(f"Error creating academic record for application {application_id}: {e}")
        raise internal_error() from e


@application_records_router.get(
    "/{application_id}/academic-records",
    response_model=list[AcademicRecordResponse],
    summary="List Academic Records",
)
async def list_records(
    application_id: int,
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
) -> list[AcademicRecordResponse]:
    try:
        records = await service.list_records(db, application_id, user.id, user.is_staff)
        return [AcademicRecordResponse.model_validate(r) for r in records]
    except ServiceError as e:
        handle_service_error(e)
    except Exception as e:
        logger.exception(f"Error listing academic records for application {application_id}: {e}")
        raise internal_error() from e


@router.patch(
    "/{record_id}",
    response_model=AcademicRecordResponse,
    summary="Update Academic Record",
)
async def update_record(
    record_id: int,
    data: AcademicRecordUpdate,
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
) -> AcademicRecordResponse:
    try:
        record = await service.update_record(db, record_id, data, user.id, user.is_staff)
        return AcademicRecordResponse.model_validate(record)
    except ServiceError as e:
        handle_service_error(e)
    except Exception as e:
        logger.exception(f"Error updating academic record {record_id}: {e}")
        raise internal_error() from e


@router.delete(
    "/{record_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Academic Record",
)
async def delete_record(
    record_id: int,
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
) -> Response:
    try:
        await service.delete_record(db, record_id, user.id, user.is_staff)
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    except ServiceError as e:
        handle_service_error(e)
    except Exception as e:
        logger.exception(f"Error deleting academic record {record_id}: {e}")
        raise internal_error() from e


@admin_router.post(
    "/bulk",
    response_model=list[AcademicRecordResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Bulk Import Academic Records",
    description="All referenced applications must exist; otherwise nothing is written.",
)
async def bulk_create_records(
    data: BulkAcademicRecordCreate,
    db: AsyncSession = Depends(get_db),
    admin: CurrentUser = Depends(get_current_admin_user),
) -> list[AcademicRecordResponse]:
    try:
        records = await service.bulk_create_records(db, data.records)
        return [AcademicRecordResponse.model_validate(r) for r in records]
    except ServiceError as e:
        handle_service_error(e)
    except Exception as e:
        logger.exception(f"Error importing academic records by admin {admin.id}: {e}")
        raise internal_error() from e
