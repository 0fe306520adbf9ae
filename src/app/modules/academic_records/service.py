"""
Academic Records Service Layer

Applicants record grades on their own applications; staff may manage the
records of any application and import them in bulk.
"""

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.academic_records import repository
from app.modules.academic_records.models import AcademicRecord
from app.modules.academic_records.schemas import (
    AcademicRecordCreate,
    AcademicRecordUpdate,
    BulkAcademicRecordItem,
)
from app.modules.applications import repository as application_repository
from app.modules.applications import service as application_service
from app.modules.shared import NotFoundError, PersistenceError

logger = logging.getLogger(__name__)


class AcademicRecordNotFoundError(NotFoundError):
    def __init__(self, record_id: int):
        super().__init__(
            message=f"Academic record with ID {record_id} not found",
            error_code="ACADEMIC_RECORD_NOT_FOUND",
        )


class ApplicationsMissingError(NotFoundError):
    def __init__(self, missing: list[int]):
        super().__init__(
            message=f"Applications not found: {', '.join(str(i) for i in missing)}",
            error_code="APPLICATIONS_NOT_FOUND",
        )


async def create_record(
    db: AsyncSession,
    application_id: int,
    data: AcademicRecordCreate,
    user_id: int,
    is_staff: bool,
) -> AcademicRecord:
    """
    Add a record to an application.

    Raises:
        ApplicationNotFoundError: If the application does not exist
        ForbiddenError: If an applicant writes to someone else's application
    """
    await application_service.ensure_can_access(db, application_id, user_id, is_staff)

    record = await repository.create(db, application_id=application_id, **data.model_dump())
    logger.info(f"Created academic record {record.id} for application {application_id}")
    return record


async def list_records(
    db: AsyncSession, application_id: int, user_id: int, is_staff: bool
) -> list[AcademicRecord]:
    await application_service.ensure_can_access(db, application_id, user_id, is_staff)
    return await repository.get_by_application(db, application_id)


async def _get_owned(
    db: AsyncSession, record_id: int, user_id: int, is_staff: bool
) -> AcademicRecord:
    record = await repository.get_by_id(db, record_id)

    if not record:
        logger.warning(f"Academic record {record_id} not found")
        raise AcademicRecordNotFoundError(record_id)

    await application_service.ensure_can_access(db, record.application_id, user_id, is_staff)
    return record


async def update_record(
    db: AsyncSession,
    record_id: int,
    data: AcademicRecordUpdate,
    user_id: int,
    is_staff: bool,
) -> AcademicRecord:
    record = await _get_owned(db, record_id, user_id, is_staff)

    fields = data.model_dump(exclude_unset=True, exclude_none=True)
    if not fields:
        return record

    record = await repository.update(db, record, fields)
    logger.info(f"Updated academic record {record_id} fields {sorted(fields)}")
    return record


async def delete_record(db: AsyncSession, record_id: int, user_id: int, is_staff: bool) -> bool:
    record = await _get_owned(db, record_id, user_id, is_staff)
    await repository.delete(db, record)
    logger.info(f"Deleted academic record {record_id}")
    return True


async def bulk_create_records(
    db: AsyncSession, items: list[BulkAcademicRecordItem]
) -> list[AcademicRecord]:
    """
    Import records for several applications at once.

    Nothing is written unless every referenced application exists.

    Raises:
        ApplicationsMissingError: If any application does not exist
        PersistenceError: If the insert fails
    """
    if not items:
        return []

    wanted = list(dict.fromkeys(item.application_id for item in items))
    existing = await application_repository.get_existing_ids(db, wanted)
    missing = [application_id for application_id in wanted if application_id not in existing]

    if missing:
        logger.warning(f"Bulk academic records rejected, missing applications {missing}")
        raise ApplicationsMissingError(missing)

    try:
        records = await repository.create_many(db, [item.model_dump() for item in items])
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Bulk academic record insert failed: {e}")
        raise PersistenceError("Failed to save academic records") from e

    logger.info(f"Bulk created {len(records)} academic records for {len(wanted)} applications")
    return records
