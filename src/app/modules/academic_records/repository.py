"""
Academic Records Repository
"""

from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from .models import AcademicRecord


async def create(db: AsyncSession, *, application_id: int, **fields: Any) -> AcademicRecord:
    record = AcademicRecord(application_id=application_id, **fields)

    db.add(record)
    await db.commit()
    await db.refresh(record)

    return record


async def create_many(db: AsyncSession, rows: list[dict[str, Any]]) -> list[AcademicRecord]:
    """Insert all rows in one transaction."""
    records = [AcademicRecord(**row) for row in rows]

    db.add_all(records)
    await db.commit()
    for record in records:
        await db.refresh(record)

    return records


async def get_by_id(db: AsyncSession, record_id: int) -> AcademicRecord | None:
    return await db.get(AcademicRecord, record_id)


async def get_by_application(db: AsyncSession, application_id: int) -> list[AcademicRecord]:
    """Records of an application, oldest first."""
    result = await db.execute(
        select(AcademicRecord)
        .where(AcademicRecord.application_id == application_id)
        .order_by(AcademicRecord.created_at.asc(), AcademicRecord.id.asc())
    )
    return list(result.scalars().all())


async def update(db: AsyncSession, record: AcademicRecord, fields: dict[str, Any]) -> AcademicRecord:
    for key, value in fields.items():
        setattr(record, key, value)

    await db.commit()
    await db.refresh(record)

    return record


async def delete(db: AsyncSession, record: AcademicRecord) -> None:
    await db.delete(record)
    await db.commit()
