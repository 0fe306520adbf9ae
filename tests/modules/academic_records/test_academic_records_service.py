"""
Tests for the academic records service.
"""

import pytest
from sqlalchemy import func, select

from app.modules.academic_records.models import AcademicRecord
from app.modules.academic_records.schemas import (
    AcademicRecordCreate,
    AcademicRecordUpdate,
    BulkAcademicRecordItem,
)
from app.modules.academic_records.service import (
    AcademicRecordNotFoundError,
    ApplicationsMissingError,
    bulk_create_records,
    create_record,
    delete_record,
    list_records,
    update_record,
)
from app.modules.applications.service import ApplicationNotFoundError


def _record(subject="Mathematics", grade="A") -> AcademicRecordCreate:
    return AcademicRecordCreate(
        subject=subject, grade=grade, semester="First", academic_year="2025/2026"
    )


class TestCreateAndList:
    @pytest.mark.asyncio
    async def test_list_oldest_first(self, db, factory):
        profile = await factory.profile()
        application = await factory.application(profile)
        first = await create_record(db, application.id, _record(), profile.user_id, False)
        second = await create_record(
            db, application.id, _record("English", "B"), profile.user_id, False
        )

        records = await list_records(db, application.id, profile.user_id, False)

        assert [r.id for r in records] == [first.id, second.id]

    @pytest.mark.asyncio
    async def test_create_requires_application(self, db, factory):
        admin = await factory.admin()

        with pytest.raises(ApplicationNotFoundError):
            await create_record(db, 999, _record(), admin.id, True)


class TestUpdateAndDelete:
    @pytest.mark.asyncio
    async def test_partial_update(self, db, factory):
        profile = await factory.profile()
        application = await factory.application(profile)
        record = await create_record(db, application.id, _record(), profile.user_id, False)

        updated = await update_record(
            db, record.id, AcademicRecordUpdate(grade="A+"), profile.user_id, False
        )

        assert updated.grade == "A+"
        assert updated.subject == "Mathematics"

    @pytest.mark.asyncio
    async def test_missing_record(self, db, factory):
        admin = await factory.admin()

        with pytest.raises(AcademicRecordNotFoundError):
            await update_record(db, 55, AcademicRecordUpdate(grade="C"), admin.id, True)

        with pytest.raises(AcademicRecordNotFoundError):
            await delete_record(db, 55, admin.id, True)


class TestBulkCreate:
    """Bulk import is all-or-nothing."""

    @pytest.mark.asyncio
    async def test_bulk_create(self, db, factory):
        first = await factory.application()
        second = await factory.application()
        items = [
            BulkAcademicRecordItem(application_id=app_id, **_record().model_dump())
            for app_id in (first.id, second.id, first.id)
        ]

        records = await bulk_create_records(db, items)

        assert len(records) == 3
        assert [r.application_id for r in records] == [first.id, second.id, first.id]

    @pytest.mark.asyncio
    async def test_bulk_with_missing_application_writes_nothing(self, db, factory):
        application = await factory.application()
        items = [
            BulkAcademicRecordItem(application_id=app_id, **_record().model_dump())
            for app_id in (application.id, 777)
        ]

        with pytest.raises(ApplicationsMissingError) as exc_info:
            await bulk_create_records(db, items)

        assert "777" in exc_info.value.message
        count = (
            await db.execute(select(func.count()).select_from(AcademicRecord))
        ).scalar_one()
        assert count == 0
