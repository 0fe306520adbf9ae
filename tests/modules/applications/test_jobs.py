"""
Tests for the submission reminder job.
"""

from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock, patch

import pytest
from sqlalchemy import select, update

from app.modules.applications.jobs import (
    JOB_ID_SUBMISSION_REMINDERS,
    register_application_jobs,
    send_submission_reminders,
)
from app.modules.applications.models import Application, ApplicationStatus
from app.modules.notifications.models import Notification

JOBS = "app.modules.applications.jobs"


async def _age(db, application: Application, days: int) -> None:
    await db.execute(
        update(Application)
        .where(Application.id == application.id)
        .values(created_at=datetime.now(UTC) - timedelta(days=days))
    )
    await db.commit()


class TestSendSubmissionReminders:
    """Tests for send_submission_reminders."""

    @pytest.mark.asyncio
    async def test_reminds_stale_drafts_once(self, db, factory, session_factory):
        stale = await factory.application()
        fresh = await factory.application()
        await _age(db, stale, days=30)

        with patch(
            f"{JOBS}.send_submission_reminder", new_callable=AsyncMock, return_value=True
        ) as mock_email:
            first_run = await send_submission_reminders(session_factory)
            second_run = await send_submission_reminders(session_factory)

        assert first_run["total_processed"] == 1
        assert first_run["reminders"][0]["application_id"] == stale.id
        assert first_run["reminders"][0]["status"] == "sent"
        assert second_run["total_processed"] == 0
        mock_email.assert_called_once()

        async with session_factory() as check:
            reminded = await check.get(Application, stale.id)
            untouched = await check.get(Application, fresh.id)
            notifications = (await check.execute(select(Notification))).scalars().all()

        assert reminded.reminder_sent_at is not None
        assert untouched.reminder_sent_at is None
        assert len(notifications) == 1

    @pytest.mark.asyncio
    async def test_submitted_applications_skipped(self, db, factory, session_factory):
        application = await factory.application()
        await _age(db, application, days=30)
        await db.execute(
            update(Application)
            .where(Application.id == application.id)
            .values(status=ApplicationStatus.DOCUMENT_UPLOAD, submitted_at=datetime.now(UTC))
        )
        await db.commit()

        with patch(f"{JOBS}.send_submission_reminder", new_callable=AsyncMock):
            result = await send_submission_reminders(session_factory)

        assert result["total_processed"] == 0

    @pytest.mark.asyncio
    async def test_email_failure_still_marks_sent(self, db, factory, session_factory):
        application = await factory.application()
        await _age(db, application, days=30)

        with patch(f"{JOBS}.send_submission_reminder", new_callable=AsyncMock, return_value=False):
            result = await send_submission_reminders(session_factory)

        assert result["reminders"][0]["status"] == "marked_sent_email_failed"
        assert result["total_errors"] == 0


class TestRegisterJobs:
    def test_registers_reminder_job(self):
        with patch(f"{JOBS}.register_job") as mock_register:
            register_application_jobs()

        assert mock_register.call_args.kwargs["job_id"] == JOB_ID_SUBMISSION_REMINDERS
