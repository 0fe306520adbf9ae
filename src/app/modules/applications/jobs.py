"""
Applications Background Jobs

Scheduled tasks for the application lifecycle:
1. Remind applicants who created an application but never submitted it

Design Principles:
- Jobs are idempotent: reminder_sent_at is stamped so an application is
  reminded at most once
- Jobs open their own database sessions
- A failure on one application is logged and does not stop the run

Schedule:
- Runs hourly; can be triggered manually via /debug/jobs/{job_id}/trigger
"""

import logging
from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from typing import Any

from apscheduler.triggers.interval import IntervalTrigger
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.database import async_session_maker
from app.core.email import send_submission_reminder
from app.core.scheduler import register_job
from app.modules.applications import repository
from app.modules.applications.repository import ApplicantContact
from app.modules.notifications import repository as notification_repository

logger = logging.getLogger(__name__)

JOB_ID_SUBMISSION_REMINDERS = "applications_send_submission_reminders"


async def _process_submission_reminder(
    db: AsyncSession,
    contact: ApplicantContact,
    days_open: int,
    now: datetime,
) -> dict[str, Any]:
    """Notify one applicant and stamp the application as reminded."""
    await notification_repository.create(
        db,
        user_id=contact.user_id,
        title="Your application is not submitted yet",
        message=(
            f"Application {contact.application_number} is still a draft. "
            "Submit it so the admission committee can review it."
        ),
    )

    email_sent = await send_submission_reminder(
        to_email=contact.email,
        applicant_name=contact.full_name,
        application_number=contact.application_number,
        days_open=days_open,
    )

    if not email_sent:
        # The in-app notification still went out; do not retry the email
        logger.error(f"Failed to send reminder email for application {contact.application_id}")

    await repository.mark_reminder_sent(db, contact.application_id, now)

    logger.info(f"Sent submission reminder for application {contact.application_id}")

    return {
        "application_id": contact.application_id,
        "status": "sent" if email_sent else "marked_sent_email_failed",
        "email": contact.email,
    }


async def send_submission_reminders(
    session_factory: Callable[[], AsyncSession] = async_session_maker,
) -> dict[str, Any]:
    """
    Remind applicants whose application has been left unsubmitted.

    Eligible: still INITIAL_REGISTRATION, never submitted, never reminded,
    created more than ``settings.submission_reminder_days`` days ago.

    Returns:
        Dict with executed_at, per-application results, total_processed
        and total_errors
    """
    days_open = settings.submission_reminder_days
    executed_at = datetime.now(UTC)
    threshold = executed_at - timedelta(days=days_open)

    logger.info(f"Starting submission reminder job. Threshold: {threshold.isoformat()}")

    results: dict[str, Any] = {
        "executed_at": executed_at.isoformat(),
        "reminders": [],
        "total_processed": 0,
        "total_errors": 0,
    }

    async with session_factory() as db:
        contacts = await repository.get_unsubmitted_needing_reminder(db, created_before=threshold)

    logger.info(f"Found {len(contacts)} applications needing a submission reminder")

    for contact in contacts:
        try:
            async with session_factory() as db:
                result = await _process_submission_reminder(db, contact, days_open, executed_at)
            results["reminders"].append(result)
            results["total_processed"] += 1
        except Exception as e:
            logger.error(
                f"Error sending reminder for application {contact.application_id}: {e}",
                exc_info=True,
            )
            results["reminders"].append(
                {
                    "application_id": contact.application_id,
                    "status": "error",
                    "error": str(e),
                }
            )
            results["total_errors"] += 1

    logger.info(
        f"Submission reminder job completed. "
        f"Processed: {results['total_processed']}, Errors: {results['total_errors']}"
    )

    return results


def register_application_jobs() -> None:
    """Register the application background jobs. Call before start_scheduler."""
    register_job(
        job_id=JOB_ID_SUBMISSION_REMINDERS,
        func=send_submission_reminders,
        trigger=IntervalTrigger(hours=1),
    )
    logger.info(f"Registered job: {JOB_ID_SUBMISSION_REMINDERS} (interval: 1 hour)")
