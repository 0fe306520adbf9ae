"""
Applications Repository

Database operations for applications and their status history.

Functions named ``*_for_update`` take row locks (``SELECT ... FOR UPDATE``)
and leave the transaction open; the caller commits. Other write helpers
commit their own unit of work.
"""

import time
from collections.abc import Sequence
from datetime import datetime
from typing import NamedTuple

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.applicant_profiles.models import ApplicantProfile, SchoolLevel
from app.modules.users.models import User

from .models import Application, ApplicationStatus, ApplicationStatusHistory


class ApplicantContact(NamedTuple):
    """The user behind an application, for notifications."""

    application_id: int
    application_number: str
    user_id: int
    email: str
    full_name: str


def generate_application_number(applicant_id: int) -> str:
    """Build the human-facing number ``APP-<applicant>-<epoch millis>``."""
    return f"APP-{applicant_id}-{int(time.time() * 1000)}"


async def create(db: AsyncSession, applicant_id: int) -> Application:
    """Create a new application in INITIAL_REGISTRATION."""
    application = Application(
        applicant_id=applicant_id,
        application_number=generate_application_number(applicant_id),
        status=ApplicationStatus.INITIAL_REGISTRATION,
    )

    db.add(application)
    await db.commit()
    await db.refresh(application)

    return application


async def get_by_id(db: AsyncSession, application_id: int) -> Application | None:
    """Get application by ID."""
    return await db.get(Application, application_id)


async def get_for_update(db: AsyncSession, application_id: int) -> Application | None:
    """Get an application and lock its row for the rest of the transaction."""
    result = await db.execute(
        select(Application)
        .where(Application.id == application_id)
        .with_for_update()
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def get_many_for_update(
    db: AsyncSession, application_ids: Sequence[int]
) -> list[Application]:
    """
    Get and lock several applications.

    Rows are locked in id order.
    """
    result = await db.execute(
        select(Application)
        .where(Application.id.in_(list(application_ids)))
        .order_by(Application.id)
        .with_for_update()
        .execution_options(populate_existing=True)
    )
    return list(result.scalars().all())


async def get_by_applicant(db: AsyncSession, applicant_id: int) -> list[Application]:
    """Get an applicant's applications, newest first."""
    result = await db.execute(
        select(Application)
        .where(Application.applicant_id == applicant_id)
        .order_by(Application.created_at.desc(), Application.id.desc())
    )
    return list(result.scalars().all())


async def get_applications_for_admin(
    db: AsyncSession,
    *,
    status: ApplicationStatus | None = None,
    school_level: SchoolLevel | None = None,
    skip: int = 0,
    limit: int = 10,
) -> tuple[list[Application], int]:
    """
    Get a filtered page of applications, newest first.

    Returns:
        Tuple of (applications, total matching count)
    """
    query = select(Application)

    if status:
        query = query.where(Application.status == status)

    if school_level:
        query = query.join(ApplicantProfile, ApplicantProfile.id == Application.applicant_id).where(
            ApplicantProfile.school_level == school_level
        )

    count_query = select(func.count()).select_from(query.subquery())
    total = (await db.execute(count_query)).scalar_one()

    query = (
        query.order_by(Application.created_at.desc(), Application.id.desc())
        .offset(skip)
        .limit(limit)
    )
    result = await db.execute(query)

    return list(result.scalars().all()), total


async def get_owner_user_id(db: AsyncSession, application_id: int) -> int | None:
    """Return the user ID of the applicant who owns an application."""
    result = await db.execute(
        select(ApplicantProfile.user_id)
        .join(Application, Application.applicant_id == ApplicantProfile.id)
        .where(Application.id == application_id)
    )
    return result.scalar_one_or_none()


async def get_applicant_contacts(
    db: AsyncSession, application_ids: Sequence[int]
) -> list[ApplicantContact]:
    """Resolve the owning users of the given applications."""
    if not application_ids:
        return []

    result = await db.execute(
        select(
            Application.id,
            Application.application_number,
            User.id,
            User.email,
            User.full_name,
        )
        .join(ApplicantProfile, ApplicantProfile.id == Application.applicant_id)
        .join(User, User.id == ApplicantProfile.user_id)
        .where(Application.id.in_(list(application_ids)))
        .order_by(Application.id)
    )
    return [ApplicantContact(*row) for row in result.all()]


# ============================================
# Status history
# ============================================


def add_history(
    db: AsyncSession,
    *,
    application_id: int,
    previous_status: ApplicationStatus | None,
    new_status: ApplicationStatus,
    changed_by_user_id: int,
    notes: str | None,
    created_at: datetime,
) -> ApplicationStatusHistory:
    """Stage a history row in the current transaction (no flush, no commit)."""
    entry = ApplicationStatusHistory(
        application_id=application_id,
        previous_status=previous_status,
        new_status=new_status,
        changed_by_user_id=changed_by_user_id,
        notes=notes,
        created_at=created_at,
    )
    db.add(entry)
    return entry


async def get_history(db: AsyncSession, application_id: int) -> list[ApplicationStatusHistory]:
    """All history rows for an application, oldest first."""
    result = await db.execute(
        select(ApplicationStatusHistory)
        .where(ApplicationStatusHistory.application_id == application_id)
        .order_by(ApplicationStatusHistory.created_at.asc(), ApplicationStatusHistory.id.asc())
    )
    return list(result.scalars().all())


# ============================================
# Background job queries
# ============================================


async def get_unsubmitted_needing_reminder(
    db: AsyncSession, created_before: datetime
) -> list[ApplicantContact]:
    """
    Applications never submitted, still in INITIAL_REGISTRATION, created
    before the threshold and not yet reminded.
    """
    result = await db.execute(
        select(
            Application.id,
            Application.application_number,
            User.id,
            User.email,
            User.full_name,
        )
        .join(ApplicantProfile, ApplicantProfile.id == Application.applicant_id)
        .join(User, User.id == ApplicantProfile.user_id)
        .where(
            Application.submitted_at.is_(None),
            Application.status == ApplicationStatus.INITIAL_REGISTRATION,
            Application.reminder_sent_at.is_(None),
            Application.created_at < created_before,
        )
        .order_by(Application.id)
    )
    return [ApplicantContact(*row) for row in result.all()]


async def mark_reminder_sent(db: AsyncSession, application_id: int, sent_at: datetime) -> None:
    """Stamp reminder_sent_at so the reminder job skips the application."""
    await db.execute(
        update(Application).where(Application.id == application_id).values(reminder_sent_at=sent_at)
    )
    await db.commit()


async def get_existing_ids(db: AsyncSession, application_ids: Sequence[int]) -> set[int]:
    """Subset of the given IDs that belong to existing applications."""
    if not application_ids:
        return set()

    result = await db.execute(
        select(Application.id).where(Application.id.in_(list(application_ids)))
    )
    return set(result.scalars().all())
