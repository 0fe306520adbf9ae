"""
Admin Repository

Read-side queries that span applications, applicant profiles and users.
"""

from typing import NamedTuple

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.applicant_profiles.models import ApplicantProfile, SchoolLevel
from app.modules.applications.models import Application, ApplicationStatus
from app.modules.users.models import User

RECENT_APPLICATIONS_LIMIT = 10


class ApplicationWithApplicant(NamedTuple):
    application: Application
    profile: ApplicantProfile
    user: User


async def get_dashboard_stats(db: AsyncSession) -> dict:
    """
    Aggregate counts for the admin dashboard.

    Returns:
        Dict with:
        - total_applications: int
        - applications_by_status: dict[str, int] - only statuses with rows
        - applications_by_school_level: dict[str, int] - via applicant profile
        - recent_applications: list[Application] - newest first
    """
    total_result = await db.execute(select(func.count()).select_from(Application))
    total = total_result.scalar_one()

    status_result = await db.execute(
        select(Application.status, func.count()).group_by(Application.status)
    )
    by_status = {status.value: count for status, count in status_result.all()}

    level_result = await db.execute(
        select(ApplicantProfile.school_level, func.count())
        .select_from(Application)
        .join(ApplicantProfile, ApplicantProfile.id == Application.applicant_id)
        .group_by(ApplicantProfile.school_level)
    )
    by_level = {level.value: count for level, count in level_result.all()}

    recent_result = await db.execute(
        select(Application)
        .order_by(Application.created_at.desc(), Application.id.desc())
        .limit(RECENT_APPLICATIONS_LIMIT)
    )

    return {
        "total_applications": total,
        "applications_by_status": by_status,
        "applications_by_school_level": by_level,
        "recent_applications": list(recent_result.scalars().all()),
    }


async def get_applications_with_applicant(
    db: AsyncSession,
    *,
    status: ApplicationStatus | None = None,
    school_level: SchoolLevel | None = None,
    skip: int = 0,
    limit: int = 20,
) -> tuple[list[ApplicationWithApplicant], int]:
    """
    Applications joined with their applicant profile and user, newest first.

    Returns:
        Tuple of (rows for the requested page, total count matching filters)
    """
    query = (
        select(Application, ApplicantProfile, User)
        .join(ApplicantProfile, ApplicantProfile.id == Application.applicant_id)
        .join(User, User.id == ApplicantProfile.user_id)
    )

    if status:
        query = query.where(Application.status == status)

    if school_level:
        query = query.where(ApplicantProfile.school_level == school_level)

    count_query = select(func.count()).select_from(query.subquery())
    total = (await db.execute(count_query)).scalar_one()

    result = await db.execute(
        query.order_by(Application.created_at.desc(), Application.id.desc())
        .offset(skip)
        .limit(limit)
    )
    rows = [ApplicationWithApplicant(*row) for row in result.all()]

    return rows, total
