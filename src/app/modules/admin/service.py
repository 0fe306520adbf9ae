"""
Admin Service Layer

Dashboard statistics, the applicant-joined application listing, the CSV
report and staff account management.
"""

import csv
import io
import logging
from datetime import UTC, date, datetime

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.email import send_staff_account_created
from app.core.security import generate_temporary_password, hash_password
from app.modules.admin import repository
from app.modules.admin.repository import ApplicationWithApplicant
from app.modules.applicant_profiles.models import SchoolLevel
from app.modules.applications.models import ApplicationStatus
from app.modules.shared import ConflictError
from app.modules.users.models import STAFF_ROLES, User, UserRole
from app.modules.users.repository import UserRepository
from app.modules.users.schemas import UserResponse

logger = logging.getLogger(__name__)

REPORT_MAX_ROWS = 1000
REPORT_HEADERS = [
    "Application Number",
    "Student Name",
    "Email",
    "Status",
    "School Level",
    "Date of Birth",
    "Address",
    "Phone Number",
    "Parent Name",
    "Parent Phone",
    "Parent Email",
    "Submitted Date",
    "Created Date",
]
NOT_SUBMITTED = "Not Submitted"

ROLE_LABELS = {
    UserRole.ADMIN: "Administrator",
    UserRole.ADMISSION_COMMITTEE: "Admission Committee",
}


class EmailAlreadyRegisteredError(ConflictError):
    def __init__(self):
        super().__init__(
            message="A user with this email already exists.",
            error_code="EMAIL_ALREADY_REGISTERED",
        )


async def get_dashboard_stats(db: AsyncSession) -> dict:
    return await repository.get_dashboard_stats(db)


def _serialize_row(row: ApplicationWithApplicant) -> dict:
    application, profile, user = row
    return {
        "id": application.id,
        "application_number": application.application_number,
        "applicant_id": application.applicant_id,
        "status": application.status,
        "submitted_at": application.submitted_at,
        "created_at": application.created_at,
        "updated_at": application.updated_at,
        "applicant": {
            "id": profile.id,
            "user_id": profile.user_id,
            "date_of_birth": profile.date_of_birth,
            "address": profile.address,
            "phone_number": profile.phone_number,
            "parent_full_name": profile.parent_full_name,
            "parent_phone_number": profile.parent_phone_number,
            "parent_email": profile.parent_email,
            "school_level": profile.school_level,
            "created_at": profile.created_at,
            "updated_at": profile.updated_at,
            "user": UserResponse.model_validate(user),
        },
    }


async def get_applications_with_applicant(
    db: AsyncSession,
    *,
    status: ApplicationStatus | None = None,
    school_level: SchoolLevel | None = None,
    page: int = 1,
    limit: int = 20,
) -> dict:
    """
    Paginated applications with applicant profile and user details.

    Returns:
        Dict with applications, total, page, limit
    """
    skip = (page - 1) * limit
    rows, total = await repository.get_applications_with_applicant(
        db, status=status, school_level=school_level, skip=skip, limit=limit
    )

    return {
        "applications": [_serialize_row(row) for row in rows],
        "total": total,
        "page": page,
        "limit": limit,
    }


def _iso_date(value: date | datetime | None) -> str:
    if value is None:
        return NOT_SUBMITTED
    if isinstance(value, datetime):
        return value.date().isoformat()
    return value.isoformat()


def build_applications_csv(rows: list[ApplicationWithApplicant]) -> str:
    """Render report rows as CSV with every field quoted."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(REPORT_HEADERS)

    for application, profile, user in rows:
        writer.writerow(
            [
                application.application_number,
                user.full_name,
                user.email,
                application.status.value,
                profile.school_level.value,
                _iso_date(profile.date_of_birth),
                profile.address,
                profile.phone_number,
                profile.parent_full_name,
                profile.parent_phone_number,
                profile.parent_email,
                _iso_date(application.submitted_at),
                _iso_date(application.created_at),
            ]
        )

    return buffer.getvalue()


async def export_applications_report(
    db: AsyncSession,
    *,
    status: ApplicationStatus | None = None,
    school_level: SchoolLevel | None = None,
) -> tuple[str, bytes]:
    """
    Export matching applications (up to REPORT_MAX_ROWS) as CSV.

    Returns:
        Tuple of (filename, UTF-8 encoded CSV body)
    """
    rows, total = await repository.get_applications_with_applicant(
        db, status=status, school_level=school_level, skip=0, limit=REPORT_MAX_ROWS
    )

    if total > REPORT_MAX_ROWS:
        logger.warning(f"Applications report truncated to {REPORT_MAX_ROWS} of {total} rows")

    filename = f"applications_report_{datetime.now(UTC).date().isoformat()}.csv"
    logger.info(f"Exported {len(rows)} applications to {filename}")
    return filename, build_applications_csv(rows).encode("utf-8")


async def list_staff_users(db: AsyncSession) -> list[User]:
    return await UserRepository.list_by_roles(db, STAFF_ROLES)


async def create_staff_user(
    db: AsyncSession,
    *,
    email: str,
    full_name: str,
    role: UserRole,
    password: str | None = None,
    created_by: int,
) -> User:
    """
    Create an ADMIN or ADMISSION_COMMITTEE account.

    Without a password a temporary one is generated and emailed; the email
    is best effort and never undoes the account creation.

    Raises:
        EmailAlreadyRegisteredError: If the email is taken
    """
    if await UserRepository.email_exists(db, email):
        logger.warning(f"Staff account rejected, email already registered: {email}")
        raise EmailAlreadyRegisteredError()

    temporary_password = None if password else generate_temporary_password()

    try:
        user = await UserRepository.create(
            db,
            email=email,
            password_hash=hash_password(password or temporary_password),
            full_name=full_name,
            role=role,
        )
        await db.commit()
    except IntegrityError as e:
        await db.rollback()
        logger.warning(f"Staff account insert hit unique constraint for {email}")
        raise EmailAlreadyRegisteredError() from e

    logger.info(f"Staff account {user.id} ({role.value}) created by admin {created_by}")

    try:
        await send_staff_account_created(
            to_email=user.email,
            full_name=user.full_name,
            role_label=ROLE_LABELS[role],
            temporary_password=temporary_password,
        )
    except Exception as e:
        logger.error(f"Failed to send staff welcome email to {user.email}: {e}")

    return user
