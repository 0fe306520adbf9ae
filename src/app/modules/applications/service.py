"""
Applications Service Layer

Business logic for admission applications.

This module implements:
1. Application CRUD:
   - Create an application for the caller's applicant profile
   - List own applications, admin list with filters and pagination
   - Ownership checks for applicant access

2. Status Transition Engine:
   - transition_status: audited change of one application's status
   - bulk_transition_status: all-or-nothing change of many applications
   - get_status_history: the ordered transition log

3. Workflows built on the engine:
   - submit_application: records submitted_at and moves to DOCUMENT_UPLOAD
   - change_status_and_notify / bulk_change_status_and_notify: transition,
     then notify applicants in-app and by email (best effort)
   - get_status_overview: applicant-facing progress steps

Transition guarantees:
- The application row (or rows, in id order) is locked with SELECT ... FOR
  UPDATE before its current status is read, so the recorded previous_status
  can never be stale under concurrent transitions.
- The status write and the history insert share one commit; on failure the
  transaction is rolled back and PersistenceError is raised. No retry.
- Any status may follow any other, including the same status (a history row
  is still written).
"""

import logging
from collections.abc import Sequence
from datetime import datetime

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.email import send_application_submitted, send_status_changed
from app.modules.applicant_profiles import repository as profile_repository
from app.modules.applicant_profiles.models import SchoolLevel
from app.modules.applications import repository
from app.modules.applications.models import (
    Application,
    ApplicationStatus,
    ApplicationStatusHistory,
)
from app.modules.applications.repository import ApplicantContact
from app.modules.applications.schemas import ApplicationStatusOverview, StatusStep
from app.modules.notifications import repository as notification_repository
from app.modules.shared import (
    ConflictError,
    ForbiddenError,
    NotFoundError,
    PersistenceError,
    ValidationError,
    utcnow,
)

logger = logging.getLogger(__name__)

SUBMISSION_NOTE = "Application submitted"


# ============================================
# Errors
# ============================================


class ApplicationNotFoundError(NotFoundError):
    """Raised when an application is not found."""

    def __init__(self, application_id: int):
        super().__init__(
            message=f"Application with ID {application_id} not found",
            error_code="APPLICATION_NOT_FOUND",
        )
        self.application_id = application_id


class ApplicationsNotFoundError(NotFoundError):
    """Raised when some applications of a bulk request do not exist."""

    def __init__(self, expected: int, found: int):
        super().__init__(
            message=f"Some applications were not found. Expected {expected}, found {found}",
            error_code="APPLICATIONS_NOT_FOUND",
        )
        self.expected = expected
        self.found = found


class InvalidStatusError(ValidationError):
    """Raised when a status value is not one of the five lifecycle stages."""

    def __init__(self, value: object):
        allowed = ", ".join(s.value for s in ApplicationStatus)
        super().__init__(
            message=f"Invalid status '{value}'. Must be one of: {allowed}",
            error_code="INVALID_STATUS",
        )


class MissingActorError(ValidationError):
    """Raised when a transition is attempted without an acting user."""

    def __init__(self):
        super().__init__(
            message="changed_by_user_id is required for status changes",
            error_code="MISSING_ACTOR",
        )


class ApplicantNotFoundError(NotFoundError):
    """Raised when the caller has no applicant profile."""

    def __init__(self):
        super().__init__(message="Applicant not found", error_code="APPLICANT_NOT_FOUND")


class AlreadySubmittedError(ConflictError):
    """Raised when an application is submitted twice."""

    def __init__(self, application_id: int):
        super().__init__(
            message=f"Application with ID {application_id} has already been submitted",
            error_code="ALREADY_SUBMITTED",
        )


# ============================================
# Status Transition Engine
# ============================================


def _coerce_status(value: ApplicationStatus | str) -> ApplicationStatus:
    """Validate a status against the enum. Exact, case-sensitive match only."""
    if isinstance(value, ApplicationStatus):
        return value
    if isinstance(value, str):
        try:
            return ApplicationStatus(value)
        except ValueError:
            pass
    raise InvalidStatusError(value)


def _require_actor(changed_by_user_id: int | None) -> int:
    if changed_by_user_id is None:
        raise MissingActorError()
    return changed_by_user_id


def _apply_transition(
    db: AsyncSession,
    application: Application,
    new_status: ApplicationStatus,
    changed_by_user_id: int,
    notes: str | None,
    now: datetime,
) -> ApplicationStatusHistory:
    """
    Move a locked application to ``new_status`` and stage its history row.

    Must run inside the transaction that locked the application.
    """
    entry = repository.add_history(
        db,
        application_id=application.id,
        previous_status=application.status,
        new_status=new_status,
        changed_by_user_id=changed_by_user_id,
        notes=notes,
        created_at=now,
    )
    application.status = new_status
    application.updated_at = now
    return entry


async def _commit(db: AsyncSession, action: str) -> None:
    try:
        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Failed to commit {action}: {e}")
        raise PersistenceError(f"Failed to persist {action}.") from e


async def transition_status(
    db: AsyncSession,
    application_id: int,
    new_status: ApplicationStatus | str,
    changed_by_user_id: int | None,
    notes: str | None = None,
) -> Application:
    """
    Change an application's status and record the transition.

    Args:
        db: Database session
        application_id: ID of the application
        new_status: Target status (enum member or its exact wire value)
        changed_by_user_id: ID of the acting user (required)
        notes: Optional justification, stored as NULL when omitted

    Returns:
        The updated Application

    Raises:
        InvalidStatusError: If new_status is not a lifecycle stage
        MissingActorError: If changed_by_user_id is missing
        ApplicationNotFoundError: If the application does not exist
        PersistenceError: If the transaction could not be committed
    """
    status = _coerce_status(new_status)
    actor_id = _require_actor(changed_by_user_id)

    application = await repository.get_for_update(db, application_id)

    if application is None:
        await db.rollback()
        logger.warning(f"Status change for missing application {application_id}")
        raise ApplicationNotFoundError(application_id)

    previous_status = application.status
    _apply_transition(db, application, status, actor_id, notes, utcnow())
    await _commit(db, f"status change of application {application_id}")
    await db.refresh(application)

    logger.info(
        f"Application {application_id} status {previous_status.value} -> {status.value} "
        f"by user {actor_id}"
    )
    return application


async def bulk_transition_status(
    db: AsyncSession,
    application_ids: Sequence[int],
    new_status: ApplicationStatus | str,
    changed_by_user_id: int | None,
    notes: str | None = None,
) -> list[Application]:
    """
    Move several applications to the same status in one transaction.

    Every application keeps its own previous_status in its history row.
    Duplicate IDs are collapsed; results follow the first occurrence of
    each ID in ``application_ids``.

    Raises:
        InvalidStatusError: If new_status is not a lifecycle stage
        MissingActorError: If changed_by_user_id is missing
        ApplicationsNotFoundError: If any ID does not exist (nothing is changed)
        PersistenceError: If the transaction could not be committed
    """
    status = _coerce_status(new_status)
    actor_id = _require_actor(changed_by_user_id)

    if not application_ids:
        return []

    requested_ids = list(dict.fromkeys(application_ids))
    applications = await repository.get_many_for_update(db, requested_ids)

    if len(applications) != len(requested_ids):
        await db.rollback()
        logger.warning(
            f"Bulk status change rejected: expected {len(requested_ids)} applications, "
            f"found {len(applications)}"
        )
        raise ApplicationsNotFoundError(expected=len(requested_ids), found=len(applications))

    now = utcnow()
    for application in applications:
        _apply_transition(db, application, status, actor_id, notes, now)

    await _commit(db, f"bulk status change of {len(applications)} applications")

    by_id = {application.id: application for application in applications}
    for application in applications:
        await db.refresh(application)

    logger.info(
        f"Bulk status change to {status.value} by user {actor_id}: "
        f"{len(applications)} applications"
    )
    return [by_id[application_id] for application_id in requested_ids]


async def get_status_history(
    db: AsyncSession, application_id: int
) -> list[ApplicationStatusHistory]:
    """
    Return the application's transition log, oldest first.

    An unknown application yields an empty list.
    """
    return await repository.get_history(db, application_id)


def is_history_chain_consistent(
    history: Sequence[ApplicationStatusHistory],
    current_status: ApplicationStatus,
) -> bool:
    """
    Check that an oldest-first history replays to ``current_status``.

    Each row's new_status must equal the next row's previous_status, and the
    last new_status must equal the current status. An empty history is
    consistent.
    """
    if not history:
        return True

    for earlier, later in zip(history, history[1:]):
        if earlier.new_status != later.previous_status:
            return False

    return history[-1].new_status == current_status


# ============================================
# Application CRUD
# ============================================


async def create_application(db: AsyncSession, user_id: int) -> Application:
    """
    Create an application for the user's applicant profile.

    Raises:
        ApplicantNotFoundError: If the user has no profile yet
    """
    profile = await profile_repository.get_by_user_id(db, user_id)

    if not profile:
        logger.warning(f"Application creation without profile by user {user_id}")
        raise ApplicantNotFoundError()

    application = await repository.create(db, profile.id)
    logger.info(f"Created application {application.application_number} for user {user_id}")
    return application


async def list_applications_for_user(db: AsyncSession, user_id: int) -> list[Application]:
    """Applications owned by the user, newest first. Empty if no profile."""
    profile = await profile_repository.get_by_user_id(db, user_id)

    if not profile:
        return []

    return await repository.get_by_applicant(db, profile.id)


async def get_application(db: AsyncSession, application_id: int) -> Application:
    """Get an application or raise ApplicationNotFoundError."""
    application = await repository.get_by_id(db, application_id)

    if not application:
        raise ApplicationNotFoundError(application_id)

    return application


async def ensure_can_access(
    db: AsyncSession, application_id: int, user_id: int, is_staff: bool
) -> None:
    """
    Check the caller may read the application.

    Staff may read any application; applicants only their own.

    Raises:
        ApplicationNotFoundError: If the application does not exist
        ForbiddenError: If the applicant does not own it
    """
    owner_id = await repository.get_owner_user_id(db, application_id)

    if owner_id is None:
        raise ApplicationNotFoundError(application_id)

    if not is_staff and owner_id != user_id:
        logger.warning(f"User {user_id} denied access to application {application_id}")
        raise ForbiddenError()


async def get_application_for_user(
    db: AsyncSession, application_id: int, user_id: int, is_staff: bool
) -> Application:
    await ensure_can_access(db, application_id, user_id, is_staff)
    return await get_application(db, application_id)


async def admin_get_applications_list(
    db: AsyncSession,
    *,
    status: ApplicationStatus | None = None,
    school_level: SchoolLevel | None = None,
    page: int = 1,
    limit: int = 10,
) -> dict:
    """
    Get a page of applications for the admin dashboard.

    Returns:
        Dict with applications list, total count, page, and limit
    """
    page = max(1, page)
    limit = min(max(1, limit), 100)

    applications, total = await repository.get_applications_for_admin(
        db,
        status=status,
        school_level=school_level,
        skip=(page - 1) * limit,
        limit=limit,
    )

    logger.info(
        f"Admin application list: status={status}, school_level={school_level}, "
        f"page={page}, total={total}"
    )

    return {
        "applications": applications,
        "total": total,
        "page": page,
        "limit": limit,
    }


# ============================================
# Workflows
# ============================================


async def submit_application(db: AsyncSession, application_id: int, user_id: int) -> Application:
    """
    Formally submit an application.

    Records submitted_at and transitions to DOCUMENT_UPLOAD with the
    applicant as actor, in one transaction.

    Raises:
        ApplicationNotFoundError: If the application does not exist
        ForbiddenError: If the user does not own it
        AlreadySubmittedError: If it was submitted before
        PersistenceError: If the transaction could not be committed
    """
    await ensure_can_access(db, application_id, user_id, is_staff=False)

    application = await repository.get_for_update(db, application_id)

    if application is None:
        await db.rollback()
        raise ApplicationNotFoundError(application_id)

    if application.submitted_at is not None:
        await db.rollback()
        logger.warning(f"Duplicate submission of application {application_id}")
        raise AlreadySubmittedError(application_id)

    now = utcnow()
    application.submitted_at = now
    _apply_transition(
        db, application, ApplicationStatus.DOCUMENT_UPLOAD, user_id, SUBMISSION_NOTE, now
    )
    await _commit(db, f"submission of application {application_id}")
    await db.refresh(application)

    logger.info(f"Application {application_id} submitted by user {user_id}")

    contacts = await repository.get_applicant_contacts(db, [application_id])
    for contact in contacts:
        try:
            await send_application_submitted(
                to_email=contact.email,
                applicant_name=contact.full_name,
                application_number=contact.application_number,
            )
        except Exception as e:
            logger.error(f"Failed to send submission email for application {application_id}: {e}")

    return application


STATUS_LABELS: dict[ApplicationStatus, str] = {
    ApplicationStatus.INITIAL_REGISTRATION: "Initial Registration",
    ApplicationStatus.DOCUMENT_UPLOAD: "Document Upload",
    ApplicationStatus.SELECTION: "Selection",
    ApplicationStatus.ANNOUNCEMENT: "Announcement",
    ApplicationStatus.RE_REGISTRATION: "Re-registration",
}

STATUS_DESCRIPTIONS: dict[ApplicationStatus, str] = {
    ApplicationStatus.INITIAL_REGISTRATION: (
        "Your application has been created. Complete your details and submit it to continue."
    ),
    ApplicationStatus.DOCUMENT_UPLOAD: (
        "Your application has been submitted. Please upload the required documents."
    ),
    ApplicationStatus.SELECTION: (
        "Your documents are complete and the admission committee is reviewing your application."
    ),
    ApplicationStatus.ANNOUNCEMENT: (
        "Selection results have been announced. Check your notifications for the outcome."
    ),
    ApplicationStatus.RE_REGISTRATION: (
        "Please complete re-registration to confirm your place."
    ),
}


def _build_status_steps(
    application: Application, history: Sequence[ApplicationStatusHistory]
) -> list[StatusStep]:
    """
    Build the progress steps for an application.

    A stage is completed once the application is at or past it. Its
    completion time is the latest transition into that stage; the first
    stage falls back to the creation time.
    """
    reached_at: dict[ApplicationStatus, datetime] = {}
    for entry in history:
        reached_at[entry.new_status] = entry.created_at

    steps: list[StatusStep] = []
    for stage in ApplicationStatus:
        completed = application.status.position >= stage.position
        completed_at = reached_at.get(stage)
        if completed and completed_at is None and stage == ApplicationStatus.INITIAL_REGISTRATION:
            completed_at = application.created_at

        steps.append(
            StatusStep(
                status=stage,
                name=STATUS_LABELS[stage],
                completed=completed,
                current=stage == application.status,
                completed_at=completed_at if completed else None,
            )
        )

    return steps


async def get_status_overview(
    db: AsyncSession, application_id: int, user_id: int, is_staff: bool
) -> ApplicationStatusOverview:
    """Applicant-facing status summary with progress steps."""
    application = await get_application_for_user(db, application_id, user_id, is_staff)
    history = await repository.get_history(db, application_id)

    return ApplicationStatusOverview(
        id=application.id,
        application_number=application.application_number,
        status=application.status,
        status_label=STATUS_LABELS[application.status],
        status_description=STATUS_DESCRIPTIONS[application.status],
        submitted_at=application.submitted_at,
        steps=_build_status_steps(application, history),
    )


async def _notify_status_change(
    db: AsyncSession,
    applications: Sequence[Application],
    notes: str | None,
) -> None:
    """
    Tell applicants their application moved. Best effort.

    Runs after the transition committed; failures are logged and never
    undo the transition.
    """
    if not applications:
        return

    label = STATUS_LABELS[applications[0].status]
    contacts: list[ApplicantContact] = []

    try:
        contacts = await repository.get_applicant_contacts(db, [a.id for a in applications])
        await notification_repository.create_many(
            db,
            [
                {
                    "user_id": contact.user_id,
                    "title": "Application status updated",
                    "message": (
                        f"Your application {contact.application_number} is now in the "
                        f"'{label}' stage." + (f" Note: {notes}" if notes else "")
                    ),
                }
                for contact in contacts
            ],
        )
    except SQLAlchemyError as e:
        logger.error(f"Failed to create status notifications: {e}")
        await db.rollback()
        # Rollback expires the committed applications; reload them for the response
        for application in applications:
            await db.refresh(application)

    for contact in contacts:
        try:
            await send_status_changed(
                to_email=contact.email,
                applicant_name=contact.full_name,
                application_number=contact.application_number,
                status_label=label,
                notes=notes,
            )
        except Exception as e:
            logger.error(
                f"Failed to send status email for application {contact.application_id}: {e}"
            )


async def change_status_and_notify(
    db: AsyncSession,
    application_id: int,
    new_status: ApplicationStatus | str,
    changed_by_user_id: int | None,
    notes: str | None = None,
) -> Application:
    """Admin workflow: transition one application, then notify its applicant."""
    application = await transition_status(db, application_id, new_status, changed_by_user_id, notes)
    await _notify_status_change(db, [application], notes)
    return application


async def bulk_change_status_and_notify(
    db: AsyncSession,
    application_ids: Sequence[int],
    new_status: ApplicationStatus | str,
    changed_by_user_id: int | None,
    notes: str | None = None,
) -> list[Application]:
    """Admin workflow: bulk transition, then notify every affected applicant."""
    applications = await bulk_transition_status(
        db, application_ids, new_status, changed_by_user_id, notes
    )
    await _notify_status_change(db, applications, notes)
    return applications
