"""
Applicant Profile Service Layer

One profile per applicant: creating a second one is a conflict, reading or
updating a missing one is a not-found error.
"""

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.applicant_profiles import repository
from app.modules.applicant_profiles.models import ApplicantProfile
from app.modules.applicant_profiles.schemas import ApplicantProfileCreate, ApplicantProfileUpdate
from app.modules.shared import ConflictError, NotFoundError

logger = logging.getLogger(__name__)


class ProfileNotFoundError(NotFoundError):
    """Raised when the user has no applicant profile yet."""

    def __init__(self, user_id: int):
        super().__init__(
            message=f"Applicant profile for user {user_id} not found",
            error_code="PROFILE_NOT_FOUND",
        )


class ProfileAlreadyExistsError(ConflictError):
    """Raised when the user already has a profile."""

    def __init__(self):
        super().__init__(
            message="An applicant profile already exists for this user.",
            error_code="PROFILE_ALREADY_EXISTS",
        )


async def create_profile(
    db: AsyncSession, user_id: int, data: ApplicantProfileCreate
) -> ApplicantProfile:
    """
    Create the applicant profile for a user.

    Raises:
        ProfileAlreadyExistsError: If the user already has one
    """
    if await repository.get_by_user_id(db, user_id):
        logger.warning(f"Duplicate profile creation attempt for user {user_id}")
        raise ProfileAlreadyExistsError()

    try:
        profile = await repository.create(db, user_id, data)
    except IntegrityError as e:
        # Concurrent create for the same user lost the unique race
        await db.rollback()
        raise ProfileAlreadyExistsError() from e

    logger.info(f"Created applicant profile {profile.id} for user {user_id}")
    return profile


async def get_profile(db: AsyncSession, user_id: int) -> ApplicantProfile:
    """Get the user's profile or raise ProfileNotFoundError."""
    profile = await repository.get_by_user_id(db, user_id)

    if not profile:
        raise ProfileNotFoundError(user_id)

    return profile


async def update_profile(
    db: AsyncSession, user_id: int, data: ApplicantProfileUpdate
) -> ApplicantProfile:
    """Apply a partial update to the user's profile."""
    profile = await get_profile(db, user_id)

    fields = data.model_dump(exclude_unset=True, exclude_none=True)
    if not fields:
        return profile

    profile = await repository.update(db, profile, fields)
    logger.info(f"Updated applicant profile {profile.id}: {sorted(fields)}")
    return profile
