"""
Applicant Profile Repository

Database operations for applicant profiles.
"""

from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from .models import ApplicantProfile
from .schemas import ApplicantProfileCreate


async def create(db: AsyncSession, user_id: int, data: ApplicantProfileCreate) -> ApplicantProfile:
    """Create a profile for a user."""
    profile = ApplicantProfile(user_id=user_id, **data.model_dump())

    db.add(profile)
    await db.commit()
    await db.refresh(profile)

    return profile


async def get_by_id(db: AsyncSession, profile_id: int) -> ApplicantProfile | None:
    """Get profile by ID."""
    return await db.get(ApplicantProfile, profile_id)


async def get_by_user_id(db: AsyncSession, user_id: int) -> ApplicantProfile | None:
    """Get the profile owned by a user."""
    result = await db.execute(select(ApplicantProfile).where(ApplicantProfile.user_id == user_id))
    return result.scalar_one_or_none()


async def update(
    db: AsyncSession, profile: ApplicantProfile, fields: dict[str, Any]
) -> ApplicantProfile:
    """Apply the given field changes to a profile."""
    for key, value in fields.items():
        setattr(profile, key, value)

    await db.commit()
    await db.refresh(profile)

    return profile
