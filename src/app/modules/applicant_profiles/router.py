"""
Applicant Profile Router

Endpoints for the calling applicant's own profile:
- POST  /profile - Create profile
- GET   /profile - Get profile
- PATCH /profile - Update profile
"""

import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import CurrentUser, get_current_applicant
from app.core.database import get_db
from app.modules.applicant_profiles import service
from app.modules.applicant_profiles.schemas import (
    ApplicantProfileCreate,
    ApplicantProfileResponse,
    ApplicantProfileUpdate,
)
from app.modules.shared import ServiceError, handle_service_error, internal_error

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "",
    response_model=ApplicantProfileResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create Applicant Profile",
    responses={409: {"description": "Profile already exists"}},
)
async def create_profile(
    data: ApplicantProfileCreate,
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(get_current_applicant),
) -> ApplicantProfileResponse:
    try:
        profile = await service.create_profile(db, user.id, data)
        return ApplicantProfileResponse.model_validate(profile)
    except ServiceError as e:
        handle_service_error(e)
    except Exception as e:
        logger.exception(f"Error creating profile for user {user.id}: {e}")
        raise internal_error() from e


@router.get(
    "",
    response_model=ApplicantProfileResponse,
    summary="Get My Profile",
    responses={404: {"description": "Profile not created yet"}},
)
async def get_profile(
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(get_current_applicant),
) -> ApplicantProfileResponse:
    try:
        profile = await service.get_profile(db, user.id)
        return ApplicantProfileResponse.model_validate(profile)
    except ServiceError as e:
        handle_service_error(e)
    except Exception as e:
        logger.exception(f"Error loading profile for user {user.id}: {e}")
        raise internal_error() from e


@router.patch(
    "",
    response_model=ApplicantProfileResponse,
    summary="Update My Profile",
    responses={404: {"description": "Profile not created yet"}},
)
async def update_profile(
    data: ApplicantProfileUpdate,
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(get_current_applicant),
) -> ApplicantProfileResponse:
    try:
        profile = await service.update_profile(db, user.id, data)
        return ApplicantProfileResponse.model_validate(profile)
    except ServiceError as e:
        handle_service_error(e)
    except Exception as e:
        logger.exception(f"Error updating profile for user {user.id}: {e}")
        raise internal_error() from e
