"""
Applications Router

Endpoints for applicants (and read access for staff):
- POST /applications                - Create an application
- GET  /applications                - List my applications
- GET  /applications/{id}           - Get an application
- POST /applications/{id}/submit    - Submit an application
- GET  /applications/{id}/status    - Status overview with progress steps
- GET  /applications/{id}/history   - Status transition history

Applicants may only access their own applications; staff may read any.
"""

import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import CurrentUser, get_current_applicant, get_current_user
from app.core.database import get_db
from app.modules.applications import service
from app.modules.applications.schemas import (
    ApplicationResponse,
    ApplicationStatusOverview,
    StatusHistoryResponse,
)
from app.modules.shared import ServiceError, handle_service_error, internal_error

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "",
    response_model=ApplicationResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create Application",
    description="""
Create a new application for the caller's applicant profile.

The application starts in `INITIAL_REGISTRATION` with no status history.
""",
    responses={404: {"description": "Applicant profile not created yet"}},
)
async def create_application(
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(get_current_applicant),
) -> ApplicationResponse:
    try:
        application = await service.create_application(db, user.id)
        return ApplicationResponse.model_validate(application)
    except ServiceError as e:
        handle_service_error(e)
    except Exception as e:
        logger.exception(f"Error creating application for user {user.id}: {e}")
        raise internal_error() from e


@router.get("", response_model=list[ApplicationResponse], summary="List My Applications")
async def list_my_applications(
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(get_current_applicant),
) -> list[ApplicationResponse]:
    applications = await service.list_applications_for_user(db, user.id)
    return [ApplicationResponse.model_validate(a) for a in applications]


@router.get(
    "/{application_id}",
    response_model=ApplicationResponse,
    summary="Get Application",
    responses={403: {"description": "Not your application"}, 404: {"description": "Not found"}},
)
async def get_application(
    application_id: int,
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
) -> ApplicationResponse:
    try:
        application = await service.get_application_for_user(
            db, application_id, user.id, user.is_staff
        )
        return ApplicationResponse.model_validate(application)
    except ServiceError as e:
        handle_service_error(e)
    except Exception as e:
        logger.exception(f"Error loading application {application_id}: {e}")
        raise internal_error() from e


@router.post(
    "/{application_id}/submit",
    response_model=ApplicationResponse,
    summary="Submit Application",
    description="""
Formally submit an application.

Sets `submitted_at` and moves the application to `DOCUMENT_UPLOAD`,
recording the change in the status history. An application can only be
submitted once.
""",
    responses={
        403: {"description": "Not your application"},
        404: {"description": "Application not found"},
        409: {"description": "Already submitted"},
    },
)
async def submit_application(
    application_id: int,
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(get_current_applicant),
) -> ApplicationResponse:
    try:
        application = await service.submit_application(db, application_id, user.id)
        return ApplicationResponse.model_validate(application)
    except ServiceError as e:
        handle_service_error(e)
    except Exception as e:
        logger.exception(f"Error submitting application {application_id}: {e}")
        raise internal_error() from e


@router.get(
    "/{application_id}/status",
    response_model=ApplicationStatusOverview,
    summary="Application Status Overview",
)
async def get_status_overview(
    application_id: int,
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
) -> ApplicationStatusOverview:
    try:
        return await service.get_status_overview(db, application_id, user.id, user.is_staff)
    except ServiceError as e:
        handle_service_error(e)
    except Exception as e:
        logger.exception(f"Error building status overview for {application_id}: {e}")
        raise internal_error() from e


@router.get(
    "/{application_id}/history",
    response_model=list[StatusHistoryResponse],
    summary="Status History",
    description="""
All status transitions of an application, oldest first.

For staff an unknown application id returns an empty list.
""",
)
async def get_status_history(
    application_id: int,
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
) -> list[StatusHistoryResponse]:
    try:
        if not user.is_staff:
            await service.ensure_can_access(db, application_id, user.id, is_staff=False)

        history = await service.get_status_history(db, application_id)
        return [StatusHistoryResponse.model_validate(entry) for entry in history]
    except ServiceError as e:
        handle_service_error(e)
    except Exception as e:
        logger.exception(f"Error loading history for application {application_id}: {e}")
        raise internal_error() from e
