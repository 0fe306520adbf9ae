"""
Applications Admin Router

API endpoints for admins and the admission committee.

Endpoints:
- GET   /admin/applications                - List applications with filters and pagination
- PATCH /admin/applications/{id}/status    - Change one application's status
- POST  /admin/applications/bulk-status    - Change many applications' status

Security:
- All endpoints require a valid JWT with the ADMIN or ADMISSION_COMMITTEE role
- The acting admin is recorded as changed_by_user_id on every transition
- Status changes are rate limited per admin
"""

import logging

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import CurrentUser, get_current_admin_user
from app.core.database import get_db
from app.core.rate_limit import RateLimitExceeded, check_rate_limit
from app.modules.applicant_profiles.models import SchoolLevel
from app.modules.applications import service
from app.modules.applications.models import ApplicationStatus
from app.modules.applications.schemas import (
    ApplicationListResponse,
    ApplicationResponse,
    BulkUpdateStatusRequest,
    UpdateStatusRequest,
)
from app.modules.shared import ServiceError, handle_service_error, internal_error

logger = logging.getLogger(__name__)

router = APIRouter()


# ============================================
# Rate Limiting Configuration
# ============================================

RATE_LIMIT_STATUS_CHANGE = (60, 60)  # 60 single changes per minute
RATE_LIMIT_BULK_STATUS_CHANGE = (10, 60)  # 10 bulk changes per minute


async def _check_admin_rate_limit(
    admin: CurrentUser,
    action: str,
    limit: int,
    window_seconds: int,
) -> None:
    """
    Check rate limit for an admin action.

    Raises:
        RateLimitExceeded: If rate limit is exceeded
    """
    key = f"admin:{action}:{admin.id}"
    allowed = await check_rate_limit(key, limit, window_seconds)

    if not allowed:
        logger.warning(
            f"Rate limit exceeded for admin {admin.id} on action '{action}': "
            f"{limit}/{window_seconds}s"
        )
        raise RateLimitExceeded(limit, window_seconds)


@router.get(
    "",
    response_model=ApplicationListResponse,
    summary="List Applications",
    description="""
Get a paginated list of applications, newest first.

**Filters:**
- `status`: Filter by application status
- `school_level`: Filter by the applicant's school level

**Pagination:**
- `page`: Page number, starting at 1. Default: 1
- `limit`: Page size (1-100). Default: 10
""",
    responses={
        401: {"description": "Unauthorized - invalid or missing token"},
        403: {"description": "Forbidden - not an admin"},
    },
)
async def list_applications(
    status: ApplicationStatus | None = Query(None, description="Filter by application status"),
    school_level: SchoolLevel | None = Query(None, description="Filter by school level"),
    page: int = Query(1, ge=1, description="Page number"),
    limit: int = Query(10, ge=1, le=100, description="Page size"),
    db: AsyncSession = Depends(get_db),
    admin: CurrentUser = Depends(get_current_admin_user),
) -> ApplicationListResponse:
    try:
        result = await service.admin_get_applications_list(
            db, status=status, school_level=school_level, page=page, limit=limit
        )

        logger.info(
            f"Admin {admin.id} listed applications: "
            f"total={result['total']}, returned={len(result['applications'])}"
        )

        return ApplicationListResponse(
            applications=[ApplicationResponse.model_validate(a) for a in result["applications"]],
            total=result["total"],
            page=result["page"],
            limit=result["limit"],
        )
    except ServiceError as e:
        handle_service_error(e)
    except Exception as e:
        logger.exception(f"Error listing applications: {e}")
        raise internal_error() from e


@router.patch(
    "/{application_id}/status",
    response_model=ApplicationResponse,
    summary="Update Application Status",
    description="""
Move an application to any lifecycle stage.

Every call appends one row to the application's status history, including
calls that re-assert the current status. The applicant is notified in-app
and by email.

`new_status` must be one of the five status values (exact, case-sensitive);
anything else returns 422 with error `INVALID_STATUS`.
""",
    responses={
        404: {"description": "Application not found"},
        422: {"description": "Invalid status"},
        429: {"description": "Rate limit exceeded"},
    },
)
async def update_status(
    application_id: int,
    data: UpdateStatusRequest,
    db: AsyncSession = Depends(get_db),
    admin: CurrentUser = Depends(get_current_admin_user),
) -> ApplicationResponse:
    await _check_admin_rate_limit(admin, "status_change", *RATE_LIMIT_STATUS_CHANGE)

    try:
        application = await service.change_status_and_notify(
            db, application_id, data.new_status, admin.id, data.notes
        )
        logger.info(f"Admin {admin.id} moved application {application_id} to {data.new_status}")
        return ApplicationResponse.model_validate(application)
    except ServiceError as e:
        handle_service_error(e)
    except Exception as e:
        logger.exception(f"Error updating status of application {application_id}: {e}")
        raise internal_error() from e


@router.post(
    "/bulk-status",
    response_model=list[ApplicationResponse],
    summary="Bulk Update Application Status",
    description="""
Move several applications to the same stage in one all-or-nothing operation.

- Each application's own previous status is recorded in its history row.
- If any id does not exist, nothing is changed and 404 reports the
  expected and found counts.
- Duplicate ids are collapsed: each application is moved and logged once,
  and the expected count is the number of distinct ids.
- Results follow the order in which ids first appear in `application_ids`.
- An empty `application_ids` list returns an empty list.
- `new_status` must be one of the five status values (exact, case-sensitive).
""",
    responses={
        404: {"description": "Some applications were not found"},
        422: {"description": "Invalid status"},
        429: {"description": "Rate limit exceeded"},
    },
)
async def bulk_update_status(
    data: BulkUpdateStatusRequest,
    db: AsyncSession = Depends(get_db),
    admin: CurrentUser = Depends(get_current_admin_user),
) -> list[ApplicationResponse]:
    await _check_admin_rate_limit(admin, "bulk_status_change", *RATE_LIMIT_BULK_STATUS_CHANGE)

    try:
        applications = await service.bulk_change_status_and_notify(
            db, data.application_ids, data.new_status, admin.id, data.notes
        )
        logger.info(
            f"Admin {admin.id} bulk moved {len(applications)} applications to {data.new_status}"
        )
        return [ApplicationResponse.model_validate(a) for a in applications]
    except ServiceError as e:
        handle_service_error(e)
    except Exception as e:
        logger.exception(f"Error in bulk status update: {e}")
        raise internal_error() from e
