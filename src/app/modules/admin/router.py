"""
Admin Router

Endpoints:
- GET  /admin/dashboard                - Dashboard statistics
- GET  /admin/applicants               - Applications joined with applicant info
- GET  /admin/reports/applications.csv - CSV export of applications
- GET  /admin/users                    - List staff accounts
- POST /admin/users                    - Create a staff account

All endpoints require the ADMIN or ADMISSION_COMMITTEE role.
"""

import logging

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import CurrentUser, get_current_admin_user
from app.core.database import get_db
from app.core.rate_limit import RateLimitExceeded, check_rate_limit
from app.modules.admin import service
from app.modules.admin.schemas import (
    ApplicationsWithApplicantResponse,
    CreateStaffUserRequest,
    DashboardStatsResponse,
)
from app.modules.applicant_profiles.models import SchoolLevel
from app.modules.applications.models import ApplicationStatus
from app.modules.shared import ServiceError, handle_service_error, internal_error
from app.modules.users.schemas import UserResponse

logger = logging.getLogger(__name__)

router = APIRouter()

RATE_LIMIT_CREATE_STAFF = (10, 3600)
RATE_LIMIT_EXPORT = (20, 3600)


async def _enforce_rate_limit(admin: CurrentUser, action: str, limit: int, window: int) -> None:
    if not await check_rate_limit(f"admin:{action}:{admin.id}", limit, window):
        logger.warning(f"Rate limit exceeded for admin {admin.id} on action '{action}'")
        raise RateLimitExceeded(limit, window)


@router.get(
    "/dashboard",
    response_model=DashboardStatsResponse,
    summary="Dashboard Statistics",
    description="Totals by status and school level plus the 10 most recent applications.",
)
async def get_dashboard(
    db: AsyncSession = Depends(get_db),
    admin: CurrentUser = Depends(get_current_admin_user),
) -> DashboardStatsResponse:
    try:
        stats = await service.get_dashboard_stats(db)
        return DashboardStatsResponse.model_validate(stats, from_attributes=True)
    except ServiceError as e:
        handle_service_error(e)
    except Exception as e:
        logger.exception(f"Error loading dashboard stats for admin {admin.id}: {e}")
        raise internal_error() from e


@router.get(
    "/applicants",
    response_model=ApplicationsWithApplicantResponse,
    summary="Applications With Applicant Info",
)
async def list_applications_with_applicant(
    status_filter: ApplicationStatus | None = Query(None, alias="status"),
    school_level: SchoolLevel | None = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
    admin: CurrentUser = Depends(get_current_admin_user),
) -> ApplicationsWithApplicantResponse:
    try:
        result = await service.get_applications_with_applicant(
            db, status=status_filter, school_level=school_level, page=page, limit=limit
        )
        return ApplicationsWithApplicantResponse.model_validate(result)
    except ServiceError as e:
        handle_service_error(e)
    except Exception as e:
        logger.exception(f"Error listing applicants for admin {admin.id}: {e}")
        raise internal_error() from e


@router.get(
    "/reports/applications.csv",
    summary="Export Applications Report",
    response_class=Response,
    responses={200: {"content": {"text/csv": {}}}},
)
async def export_applications_report(
    status_filter: ApplicationStatus | None = Query(None, alias="status"),
    school_level: SchoolLevel | None = Query(None),
    db: AsyncSession = Depends(get_db),
    admin: CurrentUser = Depends(get_current_admin_user),
) -> Response:
    await _enforce_rate_limit(admin, "export_report", *RATE_LIMIT_EXPORT)

    try:
        filename, content = await service.export_applications_report(
            db, status=status_filter, school_level=school_level
        )
        return Response(
            content=content,
            media_type="text/csv",
            headers={"Content-Disposition": f'attachment; filename="{filename}"'},
        )
    except ServiceError as e:
        handle_service_error(e)
    except Exception as e:
        logger.exception(f"Error exporting applications report for admin {admin.id}: {e}")
        raise internal_error() from e


@router.get("/users", response_model=list[UserResponse], summary="List Staff Accounts")
async def list_staff_users(
    db: AsyncSession = Depends(get_db),
    admin: CurrentUser = Depends(get_current_admin_user),
) -> list[UserResponse]:
    users = await service.list_staff_users(db)
    return [UserResponse.model_validate(u) for u in users]


@router.post(
    "/users",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create Staff Account",
    responses={
        409: {"description": "Email already registered"},
        429: {"description": "Rate limit exceeded"},
    },
)
async def create_staff_user(
    data: CreateStaffUserRequest,
    db: AsyncSession = Depends(get_db),
    admin: CurrentUser = Depends(get_current_admin_user),
) -> UserResponse:
    await _enforce_rate_limit(admin, "create_staff", *RATE_LIMIT_CREATE_STAFF)

    try:
        user = await service.create_staff_user(
            db,
            email=data.email,
            full_name=data.full_name,
            role=data.role,
            password=data.password,
            created_by=admin.id,
        )
        return UserResponse.model_validate(user)
    except ServiceError as e:
        handle_service_error(e)
    except Exception as e:
        logger.exception(f"Error creating staff account by admin {admin.id}: {e}")
        raise internal_error() from e
