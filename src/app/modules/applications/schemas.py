"""
Applications Schemas

Pydantic schemas for request validation and response serialization.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from app.modules.applications.models import ApplicationStatus


class ApplicationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    application_number: str
    applicant_id: int
    status: ApplicationStatus
    submitted_at: datetime | None
    created_at: datetime
    updated_at: datetime


class ApplicationListResponse(BaseModel):
    """Paginated application list for admins."""

    applications: list[ApplicationResponse]
    total: int = Field(..., description="Total number of matching applications")
    page: int
    limit: int


class StatusHistoryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    application_id: int
    previous_status: ApplicationStatus | None
    new_status: ApplicationStatus
    changed_by_user_id: int
    notes: str | None
    created_at: datetime


class UpdateStatusRequest(BaseModel):
    """
    Request body for PATCH /admin/applications/{id}/status.

    ``new_status`` is a plain string checked by the transition service, so an
    unknown value is reported as INVALID_STATUS.
    """

    new_status: str = Field(..., min_length=1, max_length=50)
    notes: str | None = Field(
        None, max_length=2000, description="Optional reason shown to the applicant"
    )


class BulkUpdateStatusRequest(BaseModel):
    """
    Request body for POST /admin/applications/bulk-status.

    ``new_status`` is accepted as a plain string and validated by the
    transition service, so an unknown value is reported as INVALID_STATUS.
    """

    application_ids: list[int] = Field(..., max_length=500)
    new_status: str = Field(..., min_length=1, max_length=50)
    notes: str | None = Field(None, max_length=2000)


class StatusStep(BaseModel):
    """One stage in the applicant-facing progress tracker."""

    status: ApplicationStatus
    name: str
    completed: bool
    current: bool
    completed_at: datetime | None = None


class ApplicationStatusOverview(BaseModel):
    """User-friendly view of where an application stands."""

    id: int
    application_number: str
    status: ApplicationStatus
    status_label: str
    status_description: str
    submitted_at: datetime | None
    steps: list[StatusStep]

