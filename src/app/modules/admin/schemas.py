"""
Admin Schemas
"""

from pydantic import BaseModel, EmailStr, Field, field_validator

from app.modules.applicant_profiles.schemas import ApplicantProfileResponse
from app.modules.applications.schemas import ApplicationResponse
from app.modules.users.models import STAFF_ROLES, UserRole
from app.modules.users.schemas import UserResponse


class DashboardStatsResponse(BaseModel):
    total_applications: int
    applications_by_status: dict[str, int]
    applications_by_school_level: dict[str, int]
    recent_applications: list[ApplicationResponse]


class ApplicantWithUser(ApplicantProfileResponse):
    user: UserResponse


class ApplicationWithApplicantResponse(ApplicationResponse):
    applicant: ApplicantWithUser


class ApplicationsWithApplicantResponse(BaseModel):
    applications: list[ApplicationWithApplicantResponse]
    total: int
    page: int
    limit: int


class CreateStaffUserRequest(BaseModel):
    """
    Request body for POST /admin/users.

    When ``password`` is omitted a temporary password is generated and
    emailed to the new user.
    """

    email: EmailStr
    full_name: str = Field(..., min_length=1, max_length=255)
    role: UserRole
    password: str | None = Field(None, min_length=8, max_length=128)

    @field_validator("role")
    @classmethod
    def role_must_be_staff(cls, v: UserRole) -> UserRole:
        if v not in STAFF_ROLES:
            raise ValueError("Role must be ADMIN or ADMISSION_COMMITTEE")
        return v
