"""
Applicant Profile Schemas
"""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from app.modules.applicant_profiles.models import SchoolLevel


class ApplicantProfileCreate(BaseModel):
    """Request body for POST /profile."""

    date_of_birth: date
    address: str = Field(..., min_length=1, max_length=1000)
    phone_number: str = Field(..., min_length=1, max_length=30)
    parent_full_name: str = Field(..., min_length=1, max_length=200)
    parent_phone_number: str = Field(..., min_length=1, max_length=30)
    parent_email: EmailStr
    school_level: SchoolLevel

    @field_validator("date_of_birth")
    @classmethod
    def date_of_birth_in_past(cls, value: date) -> date:
        if value >= date.today():
            raise ValueError("date_of_birth must be in the past")
        return value


class ApplicantProfileUpdate(BaseModel):
    """Request body for PATCH /profile. Only provided fields are changed."""

    date_of_birth: date | None = None
    address: str | None = Field(None, min_length=1, max_length=1000)
    phone_number: str | None = Field(None, min_length=1, max_length=30)
    parent_full_name: str | None = Field(None, min_length=1, max_length=200)
    parent_phone_number: str | None = Field(None, min_length=1, max_length=30)
    parent_email: EmailStr | None = None
    school_level: SchoolLevel | None = None


class ApplicantProfileResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    date_of_birth: date
    address: str
    phone_number: str
    parent_full_name: str
    parent_phone_number: str
    parent_email: str
    school_level: SchoolLevel
    created_at: datetime
    updated_at: datetime
