"""
Academic Record Schemas
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

MAX_BULK_RECORDS = 200


class AcademicRecordFields(BaseModel):
    subject: str = Field(..., min_length=1, max_length=100)
    grade: str = Field(..., min_length=1, max_length=20)
    semester: str = Field(..., min_length=1, max_length=50)
    academic_year: str = Field(..., min_length=1, max_length=20, examples=["2024/2025"])


class AcademicRecordCreate(AcademicRecordFields):
    """Request body for POST /applications/{id}/academic-records."""


class BulkAcademicRecordItem(AcademicRecordFields):
    application_id: int


class BulkAcademicRecordCreate(BaseModel):
    records: list[BulkAcademicRecordItem] = Field(..., min_length=1, max_length=MAX_BULK_RECORDS)


class AcademicRecordUpdate(BaseModel):
    """Partial update; omitted fields keep their value."""

    subject: str | None = Field(None, min_length=1, max_length=100)
    grade: str | None = Field(None, min_length=1, max_length=20)
    semester: str | None = Field(None, min_length=1, max_length=50)
    academic_year: str | None = Field(None, min_length=1, max_length=20)


class AcademicRecordResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    application_id: int
    subject: str
    grade: str
    semester: str
    academic_year: str
    created_at: datetime
    updated_at: datetime
