"""
Scholarship Schemas

Pydantic schemas for request validation and response serialization.
"""

from datetime import date, datetime
from uuid import UUID

from pydantic import EmailStr, Field, model_validator

from scholarstream.modules.shared import CamelSchema


class ScholarshipBase(CamelSchema):
    scholarship_name: str = Field(..., min_length=1, max_length=200)
    university_name: str = Field(..., min_length=1, max_length=200)
    university_image: str | None = Field(None, max_length=1000)
    university_country: str = Field(..., min_length=1, max_length=100)
    university_city: str = Field(..., min_length=1, max_length=100)
    university_world_rank: int | None = Field(None, ge=1)
    subject_category: str = Field(..., min_length=1, max_length=100)
    scholarship_category: str = Field(..., min_length=1, max_length=100)
    degree: str = Field(..., min_length=1, max_length=50)
    tuition_fees: float = Field(0, ge=0)
    application_fees: float = Field(..., ge=0)
    service_charge: float = Field(..., ge=0)
    application_deadline: date
    scholarship_post_date: date


class ScholarshipCreate(ScholarshipBase):
    """
    Request body for POST /scholarships and PUT /scholarships/{id}.

    ``userEmail`` is accepted as an alias of ``ownerEmail``; when neither is
    given the creating admin's email is used.
    """

    owner_email: EmailStr | None = Field(None, validation_alias="userEmail")

    @model_validator(mode="before")
    @classmethod
    def accept_owner_alias(cls, data):
        if isinstance(data, dict) and "ownerEmail" in data and "userEmail" not in data:
            data = {**data, "userEmail": data["ownerEmail"]}
        return data

    @model_validator(mode="after")
    def validate_dates(self) -> "ScholarshipCreate":
        if self.application_deadline < self.scholarship_post_date:
            raise ValueError("applicationDeadline cannot be earlier than scholarshipPostDate")
        return self


CLEARABLE_FIELDS = frozenset({"university_image", "university_world_rank"})


class ScholarshipUpdate(CamelSchema):
    """Partial update; only supplied fields are changed."""

    scholarship_name: str | None = Field(None, min_length=1, max_length=200)
    university_name: str | None = Field(None, min_length=1, max_length=200)
    university_image: str | None = Field(None, max_length=1000)
    university_country: str | None = Field(None, min_length=1, max_length=100)
    university_city: str | None = Field(None, min_length=1, max_length=100)
    university_world_rank: int | None = Field(None, ge=1)
    subject_category: str | None = Field(None, min_length=1, max_length=100)
    scholarship_category: str | None = Field(None, min_length=1, max_length=100)
    degree: str | None = Field(None, min_length=1, max_length=50)
    tuition_fees: float | None = Field(None, ge=0)
    application_fees: float | None = Field(None, ge=0)
    service_charge: float | None = Field(None, ge=0)
    application_deadline: date | None = None
    scholarship_post_date: date | None = None

    @model_validator(mode="after")
    def reject_cleared_required_fields(self) -> "ScholarshipUpdate":
        cleared = sorted(
            name
            for name in self.model_fields_set - CLEARABLE_FIELDS
            if getattr(self, name) is None
        )
        if cleared:
            raise ValueError(f"Fields cannot be null: {', '.join(cleared)}")
        return self


class ScholarshipResponse(ScholarshipBase):
    id: UUID
    owner_email: str
    created_at: datetime
    updated_at: datetime


class ScholarshipListResponse(CamelSchema):
    items: list[ScholarshipResponse]
    total: int
    page: int | None = None
    limit: int | None = None


class ScholarshipWriteResponse(CamelSchema):
    success: bool = True
    inserted_id: UUID | None = None
    scholarship: ScholarshipResponse | None = None
