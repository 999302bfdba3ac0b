"""
Application Schemas

Pydantic schemas for request validation and response serialization.
Field names are camelCase on the wire.
"""

from datetime import datetime
from uuid import UUID

from pydantic import EmailStr, Field, field_validator

from scholarstream.modules.applications.models import ApplicationStatus, PaymentStatus
from scholarstream.modules.shared import CamelSchema


class ApplicationCreate(CamelSchema):
    """
    Request body for POST /applications.

    Scholarship details are copied from the scholarship record; the client
    only names the scholarship, the student and the payment state.
    """

    scholarship_id: UUID
    student_email: EmailStr
    payment_status: PaymentStatus = PaymentStatus.UNPAID

    @field_validator("student_email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.strip().lower()


class ApplicationStatusUpdate(CamelSchema):
    """Request body for PATCH /applications/{id} (Moderator/Admin)."""

    status: ApplicationStatus
    feedback: str | None = Field(None, max_length=2000)


class FeedbackUpdate(CamelSchema):
    feedback: str = Field(..., max_length=2000)


class ApplicationResponse(CamelSchema):
    id: UUID
    scholarship_id: UUID
    user_id: UUID | None = None
    student_email: str
    student_name: str | None = None
    scholarship_name: str | None = None
    university_name: str
    scholarship_category: str
    degree: str
    application_fees: float
    service_charge: float
    application_status: ApplicationStatus
    payment_status: PaymentStatus
    application_feedback: str | None = None
    application_date: datetime
    paid_at: datetime | None = None
    updated_at: datetime


class ApplicationSummary(CamelSchema):
    """Projected fields for the moderator listing."""

    id: UUID
    scholarship_id: UUID
    scholarship_name: str | None = None
    university_name: str
    student_email: str
    student_name: str | None = None
    application_fees: float
    application_status: ApplicationStatus
    payment_status: PaymentStatus
    application_feedback: str | None = None
    application_date: datetime


class ApplicationListResponse(CamelSchema):
    items: list[ApplicationSummary]
    total: int
    skip: int
    limit: int


class ApplicationWriteResponse(CamelSchema):
    success: bool = True
    inserted_id: UUID | None = None
    application: ApplicationResponse | None = None


class ApplicationCheckResponse(CamelSchema):
    applied: bool
