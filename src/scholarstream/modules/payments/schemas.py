"""Payment schemas."""

from uuid import UUID

from pydantic import EmailStr, Field

from scholarstream.modules.applications.models import ApplicationStatus, PaymentStatus
from scholarstream.modules.shared import CamelSchema


class CheckoutSessionRequest(CamelSchema):
    """
    Request body for POST /create-checkout-session.

    ``scholarshipId`` and ``studentEmail`` are optional; when sent they must
    match the application.
    """

    application_id: UUID
    amount: float
    scholarship_id: UUID | None = None
    student_email: EmailStr | None = None


class CheckoutSessionResponse(CamelSchema):
    url: str | None
    session_id: str


class PaymentStatusRequest(CamelSchema):
    """Request body for PATCH /update-payment-status."""

    application_id: UUID


class PaymentStatusResponse(CamelSchema):
    success: bool = True
    application_id: UUID
    payment_status: PaymentStatus
    application_status: ApplicationStatus


class WebhookResponse(CamelSchema):
    received: bool = Field(True)
