"""
Payments Router

Endpoints:
- POST /create-checkout-session - Start checkout for an application fee
- PATCH /update-payment-status - Confirm payment by querying the provider
- PATCH /applications/{id}/payment-success - Same, for the success redirect page
- PATCH /applications/{id}/payment-cancel - Abandon a pending checkout
- POST /webhooks/stripe - Signed provider webhook

Payment is only ever confirmed from provider data: the signed webhook or a
server-side session lookup. Redirect query parameters are not trusted.
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Header, Request
from sqlalchemy.ext.asyncio import AsyncSession

from scholarstream.core.auth import Principal, get_current_principal
from scholarstream.core.database import get_db
from scholarstream.core.exceptions import InvalidRequestError
from scholarstream.core.payments import construct_webhook_event
from scholarstream.core.rate_limit import enforce_rate_limit
from scholarstream.modules.applications import service as application_service
from scholarstream.modules.applications.models import Application
from scholarstream.modules.payments import service
from scholarstream.modules.payments.schemas import (
    CheckoutSessionRequest,
    CheckoutSessionResponse,
    PaymentStatusRequest,
    PaymentStatusResponse,
    WebhookResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()

CHECKOUT_RATE_LIMIT = 5
CHECKOUT_RATE_WINDOW_SECONDS = 60


def _status_response(application: Application) -> PaymentStatusResponse:
    return PaymentStatusResponse(
        application_id=application.id,
        payment_status=application.payment_status,
        application_status=application.application_status,
    )


@router.post(
    "/create-checkout-session",
    response_model=CheckoutSessionResponse,
    summary="Create Checkout Session",
    responses={
        400: {"description": "Invalid amount or amount differs from the fee"},
        409: {"description": "Application already paid or rejected"},
        429: {"description": "Too many checkout attempts"},
        502: {"description": "Payment provider failure"},
    },
)
async def create_checkout_session(
    data: CheckoutSessionRequest,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
) -> CheckoutSessionResponse:
    await enforce_rate_limit(
        f"payments:checkout:{principal.email}",
        CHECKOUT_RATE_LIMIT,
        CHECKOUT_RATE_WINDOW_SECONDS,
    )

    application = await application_service.get_application_for(
        db, principal, data.application_id
    )
    if data.scholarship_id is not None and data.scholarship_id != application.scholarship_id:
        raise InvalidRequestError("scholarshipId does not match the application")
    if data.student_email is not None and data.student_email.lower() != application.student_email:
        raise InvalidRequestError("studentEmail does not match the application")

    session = await application_service.start_checkout(
        db, principal, data.application_id, data.amount
    )
    return CheckoutSessionResponse(url=session.url, session_id=session.id)


@router.patch(
    "/update-payment-status",
    response_model=PaymentStatusResponse,
    summary="Verify Payment Status",
)
async def update_payment_status(
    data: PaymentStatusRequest,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
) -> PaymentStatusResponse:
    application = await application_service.verify_checkout(db, principal, data.application_id)
    return _status_response(application)


@router.patch(
    "/applications/{application_id}/payment-success",
    response_model=PaymentStatusResponse,
    summary="Confirm Payment After Redirect",
)
async def payment_success(
    application_id: UUID,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
) -> PaymentStatusResponse:
    application = await application_service.verify_checkout(db, principal, application_id)
    return _status_response(application)


@router.patch(
    "/applications/{application_id}/payment-cancel",
    response_model=PaymentStatusResponse,
    summary="Cancel Pending Payment",
)
async def payment_cancel(
    application_id: UUID,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
) -> PaymentStatusResponse:
    application = await application_service.cancel_payment(db, application_id, actor=principal)
    return _status_response(application)


@router.post("/webhooks/stripe", response_model=WebhookResponse, summary="Payment Webhook")
async def payment_webhook(
    request: Request,
    stripe_signature: str | None = Header(None, alias="Stripe-Signature"),
    db: AsyncSession = Depends(get_db),
) -> WebhookResponse:
    payload = await request.body()
    event = construct_webhook_event(payload, stripe_signature)

    outcome = await service.handle_webhook_event(db, event)
    logger.info(f"Webhook {event['type']} ({event['id']}): {outcome}")
    return WebhookResponse()
