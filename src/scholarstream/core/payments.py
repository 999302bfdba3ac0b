"""
Payment Session Gateway

Thin boundary around the Stripe Checkout API:
- Creating a checkout session for an application fee
- Retrieving a session to confirm payment server-side
- Verifying signed webhook events

Stripe's client is synchronous, so calls run in a worker thread with a
bounded timeout. Provider errors are logged and surfaced as
``PaymentGatewayError`` without provider detail.
"""

import asyncio
import logging
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any
from uuid import UUID

import stripe

from scholarstream.core.config import settings
from scholarstream.core.exceptions import InvalidRequestError, PaymentGatewayError

logger = logging.getLogger(__name__)

PRODUCT_NAME = "Scholarship Application Fee"
CHECKOUT_PAID = "paid"


class InvalidWebhookError(InvalidRequestError):
    """Webhook payload or signature could not be verified."""

    def __init__(self):
        super().__init__("Invalid webhook signature or payload.")
        self.error_code = "INVALID_WEBHOOK"


@dataclass(frozen=True)
class CheckoutSession:
    """The parts of a provider checkout session the service relies on."""

    id: str
    url: str | None
    payment_status: str
    metadata: dict[str, str]

    @property
    def is_paid(self) -> bool:
        return self.payment_status == CHECKOUT_PAID


def to_minor_units(amount: Any) -> int:
    """
    Convert a major-unit amount (e.g. 25.5 USD) to integer minor units (2550).

    Raises:
        InvalidRequestError: If the amount is not a positive number
    """
    if isinstance(amount, bool):
        raise InvalidRequestError("Invalid amount")
    try:
        value = Decimal(str(amount))
    except (InvalidOperation, ValueError) as e:
        raise InvalidRequestError("Invalid amount") from e

    if not value.is_finite() or value <= 0:
        raise InvalidRequestError("Invalid amount")

    return int((value * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def to_plain(value: Any) -> Any:
    """
    Convert provider objects into plain dicts and lists.

    Stripe SDK objects are not dict subclasses; everything this module returns
    is plain data.
    """
    if isinstance(value, stripe.StripeObject):
        value = value.to_dict()
    if isinstance(value, dict):
        return {key: to_plain(item) for key, item in value.items()}
    if isinstance(value, list):
        return [to_plain(item) for item in value]
    return value


def _to_checkout_session(provider_session: Any) -> CheckoutSession:
    session = to_plain(provider_session)
    metadata = session.get("metadata") or {}
    return CheckoutSession(
        id=session["id"],
        url=session.get("url"),
        payment_status=session.get("payment_status") or "unpaid",
        metadata=dict(metadata),
    )


async def _call_provider(operation: str, func, /, **kwargs) -> Any:
    """Run a blocking Stripe call off the event loop with a timeout."""
    try:
        return await asyncio.wait_for(
            asyncio.to_thread(func, api_key=settings.stripe_secret_key, **kwargs),
            timeout=settings.payment_timeout_seconds,
        )
    except TimeoutError as e:
        logger.error(f"Payment provider call {operation} timed out")
        raise PaymentGatewayError() from e
    except stripe.StripeError as e:
        logger.error(f"Payment provider call {operation} failed: {type(e).__name__}")
        raise PaymentGatewayError() from e


async def create_checkout_session(
    *,
    scholarship_id: UUID,
    application_id: UUID,
    student_email: str,
    amount: Any,
) -> CheckoutSession:
    """
    Create a hosted checkout session for an application fee.

    Args:
        scholarship_id: Scholarship being applied to
        application_id: Application whose fee is being paid
        student_email: Payer email (prefilled on the checkout page)
        amount: Fee in major currency units; must be a positive number

    Returns:
        CheckoutSession with the redirect URL

    Raises:
        InvalidRequestError: If the amount is invalid (checked before any provider call)
        PaymentGatewayError: If the provider call fails
    """
    unit_amount = to_minor_units(amount)
    frontend = settings.frontend_url.rstrip("/")

    session = await _call_provider(
        "checkout.create",
        stripe.checkout.Session.create,
        mode="payment",
        payment_method_types=["card"],
        customer_email=student_email,
        line_items=[
            {
                "price_data": {
                    "currency": settings.stripe_currency,
                    "product_data": {"name": PRODUCT_NAME},
                    "unit_amount": unit_amount,
                },
                "quantity": 1,
            }
        ],
        success_url=f"{frontend}/payment-success?applicationId={application_id}",
        cancel_url=f"{frontend}/payment-cancel?applicationId={application_id}",
        client_reference_id=str(application_id),
        metadata={
            "applicationId": str(application_id),
            "scholarshipId": str(scholarship_id),
            "studentEmail": student_email,
        },
    )

    checkout = _to_checkout_session(session)
    logger.info(f"Created checkout session {checkout.id} for application {application_id}")
    return checkout


async def retrieve_checkout_session(session_id: str) -> CheckoutSession:
    """Fetch a checkout session from the provider."""
    session = await _call_provider(
        "checkout.retrieve", stripe.checkout.Session.retrieve, id=session_id
    )
    return _to_checkout_session(session)


def construct_webhook_event(payload: bytes, signature: str | None) -> dict[str, Any]:
    """
    Verify a webhook's signature and parse its event.

    Raises:
        InvalidWebhookError: If the signature header is missing or invalid
    """
    if not signature or not settings.stripe_webhook_secret:
        logger.warning("Webhook rejected: missing signature or webhook secret not configured")
        raise InvalidWebhookError()

    try:
        event = stripe.Webhook.construct_event(payload, signature, settings.stripe_webhook_secret)
    except (ValueError, stripe.SignatureVerificationError) as e:
        logger.warning(f"Webhook signature verification failed: {type(e).__name__}")
        raise InvalidWebhookError() from e

    return to_plain(event)
