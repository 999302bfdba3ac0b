"""
Payments Service Layer

Dispatches verified provider webhook events to the application lifecycle:
- checkout.session.completed -> confirm payment (when the session is paid)
- checkout.session.expired -> cancel payment

Unknown events, and events for rejected applications, are acknowledged and
ignored.
"""

import logging
from typing import Any
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from scholarstream.core.payments import CHECKOUT_PAID, to_plain
from scholarstream.modules.applications import service as application_service
from scholarstream.modules.applications.service import (
    ApplicationAlreadyPaidError,
    ApplicationNotFoundError,
    InvalidApplicationStateError,
)

logger = logging.getLogger(__name__)

EVENT_CHECKOUT_COMPLETED = "checkout.session.completed"
EVENT_CHECKOUT_EXPIRED = "checkout.session.expired"


def _application_id_from_session(session: Any) -> UUID | None:
    metadata = session.get("metadata") or {}
    raw = metadata.get("applicationId") or session.get("client_reference_id")
    if not raw:
        return None
    try:
        return UUID(str(raw))
    except ValueError:
        return None


async def handle_webhook_event(db: AsyncSession, event: Any) -> str:
    """
    Apply a verified webhook event.

    Events that reference unknown applications are logged and acknowledged so
    the provider does not keep retrying them.

    Returns:
        Short outcome label, used for logging and tests
    """
    event = to_plain(event)
    event_type = event["type"]
    if event_type not in (EVENT_CHECKOUT_COMPLETED, EVENT_CHECKOUT_EXPIRED):
        logger.debug(f"Ignoring webhook event {event_type}")
        return "ignored"

    session = event["data"]["object"]
    application_id = _application_id_from_session(session)
    if application_id is None:
        logger.warning(f"Webhook {event_type} for session {session.get('id')} has no application id")
        return "ignored"

    try:
        if event_type == EVENT_CHECKOUT_COMPLETED:
            if session.get("payment_status") != CHECKOUT_PAID:
                logger.info(f"Checkout for application {application_id} completed but not paid")
                return "unpaid"
            _, changed = await application_service.confirm_payment(db, application_id)
            return "confirmed" if changed else "already_confirmed"

        await application_service.cancel_payment(db, application_id)
        return "cancelled"
    except ApplicationNotFoundError:
        logger.warning(f"Webhook {event_type} references unknown application {application_id}")
        return "not_found"
    except ApplicationAlreadyPaidError:
        logger.info(f"Ignoring {event_type} for already paid application {application_id}")
        return "already_confirmed"
    except InvalidApplicationStateError:
        logger.info(f"Ignoring {event_type} for rejected application {application_id}")
        return "rejected"
