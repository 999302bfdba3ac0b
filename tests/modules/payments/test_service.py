"""
Unit tests for webhook event dispatch.
"""

from unittest.mock import AsyncMock, patch
from uuid import uuid4

import pytest
import stripe

from scholarstream.modules.applications.service import (
    ApplicationAlreadyPaidError,
    ApplicationNotFoundError,
    ApplicationRejectedError,
)
from scholarstream.modules.payments.service import handle_webhook_event

SERVICE = "scholarstream.modules.payments.service"


def _event(event_type: str, application_id=None, payment_status: str = "paid") -> dict:
    metadata = {"applicationId": str(application_id)} if application_id else {}
    return {
        "id": "evt_test_1",
        "type": event_type,
        "data": {
            "object": {
                "id": "cs_test_1",
                "payment_status": payment_status,
                "metadata": metadata,
            }
        },
    }


class TestHandleWebhookEvent:
    @pytest.mark.asyncio
    async def test_completed_confirms_payment(self, mock_db):
        application_id = uuid4()
        with patch(f"{SERVICE}.application_service") as mock_service:
            mock_service.confirm_payment = AsyncMock(return_value=(object(), True))

            outcome = await handle_webhook_event(
                mock_db, _event("checkout.session.completed", application_id)
            )

            assert outcome == "confirmed"
            mock_service.confirm_payment.assert_awaited_once_with(mock_db, application_id)

    @pytest.mark.asyncio
    async def test_redelivered_completed_is_idempotent(self, mock_db):
        with patch(f"{SERVICE}.application_service") as mock_service:
            mock_service.confirm_payment = AsyncMock(return_value=(object(), False))

            outcome = await handle_webhook_event(
                mock_db, _event("checkout.session.completed", uuid4())
            )

            assert outcome == "already_confirmed"

    @pytest.mark.asyncio
    async def test_completed_but_unpaid_does_not_confirm(self, mock_db):
        with patch(f"{SERVICE}.application_service") as mock_service:
            mock_service.confirm_payment = AsyncMock()

            outcome = await handle_webhook_event(
                mock_db,
                _event("checkout.session.completed", uuid4(), payment_status="unpaid"),
            )

            assert outcome == "unpaid"
            mock_service.confirm_payment.assert_not_called()

    @pytest.mark.asyncio
    async def test_expired_cancels_payment(self, mock_db):
        application_id = uuid4()
        with patch(f"{SERVICE}.application_service") as mock_service:
            mock_service.cancel_payment = AsyncMock()

            outcome = await handle_webhook_event(
                mock_db, _event("checkout.session.expired", application_id, "unpaid")
            )

            assert outcome == "cancelled"
            mock_service.cancel_payment.assert_awaited_once_with(mock_db, application_id)

    @pytest.mark.asyncio
    async def test_expired_for_paid_application_is_acknowledged(self, mock_db):
        application_id = uuid4()
        with patch(f"{SERVICE}.application_service") as mock_service:
            mock_service.cancel_payment = AsyncMock(
                side_effect=ApplicationAlreadyPaidError(application_id)
            )

            outcome = await handle_webhook_event(
                mock_db, _event("checkout.session.expired", application_id, "unpaid")
            )

            assert outcome == "already_confirmed"

    @pytest.mark.asyncio
    async def test_unknown_application_is_acknowledged(self, mock_db):
        application_id = uuid4()
        with patch(f"{SERVICE}.application_service") as mock_service:
            mock_service.confirm_payment = AsyncMock(
                side_effect=ApplicationNotFoundError(application_id)
            )

            outcome = await handle_webhook_event(
                mock_db, _event("checkout.session.completed", application_id)
            )

            assert outcome == "not_found"

    @pytest.mark.asyncio
    async def test_falls_back_to_client_reference_id(self, mock_db):
        application_id = uuid4()
        event = _event("checkout.session.completed")
        event["data"]["object"]["client_reference_id"] = str(application_id)
        with patch(f"{SERVICE}.application_service") as mock_service:
            mock_service.confirm_payment = AsyncMock(return_value=(object(), True))

            await handle_webhook_event(mock_db, event)

            mock_service.confirm_payment.assert_awaited_once_with(mock_db, application_id)

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "event",
        [
            _event("payment_intent.succeeded", uuid4()),
            _event("checkout.session.completed"),
        ],
    )
    async def test_ignored_events(self, mock_db, event):
        with patch(f"{SERVICE}.application_service") as mock_service:
            mock_service.confirm_payment = AsyncMock()

            outcome = await handle_webhook_event(mock_db, event)

            assert outcome == "ignored"
            mock_service.confirm_payment.assert_not_called()


class TestProviderEventObjects:
    @pytest.mark.asyncio
    async def test_sdk_event_object_confirms_payment(self, mock_db):
        application_id = uuid4()
        event = stripe.Event.construct_from(_event("checkout.session.completed", application_id))
        with patch(f"{SERVICE}.application_service") as mock_service:
            mock_service.confirm_payment = AsyncMock(return_value=(object(), True))

            outcome = await handle_webhook_event(mock_db, event)

            assert outcome == "confirmed"
            mock_service.confirm_payment.assert_awaited_once_with(mock_db, application_id)

    @pytest.mark.asyncio
    async def test_expired_for_rejected_application_is_acknowledged(self, mock_db):
        application_id = uuid4()
        with patch(f"{SERVICE}.application_service") as mock_service:
            mock_service.cancel_payment = AsyncMock(
                side_effect=ApplicationRejectedError(application_id)
            )

            outcome = await handle_webhook_event(
                mock_db, _event("checkout.session.expired", application_id)
            )

            assert outcome == "rejected"
