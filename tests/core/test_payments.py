"""
Tests for the payment session gateway.
"""

import asyncio
from unittest.mock import MagicMock, patch
from uuid import uuid4

import pytest
import stripe

from scholarstream.core import payments
from scholarstream.core.exceptions import InvalidRequestError, PaymentGatewayError


class TestToMinorUnits:
    @pytest.mark.parametrize(
        "amount,expected",
        [(25.5, 2550), ("25.50", 2550), (10, 1000), (0.1, 10), (19.999, 2000)],
    )
    def test_converts_major_units(self, amount, expected):
        assert payments.to_minor_units(amount) == expected

    @pytest.mark.parametrize("amount", [0, -5, "abc", None, True, float("nan"), float("inf")])
    def test_rejects_invalid_amounts(self, amount):
        with pytest.raises(InvalidRequestError):
            payments.to_minor_units(amount)


class TestCreateCheckoutSession:
    @pytest.mark.asyncio
    async def test_builds_single_line_item(self):
        application_id = uuid4()
        scholarship_id = uuid4()
        session = stripe.checkout.Session.construct_from(
            {
                "id": "cs_test_1",
                "url": "https://checkout.example/cs_test_1",
                "payment_status": "unpaid",
                "metadata": {"applicationId": str(application_id)},
            }
        )

        with (
            patch.object(payments.stripe.checkout.Session, "create", MagicMock(return_value=session)) as mock_create,
            patch.object(payments.settings, "stripe_secret_key", "sk_test_123"),
            patch.object(payments.settings, "frontend_url", "https://app.example/"),
        ):
            result = await payments.create_checkout_session(
                scholarship_id=scholarship_id,
                application_id=application_id,
                student_email="a@x.com",
                amount=25.5,
            )

        assert result.id == "cs_test_1"
        assert result.url == "https://checkout.example/cs_test_1"
        assert result.is_paid is False

        kwargs = mock_create.call_args.kwargs
        assert kwargs["api_key"] == "sk_test_123"
        assert kwargs["mode"] == "payment"
        assert kwargs["line_items"][0]["price_data"]["unit_amount"] == 2550
        assert kwargs["line_items"][0]["quantity"] == 1
        assert kwargs["success_url"] == f"https://app.example/payment-success?applicationId={application_id}"
        assert kwargs["cancel_url"] == f"https://app.example/payment-cancel?applicationId={application_id}"
        assert kwargs["metadata"]["applicationId"] == str(application_id)
        assert kwargs["metadata"]["scholarshipId"] == str(scholarship_id)

    @pytest.mark.asyncio
    async def test_invalid_amount_never_calls_provider(self):
        with patch.object(payments.stripe.checkout.Session, "create", MagicMock()) as mock_create:
            with pytest.raises(InvalidRequestError):
                await payments.create_checkout_session(
                    scholarship_id=uuid4(),
                    application_id=uuid4(),
                    student_email="a@x.com",
                    amount=-1,
                )

        mock_create.assert_not_called()

    @pytest.mark.asyncio
    async def test_provider_error_becomes_gateway_error(self):
        error = stripe.StripeError("card network down")
        with patch.object(payments.stripe.checkout.Session, "create", MagicMock(side_effect=error)):
            with pytest.raises(PaymentGatewayError) as exc_info:
                await payments.create_checkout_session(
                    scholarship_id=uuid4(),
                    application_id=uuid4(),
                    student_email="a@x.com",
                    amount=10,
                )

        assert exc_info.value.status_code == 502
        assert "card network" not in exc_info.value.message

    @pytest.mark.asyncio
    async def test_timeout_becomes_gateway_error(self):
        async def never_returns(*args, **kwargs):
            await asyncio.sleep(1)

        with (
            patch.object(payments.settings, "payment_timeout_seconds", 0.01),
            patch.object(payments.asyncio, "to_thread", never_returns),
        ):
            with pytest.raises(PaymentGatewayError):
                await payments.retrieve_checkout_session("cs_test_1")


class TestRetrieveCheckoutSession:
    @pytest.mark.asyncio
    async def test_paid_session(self):
        session = stripe.checkout.Session.construct_from(
            {"id": "cs_test_1", "payment_status": "paid", "metadata": None}
        )
        with patch.object(payments.stripe.checkout.Session, "retrieve", MagicMock(return_value=session)):
            result = await payments.retrieve_checkout_session("cs_test_1")

        assert result.is_paid is True
        assert result.metadata == {}
        assert result.url is None


class TestConstructWebhookEvent:
    def test_missing_signature(self):
        with patch.object(payments.settings, "stripe_webhook_secret", "whsec_test"):
            with pytest.raises(payments.InvalidWebhookError):
                payments.construct_webhook_event(b"{}", None)

    def test_missing_secret(self):
        with patch.object(payments.settings, "stripe_webhook_secret", ""):
            with pytest.raises(payments.InvalidWebhookError):
                payments.construct_webhook_event(b"{}", "t=1,v1=abc")

    def test_bad_signature(self):
        error = stripe.SignatureVerificationError("bad", "t=1,v1=abc")
        with (
            patch.object(payments.settings, "stripe_webhook_secret", "whsec_test"),
            patch.object(payments.stripe.Webhook, "construct_event", MagicMock(side_effect=error)),
        ):
            with pytest.raises(payments.InvalidWebhookError) as exc_info:
                payments.construct_webhook_event(b"{}", "t=1,v1=abc")

        assert exc_info.value.status_code == 400
        assert exc_info.value.error_code == "INVALID_WEBHOOK"

    def test_valid_event(self):
        data = {
            "id": "evt_test_1",
            "type": "checkout.session.completed",
            "data": {"object": {"id": "cs_test_1", "metadata": {"applicationId": "abc"}}},
        }
        event = stripe.Event.construct_from(data)
        with (
            patch.object(payments.settings, "stripe_webhook_secret", "whsec_test"),
            patch.object(payments.stripe.Webhook, "construct_event", MagicMock(return_value=event)) as mock_construct,
        ):
            result = payments.construct_webhook_event(b"{}", "t=1,v1=abc")

        assert isinstance(result, dict)
        assert isinstance(result["data"]["object"]["metadata"], dict)
        assert result == data
        mock_construct.assert_called_once_with(b"{}", "t=1,v1=abc", "whsec_test")


class TestToPlain:
    def test_nested_sdk_objects_become_dicts(self):
        session = stripe.checkout.Session.construct_from(
            {"id": "cs_test_1", "metadata": {"applicationId": "abc"}, "line_items": [{"quantity": 1}]}
        )

        result = payments.to_plain(session)

        assert result == {
            "id": "cs_test_1",
            "metadata": {"applicationId": "abc"},
            "line_items": [{"quantity": 1}],
        }
        assert type(result["metadata"]) is dict
        assert type(result["line_items"][0]) is dict
