# backend/tests/unit/services/test_stripe_service.py
from unittest.mock import MagicMock, patch

import pytest
import stripe

from dialoom.core.exceptions import ServiceException
from dialoom.services.stripe_service import StripeService


def test_unconfigured_stripe_refuses_checks():
    service = StripeService(api_key="")

    with pytest.raises(ServiceException) as exc_info:
        service.is_payment_captured("pi_123")

    assert exc_info.value.code == "STRIPE_DISABLED"


@pytest.mark.parametrize(
    "status,captured",
    [("succeeded", True), ("requires_payment_method", False), ("processing", False)],
)
def test_captured_only_when_succeeded(status, captured):
    service = StripeService(api_key="sk_test_123")

    with patch("stripe.PaymentIntent.retrieve") as mock_retrieve:
        mock_retrieve.return_value = MagicMock(status=status)
        assert service.is_payment_captured("pi_123") is captured

    mock_retrieve.assert_called_once_with("pi_123")


def test_unknown_intent_is_not_captured():
    service = StripeService(api_key="sk_test_123")

    with patch("stripe.PaymentIntent.retrieve") as mock_retrieve:
        mock_retrieve.side_effect = stripe.InvalidRequestError("No such payment_intent", "id")
        assert service.is_payment_captured("pi_missing") is False


def test_provider_errors_become_service_errors():
    service = StripeService(api_key="sk_test_123")

    with patch("stripe.PaymentIntent.retrieve") as mock_retrieve:
        mock_retrieve.side_effect = stripe.APIConnectionError("network down")
        with pytest.raises(ServiceException) as exc_info:
            service.is_payment_captured("pi_123")

    assert exc_info.value.code == "STRIPE_ERROR"
