"""
Stripe adapter for the Dialoom booking API.

Only answers one question for the booking lifecycle: has the payment
intent attached to a booking been captured?
"""

import logging
from typing import Optional

import stripe

from ..core.config import settings
from ..core.exceptions import ServiceException

logger = logging.getLogger(__name__)

CAPTURED_STATUSES = frozenset({"succeeded"})


class StripeService:
    """Thin wrapper over the Stripe SDK."""

    def __init__(self, api_key: Optional[str] = None):
        self.stripe_configured = False
        key = api_key
        if key is None and settings.stripe_secret_key:
            key = settings.stripe_secret_key.get_secret_value()
        if key:
            stripe.api_key = key
            stripe.max_network_retries = 1
            self.stripe_configured = True
            logger.info("Stripe service configured successfully")
        else:
            logger.warning("Stripe secret key not set; payment checks are disabled")

    def _check_stripe_configured(self) -> None:
        if not self.stripe_configured:
            raise ServiceException("Payment processing is not configured", code="STRIPE_DISABLED")

    def is_payment_captured(self, payment_intent_id: str) -> bool:
        """Return True when the payment intent reports a captured charge."""
        self._check_stripe_configured()
        try:
            intent = stripe.PaymentIntent.retrieve(payment_intent_id)
        except stripe.InvalidRequestError as e:
            logger.info("Unknown payment intent %s: %s", payment_intent_id, e)
            return False
        except stripe.StripeError as e:
            logger.error("Stripe lookup failed for %s: %s", payment_intent_id, e)
            raise ServiceException(f"Payment provider error: {e}", code="STRIPE_ERROR") from e
        status = getattr(intent, "status", None)
        logger.debug("Payment intent %s status=%s", payment_intent_id, status)
        return status in CAPTURED_STATUSES
