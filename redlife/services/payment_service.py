"""
RedLife Backend - Stripe Payment Intent Issuer
==============================================

What:  Creates Stripe PaymentIntents and hands back the client secret.
How:   Converts the major-unit amount to integer minor units (cents) with
       Decimal arithmetic, then calls `stripe.PaymentIntent.create` in a
       worker thread (the Stripe SDK is blocking).
Who:   POST /create-payment-intent.

Payment flow:
    1. Client asks for an intent               → this service
    2. Client confirms the card with Stripe.js → Stripe
    3. Client saves the fund record            → POST /funds (FundService)
    Steps 1 and 3 are separate requests; nothing here persists anything.

There is no retry: a Stripe failure surfaces at once as a GatewayError (500).
"""

import asyncio
import logging
import secrets
import time
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

import stripe

from redlife.config import Settings
from redlife.exceptions import GatewayError, ValidationError

logger = logging.getLogger(__name__)


def to_minor_units(amount: Any) -> int:
    """
    Major currency units → integer minor units.

        to_minor_units("10")     → 1000
        to_minor_units(19.99)    → 1999
        to_minor_units("0.005")  → 1   (half-up)

    Raises:
        ValidationError: amount missing, non-numeric, non-finite, or not positive
    """
    if amount is None or isinstance(amount, bool) or amount == "":
        raise ValidationError(message="Invalid amount", field="amount")
    try:
        value = Decimal(str(amount))
    except (InvalidOperation, ValueError):
        raise ValidationError(message="Invalid amount", field="amount")
    if not value.is_finite():
        raise ValidationError(message="Invalid amount", field="amount")

    cents = int((value * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
    if cents <= 0:
        raise ValidationError(message="Amount must be greater than zero", field="amount")
    return cents


class StripePaymentService:
    """PaymentIntent issuer bound to one Stripe secret key and currency."""

    def __init__(self, api_key: str, currency: str = "usd", demo_mode: bool = False):
        self._api_key = api_key
        self.currency = currency
        self.demo_mode = demo_mode

    @property
    def mode(self) -> str:
        if self.demo_mode:
            return "demo"
        return "configured" if self._api_key else "unconfigured"

    async def create_payment_intent(self, amount: Any) -> str:
        """
        Create a card PaymentIntent for `amount` and return its client secret.

        Raises:
            ValidationError: invalid amount (400)
            GatewayError: Stripe not configured or the API call failed (500)
        """
        cents = to_minor_units(amount)

        if self.demo_mode:
            intent_id = f"pi_demo_{int(time.time())}"
            logger.info("Demo payment intent %s for %d %s", intent_id, cents, self.currency)
            return f"{intent_id}_secret_{secrets.token_hex(8)}"

        if not self._api_key:
            raise GatewayError(message="Payments are not configured", service="stripe")

        try:
            intent = await asyncio.to_thread(
                stripe.PaymentIntent.create,
                api_key=self._api_key,
                amount=cents,
                currency=self.currency,
                payment_method_types=["card"],
            )
        except stripe.StripeError as e:
            logger.error(
                "Stripe PaymentIntent creation failed: %s (%s)",
                getattr(e, "user_message", None) or str(e),
                type(e).__name__,
            )
            raise GatewayError(
                message="Payment intent creation failed",
                service="stripe",
                context={"error_type": type(e).__name__},
            )

        logger.info("Created payment intent %s for %d %s", intent.id, cents, self.currency)
        return intent.client_secret


def create_payment_service(settings: Settings) -> StripePaymentService:
    return StripePaymentService(
        api_key=settings.stripe_secret_key,
        currency=settings.stripe_currency,
        demo_mode=settings.payments_demo_mode,
    )
