"""
RedLife Backend - Fund & Payment Schemas
========================================

What:  Bodies for the payment-intent call and the follow-up fund save.

Amounts arrive in major currency units (e.g. 10.50 USD). They are parsed as
Decimal, so "10.5", 10.5, 10 and 10.555 are all accepted; "abc", 0, negatives
and NaN are rejected with 400. Extra precision is rounded half-up to cents:
by the payment service for intents, and here for stored fund amounts, which
are decimal strings.
"""

from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional, Union

from pydantic import EmailStr, Field, field_validator

from redlife.schemas.common import APIModel

MAX_AMOUNT = Decimal("999999.99")
CENT = Decimal("0.01")


class PaymentIntentRequest(APIModel):
    amount: Decimal = Field(gt=0, le=MAX_AMOUNT)


class PaymentIntentResponse(APIModel):
    client_secret: str


class FundCreate(APIModel):
    """Body of POST /funds, sent by the client after Stripe confirms the payment."""

    donor_email: EmailStr
    donor_name: str = Field(min_length=1, max_length=120)
    fund_amount: Decimal = Field(gt=0, le=MAX_AMOUNT)
    transaction_id: str = Field(min_length=1, max_length=255)

    @field_validator("fund_amount")
    @classmethod
    def round_to_cents(cls, v: Decimal) -> Decimal:
        if v.as_tuple().exponent >= -2:
            return v
        rounded = v.quantize(CENT, rounding=ROUND_HALF_UP)
        if rounded <= 0:
            raise ValueError("Amount must be at least one cent")
        return rounded


class FundOut(APIModel):
    id: str = Field(alias="_id")
    donor_email: Optional[str] = None
    donor_name: Optional[str] = None
    # Older records hold numbers, newer ones decimal strings
    fund_amount: Optional[Union[str, float]] = None
    transaction_id: Optional[str] = None
    fund_date: Optional[datetime] = None
