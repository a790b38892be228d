"""
RedLife Backend - Fund & Payment Route Handlers
===============================================

What:  Payment-intent creation and the fund ledger.
Who:   Frontend "Funding" page.

Flow:
    POST /create-payment-intent  → client secret for Stripe.js
    (client confirms the card with Stripe)
    POST /funds                  → records the confirmed payment
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from redlife.dependencies import get_fund_service, get_payment_service
from redlife.exceptions import GatewayError
from redlife.schemas.common import CountResponse, ErrorResponse, InsertResult
from redlife.schemas.fund import FundCreate, FundOut, PaymentIntentRequest, PaymentIntentResponse
from redlife.security import active_user, get_verified_email
from redlife.services.fund_service import FundService
from redlife.services.payment_service import StripePaymentService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Funds"])


@router.get(
    "/funds-count",
    response_model=CountResponse,
    summary="Approximate number of fund records",
)
# Path used by existing frontend builds
@router.get("/founds-counts", response_model=CountResponse, include_in_schema=False)
async def count_funds(service: FundService = Depends(get_fund_service)) -> CountResponse:
    return await service.estimated_count()


@router.get(
    "/funds",
    response_model=List[FundOut],
    responses={401: {"description": "Missing or rejected bearer token", "model": ErrorResponse}},
    dependencies=[Depends(get_verified_email)],
    summary="List fund records, newest first",
)
async def list_funds(
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=0, ge=0, description="0 means no limit"),
    service: FundService = Depends(get_fund_service),
) -> List[FundOut]:
    return await service.list_funds(skip=skip, limit=limit)


@router.post(
    "/create-payment-intent",
    response_model=PaymentIntentResponse,
    responses={
        400: {"description": "Invalid amount", "model": ErrorResponse},
        401: {"description": "Missing or rejected bearer token", "model": ErrorResponse},
        403: {"description": "Caller is blocked or unknown", "model": ErrorResponse},
        500: {"description": "Payment gateway failure", "model": ErrorResponse},
    },
    dependencies=[Depends(active_user)],
    summary="Create a Stripe PaymentIntent",
)
async def create_payment_intent(
    payload: PaymentIntentRequest,
    payments: Optional[StripePaymentService] = Depends(get_payment_service),
) -> PaymentIntentResponse:
    if payments is None:
        raise GatewayError(message="Payments are not configured", service="stripe")
    client_secret = await payments.create_payment_intent(payload.amount)
    return PaymentIntentResponse(client_secret=client_secret)


@router.post(
    "/funds",
    response_model=InsertResult,
    responses={
        401: {"description": "Missing or rejected bearer token", "model": ErrorResponse},
        403: {"description": "Caller is blocked or unknown", "model": ErrorResponse},
        409: {"description": "Transaction already recorded", "model": ErrorResponse},
    },
    dependencies=[Depends(active_user)],
    summary="Record a confirmed payment",
)
async def create_fund(
    payload: FundCreate,
    service: FundService = Depends(get_fund_service),
) -> InsertResult:
    return await service.record(payload)
