"""
RedLife Backend - Fund Service
==============================

What:  Listing, totals and recording of money donations.
Who:   Fund routes and the admin funding total.

A fund record is written by a separate client call after Stripe confirms
the payment. `transactionId` is unique, so re-submitting the same payment
answers 409 instead of creating a second record.
"""

import logging
from datetime import datetime, timezone
from typing import List

from redlife.exceptions import ConflictError
from redlife.repositories.funds import FundRepository
from redlife.schemas.common import CountResponse, InsertResult, TotalResponse
from redlife.schemas.fund import FundCreate, FundOut

logger = logging.getLogger(__name__)


class FundService:
    def __init__(self, funds: FundRepository):
        self.funds = funds

    async def list_funds(self, skip: int = 0, limit: int = 0) -> List[FundOut]:
        docs = await self.funds.find_latest(skip=skip, limit=limit)
        return [FundOut.model_validate(doc) for doc in docs]

    async def estimated_count(self) -> CountResponse:
        """Display-only count; may lag behind recent inserts."""
        return CountResponse(count=await self.funds.estimated_count())

    async def total(self) -> TotalResponse:
        return TotalResponse(total=float(await self.funds.total_amount()))

    async def record(self, payload: FundCreate) -> InsertResult:
        document = payload.to_document()
        document["fundDate"] = datetime.now(timezone.utc)
        try:
            inserted_id = await self.funds.insert(document)
        except ConflictError:
            logger.warning("Duplicate fund submission for transaction %s", payload.transaction_id)
            raise ConflictError(
                message="This transaction has already been recorded",
                context={"transactionId": payload.transaction_id},
            )
        logger.info(
            "Recorded fund %s: %s from %s (tx=%s)",
            inserted_id,
            document["fundAmount"],
            payload.donor_email,
            payload.transaction_id,
        )
        return InsertResult(inserted_id=inserted_id)
