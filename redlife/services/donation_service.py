"""
RedLife Backend - Donation Request Service
==========================================

What:  Creation, listing, editing and lifecycle of blood donation requests.
Who:   Donation route handlers and the admin analytics route.

Rules:
    - A new request always starts `pending`, whatever the client sends, and
      is owned by the verified caller (requesterEmail).
    - PATCH edits only descriptive fields (recipient, hospital, date, ...).
    - PUT moves `donationStatus` along DONATION_LIFECYCLE. Entering
      `inprogress` records the committed donor.
    - Status writes are conditional on the status that was read, so of two
      concurrent transitions from the same state only one is applied.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from redlife.exceptions import ConflictError, NotFoundError, ValidationError
from redlife.models.donation import DONATION_LIFECYCLE, DonationStatus
from redlife.repositories.base import build_filter, parse_object_id, sort_by
from redlife.repositories.donations import DonationRepository
from redlife.schemas.common import CountResponse, DeleteResult, InsertResult, UpdateResult
from redlife.schemas.donation import (
    DonationRequestCreate,
    DonationRequestEdit,
    DonationRequestOut,
    DonationStatusUpdate,
)

logger = logging.getLogger(__name__)

# Dashboard widget shows the requester's latest few requests
RECENT_REQUESTS_LIMIT = 3


class DonationService:
    def __init__(self, donations: DonationRepository):
        self.donations = donations

    async def create(self, requester: Dict[str, Any], payload: DonationRequestCreate) -> InsertResult:
        """
        Insert a new request for the verified, active caller.

        Args:
            requester: the caller's user document (from the access policy)
            payload: validated request body
        """
        document = payload.to_document()
        document["requesterEmail"] = requester["email"]
        if "requesterName" not in document and requester.get("name"):
            document["requesterName"] = requester["name"]
        document["donationStatus"] = DONATION_LIFECYCLE.initial
        document["createdAt"] = datetime.now(timezone.utc)

        inserted_id = await self.donations.insert(document)
        logger.info("Donation request %s created by %s", inserted_id, requester["email"])
        return InsertResult(inserted_id=inserted_id)

    # ── Queries ───────────────────────────────────────────────────────────

    async def list_for_requester(
        self, email: str, status: Optional[str] = None, skip: int = 0, limit: int = 0
    ) -> List[DonationRequestOut]:
        docs = await self.donations.find_for_requester(email, status=status, skip=skip, limit=limit)
        return [DonationRequestOut.model_validate(doc) for doc in docs]

    async def recent_for_requester(self, email: str) -> List[DonationRequestOut]:
        docs = await self.donations.find_for_requester(email, limit=RECENT_REQUESTS_LIMIT)
        return [DonationRequestOut.model_validate(doc) for doc in docs]

    async def count_for_requester(self, email: str, status: Optional[str] = None) -> CountResponse:
        return CountResponse(count=await self.donations.count_for_requester(email, status=status))

    async def list_all(
        self,
        status: Optional[str] = None,
        sort: Optional[str] = None,
        skip: int = 0,
        limit: int = 0,
    ) -> List[DonationRequestOut]:
        docs = await self.donations.find(
            build_filter(donationStatus=status),
            sort=sort_by("donationDate", sort),
            skip=skip,
            limit=limit,
        )
        return [DonationRequestOut.model_validate(doc) for doc in docs]

    async def count_all(self, status: Optional[str] = None) -> CountResponse:
        return CountResponse(count=await self.donations.count(build_filter(donationStatus=status)))

    async def get(self, request_id: str) -> DonationRequestOut:
        return DonationRequestOut.model_validate(await self._load(request_id))

    # ── Mutations ─────────────────────────────────────────────────────────

    async def edit(self, request_id: str, payload: DonationRequestEdit) -> UpdateResult:
        fields = payload.to_document()
        if not fields:
            raise ValidationError(message="No editable donation request fields supplied")

        outcome = await self.donations.update_by_id(request_id, fields)
        if outcome.matched_count == 0:
            raise NotFoundError(resource="donation request", resource_id=request_id)
        return UpdateResult(
            matched_count=outcome.matched_count,
            modified_count=outcome.modified_count,
        )

    async def update_status(self, request_id: str, payload: DonationStatusUpdate) -> UpdateResult:
        """
        Apply one lifecycle transition.

        Raises:
            NotFoundError: no such request
            InvalidTransitionError: target not reachable from the current status
            ValidationError: entering `inprogress` without donor email and name
            ConflictError: status changed by another request in the meantime
        """
        doc = await self._load(request_id)
        stored_status = doc.get("donationStatus")
        current = stored_status or DONATION_LIFECYCLE.initial
        target = payload.donation_status

        DONATION_LIFECYCLE.check(current, target)
        if current == target:
            return UpdateResult(matched_count=1, modified_count=0)

        fields: Dict[str, Any] = {"donationStatus": target}
        if target == DonationStatus.IN_PROGRESS.value:
            if not payload.donor_email or not payload.donor_name:
                raise ValidationError(
                    message="donorEmail and donorName are required to accept a request",
                    field="donorEmail",
                )
            fields["donorEmail"] = payload.donor_email
            fields["donorName"] = payload.donor_name

        # `None` also matches documents that never had the field
        outcome = await self.donations.update_one(
            {"_id": parse_object_id(request_id), "donationStatus": stored_status},
            fields,
        )
        if outcome.matched_count == 0:
            raise ConflictError(
                message="The donation request changed while it was being updated",
                context={"resource_id": request_id},
            )
        logger.info("Donation request %s: %s → %s", request_id, current, target)
        return UpdateResult(
            matched_count=outcome.matched_count,
            modified_count=outcome.modified_count,
        )

    async def delete(self, request_id: str) -> DeleteResult:
        deleted = await self.donations.delete_by_id(request_id)
        if deleted == 0:
            raise NotFoundError(resource="donation request", resource_id=request_id)
        logger.info("Donation request %s deleted", request_id)
        return DeleteResult(deleted_count=deleted)

    async def _load(self, request_id: str) -> Dict[str, Any]:
        doc = await self.donations.find_by_id(request_id)
        if doc is None:
            raise NotFoundError(resource="donation request", resource_id=request_id)
        return doc
