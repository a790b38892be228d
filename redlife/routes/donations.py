"""
RedLife Backend - Donation Request Route Handlers
=================================================

What:  Create, list, count, edit, transition and delete blood donation requests.
Who:   Requester dashboard ("My Requests"), the public request board, and
       volunteers/admins managing all requests.

Status changes go through PUT /donation-request/{id} only; PATCH edits the
descriptive fields. See models/donation.py for the lifecycle.
"""

import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Query

from redlife.dependencies import get_donation_service
from redlife.models.donation import DonationStatus
from redlife.schemas.common import (
    CountResponse,
    DeleteResult,
    ErrorResponse,
    InsertResult,
    UpdateResult,
)
from redlife.schemas.donation import (
    DonationRequestCreate,
    DonationRequestEdit,
    DonationRequestOut,
    DonationStatusUpdate,
)
from redlife.security import active_user
from redlife.services.donation_service import DonationService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Donation Requests"])

NOT_FOUND = {404: {"description": "No such donation request", "model": ErrorResponse}}


def _status_value(status: Optional[DonationStatus]) -> Optional[str]:
    return status.value if status else None


@router.post(
    "/create-donate-request",
    response_model=InsertResult,
    responses={
        401: {"description": "Missing or rejected bearer token", "model": ErrorResponse},
        403: {"description": "Caller is blocked or unknown", "model": ErrorResponse},
    },
    summary="Create a donation request",
    description="Requests always start as `pending` and belong to the verified caller.",
)
async def create_donation_request(
    payload: DonationRequestCreate,
    requester: Dict[str, Any] = Depends(active_user),
    service: DonationService = Depends(get_donation_service),
) -> InsertResult:
    return await service.create(requester, payload)


# ── Requester Views ───────────────────────────────────────────────────────


@router.get("/all-my-donation-count", response_model=CountResponse)
async def count_my_donation_requests(
    email: str,
    status: Optional[DonationStatus] = None,
    service: DonationService = Depends(get_donation_service),
) -> CountResponse:
    return await service.count_for_requester(email, status=_status_value(status))


@router.get("/my-all-donation-request/{email}", response_model=List[DonationRequestOut])
async def list_my_donation_requests(
    email: str,
    status_filter: Optional[DonationStatus] = Query(
        default=None, alias="filter", description="donationStatus filter"
    ),
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=0, ge=0, description="0 means no limit"),
    service: DonationService = Depends(get_donation_service),
) -> List[DonationRequestOut]:
    return await service.list_for_requester(
        email, status=_status_value(status_filter), skip=skip, limit=limit
    )


@router.get(
    "/donation-request",
    response_model=List[DonationRequestOut],
    summary="Latest requests of one requester",
)
async def recent_donation_requests(
    email: str,
    service: DonationService = Depends(get_donation_service),
) -> List[DonationRequestOut]:
    return await service.recent_for_requester(email)


# ── Public Board ──────────────────────────────────────────────────────────


@router.get("/donation-requests", response_model=List[DonationRequestOut])
async def list_donation_requests(
    donation_status: Optional[DonationStatus] = Query(default=None, alias="donationStatus"),
    sort: Optional[str] = Query(default=None, description="`asc` or `desc` by donationDate"),
    service: DonationService = Depends(get_donation_service),
) -> List[DonationRequestOut]:
    return await service.list_all(status=_status_value(donation_status), sort=sort)


@router.get("/all-blood-donation-request", response_model=List[DonationRequestOut])
async def list_all_blood_donation_requests(
    status_filter: Optional[DonationStatus] = Query(
        default=None, alias="filter", description="donationStatus filter"
    ),
    sort: Optional[str] = Query(default=None, description="`asc` or `desc` by donationDate"),
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=0, ge=0, description="0 means no limit"),
    service: DonationService = Depends(get_donation_service),
) -> List[DonationRequestOut]:
    return await service.list_all(
        status=_status_value(status_filter), sort=sort, skip=skip, limit=limit
    )


@router.get("/all-donation-count", response_model=CountResponse)
async def count_all_donation_requests(
    status: Optional[DonationStatus] = None,
    service: DonationService = Depends(get_donation_service),
) -> CountResponse:
    return await service.count_all(status=_status_value(status))


# ── Single Request ────────────────────────────────────────────────────────


@router.get(
    "/donation-request/{request_id}",
    response_model=DonationRequestOut,
    responses=NOT_FOUND,
)
async def get_donation_request(
    request_id: str,
    service: DonationService = Depends(get_donation_service),
) -> DonationRequestOut:
    return await service.get(request_id)


@router.patch(
    "/donation-requests/{request_id}",
    response_model=UpdateResult,
    responses=NOT_FOUND,
    summary="Edit a donation request",
    description=(
        "Updates descriptive fields only. Requester, status and donor fields "
        "are ignored if sent."
    ),
)
async def edit_donation_request(
    request_id: str,
    payload: DonationRequestEdit,
    service: DonationService = Depends(get_donation_service),
) -> UpdateResult:
    return await service.edit(request_id, payload)


@router.put(
    "/donation-request/{request_id}",
    response_model=UpdateResult,
    responses={
        **NOT_FOUND,
        409: {"description": "Transition not allowed from the current status", "model": ErrorResponse},
    },
    summary="Change a donation request's status",
)
async def update_donation_status(
    request_id: str,
    payload: DonationStatusUpdate,
    service: DonationService = Depends(get_donation_service),
) -> UpdateResult:
    return await service.update_status(request_id, payload)


@router.delete(
    "/donation-request/{request_id}",
    response_model=DeleteResult,
    responses=NOT_FOUND,
)
async def delete_donation_request(
    request_id: str,
    service: DonationService = Depends(get_donation_service),
) -> DeleteResult:
    return await service.delete(request_id)
