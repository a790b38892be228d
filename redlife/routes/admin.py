"""
RedLife Backend - Admin Dashboard Statistics
============================================

What:  The three headline numbers on the admin dashboard.
"""

from fastapi import APIRouter, Depends

from redlife.dependencies import get_donation_service, get_fund_service, get_user_service
from redlife.schemas.common import CountResponse, TotalResponse
from redlife.services.donation_service import DonationService
from redlife.services.fund_service import FundService
from redlife.services.user_service import UserService

router = APIRouter(prefix="/admin", tags=["Admin"])


@router.get("/funding/total", response_model=TotalResponse, summary="Sum of all funds")
async def funding_total(service: FundService = Depends(get_fund_service)) -> TotalResponse:
    return await service.total()


@router.get("/users/count", response_model=CountResponse, summary="Number of donors")
async def donor_count(service: UserService = Depends(get_user_service)) -> CountResponse:
    return await service.count_donors()


@router.get(
    "/blood-requests/count",
    response_model=CountResponse,
    summary="Number of donation requests",
)
async def blood_request_count(
    service: DonationService = Depends(get_donation_service),
) -> CountResponse:
    return await service.count_all()
