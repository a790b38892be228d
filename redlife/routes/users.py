"""
RedLife Backend - User Route Handlers
=====================================

What:  Login-or-register, profile read/edit, donor search, user listings and
       the admin role/status switches.
Who:   Frontend auth flow, dashboard profile page, admin "All Users" table.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from redlife.dependencies import get_user_service
from redlife.models.user import UserStatus
from redlife.schemas.common import CountResponse, ErrorResponse, MessageResponse, UpdateResult
from redlife.schemas.user import (
    LoginResponse,
    RoleUpdate,
    StatusUpdate,
    UserOut,
    UserProfileUpdate,
    UserRegistration,
)
from redlife.security import admin_user, get_verified_email
from redlife.services.user_service import UserService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Users"])

AUTH_ERRORS = {
    401: {"description": "Missing or rejected bearer token", "model": ErrorResponse},
    403: {"description": "Caller is not allowed", "model": ErrorResponse},
}


@router.post(
    "/add-user",
    response_model=LoginResponse,
    summary="Login or register",
    description=(
        "Creates the user on first login with role `donor` and status `active`. "
        "Later calls for the same email only refresh `last_loggedIn`."
    ),
)
async def add_user(
    payload: UserRegistration,
    service: UserService = Depends(get_user_service),
) -> LoginResponse:
    return await service.login_or_register(payload)


@router.get(
    "/user/{email}",
    response_model=UserOut,
    responses={**AUTH_ERRORS, 404: {"description": "No such user", "model": ErrorResponse}},
    dependencies=[Depends(get_verified_email)],
    summary="Get a user by email",
)
async def get_user(
    email: str,
    service: UserService = Depends(get_user_service),
) -> UserOut:
    return await service.get_user(email)


@router.put(
    "/user/{email}",
    response_model=MessageResponse,
    responses={**AUTH_ERRORS, 404: {"description": "No such user", "model": ErrorResponse}},
    summary="Edit own profile",
    description="Only the profile owner may edit it. Role, status and email are not editable.",
)
async def update_user(
    email: str,
    payload: UserProfileUpdate,
    caller_email: str = Depends(get_verified_email),
    service: UserService = Depends(get_user_service),
) -> MessageResponse:
    return await service.update_profile(caller_email, email, payload)


@router.get("/donors/search", response_model=List[UserOut], summary="Search donors")
async def search_donors(
    blood_group: Optional[str] = Query(default=None, alias="bloodGroup"),
    district: Optional[str] = None,
    upazila: Optional[str] = None,
    service: UserService = Depends(get_user_service),
) -> List[UserOut]:
    """Equality match on each supplied criterion; no criteria returns `[]`."""
    return await service.search_donors(blood_group, district, upazila)


@router.get("/all-users", response_model=List[UserOut], summary="List users")
async def list_users(
    status: Optional[UserStatus] = None,
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=0, ge=0, description="0 means no limit"),
    service: UserService = Depends(get_user_service),
) -> List[UserOut]:
    return await service.list_users(status=status.value if status else None, skip=skip, limit=limit)


@router.get("/all-users-count", response_model=CountResponse, summary="Count users")
async def count_users(
    status: Optional[UserStatus] = None,
    service: UserService = Depends(get_user_service),
) -> CountResponse:
    return await service.count_users(status=status.value if status else None)


@router.patch(
    "/user/{user_id}/role",
    response_model=UpdateResult,
    responses={**AUTH_ERRORS, 404: {"description": "No such user", "model": ErrorResponse}},
    dependencies=[Depends(admin_user)],
    summary="Set a user's role (admin)",
)
async def set_user_role(
    user_id: str,
    payload: RoleUpdate,
    service: UserService = Depends(get_user_service),
) -> UpdateResult:
    return await service.set_role(user_id, payload.role)


@router.patch(
    "/user/{user_id}/status",
    response_model=UpdateResult,
    responses={**AUTH_ERRORS, 404: {"description": "No such user", "model": ErrorResponse}},
    dependencies=[Depends(admin_user)],
    summary="Block or unblock a user (admin)",
)
async def set_user_status(
    user_id: str,
    payload: StatusUpdate,
    service: UserService = Depends(get_user_service),
) -> UpdateResult:
    return await service.set_status(user_id, payload.status)
