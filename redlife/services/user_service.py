"""
RedLife Backend - User Service
==============================

What:  Account rules on top of UserRepository.
Who:   Users and admin route handlers.

Rules:
    - POST /add-user is login-or-register. The first call for an email
      creates the record with server-stamped role/status/timestamps; every
      later call only refreshes `last_loggedIn`.
    - A profile edit must come from the profile's owner (verified email ==
      path email). Role, status and email are not editable there.
    - Role and status change only through the admin endpoints.
"""

import logging
from datetime import datetime, timezone
from typing import List, Optional

from redlife.exceptions import (
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from redlife.models.user import DEFAULT_ROLE, DEFAULT_STATUS, Role
from redlife.repositories.base import build_filter
from redlife.repositories.users import UserRepository
from redlife.schemas.common import CountResponse, MessageResponse, UpdateResult
from redlife.schemas.user import (
    LoginResponse,
    UserOut,
    UserProfileUpdate,
    UserRegistration,
)

logger = logging.getLogger(__name__)


class UserService:
    def __init__(self, users: UserRepository):
        self.users = users

    async def login_or_register(self, payload: UserRegistration) -> LoginResponse:
        """
        Create the user on first login, otherwise refresh `last_loggedIn`.

        Two concurrent first logins race on the unique email index; the
        loser falls through to the refresh path, so one record remains.
        """
        now = datetime.now(timezone.utc)
        email = payload.email

        existing = await self.users.find_by_email(email)
        if existing is None:
            document = {
                **payload.to_document(),
                "role": DEFAULT_ROLE.value,
                "status": DEFAULT_STATUS.value,
                "created_at": now,
                "last_loggedIn": now,
            }
            try:
                inserted_id = await self.users.insert(document)
            except ConflictError:
                logger.info("User %s was registered concurrently; refreshing login", email)
            else:
                logger.info("Registered new user %s", email)
                return LoginResponse(
                    created=True,
                    user=UserOut.model_validate({**document, "_id": inserted_id}),
                )

        await self.users.update_by_email(email, {"last_loggedIn": now})
        user = await self.users.find_by_email(email)
        if user is None:
            raise NotFoundError(resource="user", resource_id=email)
        return LoginResponse(created=False, user=UserOut.model_validate(user))

    async def get_user(self, email: str) -> UserOut:
        user = await self.users.find_by_email(email)
        if user is None:
            raise NotFoundError(resource="user", resource_id=email)
        return UserOut.model_validate(user)

    async def update_profile(
        self, caller_email: str, email: str, payload: UserProfileUpdate
    ) -> MessageResponse:
        """
        Owner-only partial profile update.

        Raises:
            PermissionDeniedError: caller is not the profile owner (no write happens)
            ValidationError: nothing editable in the payload
            NotFoundError: no user with that email
        """
        if caller_email != email:
            logger.warning("User %s attempted to edit profile of %s", caller_email, email)
            raise PermissionDeniedError(message="You can only edit your own profile")

        fields = payload.to_document()
        if not fields:
            raise ValidationError(message="No editable profile fields supplied")

        outcome = await self.users.update_by_email(email, fields)
        if outcome.matched_count == 0:
            raise NotFoundError(resource="user", resource_id=email)
        return MessageResponse(message="User updated successfully")

    async def set_role(self, user_id: str, role: str) -> UpdateResult:
        return await self._admin_update(user_id, {"role": role})

    async def set_status(self, user_id: str, status: str) -> UpdateResult:
        return await self._admin_update(user_id, {"status": status})

    async def _admin_update(self, user_id: str, fields: dict) -> UpdateResult:
        outcome = await self.users.update_by_id(user_id, fields)
        if outcome.matched_count == 0:
            raise NotFoundError(resource="user", resource_id=user_id)
        logger.info("Admin update on user %s: %s", user_id, fields)
        return UpdateResult(
            matched_count=outcome.matched_count,
            modified_count=outcome.modified_count,
        )

    async def list_users(
        self, status: Optional[str] = None, skip: int = 0, limit: int = 0
    ) -> List[UserOut]:
        docs = await self.users.find(build_filter(status=status), skip=skip, limit=limit)
        return [UserOut.model_validate(doc) for doc in docs]

    async def count_users(self, status: Optional[str] = None) -> CountResponse:
        return CountResponse(count=await self.users.count(build_filter(status=status)))

    async def count_donors(self) -> CountResponse:
        return CountResponse(count=await self.users.count({"role": Role.DONOR.value}))

    async def search_donors(
        self,
        blood_group: Optional[str] = None,
        district: Optional[str] = None,
        upazila: Optional[str] = None,
    ) -> List[UserOut]:
        """Donor directory search. No criteria at all returns an empty list."""
        query = build_filter(bloodGroup=blood_group, district=district, upazila=upazila)
        if not query:
            return []
        docs = await self.users.find(query)
        return [UserOut.model_validate(doc) for doc in docs]
