"""
RedLife Backend - Authentication & Access Policies
==================================================

What:  The gate chain in front of protected routes.
How:   Two layers of FastAPI dependencies:

       1. get_verified_email   Bearer token → Firebase → verified email (401 on failure)
       2. AccessPolicy         one user lookup, one field check (403 on failure)

       Policies are declared per route and run in the order listed:

           @router.post(
               "/create-payment-intent",
               dependencies=[Depends(active_user)],
           )

       FastAPI caches get_verified_email per request, so a route combining
       several policies still verifies the token once.

Policies used by the routes:
    require_role(ADMIN)              admin-only endpoints
    require_role(VOLUNTEER, ADMIN)   blog management
    require_status(ACTIVE)           payments, funds, donation requests
"""

import logging
from enum import Enum
from typing import Any, Dict, Optional, Union

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from redlife.dependencies import get_identity_verifier, get_user_repository
from redlife.exceptions import AuthenticationError, GatewayError, PermissionDeniedError
from redlife.models.user import Role, UserStatus
from redlife.repositories.users import UserRepository
from redlife.services.identity_service import FirebaseIdentityVerifier

logger = logging.getLogger(__name__)

# auto_error=False: a missing header yields None and our own 401 envelope
bearer_scheme = HTTPBearer(auto_error=False)


async def get_verified_email(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    verifier: Optional[FirebaseIdentityVerifier] = Depends(get_identity_verifier),
) -> str:
    """
    Resolve the caller's verified email from `Authorization: Bearer <token>`.

    Raises:
        AuthenticationError: header absent or malformed, or token rejected
        GatewayError: identity provider not configured on this server
    """
    if credentials is None or not credentials.credentials:
        raise AuthenticationError()
    if verifier is None:
        raise GatewayError(message="Authentication is not configured", service="firebase")
    return await verifier.verify(credentials.credentials)


class AccessPolicy:
    """
    Dependency that admits callers whose user record has `field` in `allowed`.

    Returns the caller's user document so handlers can use it without a
    second lookup.
    """

    def __init__(self, field: str, allowed: frozenset):
        self.field = field
        self.allowed = allowed

    def __repr__(self) -> str:
        return f"AccessPolicy({self.field} in {sorted(self.allowed)})"

    async def __call__(
        self,
        email: str = Depends(get_verified_email),
        users: UserRepository = Depends(get_user_repository),
    ) -> Dict[str, Any]:
        user = await users.find_by_email(email)
        if user is None or user.get(self.field) not in self.allowed:
            logger.warning(
                "Access denied for %s: %s=%r not in %s",
                email,
                self.field,
                user.get(self.field) if user else None,
                sorted(self.allowed),
            )
            raise PermissionDeniedError()
        return user


def _values(items) -> frozenset:
    return frozenset(item.value if isinstance(item, Enum) else item for item in items)


def require_role(*roles: Union[str, Enum]) -> AccessPolicy:
    return AccessPolicy("role", _values(roles))


def require_status(*statuses: Union[str, Enum]) -> AccessPolicy:
    return AccessPolicy("status", _values(statuses))


# Shared instances: FastAPI caches dependencies by identity, so reusing the
# same object in `dependencies=` and as a parameter runs the lookup once.
active_user = require_status(UserStatus.ACTIVE)
admin_user = require_role(Role.ADMIN)
blog_editor = require_role(Role.VOLUNTEER, Role.ADMIN)
