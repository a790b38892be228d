"""
RedLife Backend - User Schemas
==============================

What:  Request and response bodies for the users endpoints.

Server-owned fields (role, status, created_at, last_loggedIn) are absent from
every input model, so a client cannot set them through registration or a
profile edit. They change only through the admin role/status endpoints.
"""

from datetime import datetime
from typing import Optional

from pydantic import EmailStr, Field

from redlife.models.user import Role, UserStatus
from redlife.schemas.common import APIModel, BloodGroup


class UserRegistration(APIModel):
    """Body of POST /add-user (login-or-register)."""

    email: EmailStr
    name: Optional[str] = Field(default=None, max_length=120)
    avatar: Optional[str] = Field(default=None, max_length=2048)
    blood_group: Optional[BloodGroup] = None
    district: Optional[str] = Field(default=None, max_length=80)
    upazila: Optional[str] = Field(default=None, max_length=80)


class UserProfileUpdate(APIModel):
    """Body of PUT /user/{email}. Only these fields are editable by the owner."""

    name: Optional[str] = Field(default=None, min_length=1, max_length=120)
    avatar: Optional[str] = Field(default=None, max_length=2048)
    blood_group: Optional[BloodGroup] = None
    district: Optional[str] = Field(default=None, max_length=80)
    upazila: Optional[str] = Field(default=None, max_length=80)


class RoleUpdate(APIModel):
    role: Role


class StatusUpdate(APIModel):
    status: UserStatus


class UserOut(APIModel):
    id: str = Field(alias="_id")
    email: str
    name: Optional[str] = None
    avatar: Optional[str] = None
    role: Role = Role.DONOR
    status: UserStatus = UserStatus.ACTIVE
    blood_group: Optional[str] = None
    district: Optional[str] = None
    upazila: Optional[str] = None
    created_at: Optional[datetime] = Field(default=None, alias="created_at")
    last_logged_in: Optional[datetime] = Field(default=None, alias="last_loggedIn")


class LoginResponse(APIModel):
    """
    Result of POST /add-user.

    created: True when this call registered the user, False when it only
             refreshed last_loggedIn on an existing record.
    """

    created: bool
    user: UserOut
