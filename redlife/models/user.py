"""
RedLife Backend - User Domain Model
===================================

What:  Role and account-status values.

Roles:
    donor       default for every new account
    volunteer   may manage blog posts
    admin       full control, including roles and statuses of other users

Statuses:
    active      may create donation requests and payments
    blocked     read-only account
"""

from enum import Enum


class Role(str, Enum):
    DONOR = "donor"
    VOLUNTEER = "volunteer"
    ADMIN = "admin"


class UserStatus(str, Enum):
    ACTIVE = "active"
    BLOCKED = "blocked"


DEFAULT_ROLE = Role.DONOR
DEFAULT_STATUS = UserStatus.ACTIVE
