"""
RedLife Backend - Dependency Providers
======================================

What:  FastAPI dependencies that hand repositories, services and external
       clients to route handlers.
How:   The lifespan stores the long-lived clients on `app.state`; these
       providers read them per request and build the cheap per-request
       wrappers (repositories, services) around them.
Who:   Routes and access policies. Tests replace any of them through
       `app.dependency_overrides`.
"""

from typing import Optional

from fastapi import Depends, Request
from pymongo.asynchronous.database import AsyncDatabase

from redlife.database import get_database
from redlife.repositories.blogs import BlogRepository
from redlife.repositories.donations import DonationRepository
from redlife.repositories.funds import FundRepository
from redlife.repositories.users import UserRepository
from redlife.services.blog_service import BlogService
from redlife.services.donation_service import DonationService
from redlife.services.fund_service import FundService
from redlife.services.identity_service import FirebaseIdentityVerifier
from redlife.services.payment_service import StripePaymentService
from redlife.services.user_service import UserService

# ── External Clients ──────────────────────────────────────────────────────


def get_identity_verifier(request: Request) -> Optional[FirebaseIdentityVerifier]:
    return getattr(request.app.state, "identity_verifier", None)


def get_payment_service(request: Request) -> Optional[StripePaymentService]:
    return getattr(request.app.state, "payment_service", None)


# ── Repositories ──────────────────────────────────────────────────────────


def get_user_repository(db: AsyncDatabase = Depends(get_database)) -> UserRepository:
    return UserRepository(db)


def get_donation_repository(db: AsyncDatabase = Depends(get_database)) -> DonationRepository:
    return DonationRepository(db)


def get_fund_repository(db: AsyncDatabase = Depends(get_database)) -> FundRepository:
    return FundRepository(db)


def get_blog_repository(db: AsyncDatabase = Depends(get_database)) -> BlogRepository:
    return BlogRepository(db)


# ── Services ──────────────────────────────────────────────────────────────


def get_user_service(users: UserRepository = Depends(get_user_repository)) -> UserService:
    return UserService(users)


def get_donation_service(
    donations: DonationRepository = Depends(get_donation_repository),
) -> DonationService:
    return DonationService(donations)


def get_fund_service(funds: FundRepository = Depends(get_fund_repository)) -> FundService:
    return FundService(funds)


def get_blog_service(blogs: BlogRepository = Depends(get_blog_repository)) -> BlogService:
    return BlogService(blogs)
