"""
RedLife Backend - Test Configuration (conftest.py)
==================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy:
    ├── user_repo / donation_repo / fund_repo / blog_repo:
    │       MagicMock(spec=...) repositories; async methods are AsyncMocks
    ├── verifier:       FakeIdentityVerifier (token → email table, no Firebase)
    ├── payments:       mock StripePaymentService (no Stripe)
    ├── app:            fresh create_app() with every provider overridden
    └── test_client:    HTTPX AsyncClient talking to `app` over ASGITransport

The lifespan is never entered, so no MongoDB, Firebase or Stripe client is built.
"""

import os
from datetime import datetime, timezone
from typing import Dict
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

# Override settings for testing BEFORE any redlife imports
os.environ["MONGODB_URI"] = "mongodb://localhost:27017"
os.environ["FB_SERVICE_ACCOUNT_KEY"] = ""
os.environ["STRIPE_SECRET_KEY"] = ""
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["RATE_LIMIT_REQUESTS"] = "10000"

from redlife.dependencies import (  # noqa: E402
    get_blog_repository,
    get_donation_repository,
    get_fund_repository,
    get_identity_verifier,
    get_payment_service,
    get_user_repository,
)
from redlife.exceptions import AuthenticationError  # noqa: E402
from redlife.main import create_app  # noqa: E402
from redlife.repositories.base import UpdateOutcome  # noqa: E402
from redlife.repositories.blogs import BlogRepository  # noqa: E402
from redlife.repositories.donations import DonationRepository  # noqa: E402
from redlife.repositories.funds import FundRepository  # noqa: E402
from redlife.repositories.users import UserRepository  # noqa: E402
from redlife.services.payment_service import StripePaymentService  # noqa: E402

# 24-hex ObjectId strings
USER_ID = "65a1b2c3d4e5f6a7b8c9d0e1"
DONATION_ID = "65a1b2c3d4e5f6a7b8c9d0e2"
BLOG_ID = "65a1b2c3d4e5f6a7b8c9d0e3"

# Bearer token → verified email
TOKENS = {
    "donor-token": "donor@example.com",
    "blocked-token": "blocked@example.com",
    "volunteer-token": "volunteer@example.com",
    "admin-token": "admin@example.com",
    "stranger-token": "stranger@example.com",
}


def make_user(email: str, role: str = "donor", status: str = "active", **extra) -> Dict:
    now = datetime(2024, 1, 15, 12, 0, tzinfo=timezone.utc)
    return {
        "_id": USER_ID,
        "email": email,
        "name": email.split("@")[0].title(),
        "role": role,
        "status": status,
        "created_at": now,
        "last_loggedIn": now,
        **extra,
    }


USERS = {
    "donor@example.com": make_user("donor@example.com"),
    "blocked@example.com": make_user("blocked@example.com", status="blocked"),
    "volunteer@example.com": make_user("volunteer@example.com", role="volunteer"),
    "admin@example.com": make_user("admin@example.com", role="admin"),
}


def auth(token: str) -> Dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


class FakeIdentityVerifier:
    """Stands in for FirebaseIdentityVerifier; knows only the TOKENS table."""

    def __init__(self, tokens: Dict[str, str]):
        self.tokens = tokens
        self.calls = 0

    async def verify(self, token: str) -> str:
        self.calls += 1
        if token not in self.tokens:
            raise AuthenticationError(context={"reason": "InvalidIdTokenError"})
        return self.tokens[token]


# ══════════════════════════════════════════════════════════════════════════
# Repository Mocks
# ══════════════════════════════════════════════════════════════════════════


@pytest.fixture
def user_repo():
    """
    UserRepository mock preloaded with USERS for `find_by_email`.

    Usage:
        user_repo.find_by_email.return_value = None   # unknown caller
    """
    repo = MagicMock(spec=UserRepository)
    repo.find_by_email = AsyncMock(side_effect=lambda email: USERS.get(email))
    repo.update_by_email = AsyncMock(return_value=UpdateOutcome(1, 1))
    repo.update_by_id = AsyncMock(return_value=UpdateOutcome(1, 1))
    repo.insert = AsyncMock(return_value=USER_ID)
    repo.find = AsyncMock(return_value=[])
    repo.count = AsyncMock(return_value=0)
    return repo


@pytest.fixture
def donation_repo():
    repo = MagicMock(spec=DonationRepository)
    repo.insert = AsyncMock(return_value=DONATION_ID)
    repo.find = AsyncMock(return_value=[])
    repo.find_for_requester = AsyncMock(return_value=[])
    repo.find_by_id = AsyncMock(return_value=None)
    repo.count = AsyncMock(return_value=0)
    repo.count_for_requester = AsyncMock(return_value=0)
    repo.update_by_id = AsyncMock(return_value=UpdateOutcome(1, 1))
    repo.update_one = AsyncMock(return_value=UpdateOutcome(1, 1))
    repo.delete_by_id = AsyncMock(return_value=1)
    return repo


@pytest.fixture
def fund_repo():
    repo = MagicMock(spec=FundRepository)
    repo.insert = AsyncMock(return_value="65a1b2c3d4e5f6a7b8c9d0f0")
    repo.find_latest = AsyncMock(return_value=[])
    repo.estimated_count = AsyncMock(return_value=0)
    repo.total_amount = AsyncMock(return_value=0)
    return repo


@pytest.fixture
def blog_repo():
    repo = MagicMock(spec=BlogRepository)
    repo.insert = AsyncMock(return_value=BLOG_ID)
    repo.find = AsyncMock(return_value=[])
    repo.find_by_id = AsyncMock(return_value=None)
    repo.count = AsyncMock(return_value=0)
    repo.update_one = AsyncMock(return_value=UpdateOutcome(1, 1))
    repo.delete_by_id = AsyncMock(return_value=1)
    return repo


# ══════════════════════════════════════════════════════════════════════════
# External Clients
# ══════════════════════════════════════════════════════════════════════════


@pytest.fixture
def verifier():
    return FakeIdentityVerifier(TOKENS)


@pytest.fixture
def payments():
    service = MagicMock(spec=StripePaymentService)
    service.create_payment_intent = AsyncMock(return_value="pi_test_123_secret_abc")
    service.mode = "configured"
    return service


# ══════════════════════════════════════════════════════════════════════════
# Application
# ══════════════════════════════════════════════════════════════════════════


@pytest.fixture
def app(user_repo, donation_repo, fund_repo, blog_repo, verifier, payments):
    """A fresh app per test, wired to the mocks above."""
    application = create_app()
    application.dependency_overrides[get_user_repository] = lambda: user_repo
    application.dependency_overrides[get_donation_repository] = lambda: donation_repo
    application.dependency_overrides[get_fund_repository] = lambda: fund_repo
    application.dependency_overrides[get_blog_repository] = lambda: blog_repo
    application.dependency_overrides[get_identity_verifier] = lambda: verifier
    application.dependency_overrides[get_payment_service] = lambda: payments
    return application


@pytest_asyncio.fixture
async def test_client(app):
    """
    HTTPX AsyncClient configured to talk to the FastAPI app.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/")
            assert response.status_code == 200
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
