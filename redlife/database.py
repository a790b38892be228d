"""
RedLife Backend - Database Client Management
============================================

What:  Async MongoDB client construction, index setup, FastAPI dependency and shutdown.
How:   The lifespan handler builds one AsyncMongoClient, stores it on `app.state`,
       and closes it on shutdown. Request handlers receive the database through
       `get_database`, never through a module-level global.
Who:   main.py (lifecycle), repositories (via dependencies.py), health route.

Connection Pooling:
    pymongo keeps its own connection pool per client (maxPoolSize=100 by
    default). The whole process shares a single client, so every concurrent
    request draws from that pool.
"""

import logging

from fastapi import Request
from pymongo import ASCENDING, DESCENDING, AsyncMongoClient
from pymongo.asynchronous.database import AsyncDatabase
from pymongo.errors import PyMongoError

from redlife.config import Settings
from redlife.exceptions import DatabaseError

logger = logging.getLogger(__name__)


# ── Collection Names ──────────────────────────────────────────────────────
# Existing deployments already hold data under these names.
USERS_COLLECTION = "users"
DONATIONS_COLLECTION = "Donation"
FUNDS_COLLECTION = "Funds"
BLOGS_COLLECTION = "Blogs"


def create_mongo_client(settings: Settings) -> AsyncMongoClient:
    """
    Build the process-wide MongoDB client.

    tz_aware=True: stored timestamps come back as aware UTC datetimes.
    The client connects lazily; nothing is sent until the first operation.
    """
    return AsyncMongoClient(
        settings.mongodb_uri,
        tz_aware=True,
        serverSelectionTimeoutMS=settings.mongodb_timeout_ms,
        appname="redlife-backend",
    )


async def ensure_indexes(db: AsyncDatabase) -> None:
    """
    Create the indexes the application relies on.

    Unique indexes back two invariants:
        users.email           one user record per email
        Funds.transactionId   one fund record per payment
    The rest speed up the equality filters used by list endpoints.
    """
    await db[USERS_COLLECTION].create_index("email", unique=True)
    await db[USERS_COLLECTION].create_index([("role", ASCENDING)])
    await db[USERS_COLLECTION].create_index(
        [("bloodGroup", ASCENDING), ("district", ASCENDING), ("upazila", ASCENDING)]
    )
    await db[DONATIONS_COLLECTION].create_index([("requesterEmail", ASCENDING)])
    await db[DONATIONS_COLLECTION].create_index([("donationStatus", ASCENDING)])
    await db[FUNDS_COLLECTION].create_index("transactionId", unique=True)
    await db[FUNDS_COLLECTION].create_index([("fundDate", DESCENDING)])
    await db[BLOGS_COLLECTION].create_index([("status", ASCENDING)])
    logger.info("MongoDB indexes ensured on database '%s'", db.name)


async def ping(db: AsyncDatabase) -> bool:
    """Lightweight connectivity check used by the health route."""
    try:
        await db.command("ping")
        return True
    except PyMongoError as e:
        logger.warning("MongoDB ping failed: %s", str(e))
        return False


# ── Request Dependency ────────────────────────────────────────────────────
def get_database(request: Request) -> AsyncDatabase:
    """
    FastAPI dependency that returns the application database handle.

    Raises:
        DatabaseError: lifespan did not run or the client failed to start.
    """
    db = getattr(request.app.state, "db", None)
    if db is None:
        raise DatabaseError(context={"reason": "database client is not initialized"})
    return db


async def close_mongo_client(client: AsyncMongoClient) -> None:
    """Close all pooled connections. Called during application shutdown."""
    await client.close()
