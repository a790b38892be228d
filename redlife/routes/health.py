"""
RedLife Backend - Health Check Routes
=====================================

What:  Liveness text at `/` and a dependency health report at `/health`.
Who:   Uptime monitors, container health checks, humans with a browser.

Status levels:
    - healthy:   MongoDB reachable, identity verifier and payments configured (HTTP 200)
    - degraded:  MongoDB reachable, but Firebase or Stripe not configured (HTTP 200)
    - unhealthy: MongoDB unreachable or client not started (HTTP 503)
"""

import logging
import time

from fastapi import APIRouter, Request, Response
from fastapi.responses import PlainTextResponse

from redlife import __version__
from redlife.database import ping
from redlife.schemas.common import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

# Initialized once when the module loads
_start_time = time.time()


@router.get("/", response_class=PlainTextResponse, summary="Liveness probe")
async def root() -> str:
    return "RedLife-server Running"


@router.get(
    "/health",
    response_model=HealthResponse,
    responses={503: {"description": "Database unreachable", "model": HealthResponse}},
    summary="Service health check",
)
async def health_check(request: Request, response: Response) -> HealthResponse:
    """
    Probe MongoDB with a `ping` command and report whether the identity
    verifier and payment issuer were configured at startup.
    """
    state = request.app.state
    overall = "healthy"

    db = getattr(state, "db", None)
    if db is not None and await ping(db):
        db_status = "connected"
    else:
        db_status = "disconnected"
        overall = "unhealthy"

    identity_status = (
        "configured" if getattr(state, "identity_verifier", None) is not None else "unconfigured"
    )
    payments = getattr(state, "payment_service", None)
    payments_status = payments.mode if payments is not None else "unconfigured"

    if overall == "healthy" and (
        identity_status == "unconfigured" or payments_status == "unconfigured"
    ):
        overall = "degraded"

    if overall == "unhealthy":
        response.status_code = 503
        logger.warning("Health check: database %s", db_status)

    return HealthResponse(
        status=overall,
        version=__version__,
        database=db_status,
        identity=identity_status,
        payments=payments_status,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
