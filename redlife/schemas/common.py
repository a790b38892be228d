"""
RedLife Backend - Shared Pydantic Schemas
=========================================

What:  Base model for camelCase API payloads plus the response shapes shared
       by several resources (write outcomes, counts, errors, health).
How:   `APIModel` maps snake_case attributes to the camelCase keys the
       frontend and the stored documents use. Unknown keys are dropped on
       input; wrong types and unknown enum values are rejected (400).
"""

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

BloodGroup = Literal["A+", "A-", "B+", "B-", "AB+", "AB-", "O+", "O-"]


class APIModel(BaseModel):
    """Base for every request/response body exchanged with the frontend."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=True,
        extra="ignore",
    )

    def to_document(self) -> dict:
        """Wire-shaped dict ready for MongoDB (camelCase, no unset/None fields)."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


# ══════════════════════════════════════════════════════════════════════════
# Write Outcomes
# ══════════════════════════════════════════════════════════════════════════


class InsertResult(APIModel):
    """Returned by create endpoints: `{"acknowledged": true, "insertedId": "..."}`."""

    acknowledged: bool = True
    inserted_id: str


class UpdateResult(APIModel):
    acknowledged: bool = True
    matched_count: int
    modified_count: int


class DeleteResult(APIModel):
    acknowledged: bool = True
    deleted_count: int


class CountResponse(APIModel):
    count: int = Field(ge=0)


class TotalResponse(APIModel):
    total: float


class MessageResponse(APIModel):
    message: str


# ══════════════════════════════════════════════════════════════════════════
# Error / Health Models
# ══════════════════════════════════════════════════════════════════════════


class ErrorResponse(BaseModel):
    """
    Standardized error envelope for all API errors.

    Example:
        {
            "error": "invalid_transition",
            "message": "Cannot change donation request status from 'done' to 'pending' ('done' is final)",
            "details": {"current": "done", "target": "pending", "allowed": [], "terminal": True},
            "request_id": "1f0c9a2e"
        }
    """

    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """Health check response showing service and dependency status."""

    status: str = Field(description="Overall service status: healthy, degraded, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="MongoDB connectivity: connected, disconnected")
    identity: str = Field(description="Firebase identity verifier: configured, unconfigured")
    payments: str = Field(description="Stripe issuer: configured, demo, unconfigured")
    uptime_seconds: float = Field(description="Seconds since service started")
