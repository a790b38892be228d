"""
RedLife Backend - Custom Exception Hierarchy
============================================

What:  Application-specific exceptions for different error scenarios.
How:   Each exception class carries a message, an optional context dict, its
       HTTP status and a machine-readable error code. One global handler
       (registered in main.py) turns any of them into the same JSON envelope.
Who:   Raised by repositories, services, access policies and middleware.

Exception Hierarchy:
    RedLifeError (base)
    ├── ValidationError          → 400 Bad Request
    ├── AuthenticationError      → 401 Unauthorized
    ├── PermissionDeniedError    → 403 Forbidden
    ├── NotFoundError            → 404 Not Found
    ├── ConflictError            → 409 Conflict
    │   └── InvalidTransitionError
    ├── RateLimitExceededError   → 429 Too Many Requests
    ├── GatewayError             → 500 Internal Server Error (Stripe / Firebase)
    └── DatabaseError            → 500 Internal Server Error

Error envelope:
    {
        "error": "forbidden",
        "message": "You do not have access to this resource",
        "details": {...},          # only for client-side (4xx) errors
        "request_id": "a1b2c3d4"
    }
"""

from typing import Any, Dict, Iterable, Optional


class RedLifeError(Exception):
    """
    Base exception for all RedLife application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info; returned as `details` for 4xx errors,
                  logged only for 5xx errors
    """

    status_code: int = 500
    error_code: str = "server_error"

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)

    @property
    def is_server_error(self) -> bool:
        return self.status_code >= 500

    def to_response_body(self, request_id: str = "") -> Dict[str, Any]:
        """Serialize into the standard error envelope."""
        body: Dict[str, Any] = {"error": self.error_code, "message": self.message}
        if self.context and not self.is_server_error:
            body["details"] = self.context
        body["request_id"] = request_id
        return body


class ValidationError(RedLifeError):
    """
    Raised when client input fails validation.

    When:  Missing or non-numeric payment amount, malformed ObjectId,
           an edit payload with nothing editable left in it.
    HTTP:  400 Bad Request. FastAPI's own schema errors are mapped to the
           same code in main.py.
    """

    status_code = 400
    error_code = "validation_error"

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class AuthenticationError(RedLifeError):
    """
    Raised when the bearer credential is missing, malformed or rejected
    by the identity provider.
    """

    status_code = 401
    error_code = "unauthenticated"

    def __init__(
        self,
        message: str = "Unauthorized access",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class PermissionDeniedError(RedLifeError):
    """
    Raised when an authenticated caller fails a role, status or ownership check.
    """

    status_code = 403
    error_code = "forbidden"

    def __init__(
        self,
        message: str = "Forbidden access",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(RedLifeError):
    """
    Raised when a requested resource does not exist.

    The driver returns None (or a zero matched/deleted count) for missing
    documents; services convert that into this exception.
    """

    status_code = 404
    error_code = "not_found"

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id:
            message = f"{resource} '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class ConflictError(RedLifeError):
    """
    Raised when a write collides with existing state (e.g. a unique index).
    """

    status_code = 409
    error_code = "conflict"

    def __init__(
        self,
        message: str = "The resource already exists",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class InvalidTransitionError(ConflictError):
    """
    Raised when a status change is not an edge of the resource's lifecycle.

    Example:
        done → pending on a donation request
    """

    error_code = "invalid_transition"

    def __init__(
        self,
        resource: str,
        current: str,
        target: str,
        allowed: Iterable[str] = (),
        terminal: bool = False,
    ):
        allowed_list = sorted(allowed)
        message = f"Cannot change {resource} status from '{current}' to '{target}'"
        if terminal:
            message += f" ('{current}' is final)"
        super().__init__(
            message=message,
            context={
                "resource": resource,
                "current": current,
                "target": target,
                "allowed": allowed_list,
                "terminal": terminal,
            },
        )
        self.current = current
        self.target = target


class RateLimitExceededError(RedLifeError):
    """
    Raised when a client exceeds the per-IP request rate limit.

    Response includes a Retry-After header.
    """

    status_code = 429
    error_code = "rate_limit_exceeded"

    def __init__(
        self,
        retry_after: int = 60,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = (
            f"Too many requests. Please wait {retry_after} seconds before retrying."
        )
        ctx = context or {}
        ctx["retry_after"] = retry_after
        super().__init__(message=message, context=ctx)
        self.retry_after = retry_after


class GatewayError(RedLifeError):
    """
    Raised when an external service (Stripe, Firebase) fails or is not configured.

    There is no retry; the failure surfaces immediately. The SDK error is kept
    in `context` for the server log and never returned to the client.
    """

    status_code = 500
    error_code = "gateway_error"

    def __init__(
        self,
        message: str = "An external service request failed",
        service: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if service:
            ctx["service"] = service
        super().__init__(message=message, context=ctx)
        self.service = service


class DatabaseError(RedLifeError):
    """
    Raised when database operations fail unexpectedly.

    Security Note:
        The message returned to the client is always generic. Driver details
        (collection, operation, error class) are logged server-side only.
    """

    status_code = 500
    error_code = "server_error"

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
