"""
Domain Exceptions
Raised by services, rendered as {"success": false, "error": ...} by app.main.
"""

from typing import Any, Optional


SESSION_INVALID_MESSAGE = "Invalid session, please log in again"


class AppError(Exception):
    """Base class for errors surfaced to API clients."""

    status_code: int = 500
    message: str = "Internal server error"
    headers: Optional[dict] = None

    def __init__(self, message: Optional[str] = None, details: Any = None) -> None:
        self.message = message or self.message
        self.details = details
        super().__init__(self.message)


class ValidationError(AppError):
    """Malformed or out-of-range input, rejected before any write."""

    status_code = 400
    message = "Validation failed"

    def __init__(self, field: str, message: str) -> None:
        self.field = field
        super().__init__(message, details=[{"field": field, "message": message}])


class NotFoundError(AppError):
    """Missing resource. Also used when the resource belongs to someone else."""

    status_code = 404

    def __init__(self, resource: str = "Resource") -> None:
        super().__init__(f"{resource} not found")


class ConflictError(AppError):
    status_code = 409

    def __init__(self, field: str, message: Optional[str] = None) -> None:
        self.field = field
        super().__init__(
            message or f"{field.capitalize()} already in use",
            details=[{"field": field, "message": "must be unique"}],
        )


class ForbiddenError(AppError):
    status_code = 403
    message = "Administrator access required"


class AuthError(AppError):
    """Authentication failure. Refresh-token subclasses share one public message."""

    status_code = 401
    message = SESSION_INVALID_MESSAGE


class TokenNotFoundError(AuthError):
    pass


class TokenExpiredError(AuthError):
    pass


class TokenReusedError(AuthError):
    """A used refresh token was presented again; its family has been revoked."""

    def __init__(self, family: str) -> None:
        self.family = family
        super().__init__()


class TokenFingerprintError(AuthError):
    pass


class TokenOwnerInactiveError(AuthError):
    """Refresh by a deactivated account; reported like any other invalid session."""


class InactiveUserError(AuthError):
    message = "User account is deactivated"


class InvalidCredentialsError(AuthError):
    message = "Invalid credentials"


class NotAuthenticatedError(AuthError):
    message = "Not authenticated"


class RateLimitExceededError(AppError):
    status_code = 429
    message = "Too many requests from this IP, please try again later."

    def __init__(self, message: Optional[str] = None, retry_after: int = 0) -> None:
        super().__init__(message)
        self.retry_after = retry_after
        self.headers = {"Retry-After": str(max(retry_after, 1))}
