"""Service-layer exceptions.

Each error carries the HTTP status it maps to and a message that is safe to
show to the client. Internal detail belongs in the logs, never in ``message``.
"""

from __future__ import annotations


class ServiceError(Exception):
    """Base class for errors surfaced to API clients."""

    status_code: int = 500
    default_message: str = "Server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(ServiceError):
    """Malformed input."""

    status_code = 400
    default_message = "Validation failed"

    def __init__(
        self, message: str | None = None, errors: list[dict[str, str]] | None = None
    ) -> None:
        super().__init__(message)
        self.errors = errors or []


class ConflictError(ServiceError):
    """Duplicate email or duplicate watchlist entry."""

    status_code = 400
    default_message = "Resource already exists"


class AuthError(ServiceError):
    """Bad credentials or missing token."""

    status_code = 401
    default_message = "Invalid credentials"


class TokenError(AuthError):
    """Bearer token failed verification (signature, expiry, claims)."""

    status_code = 403
    default_message = "Invalid or expired token"


class NotFoundError(ServiceError):
    status_code = 404
    default_message = "Not found"


class UpstreamError(ServiceError):
    """Identity provider rejected or could not verify a credential."""

    status_code = 400
    default_message = "Invalid token"


class InternalError(ServiceError):
    status_code = 500
    default_message = "Server error"
