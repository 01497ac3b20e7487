"""Shared FastAPI dependencies for API routes."""

from __future__ import annotations

from fastapi import Header

from app.db.session import get_db  # re-export
from app.services.auth import AuthenticatedUser, verify_access_token
from app.services.errors import AuthError

__all__ = [
    "get_db",
    "require_auth",
]

BEARER_SCHEME = "bearer"


def require_auth(authorization: str | None = Header(None)) -> AuthenticatedUser:
    """Dependency that requires a valid bearer token.

    Missing or non-Bearer Authorization header: 401.
    Token that fails verification (bad signature, expired, bad claims): 403.
    The scheme name is matched case-insensitively.
    """
    scheme, _, token = (authorization or "").partition(" ")
    token = token.strip()
    if scheme.lower() != BEARER_SCHEME or not token:
        raise AuthError("Access token required")
    return verify_access_token(token)
