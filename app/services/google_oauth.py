"""Google ID token verification.

The browser obtains an ID token from Google Identity Services and posts it to
/api/auth/google. We check the RS256 signature against Google's published
JWKS, then audience, issuer, expiry and the email claims.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import httpx
from jose import JWTError, jwt

from app.config import get_settings
from app.services.errors import UpstreamError

logger = logging.getLogger(__name__)

GOOGLE_ISSUERS = ("accounts.google.com", "https://accounts.google.com")
ALGORITHM = "RS256"


@dataclass(frozen=True)
class GoogleIdentity:
    """Verified profile claims from a Google ID token."""

    subject: str
    email: str
    name: str | None = None
    picture: str | None = None


def fetch_google_certs() -> dict:
    """Fetch Google's current signing keys (JWKS). Raises UpstreamError on failure."""
    settings = get_settings()
    try:
        with httpx.Client(timeout=settings.google_timeout) as client:
            response = client.get(settings.google_certs_url)
            response.raise_for_status()
            return response.json()
    except httpx.HTTPStatusError as exc:
        logger.error("Google certs endpoint returned HTTP %s", exc.response.status_code)
        raise UpstreamError("Unable to verify Google token") from exc
    except (httpx.HTTPError, ValueError) as exc:
        logger.error("Failed to fetch Google certs: %s", exc)
        raise UpstreamError("Unable to verify Google token") from exc


def _select_key(jwks: dict, kid: str | None) -> dict | None:
    keys = jwks.get("keys") or []
    for key in keys:
        if key.get("kid") == kid:
            return key
    return None


def verify_google_id_token(credential: str, client_id: str | None = None) -> GoogleIdentity:
    """Verify a Google ID token and return its identity claims.

    Raises UpstreamError when sign-in is not configured, the token does not
    verify (signature, audience, issuer, expiry), or the email is missing or
    unverified.
    """
    audience = client_id or get_settings().google_client_id
    if not audience:
        logger.error("GOOGLE_CLIENT_ID is not configured; rejecting Google sign-in")
        raise UpstreamError("Google sign-in is not configured")

    try:
        header = jwt.get_unverified_header(credential)
    except JWTError as exc:
        logger.warning("Malformed Google ID token: %s", exc)
        raise UpstreamError("Invalid Google token") from exc

    key = _select_key(fetch_google_certs(), header.get("kid"))
    if key is None:
        logger.warning("Google ID token signed with unknown key id %s", header.get("kid"))
        raise UpstreamError("Invalid Google token")

    try:
        # No access token accompanies a sign-in credential, so at_hash cannot be checked
        claims = jwt.decode(
            credential,
            key,
            algorithms=[ALGORITHM],
            audience=audience,
            options={"verify_at_hash": False},
        )
    except JWTError as exc:
        logger.warning("Google ID token rejected: %s", exc)
        raise UpstreamError("Invalid Google token") from exc

    if claims.get("iss") not in GOOGLE_ISSUERS:
        logger.warning("Google ID token has unexpected issuer %s", claims.get("iss"))
        raise UpstreamError("Invalid Google token")

    subject = claims.get("sub")
    if not subject:
        raise UpstreamError("Invalid Google token")

    email = claims.get("email")
    if not email:
        raise UpstreamError("Email not provided by Google")
    # Google sends a bool; older tokens used the string "true"
    if claims.get("email_verified") not in (True, "true"):
        raise UpstreamError("Google email is not verified")

    return GoogleIdentity(
        subject=str(subject),
        email=email.strip().lower(),
        name=claims.get("name"),
        picture=claims.get("picture"),
    )
