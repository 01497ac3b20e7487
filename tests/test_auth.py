"""Tests for the authentication service: hashing, tokens, register, login, Google sign-in."""

from __future__ import annotations

import time
from datetime import timedelta
from unittest.mock import patch

import pytest
from jose import jwt
from sqlalchemy.orm import Session

from app.models.user import User
from app.services.auth import (
    ALGORITHM,
    AuthenticatedUser,
    authenticate_user,
    create_access_token,
    decode_access_token,
    issue_token,
    login_with_google,
    register_user,
    verify_access_token,
)
from app.services.errors import AuthError, ConflictError, TokenError, UpstreamError, ValidationError
from app.services.google_oauth import GoogleIdentity
from tests.test_constants import (
    MALFORMED_EMAILS,
    TEST_EMAIL,
    TEST_PASSWORD,
    TEST_PASSWORD_WRONG,
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _make_user(email: str = TEST_EMAIL, password: str | None = None) -> User:
    """Create a User instance with a hashed password (no DB)."""
    user = User(id=1, email=email)
    user.set_password(password if password is not None else TEST_PASSWORD)
    return user


def _google_identity(**overrides) -> GoogleIdentity:
    fields = {
        "subject": "google-sub-123",
        "email": TEST_EMAIL,
        "name": "Google Name",
        "picture": "https://example.com/g.png",
    }
    fields.update(overrides)
    return GoogleIdentity(**fields)


# ---------------------------------------------------------------------------
# Unit tests: password hashing and tokens
# ---------------------------------------------------------------------------


class TestPasswordVerification:
    def test_correct_password(self):
        user = _make_user(password=TEST_PASSWORD)
        assert user.verify_password(TEST_PASSWORD) is True

    def test_wrong_password(self):
        user = _make_user(password=TEST_PASSWORD)
        assert user.verify_password(TEST_PASSWORD_WRONG) is False

    def test_hash_is_salted(self):
        a = _make_user(password=TEST_PASSWORD)
        b = _make_user(password=TEST_PASSWORD)
        assert a.password_hash != b.password_hash
        assert TEST_PASSWORD not in a.password_hash

    def test_google_only_account_never_verifies(self):
        user = User(id=1, email=TEST_EMAIL, google_id="g-1")
        assert user.has_password is False
        assert user.verify_password("") is False
        assert user.verify_password(TEST_PASSWORD) is False

    def test_over_long_password_does_not_verify(self):
        user = _make_user(password=TEST_PASSWORD)
        assert user.verify_password("x" * 100) is False


class TestAccessToken:
    def test_create_and_decode_token(self):
        token = create_access_token(data={"sub": "1", "email": TEST_EMAIL})
        payload = decode_access_token(token)
        assert payload is not None
        assert payload["sub"] == "1"
        assert payload["email"] == TEST_EMAIL
        assert "exp" in payload

    def test_default_lifetime_is_seven_days(self):
        token = create_access_token(data={"sub": "1"})
        payload = jwt.get_unverified_claims(token)
        header = jwt.get_unverified_header(token)
        assert header["alg"] == ALGORITHM
        remaining = payload["exp"] - time.time()
        assert timedelta(days=7) - timedelta(minutes=1) < timedelta(seconds=remaining)
        assert timedelta(seconds=remaining) <= timedelta(days=7)

    def test_invalid_token_returns_none(self):
        result = decode_access_token("not.a.valid.token")
        assert result is None

    def test_tampered_token_returns_none(self):
        token = create_access_token(data={"sub": "1"})
        # Tamper with the token
        tampered = token[:-4] + "XXXX"
        result = decode_access_token(tampered)
        assert result is None

    def test_expired_token_returns_none(self):
        token = create_access_token(data={"sub": "1"}, expires_delta=timedelta(seconds=-5))
        assert decode_access_token(token) is None

    def test_token_signed_with_other_secret_returns_none(self):
        forged = jwt.encode({"sub": "1", "email": TEST_EMAIL}, "other-secret", algorithm=ALGORITHM)
        assert decode_access_token(forged) is None


class TestVerifyAccessToken:
    def test_issue_and_verify_roundtrip(self):
        user = User(id=42, email=TEST_EMAIL)
        identity = verify_access_token(issue_token(user))
        assert identity == AuthenticatedUser(user_id=42, email=TEST_EMAIL)

    def test_invalid_token_raises_token_error(self):
        with pytest.raises(TokenError) as exc_info:
            verify_access_token("garbage")
        assert exc_info.value.status_code == 403
        assert exc_info.value.message == "Invalid or expired token"

    def test_non_numeric_subject_rejected(self):
        token = create_access_token(data={"sub": "admin", "email": TEST_EMAIL})
        with pytest.raises(TokenError):
            verify_access_token(token)

    def test_missing_email_claim_rejected(self):
        token = create_access_token(data={"sub": "1"})
        with pytest.raises(TokenError):
            verify_access_token(token)


# ---------------------------------------------------------------------------
# Service tests: register / login (SQLite)
# ---------------------------------------------------------------------------


class TestRegisterUser:
    def test_register_then_login_returns_same_user_id(self, db: Session):
        registered = register_user(db, TEST_EMAIL, TEST_PASSWORD, "Trader")
        logged_in = authenticate_user(db, TEST_EMAIL, TEST_PASSWORD)

        assert registered.user.id == logged_in.user.id
        assert verify_access_token(registered.token).user_id == registered.user.id
        assert verify_access_token(logged_in.token).user_id == registered.user.id

    def test_register_stores_hash_not_password(self, db: Session):
        result = register_user(db, TEST_EMAIL, TEST_PASSWORD)
        assert result.user.password_hash
        assert result.user.password_hash != TEST_PASSWORD
        assert result.user.google_id is None
        assert result.user.created_at is not None

    def test_register_normalizes_email(self, db: Session):
        result = register_user(db, "  Trader@Example.COM ", TEST_PASSWORD)
        assert result.user.email == TEST_EMAIL

    @pytest.mark.parametrize("second_password", [TEST_PASSWORD, TEST_PASSWORD_WRONG])
    def test_duplicate_email_conflicts_regardless_of_password(self, db: Session, second_password):
        register_user(db, TEST_EMAIL, TEST_PASSWORD)
        with pytest.raises(ConflictError, match="already exists"):
            register_user(db, TEST_EMAIL, second_password)
        assert db.query(User).count() == 1

    def test_duplicate_caught_by_unique_constraint(self, db: Session):
        """A concurrent insert that slips past the pre-check still maps to ConflictError."""
        register_user(db, TEST_EMAIL, TEST_PASSWORD)
        with patch("app.services.auth.get_user_by_email", return_value=None):
            with pytest.raises(ConflictError):
                register_user(db, TEST_EMAIL, TEST_PASSWORD)
        assert db.query(User).count() == 1

    def test_short_password_rejected(self, db: Session):
        with pytest.raises(ValidationError) as exc_info:
            register_user(db, TEST_EMAIL, "12345")
        assert exc_info.value.errors[0]["field"] == "password"
        assert db.query(User).count() == 0

    def test_bad_email_rejected(self, db: Session):
        with pytest.raises(ValidationError) as exc_info:
            register_user(db, "not-an-email", TEST_PASSWORD)
        assert exc_info.value.errors[0]["field"] == "email"

    @pytest.mark.parametrize("email", MALFORMED_EMAILS)
    def test_malformed_email_rejected(self, db: Session, email: str):
        with pytest.raises(ValidationError) as exc_info:
            register_user(db, email, TEST_PASSWORD)
        assert exc_info.value.errors[0]["field"] == "email"
        assert db.query(User).count() == 0


class TestAuthenticateUser:
    def test_wrong_password_and_unknown_email_look_the_same(self, db: Session):
        register_user(db, TEST_EMAIL, TEST_PASSWORD)

        with pytest.raises(AuthError) as wrong_password:
            authenticate_user(db, TEST_EMAIL, TEST_PASSWORD_WRONG)
        with pytest.raises(AuthError) as unknown_email:
            authenticate_user(db, "nobody@example.com", TEST_PASSWORD)

        assert wrong_password.value.message == unknown_email.value.message == "Invalid credentials"
        assert wrong_password.value.status_code == unknown_email.value.status_code == 401

    def test_google_only_account_gets_distinct_message(self, db: Session):
        db.add(User(email=TEST_EMAIL, google_id="google-sub-123"))
        db.commit()

        with pytest.raises(AuthError) as exc_info:
            authenticate_user(db, TEST_EMAIL, TEST_PASSWORD)
        assert exc_info.value.message == "Please sign in with Google"
        assert exc_info.value.status_code == 401


# ---------------------------------------------------------------------------
# Service tests: Google sign-in and account linking
# ---------------------------------------------------------------------------


class TestLoginWithGoogle:
    def test_creates_new_user_without_password(self, db: Session):
        with patch("app.services.auth.verify_google_id_token", return_value=_google_identity()):
            result = login_with_google(db, "credential")

        user = result.user
        assert user.email == TEST_EMAIL
        assert user.google_id == "google-sub-123"
        assert user.name == "Google Name"
        assert user.picture == "https://example.com/g.png"
        assert user.password_hash is None
        assert verify_access_token(result.token).user_id == user.id

    def test_links_existing_password_account(self, db: Session):
        registered = register_user(db, TEST_EMAIL, TEST_PASSWORD, "Original")
        original_hash = registered.user.password_hash

        with patch("app.services.auth.verify_google_id_token", return_value=_google_identity()):
            result = login_with_google(db, "credential")

        assert result.user.id == registered.user.id
        assert result.user.google_id == "google-sub-123"
        assert result.user.name == "Google Name"
        assert result.user.password_hash == original_hash
        assert db.query(User).count() == 1

        # Password login still works after linking
        assert authenticate_user(db, TEST_EMAIL, TEST_PASSWORD).user.id == registered.user.id

    def test_returning_google_user_is_not_duplicated(self, db: Session):
        with patch("app.services.auth.verify_google_id_token", return_value=_google_identity()):
            first = login_with_google(db, "credential")
            second = login_with_google(db, "credential")
        assert first.user.id == second.user.id
        assert db.query(User).count() == 1

    def test_existing_link_is_not_overwritten(self, db: Session):
        with patch("app.services.auth.verify_google_id_token", return_value=_google_identity()):
            login_with_google(db, "credential")
        renamed = _google_identity(name="New Name")
        with patch("app.services.auth.verify_google_id_token", return_value=renamed):
            result = login_with_google(db, "credential")
        assert result.user.name == "Google Name"

    def test_verification_failure_propagates(self, db: Session):
        with patch(
            "app.services.auth.verify_google_id_token",
            side_effect=UpstreamError("Invalid Google token"),
        ):
            with pytest.raises(UpstreamError):
                login_with_google(db, "credential")
        assert db.query(User).count() == 0
