"""Authentication service: registration, login, Google sign-in and JWT tokens."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

from email_validator import EmailNotValidError, validate_email
from jose import JWTError, jwt
from sqlalchemy import case, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.config import get_settings
from app.models.user import BCRYPT_MAX_PASSWORD_BYTES, User
from app.services.errors import AuthError, ConflictError, TokenError, ValidationError
from app.services.google_oauth import verify_google_id_token

logger = logging.getLogger(__name__)

# JWT configuration
ALGORITHM = "HS256"

MIN_PASSWORD_LENGTH = 6

INVALID_CREDENTIALS = "Invalid credentials"
USE_GOOGLE_SIGN_IN = "Please sign in with Google"


@dataclass(frozen=True)
class AuthenticatedUser:
    """Identity taken from a verified bearer token."""

    user_id: int
    email: str


@dataclass
class AuthResult:
    """Token plus the user it was issued for."""

    token: str
    user: User


def normalize_email(email: str) -> str:
    return email.strip().lower()


def validate_credentials(email: str, password: str) -> None:
    """Re-check the registration rules for callers that bypass request schemas."""
    errors: list[dict[str, str]] = []
    try:
        validate_email(email or "", check_deliverability=False)
    except EmailNotValidError as exc:
        errors.append({"field": "email", "message": f"Invalid email address: {exc}"})
    if len(password or "") < MIN_PASSWORD_LENGTH:
        errors.append(
            {
                "field": "password",
                "message": f"Password must be at least {MIN_PASSWORD_LENGTH} characters",
            }
        )
    elif len(password.encode("utf-8")) > BCRYPT_MAX_PASSWORD_BYTES:
        errors.append(
            {
                "field": "password",
                "message": f"Password must be at most {BCRYPT_MAX_PASSWORD_BYTES} bytes",
            }
        )
    if errors:
        raise ValidationError("Validation failed", errors=errors)


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    return db.query(User).filter(User.email == normalize_email(email)).first()


def create_user(db: Session, email: str, password: str, name: str | None = None) -> User:
    """Create a new password user. Raises ConflictError if the email is taken."""
    user = User(email=normalize_email(email), name=name or None)
    user.set_password(password)
    db.add(user)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise ConflictError("User already exists with this email") from exc
    db.refresh(user)
    return user


def register_user(
    db: Session, email: str, password: str, name: str | None = None
) -> AuthResult:
    """Register a password account and issue its first token."""
    email = normalize_email(email)
    validate_credentials(email, password)

    if get_user_by_email(db, email) is not None:
        raise ConflictError("User already exists with this email")

    user = create_user(db, email, password, name)
    logger.info("Registered user id=%s", user.id)
    return AuthResult(token=issue_token(user), user=user)


def authenticate_user(db: Session, email: str, password: str) -> AuthResult:
    """Validate credentials and issue a token.

    Unknown email and wrong password raise the same AuthError so callers
    cannot discover which emails are registered. Google-only accounts get a
    distinct message pointing at Google sign-in.
    """
    user = get_user_by_email(db, email)
    if user is None:
        raise AuthError(INVALID_CREDENTIALS)
    if not user.has_password:
        raise AuthError(USE_GOOGLE_SIGN_IN)
    if not user.verify_password(password):
        logger.info("Failed password login for user id=%s", user.id)
        raise AuthError(INVALID_CREDENTIALS)
    return AuthResult(token=issue_token(user), user=user)


def _find_google_user(db: Session, google_id: str, email: str) -> Optional[User]:
    # Prefer the row already linked to this Google account over an email match
    return (
        db.query(User)
        .filter(or_(User.google_id == google_id, User.email == email))
        .order_by(case((User.google_id == google_id, 0), else_=1))
        .first()
    )


def login_with_google(db: Session, credential: str) -> AuthResult:
    """Sign in with a Google ID token, creating or linking the account as needed."""
    identity = verify_google_id_token(credential)

    user = _find_google_user(db, identity.subject, identity.email)
    if user is None:
        user = User(
            email=identity.email,
            google_id=identity.subject,
            name=identity.name,
            picture=identity.picture,
        )
        db.add(user)
        try:
            db.commit()
        except IntegrityError:
            # Lost a race with a concurrent sign-in for the same account
            db.rollback()
            user = _find_google_user(db, identity.subject, identity.email)
            if user is None:
                raise
        else:
            db.refresh(user)
            logger.info("Created Google user id=%s", user.id)
    elif not user.google_id:
        # Account linking: the password hash is left untouched
        user.google_id = identity.subject
        user.name = identity.name
        user.picture = identity.picture
        db.commit()
        db.refresh(user)
        logger.info("Linked Google account to user id=%s", user.id)

    return AuthResult(token=issue_token(user), user=user)


def get_user(db: Session, user_id: int) -> User:
    user = db.query(User).filter(User.id == user_id).first()
    if user is None:
        raise AuthError("User not found")
    return user


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create a signed JWT access token."""
    settings = get_settings()
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(days=settings.access_token_expire_days)
    )
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.secret_key, algorithm=ALGORITHM)


def decode_access_token(token: str) -> Optional[dict]:
    """Decode and validate a JWT token. Returns payload or None."""
    settings = get_settings()
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[ALGORITHM])
        return payload
    except JWTError:
        return None


def issue_token(user: User) -> str:
    return create_access_token(data={"sub": str(user.id), "email": user.email})


def verify_access_token(token: str) -> AuthenticatedUser:
    """Turn a bearer token into an AuthenticatedUser. Raises TokenError on any failure."""
    payload = decode_access_token(token)
    if payload is None:
        raise TokenError()
    try:
        user_id = int(payload["sub"])
        email = str(payload["email"])
    except (KeyError, TypeError, ValueError):
        raise TokenError() from None
    return AuthenticatedUser(user_id=user_id, email=email)
