"""Authentication API routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.api.deps import get_db, require_auth
from app.schemas.auth import (
    AuthResponse,
    GoogleLoginRequest,
    LoginRequest,
    RegisterRequest,
    UserRead,
)
from app.services.auth import (
    AuthenticatedUser,
    AuthResult,
    authenticate_user,
    get_user,
    login_with_google,
    register_user,
)

router = APIRouter()


def _auth_response(message: str, result: AuthResult) -> AuthResponse:
    return AuthResponse(
        message=message,
        token=result.token,
        user=UserRead.model_validate(result.user),
    )


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(body: RegisterRequest, db: Session = Depends(get_db)) -> AuthResponse:
    """Create a password account and return a token for it."""
    result = register_user(db, body.email, body.password, body.name)
    return _auth_response("User created successfully", result)


@router.post("/login", response_model=AuthResponse)
def login(body: LoginRequest, db: Session = Depends(get_db)) -> AuthResponse:
    """Authenticate with email and password and return a JWT token."""
    result = authenticate_user(db, body.email, body.password)
    return _auth_response("Login successful", result)


@router.post("/google", response_model=AuthResponse)
def google_login(body: GoogleLoginRequest, db: Session = Depends(get_db)) -> AuthResponse:
    """Sign in with a Google ID token; creates or links the account on first use."""
    result = login_with_google(db, body.credential)
    return _auth_response("Google login successful", result)


@router.get("/me", response_model=UserRead)
def me(
    current_user: AuthenticatedUser = Depends(require_auth),
    db: Session = Depends(get_db),
) -> UserRead:
    """Return the currently authenticated user's information."""
    return UserRead.model_validate(get_user(db, current_user.user_id))
