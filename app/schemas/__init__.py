"""Pydantic schemas for request/response validation."""

from app.schemas.auth import (
    AuthResponse,
    GoogleLoginRequest,
    LoginRequest,
    RegisterRequest,
    UserRead,
)
from app.schemas.watchlist import (
    FavoriteRequest,
    MessageResponse,
    WatchlistAddRequest,
    WatchlistItemResponse,
    WatchlistListResponse,
)

__all__ = [
    "AuthResponse",
    "FavoriteRequest",
    "GoogleLoginRequest",
    "LoginRequest",
    "MessageResponse",
    "RegisterRequest",
    "UserRead",
    "WatchlistAddRequest",
    "WatchlistItemResponse",
    "WatchlistListResponse",
]
