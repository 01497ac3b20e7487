"""API routes."""

from app.api.auth import router as auth_router
from app.api.watchlist import router as watchlist_router

__all__ = ["auth_router", "watchlist_router"]
