"""SQLAlchemy models."""

from app.models.user import User
from app.models.watchlist import Watchlist

__all__ = [
    "User",
    "Watchlist",
]
