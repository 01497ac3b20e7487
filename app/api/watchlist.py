"""Watchlist API routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.deps import require_auth
from app.db.session import get_db
from app.schemas.watchlist import (
    FavoriteRequest,
    MessageResponse,
    WatchlistAddRequest,
    WatchlistItemResponse,
    WatchlistListResponse,
)
from app.services.auth import AuthenticatedUser
from app.services.watchlist_service import (
    add_to_watchlist,
    list_watchlist,
    remove_from_watchlist,
    set_favorite,
)

router = APIRouter()


@router.get("", response_model=WatchlistListResponse)
def api_list_watchlist(
    current_user: AuthenticatedUser = Depends(require_auth),
    db: Session = Depends(get_db),
) -> WatchlistListResponse:
    """List the caller's watchlist, favorites first."""
    entries = list_watchlist(db, current_user.user_id)
    return WatchlistListResponse(
        watchlist=[
            WatchlistItemResponse(
                symbol=e.symbol,
                name=e.name,
                is_favorite=e.is_favorite,
                added_at=e.added_at,
            )
            for e in entries
        ]
    )


@router.post("/add", response_model=MessageResponse, status_code=201)
def api_add_to_watchlist(
    data: WatchlistAddRequest,
    current_user: AuthenticatedUser = Depends(require_auth),
    db: Session = Depends(get_db),
) -> MessageResponse:
    """Add a symbol to the caller's watchlist."""
    add_to_watchlist(db, current_user.user_id, data.symbol, data.name)
    return MessageResponse(message="Stock added to watchlist")


@router.put("/favorite/{symbol}", response_model=MessageResponse)
def api_set_favorite(
    symbol: str,
    data: FavoriteRequest,
    current_user: AuthenticatedUser = Depends(require_auth),
    db: Session = Depends(get_db),
) -> MessageResponse:
    """Mark or unmark a watchlist entry as favorite."""
    entry = set_favorite(db, current_user.user_id, symbol, data.is_favorite)
    state = "favorited" if entry.is_favorite else "unfavorited"
    return MessageResponse(message=f"Stock {state} successfully")


@router.delete("/remove/{symbol}", response_model=MessageResponse)
def api_remove_from_watchlist(
    symbol: str,
    current_user: AuthenticatedUser = Depends(require_auth),
    db: Session = Depends(get_db),
) -> MessageResponse:
    """Remove a symbol from the caller's watchlist. Absent symbols are not an error."""
    remove_from_watchlist(db, current_user.user_id, symbol)
    return MessageResponse(message="Stock removed from watchlist")
