"""Watchlist service: per-user add, list, favorite and remove.

Every query is scoped by the caller's user id, which comes from a verified
token and never from the request body or path.
"""

from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.models import Watchlist
from app.services.errors import ConflictError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)


def _find_entry(db: Session, user_id: int, symbol: str) -> Watchlist | None:
    return (
        db.query(Watchlist)
        .filter(Watchlist.user_id == user_id, Watchlist.symbol == symbol)
        .first()
    )


def list_watchlist(db: Session, user_id: int) -> list[Watchlist]:
    """Return the user's entries, favorites first, then most recently added."""
    return (
        db.query(Watchlist)
        .filter(Watchlist.user_id == user_id)
        .order_by(
            Watchlist.is_favorite.desc(),
            Watchlist.added_at.desc(),
            Watchlist.id.desc(),
        )
        .all()
    )


def add_to_watchlist(db: Session, user_id: int, symbol: str, name: str) -> Watchlist:
    """Add a symbol to the user's watchlist.

    The symbol is stored exactly as given; clients send it uppercased.
    Raises ValidationError if symbol or name is empty and ConflictError if the
    pair already exists. The unique (user_id, symbol) constraint catches the
    case where a concurrent request inserted the same pair after our check.
    """
    if not symbol or not symbol.strip() or not name or not name.strip():
        raise ValidationError("Symbol and name are required")

    if _find_entry(db, user_id, symbol) is not None:
        raise ConflictError("Stock already in watchlist")

    entry = Watchlist(user_id=user_id, symbol=symbol, name=name, is_favorite=False)
    db.add(entry)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        logger.info("Concurrent add of %s for user id=%s", symbol, user_id)
        raise ConflictError("Stock already in watchlist") from exc
    db.refresh(entry)
    return entry


def set_favorite(db: Session, user_id: int, symbol: str, is_favorite: bool) -> Watchlist:
    """Set the favorite flag on an existing entry. Idempotent for repeated values."""
    if not isinstance(is_favorite, bool):
        raise ValidationError("isFavorite must be a boolean")

    entry = _find_entry(db, user_id, symbol)
    if entry is None:
        raise NotFoundError("Stock not found in watchlist")

    entry.is_favorite = is_favorite
    db.commit()
    db.refresh(entry)
    return entry


def remove_from_watchlist(db: Session, user_id: int, symbol: str) -> bool:
    """Delete the entry if present.

    Returns True if a row was deleted, False if there was nothing to delete.
    Removing an absent symbol is not an error.
    """
    deleted = (
        db.query(Watchlist)
        .filter(Watchlist.user_id == user_id, Watchlist.symbol == symbol)
        .delete(synchronize_session=False)
    )
    db.commit()
    return deleted > 0
