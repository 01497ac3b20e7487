"""Watchlist schemas for request/response validation.

Wire format is camelCase (isFavorite, addedAt) to match the browser client.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, StrictBool


class WatchlistAddRequest(BaseModel):
    """Schema for adding a symbol to the watchlist."""

    symbol: str = Field(..., min_length=1, max_length=32)
    name: str = Field(..., min_length=1, max_length=255)


class FavoriteRequest(BaseModel):
    """Schema for toggling the favorite flag."""

    model_config = ConfigDict(populate_by_name=True)

    is_favorite: StrictBool = Field(..., alias="isFavorite")


class WatchlistItemResponse(BaseModel):
    """Schema for a watchlist item in the list response."""

    model_config = ConfigDict(populate_by_name=True)

    symbol: str
    name: str
    is_favorite: bool = Field(..., alias="isFavorite")
    added_at: datetime = Field(..., alias="addedAt")


class WatchlistListResponse(BaseModel):
    """Schema for the watchlist list response."""

    watchlist: list[WatchlistItemResponse]


class MessageResponse(BaseModel):
    message: str
