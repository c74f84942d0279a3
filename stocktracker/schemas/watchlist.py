"""Watchlist schemas for API validation."""

from __future__ import annotations

from pydantic import BaseModel, Field

from .stocks import NumberInput, PricePoint


class WatchlistCreateRequest(BaseModel):
    """Request to watch a ticker without holding it."""
    name: str | None = Field(None, max_length=255)
    ticker: str | None = Field(None, max_length=20)
    target_price: NumberInput = None


class WatchlistUpdateRequest(BaseModel):
    """Request to change a target price."""
    target_price: NumberInput = None


class WatchlistRemoveResponse(BaseModel):
    """Result of taking a record off the watchlist."""
    message: str
    action: str = Field(..., description="removed (flag cleared) or deleted")


class WatchlistSyncResponse(BaseModel):
    """Result of syncing portfolio holdings into the watchlist."""
    message: str
    examined: int
    updated: int


class WatchlistHistoryResponse(BaseModel):
    """Recent price history for a watched record."""
    ticker: str
    source: str = Field(..., description="live or synthetic")
    points: list[PricePoint]
