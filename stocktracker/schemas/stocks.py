"""Stock (portfolio holding) schemas for API validation.

Numeric request fields accept numbers or numeric strings; range and
presence checks happen in the service layer so every bad value is
reported as a 400 with a specific message.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


# Raw JSON value; booleans and non-numeric strings are rejected by the service
NumberInput = Any


class StockCreateRequest(BaseModel):
    """Request to add a holding."""
    name: str | None = Field(None, max_length=255)
    ticker: str | None = Field(None, max_length=20)
    shares: NumberInput = None
    buy_price: NumberInput = None
    target_price: NumberInput = None


class StockUpdateRequest(BaseModel):
    """Partial update of a holding; omitted fields keep their value."""
    name: str | None = Field(None, max_length=255)
    ticker: str | None = Field(None, max_length=20)
    shares: NumberInput = None
    buy_price: NumberInput = None


class StockResponse(BaseModel):
    """A stored stock with derived metrics."""
    id: int
    name: str
    ticker: str
    shares: float
    buy_price: float
    current_price: float
    target_price: float
    is_in_watchlist: bool
    kind: str = Field(..., description="holding or watchlist")
    last_updated: str | None = None
    created_at: str | None = None
    updated_at: str | None = None

    # Derived; None where undefined (no cost basis / no target)
    position_value: float = 0.0
    gain_percent: float | None = None
    distance_to_target: float | None = None


class PortfolioSummaryResponse(BaseModel):
    """Aggregates over active holdings, serialized in camelCase."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    total_value: float
    total_gain: float
    total_gain_percent: float
    stock_count: int
    average_return_percent: float


class QuoteResponse(BaseModel):
    """Real-time quote passed through from the provider."""
    ticker: str
    current_price: float
    change: float | None = None
    percent_change: float | None = None
    high: float | None = None
    low: float | None = None
    open: float | None = None
    previous_close: float | None = None
    timestamp: int | None = None


class PriceHistoryResponse(BaseModel):
    """Raw candle closes for an explicit range."""
    ticker: str
    resolution: str
    timestamps: list[int]
    prices: list[float]


class PricePoint(BaseModel):
    """One chart point."""
    time: str
    price: float
