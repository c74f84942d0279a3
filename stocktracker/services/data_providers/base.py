"""Quote provider interface and the value types it returns."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import asdict, dataclass, field
from typing import Any


@dataclass(frozen=True)
class Quote:
    """Real-time quote for one ticker."""

    ticker: str
    current_price: float
    change: float | None = None
    percent_change: float | None = None
    high: float | None = None
    low: float | None = None
    open: float | None = None
    previous_close: float | None = None
    timestamp: int | None = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class PriceHistory:
    """Closing prices keyed by unix timestamps (seconds), oldest first."""

    ticker: str
    resolution: str
    timestamps: list[int] = field(default_factory=list)
    prices: list[float] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


class QuoteProvider(ABC):
    """Market data source for current and historical prices.

    Implementations raise ``ProviderError`` when the provider cannot
    answer; they never return partial or zero-priced data.
    """

    name: str = "provider"

    @abstractmethod
    async def get_quote(self, ticker: str) -> Quote:
        """Fetch the latest quote for ``ticker``."""

    @abstractmethod
    async def get_historical_data(
        self,
        ticker: str,
        resolution: str,
        from_ts: int,
        to_ts: int,
    ) -> PriceHistory:
        """Fetch closing prices between two unix timestamps."""

    async def close(self) -> None:
        """Release network resources."""
