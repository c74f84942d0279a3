"""Finnhub quote provider.

Wraps the two Finnhub REST endpoints the tracker needs:

- ``/quote`` for the latest price of a ticker
- ``/stock/candle`` for closing prices over a time range

Finnhub answers unknown tickers with an all-zero quote and empty ranges
with ``{"s": "no_data"}``; both are reported as ``ProviderError``.
"""

from __future__ import annotations

from typing import Any, Optional

import httpx

from stocktracker.core.config import settings
from stocktracker.core.exceptions import ProviderError
from stocktracker.core.logging import get_logger

from .base import PriceHistory, Quote, QuoteProvider


logger = get_logger("services.finnhub")


class FinnhubService(QuoteProvider):
    """Quote provider backed by the Finnhub REST API."""

    name = "finnhub"

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
        client: httpx.AsyncClient | None = None,
    ):
        self.api_key = settings.finnhub_api_key if api_key is None else api_key
        self.base_url = (base_url or settings.finnhub_base_url).rstrip("/")
        self.timeout = float(timeout or settings.external_api_timeout)
        self._client = client
        self._owns_client = client is None

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                headers={"X-Finnhub-Token": self.api_key},
            )
        return self._client

    async def _get(self, path: str, params: dict[str, Any]) -> dict[str, Any]:
        if not self.is_configured:
            raise ProviderError(message="Finnhub API key is not configured")

        try:
            response = await self._get_client().get(path, params=params)
        except httpx.TimeoutException:
            logger.warning(f"Timeout calling Finnhub {path} for {params.get('symbol')}")
            raise ProviderError(message="Market data provider timed out")
        except httpx.HTTPError as e:
            logger.warning(f"Error calling Finnhub {path}: {e}")
            raise ProviderError(message="Market data provider unavailable")

        if response.status_code != 200:
            logger.warning(
                f"Finnhub {path} returned {response.status_code} for {params.get('symbol')}"
            )
            raise ProviderError(
                message="Market data provider request failed",
                details={"upstream_status": response.status_code},
            )

        try:
            data = response.json()
        except ValueError:
            raise ProviderError(message="Market data provider returned invalid JSON")

        if not isinstance(data, dict):
            logger.warning(f"Finnhub {path} returned a non-object payload")
            raise ProviderError(message="Market data provider returned an unexpected payload")
        return data

    async def get_quote(self, ticker: str) -> Quote:
        """Fetch the latest quote.

        Raises:
            ProviderError: on transport failure or when Finnhub has no price
        """
        symbol = ticker.strip().upper()
        data = await self._get("/quote", {"symbol": symbol})

        current = data.get("c")
        if not current:
            logger.info(f"No quote available for {symbol}")
            raise ProviderError(
                message="Unable to fetch current price for ticker",
                details={"ticker": symbol},
            )

        return Quote(
            ticker=symbol,
            current_price=float(current),
            change=_as_float(data.get("d")),
            percent_change=_as_float(data.get("dp")),
            high=_as_float(data.get("h")),
            low=_as_float(data.get("l")),
            open=_as_float(data.get("o")),
            previous_close=_as_float(data.get("pc")),
            timestamp=data.get("t"),
        )

    async def get_historical_data(
        self,
        ticker: str,
        resolution: str,
        from_ts: int,
        to_ts: int,
    ) -> PriceHistory:
        """Fetch closing prices from ``/stock/candle``.

        Raises:
            ProviderError: on transport failure or when the range has no data
        """
        symbol = ticker.strip().upper()
        data = await self._get(
            "/stock/candle",
            {"symbol": symbol, "resolution": resolution, "from": from_ts, "to": to_ts},
        )

        if data.get("s") != "ok":
            raise ProviderError(
                message="Failed to fetch historical data",
                details={"ticker": symbol, "status": data.get("s")},
            )

        timestamps = [int(t) for t in data.get("t") or []]
        prices = [float(c) for c in data.get("c") or []]
        return PriceHistory(
            ticker=symbol,
            resolution=resolution,
            timestamps=timestamps,
            prices=prices,
        )

    async def close(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None


def _as_float(value: Any) -> float | None:
    return float(value) if value is not None else None


# Singleton instance
_instance: Optional[FinnhubService] = None


def get_finnhub_service() -> FinnhubService:
    """Get singleton FinnhubService instance."""
    global _instance
    if _instance is None:
        _instance = FinnhubService()
    return _instance


async def close_finnhub_service() -> None:
    """Close the singleton's HTTP client."""
    global _instance
    if _instance is not None:
        await _instance.close()
        _instance = None
