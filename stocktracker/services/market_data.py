"""Historical price helpers and the synthetic fallback."""

from __future__ import annotations

import time
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

import numpy as np

from stocktracker.core.logging import get_logger

from .data_providers import PriceHistory, QuoteProvider


logger = get_logger("services.market_data")

DAY_SECONDS = 24 * 60 * 60


@dataclass(frozen=True)
class ChartPeriod:
    """Candle resolution and lookback window for a chart period."""

    resolution: str
    lookback_seconds: int


PERIODS: dict[str, ChartPeriod] = {
    "1D": ChartPeriod("5", DAY_SECONDS),
    "1W": ChartPeriod("15", 7 * DAY_SECONDS),
    "1M": ChartPeriod("60", 30 * DAY_SECONDS),
    "3M": ChartPeriod("D", 90 * DAY_SECONDS),
    "1Y": ChartPeriod("D", 365 * DAY_SECONDS),
    "ALL": ChartPeriod("W", 5 * 365 * DAY_SECONDS),
}
DEFAULT_PERIOD = "1D"

SYNTHETIC_DAYS = 30
SYNTHETIC_VARIATION = 0.10


def resolve_period(period: str | None, now: int | None = None) -> tuple[str, int, int]:
    """Map a chart period to ``(resolution, from_ts, to_ts)``.

    Unknown periods fall back to one day of 5-minute candles.
    """
    to_ts = int(time.time()) if now is None else now
    chart = PERIODS.get((period or DEFAULT_PERIOD).upper(), PERIODS[DEFAULT_PERIOD])
    return chart.resolution, to_ts - chart.lookback_seconds, to_ts


def history_points(history: PriceHistory) -> list[dict]:
    """Zip a candle series into ``{time, price}`` points with ISO-8601 times."""
    return [
        {
            "time": datetime.fromtimestamp(ts, tz=UTC).isoformat(),
            "price": price,
        }
        for ts, price in zip(history.timestamps, history.prices)
    ]


async def get_period_history(
    provider: QuoteProvider,
    ticker: str,
    period: str | None,
) -> list[dict]:
    """Fetch a chart period from the provider as ``{time, price}`` points."""
    resolution, from_ts, to_ts = resolve_period(period)
    history = await provider.get_historical_data(ticker, resolution, from_ts, to_ts)
    return history_points(history)


def synthetic_history(
    current_price: float,
    days: int = SYNTHETIC_DAYS,
    seed: int | None = None,
    today: datetime | None = None,
) -> list[dict]:
    """Daily points scattered within +/-5% of ``current_price``.

    Used only when live history is unavailable; values are placeholders,
    not market data.
    """
    rng = np.random.default_rng(seed)
    end = today or datetime.now(UTC)
    variations = (rng.random(days) - 0.5) * SYNTHETIC_VARIATION
    prices = current_price * (1 + variations)

    return [
        {
            "time": (end - timedelta(days=days - 1 - i)).isoformat(),
            "price": round(float(price), 2),
        }
        for i, price in enumerate(prices)
    ]
