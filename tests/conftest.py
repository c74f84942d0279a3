"""Pytest configuration and fixtures."""

from __future__ import annotations

import os

# Settings are read at import time; point them at test-friendly values first
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("LOG_FORMAT", "text")
os.environ.setdefault("SEED_DEFAULT_STOCKS", "false")
os.environ.setdefault("PRICE_REFRESH_INTERVAL_SECONDS", "0")
os.environ.setdefault("FINNHUB_API_KEY", "test-key")

from typing import AsyncGenerator  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import create_async_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from stocktracker.core.exceptions import ProviderError  # noqa: E402
from stocktracker.services.data_providers import (  # noqa: E402
    PriceHistory,
    Quote,
    QuoteProvider,
)

# Configure asyncio
pytest_plugins = ["pytest_asyncio"]


class FakeQuoteProvider(QuoteProvider):
    """In-memory quote provider.

    Tickers present in ``prices`` quote successfully; any other ticker
    raises ``ProviderError`` like an unknown symbol on Finnhub.
    """

    name = "fake"
    is_configured = True

    def __init__(self, prices: dict[str, float] | None = None):
        self.prices: dict[str, float] = dict(prices or {})
        self.histories: dict[str, PriceHistory] = {}
        self.quote_calls: list[str] = []
        self.history_calls: list[tuple[str, str, int, int]] = []

    async def get_quote(self, ticker: str) -> Quote:
        symbol = ticker.strip().upper()
        self.quote_calls.append(symbol)
        if symbol not in self.prices:
            raise ProviderError(
                message="Unable to fetch current price for ticker",
                details={"ticker": symbol},
            )
        return Quote(ticker=symbol, current_price=self.prices[symbol])

    async def get_historical_data(
        self,
        ticker: str,
        resolution: str,
        from_ts: int,
        to_ts: int,
    ) -> PriceHistory:
        symbol = ticker.strip().upper()
        self.history_calls.append((symbol, resolution, from_ts, to_ts))
        if symbol not in self.histories:
            raise ProviderError(message="Failed to fetch historical data")
        return self.histories[symbol]


@pytest_asyncio.fixture
async def db() -> AsyncGenerator[None, None]:
    """Fresh in-memory SQLite database bound to the session factory."""
    import stocktracker.database.connection as db_conn
    from stocktracker.database.orm import Base

    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    db_conn.bind_engine(engine)

    yield

    await engine.dispose()
    db_conn._engine = None
    db_conn._session_factory = None


@pytest.fixture
def provider() -> FakeQuoteProvider:
    """Quote provider knowing a handful of tickers."""
    return FakeQuoteProvider(
        {
            "AAPL": 190.0,
            "MSFT": 410.0,
            "NVDA": 880.0,
            "TSLA": 175.0,
        }
    )


@pytest_asyncio.fixture
async def async_client(db, provider) -> AsyncGenerator[AsyncClient, None]:
    """Async test client for the API app with the fake provider injected."""
    from stocktracker.api.app import create_api_app
    from stocktracker.services.data_providers import get_quote_provider

    app = create_api_app()
    app.dependency_overrides[get_quote_provider] = lambda: provider
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def sample_holdings() -> list[dict]:
    """Holdings as returned by the stocks repository."""
    return [
        {"id": 1, "ticker": "AAPL", "shares": 10, "buy_price": 100.0, "current_price": 110.0, "target_price": 120.0},
        {"id": 2, "ticker": "MSFT", "shares": 5, "buy_price": 200.0, "current_price": 180.0, "target_price": 250.0},
        {"id": 3, "ticker": "TSLA", "shares": 0, "buy_price": 0.0, "current_price": 175.0, "target_price": 150.0},
    ]
