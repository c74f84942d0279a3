"""Data providers - centralized external market data access."""

from .base import PriceHistory, Quote, QuoteProvider
from .finnhub_service import (
    FinnhubService,
    close_finnhub_service,
    get_finnhub_service,
)


def get_quote_provider() -> QuoteProvider:
    """Quote provider used by the API; override in tests."""
    return get_finnhub_service()


__all__ = [
    "FinnhubService",
    "PriceHistory",
    "Quote",
    "QuoteProvider",
    "close_finnhub_service",
    "get_finnhub_service",
    "get_quote_provider",
]
