"""API route modules."""

from . import health, stocks, watchlist


__all__ = ["health", "stocks", "watchlist"]
