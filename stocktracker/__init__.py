"""Stock Tracker - personal portfolio and watchlist API."""

__version__ = "1.0.0"
