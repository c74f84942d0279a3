"""Stocks repository using SQLAlchemy ORM.

CRUD operations over the ``stocks`` table, which backs both the portfolio
and the watchlist. Every function opens its own session and commits a
single row change, so multi-row callers get no cross-row atomicity.

Usage:
    from stocktracker.repositories import stocks_orm as stocks_repo

    holdings = await stocks_repo.list_holdings()
    stock = await stocks_repo.update_stock(stock_id, is_in_watchlist=True)
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from sqlalchemy import func, select

from stocktracker.core.logging import get_logger
from stocktracker.database.connection import get_session
from stocktracker.database.orm import Stock


logger = get_logger("repositories.stocks_orm")

UPDATABLE_FIELDS = frozenset(
    {
        "name",
        "ticker",
        "shares",
        "buy_price",
        "current_price",
        "target_price",
        "is_in_watchlist",
        "last_updated",
    }
)

DEFAULT_STOCKS: list[dict[str, Any]] = [
    {
        "name": "Apple Inc.",
        "ticker": "AAPL",
        "shares": 1,
        "buy_price": 175.50,
        "current_price": 175.50,
        "target_price": 200.00,
        "is_in_watchlist": True,
    },
    {
        "name": "Microsoft Corporation",
        "ticker": "MSFT",
        "shares": 1,
        "buy_price": 350.00,
        "current_price": 350.00,
        "target_price": 400.00,
        "is_in_watchlist": True,
    },
    {
        "name": "Amazon.com Inc.",
        "ticker": "AMZN",
        "shares": 1,
        "buy_price": 145.00,
        "current_price": 145.00,
        "target_price": 170.00,
        "is_in_watchlist": True,
    },
    {
        "name": "NVIDIA Corporation",
        "ticker": "NVDA",
        "shares": 1,
        "buy_price": 480.00,
        "current_price": 480.00,
        "target_price": 550.00,
        "is_in_watchlist": True,
    },
    {
        "name": "Tesla Inc.",
        "ticker": "TSLA",
        "shares": 1,
        "buy_price": 240.00,
        "current_price": 240.00,
        "target_price": 280.00,
        "is_in_watchlist": True,
    },
]


def _now() -> datetime:
    return datetime.now(UTC)


# =============================================================================
# READS
# =============================================================================


async def list_holdings() -> list[dict[str, Any]]:
    """List active holdings (shares > 0) ordered by name."""
    async with get_session() as session:
        result = await session.execute(
            select(Stock).where(Stock.shares > 0).order_by(Stock.name)
        )
        return [_stock_to_dict(s) for s in result.scalars().all()]


async def list_watchlist() -> list[dict[str, Any]]:
    """List records flagged for the watchlist ordered by name."""
    async with get_session() as session:
        result = await session.execute(
            select(Stock)
            .where(Stock.is_in_watchlist == True)  # noqa: E712
            .order_by(Stock.name)
        )
        return [_stock_to_dict(s) for s in result.scalars().all()]


async def list_all_stocks() -> list[dict[str, Any]]:
    """List every record regardless of kind."""
    async with get_session() as session:
        result = await session.execute(select(Stock).order_by(Stock.id))
        return [_stock_to_dict(s) for s in result.scalars().all()]


async def get_stock(stock_id: int) -> dict[str, Any] | None:
    """Get a record by ID.

    Returns:
        Stock dict or None if not found
    """
    async with get_session() as session:
        stock = await session.get(Stock, stock_id)
        return _stock_to_dict(stock) if stock else None


async def count_stocks() -> int:
    """Count all records."""
    async with get_session() as session:
        result = await session.execute(select(func.count()).select_from(Stock))
        return int(result.scalar_one())


# =============================================================================
# WRITES
# =============================================================================


async def create_stock(
    *,
    name: str,
    ticker: str,
    shares: float,
    buy_price: float,
    current_price: float,
    target_price: float,
    is_in_watchlist: bool,
) -> dict[str, Any]:
    """Insert a new record.

    Returns:
        Created stock as dict
    """
    async with get_session() as session:
        stock = Stock(
            name=name,
            ticker=ticker,
            shares=shares,
            buy_price=buy_price,
            current_price=current_price,
            target_price=target_price,
            is_in_watchlist=is_in_watchlist,
            last_updated=_now(),
        )
        session.add(stock)
        await session.commit()
        await session.refresh(stock)

        logger.info(f"Created stock {stock.id} ({stock.ticker})")
        return _stock_to_dict(stock)


async def update_stock(stock_id: int, **fields: Any) -> dict[str, Any] | None:
    """Apply field changes to one record.

    Args:
        stock_id: The record to update
        **fields: Column values to set; unknown names raise ``ValueError``

    Returns:
        Updated stock dict or None if not found
    """
    unknown = set(fields) - UPDATABLE_FIELDS
    if unknown:
        raise ValueError(f"Cannot update fields: {sorted(unknown)}")

    async with get_session() as session:
        stock = await session.get(Stock, stock_id)
        if not stock:
            return None

        for key, value in fields.items():
            setattr(stock, key, value)

        await session.commit()
        await session.refresh(stock)
        return _stock_to_dict(stock)


async def delete_stock(stock_id: int) -> bool:
    """Delete a record.

    Returns:
        True if deleted, False if not found
    """
    async with get_session() as session:
        stock = await session.get(Stock, stock_id)
        if not stock:
            return False

        await session.delete(stock)
        await session.commit()
        logger.info(f"Deleted stock {stock_id}")
        return True


async def update_price_for_ticker(ticker: str, current_price: float) -> int:
    """Set ``current_price`` on every record carrying ``ticker``.

    Returns:
        Number of records updated
    """
    async with get_session() as session:
        result = await session.execute(select(Stock).where(Stock.ticker == ticker))
        stocks = result.scalars().all()
        now = _now()
        for stock in stocks:
            stock.current_price = current_price
            stock.last_updated = now
        await session.commit()
        return len(stocks)


async def seed_default_stocks(
    defaults: list[dict[str, Any]] | None = None,
) -> int:
    """Insert the default stocks when the table is empty.

    Safe to call on every startup: a non-empty table is left untouched.

    Returns:
        Number of records inserted
    """
    existing = await count_stocks()
    if existing:
        logger.info(f"Found {existing} existing stocks, skipping seed")
        return 0

    rows = DEFAULT_STOCKS if defaults is None else defaults
    now = _now()
    async with get_session() as session:
        session.add_all(Stock(**row, last_updated=now) for row in rows)
        await session.commit()

    logger.info(f"Seeded {len(rows)} default stocks")
    return len(rows)


def _stock_to_dict(stock: Stock) -> dict[str, Any]:
    """Convert Stock ORM model to dict."""
    return {
        "id": stock.id,
        "name": stock.name,
        "ticker": stock.ticker,
        "shares": float(stock.shares or 0),
        "buy_price": float(stock.buy_price or 0),
        "current_price": float(stock.current_price or 0),
        "target_price": float(stock.target_price or 0),
        "is_in_watchlist": bool(stock.is_in_watchlist),
        "kind": stock.kind,
        "last_updated": stock.last_updated.isoformat() if stock.last_updated else None,
        "created_at": stock.created_at.isoformat() if stock.created_at else None,
        "updated_at": stock.updated_at.isoformat() if stock.updated_at else None,
    }
