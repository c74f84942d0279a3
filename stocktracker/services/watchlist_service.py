"""Watchlist entries and their reconciliation with portfolio holdings.

Watchlist entries live in the same table as holdings. An entry added from
the watchlist page has zero shares and no cost basis; a holding joins the
watchlist by having its ``is_in_watchlist`` flag set, either by the user or
by ``sync_portfolio_to_watchlist``.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import UTC, datetime
from typing import Any

from stocktracker.core.exceptions import NotFoundError, ProviderError, ValidationError
from stocktracker.core.logging import get_logger
from stocktracker.repositories import stocks_orm as stocks_repo

from . import market_data
from .data_providers import QuoteProvider
from .stock_service import fetch_current_price, normalize_ticker, parse_number


logger = get_logger("services.watchlist")

# New watchlist targets aim 10% above the current price
DEFAULT_TARGET_MULTIPLIER = 1.10

HISTORY_DAYS = 30

ACTION_REMOVED = "removed"
ACTION_DELETED = "deleted"


@dataclass(frozen=True)
class SyncResult:
    """Outcome of a portfolio-to-watchlist sync."""

    examined: int
    updated: int

    def to_dict(self) -> dict[str, int]:
        return asdict(self)


async def list_watchlist() -> list[dict[str, Any]]:
    """Records flagged for the watchlist ordered by name."""
    return await stocks_repo.list_watchlist()


def _parse_target(target_price: Any) -> float:
    parsed = parse_number(target_price, "Invalid target price")
    if parsed <= 0:
        raise ValidationError(message="Invalid target price")
    return parsed


async def add_watchlist_entry(
    provider: QuoteProvider,
    *,
    name: Any,
    ticker: Any,
    target_price: Any,
) -> dict[str, Any]:
    """Persist a watchlist-only record priced from a live quote.

    Raises:
        ValidationError: missing name/ticker or non-positive target price
        ProviderError: no quote for the ticker
    """
    parsed_target = _parse_target(target_price)

    if not name or not str(name).strip() or not ticker or not str(ticker).strip():
        raise ValidationError(message="Missing required fields")

    symbol = normalize_ticker(str(ticker))
    current_price = await fetch_current_price(provider, symbol)

    stock = await stocks_repo.create_stock(
        name=str(name).strip(),
        ticker=symbol,
        shares=0,
        buy_price=0,
        current_price=current_price,
        target_price=parsed_target,
        is_in_watchlist=True,
    )
    logger.info(f"Stock added to watchlist: {stock['id']} ({symbol})")
    return stock


async def update_target_price(stock_id: int, target_price: Any) -> dict[str, Any]:
    """Change the target price of a watched record.

    Raises:
        ValidationError: non-positive target price (checked before lookup)
        NotFoundError: unknown id
    """
    parsed_target = _parse_target(target_price)

    updated = await stocks_repo.update_stock(
        stock_id,
        target_price=parsed_target,
        last_updated=datetime.now(UTC),
    )
    if not updated:
        raise NotFoundError(message="Stock not found")

    logger.info(f"Stock target price updated: {stock_id}")
    return updated


async def remove_from_watchlist(stock_id: int) -> str:
    """Take a record off the watchlist.

    Holdings keep their row and only lose the flag; watchlist-only records
    are deleted outright.

    Returns:
        ``"removed"`` when the flag was cleared, ``"deleted"`` when the
        record was deleted
    """
    stock = await stocks_repo.get_stock(stock_id)
    if not stock:
        raise NotFoundError(message="Stock not found")

    if stock["shares"] > 0:
        await stocks_repo.update_stock(stock_id, is_in_watchlist=False)
        action = ACTION_REMOVED
    else:
        await stocks_repo.delete_stock(stock_id)
        action = ACTION_DELETED

    logger.info(f"Stock {stock_id} {action} from watchlist")
    return action


def _sync_changes(stock: dict[str, Any]) -> dict[str, Any]:
    """Field changes that bring one holding in line with the watchlist."""
    changes: dict[str, Any] = {}
    if not stock["is_in_watchlist"]:
        changes["is_in_watchlist"] = True
    if not stock["target_price"]:
        default_target = stock["current_price"] * DEFAULT_TARGET_MULTIPLIER
        if default_target != stock["target_price"]:
            changes["target_price"] = default_target
    return changes


async def sync_portfolio_to_watchlist() -> SyncResult:
    """Put every active holding on the watchlist.

    Holdings without a target get one 10% above their current price.
    Records that are already in sync are not written, so repeating the call
    without other changes writes nothing. Updates run one row at a time; a
    failure part way through leaves earlier rows updated.
    """
    holdings = await stocks_repo.list_holdings()
    logger.info(f"Syncing {len(holdings)} portfolio stocks to watchlist")

    updated = 0
    for stock in holdings:
        changes = _sync_changes(stock)
        if not changes:
            continue
        await stocks_repo.update_stock(stock["id"], **changes)
        updated += 1

    logger.info(f"Portfolio sync updated {updated} of {len(holdings)} stocks")
    return SyncResult(examined=len(holdings), updated=updated)


async def get_price_history(provider: QuoteProvider, stock_id: int) -> dict[str, Any]:
    """Last 30 days of daily closes for a record, degraded to synthetic data.

    Returns:
        ``{"ticker", "source", "points"}`` where ``source`` is ``"live"`` or
        ``"synthetic"``
    """
    stock = await stocks_repo.get_stock(stock_id)
    if not stock:
        raise NotFoundError(message="Stock not found")

    to_ts = int(datetime.now(UTC).timestamp())
    from_ts = to_ts - HISTORY_DAYS * market_data.DAY_SECONDS
    try:
        history = await provider.get_historical_data(stock["ticker"], "D", from_ts, to_ts)
        points = market_data.history_points(history)
        source = "live"
    except ProviderError as e:
        logger.warning(f"Historical data unavailable for {stock['ticker']}, using synthetic: {e}")
        points = market_data.synthetic_history(stock["current_price"], days=HISTORY_DAYS)
        source = "synthetic"

    return {"ticker": stock["ticker"], "source": source, "points": points}
