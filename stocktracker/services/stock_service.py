"""Portfolio holdings: validation, quote lookup and persistence."""

from __future__ import annotations

import math
from datetime import UTC, datetime
from typing import Any

from stocktracker.core.exceptions import NotFoundError, ProviderError, ValidationError
from stocktracker.core.logging import get_logger
from stocktracker.repositories import stocks_orm as stocks_repo

from . import valuation
from .data_providers import QuoteProvider


logger = get_logger("services.stocks")


def parse_number(value: Any, message: str) -> float:
    """Coerce a request value to a finite float or raise ``ValidationError``."""
    if isinstance(value, bool):
        raise ValidationError(message=message)
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(message=message)
    if not math.isfinite(number):
        raise ValidationError(message=message)
    return number


def normalize_ticker(ticker: str) -> str:
    return ticker.strip().upper()


def _is_missing(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


async def fetch_current_price(provider: QuoteProvider, ticker: str) -> float:
    """Latest price for ``ticker``; ``ProviderError`` when unavailable."""
    quote = await provider.get_quote(ticker)
    if not quote.current_price:
        raise ProviderError(
            message="Unable to fetch current price for ticker",
            details={"ticker": ticker},
        )
    return quote.current_price


async def list_holdings() -> list[dict[str, Any]]:
    """Active holdings ordered by name."""
    return await stocks_repo.list_holdings()


async def get_holding(stock_id: int) -> dict[str, Any]:
    stock = await stocks_repo.get_stock(stock_id)
    if not stock:
        raise NotFoundError(message="Stock not found")
    return stock


async def add_holding(
    provider: QuoteProvider,
    *,
    name: Any,
    ticker: Any,
    shares: Any,
    buy_price: Any,
    target_price: Any = None,
) -> dict[str, Any]:
    """Validate and persist a new holding priced from a live quote.

    The target price defaults to the buy price. New holdings are not on the
    watchlist until the user adds them or runs a portfolio sync.

    Raises:
        ValidationError: missing fields, or non-positive shares/buy price
        ProviderError: no quote for the ticker
    """
    if any(_is_missing(v) for v in (name, ticker, shares, buy_price)):
        raise ValidationError(message="Missing required fields")

    parsed_shares = parse_number(shares, "Invalid number of shares")
    if parsed_shares <= 0:
        raise ValidationError(message="Invalid number of shares")

    parsed_buy_price = parse_number(buy_price, "Invalid buy price")
    if parsed_buy_price <= 0:
        raise ValidationError(message="Invalid buy price")

    parsed_target = parsed_buy_price
    if not _is_missing(target_price):
        parsed_target = parse_number(target_price, "Invalid target price")
        if parsed_target <= 0:
            raise ValidationError(message="Invalid target price")

    symbol = normalize_ticker(str(ticker))
    logger.info(f"Fetching current price for {symbol}")
    current_price = await fetch_current_price(provider, symbol)

    stock = await stocks_repo.create_stock(
        name=str(name).strip(),
        ticker=symbol,
        shares=parsed_shares,
        buy_price=parsed_buy_price,
        current_price=current_price,
        target_price=parsed_target,
        is_in_watchlist=False,
    )
    logger.info(f"Stock added: {stock['id']} ({symbol})")
    return stock


async def update_holding(
    provider: QuoteProvider,
    stock_id: int,
    *,
    name: Any = None,
    ticker: Any = None,
    shares: Any = None,
    buy_price: Any = None,
) -> dict[str, Any]:
    """Apply a partial update to a holding.

    A changed ticker is re-priced from the provider; an unchanged one keeps
    its stored price.

    Raises:
        NotFoundError: unknown id
        ValidationError: negative or non-numeric shares/buy price
        ProviderError: no quote for a new ticker
    """
    stock = await stocks_repo.get_stock(stock_id)
    if not stock:
        raise NotFoundError(message="Stock not found")

    changes: dict[str, Any] = {}

    if shares is not None:
        parsed_shares = parse_number(shares, "Invalid number of shares")
        if parsed_shares < 0:
            raise ValidationError(message="Invalid number of shares")
        changes["shares"] = parsed_shares

    if buy_price is not None:
        parsed_buy_price = parse_number(buy_price, "Invalid buy price")
        if parsed_buy_price < 0:
            raise ValidationError(message="Invalid buy price")
        changes["buy_price"] = parsed_buy_price

    if not _is_missing(name):
        changes["name"] = str(name).strip()

    if not _is_missing(ticker):
        symbol = normalize_ticker(str(ticker))
        if symbol != stock["ticker"]:
            changes["current_price"] = await fetch_current_price(provider, symbol)
        changes["ticker"] = symbol

    changes["last_updated"] = datetime.now(UTC)
    updated = await stocks_repo.update_stock(stock_id, **changes)
    if not updated:
        raise NotFoundError(message="Stock not found")

    logger.info(f"Stock updated: {stock_id}")
    return updated


async def delete_holding(stock_id: int) -> None:
    deleted = await stocks_repo.delete_stock(stock_id)
    if not deleted:
        raise NotFoundError(message="Stock not found")


async def get_summary() -> dict[str, Any]:
    """Portfolio aggregates plus the unweighted average return."""
    holdings = await stocks_repo.list_holdings()
    summary = valuation.portfolio_summary(holdings).to_dict()
    summary["average_return_percent"] = valuation.average_return_percent(holdings)
    return summary
