"""Periodic refresh of stored current prices."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field

from stocktracker.core.exceptions import ProviderError
from stocktracker.core.logging import get_logger
from stocktracker.repositories import stocks_orm as stocks_repo

from .data_providers import QuoteProvider


logger = get_logger("services.price_refresh")


@dataclass
class RefreshResult:
    """Tickers refreshed or skipped in one pass."""

    refreshed: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)
    records_updated: int = 0


async def refresh_all_prices(provider: QuoteProvider) -> RefreshResult:
    """Re-price every stored ticker once.

    A ticker whose quote cannot be fetched keeps its old price and is
    reported in ``failed``.
    """
    stocks = await stocks_repo.list_all_stocks()
    tickers = sorted({s["ticker"] for s in stocks})
    result = RefreshResult()

    for ticker in tickers:
        try:
            quote = await provider.get_quote(ticker)
        except ProviderError as e:
            logger.warning(f"Price refresh skipped {ticker}: {e.message}")
            result.failed.append(ticker)
            continue
        result.records_updated += await stocks_repo.update_price_for_ticker(
            ticker, quote.current_price
        )
        result.refreshed.append(ticker)

    logger.info(
        f"Price refresh: {len(result.refreshed)} refreshed, {len(result.failed)} failed"
    )
    return result


async def price_refresh_loop(provider: QuoteProvider, interval_seconds: int) -> None:
    """Refresh prices forever, sleeping ``interval_seconds`` between passes."""
    while True:
        await asyncio.sleep(interval_seconds)
        try:
            await refresh_all_prices(provider)
        except Exception:
            logger.exception("Price refresh pass failed")


def start_price_refresh(provider: QuoteProvider, interval_seconds: int) -> asyncio.Task | None:
    """Schedule the refresh loop; None when disabled by a zero interval."""
    if interval_seconds <= 0:
        logger.info("Background price refresh disabled")
        return None
    logger.info(f"Background price refresh every {interval_seconds}s")
    return asyncio.create_task(price_refresh_loop(provider, interval_seconds))


async def stop_price_refresh(task: asyncio.Task | None) -> None:
    if task is None:
        return
    task.cancel()
    try:
        await task
    except asyncio.CancelledError:
        pass
