"""Watchlist API routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from stocktracker.schemas.stocks import StockResponse
from stocktracker.schemas.watchlist import (
    WatchlistCreateRequest,
    WatchlistHistoryResponse,
    WatchlistRemoveResponse,
    WatchlistSyncResponse,
    WatchlistUpdateRequest,
)
from stocktracker.services import watchlist_service
from stocktracker.services.data_providers import QuoteProvider, get_quote_provider
from stocktracker.services.valuation import enrich


router = APIRouter(prefix="/watchlist", tags=["Watchlist"])


@router.get("", response_model=list[StockResponse])
async def list_watchlist() -> list[StockResponse]:
    """List watched records ordered by name."""
    stocks = await watchlist_service.list_watchlist()
    return [StockResponse(**enrich(s)) for s in stocks]


@router.post("", response_model=StockResponse, status_code=status.HTTP_201_CREATED)
async def add_to_watchlist(
    payload: WatchlistCreateRequest,
    provider: QuoteProvider = Depends(get_quote_provider),
) -> StockResponse:
    """Watch a ticker without holding it."""
    stock = await watchlist_service.add_watchlist_entry(
        provider,
        name=payload.name,
        ticker=payload.ticker,
        target_price=payload.target_price,
    )
    return StockResponse(**enrich(stock))


@router.post("/sync-portfolio", response_model=WatchlistSyncResponse)
async def sync_portfolio() -> WatchlistSyncResponse:
    """Put every active holding on the watchlist."""
    result = await watchlist_service.sync_portfolio_to_watchlist()
    return WatchlistSyncResponse(
        message="Portfolio stocks synced to watchlist",
        **result.to_dict(),
    )


@router.put("/{stock_id:int}", response_model=StockResponse)
async def update_target_price(
    stock_id: int,
    payload: WatchlistUpdateRequest,
) -> StockResponse:
    """Change the target price of a watched record."""
    stock = await watchlist_service.update_target_price(stock_id, payload.target_price)
    return StockResponse(**enrich(stock))


@router.delete("/{stock_id:int}", response_model=WatchlistRemoveResponse)
async def remove_from_watchlist(stock_id: int) -> WatchlistRemoveResponse:
    """Take a record off the watchlist (deleting it if it is not held)."""
    action = await watchlist_service.remove_from_watchlist(stock_id)
    return WatchlistRemoveResponse(message="Stock removed from watchlist", action=action)


@router.get("/{stock_id:int}/history", response_model=WatchlistHistoryResponse)
async def get_history(
    stock_id: int,
    provider: QuoteProvider = Depends(get_quote_provider),
) -> WatchlistHistoryResponse:
    """Last 30 days of prices, synthetic when the provider has none."""
    history = await watchlist_service.get_price_history(provider, stock_id)
    return WatchlistHistoryResponse(**history)
