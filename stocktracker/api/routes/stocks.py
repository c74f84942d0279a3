"""Portfolio API routes.

CRUD for holdings, the portfolio summary and quote/history pass-through.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status

from stocktracker.core.exceptions import NotFoundError, ProviderError
from stocktracker.core.logging import get_logger
from stocktracker.schemas.common import MessageResponse
from stocktracker.schemas.stocks import (
    PortfolioSummaryResponse,
    PricePoint,
    PriceHistoryResponse,
    QuoteResponse,
    StockCreateRequest,
    StockResponse,
    StockUpdateRequest,
)
from stocktracker.services import market_data, stock_service
from stocktracker.services.data_providers import QuoteProvider, get_quote_provider
from stocktracker.services.valuation import enrich


router = APIRouter(prefix="/stocks", tags=["Stocks"])

logger = get_logger("api.stocks")


def _to_response(stock: dict) -> StockResponse:
    return StockResponse(**enrich(stock))


# =============================================================================
# HOLDINGS
# =============================================================================


@router.get("", response_model=list[StockResponse])
async def list_stocks() -> list[StockResponse]:
    """List active holdings ordered by name."""
    stocks = await stock_service.list_holdings()
    return [_to_response(s) for s in stocks]


@router.post("", response_model=StockResponse, status_code=status.HTTP_201_CREATED)
async def add_stock(
    payload: StockCreateRequest,
    provider: QuoteProvider = Depends(get_quote_provider),
) -> StockResponse:
    """Add a holding priced from a live quote."""
    stock = await stock_service.add_holding(
        provider,
        name=payload.name,
        ticker=payload.ticker,
        shares=payload.shares,
        buy_price=payload.buy_price,
        target_price=payload.target_price,
    )
    return _to_response(stock)


@router.get("/summary", response_model=PortfolioSummaryResponse)
async def get_summary() -> PortfolioSummaryResponse:
    """Portfolio value, gain and returns over active holdings."""
    summary = await stock_service.get_summary()
    return PortfolioSummaryResponse(**summary)


@router.get("/{stock_id:int}", response_model=StockResponse)
async def get_stock(stock_id: int) -> StockResponse:
    """Get a single stored record."""
    return _to_response(await stock_service.get_holding(stock_id))


@router.put("/{stock_id:int}", response_model=StockResponse)
async def update_stock(
    stock_id: int,
    payload: StockUpdateRequest,
    provider: QuoteProvider = Depends(get_quote_provider),
) -> StockResponse:
    """Update a holding; a changed ticker is re-priced."""
    stock = await stock_service.update_holding(
        provider,
        stock_id,
        name=payload.name,
        ticker=payload.ticker,
        shares=payload.shares,
        buy_price=payload.buy_price,
    )
    return _to_response(stock)


@router.delete("/{stock_id:int}", response_model=MessageResponse)
async def delete_stock(stock_id: int) -> MessageResponse:
    """Delete a holding."""
    await stock_service.delete_holding(stock_id)
    return MessageResponse(message="Stock deleted successfully")


# =============================================================================
# MARKET DATA
# =============================================================================


@router.get("/{ticker}/quote", response_model=QuoteResponse)
async def get_quote(
    ticker: str,
    provider: QuoteProvider = Depends(get_quote_provider),
) -> QuoteResponse:
    """Real-time quote for a ticker."""
    try:
        quote = await provider.get_quote(ticker)
    except ProviderError as e:
        raise NotFoundError(message="Quote not available", details=e.details)
    return QuoteResponse(**quote.to_dict())


@router.get("/{ticker}/history", response_model=PriceHistoryResponse)
async def get_history(
    ticker: str,
    resolution: str = Query("D", description="Candle resolution: 1, 5, 15, 30, 60, D, W, M"),
    from_ts: int | None = Query(None, alias="from", description="Range start (unix seconds)"),
    to_ts: int | None = Query(None, alias="to", description="Range end (unix seconds)"),
    provider: QuoteProvider = Depends(get_quote_provider),
) -> PriceHistoryResponse:
    """Candle closes for an explicit range; defaults to the last 30 days."""
    _, default_from, default_to = market_data.resolve_period("1M")
    try:
        history = await provider.get_historical_data(
            ticker,
            resolution,
            from_ts if from_ts is not None else default_from,
            to_ts if to_ts is not None else default_to,
        )
    except ProviderError as e:
        raise NotFoundError(message="No historical data available", details=e.details)
    return PriceHistoryResponse(**history.to_dict())


@router.get("/{ticker}/historical", response_model=list[PricePoint])
async def get_historical(
    ticker: str,
    period: str = Query("1D", description="Chart period: 1D, 1W, 1M, 3M, 1Y, ALL"),
    provider: QuoteProvider = Depends(get_quote_provider),
) -> list[PricePoint]:
    """Chart points for a named period."""
    try:
        points = await market_data.get_period_history(provider, ticker, period)
    except ProviderError as e:
        raise NotFoundError(message="No historical data available", details=e.details)
    return [PricePoint(**p) for p in points]
