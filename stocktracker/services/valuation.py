"""Valuation of holdings and watchlist entries.

Pure functions over plain numbers and stock mappings (as returned by the
stocks repository). Nothing here touches the database or the network.

Two portfolio-level returns are computed and they are not interchangeable:

- ``PortfolioSummary.total_gain_percent`` is cost-weighted: total gain over
  total cost basis, written as ``gain / (value - gain)``.
- ``average_return_percent`` is the unweighted mean of per-holding returns,
  which is what the dashboard's "Average Return" card shows.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import asdict, dataclass
from typing import Any


def position_value(shares: float, current_price: float) -> float:
    """Market value of a position."""
    return shares * current_price


def gain_amount(shares: float, current_price: float, buy_price: float) -> float:
    """Unrealised gain (or loss) of a position in currency units."""
    return (current_price - buy_price) * shares


def gain_percent(current_price: float, buy_price: float) -> float:
    """Return since purchase, in percent.

    Raises:
        ValueError: if ``buy_price`` is zero (watchlist-only records)
    """
    if buy_price == 0:
        raise ValueError("buy_price must be non-zero to compute a return")
    return (current_price - buy_price) / buy_price * 100


def distance_to_target(current_price: float, target_price: float) -> float:
    """How far the current price sits above (+) or below (-) the target, in percent.

    Raises:
        ValueError: if ``target_price`` is zero
    """
    if target_price == 0:
        raise ValueError("target_price must be non-zero to compute a distance")
    return (current_price - target_price) / target_price * 100


def is_active(stock: Mapping[str, Any]) -> bool:
    """A record with a positive share count is an active holding."""
    return float(stock.get("shares") or 0) > 0


@dataclass(frozen=True)
class PortfolioSummary:
    """Aggregates over the active holdings."""

    total_value: float = 0.0
    total_gain: float = 0.0
    total_gain_percent: float = 0.0
    stock_count: int = 0

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def portfolio_summary(holdings: Iterable[Mapping[str, Any]]) -> PortfolioSummary:
    """Sum value and gain across active holdings.

    ``total_gain_percent`` is ``total_gain / (total_value - total_gain) * 100``
    when both ``total_value`` and that cost basis are positive, and 0
    otherwise. Records with zero shares are ignored.
    """
    total_value = 0.0
    total_gain = 0.0
    count = 0

    for stock in holdings:
        if not is_active(stock):
            continue
        shares = float(stock["shares"])
        current = float(stock.get("current_price") or 0)
        bought = float(stock.get("buy_price") or 0)
        total_value += position_value(shares, current)
        total_gain += gain_amount(shares, current, bought)
        count += 1

    total_gain_percent = 0.0
    cost = total_value - total_gain
    # Holdings edited down to a zero buy price have no cost basis
    if total_value > 0 and cost > 0:
        total_gain_percent = total_gain / cost * 100

    return PortfolioSummary(
        total_value=total_value,
        total_gain=total_gain,
        total_gain_percent=total_gain_percent,
        stock_count=count,
    )


def average_return_percent(holdings: Iterable[Mapping[str, Any]]) -> float:
    """Arithmetic mean of per-holding returns; 0 when there are none.

    Holdings without a cost basis are skipped.
    """
    returns = []
    for stock in holdings:
        if not is_active(stock):
            continue
        bought = float(stock.get("buy_price") or 0)
        if bought == 0:
            continue
        returns.append(gain_percent(float(stock.get("current_price") or 0), bought))
    return sum(returns) / len(returns) if returns else 0.0


def enrich(stock: Mapping[str, Any]) -> dict[str, Any]:
    """Copy a stock mapping and add its derived metrics.

    Metrics that are undefined for the record (no cost basis, no target)
    are set to None.
    """
    shares = float(stock.get("shares") or 0)
    current = float(stock.get("current_price") or 0)
    bought = float(stock.get("buy_price") or 0)
    target = float(stock.get("target_price") or 0)

    result = dict(stock)
    result["position_value"] = position_value(shares, current)
    result["gain_percent"] = gain_percent(current, bought) if bought else None
    result["distance_to_target"] = distance_to_target(current, target) if target else None
    return result
