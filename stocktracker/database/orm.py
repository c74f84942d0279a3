"""SQLAlchemy ORM models for Stock Tracker.

One ``stocks`` table serves both portfolio holdings and watchlist entries:
a row with ``shares > 0`` is a holding, a row with ``shares == 0`` that is
flagged ``is_in_watchlist`` exists only as a watchlist entry. A holding may
also be flagged, in which case it shows up on both pages.

Usage:
    from stocktracker.database.orm import Stock
    from stocktracker.database.connection import get_session

    async with get_session() as session:
        stock = await session.get(Stock, 1)
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import (
    Boolean,
    DateTime,
    Float,
    Index,
    MetaData,
    String,
    func,
)
from sqlalchemy.orm import (
    DeclarativeBase,
    Mapped,
    mapped_column,
)


# Naming convention for constraints and indexes
NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

KIND_HOLDING = "holding"
KIND_WATCHLIST = "watchlist"


class Base(DeclarativeBase):
    """Base class for all ORM models with naming convention."""
    metadata = MetaData(naming_convention=NAMING_CONVENTION)


class Stock(Base):
    """A tracked ticker: a portfolio holding, a watchlist entry, or both."""
    __tablename__ = "stocks"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    ticker: Mapped[str] = mapped_column(String(20), nullable=False)
    shares: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    buy_price: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    current_price: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    target_price: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    is_in_watchlist: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    last_updated: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    __table_args__ = (
        Index("idx_stocks_ticker", "ticker"),
        Index("idx_stocks_name", "name"),
    )

    @property
    def is_holding(self) -> bool:
        return (self.shares or 0) > 0

    @property
    def kind(self) -> str:
        return KIND_HOLDING if self.is_holding else KIND_WATCHLIST

    def __repr__(self) -> str:
        return f"<Stock id={self.id} ticker={self.ticker} shares={self.shares}>"
