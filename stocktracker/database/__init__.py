"""Database engine and ORM models."""

from .connection import (
    close_sqlalchemy_engine,
    get_session,
    init_schema,
    init_sqlalchemy_engine,
)
from .orm import Base, Stock


__all__ = [
    "Base",
    "Stock",
    "close_sqlalchemy_engine",
    "get_session",
    "init_schema",
    "init_sqlalchemy_engine",
]
