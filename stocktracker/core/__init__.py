"""Core infrastructure: settings, logging, exceptions."""

from .config import settings
from .exceptions import (
    AppException,
    NotFoundError,
    ProviderError,
    ValidationError,
)


__all__ = [
    "AppException",
    "NotFoundError",
    "ProviderError",
    "ValidationError",
    "settings",
]
