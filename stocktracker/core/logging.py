"""Structured logging configuration with request ID tracking.

Both formatters include any ``extra={...}`` fields passed to a log call, so
the request middleware's method/path/status/duration end up as JSON keys or
trailing ``key=value`` pairs.
"""

from __future__ import annotations

import json
import logging
import re
import sys
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from .config import settings


# Context variable for request ID tracking
request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)

# Attributes every LogRecord has; anything else came in through ``extra``
_RECORD_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", None, None))
) | {"message", "asctime", "taskName"}


def _extra_fields(record: logging.LogRecord) -> Dict[str, Any]:
    return {k: v for k, v in vars(record).items() if k not in _RECORD_ATTRS}


class StructuredFormatter(logging.Formatter):
    """One JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "service": settings.app_name,
        }

        request_id = request_id_var.get()
        if request_id:
            log_data["request_id"] = request_id

        log_data.update(_extra_fields(record))

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        if settings.debug:
            log_data["location"] = f"{record.filename}:{record.lineno} ({record.funcName})"

        return json.dumps(log_data, default=str)


class TextFormatter(logging.Formatter):
    """Single-line human-readable output for local development."""

    def format(self, record: logging.LogRecord) -> str:
        request_id = request_id_var.get()
        rid = f"[{request_id[:8]}] " if request_id else ""
        timestamp = datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S")
        line = f"{timestamp} {record.levelname:8} {rid}{record.name}: {record.getMessage()}"

        extras = _extra_fields(record)
        if extras:
            line += " " + " ".join(f"{k}={v}" for k, v in extras.items())

        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)

        return line


class SensitiveDataFilter(logging.Filter):
    """Redact API tokens from log messages.

    Finnhub also accepts its key as a ``token`` query parameter; any URL or
    header dump that reaches a log line has the value masked.
    """

    SENSITIVE_KEYS = (
        "x-finnhub-token",
        "token",
        "api_key",
        "apikey",
        "authorization",
        "secret",
    )

    def __init__(self, name: str = ""):
        super().__init__(name)
        keys = "|".join(re.escape(k) for k in self.SENSITIVE_KEYS)
        # key=value, key: value, 'key': 'value' and "key": "value"
        self._pattern = re.compile(
            rf"""(['"]?(?:{keys})['"]?\s*[=:]\s*)[^\s,&}}\]]+""",
            re.IGNORECASE,
        )

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        redacted = self._pattern.sub(r"\1[REDACTED]", message)
        if redacted != message:
            record.msg = redacted
            record.args = None
        return True


def setup_logging() -> None:
    """Configure the root logger from settings."""
    level = getattr(logging, settings.log_level)
    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(
        StructuredFormatter() if settings.log_format == "json" else TextFormatter()
    )
    handler.addFilter(SensitiveDataFilter())
    root_logger.addHandler(handler)

    # httpx logs every request at INFO
    for noisy in ("httpx", "uvicorn.access", "sqlalchemy"):
        logging.getLogger(noisy).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Get a logger with the stocktracker prefix."""
    return logging.getLogger(f"stocktracker.{name}")
