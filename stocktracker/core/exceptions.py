"""Application errors and the handlers that render them as JSON.

Services raise ``AppException`` subclasses; routes let them propagate and
``register_exception_handlers`` turns them into
``{"error", "message", "status", "details?"}`` bodies.
"""

from __future__ import annotations

from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from .logging import get_logger


logger = get_logger("error")


class AppException(Exception):
    """Base error carrying an HTTP status and a stable error code."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    error_code: str = "INTERNAL_ERROR"
    message: str = "An unexpected error occurred"

    def __init__(self, message: str | None = None, details: dict[str, Any] | None = None):
        self.message = message or type(self).message
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {
            "error": self.error_code,
            "message": self.message,
            "status": self.status_code,
        }
        if self.details:
            body["details"] = self.details
        return body


class NotFoundError(AppException):
    """No stock with the requested id, or no market data for a ticker."""

    status_code = status.HTTP_404_NOT_FOUND
    error_code = "NOT_FOUND"
    message = "Resource not found"


class ValidationError(AppException):
    """Bad input: missing fields, non-numeric or non-positive values."""

    status_code = status.HTTP_400_BAD_REQUEST
    error_code = "VALIDATION_ERROR"
    message = "Validation failed"


class ProviderError(AppException):
    """Quote provider call failed or returned no usable data."""

    status_code = status.HTTP_400_BAD_REQUEST
    error_code = "PROVIDER_ERROR"
    message = "Market data provider request failed"


def _render(request: Request, exc: AppException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict(),
        headers={"X-Request-ID": getattr(request.state, "request_id", "unknown")},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register centralized exception handlers."""

    @app.exception_handler(AppException)
    async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
        return _render(request, exc)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        # Malformed JSON or wrong field types; reported like service validation
        fields = [
            f"{'.'.join(str(part) for part in err.get('loc', ()))}: {err.get('msg')}"
            for err in exc.errors()
        ]
        return _render(request, ValidationError(details={"fields": fields}))

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception(
            "Unhandled exception",
            extra={"path": request.url.path, "method": request.method},
        )

        from .config import settings

        error = AppException(message=str(exc) if settings.debug else None)
        return _render(request, error)
