"""API application factory."""

from __future__ import annotations

import time
import uuid

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware

from stocktracker.core.config import settings
from stocktracker.core.exceptions import register_exception_handlers
from stocktracker.core.logging import get_logger, request_id_var
from stocktracker.schemas.common import ErrorResponse

from .routes import health, stocks, watchlist


logger = get_logger("api")

ROUTERS = (health.router, stocks.router, watchlist.router)


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Tag each request with an ID and log its outcome.

    An incoming ``X-Request-ID`` is reused, otherwise a UUID is generated.
    The ID is echoed on the response and available to log formatters via
    ``request_id_var``. Query strings are never logged.
    """

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request.state.request_id = request_id
        token = request_id_var.set(request_id)
        started = time.monotonic()

        try:
            response = await call_next(request)
            elapsed_ms = int((time.monotonic() - started) * 1000)
            logger.info(
                f"{request.method} {request.url.path} -> {response.status_code} ({elapsed_ms}ms)",
                extra={
                    "method": request.method,
                    "path": request.url.path,
                    "status_code": response.status_code,
                    "duration_ms": elapsed_ms,
                },
            )
        finally:
            request_id_var.reset(token)

        response.headers["X-Request-ID"] = request_id
        return response


def create_api_app() -> FastAPI:
    """Build the API sub-application mounted at ``/api``."""
    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Personal stock portfolio and watchlist tracker",
        docs_url="/docs" if settings.debug else None,
        redoc_url=None,
        openapi_url="/openapi.json" if settings.debug else None,
        responses={
            code: {"model": ErrorResponse, "description": text}
            for code, text in ((400, "Bad Request"), (404, "Not Found"), (500, "Internal Server Error"))
        },
    )

    app.add_middleware(RequestContextMiddleware)
    # Added last so it wraps everything, preflight requests included
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["Content-Type", "X-Request-ID"],
        expose_headers=["X-Request-ID"],
    )

    register_exception_handlers(app)

    for router in ROUTERS:
        app.include_router(router)

    return app
