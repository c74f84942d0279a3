"""Main application entry point with app factory and lifespan management."""

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI

from stocktracker.api.app import create_api_app
from stocktracker.core.config import settings
from stocktracker.core.logging import get_logger, setup_logging
from stocktracker.database.connection import (
    close_sqlalchemy_engine,
    init_schema,
    init_sqlalchemy_engine,
)
from stocktracker.repositories.stocks_orm import seed_default_stocks
from stocktracker.services.data_providers import close_finnhub_service, get_quote_provider
from stocktracker.services.price_refresh import start_price_refresh, stop_price_refresh


logger = get_logger("main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    # Startup
    setup_logging()
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")
    logger.info(f"Environment: {settings.environment}")

    await init_sqlalchemy_engine()
    await init_schema()

    if settings.seed_default_stocks:
        await seed_default_stocks()

    provider = get_quote_provider()
    if not settings.finnhub_api_key:
        logger.warning("FINNHUB_API_KEY is not set - quotes and price refresh will fail")

    refresh_task = start_price_refresh(provider, settings.price_refresh_interval_seconds)

    yield

    # Shutdown
    logger.info("Shutting down...")
    await stop_price_refresh(refresh_task)
    await close_finnhub_service()
    await close_sqlalchemy_engine()
    logger.info("Shutdown complete")


def create_app() -> FastAPI:
    """Create the main FastAPI application."""
    api_app = create_api_app()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        lifespan=lifespan,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )

    app.mount("/api", api_app)

    @app.get("/")
    async def root():
        return {
            "name": settings.app_name,
            "version": settings.app_version,
            "docs": "/api/docs" if settings.debug else None,
            "health": "/api/health",
        }

    return app


# Application instance
app = create_app()


def run() -> None:
    """Serve the app with uvicorn."""
    import uvicorn

    uvicorn.run(
        "stocktracker.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
