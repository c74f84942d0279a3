"""Tests for health check API endpoints."""

from __future__ import annotations

from unittest.mock import patch

import pytest
from fastapi import status
from httpx import AsyncClient

from stocktracker.core.config import settings


class TestHealthEndpoint:
    """Tests for GET /health."""

    @pytest.mark.asyncio
    async def test_health_returns_200(self, async_client: AsyncClient):
        """GET /health returns 200 OK."""
        response = await async_client.get("/health")
        assert response.status_code == status.HTTP_200_OK

    @pytest.mark.asyncio
    async def test_healthy_with_database_and_provider(self, async_client: AsyncClient):
        data = (await async_client.get("/health")).json()
        assert data["status"] == "healthy"
        assert data["checks"] == {"database": True, "quote_provider": True}
        assert "version" in data
        assert data["environment"] == settings.environment

    @pytest.mark.asyncio
    async def test_degraded_without_provider_key(self, async_client: AsyncClient, provider):
        provider.is_configured = False
        data = (await async_client.get("/health")).json()
        assert data["status"] == "degraded"
        assert data["checks"]["quote_provider"] is False

    @pytest.mark.asyncio
    async def test_unhealthy_without_database(self, async_client: AsyncClient):
        with patch("stocktracker.api.routes.health.ping", return_value=False):
            data = (await async_client.get("/health")).json()
        assert data["status"] == "unhealthy"


class TestReadinessEndpoint:
    """Tests for GET /health/ready."""

    @pytest.mark.asyncio
    async def test_ready_with_database(self, async_client: AsyncClient):
        response = await async_client.get("/health/ready")
        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {"status": "ready"}

    @pytest.mark.asyncio
    async def test_not_ready_without_database(self, async_client: AsyncClient):
        with patch("stocktracker.api.routes.health.ping", return_value=False):
            response = await async_client.get("/health/ready")
        assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE


class TestLivenessEndpoint:
    """Tests for GET /health/live."""

    @pytest.mark.asyncio
    async def test_live_returns_alive_status(self, async_client: AsyncClient):
        """GET /health/live returns alive status."""
        response = await async_client.get("/health/live")
        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {"status": "alive"}


class TestDbHealthcheck:
    """Tests for db_healthcheck function."""

    @pytest.mark.asyncio
    async def test_db_healthcheck_true_with_database(self, db):
        from stocktracker.api.routes.health import db_healthcheck

        assert await db_healthcheck() is True

    @pytest.mark.asyncio
    async def test_db_healthcheck_false_when_query_fails(self):
        """db_healthcheck returns False instead of raising."""
        from stocktracker.api.routes.health import db_healthcheck

        with patch(
            "stocktracker.database.connection.get_session",
            side_effect=RuntimeError("no database"),
        ):
            assert await db_healthcheck() is False
