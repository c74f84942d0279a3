"""Tests for portfolio API endpoints."""

from __future__ import annotations

import pytest
from httpx import AsyncClient

from stocktracker.services.data_providers import PriceHistory


async def _add(client: AsyncClient, **overrides) -> dict:
    payload = {"name": "Apple Inc.", "ticker": "AAPL", "shares": 10, "buy_price": 100}
    payload.update(overrides)
    response = await client.post("/stocks", json=payload)
    assert response.status_code == 201, response.text
    return response.json()


class TestHoldingsEndpoints:
    """Tests for /stocks CRUD."""

    @pytest.mark.asyncio
    async def test_empty_list(self, async_client: AsyncClient):
        response = await async_client.get("/stocks")
        assert response.status_code == 200
        assert response.json() == []

    @pytest.mark.asyncio
    async def test_create_returns_derived_fields(self, async_client: AsyncClient):
        stock = await _add(async_client)
        assert stock["ticker"] == "AAPL"
        assert stock["current_price"] == 190.0
        assert stock["kind"] == "holding"
        assert stock["position_value"] == pytest.approx(1900.0)
        assert stock["gain_percent"] == pytest.approx(90.0)

    @pytest.mark.asyncio
    async def test_create_missing_fields(self, async_client: AsyncClient):
        response = await async_client.post("/stocks", json={"ticker": "AAPL"})
        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "VALIDATION_ERROR"
        assert body["message"] == "Missing required fields"

    @pytest.mark.asyncio
    async def test_create_invalid_shares(self, async_client: AsyncClient):
        response = await async_client.post(
            "/stocks",
            json={"name": "Apple", "ticker": "AAPL", "shares": "lots", "buy_price": 1},
        )
        assert response.status_code == 400
        assert response.json()["message"] == "Invalid number of shares"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "overrides,message",
        [
            ({"shares": True}, "Invalid number of shares"),
            ({"buy_price": True}, "Invalid buy price"),
            ({"target_price": False}, "Invalid target price"),
        ],
    )
    async def test_create_rejects_booleans(self, async_client: AsyncClient, overrides, message):
        payload = {"name": "Apple", "ticker": "AAPL", "shares": 2, "buy_price": 100}
        payload.update(overrides)
        response = await async_client.post("/stocks", json=payload)
        assert response.status_code == 400
        assert response.json()["message"] == message
        assert (await async_client.get("/stocks")).json() == []

    @pytest.mark.asyncio
    async def test_update_rejects_boolean_shares(self, async_client: AsyncClient):
        stock = await _add(async_client)
        response = await async_client.put(f"/stocks/{stock['id']}", json={"shares": True})
        assert response.status_code == 400
        assert response.json()["message"] == "Invalid number of shares"

    @pytest.mark.asyncio
    async def test_create_unknown_ticker(self, async_client: AsyncClient):
        response = await async_client.post(
            "/stocks",
            json={"name": "Nope", "ticker": "ZZZZ", "shares": 1, "buy_price": 1},
        )
        assert response.status_code == 400
        assert response.json()["error"] == "PROVIDER_ERROR"

    @pytest.mark.asyncio
    async def test_malformed_body_is_400(self, async_client: AsyncClient):
        response = await async_client.post(
            "/stocks", content="not json", headers={"Content-Type": "application/json"}
        )
        assert response.status_code == 400
        assert response.json()["error"] == "VALIDATION_ERROR"

    @pytest.mark.asyncio
    async def test_get_update_delete(self, async_client: AsyncClient):
        stock = await _add(async_client)

        response = await async_client.get(f"/stocks/{stock['id']}")
        assert response.status_code == 200
        assert response.json()["name"] == "Apple Inc."

        response = await async_client.put(
            f"/stocks/{stock['id']}", json={"ticker": "MSFT", "shares": 3}
        )
        assert response.status_code == 200
        updated = response.json()
        assert updated["ticker"] == "MSFT"
        assert updated["shares"] == 3
        assert updated["current_price"] == 410.0

        response = await async_client.delete(f"/stocks/{stock['id']}")
        assert response.status_code == 200
        assert response.json() == {"message": "Stock deleted successfully"}

        response = await async_client.get(f"/stocks/{stock['id']}")
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_unknown_id_is_404(self, async_client: AsyncClient):
        assert (await async_client.get("/stocks/999")).status_code == 404
        assert (await async_client.put("/stocks/999", json={"shares": 1})).status_code == 404
        assert (await async_client.delete("/stocks/999")).status_code == 404

    @pytest.mark.asyncio
    async def test_list_excludes_watchlist_only(self, async_client: AsyncClient):
        await _add(async_client)
        response = await async_client.post(
            "/watchlist", json={"name": "Tesla", "ticker": "TSLA", "target_price": 200}
        )
        assert response.status_code == 201

        tickers = [s["ticker"] for s in (await async_client.get("/stocks")).json()]
        assert tickers == ["AAPL"]

    @pytest.mark.asyncio
    async def test_request_id_echoed(self, async_client: AsyncClient):
        response = await async_client.get("/stocks", headers={"X-Request-ID": "abc-123"})
        assert response.headers["X-Request-ID"] == "abc-123"


class TestSummaryEndpoint:
    """Tests for GET /stocks/summary."""

    @pytest.mark.asyncio
    async def test_empty_portfolio(self, async_client: AsyncClient):
        response = await async_client.get("/stocks/summary")
        assert response.status_code == 200
        assert response.json() == {
            "totalValue": 0,
            "totalGain": 0,
            "totalGainPercent": 0,
            "stockCount": 0,
            "averageReturnPercent": 0,
        }

    @pytest.mark.asyncio
    async def test_summary_values(self, async_client: AsyncClient):
        await _add(async_client, ticker="AAPL", shares=10, buy_price=100)
        await _add(async_client, name="Microsoft", ticker="MSFT", shares=1, buy_price=400)

        body = (await async_client.get("/stocks/summary")).json()
        # 10 * 190 + 1 * 410
        assert body["totalValue"] == pytest.approx(2310.0)
        # 900 + 10
        assert body["totalGain"] == pytest.approx(910.0)
        assert body["totalGainPercent"] == pytest.approx(910.0 / 1400.0 * 100)
        assert body["stockCount"] == 2
        assert body["averageReturnPercent"] == pytest.approx((90.0 + 2.5) / 2)

    @pytest.mark.asyncio
    async def test_holding_edited_to_zero_buy_price(self, async_client: AsyncClient):
        stock = await _add(async_client, shares=2, buy_price=100)
        response = await async_client.put(f"/stocks/{stock['id']}", json={"buy_price": 0})
        assert response.status_code == 200

        response = await async_client.get("/stocks/summary")
        assert response.status_code == 200
        body = response.json()
        assert body["totalValue"] == pytest.approx(380.0)
        assert body["totalGainPercent"] == 0
        assert body["averageReturnPercent"] == 0


class TestMarketDataEndpoints:
    """Tests for quote and history pass-through."""

    @pytest.mark.asyncio
    async def test_quote(self, async_client: AsyncClient):
        response = await async_client.get("/stocks/nvda/quote")
        assert response.status_code == 200
        body = response.json()
        assert body["ticker"] == "NVDA"
        assert body["current_price"] == 880.0

    @pytest.mark.asyncio
    async def test_quote_unknown_is_404(self, async_client: AsyncClient):
        response = await async_client.get("/stocks/ZZZZ/quote")
        assert response.status_code == 404
        assert response.json()["message"] == "Quote not available"

    @pytest.mark.asyncio
    async def test_history_defaults_and_range(self, async_client: AsyncClient, provider):
        provider.histories["AAPL"] = PriceHistory(
            ticker="AAPL", resolution="D", timestamps=[1, 2], prices=[10.0, 11.0]
        )

        response = await async_client.get("/stocks/AAPL/history")
        assert response.status_code == 200
        assert response.json()["prices"] == [10.0, 11.0]
        _, resolution, from_ts, to_ts = provider.history_calls[-1]
        assert resolution == "D"
        assert to_ts - from_ts == 30 * 24 * 60 * 60

        await async_client.get("/stocks/AAPL/history?resolution=60&from=100&to=200")
        assert provider.history_calls[-1][1:] == ("60", 100, 200)

    @pytest.mark.asyncio
    async def test_history_unavailable_is_404(self, async_client: AsyncClient):
        response = await async_client.get("/stocks/AAPL/history")
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_historical_period(self, async_client: AsyncClient, provider):
        provider.histories["MSFT"] = PriceHistory(
            ticker="MSFT", resolution="D", timestamps=[0], prices=[400.0]
        )

        response = await async_client.get("/stocks/MSFT/historical?period=1Y")
        assert response.status_code == 200
        assert response.json() == [{"time": "1970-01-01T00:00:00+00:00", "price": 400.0}]
        assert provider.history_calls[-1][1] == "D"

    @pytest.mark.asyncio
    async def test_historical_unknown_period_uses_one_day(self, async_client: AsyncClient, provider):
        provider.histories["MSFT"] = PriceHistory(
            ticker="MSFT", resolution="5", timestamps=[], prices=[]
        )

        response = await async_client.get("/stocks/MSFT/historical?period=10Y")
        assert response.status_code == 200
        assert response.json() == []
        _, resolution, from_ts, to_ts = provider.history_calls[-1]
        assert resolution == "5"
        assert to_ts - from_ts == 24 * 60 * 60
