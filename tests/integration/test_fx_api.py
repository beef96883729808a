"""Integration tests for exchange rate endpoints."""

from datetime import date, datetime, time, timedelta, timezone

import pytest
from httpx import AsyncClient

from spendly.core.currencies import CURRENCIES
from spendly.core.exceptions import RateProviderError
from spendly.repositories.fx_rate import FxRateRepository


class TestGetRate:
    @pytest.mark.asyncio
    async def test_live_rate(self, client: AsyncClient, auth_headers, rate_provider):
        response = await client.get(
            "/api/v1/fx/rate", params={"from": "eur", "to": "gbp"}, headers=auth_headers
        )

        assert response.status_code == 200
        data = response.json()
        assert data["from"] == "EUR"
        assert data["to"] == "GBP"
        assert data["rate"] == pytest.approx(0.8 / 0.9)
        assert data["historical"] is False
        assert "date" in data
        assert rate_provider.calls == 1

    @pytest.mark.asyncio
    async def test_identity_rate(self, client: AsyncClient, auth_headers, rate_provider):
        response = await client.get(
            "/api/v1/fx/rate", params={"from": "USD", "to": "usd"}, headers=auth_headers
        )

        assert response.status_code == 200
        assert response.json()["rate"] == 1.0
        assert rate_provider.calls == 0

    @pytest.mark.asyncio
    async def test_historical_rate(self, client: AsyncClient, auth_headers, db_session):
        day = date(2026, 1, 15)
        fetched_at = datetime.combine(day, time(10)).astimezone(timezone.utc)
        await FxRateRepository(db_session).add_rate("EUR", "USD", 1.09, fetched_at)

        response = await client.get(
            "/api/v1/fx/rate",
            params={"from": "EUR", "to": "USD", "date": "2026-01-15"},
            headers=auth_headers,
        )

        assert response.status_code == 200
        data = response.json()
        assert data["rate"] == 1.09
        assert data["date"] == "2026-01-15"
        assert data["historical"] is True

    @pytest.mark.asyncio
    async def test_historical_miss_falls_back_to_live(
        self, client: AsyncClient, auth_headers, rate_provider
    ):
        response = await client.get(
            "/api/v1/fx/rate",
            params={"from": "EUR", "to": "USD", "date": "2019-06-01"},
            headers=auth_headers,
        )

        assert response.status_code == 200
        data = response.json()
        assert data["historical"] is False
        assert data["rate"] == pytest.approx(1 / 0.9)

    @pytest.mark.asyncio
    async def test_fresh_stored_rate(
        self, client: AsyncClient, auth_headers, db_session, clock, rate_provider
    ):
        await FxRateRepository(db_session).add_rate(
            "GBP", "USD", 1.3, clock() - timedelta(hours=2)
        )

        response = await client.get(
            "/api/v1/fx/rate", params={"from": "GBP", "to": "USD"}, headers=auth_headers
        )

        assert response.json()["rate"] == 1.3
        assert rate_provider.calls == 0

    @pytest.mark.asyncio
    @pytest.mark.parametrize("code", ["US", "USDX", "U5D", ""])
    async def test_invalid_currency_code(self, client: AsyncClient, auth_headers, code):
        response = await client.get(
            "/api/v1/fx/rate", params={"from": code, "to": "USD"}, headers=auth_headers
        )

        assert response.status_code == 400
        assert response.json()["error_code"] == "VAL_001"

    @pytest.mark.asyncio
    async def test_requires_auth(self, client: AsyncClient):
        response = await client.get("/api/v1/fx/rate", params={"from": "EUR", "to": "USD"})
        assert response.status_code in (401, 403)

    @pytest.mark.asyncio
    async def test_rejects_invalid_token(self, client: AsyncClient):
        response = await client.get(
            "/api/v1/fx/rate",
            params={"from": "EUR", "to": "USD"},
            headers={"Authorization": "Bearer not-a-token"},
        )

        assert response.status_code == 401
        assert response.json()["detail"]["error_code"] == "AUTH_001"


class TestConvert:
    @pytest.mark.asyncio
    async def test_convert(self, client: AsyncClient, auth_headers):
        response = await client.get(
            "/api/v1/fx/convert",
            params={"amount": 25, "from": "USD", "to": "EUR"},
            headers=auth_headers,
        )

        assert response.status_code == 200
        data = response.json()
        assert data["from"] == "USD"
        assert data["to"] == "EUR"
        assert data["amount"] == 25
        assert data["converted"] == 22.5

    @pytest.mark.asyncio
    async def test_negative_amount(self, client: AsyncClient, auth_headers):
        response = await client.get(
            "/api/v1/fx/convert",
            params={"amount": -1, "from": "USD", "to": "EUR"},
            headers=auth_headers,
        )
        assert response.status_code == 400


class TestCurrencies:
    @pytest.mark.asyncio
    async def test_list(self, client: AsyncClient, auth_headers):
        response = await client.get("/api/v1/fx/currencies", headers=auth_headers)

        assert response.status_code == 200
        data = response.json()
        assert len(data) == len(CURRENCIES)
        assert data[0] == {"code": "USD", "name": "US Dollar", "symbol": "$"}


class TestRefresh:
    @pytest.mark.asyncio
    async def test_schedules_refresh(self, client: AsyncClient, auth_headers):
        response = await client.post("/api/v1/fx/refresh", headers=auth_headers)

        assert response.status_code == 202
        assert response.json() == {"status": "scheduled"}

    @pytest.mark.asyncio
    async def test_provider_failure_still_accepted(
        self, client: AsyncClient, auth_headers, rate_provider
    ):
        rate_provider.error = RateProviderError("network")

        response = await client.post("/api/v1/fx/refresh", headers=auth_headers)

        assert response.status_code == 202
