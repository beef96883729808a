"""Integration tests for categorization endpoints."""

import pytest
from httpx import AsyncClient

from spendly.core.exceptions import InferenceProviderError


class TestCategorize:
    @pytest.mark.asyncio
    async def test_inferred_suggestion(
        self, client: AsyncClient, auth_headers, categories, inference_provider
    ):
        response = await client.post(
            "/api/v1/ai/categorize",
            json={"merchant": "Blue Bottle Coffee", "notes": "team coffee"},
            headers=auth_headers,
        )

        assert response.status_code == 200
        data = response.json()
        assert data["category_name"] == "Food & Dining"
        assert data["category_id"] == str(categories["Food & Dining"].id)
        assert data["confidence"] == 90
        assert inference_provider.calls[0][:2] == ("Blue Bottle Coffee", "team coffee")

    @pytest.mark.asyncio
    async def test_no_suggestion(
        self, client: AsyncClient, auth_headers, categories, inference_provider
    ):
        inference_provider.error = InferenceProviderError("request_failed")

        response = await client.post(
            "/api/v1/ai/categorize", json={"merchant": "Mystery Shop"}, headers=auth_headers
        )

        assert response.status_code == 200
        assert response.json() == {"category_id": None, "category_name": None, "confidence": 0}

    @pytest.mark.asyncio
    async def test_blank_merchant(self, client: AsyncClient, auth_headers, inference_provider):
        response = await client.post(
            "/api/v1/ai/categorize", json={"merchant": "   "}, headers=auth_headers
        )

        assert response.status_code == 400
        assert response.json()["error_code"] == "AI_001"
        assert inference_provider.calls == []

    @pytest.mark.asyncio
    async def test_missing_merchant(self, client: AsyncClient, auth_headers):
        response = await client.post("/api/v1/ai/categorize", json={}, headers=auth_headers)

        assert response.status_code == 400
        assert response.json()["error_code"] == "VAL_001"

    @pytest.mark.asyncio
    async def test_requires_auth(self, client: AsyncClient):
        response = await client.post("/api/v1/ai/categorize", json={"merchant": "Uber"})
        assert response.status_code in (401, 403)


class TestFeedback:
    @pytest.mark.asyncio
    async def test_repeated_overrides_pin_category(
        self, client: AsyncClient, auth_headers, categories, inference_provider
    ):
        business = categories["Business"]
        for _ in range(3):
            response = await client.post(
                "/api/v1/ai/feedback",
                json={"merchant": "Amazon", "category_id": str(business.id), "accepted": False},
                headers=auth_headers,
            )
            assert response.status_code == 200
            assert response.json() == {"message": "Feedback recorded"}

        response = await client.post(
            "/api/v1/ai/categorize", json={"merchant": " amazon "}, headers=auth_headers
        )

        data = response.json()
        assert data["category_name"] == "Business"
        assert data["confidence"] == 100
        assert inference_provider.calls == []

    @pytest.mark.asyncio
    async def test_blank_merchant(self, client: AsyncClient, auth_headers, categories):
        response = await client.post(
            "/api/v1/ai/feedback",
            json={
                "merchant": "",
                "category_id": str(categories["Shopping"].id),
                "accepted": True,
            },
            headers=auth_headers,
        )

        assert response.status_code == 400
        assert response.json()["error_code"] == "AI_001"

    @pytest.mark.asyncio
    async def test_invalid_category_id(self, client: AsyncClient, auth_headers):
        response = await client.post(
            "/api/v1/ai/feedback",
            json={"merchant": "Amazon", "category_id": "not-a-uuid", "accepted": False},
            headers=auth_headers,
        )

        assert response.status_code == 400
        assert response.json()["error_code"] == "VAL_001"
