"""Tests for health endpoints."""

import pytest
from httpx import AsyncClient


@pytest.mark.api
@pytest.mark.asyncio
class TestHealth:

    async def test_liveness(self, client: AsyncClient):
        response = await client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "ok"
        assert response.json()["service"] == "SmartSeed"

    async def test_readiness(self, client: AsyncClient):
        response = await client.get("/health/ready")

        assert response.status_code == 200
        assert response.json()["checks"]["database"] == "ok"
