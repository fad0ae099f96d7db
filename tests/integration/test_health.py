"""Integration tests for health endpoints."""

import pytest


class TestHealthEndpoints:
    """Test cases for health check endpoints."""

    @pytest.mark.asyncio
    async def test_liveness_probe(self, test_client):
        response = await test_client.get("/health/live")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["service"] == "lune-billing"
        assert "timestamp" in data

    @pytest.mark.asyncio
    async def test_readiness_probe(self, test_client):
        response = await test_client.get("/health/ready")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["checks"]["database"] == "healthy"

    @pytest.mark.asyncio
    async def test_root(self, test_client):
        response = await test_client.get("/")

        assert response.status_code == 200
        assert response.json()["readiness_check"] == "/health/ready"

    @pytest.mark.asyncio
    async def test_unknown_route(self, test_client):
        response = await test_client.get("/api/v1/nothing-here")

        assert response.status_code == 404
        assert response.json()["error"] == "HTTP 404"
