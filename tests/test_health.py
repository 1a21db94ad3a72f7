# ==============================================================================
# HEALTH ENDPOINT TESTS
# ==============================================================================
# Tests for root and health check endpoints and the error envelope
# ==============================================================================

import pytest
from httpx import AsyncClient


class TestHealthEndpoints:
    """Tests for health check endpoints."""

    @pytest.mark.asyncio
    async def test_root_endpoint(self, client: AsyncClient):
        response = await client.get("/")

        assert response.status_code == 200
        data = response.json()

        assert "name" in data
        assert "version" in data
        assert data["health"] == "/health"

    @pytest.mark.asyncio
    async def test_health_endpoint(self, client: AsyncClient):
        response = await client.get("/health")

        assert response.status_code == 200
        data = response.json()

        assert data["status"] == "healthy"
        assert data["database"] == "connected"

    @pytest.mark.asyncio
    async def test_request_id_header(self, client: AsyncClient):
        response = await client.get("/health", headers={"X-Request-ID": "abc123"})

        assert response.headers["X-Request-ID"] == "abc123"
        assert "X-Response-Time" in response.headers


class TestErrorEnvelope:
    """Every failure is reported as ``{success: false, error, code}``."""

    @pytest.mark.asyncio
    async def test_not_found_envelope(self, client: AsyncClient):
        response = await client.get("/api/products/does-not-exist")

        assert response.status_code == 404
        body = response.json()
        assert body["success"] is False
        assert body["code"] == "NOT_FOUND"
        assert body["error"]

    @pytest.mark.asyncio
    async def test_validation_envelope(self, client: AsyncClient):
        response = await client.post("/api/auth/register", json={"email": "nope"})

        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert body["code"] == "VALIDATION_ERROR"
        fields = {d["field"] for d in body["details"]}
        assert "email" in fields
        assert "password" in fields

    @pytest.mark.asyncio
    async def test_unauthenticated_envelope(self, client: AsyncClient):
        response = await client.get("/api/users/me")

        assert response.status_code == 401
        body = response.json()
        assert body["success"] is False
        assert body["code"] == "UNAUTHORIZED"
