"""Tests for health check API endpoints."""

from __future__ import annotations

from unittest.mock import AsyncMock, patch

import pytest
from fastapi import status
from fastapi.testclient import TestClient


class TestHealthEndpoint:
    """Tests for GET /health."""

    def test_health_returns_200(self, client: TestClient):
        response = client.get("/health")
        assert response.status_code == status.HTTP_200_OK

    def test_memory_backend_is_healthy(self, client: TestClient):
        data = client.get("/health").json()
        assert data["status"] == "healthy"
        assert data["checks"] == {}
        assert "version" in data

    def test_valkey_down_is_degraded(self, client: TestClient):
        with patch("swingdesk.api.routes.health.settings") as mock_settings, patch(
            "swingdesk.api.routes.health.valkey_healthcheck",
            new=AsyncMock(return_value=False),
        ):
            mock_settings.cache_backend = "valkey"
            mock_settings.app_version = "1.0.0"
            data = client.get("/health").json()

        assert data["status"] == "degraded"
        assert data["checks"] == {"cache": False}

    def test_security_headers(self, client: TestClient):
        response = client.get("/health")
        assert response.headers["X-Content-Type-Options"] == "nosniff"
        assert response.headers["X-Frame-Options"] == "DENY"
        assert "X-Request-ID" in response.headers


class TestLivenessEndpoint:
    """Tests for GET /health/live."""

    def test_live_returns_alive_status(self, client: TestClient):
        response = client.get("/health/live")
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["status"] == "alive"


class TestValkeyHealthcheck:
    @pytest.mark.asyncio
    async def test_ping_failure_returns_false(self):
        from swingdesk.cache.client import valkey_healthcheck

        with patch(
            "swingdesk.cache.client.get_valkey_client",
            new=AsyncMock(side_effect=ConnectionError("refused")),
        ):
            assert await valkey_healthcheck() is False

    @pytest.mark.asyncio
    async def test_ping_ok(self):
        from swingdesk.cache.client import valkey_healthcheck

        fake = AsyncMock()
        fake.ping.return_value = True
        with patch("swingdesk.cache.client.get_valkey_client", new=AsyncMock(return_value=fake)):
            assert await valkey_healthcheck() is True
