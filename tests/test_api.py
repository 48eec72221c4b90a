"""Tests for the analysis and recommendation endpoints."""

from __future__ import annotations

from fastapi import status
from fastapi.testclient import TestClient

from conftest import FakePriceProvider, make_history
from swingdesk.core.config import settings


class TestAnalyzeEndpoint:
    """Tests for POST /analysis."""

    def test_returns_camel_case_record(self, client: TestClient):
        response = client.post("/analysis", json={"symbol": "reliance"})

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["symbol"] == "RELIANCE"
        assert data["companyName"] == "Reliance Industries Limited"
        assert data["cached"] is False
        assert data["riskReward"].startswith("1:")
        assert len(data["chartData"]) == 90
        assert set(data["supportResistance"]) == {"support", "resistance"}
        assert data["positionSizing"]["portfolioValue"] == 100_000
        assert "recommendedShares" in data["positionSizing"]
        assert set(data["technicals"]) == {
            "price", "dma50", "rsi14", "macdSignal", "volumeVsAvg", "atr14"
        }

    def test_second_request_is_cached(self, client: TestClient, provider: FakePriceProvider):
        client.post("/analysis", json={"symbol": "RELIANCE"})
        response = client.post("/analysis", json={"symbol": "RELIANCE"})

        assert response.json()["cached"] is True
        assert provider.calls == ["RELIANCE"]

    def test_force_refresh(self, client: TestClient, provider: FakePriceProvider):
        client.post("/analysis", json={"symbol": "RELIANCE"})
        response = client.post("/analysis", json={"symbol": "RELIANCE", "forceRefresh": True})

        assert response.json()["cached"] is False
        assert len(provider.calls) == 2

    def test_no_data_is_503(self, client: TestClient):
        response = client.post("/analysis", json={"symbol": "EMPTY"})

        assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
        data = response.json()
        assert data["error"] == "NO_DATA"
        assert data["message"] == "Analysis unavailable"
        assert data["status"] == 503
        assert data["details"] == {"symbol": "EMPTY"}

    def test_provider_failure_is_503(self, client: TestClient):
        response = client.post("/analysis", json={"symbol": "UNKNOWN"})

        assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
        assert response.json()["error"] == "PRICE_FEED_UNAVAILABLE"

    def test_missing_symbol_is_422(self, client: TestClient):
        response = client.post("/analysis", json={})
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_CONTENT

    def test_request_id_is_echoed(self, client: TestClient):
        response = client.post(
            "/analysis", json={"symbol": "RELIANCE"}, headers={"X-Request-ID": "abc-123"}
        )
        assert response.headers["X-Request-ID"] == "abc-123"


class TestGetAnalysisEndpoint:
    """Tests for GET /analysis/{symbol}."""

    def test_get_uses_cache(self, client: TestClient, provider: FakePriceProvider):
        client.post("/analysis", json={"symbol": "RELIANCE"})
        response = client.get("/analysis/reliance")

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["cached"] is True
        assert provider.calls == ["RELIANCE"]

    def test_refresh_query(self, client: TestClient, provider: FakePriceProvider):
        client.get("/analysis/RELIANCE")
        response = client.get("/analysis/RELIANCE", params={"refresh": "true"})

        assert response.json()["cached"] is False
        assert len(provider.calls) == 2


class TestMorningEndpoint:
    """Tests for GET /recommendations/morning."""

    def test_morning_scan(self, client: TestClient, provider: FakePriceProvider):
        provider.add(make_history("TCS", [100.0 + i for i in range(31)]))

        response = client.get("/recommendations/morning")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["success"] is True
        assert data["totalAnalyzed"] == len(settings.morning_watchlist)
        # only TCS and RELIANCE have history; TCS trends, RELIANCE holds
        assert [r["symbol"] for r in data["recommendations"]] == ["TCS", "RELIANCE"]
        first = data["recommendations"][0]
        assert {"buyingPrice", "sellingPrice", "stopLoss", "dma20", "dma30"} <= set(first)

    def test_refresh_param(self, client: TestClient, provider: FakePriceProvider):
        client.get("/recommendations/morning")
        calls = len(provider.calls)
        client.get("/recommendations/morning")
        assert len(provider.calls) == calls

        client.get("/recommendations/morning", params={"refresh": "true"})
        assert len(provider.calls) == 2 * calls
