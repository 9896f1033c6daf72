"""
Tests for the HTTP adapter.
"""

import pytest
from fastapi.testclient import TestClient
from api.main import app

API_KEY = "test-key"


@pytest.fixture
def client(monkeypatch):
    monkeypatch.setenv("STOCKWISE_API_KEY", API_KEY)
    return TestClient(app)


def _payload(values, **config):
    return {
        "observations": [
            {"timestamp": f"2024-01-{day + 1:02d}T00:00:00Z", "value": v}
            for day, v in enumerate(values)
        ],
        "config": config,
        "now": "2024-01-20T00:00:00Z",
    }


def test_root(client):
    assert client.get("/").json()["name"] == "Stockwise Analytics API"


def test_health_without_key(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] in ("healthy", "degraded", "unhealthy")


def test_analyze_requires_api_key(client):
    response = client.post("/api/v1/analytics/analyze", json=_payload([100] * 10))
    assert response.status_code == 401


def test_analyze(client):
    values = [100] * 12
    values[9] = 1000
    response = client.post(
        "/api/v1/analytics/analyze",
        json=_payload(values, timeWindow="30d", forecastPeriods=3),
        headers={"X-API-Key": API_KEY},
    )
    assert response.status_code == 200
    body = response.json()
    assert set(body) == {"trend", "anomalies", "forecast", "insights", "metrics"}
    assert len(body["anomalies"]) == 1
    assert body["anomalies"][0]["type"] == "spike"
    assert len(body["forecast"]) == 3
    assert body["metrics"]["count"] == 12


def test_analyze_empty(client):
    response = client.post(
        "/api/v1/analytics/analyze",
        json={"observations": []},
        headers={"X-API-Key": API_KEY},
    )
    assert response.status_code == 200
    assert response.json()["trend"]["description"] == "No data"


def test_analyze_invalid_config(client):
    response = client.post(
        "/api/v1/analytics/analyze",
        json=_payload([100] * 10, sensitivity="extreme"),
        headers={"X-API-Key": API_KEY},
    )
    assert response.status_code == 422
    assert "sensitivity" in response.json()["detail"]


def test_analyze_invalid_observation(client):
    response = client.post(
        "/api/v1/analytics/analyze",
        json={"observations": [{"timestamp": "soon", "value": 1}]},
        headers={"X-API-Key": API_KEY},
    )
    assert response.status_code == 422


def test_export(client):
    response = client.post(
        "/api/v1/analytics/export",
        json=_payload([100] * 10),
        headers={"X-API-Key": API_KEY},
    )
    assert response.status_code == 200
    body = response.json()
    assert body["filename"] == "analytics_2024-01-20.json"
    assert body["document"]["config"]["time_window"] == "30d"
    assert len(body["document"]["data"]) == 10


@pytest.mark.parametrize("body", [
    {"observations": [5]},
    {"observations": ["abc"]},
    {"observations": [], "config": "high"},
    {"observations": "abc"},
    {"observations": [], "now": 12},
])
def test_malformed_bodies_rejected(client, body):
    response = client.post("/api/v1/analytics/analyze", json=body, headers={"X-API-Key": API_KEY})
    assert response.status_code == 422


def test_export_holds_only_analysed_window(client):
    response = client.post(
        "/api/v1/analytics/export",
        json=_payload(list(range(100, 120)), timeWindow="7d"),
        headers={"X-API-Key": API_KEY},
    )
    assert response.status_code == 200
    document = response.json()["document"]
    # Jan 13 .. Jan 20 inclusive
    assert len(document["data"]) == 8
    assert document["analytics"]["metrics"]["count"] == 8
    assert document["data"][0]["timestamp"] == "2024-01-13T00:00:00Z"
