"""
API Route Tests

Exercises the REST surface against an in-process session; the lifespan (and
with it the simulated feed) is not started.
"""

import pytest
from fastapi.testclient import TestClient

from fxpulse.main import app
from fxpulse.services.session import AnalysisSession
from fxpulse.services.session import session as session_module

from tests.conftest import FakePredictor

client = TestClient(app)


@pytest.fixture(autouse=True)
def fresh_session(monkeypatch):
    session = AnalysisSession(pair="EUR/USD", predictor=FakePredictor())
    monkeypatch.setattr(session_module, "_session", session)
    return session


class TestHealthRoute:

    def test_health_returns_200(self):
        resp = client.get("/health")
        assert resp.status_code == 200
        data = resp.json()
        assert data["status"] == "healthy"
        assert "prediction_ready" in data

    def test_root(self):
        assert client.get("/").json()["docs"] == "/docs"


class TestSessionRoutes:

    def test_snapshot(self):
        resp = client.get("/api/v1/session")
        assert resp.status_code == 200
        data = resp.json()
        assert data["pair"] == "EUR/USD"
        assert data["generation"] == 0
        assert data["bars"] == []
        assert data["prediction_settings"] == {"temperature": 0.5, "history_length": 50}

    def test_pairs(self):
        names = [p["name"] for p in client.get("/api/v1/session/pairs").json()]
        assert names == ["EUR/USD", "USD/JPY", "GBP/USD", "USD/CHF", "AUD/USD"]

    def test_change_pair(self):
        resp = client.put("/api/v1/session/pair", json={"pair": "usd/jpy"})
        assert resp.status_code == 200
        assert resp.json()["pair"] == "USD/JPY"
        assert resp.json()["generation"] == 1

    def test_unknown_pair_rejected(self, fresh_session):
        resp = client.put("/api/v1/session/pair", json={"pair": "XAU/USD"})
        assert resp.status_code == 400
        assert fresh_session.pair == "EUR/USD"

    def test_prediction_settings(self):
        resp = client.put("/api/v1/session/prediction", json={"temperature": 0.2})
        assert resp.status_code == 200
        assert resp.json()["prediction_settings"]["temperature"] == 0.2
        assert resp.json()["generation"] == 0

    @pytest.mark.parametrize("body", [{"history_length": 33}, {"history_length": 150}, {"temperature": 2}])
    def test_invalid_prediction_settings(self, body):
        resp = client.put("/api/v1/session/prediction", json=body)
        assert resp.status_code == 422

    def test_update_indicator(self):
        resp = client.put("/api/v1/session/indicators/sma", json={"enabled": True, "period": 10})
        assert resp.status_code == 200
        sma = resp.json()["indicator_settings"]["sma"]
        assert sma["enabled"] is True
        assert sma["period"] == 10

    def test_unknown_indicator(self):
        resp = client.put("/api/v1/session/indicators/macd", json={"enabled": True})
        assert resp.status_code == 422

    def test_indicator_period_too_small(self):
        resp = client.put("/api/v1/session/indicators/rsi", json={"period": 1})
        assert resp.status_code == 422

    def test_pattern_filter(self):
        resp = client.put("/api/v1/session/patterns/filter", json={"neutral": False})
        assert resp.status_code == 200
        assert resp.json()["pattern_filter"] == {"bullish": True, "bearish": True, "neutral": False}

    def test_toggle_pattern(self):
        resp = client.put("/api/v1/session/patterns/Doji", json={"enabled": False})
        assert resp.status_code == 200
        assert resp.json()["pattern_config"]["Doji"] is False

    def test_dismiss_alert(self):
        resp = client.delete("/api/v1/session/alert")
        assert resp.status_code == 200
        assert resp.json()["pattern_alert"] is None
