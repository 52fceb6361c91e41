"""
Tests for GET /functions/v1/health-check.
"""

from __future__ import annotations

from unittest.mock import patch

from agencydesk.api.deps import StoreSession, get_store_session
from agencydesk.core.errors import MissingConfigError, NetworkError

URL = "/functions/v1/health-check"


class TestHealthCheck:
    def test_healthy(self, client):
        resp = client.get(URL)

        assert resp.status_code == 200
        body = resp.json()
        assert body["status"] == "healthy"
        assert body["version"] == "9.9.9"
        assert body["environment"] == "test"
        assert body["checks"]["database"]["status"] == "pass"

    def test_degraded_is_still_200(self, client, api_settings):
        api_settings.llm_api_key = None

        resp = client.get(URL)

        assert resp.status_code == 200
        assert resp.json()["status"] == "degraded"

    def test_store_down_is_503(self, client, store):
        with patch.object(store, "ping", side_effect=NetworkError("connection refused")):
            resp = client.get(URL)

        assert resp.status_code == 503
        assert resp.json()["status"] == "unhealthy"

    def test_unconfigured_store_is_503(self, app, client):
        class Unconfigured(StoreSession):
            def open(self):
                raise MissingConfigError("AGENCYDESK_STORE_URL")

        app.dependency_overrides[get_store_session] = lambda: Unconfigured()

        resp = client.get(URL)

        assert resp.status_code == 503
        assert "AGENCYDESK_STORE_URL" in resp.json()["checks"]["database"]["message"]
