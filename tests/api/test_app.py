"""
Tests for the application factory and CORS wiring.
"""

from __future__ import annotations

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from agencydesk.api.app import create_app
from agencydesk.core.settings import AgencyDeskSettings


class TestCreateApp:
    def test_returns_fastapi(self, api_settings):
        app = create_app(settings=api_settings)
        assert isinstance(app, FastAPI)
        assert app.state.settings is api_settings

    def test_routes_mounted_under_prefix(self, api_settings):
        paths = {route.path for route in create_app(settings=api_settings).routes}
        assert {
            "/functions/v1/auto-approve-posts",
            "/functions/v1/structured-logging",
            "/functions/v1/suggest-pricing",
            "/functions/v1/health-check",
        } <= paths

    def test_custom_prefix(self):
        app = create_app(settings=AgencyDeskSettings(store_backend="sqlite", functions_prefix="/fn"))
        assert "/fn/health-check" in {route.path for route in app.routes}

    def test_openapi_served(self, client):
        resp = client.get("/functions/v1/openapi.json")
        assert resp.status_code == 200
        assert resp.json()["info"]["title"] == "agency-desk functions"

    def test_lifespan_runs(self, app):
        with TestClient(app) as client:
            assert client.get("/functions/v1/health-check").status_code == 200


class TestCors:
    def test_preflight_from_browser(self, client):
        resp = client.options(
            "/functions/v1/structured-logging",
            headers={
                "Origin": "https://dashboard.example",
                "Access-Control-Request-Method": "POST",
                "Access-Control-Request-Headers": "authorization, content-type",
            },
        )

        assert resp.status_code == 200
        assert resp.content == b""
        assert resp.headers["access-control-allow-origin"] == "*"
        assert resp.headers["access-control-allow-headers"] == "authorization, x-client-info, apikey, content-type"

    def test_preflight_with_extra_request_header(self, client):
        resp = client.options(
            "/functions/v1/suggest-pricing",
            headers={
                "Origin": "https://dashboard.example",
                "Access-Control-Request-Method": "POST",
                "Access-Control-Request-Headers": "authorization, x-supabase-api-version",
            },
        )

        assert resp.status_code == 200
        assert resp.content == b""

    @pytest.mark.parametrize(
        "path",
        ["auto-approve-posts", "structured-logging", "suggest-pricing", "health-check"],
    )
    def test_every_function_answers_preflight(self, client, path):
        resp = client.options(
            f"/functions/v1/{path}",
            headers={"Origin": "https://dashboard.example", "Access-Control-Request-Method": "POST"},
        )

        assert resp.status_code == 200
        assert resp.content == b""
        assert resp.headers["access-control-allow-origin"] == "*"

    def test_simple_request_gets_origin_header(self, client):
        resp = client.get("/functions/v1/health-check", headers={"Origin": "https://dashboard.example"})
        assert resp.headers["access-control-allow-origin"] == "*"
