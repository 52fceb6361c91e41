"""
Tests for API middleware — request ID, timing, rate limiting, error handler.
"""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.testclient import TestClient

from agencydesk.api.middleware.errors import unhandled_exception_handler
from agencydesk.api.middleware.rate_limit import RateLimitMiddleware
from agencydesk.core.settings import AgencyDeskSettings

HEALTH = "/functions/v1/health-check"


class TestRequestId:
    def test_generated(self, client):
        resp = client.get(HEALTH)
        assert resp.headers["X-Request-ID"]

    def test_echoed(self, client):
        resp = client.get(HEALTH, headers={"X-Request-ID": "req-123"})
        assert resp.headers["X-Request-ID"] == "req-123"


class TestTiming:
    def test_header_present(self, client):
        resp = client.get(HEALTH)
        assert float(resp.headers["X-Process-Time-Ms"]) >= 0


def _limited_app(rpm: int) -> FastAPI:
    app = FastAPI()
    app.add_middleware(RateLimitMiddleware, enabled=True, rpm=rpm)

    @app.get("/ping")
    def ping():
        return {"ok": True}

    return app


class TestRateLimit:
    def test_allows_up_to_limit(self):
        client = TestClient(_limited_app(rpm=2))

        first = client.get("/ping")
        second = client.get("/ping")

        assert first.status_code == 200
        assert first.headers["X-RateLimit-Limit"] == "2"
        assert first.headers["X-RateLimit-Remaining"] == "1"
        assert second.headers["X-RateLimit-Remaining"] == "0"
        assert "X-RateLimit-Reset" in second.headers

    def test_rejects_over_limit(self):
        client = TestClient(_limited_app(rpm=1))
        client.get("/ping")

        resp = client.get("/ping")

        assert resp.status_code == 429
        assert int(resp.headers["Retry-After"]) >= 1
        body = resp.json()
        assert body["error"] == "Too Many Requests"
        assert body["limit"] == 1

    def test_counts_per_forwarded_ip(self):
        client = TestClient(_limited_app(rpm=1))

        a = client.get("/ping", headers={"X-Forwarded-For": "10.0.0.1"})
        b = client.get("/ping", headers={"X-Forwarded-For": "10.0.0.2, 172.16.0.1"})

        assert a.status_code == 200
        assert b.status_code == 200

    def test_disabled_passes_through(self):
        app = FastAPI()
        app.add_middleware(RateLimitMiddleware, enabled=False, rpm=1)

        @app.get("/ping")
        def ping():
            return {"ok": True}

        client = TestClient(app)
        assert all(client.get("/ping").status_code == 200 for _ in range(3))
        assert "X-RateLimit-Limit" not in client.get("/ping").headers


class TestUnhandledErrors:
    def _app(self, debug: bool) -> FastAPI:
        app = FastAPI()
        app.state.settings = AgencyDeskSettings(debug=debug)
        app.add_exception_handler(Exception, unhandled_exception_handler)

        @app.get("/boom")
        def boom():
            raise RuntimeError("kaboom")

        return app

    def test_hides_message_by_default(self):
        resp = TestClient(self._app(debug=False), raise_server_exceptions=False).get("/boom")

        assert resp.status_code == 500
        assert resp.json() == {"error": "Internal Server Error", "details": "An unexpected error occurred."}

    def test_debug_exposes_message(self):
        resp = TestClient(self._app(debug=True), raise_server_exceptions=False).get("/boom")

        assert resp.json()["error"] == "kaboom"

