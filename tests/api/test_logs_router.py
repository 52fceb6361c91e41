"""
Tests for POST /functions/v1/structured-logging.
"""

from __future__ import annotations

import uuid
from unittest.mock import patch

import pytest
from structlog.testing import capture_logs

from agencydesk.core.errors import AuthenticationError, NetworkError

URL = "/functions/v1/structured-logging"


class TestStructuredLogging:
    def test_single_entry(self, client):
        resp = client.post(URL, json={"logs": {"level": "info", "message": "page viewed"}})

        assert resp.status_code == 200
        body = resp.json()
        assert body["success"] is True
        assert body["logsProcessed"] == 1
        assert uuid.UUID(body["correlationIds"][0])

    def test_batch_keeps_supplied_correlation_ids(self, client):
        payload = {
            "logs": [
                {"level": "warn", "message": "slow", "correlationId": "c-1"},
                {"level": "error", "message": "failed", "correlationId": "c-2"},
            ]
        }

        resp = client.post(URL, json=payload)

        assert resp.json()["correlationIds"] == ["c-1", "c-2"]

    def test_bearer_user_fills_user_id(self, client, store):
        store.register_token("tok-1", "user-1")

        with capture_logs() as cap_logs:
            client.post(
                URL,
                json={"logs": {"level": "info", "message": "clicked"}},
                headers={"Authorization": "Bearer tok-1"},
            )

        emitted = [e for e in cap_logs if e["event"] == "clicked"]
        assert emitted[0]["user_id"] == "user-1"
        assert emitted[0]["context"]["environment"] == "test"

    def test_explicit_user_id_wins(self, client, store):
        store.register_token("tok-1", "user-1")

        with capture_logs() as cap_logs:
            client.post(
                URL,
                json={"logs": {"level": "info", "message": "clicked", "userId": "other"}},
                headers={"Authorization": "Bearer tok-1"},
            )

        emitted = [e for e in cap_logs if e["event"] == "clicked"]
        assert emitted[0]["user_id"] == "other"

    def test_unknown_token_is_anonymous(self, client):
        resp = client.post(
            URL,
            json={"logs": {"level": "info", "message": "x"}},
            headers={"Authorization": "Bearer nobody"},
        )

        assert resp.status_code == 200

    @pytest.mark.parametrize("error", [AuthenticationError("auth down"), NetworkError("auth unreachable")])
    def test_auth_failure_still_collects_entries(self, client, store, error):
        with patch.object(store, "resolve_user", side_effect=error), capture_logs() as cap_logs:
            resp = client.post(
                URL,
                json={"logs": {"level": "error", "message": "upload failed", "correlationId": "c-9"}},
                headers={"Authorization": "Bearer tok-1"},
            )

        assert resp.status_code == 200
        assert resp.json()["correlationIds"] == ["c-9"]
        emitted = [e for e in cap_logs if e["event"] == "upload failed"]
        assert emitted[0]["user_id"] is None
        assert any(e["event"] == "logs.caller_resolution_failed" for e in cap_logs)

    def test_invalid_level_is_rejected(self, client):
        resp = client.post(URL, json={"logs": {"level": "verbose", "message": "x"}})

        assert resp.status_code == 400
        assert resp.json() == {"success": False, "error": "Invalid request body"}

    def test_options(self, client):
        resp = client.options(URL)

        assert resp.status_code == 200
        assert resp.headers["Access-Control-Allow-Origin"] == "*"
