"""
Tests for health probes and status aggregation.
"""

from __future__ import annotations

from unittest.mock import patch

from agencydesk.core.errors import NetworkError
from agencydesk.ops.health import (
    CheckResult,
    CheckStatus,
    HealthReport,
    OverallStatus,
    get_health,
    overall_status,
)


class TestOverallStatus:
    def test_all_pass_is_healthy(self):
        checks = {"a": CheckResult(CheckStatus.PASS, ""), "b": CheckResult(CheckStatus.PASS, "")}
        assert overall_status(checks) is OverallStatus.HEALTHY

    def test_warn_is_degraded(self):
        checks = {"a": CheckResult(CheckStatus.PASS, ""), "b": CheckResult(CheckStatus.WARN, "")}
        assert overall_status(checks) is OverallStatus.DEGRADED

    def test_fail_wins_over_warn(self):
        checks = {"a": CheckResult(CheckStatus.FAIL, ""), "b": CheckResult(CheckStatus.WARN, "")}
        assert overall_status(checks) is OverallStatus.UNHEALTHY


class TestGetHealth:
    def test_healthy(self, ctx):
        result = get_health(ctx, llm_configured=True, version="1.2.3", environment="staging")

        assert result.success
        report = result.data
        assert report.status is OverallStatus.HEALTHY
        assert report.checks["database"].status is CheckStatus.PASS
        assert report.version == "1.2.3"
        assert report.environment == "staging"

    def test_missing_llm_key_degrades(self, ctx):
        report = get_health(ctx, llm_configured=False).data

        assert report.status is OverallStatus.DEGRADED
        assert report.checks["llm"].status is CheckStatus.WARN

    def test_ping_failure_is_unhealthy(self, ctx, store):
        with patch.object(store, "ping", side_effect=NetworkError("connection refused")):
            report = get_health(ctx, llm_configured=True).data

        assert report.status is OverallStatus.UNHEALTHY
        assert "connection refused" in report.checks["database"].message

    def test_slow_ping_warns(self, ctx):
        report = get_health(ctx, llm_configured=True, slow_ms=-1).data

        assert report.checks["database"].status is CheckStatus.WARN
        assert report.checks["database"].message == "Database connection slow"

    def test_to_dict_shape(self, ctx):
        d = get_health(ctx, llm_configured=True).data.to_dict()

        assert d["status"] == "healthy"
        assert d["timestamp"] == "2025-03-10T12:00:00+00:00"
        assert set(d["checks"]) == {"database", "llm"}
        assert "responseTime" in d["checks"]["database"]
        assert "responseTime" in d["metrics"]


class TestUnavailableReport:
    def test_is_unhealthy(self, now):
        report = HealthReport.unavailable("store url missing", now=now, version="1", environment="test")

        assert report.status is OverallStatus.UNHEALTHY
        assert report.checks["database"].status is CheckStatus.FAIL
        assert "store url missing" in report.checks["database"].message
