"""
Health probes.

Each check yields ``pass | warn | fail``; the report is ``unhealthy`` if
any check failed, ``degraded`` if any warned, ``healthy`` otherwise.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

from agencydesk.core.timestamps import to_iso8601
from agencydesk.ops.context import OperationContext
from agencydesk.ops.result import OperationResult, start_timer

_PROCESS_START = time.monotonic()


class CheckStatus(str, Enum):
    PASS = "pass"
    WARN = "warn"
    FAIL = "fail"


class OverallStatus(str, Enum):
    HEALTHY = "healthy"
    DEGRADED = "degraded"
    UNHEALTHY = "unhealthy"


@dataclass
class CheckResult:
    status: CheckStatus
    message: str
    response_time_ms: float | None = None

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {"status": self.status.value, "message": self.message}
        if self.response_time_ms is not None:
            d["responseTime"] = round(self.response_time_ms, 2)
        return d


@dataclass
class HealthReport:
    status: OverallStatus
    timestamp: str
    uptime_s: float
    version: str
    environment: str
    checks: dict[str, CheckResult] = field(default_factory=dict)
    response_time_ms: float = 0.0

    @classmethod
    def unavailable(cls, message: str, *, now: datetime, version: str, environment: str) -> HealthReport:
        """Report for when the store could not even be constructed."""
        return cls(
            status=OverallStatus.UNHEALTHY,
            timestamp=to_iso8601(now),
            uptime_s=time.monotonic() - _PROCESS_START,
            version=version,
            environment=environment,
            checks={"database": CheckResult(CheckStatus.FAIL, f"Health check failed: {message}")},
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status.value,
            "timestamp": self.timestamp,
            "uptime": round(self.uptime_s, 3),
            "version": self.version,
            "environment": self.environment,
            "checks": {name: check.to_dict() for name, check in self.checks.items()},
            "metrics": {"responseTime": round(self.response_time_ms, 2)},
        }


def check_database(ctx: OperationContext, *, slow_ms: float) -> CheckResult:
    timer = start_timer()
    try:
        ctx.store.ping()
    except Exception as e:
        return CheckResult(CheckStatus.FAIL, f"Database connection failed: {e}", timer.elapsed_ms)

    elapsed = timer.elapsed_ms
    if elapsed > slow_ms:
        return CheckResult(CheckStatus.WARN, "Database connection slow", elapsed)
    return CheckResult(CheckStatus.PASS, "Database connection healthy", elapsed)


def check_llm(*, configured: bool) -> CheckResult:
    if not configured:
        return CheckResult(CheckStatus.WARN, "LLM gateway key is not configured")
    return CheckResult(CheckStatus.PASS, "LLM gateway configured")


def overall_status(checks: dict[str, CheckResult]) -> OverallStatus:
    statuses = {c.status for c in checks.values()}
    if CheckStatus.FAIL in statuses:
        return OverallStatus.UNHEALTHY
    if CheckStatus.WARN in statuses:
        return OverallStatus.DEGRADED
    return OverallStatus.HEALTHY


def get_health(
    ctx: OperationContext,
    *,
    llm_configured: bool,
    slow_ms: float = 1000.0,
    version: str = "0.0.0",
    environment: str = "production",
) -> OperationResult[HealthReport]:
    """Run every probe. Always succeeds; an unhealthy system is data, not an error."""
    timer = start_timer()
    checks = {
        "database": check_database(ctx, slow_ms=slow_ms),
        "llm": check_llm(configured=llm_configured),
    }
    report = HealthReport(
        status=overall_status(checks),
        timestamp=to_iso8601(ctx.now),
        uptime_s=time.monotonic() - _PROCESS_START,
        version=version,
        environment=environment,
        checks=checks,
        response_time_ms=timer.elapsed_ms,
    )
    return OperationResult.ok(report, elapsed_ms=timer.elapsed_ms)
