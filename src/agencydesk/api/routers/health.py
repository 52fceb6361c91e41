"""
Health router.

Endpoints:
    GET /health-check   200 when healthy or degraded, 503 when unhealthy
"""

from __future__ import annotations

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse, Response

from agencydesk.api.deps import Settings, Store
from agencydesk.api.utils import CORS_HEADERS, build_context, preflight_response
from agencydesk.core.errors import AgencyDeskError
from agencydesk.core.timestamps import utc_now
from agencydesk.ops.health import HealthReport, OverallStatus, get_health

router = APIRouter()


@router.options("/health-check", include_in_schema=False)
def health_preflight() -> Response:
    return preflight_response()


@router.get("/health-check")
def health_check(request: Request, store: Store, settings: Settings) -> Response:
    try:
        ctx = build_context(request, store.open())
    except AgencyDeskError as e:
        report = HealthReport.unavailable(
            e.message,
            now=utc_now(),
            version=settings.app_version,
            environment=settings.environment,
        )
    else:
        report = get_health(
            ctx,
            llm_configured=bool(settings.llm_api_key),
            slow_ms=settings.health_slow_ms,
            version=settings.app_version,
            environment=settings.environment,
        ).data

    status_code = 503 if report.status is OverallStatus.UNHEALTHY else 200
    return JSONResponse(status_code=status_code, content=report.to_dict(), headers=CORS_HEADERS)
