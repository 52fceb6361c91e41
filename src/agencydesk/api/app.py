"""
FastAPI application factory.

``create_app()`` wires middleware, routers, error handlers and lifespan
events into a single ``FastAPI`` instance. Every function is mounted
under ``settings.functions_prefix`` (``/functions/v1`` by default) so the
dashboard can call the same paths it uses against the hosted runtime.

Doc-Types:
    api-reference
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError

from agencydesk import __version__
from agencydesk.api.deps import get_settings
from agencydesk.api.middleware.errors import request_validation_handler, unhandled_exception_handler
from agencydesk.api.middleware.rate_limit import RateLimitMiddleware
from agencydesk.api.middleware.request_id import RequestIDMiddleware
from agencydesk.api.middleware.timing import TimingMiddleware
from agencydesk.core.logging import configure_logging, get_logger
from agencydesk.core.settings import AgencyDeskSettings


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan — startup / shutdown hooks."""
    settings: AgencyDeskSettings = app.state.settings
    configure_logging(level=settings.log_level, json_format=settings.log_json)

    log = get_logger("agencydesk.api")
    log.info(
        "agency-desk functions starting",
        version=app.version,
        store_backend=settings.store_backend,
        llm_configured=bool(settings.llm_api_key),
    )
    yield
    log.info("agency-desk functions shutting down")


def create_app(
    *,
    settings: AgencyDeskSettings | None = None,
) -> FastAPI:
    """Build and return a fully-configured FastAPI application.

    Parameters
    ----------
    settings : AgencyDeskSettings | None
        Override settings (useful for testing). When ``None`` the cached
        singleton from :func:`get_settings` is used.
    """

    settings = settings or get_settings()

    app = FastAPI(
        title="agency-desk functions",
        version=__version__,
        lifespan=lifespan,
        docs_url=f"{settings.functions_prefix}/docs",
        redoc_url=None,
        openapi_url=f"{settings.functions_prefix}/openapi.json",
    )

    app.state.settings = settings
    app.dependency_overrides[get_settings] = lambda: settings

    # ── Middleware (last added runs first) ────────────────────────────
    app.add_middleware(TimingMiddleware)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(
        RateLimitMiddleware,
        enabled=settings.rate_limit_enabled,
        rpm=settings.rate_limit_rpm,
    )

    # ── Exception handlers ───────────────────────────────────────────
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    # ── Routers ──────────────────────────────────────────────────────
    from agencydesk.api.routers import approvals, health, logs, pricing

    prefix = settings.functions_prefix
    app.include_router(approvals.router, prefix=prefix, tags=["approvals"])
    app.include_router(logs.router, prefix=prefix, tags=["logging"])
    app.include_router(pricing.router, prefix=prefix, tags=["pricing"])
    app.include_router(health.router, prefix=prefix, tags=["health"])

    return app
