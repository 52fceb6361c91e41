"""
Error handlers — map failures that escape a router to JSON responses.

Routers answer their own expected failures with the function's envelope;
these handlers cover what gets past them.
"""

from __future__ import annotations

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from agencydesk.api.utils import CORS_HEADERS
from agencydesk.core.logging import get_logger

logger = get_logger(__name__)


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all for unhandled exceptions — 500 with ``{error, details}``."""
    logger.exception("api.unhandled_exception", path=request.url.path)
    debug = request.app.state.settings.debug
    return JSONResponse(
        status_code=500,
        content={
            "error": str(exc) if debug else "Internal Server Error",
            "details": "An unexpected error occurred.",
        },
        headers=CORS_HEADERS,
    )


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Undecodable request bodies — 400 ``{success: false, error}``."""
    return JSONResponse(
        status_code=400,
        content={"success": False, "error": "Invalid request body"},
        headers=CORS_HEADERS,
    )
