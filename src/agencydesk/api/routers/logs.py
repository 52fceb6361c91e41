"""
Structured-logging router — client log collector.

Endpoints:
    POST /structured-logging   Accept one entry or a batch

Doc-Types: API_REFERENCE
"""

from __future__ import annotations

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse, Response

from agencydesk.api.deps import Settings, Store
from agencydesk.api.schemas.functions import FailureResponse, LogsRequest, LogsResponse
from agencydesk.api.utils import CORS_HEADERS, build_context, preflight_response, resolve_caller
from agencydesk.core.errors import AgencyDeskError
from agencydesk.core.logging import get_logger
from agencydesk.ops.logs import ingest_logs

logger = get_logger(__name__)

router = APIRouter()


def _failure(message: str) -> JSONResponse:
    return JSONResponse(
        status_code=500,
        content=FailureResponse(error=message).model_dump(),
        headers=CORS_HEADERS,
    )


@router.options("/structured-logging", include_in_schema=False)
def logs_preflight() -> Response:
    return preflight_response()


@router.post(
    "/structured-logging",
    response_model=LogsResponse,
    responses={500: {"model": FailureResponse}},
)
def collect_logs(body: LogsRequest, request: Request, store: Store, settings: Settings) -> Response:
    """Normalise and emit client log entries.

    A bearer credential, when present, fills in ``userId`` for entries
    that omit it.

    Example:
        POST /functions/v1/structured-logging
        {"logs": [{"level": "error", "message": "Upload failed"}]}

        Response:
        {"success": true, "logsProcessed": 1, "correlationIds": ["5f0c..."]}
    """
    try:
        content_store = store.open()
    except AgencyDeskError as e:
        logger.error("logs.store_unavailable", error=e.message)
        return _failure(e.message)

    # entries are still collected when the caller cannot be resolved
    try:
        user = resolve_caller(request, content_store)
    except AgencyDeskError as e:
        logger.warning("logs.caller_resolution_failed", error=e.message, category=e.category.value)
        user = None

    ctx = build_context(request, content_store, user=user)
    result = ingest_logs(ctx, body.entries(), environment=settings.environment)
    if not result.success or result.data is None:
        return _failure(result.error.message if result.error else "Failed to process logs")

    response = LogsResponse(
        logs_processed=result.data.logs_processed,
        correlation_ids=result.data.correlation_ids,
    )
    return JSONResponse(content=response.model_dump(by_alias=True), headers=CORS_HEADERS)
