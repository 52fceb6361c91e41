"""
Auto-approval router — the scheduled trigger endpoint.

Endpoints:
    ANY /auto-approve-posts   Run one auto-approval pass

Every method runs the pass (the scheduler may call with GET or POST);
``OPTIONS`` answers the CORS preflight.

Doc-Types: API_REFERENCE
"""

from __future__ import annotations

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse, Response

from agencydesk.api.deps import Store
from agencydesk.api.schemas.functions import AutoApproveResponse, FunctionErrorResponse
from agencydesk.api.utils import CORS_HEADERS, build_context, preflight_response
from agencydesk.core.errors import AgencyDeskError
from agencydesk.core.logging import get_logger
from agencydesk.ops.approvals import auto_approve_posts

logger = get_logger(__name__)

router = APIRouter()

FAILURE_DETAILS = "Failed to auto-approve posts"


def _failure(message: str) -> JSONResponse:
    body = FunctionErrorResponse(error=message, details=FAILURE_DETAILS)
    return JSONResponse(status_code=500, content=body.model_dump(), headers=CORS_HEADERS)


@router.api_route(
    "/auto-approve-posts",
    methods=["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    response_model=AutoApproveResponse,
    responses={500: {"model": FunctionErrorResponse}},
)
def run_auto_approval(request: Request, store: Store) -> Response:
    """Approve every pending post whose deadline has passed.

    Example:
        POST /functions/v1/auto-approve-posts

        Response:
        {
            "message": "Posts auto-approved successfully",
            "processed": 2,
            "posts": [{"id": "...", "status": "approved", ...}]
        }
    """
    if request.method == "OPTIONS":
        return preflight_response()

    try:
        ctx = build_context(request, store.open())
    except AgencyDeskError as e:
        logger.error("approvals.store_unavailable", error=e.message)
        return _failure(e.message)

    result = auto_approve_posts(ctx)
    if not result.success or result.data is None:
        return _failure(result.error.message if result.error else "Unknown error occurred")

    report = result.data
    body = AutoApproveResponse(
        message=report.message,
        processed=report.processed,
        posts=[p.to_dict() for p in report.posts] if report.posts else None,
    )
    return JSONResponse(content=body.model_dump(exclude_none=True), headers=CORS_HEADERS)
