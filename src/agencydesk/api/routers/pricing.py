"""
Pricing-suggestion router.

Endpoints:
    POST /suggest-pricing   Quote suggestion from the caller's catalog

Doc-Types: API_REFERENCE
"""

from __future__ import annotations

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse, Response

from agencydesk.api.deps import LLM, Settings, Store
from agencydesk.api.schemas.functions import FailureResponse, PricingRequest, PricingResponse
from agencydesk.api.utils import CORS_HEADERS, build_context, preflight_response, resolve_caller
from agencydesk.core.errors import AgencyDeskError, MissingConfigError
from agencydesk.core.logging import get_logger
from agencydesk.ops.pricing import suggest_pricing

logger = get_logger(__name__)

router = APIRouter()


def _failure(message: str) -> JSONResponse:
    return JSONResponse(
        status_code=500,
        content=FailureResponse(error=message).model_dump(),
        headers=CORS_HEADERS,
    )


@router.options("/suggest-pricing", include_in_schema=False)
def pricing_preflight() -> Response:
    return preflight_response()


@router.post(
    "/suggest-pricing",
    response_model=PricingResponse,
    responses={500: {"model": FailureResponse}},
)
def suggest(body: PricingRequest, request: Request, store: Store, llm: LLM, settings: Settings) -> Response:
    """Suggest catalog services and quantities for a client description.

    Requires a bearer credential; the suggestion draws only on the
    caller's own active catalog.
    """
    if not body.client_description:
        return _failure("Client description is required")
    if llm is None:
        return _failure(MissingConfigError("AGENCYDESK_LLM_API_KEY").message)

    try:
        content_store = store.open()
        user = resolve_caller(request, content_store)
    except AgencyDeskError as e:
        logger.error("pricing.caller_resolution_failed", error=e.message)
        return _failure(e.message)

    ctx = build_context(request, content_store, user=user)
    result = suggest_pricing(ctx, llm, body.client_description, model=settings.llm_model)
    if not result.success or result.data is None:
        return _failure(result.error.message if result.error else "Failed to generate pricing suggestion")

    return JSONResponse(
        content=PricingResponse(data=result.data.data).model_dump(),
        headers=CORS_HEADERS,
    )
