"""
Shared router helpers.

- ``CORS_HEADERS``: headers every function answers a bare ``OPTIONS`` with
- ``bearer_token()``: credential from the ``Authorization`` header
- ``build_context()``: an :class:`OperationContext` for the current request
- ``resolve_caller()``: bearer credential → user id through the store
"""

from __future__ import annotations

import uuid

from fastapi import Request
from fastapi.responses import Response

from agencydesk.core.logging import get_logger
from agencydesk.ops.context import OperationContext
from agencydesk.store.protocol import ContentStore

logger = get_logger(__name__)

ALLOWED_HEADERS = ["authorization", "x-client-info", "apikey", "content-type"]

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": ", ".join(ALLOWED_HEADERS),
}


def preflight_response() -> Response:
    """Empty 200 carrying the CORS headers."""
    return Response(status_code=200, headers=CORS_HEADERS)


def bearer_token(request: Request) -> str | None:
    header = request.headers.get("Authorization")
    if not header:
        return None
    token = header.removeprefix("Bearer ").strip()
    return token or None


def resolve_caller(request: Request, store: ContentStore) -> str | None:
    """User id for the request's bearer credential, ``None`` if absent or unknown."""
    token = bearer_token(request)
    if token is None:
        return None
    user = store.resolve_user(token)
    if user is None:
        logger.debug("api.bearer_unresolved")
    return user


def build_context(
    request: Request,
    store: ContentStore,
    *,
    user: str | None = None,
    dry_run: bool = False,
) -> OperationContext:
    request_id = getattr(request.state, "request_id", str(uuid.uuid4()))
    return OperationContext(
        store=store,
        request_id=request_id,
        caller="api",
        user=user,
        dry_run=dry_run,
    )
