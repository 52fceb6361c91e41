"""
Per-client rate-limiting middleware using a fixed-window counter.

When enabled, each client IP may make at most ``rpm`` requests per
60-second window. Excess requests receive 429 with ``Retry-After``; every
response carries ``X-RateLimit-Limit`` / ``-Remaining`` / ``-Reset``.

Counters live in process memory, so limits are per worker.
"""

from __future__ import annotations

import math
import time
from collections import defaultdict
from dataclasses import dataclass, field

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from agencydesk.api.utils import CORS_HEADERS


@dataclass
class _WindowCounter:
    """Fixed-window counter for a single client."""

    count: int = 0
    window_start: float = field(default_factory=time.monotonic)


def client_ip(request: Request) -> str:
    """Client address, honouring proxy headers in the order they are trusted."""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    for header in ("X-Real-IP", "CF-Connecting-IP"):
        value = request.headers.get(header)
        if value:
            return value
    return request.client.host if request.client else "unknown"


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Fixed-window per-IP rate limiter.

    Parameters
    ----------
    app:
        The ASGI application to wrap.
    enabled:
        Master switch — when ``False`` all requests pass through.
    rpm:
        Maximum requests per minute per client IP.
    """

    def __init__(
        self,
        app: object,
        enabled: bool = False,
        rpm: int = 60,
        window_seconds: float = 60.0,
    ) -> None:
        super().__init__(app)  # type: ignore[arg-type]
        self._enabled = enabled
        self._rpm = rpm
        self._window_seconds = window_seconds
        self._counters: dict[str, _WindowCounter] = defaultdict(_WindowCounter)

    def _purge_expired(self, now: float) -> None:
        expired = [ip for ip, c in self._counters.items() if now - c.window_start >= self._window_seconds]
        for ip in expired:
            del self._counters[ip]

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if not self._enabled:
            return await call_next(request)

        now = time.monotonic()
        self._purge_expired(now)
        counter = self._counters[client_ip(request)]
        counter.count += 1

        window_left = self._window_seconds - (now - counter.window_start)
        reset_at = int(time.time() + window_left)
        headers = {
            "X-RateLimit-Limit": str(self._rpm),
            "X-RateLimit-Remaining": str(max(0, self._rpm - counter.count)),
            "X-RateLimit-Reset": str(reset_at),
        }

        if counter.count > self._rpm:
            retry_after = max(1, math.ceil(window_left))
            return JSONResponse(
                status_code=429,
                content={
                    "error": "Too Many Requests",
                    "message": f"Rate limit exceeded. Try again in {retry_after} seconds.",
                    "limit": self._rpm,
                    "retryAfter": retry_after,
                },
                headers={**headers, **CORS_HEADERS, "Retry-After": str(retry_after)},
            )

        response = await call_next(request)
        response.headers.update(headers)
        return response
