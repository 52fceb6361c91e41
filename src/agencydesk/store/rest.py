"""
REST store — httpx client for the hosted database.

Tables are reached through the PostgREST endpoint ``{url}/rest/v1/{table}``
using its query-string filter grammar (``status=eq.pending_approval``,
``id=in.(a,b)``, ``auto_approve_at=not.is.null``). Bearer credentials are
resolved through the auth endpoint ``{url}/auth/v1/user``.

Every request carries the service-role key both as ``apikey`` and as the
bearer token, so row-level security is bypassed for these back-office
functions.

Usage::

    store = RestStore("https://abc.supabase.co", service_key)
    try:
        posts = store.select_due_posts(utc_now())
    finally:
        store.close()
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import date, datetime
from typing import Any

import httpx

from agencydesk.core.errors import (
    AuthenticationError,
    MissingConfigError,
    NetworkError,
    RateLimitError,
    StoreError,
)
from agencydesk.core.logging import get_logger
from agencydesk.core.models import Activity, ContentPost, PostStatus, PricingItem
from agencydesk.core.settings import AgencyDeskSettings
from agencydesk.core.timestamps import to_iso8601

logger = get_logger(__name__)

_POST_COLUMNS = "id,client_id,caption,platforms,status,scheduled_time,auto_approve_at,approved_at,created_by,media_urls"


def _error_message(response: httpx.Response) -> str:
    """Pull the human message out of a PostgREST / auth error body."""
    try:
        body = response.json()
    except ValueError:
        return response.text or f"HTTP {response.status_code}"
    if isinstance(body, dict):
        for key in ("message", "msg", "error_description", "error"):
            if body.get(key):
                return str(body[key])
    return f"HTTP {response.status_code}"


class RestStore:
    """:class:`~agencydesk.store.protocol.ContentStore` over the hosted REST API.

    Parameters
    ----------
    base_url:
        Project URL (``https://<ref>.supabase.co``).
    service_key:
        Service-role credential.
    timeout:
        Per-request timeout in seconds.
    transport:
        Optional httpx transport (tests pass ``httpx.MockTransport``).
    """

    def __init__(
        self,
        base_url: str,
        service_key: str,
        *,
        timeout: float = 10.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._service_key = service_key
        self._client = httpx.Client(
            base_url=base_url.rstrip("/"),
            headers={
                "apikey": service_key,
                "Authorization": f"Bearer {service_key}",
                "Content-Type": "application/json",
            },
            timeout=timeout,
            transport=transport,
        )

    @classmethod
    def from_settings(
        cls,
        settings: AgencyDeskSettings,
        *,
        transport: httpx.BaseTransport | None = None,
    ) -> RestStore:
        if not settings.store_url:
            raise MissingConfigError("AGENCYDESK_STORE_URL")
        if not settings.store_service_key:
            raise MissingConfigError("AGENCYDESK_STORE_SERVICE_KEY")
        return cls(
            settings.store_url,
            settings.store_service_key,
            timeout=settings.store_timeout_s,
            transport=transport,
        )

    # ── transport ────────────────────────────────────────────────────────

    def _request(
        self,
        method: str,
        path: str,
        *,
        params: list[tuple[str, str]] | None = None,
        json: Any = None,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        try:
            response = self._client.request(method, path, params=params, json=json, headers=headers)
        except httpx.TimeoutException as e:
            raise NetworkError(f"Store request timed out: {method} {path}", cause=e) from e
        except httpx.TransportError as e:
            raise NetworkError(f"Store unreachable: {e}", cause=e) from e

        if response.status_code == 429:
            retry_after = response.headers.get("Retry-After")
            raise RateLimitError(
                _error_message(response),
                retry_after=int(retry_after) if retry_after and retry_after.isdigit() else None,
            )
        if response.status_code >= 400:
            raise StoreError(
                _error_message(response),
                details={"status": response.status_code, "path": path},
            )
        return response

    def _rows(self, response: httpx.Response) -> list[dict[str, Any]]:
        if not response.content:
            return []
        body = response.json()
        return body if isinstance(body, list) else [body]

    # ── content_posts ────────────────────────────────────────────────────

    def select_due_posts(self, now: datetime) -> list[ContentPost]:
        response = self._request(
            "GET",
            "/rest/v1/content_posts",
            params=[
                ("select", _POST_COLUMNS),
                ("status", f"eq.{PostStatus.PENDING_APPROVAL.value}"),
                ("auto_approve_at", "not.is.null"),
                ("auto_approve_at", f"lte.{to_iso8601(now)}"),
            ],
        )
        return [ContentPost.from_row(row) for row in self._rows(response)]

    def approve_posts(self, ids: Sequence[str], approved_at: datetime) -> list[ContentPost]:
        if not ids:
            return []
        response = self._request(
            "PATCH",
            "/rest/v1/content_posts",
            params=[("id", f"in.({','.join(ids)})"), ("select", _POST_COLUMNS)],
            json={"status": PostStatus.APPROVED.value, "approved_at": to_iso8601(approved_at)},
            headers={"Prefer": "return=representation"},
        )
        return [ContentPost.from_row(row) for row in self._rows(response)]

    # ── todos ────────────────────────────────────────────────────────────

    def complete_review_todos(
        self,
        client_id: str,
        *,
        title: str,
        due_on_or_after: date,
        due_on_or_before: date,
        completed_at: datetime,
    ) -> int:
        response = self._request(
            "PATCH",
            "/rest/v1/todos",
            params=[
                ("client_id", f"eq.{client_id}"),
                ("title", f"eq.{title}"),
                ("completed", "eq.false"),
                ("due_date", f"gte.{due_on_or_after.isoformat()}"),
                ("due_date", f"lte.{due_on_or_before.isoformat()}"),
                ("select", "id"),
            ],
            json={"completed": True, "completed_at": to_iso8601(completed_at)},
            headers={"Prefer": "return=representation"},
        )
        return len(self._rows(response))

    # ── activities ───────────────────────────────────────────────────────

    def insert_activity(self, activity: Activity) -> Activity:
        response = self._request(
            "POST",
            "/rest/v1/activities",
            json=activity.to_insert(),
            headers={"Prefer": "return=representation"},
        )
        rows = self._rows(response)
        if not rows:
            return activity
        return Activity.from_row(rows[0])

    # ── pricing_catalog ──────────────────────────────────────────────────

    def list_active_pricing(self, user_id: str) -> list[PricingItem]:
        response = self._request(
            "GET",
            "/rest/v1/pricing_catalog",
            params=[("select", "*"), ("user_id", f"eq.{user_id}"), ("is_active", "eq.true")],
        )
        return [PricingItem.from_row(row) for row in self._rows(response)]

    # ── auth ─────────────────────────────────────────────────────────────

    def resolve_user(self, token: str) -> str | None:
        try:
            response = self._request(
                "GET",
                "/auth/v1/user",
                headers={"Authorization": f"Bearer {token}"},
            )
        except StoreError as e:
            if e.details.get("status") in (401, 403):
                logger.debug("store.auth.rejected", status=e.details["status"])
                return None
            raise AuthenticationError(e.message, cause=e) from e
        user_id = response.json().get("id")
        return str(user_id) if user_id else None

    # ── lifecycle ────────────────────────────────────────────────────────

    def ping(self) -> None:
        self._request("GET", "/rest/v1/clients", params=[("select", "id"), ("limit", "1")])

    def close(self) -> None:
        self._client.close()

    def __repr__(self) -> str:
        return f"RestStore({str(self._client.base_url)!r})"
