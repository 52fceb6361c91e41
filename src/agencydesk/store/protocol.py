"""
Store protocol — the contract the ops layer depends on.

The hosted database is an opaque collaborator. Operations see only
this structural protocol; :class:`~agencydesk.store.rest.RestStore`
talks to the real service and :class:`~agencydesk.store.sqlite.SqliteStore`
backs local runs and tests.

Contract notes:
    - ``approve_posts`` is a single bulk statement. It either commits for
      every id or raises; callers never see a partial write.
    - Every method raises an :class:`~agencydesk.core.errors.AgencyDeskError`
      subclass on failure (``StoreError`` for rejected queries,
      ``NetworkError`` for transport failures).
    - Stores are created per invocation and closed afterwards.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import date, datetime
from typing import Protocol, runtime_checkable

from agencydesk.core.models import Activity, ContentPost, PricingItem


@runtime_checkable
class ContentStore(Protocol):
    """Operations against the dashboard tables."""

    def select_due_posts(self, now: datetime) -> list[ContentPost]:
        """Posts with status ``pending_approval`` and ``auto_approve_at <= now`` (non-null)."""
        ...

    def approve_posts(self, ids: Sequence[str], approved_at: datetime) -> list[ContentPost]:
        """Bulk-set ``status=approved, approved_at`` for *ids*; return the post-image."""
        ...

    def complete_review_todos(
        self,
        client_id: str,
        *,
        title: str,
        due_on_or_after: date,
        due_on_or_before: date,
        completed_at: datetime,
    ) -> int:
        """Complete open todos of *client_id* with *title* due inside the date window; return count."""
        ...

    def insert_activity(self, activity: Activity) -> Activity:
        """Append an activity-log row; return it with its assigned id."""
        ...

    def list_active_pricing(self, user_id: str) -> list[PricingItem]:
        """Active pricing catalog entries owned by *user_id*."""
        ...

    def resolve_user(self, token: str) -> str | None:
        """Map a bearer credential to a user id, ``None`` if not recognised."""
        ...

    def ping(self) -> None:
        """Cheap round-trip; raises on failure."""
        ...

    def close(self) -> None: ...
