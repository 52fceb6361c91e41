"""
Shared pytest fixtures for agency-desk tests.

This module provides:
- A frozen clock (``NOW``) so deadline comparisons are deterministic
- An in-memory :class:`SqliteStore` per test
- ``OperationContext`` fixtures (normal and dry-run)
- Row factory fixtures for posts, todos and pricing items
"""

from __future__ import annotations

from collections.abc import Generator
from datetime import UTC, date, datetime, timedelta

import pytest
import structlog

from agencydesk.core.models import ContentPost, PostStatus, PricingItem, Todo
from agencydesk.ops.context import OperationContext
from agencydesk.store.sqlite import SqliteStore

NOW = datetime(2025, 3, 10, 12, 0, tzinfo=UTC)


def _make_post(
    post_id: str = "post-1",
    *,
    client_id: str = "client-1",
    status: PostStatus = PostStatus.PENDING_APPROVAL,
    auto_approve_at: datetime | None = NOW - timedelta(hours=1),
    platforms: list[str] | None = None,
    created_by: str | None = "user-1",
) -> ContentPost:
    return ContentPost(
        id=post_id,
        client_id=client_id,
        caption=f"caption for {post_id}",
        platforms=["instagram"] if platforms is None else platforms,
        status=status,
        scheduled_time=NOW + timedelta(days=1),
        auto_approve_at=auto_approve_at,
        created_by=created_by,
    )


def _make_todo(
    todo_id: str = "todo-1",
    *,
    client_id: str = "client-1",
    title: str = "Review Content Post",
    due_date: date | None = None,
    completed: bool = False,
) -> Todo:
    return Todo(
        id=todo_id,
        client_id=client_id,
        title=title,
        due_date=due_date or NOW.date(),
        completed=completed,
        created_by="user-1",
    )


def _make_pricing(
    item_id: str = "svc-1",
    *,
    user_id: str = "user-1",
    name_en: str = "Monthly content package",
    unit_price: float = 1500.0,
    is_active: bool = True,
) -> PricingItem:
    return PricingItem(
        id=item_id,
        user_id=user_id,
        name_en=name_en,
        name_ar="باقة المحتوى الشهرية",
        category="content",
        unit_price=unit_price,
        is_active=is_active,
    )


@pytest.fixture()
def store() -> Generator[SqliteStore, None, None]:
    """Fresh in-memory store."""
    s = SqliteStore(":memory:")
    yield s
    s.close()


@pytest.fixture()
def ctx(store: SqliteStore) -> OperationContext:
    """OperationContext on the in-memory store with the clock frozen at ``NOW``."""
    return OperationContext(store=store, now=NOW, caller="test")


@pytest.fixture()
def dry_ctx(store: SqliteStore) -> OperationContext:
    """OperationContext with dry_run=True."""
    return OperationContext(store=store, now=NOW, caller="test", dry_run=True)


@pytest.fixture()
def now() -> datetime:
    return NOW


@pytest.fixture()
def make_post():
    """Factory for :class:`ContentPost` rows (defaults: pending, deadline an hour ago)."""
    return _make_post


@pytest.fixture()
def make_todo():
    """Factory for :class:`Todo` rows (defaults: open review todo due today)."""
    return _make_todo


@pytest.fixture()
def make_pricing():
    return _make_pricing


@pytest.fixture(autouse=True)
def _reset_logging() -> Generator[None, None, None]:
    """Undo any ``configure_logging`` call and bound context made by a test."""
    yield
    structlog.reset_defaults()
    structlog.contextvars.clear_contextvars()
