"""SQLite store — local stand-in for the hosted database.

Mirrors the four tables the functions touch (plus a token table standing
in for the auth service) so that ``agencydesk approvals run`` can be
exercised offline and the ops layer can be tested without a network.

Array columns (``platforms``, ``media_urls``) are stored as JSON text and
timestamps as UTC ISO-8601 text, which compares correctly as strings.

Usage::

    store = SqliteStore(":memory:")
    store.insert_post(ContentPost(id="p1", client_id="c1", ...))
    store.select_due_posts(utc_now())
"""

from __future__ import annotations

import json
import sqlite3
import uuid
from collections.abc import Sequence
from datetime import UTC, date, datetime
from typing import Any

from agencydesk.core.errors import StoreError
from agencydesk.core.models import Activity, ContentPost, PostStatus, PricingItem, Todo
from agencydesk.core.timestamps import to_iso8601

SCHEMA = """
CREATE TABLE IF NOT EXISTS content_posts (
    id TEXT PRIMARY KEY,
    client_id TEXT NOT NULL,
    caption TEXT NOT NULL DEFAULT '',
    platforms TEXT NOT NULL DEFAULT '[]',
    status TEXT NOT NULL DEFAULT 'draft',
    scheduled_time TEXT,
    auto_approve_at TEXT,
    approved_at TEXT,
    created_by TEXT,
    media_urls TEXT NOT NULL DEFAULT '[]'
);

CREATE TABLE IF NOT EXISTS todos (
    id TEXT PRIMARY KEY,
    client_id TEXT NOT NULL,
    title TEXT NOT NULL,
    description TEXT,
    due_date TEXT NOT NULL,
    completed INTEGER NOT NULL DEFAULT 0,
    completed_at TEXT,
    created_by TEXT,
    priority TEXT NOT NULL DEFAULT 'medium'
);

CREATE TABLE IF NOT EXISTS activities (
    id TEXT PRIMARY KEY,
    client_id TEXT NOT NULL,
    type TEXT NOT NULL,
    description TEXT NOT NULL,
    date TEXT NOT NULL,
    created_by TEXT
);

CREATE TABLE IF NOT EXISTS pricing_catalog (
    id TEXT PRIMARY KEY,
    user_id TEXT NOT NULL,
    name_en TEXT NOT NULL,
    name_ar TEXT NOT NULL,
    category TEXT NOT NULL,
    unit_price REAL NOT NULL,
    is_active INTEGER NOT NULL DEFAULT 1,
    description_en TEXT,
    description_ar TEXT,
    notes TEXT
);

CREATE TABLE IF NOT EXISTS auth_tokens (
    token TEXT PRIMARY KEY,
    user_id TEXT NOT NULL
);
"""


def _ts(dt: datetime | None) -> str | None:
    if dt is None:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return to_iso8601(dt.astimezone(UTC))


class SqliteStore:
    """:class:`~agencydesk.store.protocol.ContentStore` backed by SQLite."""

    def __init__(self, path: str = ":memory:") -> None:
        self._conn = sqlite3.connect(path, check_same_thread=False)
        self._conn.row_factory = sqlite3.Row
        self._conn.executescript(SCHEMA)
        self._conn.commit()

    def _query(self, sql: str, params: Sequence[Any] = ()) -> list[sqlite3.Row]:
        try:
            return self._conn.execute(sql, tuple(params)).fetchall()
        except sqlite3.Error as e:
            raise StoreError(str(e), cause=e) from e

    def _write(self, sql: str, params: Sequence[Any] = ()) -> int:
        try:
            cursor = self._conn.execute(sql, tuple(params))
            self._conn.commit()
            return cursor.rowcount
        except sqlite3.Error as e:
            self._conn.rollback()
            raise StoreError(str(e), cause=e) from e

    # ── ContentStore protocol ────────────────────────────────────────────

    def select_due_posts(self, now: datetime) -> list[ContentPost]:
        rows = self._query(
            "SELECT * FROM content_posts "
            "WHERE status = ? AND auto_approve_at IS NOT NULL AND auto_approve_at <= ? "
            "ORDER BY auto_approve_at",
            (PostStatus.PENDING_APPROVAL.value, _ts(now)),
        )
        return [ContentPost.from_row(r) for r in rows]

    def approve_posts(self, ids: Sequence[str], approved_at: datetime) -> list[ContentPost]:
        if not ids:
            return []
        marks = ",".join("?" for _ in ids)
        self._write(
            f"UPDATE content_posts SET status = ?, approved_at = ? WHERE id IN ({marks})",
            (PostStatus.APPROVED.value, _ts(approved_at), *ids),
        )
        rows = self._query(f"SELECT * FROM content_posts WHERE id IN ({marks})", ids)
        return [ContentPost.from_row(r) for r in rows]

    def complete_review_todos(
        self,
        client_id: str,
        *,
        title: str,
        due_on_or_after: date,
        due_on_or_before: date,
        completed_at: datetime,
    ) -> int:
        return self._write(
            "UPDATE todos SET completed = 1, completed_at = ? "
            "WHERE client_id = ? AND title = ? AND completed = 0 AND due_date >= ? AND due_date <= ?",
            (
                _ts(completed_at),
                client_id,
                title,
                due_on_or_after.isoformat(),
                due_on_or_before.isoformat(),
            ),
        )

    def insert_activity(self, activity: Activity) -> Activity:
        activity_id = activity.id or str(uuid.uuid4())
        self._write(
            "INSERT INTO activities (id, client_id, type, description, date, created_by) "
            "VALUES (?, ?, ?, ?, ?, ?)",
            (
                activity_id,
                activity.client_id,
                activity.type,
                activity.description,
                _ts(activity.date),
                activity.created_by,
            ),
        )
        return Activity(
            id=activity_id,
            client_id=activity.client_id,
            type=activity.type,
            description=activity.description,
            date=activity.date,
            created_by=activity.created_by,
        )

    def list_active_pricing(self, user_id: str) -> list[PricingItem]:
        rows = self._query(
            "SELECT * FROM pricing_catalog WHERE user_id = ? AND is_active = 1 ORDER BY category, name_en",
            (user_id,),
        )
        return [PricingItem.from_row(r) for r in rows]

    def resolve_user(self, token: str) -> str | None:
        rows = self._query("SELECT user_id FROM auth_tokens WHERE token = ?", (token,))
        return rows[0]["user_id"] if rows else None

    def ping(self) -> None:
        self._query("SELECT 1")

    def close(self) -> None:
        self._conn.close()

    # ── seeding / inspection (dev + tests) ───────────────────────────────

    def insert_post(self, post: ContentPost) -> ContentPost:
        self._write(
            "INSERT INTO content_posts (id, client_id, caption, platforms, status, scheduled_time, "
            "auto_approve_at, approved_at, created_by, media_urls) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
            (
                post.id,
                post.client_id,
                post.caption,
                json.dumps(post.platforms),
                post.status.value,
                _ts(post.scheduled_time),
                _ts(post.auto_approve_at),
                _ts(post.approved_at),
                post.created_by,
                json.dumps(post.media_urls),
            ),
        )
        return post

    def insert_todo(self, todo: Todo) -> Todo:
        self._write(
            "INSERT INTO todos (id, client_id, title, description, due_date, completed, completed_at, "
            "created_by, priority) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)",
            (
                todo.id,
                todo.client_id,
                todo.title,
                todo.description,
                todo.due_date.isoformat(),
                int(todo.completed),
                _ts(todo.completed_at),
                todo.created_by,
                todo.priority,
            ),
        )
        return todo

    def insert_pricing(self, item: PricingItem) -> PricingItem:
        self._write(
            "INSERT INTO pricing_catalog (id, user_id, name_en, name_ar, category, unit_price, is_active, "
            "description_en, description_ar, notes) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
            (
                item.id,
                item.user_id,
                item.name_en,
                item.name_ar,
                item.category,
                item.unit_price,
                int(item.is_active),
                item.description_en,
                item.description_ar,
                item.notes,
            ),
        )
        return item

    def register_token(self, token: str, user_id: str) -> None:
        self._write("INSERT OR REPLACE INTO auth_tokens (token, user_id) VALUES (?, ?)", (token, user_id))

    def get_post(self, post_id: str) -> ContentPost | None:
        rows = self._query("SELECT * FROM content_posts WHERE id = ?", (post_id,))
        return ContentPost.from_row(rows[0]) if rows else None

    def list_todos(self, client_id: str) -> list[Todo]:
        rows = self._query("SELECT * FROM todos WHERE client_id = ? ORDER BY due_date", (client_id,))
        return [Todo.from_row(r) for r in rows]

    def list_activities(self, client_id: str | None = None) -> list[Activity]:
        if client_id is None:
            rows = self._query("SELECT * FROM activities ORDER BY date")
        else:
            rows = self._query("SELECT * FROM activities WHERE client_id = ? ORDER BY date", (client_id,))
        return [Activity.from_row(r) for r in rows]

    @property
    def raw(self) -> sqlite3.Connection:
        """Underlying ``sqlite3.Connection`` (pragmas, ad-hoc inspection)."""
        return self._conn

    def __repr__(self) -> str:
        return f"SqliteStore({self._conn!r})"
