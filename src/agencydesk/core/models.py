"""Table models for the agency dashboard database.

Each dataclass mirrors one table of the hosted database so the store,
ops and API layers exchange typed objects instead of raw dicts.
``from_row`` accepts the JSON row shape returned by the REST API (and
``sqlite3.Row`` mappings); ``to_dict`` produces the same shape back.

Tags:
    models, dataclasses, schema-mapping

Doc-Types:
    api-reference, data-model
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any

from agencydesk.core.timestamps import from_iso8601, parse_date, to_iso8601


class PostStatus(str, Enum):
    """``content_post_status`` enum."""

    DRAFT = "draft"
    PENDING_APPROVAL = "pending_approval"
    REVISIONS = "revisions"
    APPROVED = "approved"
    PUBLISHED = "published"


def _str_list(value: Any) -> list[str]:
    # sqlite stores array columns as JSON text
    if value is None:
        return []
    if isinstance(value, str):
        return list(json.loads(value))
    return list(value)


# ---------------------------------------------------------------------------
# content_posts
# ---------------------------------------------------------------------------


@dataclass
class ContentPost:
    """A scheduled piece of client content awaiting or past approval."""

    id: str
    client_id: str
    caption: str = ""
    platforms: list[str] = field(default_factory=list)
    status: PostStatus = PostStatus.DRAFT
    scheduled_time: datetime | None = None
    auto_approve_at: datetime | None = None
    approved_at: datetime | None = None
    created_by: str | None = None
    media_urls: list[str] = field(default_factory=list)

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> ContentPost:
        keys = set(row.keys())
        return cls(
            id=str(row["id"]),
            client_id=str(row["client_id"]),
            caption=row["caption"] if "caption" in keys and row["caption"] is not None else "",
            platforms=_str_list(row["platforms"] if "platforms" in keys else None),
            status=PostStatus(row["status"]) if "status" in keys else PostStatus.DRAFT,
            scheduled_time=from_iso8601(row["scheduled_time"] if "scheduled_time" in keys else None),
            auto_approve_at=from_iso8601(row["auto_approve_at"] if "auto_approve_at" in keys else None),
            approved_at=from_iso8601(row["approved_at"] if "approved_at" in keys else None),
            created_by=row["created_by"] if "created_by" in keys else None,
            media_urls=_str_list(row["media_urls"] if "media_urls" in keys else None),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "client_id": self.client_id,
            "caption": self.caption,
            "platforms": list(self.platforms),
            "status": self.status.value,
            "scheduled_time": to_iso8601(self.scheduled_time),
            "auto_approve_at": to_iso8601(self.auto_approve_at),
            "approved_at": to_iso8601(self.approved_at),
            "created_by": self.created_by,
            "media_urls": list(self.media_urls),
        }


# ---------------------------------------------------------------------------
# todos
# ---------------------------------------------------------------------------


@dataclass
class Todo:
    """A to-do item on a client's task list."""

    id: str
    client_id: str
    title: str
    due_date: date
    completed: bool = False
    completed_at: datetime | None = None
    created_by: str | None = None
    priority: str = "medium"
    description: str | None = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> Todo:
        keys = set(row.keys())
        return cls(
            id=str(row["id"]),
            client_id=str(row["client_id"]),
            title=row["title"],
            due_date=parse_date(row["due_date"]),
            completed=bool(row["completed"]),
            completed_at=from_iso8601(row["completed_at"] if "completed_at" in keys else None),
            created_by=row["created_by"] if "created_by" in keys else None,
            priority=row["priority"] if "priority" in keys else "medium",
            description=row["description"] if "description" in keys else None,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "client_id": self.client_id,
            "title": self.title,
            "due_date": self.due_date.isoformat(),
            "completed": self.completed,
            "completed_at": to_iso8601(self.completed_at),
            "created_by": self.created_by,
            "priority": self.priority,
            "description": self.description,
        }


# ---------------------------------------------------------------------------
# activities
# ---------------------------------------------------------------------------


@dataclass
class Activity:
    """Append-only activity-log row. ``id`` is ``None`` until inserted."""

    client_id: str
    type: str
    description: str
    date: datetime
    created_by: str | None = None
    id: str | None = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> Activity:
        return cls(
            id=str(row["id"]) if row["id"] is not None else None,
            client_id=str(row["client_id"]),
            type=row["type"],
            description=row["description"],
            date=from_iso8601(row["date"]),
            created_by=row["created_by"],
        )

    def to_insert(self) -> dict[str, Any]:
        """Row payload for an insert (no ``id``; the store assigns it)."""
        return {
            "client_id": self.client_id,
            "type": self.type,
            "description": self.description,
            "date": to_iso8601(self.date),
            "created_by": self.created_by,
        }

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, **self.to_insert()}


# ---------------------------------------------------------------------------
# pricing_catalog
# ---------------------------------------------------------------------------


@dataclass
class PricingItem:
    """A priced service in a user's catalog."""

    id: str
    user_id: str
    name_en: str
    name_ar: str
    category: str
    unit_price: float
    is_active: bool = True
    description_en: str | None = None
    description_ar: str | None = None
    notes: str | None = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> PricingItem:
        keys = set(row.keys())
        return cls(
            id=str(row["id"]),
            user_id=str(row["user_id"]),
            name_en=row["name_en"],
            name_ar=row["name_ar"],
            category=row["category"],
            unit_price=float(row["unit_price"]),
            is_active=bool(row["is_active"]),
            description_en=row["description_en"] if "description_en" in keys else None,
            description_ar=row["description_ar"] if "description_ar" in keys else None,
            notes=row["notes"] if "notes" in keys else None,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "name_en": self.name_en,
            "name_ar": self.name_ar,
            "category": self.category,
            "unit_price": self.unit_price,
            "is_active": self.is_active,
            "description_en": self.description_en,
            "description_ar": self.description_ar,
            "notes": self.notes,
        }
