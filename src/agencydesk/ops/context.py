"""
Request-scoped context for operations.

Every operation function receives an :class:`OperationContext` as its first
argument. The context carries the store for this invocation, the frozen
"now" used for every comparison and timestamp written during the pass,
caller identity, and the dry-run flag.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from agencydesk.core.timestamps import utc_now
from agencydesk.store.protocol import ContentStore


@dataclass
class OperationContext:
    """Context passed to every operation function.

    Attributes:
        store: Store satisfying :class:`~agencydesk.store.protocol.ContentStore`.
        now: Clock reading for this invocation (UTC).
        request_id: Unique ID for this invocation (auto-generated).
        caller: Origin of the request: ``"api"``, ``"cli"``, ``"scheduler"`` or ``"sdk"``.
        user: Authenticated user id, when a bearer credential was resolved.
        dry_run: When ``True``, operations report what they would do without writing.
        metadata: Arbitrary key/value pairs forwarded to logging.
    """

    store: ContentStore
    now: datetime = field(default_factory=utc_now)
    request_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    caller: str = "sdk"
    user: str | None = None
    dry_run: bool = False
    metadata: dict[str, Any] = field(default_factory=dict)
