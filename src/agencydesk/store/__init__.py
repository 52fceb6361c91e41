"""Hosted-database clients.

``open_store(settings)`` builds a fresh store for one invocation; callers
own it and must ``close()`` it. There is no module-level client instance.
"""

from __future__ import annotations

from agencydesk.core.settings import AgencyDeskSettings
from agencydesk.store.protocol import ContentStore
from agencydesk.store.rest import RestStore
from agencydesk.store.sqlite import SqliteStore


def open_store(settings: AgencyDeskSettings) -> ContentStore:
    """Construct the store selected by ``settings.store_backend``."""
    if settings.store_backend == "sqlite":
        return SqliteStore(settings.sqlite_path)
    return RestStore.from_settings(settings)


__all__ = ["ContentStore", "RestStore", "SqliteStore", "open_store"]
