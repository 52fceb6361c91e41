"""
FastAPI dependency injection — settings singleton and per-request sessions.

Usage in routers::

    from agencydesk.api.deps import Settings, Store

    @router.post("/things")
    def do_thing(request: Request, store: Store, settings: Settings):
        ctx = build_context(request, store.open())
        ...

The store and LLM client are opened lazily inside the handler so a
missing credential surfaces through the handler's own error envelope
instead of FastAPI's default dependency error.

Doc-Types:
    api-reference
"""

from __future__ import annotations

from collections.abc import Generator
from functools import lru_cache
from typing import Annotated

from fastapi import Depends

from agencydesk.core.errors import MissingConfigError
from agencydesk.core.settings import AgencyDeskSettings
from agencydesk.llm.gateway import GatewayLLMProvider
from agencydesk.llm.protocol import LLMProvider
from agencydesk.store import open_store
from agencydesk.store.protocol import ContentStore

# ── Settings (singleton) ─────────────────────────────────────────────────


@lru_cache(maxsize=1)
def get_settings() -> AgencyDeskSettings:
    """Cached settings — loaded once per process."""
    return AgencyDeskSettings()


# ── Store (per-request) ──────────────────────────────────────────────────


class StoreSession:
    """Opens the store on first use and closes it when the request ends.

    A session built with :meth:`borrowed` wraps a store owned by someone
    else (tests, embedding callers) and leaves it open.
    """

    def __init__(self, settings: AgencyDeskSettings | None = None, *, store: ContentStore | None = None) -> None:
        self._settings = settings
        self._store = store
        self._owned = store is None

    @classmethod
    def borrowed(cls, store: ContentStore) -> StoreSession:
        return cls(store=store)

    def open(self) -> ContentStore:
        if self._store is None:
            if self._settings is None:
                raise MissingConfigError("store settings")
            self._store = open_store(self._settings)
        return self._store

    def close(self) -> None:
        if self._owned and self._store is not None:
            self._store.close()
            self._store = None


def get_store_session(
    settings: Annotated[AgencyDeskSettings, Depends(get_settings)],
) -> Generator[StoreSession, None, None]:
    """Yield a lazy store session for the request lifespan."""
    session = StoreSession(settings)
    try:
        yield session
    finally:
        session.close()


# ── LLM provider (per-request) ───────────────────────────────────────────


def get_llm_provider(
    settings: Annotated[AgencyDeskSettings, Depends(get_settings)],
) -> Generator[LLMProvider | None, None, None]:
    """Yield the gateway client, or ``None`` when no key is configured."""
    if not settings.llm_api_key:
        yield None
        return
    provider = GatewayLLMProvider.from_settings(settings)
    try:
        yield provider
    finally:
        provider.close()


# ── Convenience type aliases ─────────────────────────────────────────────

Settings = Annotated[AgencyDeskSettings, Depends(get_settings)]
Store = Annotated[StoreSession, Depends(get_store_session)]
LLM = Annotated[LLMProvider | None, Depends(get_llm_provider)]
