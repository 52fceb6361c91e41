"""
Tests for API dependencies — settings singleton, store session, LLM provider.
"""

from __future__ import annotations

import pytest

from agencydesk.api.deps import StoreSession, get_llm_provider, get_settings, get_store_session
from agencydesk.core.errors import MissingConfigError
from agencydesk.core.settings import AgencyDeskSettings
from agencydesk.llm.gateway import GatewayLLMProvider
from agencydesk.store.sqlite import SqliteStore


class TestGetSettings:
    def test_cached(self):
        get_settings.cache_clear()
        try:
            assert get_settings() is get_settings()
        finally:
            get_settings.cache_clear()


class TestStoreSession:
    def test_opens_lazily_and_closes(self, tmp_path):
        settings = AgencyDeskSettings(store_backend="sqlite", sqlite_path=str(tmp_path / "s.db"))
        gen = get_store_session(settings)
        session = next(gen)

        store = session.open()

        assert isinstance(store, SqliteStore)
        assert session.open() is store
        with pytest.raises(StopIteration):
            next(gen)
        assert session._store is None

    def test_borrowed_store_is_left_open(self, store):
        session = StoreSession.borrowed(store)

        session.close()

        store.ping()

    def test_rest_backend_without_url(self):
        session = StoreSession(AgencyDeskSettings(store_backend="rest", store_url=None))

        with pytest.raises(MissingConfigError):
            session.open()


class TestLLMProvider:
    def test_none_without_key(self):
        gen = get_llm_provider(AgencyDeskSettings(llm_api_key=None))
        assert next(gen) is None

    def test_gateway_with_key(self):
        gen = get_llm_provider(AgencyDeskSettings(llm_api_key="k"))
        provider = next(gen)
        assert isinstance(provider, GatewayLLMProvider)
        with pytest.raises(StopIteration):
            next(gen)
