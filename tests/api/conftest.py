"""Fixtures for API tests: an app bound to the in-memory store and a mock LLM."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from agencydesk.api.app import create_app
from agencydesk.api.deps import StoreSession, get_llm_provider, get_store_session
from agencydesk.core.settings import AgencyDeskSettings
from agencydesk.llm.mock import MockLLMProvider


@pytest.fixture()
def api_settings() -> AgencyDeskSettings:
    return AgencyDeskSettings(
        store_backend="sqlite",
        llm_api_key="test-key",
        environment="test",
        app_version="9.9.9",
    )


@pytest.fixture()
def llm() -> MockLLMProvider:
    return MockLLMProvider(default_response='{"suggested_items": [], "total": 0, "reasoning": "none"}')


@pytest.fixture()
def app(api_settings, store, llm):
    application = create_app(settings=api_settings)
    application.dependency_overrides[get_store_session] = lambda: StoreSession.borrowed(store)
    application.dependency_overrides[get_llm_provider] = lambda: llm
    return application


@pytest.fixture()
def client(app) -> TestClient:
    return TestClient(app, raise_server_exceptions=False)
