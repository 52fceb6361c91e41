"""
Tests for the OpenAI-compatible gateway client.
"""

from __future__ import annotations

import json

import httpx
import pytest

from agencydesk.core.errors import MissingConfigError, NetworkError, ParseError, RateLimitError, UpstreamError
from agencydesk.core.settings import AgencyDeskSettings
from agencydesk.llm.gateway import GatewayLLMProvider
from agencydesk.llm.protocol import LLMProvider, Message


def _completion(content: str) -> dict:
    return {
        "model": "google/gemini-2.5-flash",
        "choices": [{"message": {"role": "assistant", "content": content}, "finish_reason": "stop"}],
        "usage": {"prompt_tokens": 12, "completion_tokens": 5, "total_tokens": 17},
    }


def _provider(handler) -> GatewayLLMProvider:
    return GatewayLLMProvider(
        "gw-key",
        base_url="https://gateway.test/v1",
        transport=httpx.MockTransport(handler),
    )


class TestComplete:
    def test_posts_chat_completion(self):
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=_completion("hello"))

        provider = _provider(handler)
        response = provider.complete([Message.system("sys"), Message.user("hi")], "some/model")

        req = seen[0]
        assert req.url == "https://gateway.test/v1/chat/completions"
        assert req.headers["Authorization"] == "Bearer gw-key"
        assert json.loads(req.content) == {
            "model": "some/model",
            "messages": [{"role": "system", "content": "sys"}, {"role": "user", "content": "hi"}],
        }
        assert response.content == "hello"
        assert response.usage.total_tokens == 17

    def test_default_model_and_temperature(self):
        seen: list[dict] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(json.loads(request.content))
            return httpx.Response(200, json=_completion("ok"))

        _provider(handler).complete([Message.user("hi")], temperature=0.2)

        assert seen[0]["model"] == "google/gemini-2.5-flash"
        assert seen[0]["temperature"] == 0.2

    def test_error_status_raises_upstream_error(self):
        provider = _provider(lambda request: httpx.Response(402, text="payment required"))

        with pytest.raises(UpstreamError, match="AI API error: 402") as exc_info:
            provider.complete([Message.user("hi")])

        assert exc_info.value.status_code == 402

    def test_rate_limit(self):
        provider = _provider(lambda request: httpx.Response(429))

        with pytest.raises(RateLimitError):
            provider.complete([Message.user("hi")])

    def test_unexpected_body(self):
        provider = _provider(lambda request: httpx.Response(200, json={"choices": []}))

        with pytest.raises(ParseError):
            provider.complete([Message.user("hi")])

    def test_transport_failure(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("no route to host")

        with pytest.raises(NetworkError):
            _provider(handler).complete([Message.user("hi")])


class TestFromSettings:
    def test_requires_key(self):
        with pytest.raises(MissingConfigError):
            GatewayLLMProvider.from_settings(AgencyDeskSettings(llm_api_key=None))

    def test_uses_settings(self):
        provider = GatewayLLMProvider.from_settings(AgencyDeskSettings(llm_api_key="k", llm_model="m"))
        try:
            assert provider.default_model == "m"
            assert isinstance(provider, LLMProvider)
        finally:
            provider.close()
