"""
Tests for MockLLMProvider.
"""

from __future__ import annotations

import pytest

from agencydesk.llm.mock import MockLLMProvider
from agencydesk.llm.protocol import LLMProvider, Message


class TestMockLLMProvider:
    def test_satisfies_protocol(self):
        assert isinstance(MockLLMProvider(), LLMProvider)

    def test_default_response(self):
        provider = MockLLMProvider(default_response="fixed")
        assert provider.complete([Message.user("x")]).content == "fixed"

    def test_sequence_then_default(self):
        provider = MockLLMProvider(default_response="done", sequence=["one", "two"])
        replies = [provider.complete([Message.user("x")]).content for _ in range(3)]
        assert replies == ["one", "two", "done"]

    def test_error(self):
        provider = MockLLMProvider(error=RuntimeError("down"))
        with pytest.raises(RuntimeError, match="down"):
            provider.complete([Message.user("x")])
        assert provider.call_count == 1

    def test_records_calls(self):
        provider = MockLLMProvider()
        provider.complete([Message.system("s"), Message.user("u")], "model-x", temperature=0.5)

        call = provider.calls[0]
        assert call["model"] == "model-x"
        assert call["temperature"] == 0.5
        assert call["messages"][0] == {"role": "system", "content": "s"}
