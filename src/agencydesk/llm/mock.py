"""Mock LLM provider — deterministic provider for testing.

Resolution order on each call:
    1. ``error`` — raise it
    2. ``sequence`` — next scripted response
    3. ``default_response``

Example::

    provider = MockLLMProvider(default_response='{"total": 0}')
    assert provider.complete([Message.user("hi")]).content == '{"total": 0}'
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from agencydesk.llm.protocol import LLMResponse, Message


@dataclass
class MockLLMProvider:
    default_response: str = "Mock LLM response"
    sequence: list[str] = field(default_factory=list)
    error: Exception | None = None
    model_name: str = "mock-model-v1"

    calls: list[dict[str, Any]] = field(default_factory=list, repr=False)
    _sequence_index: int = field(default=0, repr=False)

    def complete(
        self,
        messages: list[Message],
        model: str | None = None,
        *,
        temperature: float | None = None,
        **kwargs: Any,
    ) -> LLMResponse:
        self.calls.append({
            "messages": [m.to_dict() for m in messages],
            "model": model or self.model_name,
            "temperature": temperature,
            "kwargs": kwargs,
        })
        if self.error is not None:
            raise self.error

        if self._sequence_index < len(self.sequence):
            content = self.sequence[self._sequence_index]
            self._sequence_index += 1
        else:
            content = self.default_response
        return LLMResponse(content=content, model=model or self.model_name)

    @property
    def call_count(self) -> int:
        return len(self.calls)

    def close(self) -> None:
        pass
