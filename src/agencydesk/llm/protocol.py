"""LLM provider protocol.

Any object implementing ``complete()`` can serve the pricing-suggestion
operation. Implementors: :class:`~agencydesk.llm.gateway.GatewayLLMProvider`
(OpenAI-compatible HTTP gateway) and
:class:`~agencydesk.llm.mock.MockLLMProvider` (tests).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Protocol, runtime_checkable


class Role(str, Enum):
    """Message role in a conversation."""

    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


@dataclass(frozen=True)
class Message:
    """A single message in a conversation."""

    role: Role
    content: str

    @classmethod
    def system(cls, content: str) -> Message:
        return cls(role=Role.SYSTEM, content=content)

    @classmethod
    def user(cls, content: str) -> Message:
        return cls(role=Role.USER, content=content)

    @classmethod
    def assistant(cls, content: str) -> Message:
        return cls(role=Role.ASSISTANT, content=content)

    def to_dict(self) -> dict[str, str]:
        return {"role": self.role.value, "content": self.content}


@dataclass(frozen=True)
class TokenUsage:
    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0


@dataclass(frozen=True)
class LLMResponse:
    """Response from an LLM provider.

    Attributes:
        content: Generated text.
        model: Model identifier used.
        usage: Token usage statistics.
        finish_reason: Why generation stopped.
    """

    content: str
    model: str
    usage: TokenUsage = field(default_factory=TokenUsage)
    finish_reason: str = "stop"


@runtime_checkable
class LLMProvider(Protocol):
    """Protocol for LLM backends."""

    def complete(
        self,
        messages: list[Message],
        model: str | None = None,
        *,
        temperature: float | None = None,
        **kwargs: Any,
    ) -> LLMResponse:
        """Generate a completion from *messages*.

        Raises
        ------
        UpstreamError
            The provider answered with an error status.
        NetworkError
            The provider could not be reached.
        """
        ...
