"""LLM completion providers."""

from agencydesk.llm.gateway import GatewayLLMProvider
from agencydesk.llm.mock import MockLLMProvider
from agencydesk.llm.protocol import LLMProvider, LLMResponse, Message, Role, TokenUsage

__all__ = [
    "GatewayLLMProvider",
    "LLMProvider",
    "LLMResponse",
    "Message",
    "MockLLMProvider",
    "Role",
    "TokenUsage",
]
