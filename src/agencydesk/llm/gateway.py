"""
OpenAI-compatible chat-completion gateway client.

Posts ``{"model", "messages"}`` to ``{base_url}/chat/completions`` with a
bearer key and reads ``choices[0].message.content`` back.

Usage::

    llm = GatewayLLMProvider(api_key, model="google/gemini-2.5-flash")
    reply = llm.complete([Message.system("..."), Message.user("...")])
"""

from __future__ import annotations

from typing import Any

import httpx

from agencydesk.core.errors import MissingConfigError, NetworkError, ParseError, RateLimitError, UpstreamError
from agencydesk.core.logging import get_logger
from agencydesk.core.settings import AgencyDeskSettings
from agencydesk.llm.protocol import LLMResponse, Message, TokenUsage

logger = get_logger(__name__)


class GatewayLLMProvider:
    """:class:`~agencydesk.llm.protocol.LLMProvider` over HTTP."""

    def __init__(
        self,
        api_key: str,
        *,
        base_url: str = "https://ai.gateway.lovable.dev/v1",
        model: str = "google/gemini-2.5-flash",
        timeout: float = 60.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.default_model = model
        self._client = httpx.Client(
            base_url=base_url.rstrip("/"),
            headers={"Authorization": f"Bearer {api_key}", "Content-Type": "application/json"},
            timeout=timeout,
            transport=transport,
        )

    @classmethod
    def from_settings(
        cls,
        settings: AgencyDeskSettings,
        *,
        transport: httpx.BaseTransport | None = None,
    ) -> GatewayLLMProvider:
        if not settings.llm_api_key:
            raise MissingConfigError("AGENCYDESK_LLM_API_KEY")
        return cls(
            settings.llm_api_key,
            base_url=settings.llm_base_url,
            model=settings.llm_model,
            timeout=settings.llm_timeout_s,
            transport=transport,
        )

    def complete(
        self,
        messages: list[Message],
        model: str | None = None,
        *,
        temperature: float | None = None,
        **kwargs: Any,
    ) -> LLMResponse:
        payload: dict[str, Any] = {
            "model": model or self.default_model,
            "messages": [m.to_dict() for m in messages],
            **kwargs,
        }
        if temperature is not None:
            payload["temperature"] = temperature

        try:
            response = self._client.post("/chat/completions", json=payload)
        except httpx.TransportError as e:
            raise NetworkError(f"LLM gateway unreachable: {e}", cause=e) from e

        if response.status_code == 429:
            raise RateLimitError("LLM gateway rate limit exceeded")
        if response.status_code >= 400:
            logger.error("llm.gateway_error", status=response.status_code, body=response.text[:500])
            raise UpstreamError(f"AI API error: {response.status_code}", status_code=response.status_code)

        try:
            data = response.json()
            choice = data["choices"][0]
            content = choice["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise ParseError("LLM gateway returned an unexpected body", cause=e) from e

        usage = data.get("usage") or {}
        return LLMResponse(
            content=content,
            model=data.get("model", payload["model"]),
            usage=TokenUsage(
                prompt_tokens=usage.get("prompt_tokens", 0),
                completion_tokens=usage.get("completion_tokens", 0),
                total_tokens=usage.get("total_tokens", 0),
            ),
            finish_reason=choice.get("finish_reason") or "stop",
        )

    def close(self) -> None:
        self._client.close()
