"""Process-wide settings for agency-desk.

All values can be overridden with ``AGENCYDESK_``-prefixed environment
variables or a ``.env`` file.

Order of precedence (highest → lowest):
    1. Explicit keyword arguments (tests)
    2. Environment variables (``AGENCYDESK_STORE_URL``, ...)
    3. ``.env`` file
    4. Defaults below
"""

from __future__ import annotations

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AgencyDeskSettings(BaseSettings):
    """Settings shared by the HTTP functions, the CLI and the scheduler."""

    model_config = SettingsConfigDict(
        env_prefix="AGENCYDESK_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Server ───────────────────────────────────────────────────────────
    host: str = Field(default="0.0.0.0", description="Bind address")
    port: int = Field(default=8054, description="Bind port")
    debug: bool = Field(default=False, description="Expose exception text in 500 responses")
    log_level: str = Field(default="INFO", description="structlog level")
    log_json: bool | None = Field(default=None, description="JSON logs; None = auto-detect TTY")
    environment: str = Field(default="production", description="Stamped onto collected log entries")
    app_version: str = Field(default="0.2.0", description="Reported by the health check")

    # ── Store ────────────────────────────────────────────────────────────
    store_backend: Literal["rest", "sqlite"] = Field(default="rest", description="Store implementation")
    store_url: str | None = Field(default=None, description="Base URL of the hosted database project")
    store_service_key: str | None = Field(default=None, description="Service-role credential (secret)")
    store_timeout_s: float = Field(default=10.0, description="Per-request timeout for store calls")
    sqlite_path: str = Field(default="agency_desk.db", description="Database file for the sqlite backend")

    # ── LLM gateway ──────────────────────────────────────────────────────
    llm_api_key: str | None = Field(default=None, description="Bearer key for the completion gateway")
    llm_base_url: str = Field(
        default="https://ai.gateway.lovable.dev/v1",
        description="OpenAI-compatible base URL",
    )
    llm_model: str = Field(default="google/gemini-2.5-flash", description="Model used for pricing suggestions")
    llm_timeout_s: float = Field(default=60.0, description="Completion request timeout")

    # ── HTTP surface ─────────────────────────────────────────────────────
    functions_prefix: str = Field(default="/functions/v1", description="URL prefix for function routes")
    rate_limit_enabled: bool = Field(default=False, description="Enable per-IP rate limiting")
    rate_limit_rpm: int = Field(default=60, description="Requests per minute per client IP")

    # ── Jobs ─────────────────────────────────────────────────────────────
    auto_approve_interval_s: float = Field(default=300.0, description="Interval for `approvals watch`")
    health_slow_ms: float = Field(default=1000.0, description="Store ping slower than this is degraded")
