"""
Request and response bodies of the HTTP functions.

Field names follow the dashboard's wire format: the log collector speaks
camelCase (``correlationId``), the table-backed functions snake_case.

Doc-Types: API_REFERENCE
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from agencydesk.ops.logs import LogEntry

# ── Auto-approval ────────────────────────────────────────────────────────


class AutoApproveResponse(BaseModel):
    """Result of one auto-approval pass.

    ``posts`` is omitted when nothing was due.
    """

    message: str = Field(description="Human-readable outcome")
    processed: int = Field(description="Number of posts transitioned to approved")
    posts: list[dict[str, Any]] | None = Field(default=None, description="Post-image of the approved rows")


class FunctionErrorResponse(BaseModel):
    error: str = Field(description="Underlying failure message")
    details: str = Field(description="Which function failed")


# ── Structured logging ───────────────────────────────────────────────────


class LogErrorIn(BaseModel):
    name: str
    message: str
    stack: str | None = None


class LogEntryIn(BaseModel):
    """One client-side log entry."""

    model_config = ConfigDict(populate_by_name=True)

    level: Literal["debug", "info", "warn", "error", "fatal"]
    message: str
    timestamp: str | None = None
    correlation_id: str | None = Field(default=None, alias="correlationId")
    user_id: str | None = Field(default=None, alias="userId")
    organization_id: str | None = Field(default=None, alias="organizationId")
    metadata: dict[str, Any] = Field(default_factory=dict)
    error: LogErrorIn | None = None
    context: dict[str, Any] = Field(default_factory=dict)

    def to_entry(self) -> LogEntry:
        return LogEntry(
            level=self.level,
            message=self.message,
            timestamp=self.timestamp,
            correlation_id=self.correlation_id,
            user_id=self.user_id,
            organization_id=self.organization_id,
            metadata=self.metadata,
            error=self.error.model_dump(exclude_none=True) if self.error else None,
            context=self.context,
        )


class LogsRequest(BaseModel):
    """``{"logs": entry}`` or ``{"logs": [entry, ...]}``."""

    logs: LogEntryIn | list[LogEntryIn]

    def entries(self) -> list[LogEntry]:
        items = self.logs if isinstance(self.logs, list) else [self.logs]
        return [item.to_entry() for item in items]


class LogsResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    logs_processed: int = Field(alias="logsProcessed")
    correlation_ids: list[str] = Field(alias="correlationIds")


# ── Pricing suggestion ───────────────────────────────────────────────────


class PricingRequest(BaseModel):
    client_description: str | None = Field(default=None, description="Free-text description of the client's needs")


class PricingResponse(BaseModel):
    success: bool = True
    data: Any = Field(description="Suggestion as returned by the model")


class FailureResponse(BaseModel):
    """Error envelope of the logging and pricing functions."""

    success: bool = False
    error: str
