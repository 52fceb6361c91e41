"""
Structured-log collector.

Browser and function code POST their log entries here; each entry is
normalised (timestamp, correlation id, acting user, environment) and
re-emitted through structlog at its own level. Nothing is persisted: the
hosting runtime's log drain is the sink.

Doc-Types: OPS_MODULE
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from typing import Any, Literal

from agencydesk.core.errors import ValidationError
from agencydesk.core.logging import get_logger
from agencydesk.core.timestamps import to_iso8601
from agencydesk.ops.context import OperationContext
from agencydesk.ops.result import OperationResult, start_timer

logger = get_logger(__name__)
collected = get_logger("agencydesk.collected")

LogLevel = Literal["debug", "info", "warn", "error", "fatal"]

_EMITTERS: dict[str, str] = {
    "debug": "debug",
    "info": "info",
    "warn": "warning",
    "error": "error",
    "fatal": "critical",
}


@dataclass
class LogEntry:
    """One entry as submitted by a client."""

    level: LogLevel
    message: str
    timestamp: str | None = None
    correlation_id: str | None = None
    user_id: str | None = None
    organization_id: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)
    error: dict[str, Any] | None = None
    context: dict[str, Any] = field(default_factory=dict)


@dataclass
class ProcessedLog:
    """An entry after normalisation, as emitted."""

    level: LogLevel
    message: str
    timestamp: str
    correlation_id: str
    user_id: str | None
    organization_id: str | None
    metadata: dict[str, Any]
    error: dict[str, Any] | None
    context: dict[str, Any]

    def fields(self) -> dict[str, Any]:
        d: dict[str, Any] = {
            "client_level": self.level,
            "client_timestamp": self.timestamp,
            "correlation_id": self.correlation_id,
            "user_id": self.user_id,
            "organization_id": self.organization_id,
            "metadata": self.metadata,
            "context": self.context,
        }
        if self.error:
            d["client_error"] = self.error
        return d


@dataclass
class LogIngestReport:
    logs_processed: int
    correlation_ids: list[str]

    def to_dict(self) -> dict[str, Any]:
        return {"logs_processed": self.logs_processed, "correlation_ids": self.correlation_ids}


def validate_levels(entries: list[LogEntry]) -> None:
    """Raise :class:`ValidationError` naming any level the collector cannot emit."""
    unknown = sorted({e.level for e in entries if e.level not in _EMITTERS})
    if unknown:
        raise ValidationError(
            f"Unknown log level(s): {', '.join(unknown)}",
            details={"levels": unknown},
        )


def normalise_entry(ctx: OperationContext, entry: LogEntry, *, environment: str) -> ProcessedLog:
    """Fill in the fields a client may omit."""
    return ProcessedLog(
        level=entry.level,
        message=entry.message,
        timestamp=entry.timestamp or to_iso8601(ctx.now),
        correlation_id=entry.correlation_id or str(uuid.uuid4()),
        user_id=entry.user_id or ctx.user,
        organization_id=entry.organization_id,
        metadata=dict(entry.metadata),
        error=entry.error,
        context={**entry.context, "environment": environment},
    )


def ingest_logs(
    ctx: OperationContext,
    entries: list[LogEntry],
    *,
    environment: str = "production",
) -> OperationResult[LogIngestReport]:
    """Normalise and emit *entries*; return their correlation ids in order."""
    timer = start_timer()

    try:
        validate_levels(entries)
    except ValidationError as e:
        return OperationResult.from_exception("VALIDATION_FAILED", e, elapsed_ms=timer.elapsed_ms)

    processed = [normalise_entry(ctx, e, environment=environment) for e in entries]
    for log in processed:
        emit = getattr(collected, _EMITTERS[log.level])
        emit(log.message, **log.fields())

    logger.debug("logs.ingested", count=len(processed), request_id=ctx.request_id)
    return OperationResult.ok(
        LogIngestReport(
            logs_processed=len(processed),
            correlation_ids=[p.correlation_id for p in processed],
        ),
        elapsed_ms=timer.elapsed_ms,
    )
