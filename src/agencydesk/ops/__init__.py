"""
Operations layer: typed, store-agnostic functions behind every surface.

Each function takes an :class:`OperationContext` and returns an
:class:`OperationResult`. The API routers and CLI commands are thin
adapters over these.
"""

from agencydesk.ops.approvals import (
    AutoApprovalReport,
    CascadeOutcome,
    StepStatus,
    approve_posts,
    auto_approve_posts,
    cascade_post,
    select_due_posts,
)
from agencydesk.ops.context import OperationContext
from agencydesk.ops.health import HealthReport, OverallStatus, get_health
from agencydesk.ops.logs import LogEntry, LogIngestReport, ingest_logs
from agencydesk.ops.pricing import PricingSuggestion, suggest_pricing
from agencydesk.ops.result import OperationError, OperationResult

__all__ = [
    "AutoApprovalReport",
    "CascadeOutcome",
    "HealthReport",
    "LogEntry",
    "LogIngestReport",
    "OperationContext",
    "OperationError",
    "OperationResult",
    "OverallStatus",
    "PricingSuggestion",
    "StepStatus",
    "approve_posts",
    "auto_approve_posts",
    "cascade_post",
    "get_health",
    "ingest_logs",
    "select_due_posts",
    "suggest_pricing",
]
