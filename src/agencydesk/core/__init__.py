"""Core primitives: errors, logging, settings, timestamps and table models."""

from agencydesk.core.errors import AgencyDeskError, ErrorCategory
from agencydesk.core.models import Activity, ContentPost, PostStatus, PricingItem, Todo

__all__ = [
    "AgencyDeskError",
    "ErrorCategory",
    "Activity",
    "ContentPost",
    "PostStatus",
    "PricingItem",
    "Todo",
]
