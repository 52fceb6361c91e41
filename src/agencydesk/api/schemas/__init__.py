"""Pydantic request/response models."""

from agencydesk.api.schemas.functions import (
    AutoApproveResponse,
    FailureResponse,
    FunctionErrorResponse,
    LogEntryIn,
    LogsRequest,
    LogsResponse,
    PricingRequest,
    PricingResponse,
)

__all__ = [
    "AutoApproveResponse",
    "FailureResponse",
    "FunctionErrorResponse",
    "LogEntryIn",
    "LogsRequest",
    "LogsResponse",
    "PricingRequest",
    "PricingResponse",
]
