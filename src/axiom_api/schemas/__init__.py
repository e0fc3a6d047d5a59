"""Pydantic schemas for aXiom API."""

from axiom_api.schemas.base import ApiResponse, BaseSchema, ErrorDetail, PaginationMeta
from axiom_api.schemas.feedback import (
    FeedbackBulkDeleteResponse,
    FeedbackDeleteResponse,
    FeedbackFilter,
    FeedbackListResponse,
    FeedbackResponse,
    PageRequest,
)

__all__ = [
    # Base
    "ApiResponse",
    "BaseSchema",
    "ErrorDetail",
    "PaginationMeta",
    # Feedback
    "FeedbackBulkDeleteResponse",
    "FeedbackDeleteResponse",
    "FeedbackFilter",
    "FeedbackListResponse",
    "FeedbackResponse",
    "PageRequest",
]
