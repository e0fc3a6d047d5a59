"""Service layer for aXiom API."""

from axiom_api.services.analysis import AnalysisClient
from axiom_api.services.feedback import FeedbackService
from axiom_api.services.feedback_store import FeedbackStore

__all__ = [
    "AnalysisClient",
    "FeedbackService",
    "FeedbackStore",
]
