"""Document models for aXiom API."""

from axiom_api.models.feedback import (
    Analysis,
    FeedbackDocument,
    Priority,
    Sentiment,
)

__all__ = [
    "Analysis",
    "FeedbackDocument",
    "Priority",
    "Sentiment",
]
