"""Feedback document models.

Documents live in the ``feedbacks`` collection; field names on disk are the
camelCase aliases below.
"""

from datetime import datetime, timezone
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

Sentiment = Literal["positive", "neutral", "negative"]
Priority = Literal["P0", "P1", "P2", "P3"]


def utc_now() -> datetime:
    """Get current UTC time."""
    return datetime.now(timezone.utc)


class Analysis(BaseModel):
    """Structured classification embedded in every feedback document."""

    model_config = ConfigDict(populate_by_name=True)

    summary: str
    sentiment: Sentiment
    tags: list[str]
    priority: Priority
    next_action: str = Field(..., alias="nextAction")


class FeedbackDocument(BaseModel):
    """A feedback document as inserted into MongoDB."""

    model_config = ConfigDict(populate_by_name=True, arbitrary_types_allowed=True)

    text: str
    email: str | None = None
    created_at: datetime = Field(default_factory=utc_now, alias="createdAt")
    analysis: Analysis
    cat_id: Any | None = Field(None, alias="catId")

    def to_mongo(self) -> dict[str, Any]:
        """Return the insertable document, omitting unset optional fields."""
        return self.model_dump(by_alias=True, exclude_none=True)
