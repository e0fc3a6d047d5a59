"""Index setup for the feedback collection."""

import logging
from typing import Any

from pydantic import BaseModel, Field
from pymongo import ASCENDING, DESCENDING, TEXT
from pymongo.asynchronous.database import AsyncDatabase
from pymongo.errors import PyMongoError

from axiom_api.config import get_settings

settings = get_settings()
logger = logging.getLogger(__name__)


class IndexDefinition(BaseModel):
    """Index keys plus ``create_index`` options."""

    name: str
    keys: list[tuple[str, Any]]
    options: dict[str, Any] = Field(default_factory=dict)


class IndexFailure(BaseModel):
    index_name: str
    error: str


class IndexResult(BaseModel):
    """Outcome of an index setup run."""

    success: bool = False
    created_indexes: list[str] = Field(default_factory=list)
    existing_indexes: list[str] = Field(default_factory=list)
    errors: list[IndexFailure] = Field(default_factory=list)


FEEDBACK_INDEXES = [
    IndexDefinition(
        name="feedback_text_search",
        keys=[("text", TEXT), ("analysis.summary", TEXT)],
        options={"weights": {"text": 2, "analysis.summary": 1}},
    ),
    IndexDefinition(name="sentiment_index", keys=[("analysis.sentiment", ASCENDING)]),
    IndexDefinition(name="priority_index", keys=[("analysis.priority", ASCENDING)]),
    IndexDefinition(name="tags_index", keys=[("analysis.tags", ASCENDING)]),
    IndexDefinition(name="created_at_index", keys=[("createdAt", DESCENDING)]),
    IndexDefinition(name="cat_id_index", keys=[("catId", ASCENDING)], options={"sparse": True}),
]


async def setup_feedback_indexes(db: AsyncDatabase, collection_name: str | None = None) -> IndexResult:
    """Create any missing feedback indexes. Existing ones are left untouched."""
    result = IndexResult()
    collection = db[collection_name or settings.feedback_collection]

    try:
        existing = await collection.index_information()
    except PyMongoError as e:
        result.errors.append(IndexFailure(index_name="collection", error=str(e)))
        return result

    for index in FEEDBACK_INDEXES:
        if index.name in existing:
            result.existing_indexes.append(index.name)
            continue
        try:
            await collection.create_index(index.keys, name=index.name, **index.options)
            result.created_indexes.append(index.name)
        except PyMongoError as e:
            logger.error(f"Failed to create index {index.name}: {e}")
            result.errors.append(IndexFailure(index_name=index.name, error=str(e)))

    result.success = not result.errors
    return result
