"""Data access for feedback documents.

"Not found" is always ``None`` or a zero count. Driver errors propagate to the
caller unchanged.
"""

from typing import Any

from bson import ObjectId
from pymongo import DESCENDING, ReturnDocument
from pymongo.asynchronous.database import AsyncDatabase

from axiom_api.config import get_settings
from axiom_api.core.logging import with_database_logging
from axiom_api.schemas.feedback import FeedbackFilter, PageRequest

settings = get_settings()


def _match(values: list[str]) -> Any:
    return values[0] if len(values) == 1 else {"$in": values}


def build_feedback_query(filters: FeedbackFilter) -> dict[str, Any]:
    """Translate a ``FeedbackFilter`` into a MongoDB query document."""
    query: dict[str, Any] = {}

    if filters.sentiments:
        query["analysis.sentiment"] = _match(filters.sentiments)
    if filters.priorities:
        query["analysis.priority"] = _match(filters.priorities)
    if filters.tags:
        query["analysis.tags"] = _match(filters.tags)
    if filters.search and filters.search.strip():
        query["$text"] = {"$search": filters.search.strip()}
    if filters.has_cat is True:
        query["catId"] = {"$ne": None}
    elif filters.has_cat is False:
        query["catId"] = None

    return query


class FeedbackStore:
    """CRUD and filtered queries over the feedback collection."""

    def __init__(
        self,
        db: AsyncDatabase,
        collection_name: str | None = None,
        cats_collection_name: str | None = None,
    ) -> None:
        self.collection_name = collection_name or settings.feedback_collection
        self.cats_collection_name = cats_collection_name or settings.cats_collection
        self.collection = db[self.collection_name]

    async def insert(self, document: dict[str, Any], request_id: str) -> str:
        """Insert a fully-formed feedback document and return its id."""
        result = await with_database_logging(
            lambda: self.collection.insert_one(document),
            name="insertOne",
            collection=self.collection_name,
            request_id=request_id,
        )
        return str(result.inserted_id)

    async def find_by_id(self, feedback_id: str, request_id: str) -> dict[str, Any] | None:
        """Fetch one feedback, joined with its cat's name and image when present."""
        pipeline = [
            {"$match": {"_id": ObjectId(feedback_id)}},
            {
                "$lookup": {
                    "from": self.cats_collection_name,
                    "localField": "catId",
                    "foreignField": "_id",
                    "as": "cat",
                }
            },
            {"$unwind": {"path": "$cat", "preserveNullAndEmptyArrays": True}},
            {"$addFields": {"catName": "$cat.name", "catSvgImage": "$cat.svgImage"}},
            {"$project": {"cat": 0}},
            {"$limit": 1},
        ]

        async def run() -> list[dict[str, Any]]:
            cursor = await self.collection.aggregate(pipeline)
            return await cursor.to_list()

        documents = await with_database_logging(
            run,
            name="aggregate",
            collection=self.collection_name,
            request_id=request_id,
            query={"_id": feedback_id},
        )
        return documents[0] if documents else None

    async def list_feedback(
        self,
        filters: FeedbackFilter,
        page: PageRequest,
        request_id: str,
    ) -> tuple[list[dict[str, Any]], int]:
        """Return one page of matching feedback (newest first) and the total match count."""
        query = build_feedback_query(filters)

        documents = await with_database_logging(
            lambda: self.collection.find(query)
            .sort("createdAt", DESCENDING)
            .skip(page.skip)
            .limit(page.limit)
            .to_list(length=None),
            name="find",
            collection=self.collection_name,
            request_id=request_id,
            query=query,
        )
        total = await with_database_logging(
            lambda: self.collection.count_documents(query),
            name="countDocuments",
            collection=self.collection_name,
            request_id=request_id,
            query=query,
        )
        return documents, total

    async def update_next_action(
        self,
        feedback_id: str,
        next_action: str,
        request_id: str,
    ) -> dict[str, Any] | None:
        """Set ``analysis.nextAction`` atomically and return the updated document."""
        return await with_database_logging(
            lambda: self.collection.find_one_and_update(
                {"_id": ObjectId(feedback_id)},
                {"$set": {"analysis.nextAction": next_action}},
                return_document=ReturnDocument.AFTER,
            ),
            name="findOneAndUpdate",
            collection=self.collection_name,
            request_id=request_id,
            query={"_id": feedback_id},
        )

    async def delete(self, feedback_id: str, request_id: str) -> int:
        result = await with_database_logging(
            lambda: self.collection.delete_one({"_id": ObjectId(feedback_id)}),
            name="deleteOne",
            collection=self.collection_name,
            request_id=request_id,
            query={"_id": feedback_id},
        )
        return result.deleted_count

    async def delete_many(self, feedback_ids: list[str], request_id: str) -> int:
        """Delete every listed id in one round trip. Missing ids are not an error."""
        object_ids = [ObjectId(feedback_id) for feedback_id in feedback_ids]
        result = await with_database_logging(
            lambda: self.collection.delete_many({"_id": {"$in": object_ids}}),
            name="deleteMany",
            collection=self.collection_name,
            request_id=request_id,
            query={"_id": {"$in": feedback_ids}},
        )
        return result.deleted_count

    async def list_tags(self, request_id: str) -> list[str]:
        """Return every distinct non-blank tag, sorted."""
        tags = await with_database_logging(
            lambda: self.collection.distinct("analysis.tags"),
            name="distinct",
            collection=self.collection_name,
            request_id=request_id,
        )
        return sorted({tag for tag in tags if isinstance(tag, str) and tag.strip()})
