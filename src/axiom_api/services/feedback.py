"""Feedback service: classification, persistence and error translation."""

import logging

from axiom_api.core.exceptions import AnalysisError, DatabaseError, NotFoundError
from axiom_api.core.logging import LogEvent, mask_email, request_logger
from axiom_api.models.feedback import FeedbackDocument
from axiom_api.schemas.feedback import (
    FeedbackFilter,
    FeedbackListResponse,
    FeedbackResponse,
    PageRequest,
)
from axiom_api.services.analysis import AnalysisClient
from axiom_api.services.feedback_store import FeedbackStore

logger = logging.getLogger(__name__)


class FeedbackService:
    """Service for submitting and triaging feedback.

    Inputs are expected to be validated already. Unexpected store or analysis
    failures are logged with the request id and re-raised as ``DatabaseError``
    carrying a fixed message per operation.
    """

    def __init__(self, store: FeedbackStore, analyzer: AnalysisClient) -> None:
        self.store = store
        self.analyzer = analyzer

    async def create_feedback(
        self,
        text: str,
        email: str | None,
        request_id: str,
    ) -> FeedbackResponse:
        """Classify feedback text, then persist it with its analysis."""
        try:
            analysis = await self.analyzer.analyze(text, request_id)
            document = FeedbackDocument(text=text, email=email, analysis=analysis).to_mongo()
            feedback_id = await self.store.insert(document, request_id)
        except AnalysisError as e:
            logger.error(f"Feedback analysis failed [{request_id}]: {e.message}")
            raise DatabaseError("Failed to create feedback") from e
        except Exception as e:
            logger.exception(f"Feedback insert failed [{request_id}]")
            raise DatabaseError("Failed to create feedback") from e

        request_logger.log(
            LogEvent.FEEDBACK_CREATED,
            request_id=request_id,
            data={
                "feedback_id": feedback_id,
                "email": mask_email(email),
                "sentiment": analysis.sentiment,
                "priority": analysis.priority,
            },
        )
        return FeedbackResponse.model_validate({**document, "_id": feedback_id})

    async def list_feedback(
        self,
        filters: FeedbackFilter,
        page: PageRequest,
        request_id: str,
    ) -> FeedbackListResponse:
        try:
            documents, total = await self.store.list_feedback(filters, page, request_id)
        except Exception as e:
            logger.exception(f"Feedback list query failed [{request_id}]")
            raise DatabaseError("Failed to fetch feedback") from e

        return FeedbackListResponse(
            data=[FeedbackResponse.model_validate(document) for document in documents],
            pagination=page.to_meta(total, len(documents)),
        )

    async def list_tags(self, request_id: str) -> list[str]:
        try:
            return await self.store.list_tags(request_id)
        except Exception as e:
            logger.exception(f"Tag lookup failed [{request_id}]")
            raise DatabaseError("Failed to fetch tags") from e

    async def get_feedback(self, feedback_id: str, request_id: str) -> FeedbackResponse:
        try:
            document = await self.store.find_by_id(feedback_id, request_id)
        except Exception as e:
            logger.exception(f"Feedback lookup failed [{request_id}]")
            raise DatabaseError("Failed to fetch feedback") from e

        if document is None:
            self._log_not_found(feedback_id, request_id)
            raise NotFoundError("Feedback", feedback_id)
        return FeedbackResponse.model_validate(document)

    async def update_next_action(
        self,
        feedback_id: str,
        next_action: str,
        request_id: str,
    ) -> FeedbackResponse:
        try:
            document = await self.store.update_next_action(feedback_id, next_action, request_id)
        except Exception as e:
            logger.exception(f"Next action update failed [{request_id}]")
            raise DatabaseError("Failed to update feedback") from e

        if document is None:
            self._log_not_found(feedback_id, request_id)
            raise NotFoundError("Feedback", feedback_id)

        request_logger.log(
            LogEvent.FEEDBACK_UPDATED,
            request_id=request_id,
            data={"feedback_id": feedback_id, "next_action_length": len(next_action)},
        )
        return FeedbackResponse.model_validate(document)

    async def delete_feedback(self, feedback_id: str, request_id: str) -> str:
        try:
            deleted_count = await self.store.delete(feedback_id, request_id)
        except Exception as e:
            logger.exception(f"Feedback delete failed [{request_id}]")
            raise DatabaseError("Failed to delete feedback") from e

        if deleted_count == 0:
            self._log_not_found(feedback_id, request_id)
            raise NotFoundError("Feedback", feedback_id)

        request_logger.log(
            LogEvent.FEEDBACK_DELETED,
            request_id=request_id,
            data={"feedback_ids": [feedback_id], "deleted_count": deleted_count},
        )
        return feedback_id

    async def delete_feedbacks(self, feedback_ids: list[str], request_id: str) -> int:
        """Bulk delete. Returns how many of the requested ids actually existed."""
        try:
            deleted_count = await self.store.delete_many(feedback_ids, request_id)
        except Exception as e:
            logger.exception(f"Bulk feedback delete failed [{request_id}]")
            raise DatabaseError("Failed to delete feedbacks") from e

        request_logger.log(
            LogEvent.FEEDBACK_DELETED,
            request_id=request_id,
            data={"feedback_ids": feedback_ids, "deleted_count": deleted_count},
        )
        return deleted_count

    def _log_not_found(self, feedback_id: str, request_id: str) -> None:
        request_logger.log(LogEvent.FEEDBACK_NOT_FOUND, request_id, {"feedback_id": feedback_id})
