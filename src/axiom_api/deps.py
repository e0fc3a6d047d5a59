"""Dependency injection for FastAPI."""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends, Request
from pymongo.asynchronous.database import AsyncDatabase

from axiom_api.core.logging import generate_request_id
from axiom_api.db.session import get_db
from axiom_api.services import AnalysisClient, FeedbackService, FeedbackStore


def get_request_id(request: Request) -> str:
    """Get the correlation id assigned to this request by the middleware."""
    request_id = getattr(request.state, "request_id", None)
    if not request_id:
        request_id = generate_request_id()
        request.state.request_id = request_id
    return request_id


RequestId = Annotated[str, Depends(get_request_id)]
Database = Annotated[AsyncDatabase, Depends(get_db)]


def get_feedback_store(db: Database) -> FeedbackStore:
    """Get FeedbackStore instance."""
    return FeedbackStore(db)


@lru_cache
def get_analysis_client() -> AnalysisClient:
    """Get the shared AnalysisClient instance."""
    return AnalysisClient()


def get_feedback_service(
    store: Annotated[FeedbackStore, Depends(get_feedback_store)],
    analyzer: Annotated[AnalysisClient, Depends(get_analysis_client)],
) -> FeedbackService:
    """Get FeedbackService instance."""
    return FeedbackService(store, analyzer)


FeedbackServiceDep = Annotated[FeedbackService, Depends(get_feedback_service)]
