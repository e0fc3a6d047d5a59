"""Feedback API endpoints."""

from typing import Annotated, Any

from fastapi import APIRouter, Body, Query, status

from axiom_api.core.validation import (
    validate_email,
    validate_feedback_id,
    validate_feedback_ids,
    validate_feedback_text,
    validate_next_action,
)
from axiom_api.deps import FeedbackServiceDep, RequestId
from axiom_api.schemas.base import ApiResponse
from axiom_api.schemas.feedback import (
    MAX_LIMIT,
    FeedbackBulkDeleteResponse,
    FeedbackDeleteResponse,
    FeedbackFilter,
    FeedbackListResponse,
    FeedbackResponse,
    PageRequest,
)

router = APIRouter(prefix="/feedback", tags=["Feedback"])
tags_router = APIRouter(prefix="/feedback-tags", tags=["Feedback"])

JsonBody = Annotated[dict[str, Any] | None, Body()]


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=ApiResponse[FeedbackResponse],
    response_model_exclude_none=True,
)
async def create_feedback(
    feedback_service: FeedbackServiceDep,
    request_id: RequestId,
    payload: JsonBody = None,
) -> ApiResponse[FeedbackResponse]:
    """
    Submit feedback.

    The text is classified (summary, sentiment, tags, priority, next action)
    before the feedback is stored.
    """
    payload = payload or {}
    text = validate_feedback_text(payload.get("text"))
    email = validate_email(payload.get("email"))

    result = await feedback_service.create_feedback(text, email, request_id)
    return ApiResponse.ok(result)


@router.get("", response_model=FeedbackListResponse, response_model_exclude_none=True)
async def list_feedback(
    feedback_service: FeedbackServiceDep,
    request_id: RequestId,
    sentiment: Annotated[list[str] | None, Query()] = None,
    priority: Annotated[list[str] | None, Query()] = None,
    tag: Annotated[list[str] | None, Query()] = None,
    search: Annotated[str | None, Query(max_length=500)] = None,
    has_cat: Annotated[bool | None, Query(alias="hasCat")] = None,
    limit: Annotated[int | None, Query(ge=1, le=MAX_LIMIT)] = None,
    skip: Annotated[int | None, Query(ge=0)] = None,
    page: Annotated[int | None, Query(ge=1)] = None,
    page_size: Annotated[int | None, Query(alias="pageSize", ge=1, le=MAX_LIMIT)] = None,
) -> FeedbackListResponse:
    """
    List feedback, newest first.

    Filters combine conjunctively; repeating a filter parameter matches any of
    its values. Pagination accepts either ``limit``/``skip`` or ``page``/``pageSize``.
    """
    filters = FeedbackFilter(
        sentiments=sentiment or [],
        priorities=priority or [],
        tags=tag or [],
        search=search,
        hasCat=has_cat,
    )
    window = PageRequest.from_query(limit=limit, skip=skip, page=page, page_size=page_size)
    return await feedback_service.list_feedback(filters, window, request_id)


@router.delete("", response_model=FeedbackBulkDeleteResponse)
async def delete_feedbacks(
    feedback_service: FeedbackServiceDep,
    request_id: RequestId,
    payload: JsonBody = None,
) -> FeedbackBulkDeleteResponse:
    """
    Delete several feedback entries at once.

    Ids that do not exist are skipped; ``deletedCount`` reports how many were removed.
    """
    payload = payload or {}
    feedback_ids = validate_feedback_ids(payload.get("ids"))

    deleted_count = await feedback_service.delete_feedbacks(feedback_ids, request_id)
    return FeedbackBulkDeleteResponse(deletedCount=deleted_count, deletedIds=feedback_ids)


@router.get(
    "/{feedback_id}",
    response_model=ApiResponse[FeedbackResponse],
    response_model_exclude_none=True,
)
async def get_feedback(
    feedback_id: str,
    feedback_service: FeedbackServiceDep,
    request_id: RequestId,
) -> ApiResponse[FeedbackResponse]:
    """Get a single feedback entry, including its cat's name and image when linked."""
    validate_feedback_id(feedback_id)
    result = await feedback_service.get_feedback(feedback_id, request_id)
    return ApiResponse.ok(result)


@router.patch(
    "/{feedback_id}",
    response_model=ApiResponse[FeedbackResponse],
    response_model_exclude_none=True,
)
async def update_next_action(
    feedback_id: str,
    feedback_service: FeedbackServiceDep,
    request_id: RequestId,
    payload: JsonBody = None,
) -> ApiResponse[FeedbackResponse]:
    """
    Update the recommended next action.

    This is the only part of a feedback's analysis that can change after creation.
    """
    validate_feedback_id(feedback_id)
    payload = payload or {}
    next_action = validate_next_action(payload.get("nextAction"))

    result = await feedback_service.update_next_action(feedback_id, next_action, request_id)
    return ApiResponse.ok(result)


@router.delete("/{feedback_id}", response_model=FeedbackDeleteResponse)
async def delete_feedback(
    feedback_id: str,
    feedback_service: FeedbackServiceDep,
    request_id: RequestId,
) -> FeedbackDeleteResponse:
    """Delete a single feedback entry."""
    validate_feedback_id(feedback_id)
    deleted_id = await feedback_service.delete_feedback(feedback_id, request_id)
    return FeedbackDeleteResponse(deletedId=deleted_id)


@tags_router.get("", response_model=ApiResponse[list[str]], response_model_exclude_none=True)
async def list_tags(
    feedback_service: FeedbackServiceDep,
    request_id: RequestId,
) -> ApiResponse[list[str]]:
    """Get every tag used across all feedback, sorted."""
    tags = await feedback_service.list_tags(request_id)
    return ApiResponse.ok(tags)
