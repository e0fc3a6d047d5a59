"""Feedback schemas."""

from datetime import datetime
from typing import Any

from bson import ObjectId
from pydantic import Field, field_validator

from axiom_api.models.feedback import Analysis
from axiom_api.schemas.base import BaseSchema, PaginationMeta

DEFAULT_LIMIT = 50
DEFAULT_PAGE_SIZE = 50
MAX_LIMIT = 1000


class FeedbackFilter(BaseSchema):
    """Optional list filters. Every supplied criterion must match."""

    sentiments: list[str] = Field(default_factory=list)
    priorities: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    search: str | None = None
    has_cat: bool | None = Field(None, alias="hasCat")


class PageRequest(BaseSchema):
    """Resolved pagination window."""

    limit: int = DEFAULT_LIMIT
    skip: int = 0
    page: int | None = None
    page_size: int | None = Field(None, alias="pageSize")

    @classmethod
    def from_query(
        cls,
        limit: int | None = None,
        skip: int | None = None,
        page: int | None = None,
        page_size: int | None = None,
    ) -> "PageRequest":
        """Build a window from raw ``limit``/``skip`` or ``page``/``pageSize``.

        Page-based parameters win when present.
        """
        if page is not None or page_size is not None:
            page = page or 1
            page_size = page_size or DEFAULT_PAGE_SIZE
            return cls(limit=page_size, skip=(page - 1) * page_size, page=page, page_size=page_size)
        return cls(limit=DEFAULT_LIMIT if limit is None else limit, skip=skip or 0)

    def to_meta(self, total: int, returned: int) -> PaginationMeta:
        return PaginationMeta(
            total=total,
            limit=self.limit,
            skip=self.skip,
            hasMore=self.skip + returned < total,
            page=self.page,
            pageSize=self.page_size,
        )


class FeedbackResponse(BaseSchema):
    """Feedback as returned by the API."""

    id: str = Field(..., alias="_id")
    text: str
    email: str | None = None
    created_at: datetime = Field(..., alias="createdAt")
    analysis: Analysis
    cat_id: str | None = Field(None, alias="catId")
    cat_name: str | None = Field(None, alias="catName")
    cat_svg_image: str | None = Field(None, alias="catSvgImage")

    @field_validator("id", "cat_id", mode="before")
    @classmethod
    def stringify_object_id(cls, value: Any) -> Any:
        if isinstance(value, ObjectId):
            return str(value)
        return value


class FeedbackListResponse(BaseSchema):
    """Paginated feedback list."""

    success: bool = True
    data: list[FeedbackResponse]
    pagination: PaginationMeta


class FeedbackDeleteResponse(BaseSchema):
    """Single delete result."""

    success: bool = True
    deleted_id: str = Field(..., alias="deletedId")


class FeedbackBulkDeleteResponse(BaseSchema):
    """Bulk delete result. ``deleted_count`` may be lower than ``len(deleted_ids)``."""

    success: bool = True
    deleted_count: int = Field(..., alias="deletedCount")
    deleted_ids: list[str] = Field(..., alias="deletedIds")
