"""Base schemas for API responses."""

from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")


class BaseSchema(BaseModel):
    """Base schema with common configuration."""

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        use_enum_values=True,
    )


class ErrorDetail(BaseSchema):
    """Error detail schema."""

    code: str
    message: str
    fields: dict[str, str] | None = None
    request_id: str | None = Field(None, alias="requestId")


class ApiResponse(BaseSchema, Generic[T]):
    """Standard API response wrapper."""

    success: bool
    data: T | None = None
    error: ErrorDetail | None = None

    @classmethod
    def ok(cls, data: T) -> "ApiResponse[T]":
        """Create a successful response."""
        return cls(success=True, data=data)

    @classmethod
    def fail(
        cls,
        code: str,
        message: str,
        fields: dict[str, str] | None = None,
        request_id: str | None = None,
    ) -> "ApiResponse[Any]":
        """Create an error response."""
        return cls(
            success=False,
            error=ErrorDetail(code=code, message=message, fields=fields or None, requestId=request_id),
        )


class PaginationMeta(BaseSchema):
    """Pagination metadata for list responses."""

    total: int
    limit: int
    skip: int
    has_more: bool = Field(..., alias="hasMore")
    page: int | None = None
    page_size: int | None = Field(None, alias="pageSize")
