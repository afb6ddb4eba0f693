"""Response envelope shared by every endpoint: {success, message, data}."""

from math import ceil
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """Successful response envelope."""

    success: bool = True
    message: str | None = None
    data: T | None = None


class ErrorResponse(BaseModel):
    """Error envelope produced by the exception handlers."""

    success: bool = False
    message: str
    errors: list[Any] | None = Field(
        default=None,
        description="Field-level validation errors, when the request body was malformed",
    )


class Pagination(BaseModel):
    page: int
    pages: int
    total: int
    limit: int

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "Pagination":
        return cls(page=page, pages=ceil(total / limit) if limit else 0, total=total, limit=limit)


class PaginatedResponse(BaseModel, Generic[T]):
    """Envelope for list endpoints that page through results."""

    success: bool = True
    data: list[T] = Field(default_factory=list)
    pagination: Pagination
