"""
Shared schemas: pagination, plain messages and the error envelope.

Paginated endpoints take ``PaginationParams`` as a query dependency and
answer ``PaginatedResponse[Item]``:

    {"data": [...], "meta": {"total", "page", "page_size", "total_pages",
                             "has_next", "has_previous"}}
"""

import math
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, Field

ItemT = TypeVar("ItemT")

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100


class PaginationParams(BaseModel):
    """``?page=`` (1-based) and ``?page_size=`` (1..100)."""

    page: int = Field(default=1, ge=1)
    page_size: int = Field(default=DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE)

    @property
    def offset(self) -> int:
        """
        Rows to skip for this page.

        Example:
            >>> PaginationParams(page=3, page_size=10).offset
            20
        """
        return (self.page - 1) * self.page_size


class PaginationMeta(BaseModel):
    total: int = Field(description="Items across all pages")
    page: int
    page_size: int
    total_pages: int
    has_next: bool
    has_previous: bool

    @classmethod
    def build(cls, total: int, pagination: PaginationParams) -> "PaginationMeta":
        """
        Describe one page of a ``total``-item result.

        An empty result has zero pages; asking for a page past the end is not
        an error and simply reports ``has_next=False``.
        """
        total_pages = math.ceil(total / pagination.page_size)
        return cls(
            total=total,
            page=pagination.page,
            page_size=pagination.page_size,
            total_pages=total_pages,
            has_next=pagination.page < total_pages,
            has_previous=pagination.page > 1,
        )


class PaginatedResponse(BaseModel, Generic[ItemT]):
    data: list[ItemT]
    meta: PaginationMeta


class MessageResponse(BaseModel):
    """Acknowledgement for operations with nothing else to return."""

    message: str


class ErrorDetail(BaseModel):
    code: str = Field(examples=["ACCOUNT_ACCESS_DENIED"])
    message: str
    details: Any = None


class ErrorMeta(BaseModel):
    request_id: str | None = None


class ErrorResponse(BaseModel):
    """
    Error envelope produced by the exception handlers.

    Only used in route ``responses=`` declarations so the shape appears in
    the OpenAPI document.
    """

    error: ErrorDetail
    meta: ErrorMeta
