"""
Pagination schemas for page-based responses.
"""

from __future__ import annotations

from typing import Any, Callable, Generic, List, TypeVar

from pydantic import Field

from leaveflow.core.constants import DEFAULT_PAGE, DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from leaveflow.repositories.base.pagination import PaginatedResult
from leaveflow.schemas.common.base import BaseSchema

T = TypeVar("T")

__all__ = [
    "PaginationQuery",
    "PaginationMeta",
    "PaginatedResponse",
]


class PaginationQuery(BaseSchema):
    """Pagination query parameters."""

    page: int = Field(default=DEFAULT_PAGE, ge=1, description="Page number (1-indexed)")
    page_size: int = Field(
        default=DEFAULT_PAGE_SIZE,
        ge=1,
        le=MAX_PAGE_SIZE,
        description="Items per page",
    )


class PaginationMeta(BaseSchema):
    """Pagination metadata."""

    total_items: int = Field(..., ge=0, description="Total number of items")
    total_pages: int = Field(..., ge=0, description="Total number of pages")
    current_page: int = Field(..., ge=1, description="Current page number")
    page_size: int = Field(..., ge=1, description="Items per page")
    has_next: bool = Field(..., description="Has next page")
    has_previous: bool = Field(..., description="Has previous page")


class PaginatedResponse(BaseSchema, Generic[T]):
    """Generic paginated response."""

    items: List[T] = Field(..., description="List of items")
    meta: PaginationMeta = Field(..., description="Pagination metadata")

    @classmethod
    def from_result(
        cls,
        result: PaginatedResult,
        convert: Callable[[Any], T],
    ) -> "PaginatedResponse[T]":
        """
        Build the envelope from a repository page.

        Args:
            result: Page returned by a repository
            convert: Maps one ORM item to its response schema
        """
        info = result.page_info
        return cls(
            items=[convert(item) for item in result.items],
            meta=PaginationMeta(
                total_items=info.total_items,
                total_pages=info.total_pages,
                current_page=info.current_page,
                page_size=info.per_page,
                has_next=info.has_next,
                has_previous=info.has_previous,
            ),
        )
