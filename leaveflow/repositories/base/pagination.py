"""
Offset pagination for repository queries.
"""

from dataclasses import dataclass
from math import ceil
from typing import Generic, List, TypeVar

from sqlalchemy.orm import Query

from leaveflow.core.constants import DEFAULT_PAGE, DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE

ItemType = TypeVar("ItemType")


@dataclass
class PaginationParams:
    """Page request; values are clamped to sane bounds."""

    page: int = DEFAULT_PAGE
    per_page: int = DEFAULT_PAGE_SIZE

    def __post_init__(self):
        self.page = max(1, int(self.page))
        self.per_page = min(max(1, int(self.per_page)), MAX_PAGE_SIZE)

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.per_page


@dataclass
class PageInfo:
    """Pagination metadata."""

    current_page: int
    per_page: int
    total_items: int
    total_pages: int
    has_next: bool
    has_previous: bool


@dataclass
class PaginatedResult(Generic[ItemType]):
    """Paginated query result."""

    items: List[ItemType]
    page_info: PageInfo


def paginate(query: Query, params: PaginationParams) -> PaginatedResult:
    """Run an ordered query for one page and its total count."""
    total = query.order_by(None).count()
    items = query.offset(params.skip).limit(params.per_page).all()
    total_pages = ceil(total / params.per_page) if total else 0

    return PaginatedResult(
        items=items,
        page_info=PageInfo(
            current_page=params.page,
            per_page=params.per_page,
            total_items=total,
            total_pages=total_pages,
            has_next=params.page < total_pages,
            has_previous=params.page > 1,
        ),
    )
