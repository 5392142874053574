from leaveflow.repositories.base.base_repository import BaseRepository
from leaveflow.repositories.base.pagination import PageInfo, PaginatedResult, PaginationParams, paginate

__all__ = ["BaseRepository", "PageInfo", "PaginatedResult", "PaginationParams", "paginate"]
