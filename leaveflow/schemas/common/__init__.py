from leaveflow.schemas.common.base import BaseResponseSchema, BaseSchema
from leaveflow.schemas.common.pagination import PaginatedResponse, PaginationMeta, PaginationQuery

__all__ = ["BaseResponseSchema", "BaseSchema", "PaginatedResponse", "PaginationMeta", "PaginationQuery"]
