"""
Desired leave months schemas.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import Field

from leaveflow.schemas.common.base import BaseResponseSchema, BaseSchema

__all__ = [
    "DesiredMonthsRequest",
    "DesiredMonthsResponse",
    "DesiredMonthsValidationResult",
]


class DesiredMonthsRequest(BaseSchema):
    """
    Two preferred months for annual leave.

    Range and distinctness are checked by the desired months service so
    every bad selection reports the same error code.
    """

    months: List[int] = Field(..., description="Month numbers 1-12")


class DesiredMonthsResponse(BaseResponseSchema):
    user_id: str
    preferred_months: List[int]
    submitted_at: datetime
    is_locked: bool


class DesiredMonthsValidationResult(BaseSchema):
    """Whether a date range falls entirely inside the desired months."""

    is_valid: bool
    desired_months: Optional[List[int]] = None
    leave_months: List[int] = Field(default_factory=list)
    message: str
