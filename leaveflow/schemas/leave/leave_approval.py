"""
Approval and rejection action schemas.
"""

from __future__ import annotations

from typing import Optional

from pydantic import Field, field_validator

from leaveflow.schemas.common.base import BaseSchema

__all__ = ["ApprovalAction", "RejectionAction"]


class ApprovalAction(BaseSchema):
    """Approve the current stage; comments are optional."""

    comments: Optional[str] = Field(None, max_length=1000)

    @field_validator("comments")
    @classmethod
    def empty_to_none(cls, v: Optional[str]) -> Optional[str]:
        return v or None


class RejectionAction(BaseSchema):
    """Reject the application; a reason is mandatory at every stage."""

    comments: str = Field(..., min_length=1, max_length=1000)
