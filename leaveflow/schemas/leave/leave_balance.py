"""
Leave balance schemas.
"""

from __future__ import annotations

from pydantic import Field

from leaveflow.models.base import LeaveType
from leaveflow.schemas.common.base import BaseSchema

__all__ = ["LeaveBalanceSnapshot"]


class LeaveBalanceSnapshot(BaseSchema):
    """Point-in-time view of one ledger row."""

    user_id: str
    leave_type: LeaveType
    year: int
    allocated_days: int = Field(..., ge=0)
    used_days: int = Field(..., ge=0)
    pending_days: int = Field(..., ge=0)
    available_days: int = Field(..., ge=0)

    @classmethod
    def empty(cls, user_id: str, leave_type: LeaveType, year: int) -> "LeaveBalanceSnapshot":
        """Snapshot for a (user, type, year) with no allocation yet."""
        return cls(
            user_id=user_id,
            leave_type=leave_type,
            year=year,
            allocated_days=0,
            used_days=0,
            pending_days=0,
            available_days=0,
        )
