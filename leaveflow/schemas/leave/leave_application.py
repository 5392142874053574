"""
Leave application request and filter schemas.
"""

from __future__ import annotations

from datetime import date as Date
from typing import List, Optional

from pydantic import ConfigDict, Field, model_validator

from leaveflow.models.base import LeaveStatus, LeaveType
from leaveflow.schemas.common.base import BaseSchema

__all__ = [
    "LeaveApplicationRequest",
    "LeaveApplicationFilter",
]


class LeaveApplicationRequest(BaseSchema):
    """
    Leave application submitted by an employee.

    Either ``working_days`` or ``end_date`` is required except for study
    leave, whose end date and working days are derived from the programme.
    When only one of them is supplied the other is derived from the
    working-day calendar.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "leave_type": "annual",
                "start_date": "2026-03-02",
                "working_days": 5,
                "reason": "Family holiday",
            }
        }
    )

    leave_type: LeaveType = Field(..., description="Type of leave being requested")
    start_date: Date = Field(..., description="First day of leave")
    end_date: Optional[Date] = Field(None, description="Last day of leave")
    working_days: Optional[int] = Field(None, description="Working days requested")
    reason: str = Field(..., min_length=3, max_length=1000, description="Reason for leave")
    study_program: Optional[str] = Field(
        None,
        max_length=20,
        description="bsc, msc or phd; study leave only",
    )

    @model_validator(mode="after")
    def require_duration(self) -> "LeaveApplicationRequest":
        if self.leave_type != LeaveType.STUDY and self.working_days is None and self.end_date is None:
            raise ValueError("Either working_days or end_date is required")
        return self


class LeaveApplicationFilter(BaseSchema):
    """Filters for listing leave applications."""

    status: Optional[List[LeaveStatus]] = Field(None, description="Statuses to include")
    leave_type: Optional[List[LeaveType]] = Field(None, description="Leave types to include")
    user_id: Optional[str] = Field(None, description="Applicant")
    start_date_from: Optional[Date] = Field(None, description="Start on or after")
    end_date_until: Optional[Date] = Field(None, description="End on or before")
    sort_by: str = Field(
        default="submitted_at",
        pattern=r"^(submitted_at|start_date|status|created_at)$",
    )
    sort_order: str = Field(default="desc", pattern=r"^(asc|desc)$")
