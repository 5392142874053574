"""
Leave application response schemas.
"""

from __future__ import annotations

from datetime import date as Date
from datetime import datetime
from typing import Optional

from pydantic import Field

from leaveflow.models.base import LeaveStatus, LeaveType, StudyProgram
from leaveflow.schemas.common.base import BaseResponseSchema, BaseSchema

__all__ = ["LeaveApplicationResponse", "DatePreview"]


class LeaveApplicationResponse(BaseResponseSchema):
    """Leave application with its approval trail."""

    application_number: str
    user_id: str
    leave_type: LeaveType
    start_date: Date
    end_date: Date
    working_days: int
    reason: str
    study_program: Optional[StudyProgram] = None
    status: LeaveStatus
    submitted_at: Optional[datetime] = None

    director_approved_by: Optional[str] = None
    director_approved_at: Optional[datetime] = None
    director_comments: Optional[str] = None
    hr_approved_by: Optional[str] = None
    hr_approved_at: Optional[datetime] = None
    hr_comments: Optional[str] = None

    version: int


class DatePreview(BaseSchema):
    """End and resumption dates for a prospective request."""

    start_date: Date
    working_days: int = Field(..., ge=1)
    end_date: Date
    resumption_date: Date
