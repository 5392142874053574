"""
Leave validation result schemas.

Every check reports its own verdict and message so a caller can show all
problems with a request at once.
"""

from __future__ import annotations

from datetime import date as Date
from typing import List, Optional

from pydantic import Field

from leaveflow.core.exceptions import ErrorCode
from leaveflow.models.base import LeaveType, StudyProgram
from leaveflow.schemas.common.base import BaseSchema

__all__ = [
    "ValidationCheck",
    "DateRangeCheck",
    "StudyProgramCheck",
    "DesiredMonthsCheck",
    "BalanceCheck",
    "OverlapCheck",
    "NoticeCheck",
    "ValidationBreakdown",
    "LeaveValidationResult",
]


class ValidationCheck(BaseSchema):
    """Outcome of a single rule."""

    valid: bool = True
    skipped: bool = Field(False, description="Rule does not apply to this request")
    code: Optional[ErrorCode] = Field(None, description="Set when the check fails")
    message: str = ""

    @classmethod
    def not_applicable(cls, message: str, **fields) -> "ValidationCheck":
        return cls(valid=True, skipped=True, message=message, **fields)


class DateRangeCheck(ValidationCheck):
    start_date: Optional[Date] = None
    end_date: Optional[Date] = None
    working_days: Optional[int] = None


class StudyProgramCheck(ValidationCheck):
    program: Optional[StudyProgram] = None
    duration_years: Optional[int] = None


class DesiredMonthsCheck(ValidationCheck):
    desired_months: Optional[List[int]] = None
    leave_months: List[int] = Field(default_factory=list)


class BalanceCheck(ValidationCheck):
    year: Optional[int] = None
    requested_days: int = 0
    available_days: int = 0


class OverlapCheck(ValidationCheck):
    conflicting_applications: List[str] = Field(
        default_factory=list,
        description="Application numbers whose dates intersect the request",
    )


class NoticeCheck(ValidationCheck):
    required_days: int = 0
    notice_days: int = 0


class ValidationBreakdown(BaseSchema):
    """All checks, in the order their failures are prioritised."""

    date_range: DateRangeCheck
    study_program: StudyProgramCheck
    desired_months: DesiredMonthsCheck
    sufficient_balance: BalanceCheck
    no_overlap: OverlapCheck
    minimum_notice: NoticeCheck

    def failed(self) -> List[ValidationCheck]:
        return [check for _, check in self.named_checks() if not check.valid]

    def named_checks(self) -> List[tuple]:
        return [(name, getattr(self, name)) for name in type(self).model_fields]


class LeaveValidationResult(BaseSchema):
    """
    Aggregated verdict for a leave request.

    ``error_code`` is the code of the first failing check; ``errors``
    lists the message of every failing check.
    """

    is_valid: bool
    error_code: Optional[ErrorCode] = None
    errors: List[str] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)
    checks: ValidationBreakdown

    # Request as resolved by the engine
    leave_type: LeaveType
    start_date: Date
    end_date: Optional[Date] = None
    working_days: Optional[int] = None
    study_program: Optional[StudyProgram] = None
    balance_year: int

    @property
    def message(self) -> str:
        if self.is_valid:
            return "Leave request is valid"
        return "; ".join(self.errors)
