from leaveflow.schemas.leave.desired_months import (
    DesiredMonthsRequest,
    DesiredMonthsResponse,
    DesiredMonthsValidationResult,
)
from leaveflow.schemas.leave.leave_application import LeaveApplicationFilter, LeaveApplicationRequest
from leaveflow.schemas.leave.leave_approval import ApprovalAction, RejectionAction
from leaveflow.schemas.leave.leave_balance import LeaveBalanceSnapshot
from leaveflow.schemas.leave.leave_response import DatePreview, LeaveApplicationResponse
from leaveflow.schemas.leave.leave_validation import (
    BalanceCheck,
    DateRangeCheck,
    DesiredMonthsCheck,
    LeaveValidationResult,
    NoticeCheck,
    OverlapCheck,
    StudyProgramCheck,
    ValidationBreakdown,
    ValidationCheck,
)

__all__ = [
    "DesiredMonthsRequest",
    "DesiredMonthsResponse",
    "DesiredMonthsValidationResult",
    "LeaveApplicationFilter",
    "LeaveApplicationRequest",
    "ApprovalAction",
    "RejectionAction",
    "LeaveBalanceSnapshot",
    "DatePreview",
    "LeaveApplicationResponse",
    "BalanceCheck",
    "DateRangeCheck",
    "DesiredMonthsCheck",
    "LeaveValidationResult",
    "NoticeCheck",
    "OverlapCheck",
    "StudyProgramCheck",
    "ValidationBreakdown",
    "ValidationCheck",
]
