from leaveflow.models.leave.desired_leave_months import DesiredLeaveMonths
from leaveflow.models.leave.leave_application import LeaveApplication
from leaveflow.models.leave.leave_balance import LeaveBalance
from leaveflow.models.leave.leave_type import LeaveTypeConfig

__all__ = [
    "DesiredLeaveMonths",
    "LeaveApplication",
    "LeaveBalance",
    "LeaveTypeConfig",
]
