from leaveflow.repositories.leave.desired_months_repository import DesiredMonthsRepository
from leaveflow.repositories.leave.leave_application_repository import LeaveApplicationRepository
from leaveflow.repositories.leave.leave_balance_repository import LeaveBalanceRepository
from leaveflow.repositories.leave.leave_type_repository import LeaveTypeRepository

__all__ = [
    "DesiredMonthsRepository",
    "LeaveApplicationRepository",
    "LeaveBalanceRepository",
    "LeaveTypeRepository",
]
