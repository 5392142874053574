from leaveflow.services.leave.desired_months_service import DesiredMonthsService
from leaveflow.services.leave.leave_application_service import LeaveApplicationService
from leaveflow.services.leave.leave_balance_service import LeaveBalanceService
from leaveflow.services.leave.leave_validation_service import LeaveValidationService
from leaveflow.services.leave.leave_workflow_service import LeaveWorkflowService

__all__ = [
    "DesiredMonthsService",
    "LeaveApplicationService",
    "LeaveBalanceService",
    "LeaveValidationService",
    "LeaveWorkflowService",
]
