"""
Database models for the leave workflow engine.

Importing this package registers every table on ``Base.metadata``.
"""

from leaveflow.models.base import Base, LeaveStatus, LeaveType, StudyProgram, UserRole
from leaveflow.models.calendar import PublicHoliday
from leaveflow.models.leave import DesiredLeaveMonths, LeaveApplication, LeaveBalance, LeaveTypeConfig
from leaveflow.models.user import Department, Designation, User

__all__ = [
    "Base",
    "LeaveStatus",
    "LeaveType",
    "StudyProgram",
    "UserRole",
    "PublicHoliday",
    "DesiredLeaveMonths",
    "LeaveApplication",
    "LeaveBalance",
    "LeaveTypeConfig",
    "Department",
    "Designation",
    "User",
]
