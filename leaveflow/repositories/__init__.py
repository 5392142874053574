"""
Repository layer: data access for the leave workflow engine.

Repositories stage and flush changes but never commit.
"""

from leaveflow.repositories.base import BaseRepository, PaginatedResult, PaginationParams
from leaveflow.repositories.calendar import PublicHolidayRepository
from leaveflow.repositories.leave import (
    DesiredMonthsRepository,
    LeaveApplicationRepository,
    LeaveBalanceRepository,
    LeaveTypeRepository,
)
from leaveflow.repositories.user import UserRepository

__all__ = [
    "BaseRepository",
    "PaginatedResult",
    "PaginationParams",
    "PublicHolidayRepository",
    "DesiredMonthsRepository",
    "LeaveApplicationRepository",
    "LeaveBalanceRepository",
    "LeaveTypeRepository",
    "UserRepository",
]
