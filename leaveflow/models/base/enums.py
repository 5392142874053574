"""
Database enums shared by models and schemas.

Values are the lowercase strings used on the wire and in storage.
"""

import enum


class UserRole(str, enum.Enum):
    """User role enumeration."""
    STAFF = "staff"
    DIRECTOR = "director"
    HR = "hr"
    ADMIN = "admin"


class LeaveType(str, enum.Enum):
    """Leave type enumeration."""
    ANNUAL = "annual"
    CASUAL = "casual"
    SICK = "sick"
    MATERNITY = "maternity"
    PATERNITY = "paternity"
    STUDY = "study"


class LeaveStatus(str, enum.Enum):
    """
    Leave application lifecycle status.

    DRAFT is declared for storage compatibility; no workflow path produces it.
    """
    DRAFT = "draft"
    PENDING_DIRECTOR = "pending_director"
    PENDING_HR = "pending_hr"
    APPROVED = "approved"
    REJECTED = "rejected"

    @property
    def is_terminal(self) -> bool:
        return self in (LeaveStatus.APPROVED, LeaveStatus.REJECTED)

    @classmethod
    def active_statuses(cls) -> tuple:
        """Statuses that hold calendar dates for overlap purposes."""
        return (cls.PENDING_DIRECTOR, cls.PENDING_HR, cls.APPROVED)


class StudyProgram(str, enum.Enum):
    """Study leave programme."""
    BSC = "bsc"
    MSC = "msc"
    PHD = "phd"
