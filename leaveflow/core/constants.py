"""
Core application constants.

These values centralize the leave policy catalogue and common
configuration-like constants such as:
- Default leave type allotments and notice periods.
- Study leave programmes and their durations.
- Pagination defaults.
- Common HTTP header names.
"""

from typing import Dict, List, TypedDict

from leaveflow.models.base.enums import LeaveType, StudyProgram


class LeaveTypeDefaults(TypedDict):
    annual_days: int
    min_notice_days: int
    can_reapply: bool
    label: str
    description: str


# Seed values for LeaveTypeConfig rows
DEFAULT_LEAVE_TYPES: Dict[LeaveType, LeaveTypeDefaults] = {
    LeaveType.ANNUAL: {
        "annual_days": 30,
        "min_notice_days": 14,
        "can_reapply": False,
        "label": "Annual Leave",
        "description": "30 days/year - 14 days notice",
    },
    LeaveType.CASUAL: {
        "annual_days": 7,
        "min_notice_days": 14,
        "can_reapply": False,
        "label": "Casual Leave",
        "description": "7 days/year - 14 days notice",
    },
    LeaveType.SICK: {
        "annual_days": 10,
        "min_notice_days": 0,
        "can_reapply": True,
        "label": "Sick Leave",
        "description": "10 days/year (reapplicable) - No notice",
    },
    LeaveType.MATERNITY: {
        "annual_days": 80,  # 16 weeks of working days
        "min_notice_days": 28,
        "can_reapply": False,
        "label": "Maternity Leave",
        "description": "16 weeks - 4 weeks notice",
    },
    LeaveType.PATERNITY: {
        "annual_days": 14,
        "min_notice_days": 14,
        "can_reapply": False,
        "label": "Paternity Leave",
        "description": "14 days - 14 days notice",
    },
    LeaveType.STUDY: {
        "annual_days": 0,
        "min_notice_days": 0,
        "can_reapply": False,
        "label": "Study Leave",
        "description": "BSc (4 years), MSc (2 years), PhD (4 years)",
    },
}


class StudyProgramInfo(TypedDict):
    label: str
    duration_years: int


STUDY_PROGRAMS: Dict[StudyProgram, StudyProgramInfo] = {
    StudyProgram.BSC: {"label": "Bachelor of Science (BSc)", "duration_years": 4},
    StudyProgram.MSC: {"label": "Master of Science (MSc)", "duration_years": 2},
    StudyProgram.PHD: {"label": "Doctor of Philosophy (PhD)", "duration_years": 4},
}

# Leave types whose balance is not tracked by the ledger
LEDGER_EXEMPT_LEAVE_TYPES: List[LeaveType] = [LeaveType.STUDY]

# Leave types constrained to the user's desired months
DESIRED_MONTHS_LEAVE_TYPES: List[LeaveType] = [LeaveType.ANNUAL]

REQUIRED_DESIRED_MONTHS: int = 2

# Pagination defaults
DEFAULT_PAGE: int = 1
DEFAULT_PAGE_SIZE: int = 20
MAX_PAGE_SIZE: int = 100

# Common HTTP header names
HEADER_USER_ID: str = "X-User-ID"
