"""
Leave request validation engine.

Runs every rule against a request and aggregates the outcome instead of
stopping at the first failure, so the applicant sees all problems at
once. Nothing is written.
"""

from datetime import date, timedelta
from typing import Callable, Container, List, Optional, Tuple

from dateutil.relativedelta import relativedelta
from sqlalchemy.orm import Session

from leaveflow.config.settings import settings
from leaveflow.core.constants import DESIRED_MONTHS_LEAVE_TYPES, STUDY_PROGRAMS
from leaveflow.core.exceptions import ErrorCode
from leaveflow.models.base import LeaveStatus, LeaveType, StudyProgram
from leaveflow.repositories.leave.leave_application_repository import LeaveApplicationRepository
from leaveflow.repositories.leave.leave_type_repository import LeaveTypeRepository
from leaveflow.schemas.leave.leave_application import LeaveApplicationRequest
from leaveflow.schemas.leave.leave_validation import (
    BalanceCheck,
    DateRangeCheck,
    DesiredMonthsCheck,
    LeaveValidationResult,
    NoticeCheck,
    OverlapCheck,
    StudyProgramCheck,
    ValidationBreakdown,
)
from leaveflow.services.base.base_service import BaseService
from leaveflow.services.calendar.calendar_service import (
    CalendarService,
    add_working_days,
    count_working_days,
    is_working_day,
)
from leaveflow.services.leave.desired_months_service import DesiredMonthsService
from leaveflow.services.leave.leave_balance_service import LeaveBalanceService


def study_end_date(start_date: date, duration_years: int) -> date:
    """Last day of a study leave lasting ``duration_years`` from ``start_date``."""
    return start_date + relativedelta(years=duration_years) - timedelta(days=1)


def parse_study_program(value: Optional[str]) -> Optional[StudyProgram]:
    if not value:
        return None
    try:
        return StudyProgram(value.strip().lower())
    except ValueError:
        return None


class LeaveValidationService(BaseService):
    """
    Validates leave requests.

    Args:
        db_session: Database session
        today: Provider of the current date for the notice check
    """

    def __init__(self, db_session: Session, today: Callable[[], date] = date.today):
        super().__init__(db_session)
        self.today = today
        self.calendar = CalendarService(db_session)
        self.ledger = LeaveBalanceService(db_session)
        self.desired_months = DesiredMonthsService(db_session)
        self.application_repository = LeaveApplicationRepository(db_session)
        self.leave_type_repository = LeaveTypeRepository(db_session)

    def validate(
        self,
        user_id: str,
        request: LeaveApplicationRequest,
        today: Optional[date] = None,
    ) -> LeaveValidationResult:
        """
        Validate a leave request for a user.

        Raises:
            EntityNotFoundError: If the leave type has no configuration
        """
        today = today or self.today()
        leave_type = request.leave_type
        config = self.leave_type_repository.get_by_type(leave_type)
        holidays = self.calendar.holidays()
        warnings: List[str] = []

        if leave_type == LeaveType.STUDY:
            program_check, end_date, working_days = self._resolve_study(request, holidays)
            duration_problem = None
        else:
            program_check = StudyProgramCheck.not_applicable("Only study leave needs a programme")
            end_date, working_days, duration_problem = self._resolve_duration(request, holidays)

        range_check = self._check_date_range(request.start_date, end_date, working_days, duration_problem)
        dates_known = end_date is not None and range_check.valid

        checks = ValidationBreakdown(
            date_range=range_check,
            study_program=program_check,
            desired_months=self._check_desired_months(user_id, leave_type, request.start_date, end_date, dates_known),
            sufficient_balance=self._check_balance(user_id, leave_type, request.start_date.year, working_days, warnings),
            no_overlap=self._check_overlap(user_id, request.start_date, end_date, dates_known),
            minimum_notice=self._check_notice(leave_type, request.start_date, today, config.min_notice_days),
        )

        if leave_type != LeaveType.STUDY and not is_working_day(request.start_date, holidays):
            warnings.append(f"Start date {request.start_date.isoformat()} is not a working day")

        failed = checks.failed()
        result = LeaveValidationResult(
            is_valid=not failed,
            error_code=failed[0].code if failed else None,
            errors=[check.message for check in failed],
            warnings=warnings,
            checks=checks,
            leave_type=leave_type,
            start_date=request.start_date,
            end_date=end_date,
            working_days=working_days,
            study_program=program_check.program,
            balance_year=request.start_date.year,
        )

        if failed:
            self._logger.info(
                f"Leave request rejected by validation: {[c.code.value for c in failed]}",
                extra={"user_id": user_id, "leave_type": leave_type.value},
            )
        return result

    # -------------------------------------------------------------------------
    # Request resolution
    # -------------------------------------------------------------------------

    def _resolve_study(
        self,
        request: LeaveApplicationRequest,
        holidays: Container[date],
    ) -> Tuple[StudyProgramCheck, Optional[date], Optional[int]]:
        # Supplied end date and working days are ignored for study leave
        program = parse_study_program(request.study_program)
        if program is None:
            allowed = ", ".join(p.value for p in StudyProgram)
            message = (
                f"Unknown study programme '{request.study_program}'; choose one of {allowed}"
                if request.study_program
                else "Study leave requires a study programme"
            )
            return (
                StudyProgramCheck(valid=False, code=ErrorCode.MISSING_STUDY_PROGRAM, message=message),
                None,
                None,
            )

        info = STUDY_PROGRAMS[program]
        end_date = study_end_date(request.start_date, info["duration_years"])
        check = StudyProgramCheck(
            valid=True,
            message=f"{info['label']}: {info['duration_years']} year(s)",
            program=program,
            duration_years=info["duration_years"],
        )
        return check, end_date, count_working_days(request.start_date, end_date, holidays)

    @staticmethod
    def _resolve_duration(
        request: LeaveApplicationRequest,
        holidays: Container[date],
    ) -> Tuple[Optional[date], Optional[int], Optional[str]]:
        """
        Derive the missing half of (end date, working days).

        An explicit end date always wins: working days are counted from the
        calendar, and a supplied count that disagrees is reported as a
        problem for the date range check.
        """
        end_date, working_days = request.end_date, request.working_days
        if end_date is not None:
            counted = count_working_days(request.start_date, end_date, holidays)
            if working_days is not None and end_date >= request.start_date and working_days != counted:
                return end_date, counted, (
                    f"{working_days} working day(s) requested but {request.start_date.isoformat()} "
                    f"to {end_date.isoformat()} covers {counted}"
                )
            return end_date, counted, None

        if working_days is not None and working_days >= 1:
            try:
                end_date = add_working_days(request.start_date, working_days, holidays)
            except ValueError as e:
                return None, working_days, str(e)
        return end_date, working_days, None

    # -------------------------------------------------------------------------
    # Checks
    # -------------------------------------------------------------------------

    @staticmethod
    def _check_date_range(
        start_date: date,
        end_date: Optional[date],
        working_days: Optional[int],
        problem: Optional[str] = None,
    ) -> DateRangeCheck:
        fields = {"start_date": start_date, "end_date": end_date, "working_days": working_days}
        if problem is not None:
            return DateRangeCheck(valid=False, code=ErrorCode.INVALID_DATE_RANGE, message=problem, **fields)
        if end_date is None and working_days is None:
            return DateRangeCheck.not_applicable("Dates follow from the study programme", **fields)
        if end_date is not None and end_date < start_date:
            return DateRangeCheck(
                valid=False,
                code=ErrorCode.INVALID_DATE_RANGE,
                message="End date cannot be before start date",
                **fields,
            )
        if working_days is None or working_days < 1:
            return DateRangeCheck(
                valid=False,
                code=ErrorCode.INVALID_DATE_RANGE,
                message="Leave must cover at least one working day",
                **fields,
            )
        return DateRangeCheck(valid=True, message="Date range is valid", **fields)

    def _check_desired_months(
        self,
        user_id: str,
        leave_type: LeaveType,
        start_date: date,
        end_date: Optional[date],
        dates_known: bool,
    ) -> DesiredMonthsCheck:
        if leave_type not in DESIRED_MONTHS_LEAVE_TYPES:
            return DesiredMonthsCheck.not_applicable(f"{leave_type.value} leave is not tied to desired months")

        if self.desired_months.get_for_user(user_id) is None:
            return DesiredMonthsCheck(
                valid=False,
                code=ErrorCode.DESIRED_MONTHS_REQUIRED,
                message="You must submit your desired leave months before applying for annual leave",
            )
        if not dates_known:
            return DesiredMonthsCheck.not_applicable("Date range is invalid")

        outcome = self.desired_months.validate_against_desired_months(user_id, start_date, end_date)
        return DesiredMonthsCheck(
            valid=outcome.is_valid,
            code=None if outcome.is_valid else ErrorCode.DESIRED_MONTHS_VIOLATION,
            message=outcome.message,
            desired_months=outcome.desired_months,
            leave_months=outcome.leave_months,
        )

    def _check_balance(
        self,
        user_id: str,
        leave_type: LeaveType,
        year: int,
        working_days: Optional[int],
        warnings: List[str],
    ) -> BalanceCheck:
        if not self.ledger.is_tracked(leave_type):
            return BalanceCheck.not_applicable(f"{leave_type.value} leave does not draw on a balance", year=year)
        if working_days is None or working_days < 1:
            return BalanceCheck.not_applicable("No working days requested", year=year)

        available = self.ledger.get_balance(user_id, leave_type, year).available_days
        fields = {"year": year, "requested_days": working_days, "available_days": available}
        if working_days > available:
            return BalanceCheck(
                valid=False,
                code=ErrorCode.INSUFFICIENT_BALANCE,
                message=(
                    f"Insufficient {leave_type.value} leave balance: {working_days} day(s) requested, "
                    f"{available} available"
                ),
                **fields,
            )

        remaining = available - working_days
        if remaining <= settings.LOW_BALANCE_WARNING_DAYS:
            warnings.append(f"Only {remaining} {leave_type.value} leave day(s) will remain for {year}")
        return BalanceCheck(valid=True, message=f"{available} day(s) available", **fields)

    def _check_overlap(
        self,
        user_id: str,
        start_date: date,
        end_date: Optional[date],
        dates_known: bool,
    ) -> OverlapCheck:
        if not dates_known:
            return OverlapCheck.not_applicable("Date range is unknown")

        overlapping = self.application_repository.find_overlapping(
            user_id, start_date, end_date, LeaveStatus.active_statuses()
        )
        if overlapping:
            numbers = [application.application_number for application in overlapping]
            return OverlapCheck(
                valid=False,
                code=ErrorCode.DATE_OVERLAP,
                message=f"Dates overlap with existing application(s): {', '.join(numbers)}",
                conflicting_applications=numbers,
            )
        return OverlapCheck(valid=True, message="No overlapping applications")

    def _check_notice(
        self,
        leave_type: LeaveType,
        start_date: date,
        today: date,
        min_notice_days: int,
    ) -> NoticeCheck:
        if leave_type == LeaveType.STUDY:
            return NoticeCheck.not_applicable("Study leave has no notice period")

        notice_days = (start_date - today).days
        fields = {"required_days": min_notice_days, "notice_days": notice_days}
        if notice_days < min_notice_days:
            return NoticeCheck(
                valid=False,
                code=ErrorCode.INSUFFICIENT_NOTICE,
                message=(
                    f"{leave_type.value.capitalize()} leave requires {min_notice_days} day(s) notice; "
                    f"start date is {notice_days} day(s) away"
                ),
                **fields,
            )
        return NoticeCheck(valid=True, message="Notice period satisfied", **fields)
