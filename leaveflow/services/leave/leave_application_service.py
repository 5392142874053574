"""
Leave application service.

Entry point for the surrounding application. Every operation takes the
acting user's id explicitly and returns a ServiceResult; domain failures
are reported through the result, never raised.
"""

from datetime import date
from typing import Callable, Iterable, List, Optional

from sqlalchemy.orm import Session

from leaveflow.core.exceptions import ErrorCode
from leaveflow.models.base import LeaveStatus
from leaveflow.models.leave.desired_leave_months import DesiredLeaveMonths
from leaveflow.models.leave.leave_application import LeaveApplication
from leaveflow.models.user.user import User
from leaveflow.repositories.base.pagination import PaginatedResult, PaginationParams
from leaveflow.repositories.leave.leave_application_repository import LeaveApplicationRepository
from leaveflow.repositories.user.user_repository import UserRepository
from leaveflow.schemas.leave.desired_months import DesiredMonthsValidationResult
from leaveflow.schemas.leave.leave_application import LeaveApplicationFilter, LeaveApplicationRequest
from leaveflow.schemas.leave.leave_balance import LeaveBalanceSnapshot
from leaveflow.schemas.leave.leave_response import DatePreview
from leaveflow.schemas.leave.leave_validation import LeaveValidationResult
from leaveflow.services.base.base_service import BaseService
from leaveflow.services.base.service_result import ErrorSeverity, ServiceError, ServiceResult
from leaveflow.services.calendar.calendar_service import CalendarService
from leaveflow.services.leave.desired_months_service import DesiredMonthsService
from leaveflow.services.leave.leave_balance_service import LeaveBalanceService
from leaveflow.services.leave.leave_validation_service import LeaveValidationService
from leaveflow.services.leave.leave_workflow_service import LeaveWorkflowService
from leaveflow.services.leave.workflow import WorkflowAction, pending_status_for


class LeaveApplicationService(BaseService):
    """
    Leave workflow facade.

    Args:
        db_session: Database session
        today: Provider of the current date, used for notice checks and
            default balance years
    """

    def __init__(self, db_session: Session, today: Callable[[], date] = date.today):
        super().__init__(db_session)
        self.today = today
        self.user_repository = UserRepository(db_session)
        self.application_repository = LeaveApplicationRepository(db_session)
        self.calendar = CalendarService(db_session)
        self.ledger = LeaveBalanceService(db_session)
        self.desired_months = DesiredMonthsService(db_session)
        self.validator = LeaveValidationService(db_session, today=today)
        self.workflow = LeaveWorkflowService(db_session)

    # -------------------------------------------------------------------------
    # Submission
    # -------------------------------------------------------------------------

    def submit_application(
        self,
        user_id: str,
        request: LeaveApplicationRequest,
    ) -> ServiceResult[LeaveApplication]:
        """
        Validate a request and, if it passes, create the application.

        On a failed validation nothing is written and
        ``error.details["validation"]`` holds the full check breakdown.
        """
        try:
            applicant = self._active_user(user_id)
            if isinstance(applicant, ServiceResult):
                return applicant

            validation = self.validator.validate(user_id, request)
            if not validation.is_valid:
                return self._validation_failure(validation)

            application = self.workflow.create_application(applicant, request, validation)
            return ServiceResult.success(
                application,
                message=f"Leave application {application.application_number} submitted",
                metadata={"warnings": validation.warnings},
            )
        except Exception as e:
            return self._handle_exception(e, "submit leave application", user_id)

    def validate_application(
        self,
        user_id: str,
        request: LeaveApplicationRequest,
    ) -> ServiceResult[LeaveValidationResult]:
        """Run every check without writing anything; failed checks are still a successful call."""
        try:
            applicant = self._active_user(user_id)
            if isinstance(applicant, ServiceResult):
                return applicant
            validation = self.validator.validate(user_id, request)
            return ServiceResult.success(validation, message=validation.message)
        except Exception as e:
            return self._handle_exception(e, "validate leave application", user_id)

    # -------------------------------------------------------------------------
    # Approval workflow
    # -------------------------------------------------------------------------

    def approve(
        self,
        application_id: str,
        actor_id: str,
        comments: Optional[str] = None,
    ) -> ServiceResult[LeaveApplication]:
        return self._act(application_id, actor_id, WorkflowAction.APPROVE, comments)

    def reject(
        self,
        application_id: str,
        actor_id: str,
        comments: str,
    ) -> ServiceResult[LeaveApplication]:
        return self._act(application_id, actor_id, WorkflowAction.REJECT, comments)

    def _act(
        self,
        application_id: str,
        actor_id: str,
        action: WorkflowAction,
        comments: Optional[str],
    ) -> ServiceResult[LeaveApplication]:
        try:
            application = self.workflow.apply_action(application_id, actor_id, action, comments)
            return ServiceResult.success(
                application,
                message=f"Leave application {application.application_number} is now {application.status.value}",
            )
        except Exception as e:
            return self._handle_exception(
                e,
                f"{action.value} leave application",
                application_id,
                additional_context={"actor_id": actor_id},
            )

    # -------------------------------------------------------------------------
    # Desired months
    # -------------------------------------------------------------------------

    def submit_desired_months(
        self,
        user_id: str,
        months: Iterable[int],
    ) -> ServiceResult[DesiredLeaveMonths]:
        try:
            user = self._active_user(user_id)
            if isinstance(user, ServiceResult):
                return user
            with self.transaction():
                record = self.desired_months.submit(user_id, months)
            return ServiceResult.success(record, message="Desired leave months saved")
        except Exception as e:
            return self._handle_exception(e, "submit desired months", user_id)

    def get_desired_months(self, user_id: str) -> ServiceResult[DesiredLeaveMonths]:
        try:
            record = self.desired_months.get_for_user(user_id)
            if record is None:
                return ServiceResult.not_found("DesiredLeaveMonths", user_id)
            return ServiceResult.success(record)
        except Exception as e:
            return self._handle_exception(e, "get desired months", user_id)

    def check_desired_months(
        self,
        user_id: str,
        start_date: date,
        end_date: date,
    ) -> ServiceResult[DesiredMonthsValidationResult]:
        try:
            return ServiceResult.success(
                self.desired_months.validate_against_desired_months(user_id, start_date, end_date)
            )
        except Exception as e:
            return self._handle_exception(e, "check desired months", user_id)

    def list_desired_months(self) -> ServiceResult[List[DesiredLeaveMonths]]:
        try:
            return ServiceResult.success(self.desired_months.list_all())
        except Exception as e:
            return self._handle_exception(e, "list desired months")

    def list_users_without_desired_months(self) -> ServiceResult[List[User]]:
        try:
            return ServiceResult.success(self.desired_months.list_users_without_submission())
        except Exception as e:
            return self._handle_exception(e, "list users without desired months")

    # -------------------------------------------------------------------------
    # Date previews
    # -------------------------------------------------------------------------

    def compute_end_date(self, start: date, working_days: int) -> ServiceResult[date]:
        try:
            return ServiceResult.success(self.calendar.compute_end_date(start, working_days))
        except ValueError as e:
            return ServiceResult.validation_failure(str(e), field="working_days")
        except Exception as e:
            return self._handle_exception(e, "compute end date")

    def compute_resumption_date(self, end_date: date) -> ServiceResult[date]:
        try:
            return ServiceResult.success(self.calendar.compute_resumption_date(end_date))
        except ValueError as e:
            return ServiceResult.validation_failure(str(e), field="end_date")
        except Exception as e:
            return self._handle_exception(e, "compute resumption date")

    def preview(self, start: date, working_days: int) -> ServiceResult[DatePreview]:
        """End date and resumption date of a prospective request."""
        end_result = self.compute_end_date(start, working_days)
        if not end_result:
            return end_result
        resumption_result = self.compute_resumption_date(end_result.data)
        if not resumption_result:
            return resumption_result
        return ServiceResult.success(
            DatePreview(
                start_date=start,
                working_days=working_days,
                end_date=end_result.data,
                resumption_date=resumption_result.data,
            )
        )

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def get_application(self, application_id: str) -> ServiceResult[LeaveApplication]:
        try:
            application = self.application_repository.find_by_id(application_id)
            if application is None:
                return ServiceResult.not_found("LeaveApplication", application_id)
            return ServiceResult.success(application)
        except Exception as e:
            return self._handle_exception(e, "get leave application", application_id)

    def list_applications(
        self,
        filters: Optional[LeaveApplicationFilter] = None,
        page: int = 1,
        page_size: int = 20,
    ) -> ServiceResult[PaginatedResult[LeaveApplication]]:
        filters = filters or LeaveApplicationFilter()
        try:
            result = self.application_repository.search(
                PaginationParams(page=page, per_page=page_size),
                statuses=filters.status,
                leave_types=filters.leave_type,
                user_id=filters.user_id,
                start_from=filters.start_date_from,
                end_until=filters.end_date_until,
                sort_by=filters.sort_by,
                sort_order=filters.sort_order,
            )
            return ServiceResult.success(result)
        except Exception as e:
            return self._handle_exception(e, "list leave applications")

    def list_pending_for_actor(self, actor_id: str) -> ServiceResult[List[LeaveApplication]]:
        """Applications waiting on the actor's role; empty for roles that approve nothing."""
        try:
            actor = self._active_user(actor_id)
            if isinstance(actor, ServiceResult):
                return actor
            status = pending_status_for(actor.role)
            if status is None:
                return ServiceResult.success([])
            applications = self.application_repository.find_by_status([status])
            return ServiceResult.success(applications, metadata={"status": status.value})
        except Exception as e:
            return self._handle_exception(e, "list pending applications", actor_id)

    def get_balances(
        self,
        user_id: str,
        year: Optional[int] = None,
    ) -> ServiceResult[List[LeaveBalanceSnapshot]]:
        year = year or self.today().year
        try:
            return ServiceResult.success(self.ledger.get_balances(user_id, year), metadata={"year": year})
        except Exception as e:
            return self._handle_exception(e, "get leave balances", user_id)

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _active_user(self, user_id: str):
        """The user, or a failed result when missing or inactive."""
        user = self.user_repository.find_by_id(user_id)
        if user is None:
            return ServiceResult.not_found("User", user_id)
        if not user.is_active:
            return ServiceResult.failure(
                ServiceError(
                    code=ErrorCode.UNAUTHORIZED,
                    message="Inactive users cannot use the leave workflow",
                    details={"user_id": user_id},
                    severity=ErrorSeverity.WARNING,
                )
            )
        return user

    def _validation_failure(self, validation: LeaveValidationResult) -> ServiceResult:
        return ServiceResult.failure(
            ServiceError(
                code=validation.error_code,
                message=validation.message,
                details={"validation": validation.model_dump(mode="json")},
                severity=ErrorSeverity.WARNING,
            )
        )
