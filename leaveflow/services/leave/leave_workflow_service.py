"""
Leave workflow service.

Creates applications and applies approval actions. Each operation runs in
a single transaction together with its ledger movement; on any failure the
transaction is rolled back and nothing changes.
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.orm import Session

from leaveflow.config.settings import settings
from leaveflow.core.exceptions import (
    ConcurrentModificationError,
    EntityAlreadyExistsError,
    EntityNotFoundError,
    ErrorCode,
    UnauthorizedActionError,
    ValidationError,
)
from leaveflow.models.leave.leave_application import LeaveApplication
from leaveflow.models.user.user import User
from leaveflow.repositories.leave.leave_application_repository import LeaveApplicationRepository
from leaveflow.repositories.user.user_repository import UserRepository
from leaveflow.schemas.leave.leave_application import LeaveApplicationRequest
from leaveflow.schemas.leave.leave_validation import LeaveValidationResult
from leaveflow.services.base.base_service import BaseService
from leaveflow.services.leave.leave_balance_service import LeaveBalanceService
from leaveflow.services.leave.workflow import (
    ApprovalStage,
    LedgerEffect,
    Transition,
    WorkflowAction,
    initial_status_for,
    resolve_transition,
)


class LeaveWorkflowService(BaseService):
    """State transitions of leave applications."""

    def __init__(self, db_session: Session):
        super().__init__(db_session)
        self.application_repository = LeaveApplicationRepository(db_session)
        self.user_repository = UserRepository(db_session)
        self.ledger = LeaveBalanceService(db_session)

    def create_application(
        self,
        applicant: User,
        request: LeaveApplicationRequest,
        validation: LeaveValidationResult,
    ) -> LeaveApplication:
        """
        Persist a validated request and reserve its days.

        Raises:
            ValidationError: If the validation result is not a pass
            InsufficientBalanceError: If the balance was consumed since validation
            ConcurrentModificationError: If a concurrent write won the race
        """
        if not validation.is_valid:
            raise ValidationError(
                "Cannot create an application from a failed validation",
                error_code=validation.error_code,
            )

        status = initial_status_for(applicant.role)
        now = datetime.now(timezone.utc)

        with self.transaction():
            if self.ledger.is_tracked(validation.leave_type):
                self.ledger.reserve(
                    applicant.id,
                    validation.leave_type,
                    validation.balance_year,
                    validation.working_days,
                )

            application = LeaveApplication(
                application_number=self.application_repository.next_application_number(
                    now.year, settings.APPLICATION_NUMBER_PREFIX
                ),
                user_id=applicant.id,
                leave_type=validation.leave_type,
                start_date=validation.start_date,
                end_date=validation.end_date,
                working_days=validation.working_days,
                reason=request.reason,
                study_program=validation.study_program,
                status=status,
                submitted_at=now,
            )
            try:
                self.application_repository.add(application)
            except EntityAlreadyExistsError as e:
                # Another submission took the same application number
                raise ConcurrentModificationError("LeaveApplication") from e

        self._logger.info(
            f"Leave application {application.application_number} submitted as {status.value}",
            extra={
                "application_id": application.id,
                "user_id": applicant.id,
                "leave_type": validation.leave_type.value,
            },
        )
        return application

    def apply_action(
        self,
        application_id: str,
        actor_id: str,
        action: WorkflowAction,
        comments: Optional[str] = None,
    ) -> LeaveApplication:
        """
        Approve or reject an application on behalf of an actor.

        Raises:
            EntityNotFoundError: If the application or actor does not exist
            InvalidTransitionError: If the status accepts no such action
            UnauthorizedActionError: If the actor cannot act at this stage
            ValidationError: If a rejection has no comment
            ConcurrentModificationError: If another action won the race
        """
        with self.transaction():
            application = self.application_repository.get_by_id(application_id)
            actor = self._get_actor(actor_id)
            source = application.status
            transition = resolve_transition(source, action, actor.role)

            comment = (comments or "").strip() or None
            if transition.requires_comment and comment is None:
                raise ValidationError(
                    "A comment is required to reject an application",
                    field_errors={"comments": ["Rejection reason is required"]},
                    error_code=ErrorCode.MISSING_REQUIRED_FIELD,
                )

            self._record_decision(application, transition, actor, comment)
            # Flush the status first so a lost race fails before the ledger moves
            self.application_repository.flush()
            self._apply_ledger_effect(application, transition)

        self._logger.info(
            f"Leave application {application.application_number}: "
            f"{source.value} -[{action.value}]-> {application.status.value}",
            extra={"application_id": application.id, "actor_id": actor.id},
        )
        return application

    def _get_actor(self, actor_id: str) -> User:
        actor = self.user_repository.find_by_id(actor_id)
        if actor is None:
            raise EntityNotFoundError("User", actor_id)
        if not actor.is_active:
            raise UnauthorizedActionError("Inactive users cannot act on leave applications", role=actor.role.value)
        return actor

    @staticmethod
    def _record_decision(
        application: LeaveApplication,
        transition: Transition,
        actor: User,
        comment: Optional[str],
    ) -> None:
        now = datetime.now(timezone.utc)
        if transition.stage == ApprovalStage.DIRECTOR:
            application.director_approved_by = actor.id
            application.director_approved_at = now
            application.director_comments = comment
        else:
            application.hr_approved_by = actor.id
            application.hr_approved_at = now
            application.hr_comments = comment
        application.status = transition.target

    def _apply_ledger_effect(self, application: LeaveApplication, transition: Transition) -> None:
        if transition.ledger_effect == LedgerEffect.NONE or not self.ledger.is_tracked(application.leave_type):
            return
        movement = (
            self.ledger.commit if transition.ledger_effect == LedgerEffect.COMMIT else self.ledger.release
        )
        movement(
            application.user_id,
            application.leave_type,
            application.balance_year,
            application.working_days,
        )
