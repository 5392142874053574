"""Submission and approval workflow through the application service."""

from __future__ import annotations

import re
from datetime import date

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from leaveflow.config.database import init_db
from leaveflow.core.exceptions import ErrorCode, InvalidTransitionError, UnauthorizedActionError
from leaveflow.models import LeaveApplication, LeaveStatus, LeaveType, UserRole
from leaveflow.schemas.leave import LeaveApplicationRequest
from leaveflow.services.leave.leave_application_service import LeaveApplicationService
from leaveflow.services.leave.workflow import (
    WorkflowAction,
    initial_status_for,
    pending_status_for,
    resolve_transition,
)
from tests.conftest import TODAY, get_balance_row, make_balance, make_desired_months, make_user


def annual_request(working_days: int = 5, start: date = date(2026, 3, 2)) -> LeaveApplicationRequest:
    return LeaveApplicationRequest(
        leave_type=LeaveType.ANNUAL,
        start_date=start,
        working_days=working_days,
        reason="Family holiday",
    )


def ledger_state(db, user, leave_type=LeaveType.ANNUAL):
    row = get_balance_row(db, user, leave_type)
    return row.used_days, row.pending_days, row.available_days


class TestTransitionTable:
    @pytest.mark.parametrize(
        "role,status",
        [
            (UserRole.STAFF, LeaveStatus.PENDING_DIRECTOR),
            (UserRole.HR, LeaveStatus.PENDING_DIRECTOR),
            (UserRole.ADMIN, LeaveStatus.PENDING_DIRECTOR),
            (UserRole.DIRECTOR, LeaveStatus.PENDING_HR),
        ],
    )
    def test_initial_status_by_role(self, role, status):
        assert initial_status_for(role) == status

    def test_pending_queue_by_role(self):
        assert pending_status_for(UserRole.DIRECTOR) == LeaveStatus.PENDING_DIRECTOR
        assert pending_status_for(UserRole.ADMIN) == LeaveStatus.PENDING_HR
        assert pending_status_for(UserRole.STAFF) is None

    @pytest.mark.parametrize("status", [LeaveStatus.APPROVED, LeaveStatus.REJECTED, LeaveStatus.DRAFT])
    def test_terminal_and_draft_statuses_accept_nothing(self, status):
        with pytest.raises(InvalidTransitionError):
            resolve_transition(status, WorkflowAction.APPROVE, UserRole.HR)

    def test_director_cannot_approve_hr_stage(self):
        with pytest.raises(UnauthorizedActionError):
            resolve_transition(LeaveStatus.PENDING_HR, WorkflowAction.APPROVE, UserRole.DIRECTOR)

    def test_rejections_require_comments(self):
        transition = resolve_transition(LeaveStatus.PENDING_DIRECTOR, WorkflowAction.REJECT, UserRole.DIRECTOR)
        assert transition.requires_comment
        assert transition.target == LeaveStatus.REJECTED


class TestSubmission:
    def test_staff_submission_reserves_balance(self, db, service, staff):
        result = service.submit_application(staff.id, annual_request())

        assert result.is_success, result.error
        application = result.data
        assert application.status == LeaveStatus.PENDING_DIRECTOR
        assert application.end_date == date(2026, 3, 6)
        assert application.submitted_at is not None
        assert re.fullmatch(r"LV-\d{4}-00001", application.application_number)
        assert ledger_state(db, staff) == (0, 5, 25)

    def test_application_numbers_increase(self, service, staff):
        first = service.submit_application(staff.id, annual_request(2)).data
        second = service.submit_application(staff.id, annual_request(2, start=date(2026, 3, 9))).data
        assert first.application_number.endswith("00001")
        assert second.application_number.endswith("00002")

    def test_director_starts_at_hr_stage(self, db, service):
        director = make_user(db, role=UserRole.DIRECTOR)
        make_balance(db, director, LeaveType.ANNUAL)
        make_desired_months(db, director, [3, 7])

        result = service.submit_application(director.id, annual_request())

        assert result.data.status == LeaveStatus.PENDING_HR
        assert ledger_state(db, director) == (0, 5, 25)

    def test_insufficient_balance_writes_nothing(self, db, service):
        user = make_user(db)
        make_balance(db, user, LeaveType.ANNUAL, allocated=5)
        make_desired_months(db, user, [3, 4])

        result = service.submit_application(user.id, annual_request(10))

        assert not result.is_success
        assert result.error.code == ErrorCode.INSUFFICIENT_BALANCE
        assert result.error.details["validation"]["checks"]["sufficient_balance"]["valid"] is False
        assert db.query(LeaveApplication).count() == 0
        assert ledger_state(db, user) == (0, 0, 5)

    def test_understated_working_days_are_rejected(self, db, service, staff):
        request = LeaveApplicationRequest(
            leave_type=LeaveType.ANNUAL,
            start_date=date(2026, 3, 2),
            end_date=date(2026, 3, 31),
            working_days=1,
            reason="Family holiday",
        )

        result = service.submit_application(staff.id, request)

        assert result.error.code == ErrorCode.INVALID_DATE_RANGE
        assert db.query(LeaveApplication).count() == 0
        assert ledger_state(db, staff) == (0, 0, 30)

    def test_end_date_reserves_counted_working_days(self, db, service, staff):
        request = LeaveApplicationRequest(
            leave_type=LeaveType.ANNUAL,
            start_date=date(2026, 3, 2),
            end_date=date(2026, 3, 31),
            reason="Family holiday",
        )

        result = service.submit_application(staff.id, request)

        assert result.is_success, result.error
        assert result.data.working_days == 22
        assert ledger_state(db, staff) == (0, 22, 8)

    def test_oversized_working_days_fail_validation(self, db, service, staff):
        request = LeaveApplicationRequest(
            leave_type=LeaveType.CASUAL, start_date=date(2026, 3, 2), working_days=5000, reason="Moving house"
        )

        result = service.submit_application(staff.id, request)

        assert result.error.code == ErrorCode.INVALID_DATE_RANGE
        assert result.error.details["validation"]["checks"]["date_range"]["valid"] is False
        assert db.query(LeaveApplication).count() == 0

    def test_study_leave_skips_ledger(self, db, service):
        user = make_user(db)
        request = LeaveApplicationRequest(
            leave_type=LeaveType.STUDY,
            start_date=date(2025, 1, 1),
            study_program="msc",
            reason="MSc in Public Health",
        )

        result = service.submit_application(user.id, request)

        assert result.is_success
        assert result.data.end_date == date(2026, 12, 31)
        assert result.data.study_program.value == "msc"
        assert service.get_balances(user.id, 2025).data == []

    def test_unknown_user(self, service):
        result = service.submit_application("missing", annual_request())
        assert result.error.code == ErrorCode.NOT_FOUND

    def test_inactive_user(self, db, service):
        user = make_user(db, is_active=False)
        result = service.submit_application(user.id, annual_request())
        assert result.error.code == ErrorCode.UNAUTHORIZED

    def test_warnings_are_returned(self, db, service):
        user = make_user(db)
        make_balance(db, user, LeaveType.CASUAL, allocated=7)
        request = LeaveApplicationRequest(
            leave_type=LeaveType.CASUAL, start_date=date(2026, 3, 2), working_days=6, reason="Moving house"
        )
        result = service.submit_application(user.id, request)
        assert result.metadata["warnings"]


class TestApproval:
    @pytest.fixture
    def application(self, service, staff):
        return service.submit_application(staff.id, annual_request()).data

    def test_full_approval_commits_exactly_working_days(self, db, service, staff, director, hr, application):
        first = service.approve(application.id, director.id, "Enjoy")
        assert first.data.status == LeaveStatus.PENDING_HR
        assert first.data.director_approved_by == director.id
        assert first.data.director_comments == "Enjoy"
        assert ledger_state(db, staff) == (0, 5, 25)

        second = service.approve(application.id, hr.id)
        assert second.data.status == LeaveStatus.APPROVED
        assert second.data.hr_approved_by == hr.id
        assert second.data.hr_approved_at is not None
        assert second.data.hr_comments is None
        assert ledger_state(db, staff) == (5, 0, 25)

    def test_double_approval_is_an_error_not_a_double_commit(self, db, service, staff, director, hr, application):
        service.approve(application.id, director.id)
        service.approve(application.id, hr.id)

        again = service.approve(application.id, hr.id)

        assert again.error.code == ErrorCode.INVALID_TRANSITION
        assert ledger_state(db, staff) == (5, 0, 25)

    def test_admin_can_approve_hr_stage(self, service, director, admin, application):
        service.approve(application.id, director.id)
        assert service.approve(application.id, admin.id).data.status == LeaveStatus.APPROVED

    @pytest.mark.parametrize("role", [UserRole.STAFF, UserRole.HR, UserRole.ADMIN])
    def test_only_directors_act_at_director_stage(self, db, service, application, role):
        actor = make_user(db, role=role)
        result = service.approve(application.id, actor.id)
        assert result.error.code == ErrorCode.UNAUTHORIZED
        db.refresh(application)
        assert application.status == LeaveStatus.PENDING_DIRECTOR

    def test_director_cannot_act_at_hr_stage(self, service, director, application):
        service.approve(application.id, director.id)
        assert service.approve(application.id, director.id).error.code == ErrorCode.UNAUTHORIZED

    def test_inactive_director_is_unauthorized(self, db, service, application):
        director = make_user(db, role=UserRole.DIRECTOR, is_active=False)
        assert service.approve(application.id, director.id).error.code == ErrorCode.UNAUTHORIZED

    def test_unknown_application(self, service, director):
        assert service.approve("missing", director.id).error.code == ErrorCode.NOT_FOUND


class TestRejection:
    @pytest.fixture
    def application(self, service, staff):
        return service.submit_application(staff.id, annual_request()).data

    def test_director_rejection_releases_balance(self, db, service, staff, director, application):
        result = service.reject(application.id, director.id, "Team is short-staffed")

        assert result.data.status == LeaveStatus.REJECTED
        assert result.data.director_approved_by == director.id
        assert result.data.director_comments == "Team is short-staffed"
        assert ledger_state(db, staff) == (0, 0, 30)

    def test_hr_rejection_releases_balance(self, db, service, staff, director, hr, application):
        service.approve(application.id, director.id)
        result = service.reject(application.id, hr.id, "Dates clash with audit")

        assert result.data.status == LeaveStatus.REJECTED
        assert result.data.hr_comments == "Dates clash with audit"
        assert ledger_state(db, staff) == (0, 0, 30)

    @pytest.mark.parametrize("comments", ["", "   ", None])
    def test_rejection_requires_comment(self, db, service, staff, director, application, comments):
        result = service.reject(application.id, director.id, comments)

        assert result.error.code == ErrorCode.MISSING_REQUIRED_FIELD
        assert result.error.field == "comments"
        db.refresh(application)
        assert application.status == LeaveStatus.PENDING_DIRECTOR
        assert application.director_approved_by is None
        assert ledger_state(db, staff) == (0, 5, 25)

    def test_rejected_application_is_final(self, service, director, hr, application):
        service.reject(application.id, director.id, "No")
        assert service.approve(application.id, director.id).error.code == ErrorCode.INVALID_TRANSITION
        assert service.reject(application.id, hr.id, "No").error.code == ErrorCode.INVALID_TRANSITION

    def test_rejected_dates_can_be_requested_again(self, service, staff, director, application):
        service.reject(application.id, director.id, "Resubmit with fewer days")
        assert service.submit_application(staff.id, annual_request(3)).is_success


class TestStudyLeaveWorkflow:
    def test_study_leave_approval_never_touches_ledger(self, db, service, director, hr):
        user = make_user(db)
        request = LeaveApplicationRequest(
            leave_type=LeaveType.STUDY, start_date=date(2026, 9, 1), study_program="phd", reason="Doctorate"
        )
        application = service.submit_application(user.id, request).data

        service.approve(application.id, director.id)
        result = service.approve(application.id, hr.id)

        assert result.data.status == LeaveStatus.APPROVED
        assert result.data.end_date == date(2030, 8, 31)
        assert service.get_balances(user.id, 2026).data == []


class TestQueries:
    def test_pending_queue_per_role(self, db, service, staff, director, hr):
        other_director = make_user(db, role=UserRole.DIRECTOR)
        make_balance(db, other_director, LeaveType.ANNUAL)
        make_desired_months(db, other_director, [3, 7])

        staff_app = service.submit_application(staff.id, annual_request()).data
        director_app = service.submit_application(other_director.id, annual_request()).data

        assert [a.id for a in service.list_pending_for_actor(director.id).data] == [staff_app.id]
        assert [a.id for a in service.list_pending_for_actor(hr.id).data] == [director_app.id]
        assert service.list_pending_for_actor(staff.id).data == []

    def test_get_application(self, service, staff):
        application = service.submit_application(staff.id, annual_request()).data
        assert service.get_application(application.id).data.id == application.id
        assert service.get_application("missing").error.code == ErrorCode.NOT_FOUND

    def test_get_balances_defaults_to_current_year(self, service, staff):
        result = service.get_balances(staff.id)
        assert result.metadata["year"] == TODAY.year
        assert sorted(b.leave_type.value for b in result.data) == ["annual", "casual", "sick"]

    def test_preview(self, service):
        preview = service.preview(date(2026, 3, 2), 5).data
        assert (preview.end_date, preview.resumption_date) == (date(2026, 3, 6), date(2026, 3, 9))

    def test_compute_end_date_rejects_zero_days(self, service):
        result = service.compute_end_date(date(2026, 3, 2), 0)
        assert result.error.code == ErrorCode.VALIDATION_ERROR

    def test_compute_resumption_date(self, service):
        assert service.compute_resumption_date(date(2026, 3, 6)).data == date(2026, 3, 9)

    def test_validate_application_is_a_dry_run(self, db, service, staff):
        result = service.validate_application(staff.id, annual_request())
        assert result.is_success and result.data.is_valid
        assert db.query(LeaveApplication).count() == 0
        assert ledger_state(db, staff) == (0, 0, 30)


class TestDesiredMonthsThroughService:
    def test_second_submission_fails(self, db, service):
        user = make_user(db)
        assert service.submit_desired_months(user.id, [7, 3]).data.preferred_months == [3, 7]

        again = service.submit_desired_months(user.id, [1, 2])

        assert again.error.code == ErrorCode.ALREADY_SUBMITTED_DESIRED_MONTHS
        assert service.get_desired_months(user.id).data.preferred_months == [3, 7]

    def test_invalid_selection(self, db, service):
        user = make_user(db)
        assert service.submit_desired_months(user.id, [3, 3]).error.code == ErrorCode.INVALID_MONTH_SELECTION
        assert service.get_desired_months(user.id).error.code == ErrorCode.NOT_FOUND

    def test_desired_months_scenarios(self, db, service):
        user = make_user(db)
        service.submit_desired_months(user.id, [3, 7])
        assert not service.check_desired_months(user.id, date(2026, 3, 20), date(2026, 4, 2)).data.is_valid
        assert service.check_desired_months(user.id, date(2026, 3, 5), date(2026, 3, 20)).data.is_valid


class TestConcurrentApprovals:
    def test_second_approver_loses_without_double_commit(self, tmp_path):
        engine = create_engine(f"sqlite:///{tmp_path / 'approvals.db'}")
        init_db(engine)
        factory = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
        first, second = factory(), factory()
        try:
            staff = make_user(first)
            make_balance(first, staff, LeaveType.ANNUAL)
            make_desired_months(first, staff, [3, 7])
            director = make_user(first, role=UserRole.DIRECTOR)
            hr = make_user(first, role=UserRole.HR)

            first_service = LeaveApplicationService(first, today=lambda: TODAY)
            application = first_service.submit_application(staff.id, annual_request()).data
            first_service.approve(application.id, director.id)

            # Second approver loaded the application before the first one acted
            stale = second.get(LeaveApplication, application.id)
            assert stale.status == LeaveStatus.PENDING_HR

            assert first_service.approve(application.id, hr.id).data.status == LeaveStatus.APPROVED

            second_service = LeaveApplicationService(second, today=lambda: TODAY)
            lost = second_service.approve(application.id, hr.id)

            assert lost.error.code == ErrorCode.CONCURRENT_MODIFICATION
            assert ledger_state(first, staff) == (5, 0, 25)
        finally:
            first.close()
            second.close()
            engine.dispose()
