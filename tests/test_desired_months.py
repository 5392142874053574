"""One-time desired months lock and the months check for annual leave."""

from __future__ import annotations

from datetime import date

import pytest

from leaveflow.core.exceptions import (
    AlreadySubmittedDesiredMonthsError,
    ErrorCode,
    InvalidMonthSelectionError,
)
from leaveflow.models import DesiredLeaveMonths
from leaveflow.services.leave.desired_months_service import DesiredMonthsService, normalize_months
from tests.conftest import make_user


@pytest.fixture
def desired(db):
    return DesiredMonthsService(db)


class TestNormalizeMonths:
    def test_sorts_months(self):
        assert normalize_months([7, 3]) == [3, 7]

    @pytest.mark.parametrize(
        "months",
        [[3, 3], [3], [], [1, 2, 3], [0, 5], [5, 13], ["3", 7], [True, 5], [2.5, 3]],
    )
    def test_rejects_invalid_selections(self, months):
        with pytest.raises(InvalidMonthSelectionError):
            normalize_months(months)


class TestSubmit:
    def test_stores_sorted_and_locked(self, db, desired):
        user = make_user(db)
        record = desired.submit(user.id, [7, 3])
        db.commit()

        stored = db.query(DesiredLeaveMonths).filter_by(user_id=user.id).one()
        assert stored.id == record.id
        assert stored.preferred_months == [3, 7]
        assert stored.is_locked is True

    def test_duplicate_month_is_not_collapsed(self, db, desired):
        user = make_user(db)
        with pytest.raises(InvalidMonthSelectionError):
            desired.submit(user.id, [3, 3])
        assert desired.get_for_user(user.id) is None

    @pytest.mark.parametrize("second", [[3, 7], [1, 2], [4, 4]])
    def test_second_submission_always_fails(self, db, desired, second):
        user = make_user(db)
        desired.submit(user.id, [3, 7])
        db.commit()

        with pytest.raises(AlreadySubmittedDesiredMonthsError) as exc:
            desired.submit(user.id, second)
        assert exc.value.error_code == ErrorCode.ALREADY_SUBMITTED_DESIRED_MONTHS
        assert desired.get_for_user(user.id).preferred_months == [3, 7]


class TestValidateAgainstDesiredMonths:
    @pytest.fixture
    def user(self, db, desired):
        user = make_user(db)
        desired.submit(user.id, [3, 7])
        db.commit()
        return user

    def test_range_leaking_into_april_is_invalid(self, desired, user):
        result = desired.validate_against_desired_months(user.id, date(2026, 3, 20), date(2026, 4, 2))
        assert result.is_valid is False
        assert result.desired_months == [3, 7]
        assert result.leave_months == [3, 4]
        assert "April" in result.message

    def test_range_inside_march_is_valid(self, desired, user):
        result = desired.validate_against_desired_months(user.id, date(2026, 3, 5), date(2026, 3, 20))
        assert result.is_valid is True
        assert result.leave_months == [3]

    def test_user_without_record_is_invalid(self, db, desired):
        other = make_user(db)
        result = desired.validate_against_desired_months(other.id, date(2026, 3, 5), date(2026, 3, 6))
        assert result.is_valid is False
        assert result.desired_months is None


class TestReports:
    def test_users_without_submission(self, db, desired):
        submitted = make_user(db, name="A Submitted")
        pending = make_user(db, name="B Pending")
        make_user(db, name="C Inactive", is_active=False)
        desired.submit(submitted.id, [1, 12])
        db.commit()

        missing = desired.list_users_without_submission()
        assert [u.id for u in missing] == [pending.id]
        assert [r.user_id for r in desired.list_all()] == [submitted.id]
