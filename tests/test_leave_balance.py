"""Balance ledger movements, invariants and optimistic locking."""

from __future__ import annotations

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from leaveflow.config.database import init_db
from leaveflow.core.exceptions import (
    ConcurrentModificationError,
    EntityAlreadyExistsError,
    InsufficientBalanceError,
    LedgerInvariantError,
    ValidationError,
)
from leaveflow.models import LeaveBalance, LeaveType, UserRole
from leaveflow.services.leave.leave_balance_service import LeaveBalanceService
from tests.conftest import YEAR, get_balance_row, make_balance, make_user


@pytest.fixture
def ledger(db):
    return LeaveBalanceService(db)


@pytest.fixture
def user(db):
    user = make_user(db)
    make_balance(db, user, LeaveType.ANNUAL, allocated=30)
    return user


def assert_consistent(balance: LeaveBalance):
    assert balance.allocated_days == balance.used_days + balance.pending_days + balance.available_days


class TestMovements:
    def test_reserve_moves_available_to_pending(self, db, ledger, user):
        ledger.reserve(user.id, LeaveType.ANNUAL, YEAR, 5)
        db.commit()

        row = get_balance_row(db, user)
        assert (row.allocated_days, row.used_days, row.pending_days, row.available_days) == (30, 0, 5, 25)
        assert_consistent(row)

    def test_commit_moves_pending_to_used(self, db, ledger, user):
        ledger.reserve(user.id, LeaveType.ANNUAL, YEAR, 5)
        ledger.commit(user.id, LeaveType.ANNUAL, YEAR, 5)
        db.commit()

        row = get_balance_row(db, user)
        assert (row.allocated_days, row.used_days, row.pending_days, row.available_days) == (30, 5, 0, 25)
        assert_consistent(row)

    def test_release_returns_pending_to_available(self, db, ledger, user):
        ledger.reserve(user.id, LeaveType.ANNUAL, YEAR, 5)
        ledger.release(user.id, LeaveType.ANNUAL, YEAR, 5)
        db.commit()

        row = get_balance_row(db, user)
        assert (row.used_days, row.pending_days, row.available_days) == (0, 0, 30)

    def test_invariant_holds_after_every_movement(self, db, ledger, user):
        steps = [
            (ledger.reserve, 4),
            (ledger.reserve, 6),
            (ledger.commit, 4),
            (ledger.release, 6),
            (ledger.reserve, 20),
            (ledger.commit, 20),
        ]
        for movement, days in steps:
            balance = movement(user.id, LeaveType.ANNUAL, YEAR, days)
            assert_consistent(balance)
        assert (balance.used_days, balance.pending_days, balance.available_days) == (24, 0, 6)

    def test_reserve_beyond_available_fails_and_leaves_row_untouched(self, db, ledger, user):
        with pytest.raises(InsufficientBalanceError) as exc:
            ledger.reserve(user.id, LeaveType.ANNUAL, YEAR, 31)
        assert exc.value.details == {"required_days": 31, "available_days": 30}

        row = get_balance_row(db, user)
        assert (row.pending_days, row.available_days) == (0, 30)

    def test_reserve_without_allocation_is_insufficient(self, ledger, user):
        with pytest.raises(InsufficientBalanceError):
            ledger.reserve(user.id, LeaveType.CASUAL, YEAR, 1)

    def test_commit_more_than_pending_is_an_invariant_error(self, ledger, user):
        ledger.reserve(user.id, LeaveType.ANNUAL, YEAR, 2)
        with pytest.raises(LedgerInvariantError):
            ledger.commit(user.id, LeaveType.ANNUAL, YEAR, 3)

    @pytest.mark.parametrize("days", [0, -1])
    def test_non_positive_amounts_are_rejected(self, ledger, user, days):
        with pytest.raises(LedgerInvariantError):
            ledger.reserve(user.id, LeaveType.ANNUAL, YEAR, days)


class TestAllocation:
    def test_allocate_uses_leave_type_allotment(self, db, ledger):
        user = make_user(db)
        balance = ledger.allocate(user.id, LeaveType.ANNUAL, YEAR)
        assert (balance.allocated_days, balance.available_days) == (30, 30)

    def test_allocate_twice_fails(self, ledger, user):
        with pytest.raises(EntityAlreadyExistsError):
            ledger.allocate(user.id, LeaveType.ANNUAL, YEAR)

    def test_allocate_year_skips_study_and_existing_rows(self, db, ledger, user):
        created = ledger.allocate_year(user.id, YEAR)
        assert sorted(b.leave_type.value for b in created) == ["casual", "maternity", "paternity", "sick"]

    def test_sick_leave_can_be_topped_up(self, db, ledger, user):
        make_balance(db, user, LeaveType.SICK, allocated=10)
        ledger.reserve(user.id, LeaveType.SICK, YEAR, 10)
        balance = ledger.top_up(user.id, LeaveType.SICK, YEAR, 5)
        assert (balance.allocated_days, balance.pending_days, balance.available_days) == (15, 10, 5)
        assert_consistent(balance)

    def test_annual_leave_cannot_be_topped_up(self, ledger, user):
        with pytest.raises(ValidationError):
            ledger.top_up(user.id, LeaveType.ANNUAL, YEAR, 5)

    def test_get_balance_defaults_to_zero(self, ledger, user):
        snapshot = ledger.get_balance(user.id, LeaveType.MATERNITY, YEAR)
        assert snapshot.available_days == 0
        assert snapshot.allocated_days == 0


class TestConcurrentReservations:
    """Two sessions racing on the same balance row; only one may win."""

    @pytest.fixture
    def sessions(self, tmp_path):
        engine = create_engine(f"sqlite:///{tmp_path / 'race.db'}")
        init_db(engine)
        factory = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
        first, second = factory(), factory()
        yield first, second
        first.close()
        second.close()
        engine.dispose()

    def test_losing_reservation_raises_concurrent_modification(self, sessions):
        first, second = sessions
        user = make_user(first, role=UserRole.STAFF)
        make_balance(first, user, LeaveType.ANNUAL, allocated=5)

        # Both sessions have read the row at version 1
        stale = second.query(LeaveBalance).filter_by(user_id=user.id).one()
        assert stale.available_days == 5

        LeaveBalanceService(first).reserve(user.id, LeaveType.ANNUAL, YEAR, 5)
        first.commit()

        with pytest.raises(ConcurrentModificationError):
            LeaveBalanceService(second).reserve(user.id, LeaveType.ANNUAL, YEAR, 5)
        second.rollback()

        row = first.query(LeaveBalance).filter_by(user_id=user.id).one()
        first.refresh(row)
        assert (row.pending_days, row.available_days) == (5, 0)
        assert_consistent(row)
