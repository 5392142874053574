"""Shared fixtures: in-memory SQLite database, seeded leave types and factories.

Every test gets a fresh schema. Dates are pinned to ``TODAY`` so notice
periods and balance years do not drift with the wall clock.
"""

from __future__ import annotations

import uuid
from datetime import date, datetime, timezone
from typing import Iterable, Optional

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from leaveflow.models import (
    Base,
    DesiredLeaveMonths,
    LeaveBalance,
    LeaveType,
    PublicHoliday,
    User,
    UserRole,
)
from leaveflow.repositories.leave.leave_type_repository import LeaveTypeRepository
from leaveflow.services.leave.leave_application_service import LeaveApplicationService

# Monday
TODAY = date(2026, 1, 5)
YEAR = TODAY.year


@pytest.fixture
def engine():
    eng = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=eng)
    yield eng
    Base.metadata.drop_all(bind=eng)
    eng.dispose()


@pytest.fixture
def db(engine) -> Session:
    factory = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
    session = factory()
    LeaveTypeRepository(session).seed_defaults()
    session.commit()
    yield session
    session.rollback()
    session.close()


@pytest.fixture
def service(db) -> LeaveApplicationService:
    return LeaveApplicationService(db, today=lambda: TODAY)


# ═════════════════════════════════════════════════════════════════════
# Factories
# ═════════════════════════════════════════════════════════════════════


def make_user(
    db: Session,
    *,
    role: UserRole = UserRole.STAFF,
    is_active: bool = True,
    name: Optional[str] = None,
) -> User:
    suffix = uuid.uuid4().hex[:8]
    user = User(
        email=f"{role.value}-{suffix}@example.org",
        full_name=name or f"{role.value.title()} {suffix}",
        role=role,
        is_active=is_active,
    )
    db.add(user)
    db.commit()
    return user


def make_balance(
    db: Session,
    user: User,
    leave_type: LeaveType = LeaveType.ANNUAL,
    *,
    allocated: int = 30,
    year: int = YEAR,
) -> LeaveBalance:
    balance = LeaveBalance(
        user_id=user.id,
        leave_type=leave_type,
        year=year,
        allocated_days=allocated,
        used_days=0,
        pending_days=0,
        available_days=allocated,
    )
    db.add(balance)
    db.commit()
    return balance


def make_desired_months(db: Session, user: User, months: Iterable[int]) -> DesiredLeaveMonths:
    record = DesiredLeaveMonths(
        user_id=user.id,
        preferred_months=sorted(months),
        submitted_at=datetime.now(timezone.utc),
        is_locked=True,
    )
    db.add(record)
    db.commit()
    return record


def make_holiday(db: Session, day: date, name: str = "Holiday", is_active: bool = True) -> PublicHoliday:
    holiday = PublicHoliday(date=day, name=name, year=day.year, is_active=is_active)
    db.add(holiday)
    db.commit()
    return holiday


def get_balance_row(db: Session, user: User, leave_type: LeaveType = LeaveType.ANNUAL, year: int = YEAR) -> LeaveBalance:
    row = (
        db.query(LeaveBalance)
        .filter_by(user_id=user.id, leave_type=leave_type, year=year)
        .one()
    )
    db.refresh(row)
    return row


@pytest.fixture
def staff(db) -> User:
    user = make_user(db, role=UserRole.STAFF)
    make_balance(db, user, LeaveType.ANNUAL, allocated=30)
    make_balance(db, user, LeaveType.CASUAL, allocated=7)
    make_balance(db, user, LeaveType.SICK, allocated=10)
    make_desired_months(db, user, [3, 7])
    return user


@pytest.fixture
def director(db) -> User:
    return make_user(db, role=UserRole.DIRECTOR)


@pytest.fixture
def hr(db) -> User:
    return make_user(db, role=UserRole.HR)


@pytest.fixture
def admin(db) -> User:
    return make_user(db, role=UserRole.ADMIN)
