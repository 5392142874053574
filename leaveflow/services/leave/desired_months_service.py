"""
Desired leave months lock.

Each user picks exactly two calendar months once; all of their annual
leave must then fall inside those months. The choice can never be
changed.
"""

from datetime import date, datetime, timezone
from typing import Iterable, List, Optional

from sqlalchemy.orm import Session

from leaveflow.core.constants import REQUIRED_DESIRED_MONTHS
from leaveflow.core.exceptions import (
    AlreadySubmittedDesiredMonthsError,
    EntityAlreadyExistsError,
    InvalidMonthSelectionError,
)
from leaveflow.models.leave.desired_leave_months import DesiredLeaveMonths
from leaveflow.models.user.user import User
from leaveflow.repositories.leave.desired_months_repository import DesiredMonthsRepository
from leaveflow.repositories.user.user_repository import UserRepository
from leaveflow.schemas.leave.desired_months import DesiredMonthsValidationResult
from leaveflow.services.base.base_service import BaseService
from leaveflow.services.calendar.calendar_service import months_spanned

MONTH_NAMES = [
    "", "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
]


def normalize_months(months: Iterable[int]) -> List[int]:
    """
    Deduplicate and sort a month selection.

    Raises:
        InvalidMonthSelectionError: Unless exactly two distinct months in 1..12 remain
    """
    try:
        values = list(months)
    except TypeError as e:
        raise InvalidMonthSelectionError("Months must be a list of month numbers") from e

    if any(isinstance(m, bool) or not isinstance(m, int) for m in values):
        raise InvalidMonthSelectionError(
            "Months must be whole numbers between 1 and 12",
            details={"months": [str(m) for m in values]},
        )

    distinct = sorted(set(values))
    if len(distinct) != REQUIRED_DESIRED_MONTHS:
        raise InvalidMonthSelectionError(
            f"Please select exactly {REQUIRED_DESIRED_MONTHS} different months",
            details={"months": values},
        )
    out_of_range = [m for m in distinct if not 1 <= m <= 12]
    if out_of_range:
        raise InvalidMonthSelectionError(
            "Months must be between 1 and 12",
            details={"months": values, "out_of_range": out_of_range},
        )
    return distinct


def format_months(months: Iterable[int]) -> str:
    return " and ".join(MONTH_NAMES[m] for m in months)


class DesiredMonthsService(BaseService):
    """One-time desired months submission and checks against it."""

    def __init__(self, db_session: Session):
        super().__init__(db_session)
        self.repository = DesiredMonthsRepository(db_session)
        self.user_repository = UserRepository(db_session)

    def submit(self, user_id: str, months: Iterable[int]) -> DesiredLeaveMonths:
        """
        Record the user's two desired months.

        Does not commit.

        Raises:
            InvalidMonthSelectionError: Unless exactly two distinct months in 1..12
            AlreadySubmittedDesiredMonthsError: If the user already has a record
        """
        if self.repository.find_for_user(user_id) is not None:
            raise AlreadySubmittedDesiredMonthsError(user_id)

        preferred = normalize_months(months)

        record = DesiredLeaveMonths(
            user_id=user_id,
            preferred_months=preferred,
            submitted_at=datetime.now(timezone.utc),
            is_locked=True,
        )
        try:
            self.repository.add(record)
        except EntityAlreadyExistsError as e:
            # Lost a race against another submission for the same user
            raise AlreadySubmittedDesiredMonthsError(user_id) from e

        self._logger.info(
            f"Desired months locked: {format_months(preferred)}",
            extra={"user_id": user_id},
        )
        return record

    def get_for_user(self, user_id: str) -> Optional[DesiredLeaveMonths]:
        return self.repository.find_for_user(user_id)

    def list_all(self) -> List[DesiredLeaveMonths]:
        return self.repository.list_all()

    def list_users_without_submission(self) -> List[User]:
        return self.user_repository.find_without_desired_months()

    def validate_against_desired_months(
        self,
        user_id: str,
        start_date: date,
        end_date: date,
    ) -> DesiredMonthsValidationResult:
        """
        Check that every month touched by [start_date, end_date] is desired.

        A user without a record never passes.
        """
        leave_months = months_spanned(start_date, end_date)
        record = self.repository.find_for_user(user_id)
        if record is None:
            return DesiredMonthsValidationResult(
                is_valid=False,
                desired_months=None,
                leave_months=leave_months,
                message="You must submit your desired leave months before applying for annual leave",
            )

        desired = sorted(record.preferred_months)
        outside = [m for m in leave_months if m not in desired]
        if outside:
            return DesiredMonthsValidationResult(
                is_valid=False,
                desired_months=desired,
                leave_months=leave_months,
                message=(
                    f"Annual leave must fall within your desired months ({format_months(desired)}); "
                    f"{format_months(outside)} is not one of them"
                ),
            )
        return DesiredMonthsValidationResult(
            is_valid=True,
            desired_months=desired,
            leave_months=leave_months,
            message="Leave falls within your desired months",
        )
