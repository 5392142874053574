"""
Leave balance repository.

Row lookup and creation for the balance ledger. Arithmetic on the
balance columns lives in the ledger service.
"""

from typing import List, Optional

from sqlalchemy.orm import Session

from leaveflow.models.base import LeaveType
from leaveflow.models.leave.leave_balance import LeaveBalance
from leaveflow.repositories.base.base_repository import BaseRepository


class LeaveBalanceRepository(BaseRepository[LeaveBalance]):
    """Leave balance rows keyed by (user, leave type, year)."""

    def __init__(self, session: Session):
        super().__init__(LeaveBalance, session)

    def find_balance(
        self,
        user_id: str,
        leave_type: LeaveType,
        year: int,
    ) -> Optional[LeaveBalance]:
        """
        Get the balance row for a user, leave type and year.

        Args:
            user_id: User ID
            leave_type: Leave type
            year: Calendar year

        Returns:
            Leave balance or None
        """
        return (
            self.db.query(LeaveBalance)
            .filter(
                LeaveBalance.user_id == user_id,
                LeaveBalance.leave_type == leave_type,
                LeaveBalance.year == year,
            )
            .first()
        )

    def find_for_user(self, user_id: str, year: Optional[int] = None) -> List[LeaveBalance]:
        """All balance rows of a user, optionally for one year."""
        query = self.db.query(LeaveBalance).filter(LeaveBalance.user_id == user_id)
        if year is not None:
            query = query.filter(LeaveBalance.year == year)
        return query.order_by(LeaveBalance.year, LeaveBalance.leave_type).all()

    def create_balance(
        self,
        user_id: str,
        leave_type: LeaveType,
        year: int,
        allocated_days: int,
    ) -> LeaveBalance:
        """
        Create a fresh allocation with nothing used or pending.

        Raises:
            EntityAlreadyExistsError: If the row already exists
        """
        balance = LeaveBalance(
            user_id=user_id,
            leave_type=leave_type,
            year=year,
            allocated_days=allocated_days,
            used_days=0,
            pending_days=0,
            available_days=allocated_days,
        )
        return self.add(balance)
