"""
Leave balance ledger.

Moves days between the available, pending and used buckets of a
(user, leave type, year) row:

    reserve:  available -> pending   (on submission)
    commit:   pending   -> used      (on final approval)
    release:  pending   -> available (on rejection)

``allocated == used + pending + available`` holds after every movement.
Methods raise and never commit; the caller owns the transaction. The
row's version counter turns a lost race into ConcurrentModificationError
at flush time.
"""

from typing import List, Optional

from sqlalchemy.orm import Session

from leaveflow.core.constants import LEDGER_EXEMPT_LEAVE_TYPES
from leaveflow.core.exceptions import (
    EntityAlreadyExistsError,
    InsufficientBalanceError,
    LedgerInvariantError,
    ValidationError,
)
from leaveflow.models.base import LeaveType
from leaveflow.models.leave.leave_balance import LeaveBalance
from leaveflow.repositories.leave.leave_balance_repository import LeaveBalanceRepository
from leaveflow.repositories.leave.leave_type_repository import LeaveTypeRepository
from leaveflow.schemas.leave.leave_balance import LeaveBalanceSnapshot
from leaveflow.services.base.base_service import BaseService


class LeaveBalanceService(BaseService):
    """Ledger operations on LeaveBalance rows."""

    def __init__(self, db_session: Session):
        super().__init__(db_session)
        self.balance_repository = LeaveBalanceRepository(db_session)
        self.leave_type_repository = LeaveTypeRepository(db_session)

    @staticmethod
    def is_tracked(leave_type: LeaveType) -> bool:
        """Whether the ledger keeps a balance for this leave type."""
        return leave_type not in LEDGER_EXEMPT_LEAVE_TYPES

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def get_balance(self, user_id: str, leave_type: LeaveType, year: int) -> LeaveBalanceSnapshot:
        """Snapshot of a balance row; all zeros when nothing was allocated."""
        balance = self.balance_repository.find_balance(user_id, leave_type, year)
        if balance is None:
            return LeaveBalanceSnapshot.empty(user_id, leave_type, year)
        return LeaveBalanceSnapshot.model_validate(balance)

    def get_balances(self, user_id: str, year: int) -> List[LeaveBalanceSnapshot]:
        return [
            LeaveBalanceSnapshot.model_validate(balance)
            for balance in self.balance_repository.find_for_user(user_id, year)
        ]

    # -------------------------------------------------------------------------
    # Allocation
    # -------------------------------------------------------------------------

    def allocate(
        self,
        user_id: str,
        leave_type: LeaveType,
        year: int,
        days: Optional[int] = None,
    ) -> LeaveBalance:
        """
        Create the yearly allocation for one leave type.

        Args:
            days: Days to allocate (default: the leave type's annual_days)

        Raises:
            EntityAlreadyExistsError: If the row already exists
            LedgerInvariantError: If days is negative
        """
        if days is None:
            days = self.leave_type_repository.get_by_type(leave_type).annual_days
        self._require_non_negative(days, "allocate")

        existing = self.balance_repository.find_balance(user_id, leave_type, year)
        if existing is not None:
            raise EntityAlreadyExistsError(
                f"{leave_type.value} balance for {year} already allocated",
                details={"user_id": user_id, "leave_type": leave_type.value, "year": year},
            )

        balance = self.balance_repository.create_balance(user_id, leave_type, year, days)
        self._log_movement("allocate", balance, days)
        return balance

    def allocate_year(self, user_id: str, year: int) -> List[LeaveBalance]:
        """Allocate every tracked leave type not yet allocated for the year."""
        created = []
        for config in self.leave_type_repository.list_all():
            if not self.is_tracked(config.leave_type):
                continue
            if self.balance_repository.find_balance(user_id, config.leave_type, year) is None:
                created.append(self.allocate(user_id, config.leave_type, year, config.annual_days))
        return created

    def top_up(self, user_id: str, leave_type: LeaveType, year: int, days: int) -> LeaveBalance:
        """
        Add days to an existing allocation outside the yearly cycle.

        Raises:
            ValidationError: If the leave type is not reapplicable
        """
        config = self.leave_type_repository.get_by_type(leave_type)
        if not config.can_reapply:
            raise ValidationError(f"{leave_type.value} leave balance cannot be topped up")
        self._require_positive(days, "top up")

        balance = self.balance_repository.find_balance(user_id, leave_type, year)
        if balance is None:
            return self.allocate(user_id, leave_type, year, days)

        balance.allocated_days += days
        balance.available_days += days
        self._finish(balance, "top_up", days)
        return balance

    # -------------------------------------------------------------------------
    # Movements
    # -------------------------------------------------------------------------

    def reserve(self, user_id: str, leave_type: LeaveType, year: int, days: int) -> LeaveBalance:
        """
        Hold days against the balance while an application is pending.

        Raises:
            InsufficientBalanceError: If days exceed the available balance
        """
        self._require_positive(days, "reserve")
        balance = self.balance_repository.find_balance(user_id, leave_type, year)
        available = balance.available_days if balance is not None else 0
        if balance is None or days > available:
            raise InsufficientBalanceError(leave_type.value, days, available)

        balance.available_days -= days
        balance.pending_days += days
        self._finish(balance, "reserve", days)
        return balance

    def commit(self, user_id: str, leave_type: LeaveType, year: int, days: int) -> LeaveBalance:
        """Convert a reservation into used days."""
        balance = self._reserved_balance(user_id, leave_type, year, days, "commit")
        balance.pending_days -= days
        balance.used_days += days
        self._finish(balance, "commit", days)
        return balance

    def release(self, user_id: str, leave_type: LeaveType, year: int, days: int) -> LeaveBalance:
        """Return a reservation to the available balance."""
        balance = self._reserved_balance(user_id, leave_type, year, days, "release")
        balance.pending_days -= days
        balance.available_days += days
        self._finish(balance, "release", days)
        return balance

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _reserved_balance(
        self,
        user_id: str,
        leave_type: LeaveType,
        year: int,
        days: int,
        movement: str,
    ) -> LeaveBalance:
        self._require_positive(days, movement)
        balance = self.balance_repository.find_balance(user_id, leave_type, year)
        if balance is None:
            raise LedgerInvariantError(
                f"Cannot {movement}: no {leave_type.value} balance for {year}",
                details={"user_id": user_id, "leave_type": leave_type.value, "year": year},
            )
        if days > balance.pending_days:
            raise LedgerInvariantError(
                f"Cannot {movement} {days} day(s): only {balance.pending_days} pending",
                details={"requested_days": days, "pending_days": balance.pending_days},
            )
        return balance

    def _finish(self, balance: LeaveBalance, movement: str, days: int) -> None:
        if not balance.is_consistent or min(
            balance.allocated_days, balance.used_days, balance.pending_days, balance.available_days
        ) < 0:
            raise LedgerInvariantError(
                f"Ledger invariant broken by {movement}",
                details={
                    "allocated_days": balance.allocated_days,
                    "used_days": balance.used_days,
                    "pending_days": balance.pending_days,
                    "available_days": balance.available_days,
                },
            )
        self.balance_repository.flush()
        self._log_movement(movement, balance, days)

    def _log_movement(self, movement: str, balance: LeaveBalance, days: int) -> None:
        self._logger.info(
            f"Ledger {movement}: {days} day(s) {balance.leave_type.value}/{balance.year} "
            f"-> allocated={balance.allocated_days} used={balance.used_days} "
            f"pending={balance.pending_days} available={balance.available_days}",
            extra={"user_id": balance.user_id, "leave_type": balance.leave_type.value},
        )

    @staticmethod
    def _require_positive(days: int, movement: str) -> None:
        if days <= 0:
            raise LedgerInvariantError(
                f"Cannot {movement} {days} day(s): amount must be positive",
                details={"days": days},
            )

    @staticmethod
    def _require_non_negative(days: int, movement: str) -> None:
        if days < 0:
            raise LedgerInvariantError(
                f"Cannot {movement} {days} day(s): amount must not be negative",
                details={"days": days},
            )
