"""
Leave balance ledger model.

Tracks allocated, used, pending and available leave days per user,
leave type and calendar year.
"""

from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, ForeignKey, Index, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from leaveflow.models.base import LeaveType, TimestampModel, enum_type

if TYPE_CHECKING:
    from leaveflow.models.user.user import User

__all__ = ["LeaveBalance"]


class LeaveBalance(TimestampModel):
    """
    Current leave balance for one (user, leave type, year).

    Mutated only through the ledger's reserve / commit / release
    movements. The version column makes concurrent writers on the same
    row fail instead of overwriting each other.
    """

    __tablename__ = "leave_balances"
    __table_args__ = (
        UniqueConstraint(
            "user_id",
            "leave_type",
            "year",
            name="uq_leave_balance_user_type_year"
        ),
        CheckConstraint("allocated_days >= 0", name="ck_leave_balance_allocated_non_negative"),
        CheckConstraint("used_days >= 0", name="ck_leave_balance_used_non_negative"),
        CheckConstraint("pending_days >= 0", name="ck_leave_balance_pending_non_negative"),
        CheckConstraint("available_days >= 0", name="ck_leave_balance_available_non_negative"),
        CheckConstraint(
            "available_days = allocated_days - used_days - pending_days",
            name="ck_leave_balance_equation"
        ),
        Index("ix_leave_balance_user_type", "user_id", "leave_type"),
        {"comment": "Leave balance ledger per user, leave type and year"}
    )

    user_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    leave_type: Mapped[LeaveType] = mapped_column(
        enum_type(LeaveType, "leave_type_enum"),
        nullable=False
    )
    year: Mapped[int] = mapped_column(Integer, nullable=False)

    allocated_days: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    used_days: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    pending_days: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    available_days: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

    __mapper_args__ = {"version_id_col": version}

    user: Mapped["User"] = relationship("User", lazy="select")

    def __repr__(self) -> str:
        return (
            f"<LeaveBalance(user_id={self.user_id}, type={self.leave_type.value}, year={self.year}, "
            f"allocated={self.allocated_days}, used={self.used_days}, pending={self.pending_days}, "
            f"available={self.available_days})>"
        )

    @property
    def is_consistent(self) -> bool:
        """Check allocated = used + pending + available."""
        return self.allocated_days == self.used_days + self.pending_days + self.available_days
