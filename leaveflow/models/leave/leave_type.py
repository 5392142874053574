"""
Leave type policy configuration model.

One immutable row per leave type describing the yearly allotment,
notice period and whether the balance may be topped up mid-cycle.
"""

from typing import Optional

from sqlalchemy import Boolean, CheckConstraint, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from leaveflow.models.base import LeaveType, TimestampModel, enum_type

__all__ = ["LeaveTypeConfig"]


class LeaveTypeConfig(TimestampModel):
    """
    Policy for a single leave type.

    Reference data seeded at start-up; the workflow only reads it.
    """

    __tablename__ = "leave_type_configs"
    __table_args__ = (
        CheckConstraint("annual_days >= 0", name="ck_leave_type_annual_days_non_negative"),
        CheckConstraint("min_notice_days >= 0", name="ck_leave_type_notice_non_negative"),
        {"comment": "Leave type policy configuration"}
    )

    leave_type: Mapped[LeaveType] = mapped_column(
        enum_type(LeaveType, "leave_type_enum"),
        nullable=False,
        unique=True,
        comment="Type of leave"
    )
    annual_days: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        comment="Days allotted per year"
    )
    min_notice_days: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        comment="Minimum days between today and leave start"
    )
    can_reapply: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        comment="Whether allocation may be topped up outside the yearly cycle"
    )
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    def __repr__(self) -> str:
        return (
            f"<LeaveTypeConfig(type={self.leave_type.value}, annual_days={self.annual_days}, "
            f"min_notice_days={self.min_notice_days})>"
        )
