"""
Desired leave months model.

Each user records exactly once the two calendar months in which all of
their annual leave must fall. The row is locked on creation.
"""

from datetime import datetime
from typing import TYPE_CHECKING, List

from sqlalchemy import JSON, Boolean, DateTime, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from leaveflow.models.base import TimestampModel

if TYPE_CHECKING:
    from leaveflow.models.user.user import User

__all__ = ["DesiredLeaveMonths"]


class DesiredLeaveMonths(TimestampModel):
    """One-time, immutable choice of two preferred months."""

    __tablename__ = "desired_leave_months"

    user_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        unique=True
    )
    preferred_months: Mapped[List[int]] = mapped_column(
        JSON,
        nullable=False,
        comment="Two distinct month numbers (1-12), ascending"
    )
    submitted_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    is_locked: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    user: Mapped["User"] = relationship("User", lazy="select")

    def __repr__(self) -> str:
        return f"<DesiredLeaveMonths(user_id={self.user_id}, months={self.preferred_months})>"
