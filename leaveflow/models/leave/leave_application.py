"""
Leave application model.

An application is created directly in a pending status and only ever
moves forward through the approval workflow; rejected applications are
kept as terminal records, never deleted.
"""

from datetime import date, datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import CheckConstraint, Date, DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from leaveflow.models.base import LeaveStatus, LeaveType, StudyProgram, TimestampModel, enum_type

if TYPE_CHECKING:
    from leaveflow.models.user.user import User

__all__ = ["LeaveApplication"]


class LeaveApplication(TimestampModel):
    """
    Leave application with per-stage approval fields.
    """

    __tablename__ = "leave_applications"
    __table_args__ = (
        CheckConstraint("end_date >= start_date", name="ck_leave_application_date_order"),
        CheckConstraint("working_days >= 0", name="ck_leave_application_working_days_non_negative"),
        Index("ix_leave_application_user_status", "user_id", "status"),
        Index("ix_leave_application_dates", "start_date", "end_date"),
        {"comment": "Leave applications and their approval trail"}
    )

    application_number: Mapped[str] = mapped_column(
        String(32),
        nullable=False,
        unique=True,
        comment="Human-readable number, e.g. LV-2026-00042"
    )
    user_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="RESTRICT"),
        nullable=False,
        index=True
    )
    leave_type: Mapped[LeaveType] = mapped_column(
        enum_type(LeaveType, "leave_type_enum"),
        nullable=False
    )
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)
    working_days: Mapped[int] = mapped_column(Integer, nullable=False)
    reason: Mapped[str] = mapped_column(Text, nullable=False)
    study_program: Mapped[Optional[StudyProgram]] = mapped_column(
        enum_type(StudyProgram, "study_program_enum"),
        nullable=True,
        comment="Only set for study leave"
    )
    status: Mapped[LeaveStatus] = mapped_column(
        enum_type(LeaveStatus, "leave_status_enum"),
        nullable=False,
        index=True
    )
    submitted_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    # Director stage
    director_approved_by: Mapped[Optional[str]] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True
    )
    director_approved_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    director_comments: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # HR stage
    hr_approved_by: Mapped[Optional[str]] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True
    )
    hr_approved_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    hr_comments: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

    __mapper_args__ = {"version_id_col": version}

    user: Mapped["User"] = relationship(
        "User",
        back_populates="leave_applications",
        foreign_keys=[user_id],
        lazy="select"
    )

    def __repr__(self) -> str:
        return (
            f"<LeaveApplication(number={self.application_number}, type={self.leave_type.value}, "
            f"status={self.status.value})>"
        )

    @property
    def balance_year(self) -> int:
        """Ledger year the application draws from."""
        return self.start_date.year
