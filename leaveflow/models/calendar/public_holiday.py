"""
Public holiday model.

Read-only input to the calendar service; queried by year.
"""

from datetime import date as Date
from typing import Optional

from sqlalchemy import Boolean, Date as SQLDate, Index, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from leaveflow.models.base import TimestampModel

__all__ = ["PublicHoliday"]


class PublicHoliday(TimestampModel):
    """A single public holiday."""

    __tablename__ = "public_holidays"
    __table_args__ = (
        UniqueConstraint("date", "name", name="uq_public_holiday_date_name"),
        Index("ix_public_holiday_year_active", "year", "is_active"),
        {"comment": "Public holiday calendar"}
    )

    date: Mapped[Date] = mapped_column(SQLDate, nullable=False)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    year: Mapped[int] = mapped_column(Integer, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    source: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)

    def __repr__(self) -> str:
        return f"<PublicHoliday(date={self.date}, name={self.name}, active={self.is_active})>"
