"""
Public holiday repository.

Supplies the active holiday dates for a given year to the calendar service.
"""

from datetime import date
from typing import List

from sqlalchemy.orm import Session

from leaveflow.models.calendar.public_holiday import PublicHoliday
from leaveflow.repositories.base.base_repository import BaseRepository


class PublicHolidayRepository(BaseRepository[PublicHoliday]):
    """Holiday calendar source."""

    def __init__(self, session: Session):
        super().__init__(PublicHoliday, session)

    def find_by_year(self, year: int, active_only: bool = True) -> List[PublicHoliday]:
        query = self.db.query(PublicHoliday).filter(PublicHoliday.year == year)
        if active_only:
            query = query.filter(PublicHoliday.is_active.is_(True))
        return query.order_by(PublicHoliday.date).all()

    def active_dates_for_year(self, year: int) -> List[date]:
        """
        Active holiday dates for a year.

        Matches on the stored date as well as the year column so a row
        with a mistyped year cannot leak into another year's set.
        """
        return [
            holiday.date
            for holiday in self.find_by_year(year)
            if holiday.date.year == year
        ]
