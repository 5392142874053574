"""
Working-day arithmetic.

The module-level functions are pure: the holiday set is passed in on every
call as any container of dates. ``HolidayCalendar`` is such a container
that fetches each year's holidays on first use, so a walk that crosses
into a new year picks up that year's set as well.
"""

from datetime import date, timedelta
from typing import Callable, Container, Dict, FrozenSet, Iterable, List

from sqlalchemy.orm import Session

from leaveflow.config.logging import get_logger
from leaveflow.repositories.calendar.holiday_repository import PublicHolidayRepository

logger = get_logger(__name__)

SATURDAY = 5

# Upper bound on any forward walk; a full year of holidays would be a data error.
MAX_WALK_DAYS = 3660

NO_HOLIDAYS: FrozenSet[date] = frozenset()


class HolidayCalendar:
    """
    Holiday set that loads one year at a time from a provider.

    Args:
        provider: Returns the active holiday dates of a year
    """

    def __init__(self, provider: Callable[[int], Iterable[date]]):
        self._provider = provider
        self._years: Dict[int, FrozenSet[date]] = {}

    def for_year(self, year: int) -> FrozenSet[date]:
        if year not in self._years:
            self._years[year] = frozenset(self._provider(year))
            logger.debug(f"Loaded {len(self._years[year])} holiday(s) for {year}")
        return self._years[year]

    def __contains__(self, day: object) -> bool:
        if not isinstance(day, date):
            return False
        return _as_day(day) in self.for_year(day.year)


def _as_day(value: date) -> date:
    # datetime is a date subclass; compare on the calendar day only
    return date(value.year, value.month, value.day)


def is_working_day(day: date, holidays: Container[date] = NO_HOLIDAYS) -> bool:
    """False on Saturday, Sunday or an active holiday."""
    day = _as_day(day)
    if day.weekday() >= SATURDAY:
        return False
    return day not in holidays


def add_working_days(start: date, count: int, holidays: Container[date] = NO_HOLIDAYS) -> date:
    """
    Date on which the ``count``-th working day is reached, counting from ``start``.

    ``start`` itself is day 1 when it is a working day; non-working days are
    skipped without using up the count.

    Raises:
        ValueError: If count is less than 1
    """
    if count < 1:
        raise ValueError("count must be at least 1")

    current = _as_day(start)
    counted = 0
    for _ in range(MAX_WALK_DAYS):
        if is_working_day(current, holidays):
            counted += 1
            if counted == count:
                return current
        current += timedelta(days=1)
    raise ValueError(f"No {count} working day(s) found within {MAX_WALK_DAYS} days of {start}")


def next_resumption_day(end_date: date, holidays: Container[date] = NO_HOLIDAYS) -> date:
    """First working day strictly after ``end_date``."""
    current = _as_day(end_date)
    for _ in range(MAX_WALK_DAYS):
        current += timedelta(days=1)
        if is_working_day(current, holidays):
            return current
    raise ValueError(f"No working day found within {MAX_WALK_DAYS} days after {end_date}")


def count_working_days(start: date, end: date, holidays: Container[date] = NO_HOLIDAYS) -> int:
    """Number of working days in [start, end]; zero when end precedes start."""
    start, end = _as_day(start), _as_day(end)
    total = 0
    current = start
    while current <= end:
        if is_working_day(current, holidays):
            total += 1
        current += timedelta(days=1)
    return total


def months_spanned(start: date, end: date) -> List[int]:
    """Sorted month numbers touched by [start, end] inclusive."""
    if end < start:
        return []
    months = set()
    year, month = start.year, start.month
    while (year, month) <= (end.year, end.month):
        months.add(month)
        if len(months) == 12:
            break
        month += 1
        if month > 12:
            year, month = year + 1, 1
    return sorted(months)


class CalendarService:
    """
    Calendar operations backed by the public holiday table.

    Each call builds a fresh ``HolidayCalendar`` so nothing outlives the
    request.
    """

    def __init__(self, db_session: Session):
        self.holiday_repository = PublicHolidayRepository(db_session)

    def holidays(self) -> HolidayCalendar:
        return HolidayCalendar(self.holiday_repository.active_dates_for_year)

    def is_working_day(self, day: date) -> bool:
        return is_working_day(day, self.holidays())

    def compute_end_date(self, start: date, working_days: int) -> date:
        return add_working_days(start, working_days, self.holidays())

    def compute_resumption_date(self, end_date: date) -> date:
        return next_resumption_day(end_date, self.holidays())

    def count_working_days(self, start: date, end: date) -> int:
        return count_working_days(start, end, self.holidays())
