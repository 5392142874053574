from leaveflow.services.calendar.calendar_service import (
    CalendarService,
    HolidayCalendar,
    add_working_days,
    count_working_days,
    is_working_day,
    months_spanned,
    next_resumption_day,
)

__all__ = [
    "CalendarService",
    "HolidayCalendar",
    "add_working_days",
    "count_working_days",
    "is_working_day",
    "months_spanned",
    "next_resumption_day",
]
