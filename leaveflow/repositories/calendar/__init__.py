from leaveflow.repositories.calendar.holiday_repository import PublicHolidayRepository

__all__ = ["PublicHolidayRepository"]
