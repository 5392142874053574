from leaveflow.models.calendar.public_holiday import PublicHoliday

__all__ = ["PublicHoliday"]
