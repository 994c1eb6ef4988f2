from .base import APIError


class CalendarError(APIError):
    """Base exception for Calendar API errors."""
    pass


class CalendarPermissionError(CalendarError):
    """Raised when the credential lacks permission for the calendar."""
    pass


class CalendarNotFoundError(CalendarError):
    """Raised when a calendar is not found."""
    pass
