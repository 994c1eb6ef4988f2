"""Calendar service module for Google API integration."""

from .api_service import CalendarApiService, get_calendar_service
from .availability import CalendarAvailabilityResolver
from .types import CalendarEvent

__all__ = [
    # Service layer
    "CalendarApiService",
    "get_calendar_service",

    # Busy/free resolution
    "CalendarAvailabilityResolver",

    # Data types
    "CalendarEvent",
]
