from datetime import datetime
from typing import Optional, Dict, Any
from dataclasses import dataclass
import logging

from .constants import STATUS_CONFIRMED, STATUS_CANCELLED, TRANSPARENCY_OPAQUE, TRANSPARENCY_TRANSPARENT

logger = logging.getLogger(__name__)


def parse_datetime_from_api(datetime_data: Optional[Dict[str, Any]]) -> Optional[datetime]:
    """
    Parse datetime from Google Calendar API response.

    Args:
        datetime_data: Dictionary containing dateTime or date fields

    Returns:
        Parsed datetime object or None if parsing fails
    """
    if not datetime_data:
        return None

    try:
        if datetime_data.get("dateTime"):
            # Handle timezone-aware datetime
            dt_str = datetime_data["dateTime"]
            if dt_str.endswith("Z"):
                dt_str = dt_str[:-1] + "+00:00"
            return datetime.fromisoformat(dt_str)
        elif datetime_data.get("date"):
            # Handle all-day events (date only)
            return datetime.strptime(datetime_data["date"], "%Y-%m-%d")
    except (ValueError, TypeError) as e:
        logger.warning("Failed to parse datetime: %s", e)

    return None


@dataclass(frozen=True)
class CalendarEvent:
    """
    The parts of a Google Calendar event that decide busy/free state.
    Args:
        event_id: Unique identifier for the event.
        summary: A brief title or summary of the event.
        status: The status of the event (confirmed, tentative, cancelled).
        transparency: Whether the event blocks time (opaque) or not (transparent).
        start: The start time of the event.
        end: The end time of the event.
    """
    event_id: Optional[str] = None
    summary: Optional[str] = None
    status: str = STATUS_CONFIRMED
    transparency: str = TRANSPARENCY_OPAQUE
    start: Optional[datetime] = None
    end: Optional[datetime] = None

    @classmethod
    def from_api(cls, event_data: Dict[str, Any]) -> "CalendarEvent":
        """
        Creates a CalendarEvent from a Google Calendar API event resource.

        Google omits ``transparency`` for opaque events and ``status`` is always
        present in list responses, but both fall back to their API defaults.
        """
        return cls(
            event_id=event_data.get("id"),
            summary=event_data.get("summary"),
            status=event_data.get("status") or STATUS_CONFIRMED,
            transparency=event_data.get("transparency") or TRANSPARENCY_OPAQUE,
            start=parse_datetime_from_api(event_data.get("start")),
            end=parse_datetime_from_api(event_data.get("end")),
        )

    @property
    def is_cancelled(self) -> bool:
        return self.status == STATUS_CANCELLED

    @property
    def blocks_time(self) -> bool:
        """True unless the event is explicitly marked as free time."""
        return self.transparency != TRANSPARENCY_TRANSPARENT
