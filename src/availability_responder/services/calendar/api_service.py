from datetime import datetime
from typing import Optional, List, Any
import logging

from google.auth.exceptions import RefreshError
from google.oauth2.credentials import Credentials
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from ...exceptions import (
    CalendarError, CalendarPermissionError, CalendarNotFoundError, InvalidCredentialsError
)
from ...utils.datetime import convert_datetime_to_iso
from .constants import DEFAULT_CALENDAR_ID, MAX_RESULTS_LIMIT
from .types import CalendarEvent

logger = logging.getLogger(__name__)


def get_calendar_service(credentials: Credentials) -> Any:
    """
    Build a Calendar API v3 resource bound to ``credentials``.

    Not cached: httplib2 transports are not thread-safe, and concurrent
    requests each need their own.
    """
    return build("calendar", "v3", credentials=credentials, cache_discovery=False)


class CalendarApiService:
    """
    Service layer for the Calendar API calls the responder needs.
    """

    def __init__(self, service: Any):
        """
        Initialize Calendar service.

        Args:
            service: The Calendar API service instance
        """
        self._service = service

    def list_events(
            self,
            start: datetime,
            end: datetime,
            max_results: int = 10,
            calendar_id: str = DEFAULT_CALENDAR_ID,
            single_events: bool = True,
            order_by: str = 'startTime'
    ) -> List[CalendarEvent]:
        """
        Fetches events starting in [start, end) from Google Calendar.

        Args:
            start: Start time for events (inclusive).
            end: End time for events (exclusive).
            max_results: Maximum number of events to retrieve.
            calendar_id: Calendar ID to query (default: 'primary').
            single_events: Whether to expand recurring events into instances.
            order_by: How to order the events ('startTime' or 'updated').

        Returns:
            A list of CalendarEvent objects in API order. Empty if none found.

        Raises:
            ValueError: If max_results or the time range is invalid.
            InvalidCredentialsError: If Google rejects the credential.
            CalendarPermissionError: If the calendar is not readable with this credential.
            CalendarNotFoundError: If the calendar does not exist.
            CalendarError: For any other provider or transport failure.
        """
        if max_results < 1 or max_results > MAX_RESULTS_LIMIT:
            raise ValueError(f"max_results must be between 1 and {MAX_RESULTS_LIMIT}")
        if start >= end:
            raise ValueError("Start time must be before end time")

        logger.debug(
            "Fetching events with max_results=%s, start=%s, end=%s, calendar_id=%s",
            max_results, start, end, calendar_id
        )

        request_params = {
            'calendarId': calendar_id,
            'timeMin': convert_datetime_to_iso(start),
            'timeMax': convert_datetime_to_iso(end),
            'maxResults': max_results,
            'singleEvents': single_events,
        }
        if order_by and single_events:
            request_params['orderBy'] = order_by

        try:
            result = self._service.events().list(**request_params).execute()
        except HttpError as e:
            if e.resp.status == 401:
                raise InvalidCredentialsError(f"Google rejected the credential: {e}") from e
            elif e.resp.status == 403:
                raise CalendarPermissionError(f"Permission denied: {e}") from e
            elif e.resp.status == 404:
                raise CalendarNotFoundError(f"Calendar not found: {e}") from e
            raise CalendarError(f"Calendar API error: {e}") from e
        except RefreshError as e:
            if getattr(e, "retryable", False):
                raise CalendarError(f"Transient token refresh failure: {e}") from e
            raise InvalidCredentialsError(f"Token refresh failed during request: {e}") from e
        except Exception as e:
            raise CalendarError(f"Unexpected calendar service error: {e}") from e

        events_data = result.get('items', [])
        logger.debug("Found %d event items", len(events_data))
        return [CalendarEvent.from_api(event_data) for event_data in events_data]
