"""
Busy/free resolution from Google Calendar.

"Busy" is the fail-safe answer: the resolver returns it when unauthorized,
on any query failure and whenever an event could be blocking time. It never
raises.
"""

import logging
from datetime import timedelta
from typing import Callable, Any, Iterable

from ...auth.manager import AuthorizationManager
from ...exceptions import InvalidCredentialsError, NotAuthorizedError
from ...utils.datetime import time_window_from_now
from ...utils.log_sanitizer import sanitize_summary
from .api_service import CalendarApiService, get_calendar_service
from .constants import AVAILABILITY_MAX_RESULTS, AVAILABILITY_WINDOW, DEFAULT_CALENDAR_ID
from .types import CalendarEvent

logger = logging.getLogger(__name__)


class CalendarAvailabilityResolver:
    """Reduces the events starting in the next minute to a busy/free verdict."""

    def __init__(
            self,
            auth_manager: AuthorizationManager,
            calendar_id: str = DEFAULT_CALENDAR_ID,
            window: timedelta = AVAILABILITY_WINDOW,
            max_results: int = AVAILABILITY_MAX_RESULTS,
            service_factory: Callable[[Any], Any] = get_calendar_service
    ):
        self._auth_manager = auth_manager
        self._calendar_id = calendar_id
        self._window = window
        self._max_results = max_results
        self._service_factory = service_factory

    @property
    def calendar_id(self) -> str:
        return self._calendar_id

    def is_busy(self) -> bool:
        """
        Check whether the calendar owner is busy right now.

        Returns:
            True if busy or if the state cannot be determined, False if free.
        """
        if not self._auth_manager.is_authorized:
            logger.error("Google client not authorized. Cannot check calendar.")
            return True

        start, end = time_window_from_now(self._window)
        try:
            with self._auth_manager.authorized() as credentials:
                calendar = CalendarApiService(self._service_factory(credentials))
                events = calendar.list_events(
                    start=start,
                    end=end,
                    max_results=self._max_results,
                    calendar_id=self._calendar_id,
                )
        except NotAuthorizedError:
            logger.error("Google client lost authorization before the calendar query")
            return True
        except InvalidCredentialsError as e:
            logger.error("Google Auth Error. Token might be invalid or expired. Need re-authorization: %s", e)
            self._recover_authorization()
            return True
        except Exception:
            logger.exception("Error fetching calendar events")
            return True

        return self.evaluate(events)

    def _recover_authorization(self) -> None:
        self._auth_manager.invalidate()
        # Reload so the manager's state matches the (now empty) token store
        self._auth_manager.initialize()

    @staticmethod
    def evaluate(events: Iterable[CalendarEvent]) -> bool:
        """
        Decide busy/free from events ordered by start time.

        Cancelled events are ignored. The first remaining event that is not
        transparent makes the owner busy; tentative events count.
        """
        events = list(events)
        if not events:
            logger.info("No upcoming events found. Assuming free.")
            return False

        for event in events:
            if event.is_cancelled:
                continue
            if event.blocks_time:
                logger.info("Busy due to event: %s", sanitize_summary(event.summary))
                return True

        logger.info("Found events, but none indicate busy status.")
        return False
