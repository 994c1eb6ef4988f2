"""
Request/decision/reply protocol for availability queries.

Each inbound query moves through Received -> Gated -> Evaluated -> Replied,
or stops at Rejected when the requester is not on the allow-list. The gate
runs on the caller's thread so the transport knows which acknowledgment to
return; evaluation and reply run on a worker thread afterwards.
"""

import enum
import logging
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from typing import Optional

from .notifications.sender import NotificationSender
from .policy import AccessPolicy
from .services.calendar.availability import CalendarAvailabilityResolver
from .utils.log_sanitizer import sanitize_for_logging

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AccessRequest:
    """One inbound availability query."""
    requester_id: str
    message_text: str = ""


class AvailabilityVerdict(enum.Enum):
    AVAILABLE = "Available"
    BUSY = "Busy"

    @classmethod
    def decide(cls, busy: bool, is_at_home: bool) -> "AvailabilityVerdict":
        return cls.AVAILABLE if (not busy and is_at_home) else cls.BUSY


class RequestState(enum.Enum):
    RECEIVED = "received"
    GATED = "gated"
    EVALUATED = "evaluated"
    REPLIED = "replied"
    REJECTED = "rejected"


class AvailabilityOrchestrator:
    """
    Drives one availability query from receipt to reply.

    Requests share no mutable state; several may be in flight at once and
    their replies may go out in any order. Nothing is retried.
    """

    def __init__(
            self,
            policy: AccessPolicy,
            resolver: CalendarAvailabilityResolver,
            sender: NotificationSender,
            is_at_home: bool,
            executor: Optional[ThreadPoolExecutor] = None,
            max_workers: int = 4
    ):
        self._policy = policy
        self._resolver = resolver
        self._sender = sender
        self._is_at_home = is_at_home
        self._executor = executor or ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="availability"
        )

    @property
    def is_at_home(self) -> bool:
        return self._is_at_home

    def admit(self, request: AccessRequest) -> bool:
        """Apply the allow-list gate. Returns False if the request is rejected."""
        sanitized = sanitize_for_logging(sender=request.requester_id, body=request.message_text)
        logger.info("Received SMS from %s: %s", sanitized['sender'], sanitized['body'])

        if not self._policy.is_allowed(request.requester_id):
            logger.info("Number %s is not whitelisted. Ignoring.", sanitized['sender'])
            return False

        logger.info("Number %s is whitelisted. Checking availability...", sanitized['sender'])
        return True

    def handle(self, request: AccessRequest) -> RequestState:
        """
        Run the whole protocol for ``request`` on the calling thread.

        Returns:
            The terminal state: REJECTED or REPLIED.
        """
        if not self.admit(request):
            return RequestState.REJECTED
        return self._evaluate_and_reply(request)

    def dispatch(self, request: AccessRequest) -> Optional[Future]:
        """
        Gate ``request`` now and schedule evaluation and reply on a worker.

        Returns:
            None if the request was rejected, otherwise the Future of the
            scheduled work (resolving to its terminal RequestState).
        """
        if not self.admit(request):
            return None

        future = self._executor.submit(self._evaluate_and_reply, request)
        future.add_done_callback(self._log_task_failure)
        return future

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)

    def _evaluate_and_reply(self, request: AccessRequest) -> RequestState:
        logger.debug("Request state: %s", RequestState.GATED.value)

        try:
            busy = self._resolver.is_busy()
        except Exception:
            # The resolver reduces its own failures to busy; this covers bugs
            logger.exception("Error checking calendar status")
            busy = True

        verdict = AvailabilityVerdict.decide(busy, self._is_at_home)
        logger.info("Calendar Busy: %s, At Home: %s -> %s", busy, self._is_at_home, verdict.value)
        logger.debug("Request state: %s", RequestState.EVALUATED.value)

        receipt = self._sender.send(request.requester_id, verdict.value)
        if not receipt.delivered:
            logger.warning("Reply was not delivered: %s", receipt.error)

        logger.debug("Request state: %s", RequestState.REPLIED.value)
        return RequestState.REPLIED

    @staticmethod
    def _log_task_failure(future: Future) -> None:
        if future.cancelled():
            return
        error = future.exception()
        if error is not None:
            logger.error("Availability reply task failed", exc_info=error)
