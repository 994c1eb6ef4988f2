"""
SMS availability responder.

Answers "are you available?" text messages from allow-listed numbers with
"Available" or "Busy", based on Google Calendar state and a location flag.
"""

from .auth import AuthorizationManager, CredentialStore
from .config import Settings
from .notifications import NotificationSender, DeliveryReceipt
from .orchestrator import AccessRequest, AvailabilityOrchestrator, AvailabilityVerdict, RequestState
from .policy import AccessPolicy
from .services.calendar import CalendarAvailabilityResolver, CalendarEvent

__version__ = "0.1.0"

__all__ = [
    "AccessPolicy",
    "AccessRequest",
    "AuthorizationManager",
    "AvailabilityOrchestrator",
    "AvailabilityVerdict",
    "CalendarAvailabilityResolver",
    "CalendarEvent",
    "CredentialStore",
    "DeliveryReceipt",
    "NotificationSender",
    "RequestState",
    "Settings",
]
