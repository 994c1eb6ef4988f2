from .base import (
    AvailabilityResponderError, ConfigurationError, AuthenticationError,
    CredentialStoreError, APIError
)
from .auth import MissingCodeError, ExchangeFailedError, InvalidCredentialsError, NotAuthorizedError
from .calendar import CalendarError, CalendarPermissionError, CalendarNotFoundError
from .notifications import SendError, ChannelUnconfiguredError, ProviderSendError

__all__ = [
    "AvailabilityResponderError",
    "ConfigurationError",
    "AuthenticationError",
    "CredentialStoreError",
    "APIError",
    "MissingCodeError",
    "ExchangeFailedError",
    "InvalidCredentialsError",
    "NotAuthorizedError",
    "CalendarError",
    "CalendarPermissionError",
    "CalendarNotFoundError",
    "SendError",
    "ChannelUnconfiguredError",
    "ProviderSendError",
]
