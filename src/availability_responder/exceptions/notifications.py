from .base import APIError


class SendError(APIError):
    """Base exception for outbound message delivery failures."""
    pass


class ChannelUnconfiguredError(SendError):
    """Raised when no outbound channel credentials are configured."""
    pass


class ProviderSendError(SendError):
    """Raised when the messaging provider refuses or fails a send."""
    pass
