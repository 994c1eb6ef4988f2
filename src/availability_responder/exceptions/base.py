class AvailabilityResponderError(Exception):
    """Base exception for all availability responder errors."""
    pass


class ConfigurationError(AvailabilityResponderError):
    """Raised when required process configuration is missing or invalid."""
    pass


class AuthenticationError(AvailabilityResponderError):
    """Raised when authentication fails."""
    pass


class CredentialStoreError(AvailabilityResponderError):
    """Raised when the persisted credential cannot be read or written."""
    pass


class APIError(AvailabilityResponderError):
    """Raised when calls to an external provider fail."""
    pass
