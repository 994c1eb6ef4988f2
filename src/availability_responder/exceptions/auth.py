from .base import AuthenticationError


class MissingCodeError(AuthenticationError):
    """Raised when the OAuth callback arrives without an authorization code."""
    pass


class ExchangeFailedError(AuthenticationError):
    """Raised when the provider rejects an authorization code."""
    pass


class InvalidCredentialsError(AuthenticationError):
    """Raised when credentials are invalid or expired beyond refresh."""
    pass


class NotAuthorizedError(AuthenticationError):
    """Raised when no credential is present and authorization is required."""
    pass
