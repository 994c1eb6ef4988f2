"""OAuth2 credential storage and lifecycle management."""

from .store import CredentialStore
from .manager import AuthorizationManager

__all__ = [
    "CredentialStore",
    "AuthorizationManager",
]
