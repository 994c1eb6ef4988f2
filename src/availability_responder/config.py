"""
Process configuration loaded from environment variables.

All values are read once at startup; there is no hot reload. Only the Google
OAuth client identity is mandatory, everything else has a working default or
disables the feature that needs it.
"""

import os
from dataclasses import dataclass, field
from typing import Optional, Dict, Any, FrozenSet

from .exceptions import ConfigurationError

# Scopes for Google APIs
SCOPES = [
    "https://www.googleapis.com/auth/calendar.readonly",
]

GOOGLE_AUTH_URI = "https://accounts.google.com/o/oauth2/auth"
GOOGLE_TOKEN_URI = "https://oauth2.googleapis.com/token"

DEFAULT_TOKEN_PATH = os.path.join("secrets", "google-calendar-token.json")
DEFAULT_CALENDAR_ID = "primary"
DEFAULT_PORT = 8080
DEFAULT_WORKER_THREADS = 4


def parse_number_list(raw: Optional[str]) -> FrozenSet[str]:
    """Split a comma-separated list of phone numbers, dropping blanks."""
    if not raw:
        return frozenset()
    return frozenset(part.strip() for part in raw.split(",") if part.strip())


@dataclass(frozen=True)
class Settings:
    """Responder configuration."""

    google_client_id: Optional[str] = None
    google_client_secret: Optional[str] = None
    google_redirect_uri: Optional[str] = None
    google_calendar_id: str = DEFAULT_CALENDAR_ID
    token_path: str = DEFAULT_TOKEN_PATH

    twilio_account_sid: Optional[str] = None
    twilio_auth_token: Optional[str] = None
    twilio_phone_number: Optional[str] = None

    whitelisted_numbers: FrozenSet[str] = field(default_factory=frozenset)
    is_at_home: bool = False

    host: str = "0.0.0.0"
    port: int = DEFAULT_PORT
    worker_threads: int = DEFAULT_WORKER_THREADS
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: Optional[Dict[str, str]] = None) -> "Settings":
        """
        Build settings from environment variables.

        Args:
            environ: Mapping to read from. Defaults to ``os.environ``.

        Returns:
            Settings instance. Call ``validate()`` before relying on it.

        Raises:
            ConfigurationError: If a numeric variable cannot be parsed.
        """
        env = os.environ if environ is None else environ

        try:
            port = int(env.get("PORT", DEFAULT_PORT))
            worker_threads = int(env.get("WORKER_THREADS", DEFAULT_WORKER_THREADS))
        except ValueError as e:
            raise ConfigurationError(f"Invalid numeric setting: {e}") from e

        return cls(
            google_client_id=env.get("GOOGLE_CLIENT_ID"),
            google_client_secret=env.get("GOOGLE_CLIENT_SECRET"),
            google_redirect_uri=env.get("GOOGLE_REDIRECT_URI"),
            google_calendar_id=env.get("GOOGLE_CALENDAR_ID") or DEFAULT_CALENDAR_ID,
            token_path=env.get("GOOGLE_TOKEN_PATH") or DEFAULT_TOKEN_PATH,
            twilio_account_sid=env.get("TWILIO_ACCOUNT_SID"),
            twilio_auth_token=env.get("TWILIO_AUTH_TOKEN"),
            twilio_phone_number=env.get("TWILIO_PHONE_NUMBER"),
            whitelisted_numbers=parse_number_list(env.get("WHITELISTED_NUMBERS")),
            # Placeholder for location; only the literal "true" enables it
            is_at_home=env.get("HARDCODED_IS_AT_HOME") == "true",
            host=env.get("HOST", "0.0.0.0"),
            port=port,
            worker_threads=worker_threads,
            log_level=env.get("LOG_LEVEL", "INFO").upper(),
        )

    def validate(self) -> "Settings":
        """
        Check that the process can start.

        Raises:
            ConfigurationError: If the Google OAuth client identity is incomplete
                or a numeric setting is out of range.
        """
        missing = [
            name for name, value in (
                ("GOOGLE_CLIENT_ID", self.google_client_id),
                ("GOOGLE_CLIENT_SECRET", self.google_client_secret),
                ("GOOGLE_REDIRECT_URI", self.google_redirect_uri),
            ) if not value
        ]
        if missing:
            raise ConfigurationError(f"Missing required settings: {', '.join(missing)}")
        if self.worker_threads < 1:
            raise ConfigurationError("WORKER_THREADS must be at least 1")
        return self

    @property
    def sms_enabled(self) -> bool:
        return bool(self.twilio_account_sid and self.twilio_auth_token and self.twilio_phone_number)

    def client_config(self) -> Dict[str, Any]:
        """OAuth client configuration in the format of a downloaded client secrets file."""
        return {
            "web": {
                "client_id": self.google_client_id,
                "client_secret": self.google_client_secret,
                "auth_uri": GOOGLE_AUTH_URI,
                "token_uri": GOOGLE_TOKEN_URI,
                "redirect_uris": [self.google_redirect_uri],
            }
        }
