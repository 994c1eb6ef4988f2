import json
import pytest
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path
from unittest.mock import Mock

from google.oauth2.credentials import Credentials

# Make the src/ layout importable without installing the package
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root / "src"))

from availability_responder.auth import AuthorizationManager, CredentialStore  # noqa: E402

CLIENT_ID = "test-client-id.apps.googleusercontent.com"
CLIENT_SECRET = "test-client-secret"
REDIRECT_URI = "http://localhost:8080/oauth2callback"
TOKEN_URI = "https://oauth2.googleapis.com/token"


def utcnow() -> datetime:
    """Naive UTC now, the representation google-auth uses for expiry."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def make_credentials(token="access-1", refresh_token="refresh-1", expires_in=timedelta(hours=1)):
    """Build a real OAuth2 credential that never touches the network."""
    creds = Credentials(
        token=token,
        refresh_token=refresh_token,
        token_uri=TOKEN_URI,
        client_id=CLIENT_ID,
        client_secret=CLIENT_SECRET,
        scopes=["https://www.googleapis.com/auth/calendar.readonly"],
    )
    creds.expiry = utcnow() + expires_in
    return creds


@pytest.fixture
def client_config():
    """OAuth web client configuration."""
    return {
        "web": {
            "client_id": CLIENT_ID,
            "client_secret": CLIENT_SECRET,
            "auth_uri": "https://accounts.google.com/o/oauth2/auth",
            "token_uri": TOKEN_URI,
            "redirect_uris": [REDIRECT_URI],
        }
    }


@pytest.fixture
def token_path(tmp_path):
    return tmp_path / "secrets" / "google-calendar-token.json"


@pytest.fixture
def store(token_path):
    return CredentialStore(str(token_path))


@pytest.fixture
def auth_manager(client_config, store):
    """An initialized manager with no stored credential."""
    manager = AuthorizationManager(client_config, store, redirect_uri=REDIRECT_URI)
    manager.initialize()
    return manager


@pytest.fixture
def authorized_manager(client_config, store):
    """A manager initialized from a stored, still-valid credential."""
    store.save(json.loads(make_credentials().to_json()))
    manager = AuthorizationManager(client_config, store, redirect_uri=REDIRECT_URI)
    manager.initialize()
    return manager


@pytest.fixture
def expired_manager(client_config, store):
    """A manager initialized from a stored credential whose access token expired."""
    store.save(json.loads(make_credentials(expires_in=timedelta(hours=-1)).to_json()))
    manager = AuthorizationManager(client_config, store, redirect_uri=REDIRECT_URI)
    manager.initialize()
    return manager


@pytest.fixture
def mock_calendar_service():
    """Mock calendar service for testing."""
    mock_service = Mock()
    mock_events = Mock()
    mock_service.events.return_value = mock_events
    mock_events.list.return_value.execute.return_value = {"items": []}
    return mock_service


@pytest.fixture
def sample_google_event():
    """Sample Google Calendar API event response."""
    return {
        "id": "test_event_123",
        "status": "confirmed",
        "summary": "Dentist appointment",
        "start": {"dateTime": "2025-01-15T09:00:00-05:00"},
        "end": {"dateTime": "2025-01-15T10:00:00-05:00"},
    }


@pytest.fixture
def mock_sender():
    """Mock notification sender that records every send."""
    from availability_responder.notifications import DeliveryReceipt

    sender = Mock()
    sender.send.side_effect = lambda destination, body: DeliveryReceipt(
        destination=destination, message_sid="SM123"
    )
    return sender


@pytest.fixture
def credentials_factory():
    """Factory for real, offline OAuth2 credentials."""
    return make_credentials
