"""
Authorization manager for the Google Calendar credential.

This module owns the single delegated OAuth2 credential the responder uses.
It runs the web-server authorization flow, loads and persists the credential
through a CredentialStore, refreshes expired access tokens and makes sure the
token file never lags behind the credential that was last used successfully.
"""

import json
import logging
import threading
from contextlib import contextmanager
from typing import Optional, Dict, Any, Iterator, List

from google.auth.exceptions import RefreshError
from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import Flow

from ..config import SCOPES
from ..exceptions import (
    CredentialStoreError, ExchangeFailedError, InvalidCredentialsError,
    MissingCodeError, NotAuthorizedError
)
from .store import CredentialStore

logger = logging.getLogger(__name__)

# Authorization attempts that were started but never completed
MAX_PENDING_FLOWS = 16


class _LeasedCredentials(Credentials):
    """
    Per-operation copy of the active credential.

    The HTTP transport refreshes its credential in place after a 401. A lease
    routes that refresh back to its manager instead, so the active credential
    is replaced under the manager's lock rather than mutated.
    """

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._lease_manager: Optional["AuthorizationManager"] = None
        self._lease_source: Optional[Credentials] = None

    def refresh(self, request):
        self._lease_manager._refresh_lease(self, request)


class AuthorizationManager:
    """
    Owns the live Google OAuth2 credential.

    The active credential is only ever replaced as a whole, so readers never
    need the lock. Operations get a lease (a private copy), never the active
    object itself. Every sequence that refreshes, persists, swaps or deletes
    the credential runs under ``self._lock``, which keeps the token file from
    being overwritten with stale data by concurrent requests.
    """

    def __init__(
            self,
            client_config: Dict[str, Any],
            store: CredentialStore,
            redirect_uri: Optional[str] = None,
            scopes: Optional[List[str]] = None
    ):
        """
        Args:
            client_config: OAuth client configuration dict ({"web": {...}})
            store: Durable storage for the serialized credential
            redirect_uri: Callback URL registered with the OAuth client
            scopes: OAuth scopes to request. Defaults to read-only calendar access.
        """
        self._client_config = client_config
        self._store = store
        self._redirect_uri = redirect_uri
        self._scopes = scopes or SCOPES

        self._lock = threading.Lock()
        self._credentials: Optional[Credentials] = None
        self._pending_flows: Dict[str, Flow] = {}

    @property
    def is_authorized(self) -> bool:
        return self._credentials is not None

    def current_credential(self) -> Optional[Credentials]:
        """
        Return the active credential.

        Returns:
            The active Credentials, or None when the manager is unauthorized.
        """
        return self._credentials

    def initialize(self) -> bool:
        """
        Load the stored credential, if any.

        Never raises: a missing or unreadable token file leaves the manager
        unauthorized until the next successful authorization.

        Returns:
            True if a credential was loaded.
        """
        try:
            record = self._store.load()
        except CredentialStoreError as e:
            logger.warning("Failed to load existing token: %s", e)
            record = None

        creds = None
        if record is not None:
            try:
                creds = Credentials.from_authorized_user_info(record, self._scopes)
            except (ValueError, KeyError) as e:
                logger.warning("Stored token is not a usable credential: %s", e)

        with self._lock:
            self._credentials = creds

        if creds is None:
            logger.info("Google token not found. Need authorization.")
            return False

        logger.info("Google credentials loaded from file.")
        return True

    def _create_flow(self) -> Flow:
        return Flow.from_client_config(
            client_config=self._client_config,
            scopes=self._scopes,
            redirect_uri=self._redirect_uri
        )

    def begin_authorization(self) -> str:
        """
        Generate the Google consent URL.

        Offline access is requested so a refresh token is issued, and consent
        is forced so Google issues one again on re-authorization.

        Returns:
            Authorization URL string
        """
        flow = self._create_flow()
        auth_url, state = flow.authorization_url(
            access_type='offline',
            include_granted_scopes='true',
            prompt='consent'
        )

        with self._lock:
            # The flow carries the PKCE verifier needed for the code exchange
            self._pending_flows[state] = flow
            while len(self._pending_flows) > MAX_PENDING_FLOWS:
                self._pending_flows.pop(next(iter(self._pending_flows)))

        logger.info("Generated authorization URL")
        return auth_url

    def complete_authorization(self, code: Optional[str], state: Optional[str] = None) -> Credentials:
        """
        Exchange a one-time authorization code for a credential and activate it.

        Args:
            code: Authorization code from the OAuth callback
            state: State returned with the callback, used to find the pending flow

        Returns:
            The new active credential.

        Raises:
            MissingCodeError: If no code was supplied.
            ExchangeFailedError: If the state matches no pending authorization
                or Google rejects the code.
            CredentialStoreError: If the credential cannot be persisted.
        """
        if not code:
            raise MissingCodeError("Authorization code missing.")

        with self._lock:
            flow = self._pending_flows.pop(state, None) if state else None
        if flow is None:
            # Only the flow that built the consent URL holds its PKCE verifier
            logger.error("No pending authorization for this callback (expired or restarted). Visit /authorize again.")
            raise ExchangeFailedError("Unknown or expired authorization state")

        logger.info("Exchanging authorization code for tokens...")
        try:
            flow.fetch_token(code=code)
        except Exception as e:
            logger.error("Error retrieving access token: %s", e)
            raise ExchangeFailedError(f"Failed to exchange authorization code: {e}") from e

        creds = flow.credentials
        if not creds.refresh_token:
            logger.warning("Google did not issue a refresh token; re-authorization will be needed on expiry")

        with self._lock:
            self._store.save(self._serialize(creds))
            self._credentials = creds

        logger.info("Tokens obtained successfully.")
        return creds

    def invalidate(self) -> None:
        """Forget the credential in memory and on disk."""
        with self._lock:
            self._credentials = None
            try:
                self._store.delete()
            except CredentialStoreError as e:
                logger.error("Error removing token file: %s", e)
        logger.info("Credential invalidated; authorization required")

    @contextmanager
    def authorized(self) -> Iterator[Credentials]:
        """
        Yield a valid credential for one authenticated operation.

        The caller gets a private lease of the active credential. An expired
        access token is refreshed before the operation starts. If the HTTP
        layer refreshes the lease during the operation, the refresh goes
        through ``_refresh_lease`` and replaces the active credential.

        Raises:
            NotAuthorizedError: If there is no credential.
            InvalidCredentialsError: If the credential cannot be refreshed.
        """
        lease = self._lease(self._ensure_fresh())
        try:
            yield lease
        finally:
            self._persist_if_changed(lease)

    def _ensure_fresh(self) -> Credentials:
        with self._lock:
            creds = self._credentials
            if creds is None:
                raise NotAuthorizedError("Google Calendar is not authorized")
            if creds.valid:
                return creds
            if not creds.refresh_token:
                raise InvalidCredentialsError("Access token expired and no refresh token is available")

            fresh = self._clone(creds)
            try:
                fresh.refresh(Request())
            except RefreshError as e:
                if getattr(e, "retryable", False):
                    raise
                raise InvalidCredentialsError(f"Token refresh rejected: {e}") from e

            self._store.save(self._serialize(fresh))
            self._credentials = fresh

        logger.info("Refreshed access token.")
        return fresh

    def _refresh_lease(self, lease: _LeasedCredentials, request) -> None:
        """
        Refresh on behalf of a lease whose token the API rejected.

        Leases cut from the same credential share one refresh: the first one
        in replaces the active credential, later ones adopt its token.

        Raises:
            RefreshError: If the credential was invalidated or Google refuses
                the refresh token.
        """
        with self._lock:
            active = self._credentials
            if active is None:
                raise RefreshError("Credential was invalidated during the request")

            if active is lease._lease_source:
                fresh = self._clone(active)
                fresh.refresh(request)
                self._store.save(self._serialize(fresh))
                self._credentials = fresh
                active = fresh
                logger.info("Refreshed access token rejected during API call")

            lease.token = active.token
            lease.expiry = active.expiry
            lease._lease_source = active

    def _persist_if_changed(self, lease: _LeasedCredentials) -> None:
        with self._lock:
            source = lease._lease_source
            # An invalidated or superseded credential must not be written back
            if source is not self._credentials or lease.token == source.token:
                return

            fresh = self._clone(lease)
            try:
                self._store.save(self._serialize(fresh))
            except CredentialStoreError as e:
                logger.error("Failed to persist access token changed during API call: %s", e)
                return
            self._credentials = fresh
        logger.info("Persisted access token changed during API call")

    def _lease(self, creds: Credentials) -> _LeasedCredentials:
        lease = _LeasedCredentials.from_authorized_user_info(self._serialize(creds), self._scopes)
        lease._lease_manager = self
        lease._lease_source = creds
        return lease

    def _clone(self, creds: Credentials) -> Credentials:
        return Credentials.from_authorized_user_info(self._serialize(creds), self._scopes)

    @staticmethod
    def _serialize(creds: Credentials) -> Dict[str, Any]:
        return json.loads(creds.to_json())
