import json
import logging
import os
import tempfile
from typing import Optional, Dict, Any

from ..exceptions import CredentialStoreError

logger = logging.getLogger(__name__)


class CredentialStore:
    """
    File-backed storage for a single serialized OAuth credential.

    The record is whatever ``Credentials.to_json()`` produced. A missing file
    is the normal "never authorized" state, not an error.
    """

    def __init__(self, token_path: str):
        self._token_path = token_path

    @property
    def path(self) -> str:
        return self._token_path

    @property
    def exists(self) -> bool:
        return os.path.exists(self._token_path)

    def load(self) -> Optional[Dict[str, Any]]:
        """
        Read the stored credential record.

        Returns:
            The decoded record, or None when nothing has been stored yet.

        Raises:
            CredentialStoreError: If the file exists but cannot be read or decoded.
        """
        try:
            with open(self._token_path, "r") as token:
                record = json.load(token)
        except FileNotFoundError:
            return None
        except (OSError, ValueError) as e:
            raise CredentialStoreError(f"Failed to read token file {self._token_path}: {e}") from e

        if not isinstance(record, dict):
            raise CredentialStoreError(f"Token file {self._token_path} does not contain a JSON object")
        return record

    def save(self, record: Dict[str, Any]) -> None:
        """
        Write the credential record, replacing any previous one atomically.

        Raises:
            CredentialStoreError: If the file cannot be written.
        """
        directory = os.path.dirname(os.path.abspath(self._token_path))
        try:
            os.makedirs(directory, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=directory, prefix=".token-", suffix=".json")
            try:
                with os.fdopen(fd, "w") as token:
                    json.dump(record, token)
                os.chmod(tmp_path, 0o600)
                os.replace(tmp_path, self._token_path)
            except BaseException:
                if os.path.exists(tmp_path):
                    os.unlink(tmp_path)
                raise
        except OSError as e:
            raise CredentialStoreError(f"Failed to write token file {self._token_path}: {e}") from e
        logger.info("Credentials saved to token file")

    def delete(self) -> None:
        """Remove the stored record if present."""
        try:
            os.remove(self._token_path)
            logger.info("Removed token file %s", self._token_path)
        except FileNotFoundError:
            logger.debug("No token file to remove at %s", self._token_path)
        except OSError as e:
            raise CredentialStoreError(f"Failed to remove token file {self._token_path}: {e}") from e
