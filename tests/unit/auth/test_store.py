import os
import stat
import pytest
from unittest.mock import patch

from availability_responder.auth.store import CredentialStore
from availability_responder.exceptions import CredentialStoreError


@pytest.mark.unit
@pytest.mark.auth
class TestCredentialStore:
    """Test cases for the file-backed credential store."""

    def test_load_missing_file_returns_none(self, store):
        assert store.exists is False
        assert store.load() is None

    def test_save_creates_directory_and_file(self, store, token_path):
        store.save({"token": "access-1", "refresh_token": "refresh-1"})

        assert token_path.exists()
        assert store.load() == {"token": "access-1", "refresh_token": "refresh-1"}

    @pytest.mark.skipif(os.name == "nt", reason="POSIX permissions")
    def test_saved_file_is_owner_only(self, store, token_path):
        store.save({"token": "access-1"})

        mode = stat.S_IMODE(os.stat(token_path).st_mode)
        assert mode == 0o600

    def test_save_replaces_previous_record(self, store):
        store.save({"token": "old"})
        store.save({"token": "new"})

        assert store.load() == {"token": "new"}

    def test_failed_write_leaves_previous_record(self, store, token_path):
        store.save({"token": "old"})

        with patch('availability_responder.auth.store.os.replace', side_effect=OSError("disk full")):
            with pytest.raises(CredentialStoreError, match="disk full"):
                store.save({"token": "new"})

        assert store.load() == {"token": "old"}
        # No temp files left behind
        assert os.listdir(token_path.parent) == [token_path.name]

    def test_corrupt_file_raises(self, store, token_path):
        token_path.parent.mkdir(parents=True)
        token_path.write_text("{not json")

        with pytest.raises(CredentialStoreError):
            store.load()

    def test_non_object_record_raises(self, store, token_path):
        token_path.parent.mkdir(parents=True)
        token_path.write_text('["token"]')

        with pytest.raises(CredentialStoreError, match="JSON object"):
            store.load()

    def test_delete(self, store):
        store.save({"token": "access-1"})

        store.delete()

        assert store.exists is False
        assert store.load() is None

    def test_delete_missing_file_is_not_an_error(self, store):
        store.delete()
        assert store.exists is False

    def test_path(self, token_path):
        assert CredentialStore(str(token_path)).path == str(token_path)
