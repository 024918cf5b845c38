"""Tests for the Fernet-encrypted file store."""

import json
import stat

import pytest
from cryptography.fernet import Fernet

from fitcoach.core.encryption import KEY_FILE_NAME
from fitcoach.core.errors import EncryptionKeyError, StorageError
from fitcoach.storage.secure_store import EncryptedFileStore


@pytest.mark.asyncio
async def test_round_trip_persists_across_instances(tmp_path):
    await EncryptedFileStore(tmp_path).set_item("token", "secret-value")

    assert await EncryptedFileStore(tmp_path).get_item("token") == "secret-value"


@pytest.mark.asyncio
async def test_values_are_not_stored_in_plain_text(tmp_path):
    store = EncryptedFileStore(tmp_path)
    await store.set_item("token", "secret-value")

    contents = store.path.read_text(encoding="utf-8")

    assert "secret-value" not in contents
    assert set(json.loads(contents)) == {"token"}


@pytest.mark.asyncio
async def test_store_and_key_files_are_owner_only(tmp_path):
    store = EncryptedFileStore(tmp_path)
    await store.set_item("token", "secret-value")

    assert stat.S_IMODE(store.path.stat().st_mode) == 0o600
    assert stat.S_IMODE((tmp_path / KEY_FILE_NAME).stat().st_mode) == 0o600


@pytest.mark.asyncio
async def test_delete_removes_only_that_key(tmp_path):
    store = EncryptedFileStore(tmp_path)
    await store.set_item("a", "1")
    await store.set_item("b", "2")

    await store.delete_item("a")

    assert await store.get_item("a") is None
    assert await store.get_item("b") == "2"


@pytest.mark.asyncio
async def test_missing_key_returns_none(tmp_path):
    assert await EncryptedFileStore(tmp_path).get_item("nothing") is None


@pytest.mark.asyncio
async def test_configured_key_is_used_instead_of_key_file(tmp_path):
    key = Fernet.generate_key().decode()
    await EncryptedFileStore(tmp_path, key).set_item("token", "v")

    assert not (tmp_path / KEY_FILE_NAME).exists()
    assert await EncryptedFileStore(tmp_path, key).get_item("token") == "v"


@pytest.mark.asyncio
async def test_wrong_key_raises_encryption_key_error(tmp_path):
    await EncryptedFileStore(tmp_path, Fernet.generate_key().decode()).set_item("token", "v")

    with pytest.raises(EncryptionKeyError):
        await EncryptedFileStore(tmp_path, Fernet.generate_key().decode()).get_item("token")


@pytest.mark.asyncio
async def test_corrupt_file_raises_storage_error(tmp_path):
    store = EncryptedFileStore(tmp_path)
    store.path.write_text("{not json", encoding="utf-8")

    with pytest.raises(StorageError):
        await store.get_item("token")
