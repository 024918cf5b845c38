"""Secure key/value storage backends.

Every value written by EncryptedFileStore is Fernet-encrypted before it
touches disk, and the file is created with owner-only permissions.
Callers go through fitcoach.storage.session_store; nothing else should
talk to a SecureStore directly.
"""

from __future__ import annotations

import asyncio
import json
import os
from abc import ABC, abstractmethod
from pathlib import Path

from loguru import logger

from fitcoach.core.encryption import ValueCipher, load_or_create_key
from fitcoach.core.errors import StorageError

STORE_FILE_NAME = "secure_store.json"


class SecureStore(ABC):
    """Async get/set/delete of small string secrets."""

    @abstractmethod
    async def get_item(self, key: str) -> str | None: ...

    @abstractmethod
    async def set_item(self, key: str, value: str) -> None: ...

    @abstractmethod
    async def delete_item(self, key: str) -> None: ...


class MemorySecureStore(SecureStore):
    """Volatile store. Used for --ephemeral CLI runs and tests."""

    def __init__(self, initial: dict[str, str] | None = None):
        self._items: dict[str, str] = dict(initial or {})

    async def get_item(self, key: str) -> str | None:
        return self._items.get(key)

    async def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    async def delete_item(self, key: str) -> None:
        self._items.pop(key, None)


class EncryptedFileStore(SecureStore):
    """Fernet-encrypted JSON file in the storage directory.

    Layout: {"<key>": "<fernet token>", ...}. Writes go to a temp file that
    is then renamed over the store, so a crash never leaves a half-written
    file behind.
    """

    def __init__(self, storage_dir: Path, encryption_key: str = ""):
        self._dir = storage_dir
        self._path = storage_dir / STORE_FILE_NAME
        self._cipher = ValueCipher(load_or_create_key(storage_dir, encryption_key))

    @property
    def path(self) -> Path:
        return self._path

    def _read_all(self) -> dict[str, str]:
        if not self._path.exists():
            return {}
        try:
            raw = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"[SECURE_STORE] Failed to read {self._path}: {e}")
            raise StorageError(f"Secure store at {self._path} is unreadable: {e}") from e
        if not isinstance(raw, dict):
            raise StorageError(f"Secure store at {self._path} is corrupt (expected an object)")
        return raw

    def _write_all(self, items: dict[str, str]) -> None:
        tmp_path = self._path.with_suffix(".tmp")
        try:
            self._dir.mkdir(parents=True, exist_ok=True)
            fd = os.open(tmp_path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(items, handle)
            os.replace(tmp_path, self._path)
        except OSError as e:
            logger.error(f"[SECURE_STORE] Failed to write {self._path}: {e}")
            raise StorageError(f"Secure store at {self._path} is not writable: {e}") from e

    def _get_sync(self, key: str) -> str | None:
        encrypted = self._read_all().get(key)
        if encrypted is None:
            return None
        return self._cipher.decrypt(encrypted)

    def _set_sync(self, key: str, value: str) -> None:
        items = self._read_all()
        items[key] = self._cipher.encrypt(value)
        self._write_all(items)

    def _delete_sync(self, key: str) -> None:
        items = self._read_all()
        if key in items:
            del items[key]
            self._write_all(items)

    async def get_item(self, key: str) -> str | None:
        return await asyncio.to_thread(self._get_sync, key)

    async def set_item(self, key: str, value: str) -> None:
        await asyncio.to_thread(self._set_sync, key, value)

    async def delete_item(self, key: str) -> None:
        await asyncio.to_thread(self._delete_sync, key)
