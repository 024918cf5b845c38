"""Value encryption utilities using Fernet symmetric encryption.

Provides encryption at rest for everything kept in the secure store.
"""

from __future__ import annotations

import os
from pathlib import Path

from cryptography.fernet import Fernet, InvalidToken
from loguru import logger

from fitcoach.core.errors import EncryptionError, EncryptionKeyError

KEY_FILE_NAME = "store.key"


def load_or_create_key(storage_dir: Path, configured_key: str = "") -> bytes:
    """Get the Fernet key from configuration or the key file in storage_dir.

    Fernet keys are already base64-encoded strings, so configured keys are used
    directly. Without a configured key, one is generated once and written with
    owner-only permissions so later runs can decrypt the store.

    Args:
        storage_dir: Directory that holds the key file
        configured_key: Optional key from FITCOACH_ENCRYPTION_KEY

    Returns:
        Fernet encryption key as bytes

    Raises:
        EncryptionError: If the key cannot be read or created
    """
    if configured_key:
        return configured_key.encode()

    key_path = storage_dir / KEY_FILE_NAME
    try:
        if key_path.exists():
            return key_path.read_bytes().strip()

        storage_dir.mkdir(parents=True, exist_ok=True)
        key = Fernet.generate_key()
        fd = os.open(key_path, os.O_WRONLY | os.O_CREAT | os.O_EXCL, 0o600)
        with os.fdopen(fd, "wb") as handle:
            handle.write(key)
    except OSError as e:
        logger.error(f"Failed to load or create encryption key at {key_path}: {e}")
        raise EncryptionError(f"Cannot access encryption key file {key_path}: {e}") from e

    logger.info(f"Generated new secure store key at {key_path}")
    return key


class ValueCipher:
    """Thin wrapper around a Fernet cipher for string values."""

    def __init__(self, key: bytes):
        try:
            self._fernet = Fernet(key)
        except (ValueError, TypeError) as e:
            raise EncryptionError("Invalid encryption key format. Must be a Fernet key (base64-encoded string).") from e

    def encrypt(self, value: str) -> str:
        """Encrypt a string for storage.

        Raises:
            EncryptionError: If encryption fails
        """
        try:
            return self._fernet.encrypt(value.encode()).decode()
        except Exception as e:
            logger.error(f"Value encryption failed: {type(e).__name__}")
            raise EncryptionError(f"Failed to encrypt value: {e}") from e

    def decrypt(self, token: str) -> str:
        """Decrypt a value previously produced by encrypt().

        Raises:
            EncryptionKeyError: If decryption fails due to the wrong key
            EncryptionError: If decryption fails for other reasons
        """
        try:
            return self._fernet.decrypt(token.encode()).decode()
        except InvalidToken as e:
            error_msg = (
                "Secure store decryption failed: wrong encryption key. "
                "This usually means FITCOACH_ENCRYPTION_KEY changed or the key file was replaced. "
                "Clear the store and log in again."
            )
            logger.error(error_msg)
            raise EncryptionKeyError(error_msg) from e
        except Exception as e:
            logger.error(f"Value decryption failed: {type(e).__name__}")
            raise EncryptionError(f"Failed to decrypt value: {e}") from e
