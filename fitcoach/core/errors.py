"""Error types for the fitcoach client.

Ordinary request failures are returned as values (see fitcoach.api.results).
The exceptions below are reserved for conditions a caller cannot route around.
"""

from enum import StrEnum


class ErrorKind(StrEnum):
    """Failure taxonomy carried by every ApiFailure."""

    CONFIGURATION = "configuration"  # base URL missing
    TRANSPORT = "transport"  # network unreachable after the retry
    PROTOCOL = "protocol"  # non-JSON response body
    AUTHENTICATION = "authentication"  # 401, or no token for an authenticated call
    APPLICATION = "application"  # structured error payload from the backend


class StorageError(Exception):
    """Raised when the secure store cannot be read or written."""


class EncryptionError(Exception):
    """Raised when encryption/decryption operations fail."""


class EncryptionKeyError(EncryptionError):
    """Raised when decryption fails due to a wrong encryption key.

    This typically occurs when FITCOACH_ENCRYPTION_KEY changed or the key
    file in the storage directory was replaced.
    """


class QaLoginDisabledError(Exception):
    """Raised when the development-only login is used while disabled."""

    def __init__(self, message: str | None = None):
        self.message = message or "QA login is disabled. Set FITCOACH_QA_LOGIN_ENABLED=true in a development environment."
        super().__init__(self.message)
