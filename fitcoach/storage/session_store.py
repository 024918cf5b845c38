"""Session store: single owner of the access token and the API URL override.

All reads and writes of shared client state go through SessionStore, so
invalidation (logout, 401) happens in exactly one place.
"""

from __future__ import annotations

from dataclasses import dataclass

from loguru import logger

from fitcoach.config.settings import Settings
from fitcoach.storage.secure_store import EncryptedFileStore, SecureStore

TOKEN_KEY = "fitcoach_access_token"
API_URL_OVERRIDE_KEY = "fitcoach_api_base_url_override"
BIOMETRIC_EMAIL_KEY = "biometric_email"
BIOMETRIC_TOKEN_KEY = "biometric_token"
PIN_KEY = "user_pin"


@dataclass(frozen=True)
class BiometricCredentials:
    """Credentials saved for biometric/PIN re-login."""

    email: str
    token: str


class SessionStore:
    def __init__(self, store: SecureStore):
        self._store = store

    # Access token

    async def get_token(self) -> str | None:
        token = await self._store.get_item(TOKEN_KEY)
        return token or None

    async def set_token(self, token: str) -> None:
        if not token:
            raise ValueError("Token cannot be empty")
        # Overwrites any previous token: one active token per store
        await self._store.set_item(TOKEN_KEY, token)
        logger.info("[SESSION_STORE] Token stored")

    async def clear_token(self) -> None:
        await self._store.delete_item(TOKEN_KEY)
        logger.info("[SESSION_STORE] Token cleared")

    async def has_token(self) -> bool:
        return await self.get_token() is not None

    # API base URL override

    async def get_api_url_override(self) -> str | None:
        value = await self._store.get_item(API_URL_OVERRIDE_KEY)
        return value or None

    async def set_api_url_override(self, url: str) -> None:
        url = url.strip()
        if not url.startswith(("http://", "https://")):
            raise ValueError(f"API URL override must start with http:// or https://, got: {url!r}")
        await self._store.set_item(API_URL_OVERRIDE_KEY, url)
        logger.info(f"[SESSION_STORE] API URL override set to {url}")

    async def clear_api_url_override(self) -> None:
        await self._store.delete_item(API_URL_OVERRIDE_KEY)
        logger.info("[SESSION_STORE] API URL override cleared")

    # Biometric / PIN login

    async def get_biometric_credentials(self) -> BiometricCredentials | None:
        email = await self._store.get_item(BIOMETRIC_EMAIL_KEY)
        token = await self._store.get_item(BIOMETRIC_TOKEN_KEY)
        if not email or not token:
            return None
        return BiometricCredentials(email=email, token=token)

    async def set_biometric_credentials(self, email: str, token: str) -> None:
        await self._store.set_item(BIOMETRIC_EMAIL_KEY, email)
        await self._store.set_item(BIOMETRIC_TOKEN_KEY, token)
        logger.info("[SESSION_STORE] Biometric credentials stored")

    async def clear_biometric_credentials(self) -> None:
        await self._store.delete_item(BIOMETRIC_EMAIL_KEY)
        await self._store.delete_item(BIOMETRIC_TOKEN_KEY)

    async def get_pin(self) -> str | None:
        return await self._store.get_item(PIN_KEY)

    async def set_pin(self, pin: str) -> None:
        if not (pin.isdigit() and 4 <= len(pin) <= 6):
            raise ValueError("PIN must be 4-6 digits")
        await self._store.set_item(PIN_KEY, pin)

    async def clear_pin(self) -> None:
        await self._store.delete_item(PIN_KEY)


def get_session_store(settings: Settings) -> SessionStore:
    """Session store backed by the encrypted file store in settings.storage_dir."""
    return SessionStore(EncryptedFileStore(settings.storage_dir, settings.encryption_key))
