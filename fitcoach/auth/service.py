"""Authentication service.

Wraps the auth endpoints and keeps the stored access token in sync: a token
is saved on every successful login or registration and removed on logout.
"""

from __future__ import annotations

import hmac
from typing import Any

from loguru import logger

from fitcoach.api.client import ApiClient
from fitcoach.api.results import ApiFailure, ApiResult, ApiSuccess
from fitcoach.coaches.catalog import CoachId
from fitcoach.config.settings import Settings
from fitcoach.core.errors import ErrorKind, QaLoginDisabledError
from fitcoach.onboarding.schemas import OnboardingAnswers
from fitcoach.storage.session_store import SessionStore


class AuthService:
    def __init__(self, client: ApiClient, session_store: SessionStore, settings: Settings):
        self._client = client
        self._session_store = session_store
        self._settings = settings

    async def _store_token_from(self, result: ApiResult, fallback_error: str) -> ApiResult:
        """Persist accessToken from a successful auth response.

        A 2xx body without a token is treated as a failed login.
        """
        if isinstance(result, ApiFailure):
            return result

        data = result.data if isinstance(result.data, dict) else {}
        token = data.get("accessToken")
        if not isinstance(token, str) or not token:
            logger.warning(f"[AUTH] Response had no access token (status={result.status})")
            return ApiFailure(
                error=data.get("error") or fallback_error,
                status=result.status,
                kind=ErrorKind.APPLICATION,
                data=result.data,
            )

        await self._session_store.set_token(token)
        return result

    async def login(self, email: str, password: str) -> ApiResult:
        logger.info("[AUTH] Logging in")
        result = await self._client.post("/api/auth/login", {"email": email.strip(), "password": password})
        return await self._store_token_from(result, "Login failed")

    async def register(self, payload: dict[str, Any]) -> ApiResult:
        logger.info("[AUTH] Registering new account")
        result = await self._client.post("/api/auth/register", payload)
        return await self._store_token_from(result, "Registration failed")

    async def register_from_onboarding(
        self,
        answers: OnboardingAnswers,
        coach_id: CoachId,
        email: str,
        password: str,
    ) -> ApiResult:
        payload = answers.to_registration_payload(coach=coach_id.value, email=email.strip(), password=password)
        return await self.register(payload)

    async def verify_auth(self, *, expire_session: bool = True) -> ApiResult:
        """Check the stored token against GET /api/auth/me."""
        return await self._client.get("/api/auth/me", auth=True, expire_session=expire_session)

    async def logout(self) -> None:
        """Notify the backend, then clear the token whatever the outcome."""
        # Token is cleared below either way, so a 401 here is not a session expiry
        result = await self._client.post("/api/auth/logout", expire_session=False)
        if not result.ok:
            logger.warning(f"[AUTH] Logout request failed ({result.error}), clearing local session anyway")
        await self._session_store.clear_token()

    async def request_password_reset(self, email: str) -> ApiResult:
        return await self._client.post("/api/auth/forgot-password", {"email": email.strip()})

    async def reset_password(self, token: str, new_password: str) -> ApiResult:
        return await self._client.post("/api/auth/reset-password", {"token": token, "newPassword": new_password})

    async def qa_login_as(self, profile: str) -> ApiResult:
        """Development-only login as a seeded test profile.

        Raises:
            QaLoginDisabledError: If FITCOACH_QA_LOGIN_ENABLED is not set
        """
        if not self._settings.qa_login_enabled:
            raise QaLoginDisabledError()
        logger.info(f"[AUTH] QA login as profile {profile}")
        result = await self._client.post("/api/qa/login-as", {"profile": profile})
        return await self._store_token_from(result, "Login failed")

    async def enable_biometric_login(self, email: str, pin: str | None = None) -> bool:
        """Save the current token for quick re-login. Returns False when logged out.

        Args:
            email: Account email shown on the re-login prompt
            pin: Optional 4-6 digit PIN required by pin_login
        """
        token = await self._session_store.get_token()
        if token is None:
            logger.warning("[AUTH] Cannot enable biometric login without an active session")
            return False
        if pin is not None:
            await self._session_store.set_pin(pin)
        await self._session_store.set_biometric_credentials(email.strip(), token)
        return True

    async def biometric_login(self) -> ApiResult:
        """Restore the saved token and verify it with the backend.

        Saved credentials are dropped only when the backend rejects the token
        with a 401. Any other failure restores the previous session untouched.
        """
        credentials = await self._session_store.get_biometric_credentials()
        if credentials is None:
            return ApiFailure(error="Biometric login is not set up", status=0, kind=ErrorKind.AUTHENTICATION)

        previous_token = await self._session_store.get_token()
        await self._session_store.set_token(credentials.token)
        result = await self.verify_auth(expire_session=False)
        if isinstance(result, ApiSuccess):
            logger.info("[AUTH] Biometric login succeeded")
            return result

        if previous_token is None:
            await self._session_store.clear_token()
        else:
            await self._session_store.set_token(previous_token)

        if result.status == 401:
            logger.warning("[AUTH] Saved biometric token rejected, clearing credentials")
            await self._session_store.clear_biometric_credentials()
        else:
            logger.warning(f"[AUTH] Biometric login could not be verified ({result.error}), keeping credentials")
        return result

    async def pin_login(self, pin: str) -> ApiResult:
        """Biometric re-login gated by the saved PIN."""
        saved = await self._session_store.get_pin()
        if saved is None:
            return ApiFailure(error="PIN login is not set up", status=0, kind=ErrorKind.AUTHENTICATION)
        if not hmac.compare_digest(saved.encode(), pin.encode()):
            logger.warning("[AUTH] Incorrect PIN")
            return ApiFailure(error="Incorrect PIN", status=0, kind=ErrorKind.AUTHENTICATION)
        return await self.biometric_login()

    async def disable_biometric_login(self) -> None:
        await self._session_store.clear_biometric_credentials()
        await self._session_store.clear_pin()
        logger.info("[AUTH] Biometric login disabled")
