"""Async HTTP client for the coaching backend.

- Bearer token from the session store on every request
- One retry after a fixed delay on transport failure
- JSON-only responses
- 401 clears the session and routes to login
- Never raises for ordinary failures: every call returns an ApiResult
"""

from __future__ import annotations

import asyncio
import json
from collections.abc import Awaitable, Callable
from typing import Any

import httpx
from loguru import logger

from fitcoach.api.diagnostics import DiagnosticLog
from fitcoach.api.env import ApiBaseUrlInfo, resolve_api_base_url
from fitcoach.api.results import ApiFailure, ApiResult, ApiSuccess
from fitcoach.api.retry import RetryDecision, RetryPolicy
from fitcoach.api.session_expiry import SessionExpiryHandler
from fitcoach.config.settings import Settings
from fitcoach.core.errors import ErrorKind
from fitcoach.storage.session_store import SessionStore

Sleep = Callable[[float], Awaitable[None]]


class ApiClient:
    def __init__(
        self,
        session_store: SessionStore,
        settings: Settings,
        *,
        session_expiry: SessionExpiryHandler | None = None,
        diagnostics: DiagnosticLog | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        sleep: Sleep = asyncio.sleep,
    ):
        """Initialize the API client.

        Args:
            session_store: Owner of the token and the base URL override
            settings: Client settings (timeouts, retry policy, limits)
            session_expiry: 401 handler; defaults to log-only alerts and no navigation
            diagnostics: Failure log; created from settings when omitted
            transport: Optional httpx transport (tests pass httpx.MockTransport)
            sleep: Awaitable sleep used between retry attempts
        """
        self._session_store = session_store
        self._settings = settings
        self._session_expiry = session_expiry or SessionExpiryHandler(session_store)
        self.diagnostics = diagnostics or DiagnosticLog(
            capacity=settings.diagnostics_capacity,
            body_limit=settings.diagnostics_body_limit,
        )
        self._retry_policy = RetryPolicy(
            max_attempts=settings.max_transport_attempts,
            delay_seconds=settings.retry_delay_seconds,
        )
        self._sleep = sleep
        self._http = httpx.AsyncClient(transport=transport, timeout=settings.request_timeout_seconds)

    async def __aenter__(self) -> ApiClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def base_url_info(self) -> ApiBaseUrlInfo:
        return await resolve_api_base_url(self._session_store, self._settings)

    async def _headers(self, extra: dict[str, str] | None) -> tuple[dict[str, str], bool]:
        headers = {"Content-Type": "application/json", "Accept": "application/json"}
        if extra:
            headers.update(extra)
        token = await self._session_store.get_token()
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers, token is not None

    async def _send(
        self,
        method: str,
        url: str,
        endpoint: str,
        headers: dict[str, str],
        body: Any,
    ) -> httpx.Response | ApiFailure:
        """Send with the transport retry policy. Returns the response or a terminal failure."""
        state = self._retry_policy.start()
        content = json.dumps(body) if body is not None else None

        while True:
            attempt = state.begin_attempt()
            try:
                return await self._http.request(method, url, headers=headers, content=content)
            except httpx.TransportError as e:
                decision = state.record_failure()
                if decision == RetryDecision.RETRY:
                    logger.warning(
                        f"[API_CLIENT] Transport failure on {method} {endpoint} "
                        f"(attempt {attempt}/{self._retry_policy.max_attempts}): {e!r}. "
                        f"Retrying in {state.delay}s"
                    )
                    await self._sleep(state.delay)
                    continue

                message = str(e) or type(e).__name__
                logger.error(f"[API_CLIENT] Request failed: {method} {endpoint} after {attempt} attempts: {message}")
                self.diagnostics.record(endpoint, 0, message)
                return ApiFailure(
                    error=f"Network request failed: {message}",
                    status=0,
                    kind=ErrorKind.TRANSPORT,
                )

    async def request(
        self,
        method: str,
        endpoint: str,
        *,
        body: Any = None,
        headers: dict[str, str] | None = None,
        auth: bool = False,
        expire_session: bool = True,
    ) -> ApiResult:
        """Perform a request against the configured backend.

        Args:
            method: HTTP method
            endpoint: Path starting with "/", e.g. "/api/auth/me"
            body: JSON-serializable request body
            headers: Extra headers
            auth: Require a stored token; fail fast without one
            expire_session: Run the 401 handler on 401 responses

        Returns:
            ApiSuccess or ApiFailure
        """
        base = await self.base_url_info()
        if base.is_missing:
            message = "API base URL is not configured. Set FITCOACH_API_BASE_URL or an override."
            logger.error(f"[API_CLIENT] {message} ({method} {endpoint})")
            self.diagnostics.record(endpoint, 0, message)
            return ApiFailure(error=message, status=0, kind=ErrorKind.CONFIGURATION)

        request_headers, has_token = await self._headers(headers)
        if auth and not has_token:
            logger.warning(f"[API_CLIENT] No access token for authenticated call {method} {endpoint}")
            return ApiFailure(error="Not logged in", status=0, kind=ErrorKind.AUTHENTICATION)

        logger.debug(f"[API_CLIENT] {method} {endpoint} (base={base.source})")
        sent = await self._send(method, f"{base.value}{endpoint}", endpoint, request_headers, body)
        if isinstance(sent, ApiFailure):
            return sent
        return await self._interpret(sent, endpoint, expire_session=expire_session)

    async def _interpret(self, response: httpx.Response, endpoint: str, *, expire_session: bool) -> ApiResult:
        status = response.status_code

        if status == 204:
            return ApiSuccess(data=None, status=status)

        content_type = response.headers.get("content-type", "")
        data: Any = None
        parsed = False
        if "json" in content_type:
            try:
                data = response.json()
                parsed = True
            except ValueError:
                parsed = False

        if not parsed:
            text = response.text
            self.diagnostics.record(endpoint, status, text)
            logger.error(f"[API_CLIENT] Non-JSON response from {endpoint} (status={status}, content-type={content_type!r})")
            return ApiFailure(
                error=f"Server returned non-JSON response: {text[: self._settings.error_preview_limit]}",
                status=status,
                kind=ErrorKind.PROTOCOL,
            )

        if status == 401:
            self.diagnostics.record(endpoint, status, json.dumps(data))
            if expire_session:
                await self._session_expiry.handle()
            return ApiFailure(
                error=_error_message(data) or "Session expired",
                status=status,
                kind=ErrorKind.AUTHENTICATION,
                data=data,
            )

        if not response.is_success:
            self.diagnostics.record(endpoint, status, json.dumps(data))
            logger.warning(f"[API_CLIENT] {endpoint} failed with status {status}")
            return ApiFailure(
                error=_error_message(data) or f"Request failed with status {status}",
                status=status,
                kind=ErrorKind.APPLICATION,
                data=data,
            )

        return ApiSuccess(data=data, status=status)

    async def get(self, endpoint: str, **kwargs: Any) -> ApiResult:
        return await self.request("GET", endpoint, **kwargs)

    async def post(self, endpoint: str, body: Any = None, **kwargs: Any) -> ApiResult:
        return await self.request("POST", endpoint, body=body, **kwargs)

    async def put(self, endpoint: str, body: Any = None, **kwargs: Any) -> ApiResult:
        return await self.request("PUT", endpoint, body=body, **kwargs)

    async def delete(self, endpoint: str, **kwargs: Any) -> ApiResult:
        return await self.request("DELETE", endpoint, **kwargs)


def _error_message(data: Any) -> str | None:
    if isinstance(data, dict):
        for key in ("error", "message"):
            value = data.get(key)
            if isinstance(value, str) and value:
                return value
    return None
