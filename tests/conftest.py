"""Root conftest for all tests.

Shared fixtures: isolated settings, in-memory session storage, a scripted
backend served through httpx.MockTransport and a recording sleep.
"""

from collections.abc import Callable
from pathlib import Path

import httpx
import pytest

from fitcoach.api.client import ApiClient
from fitcoach.api.session_expiry import SessionExpiryHandler
from fitcoach.config.settings import Settings
from fitcoach.storage.secure_store import MemorySecureStore
from fitcoach.storage.session_store import SessionStore

TEST_BASE_URL = "https://api.fitcoach.test"

Handler = Callable[[httpx.Request], httpx.Response]


def make_settings(tmp_path: Path | None = None, **overrides) -> Settings:
    """Settings isolated from the environment and .env files."""
    values = {
        "FITCOACH_API_BASE_URL": TEST_BASE_URL,
        "FITCOACH_RETRY_DELAY": 1.5,
        "FITCOACH_QA_LOGIN_ENABLED": False,
    }
    if tmp_path is not None:
        values["FITCOACH_STORAGE_DIR"] = str(tmp_path)
    values.update(overrides)
    return Settings(_env_file=None, **values)


class ScriptedBackend:
    """Serves queued responses (or raises queued exceptions) and records every request."""

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self._queue: list[httpx.Response | Exception | Handler] = []

    def queue(self, *items: httpx.Response | Exception | Handler) -> "ScriptedBackend":
        self._queue.extend(items)
        return self

    def json(self, status: int, body) -> "ScriptedBackend":
        return self.queue(httpx.Response(status, json=body))

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if not self._queue:
            raise AssertionError(f"Unexpected request: {request.method} {request.url}")
        item = self._queue.pop(0)
        if isinstance(item, Exception):
            raise item
        if isinstance(item, httpx.Response):
            return item
        return item(request)

    @property
    def paths(self) -> list[str]:
        return [r.url.path for r in self.requests]


class RecordingAlerts:
    def __init__(self):
        self.alerts: list[tuple[str, str]] = []

    def show_alert(self, title: str, message: str) -> None:
        self.alerts.append((title, message))


class RecordingNavigator:
    def __init__(self):
        self.routes: list[str] = []

    def navigate(self, route: str) -> None:
        self.routes.append(route)


class RecordingSleep:
    def __init__(self):
        self.calls: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


@pytest.fixture
def settings(tmp_path) -> Settings:
    return make_settings(tmp_path)


@pytest.fixture
def secure_store() -> MemorySecureStore:
    return MemorySecureStore()


@pytest.fixture
def session_store(secure_store) -> SessionStore:
    return SessionStore(secure_store)


@pytest.fixture
def backend() -> ScriptedBackend:
    return ScriptedBackend()


@pytest.fixture
def alerts() -> RecordingAlerts:
    return RecordingAlerts()


@pytest.fixture
def navigator() -> RecordingNavigator:
    return RecordingNavigator()


@pytest.fixture
def sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def api_client(session_store, settings, backend, alerts, navigator, sleep) -> ApiClient:
    """ApiClient wired to the scripted backend; nothing leaves the process."""
    expiry = SessionExpiryHandler(session_store, alerts=alerts, navigator=navigator)
    return ApiClient(
        session_store,
        settings,
        session_expiry=expiry,
        transport=httpx.MockTransport(backend),
        sleep=sleep,
    )
