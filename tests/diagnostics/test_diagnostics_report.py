"""Tests for the diagnostics report."""

import httpx
import pytest

from conftest import make_settings
from fitcoach.api.client import ApiClient
from fitcoach.diagnostics.report import AUTHENTICATED_PROBES, PUBLIC_PROBES, DiagnosticsService


def _routing_backend(statuses: dict[str, int]):
    seen: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request.url.path)
        return httpx.Response(statuses.get(request.url.path, 200), json={"path": request.url.path})

    return handler, seen


@pytest.mark.asyncio
async def test_probes_public_endpoints_without_token(session_store, settings, sleep):
    handler, seen = _routing_backend({})
    client = ApiClient(session_store, settings, transport=httpx.MockTransport(handler), sleep=sleep)

    report = await DiagnosticsService(client, session_store).collect()

    assert report.token_present is False
    assert sorted(seen) == sorted(PUBLIC_PROBES)
    assert report.healthy is True
    assert report.api_base_url.source == "env"


@pytest.mark.asyncio
async def test_plan_status_probed_when_token_present(session_store, settings, sleep):
    await session_store.set_token("tok")
    handler, seen = _routing_backend({})
    client = ApiClient(session_store, settings, transport=httpx.MockTransport(handler), sleep=sleep)

    report = await DiagnosticsService(client, session_store).collect()

    assert sorted(seen) == sorted(PUBLIC_PROBES + AUTHENTICATED_PROBES)
    assert report.token_present is True


@pytest.mark.asyncio
async def test_probe_401_does_not_expire_session(session_store, settings, sleep):
    await session_store.set_token("tok")
    handler, _ = _routing_backend({"/api/auth/me": 401})
    client = ApiClient(session_store, settings, transport=httpx.MockTransport(handler), sleep=sleep)

    report = await DiagnosticsService(client, session_store).collect()

    assert await session_store.get_token() == "tok"
    me = next(p for p in report.probes if p.endpoint == "/api/auth/me")
    assert me.ok is False
    assert me.status == 401
    assert report.healthy is False
    assert [r.status for r in report.recent_errors] == [401]


@pytest.mark.asyncio
async def test_missing_base_url_is_reported(session_store, sleep, tmp_path, backend):
    settings = make_settings(tmp_path, FITCOACH_API_BASE_URL="")
    client = ApiClient(session_store, settings, transport=httpx.MockTransport(backend), sleep=sleep)

    report = await DiagnosticsService(client, session_store).collect()

    assert report.api_base_url.is_missing
    assert report.probes == []
    assert report.healthy is False
    assert backend.requests == []
