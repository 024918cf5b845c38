"""Connectivity diagnostics: configuration, token presence, recent errors and endpoint probes."""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass, field
from typing import Any

from loguru import logger

from fitcoach.api.client import ApiClient
from fitcoach.api.diagnostics import ApiErrorRecord
from fitcoach.api.env import ApiBaseUrlInfo
from fitcoach.api.results import ApiFailure
from fitcoach.storage.session_store import SessionStore

PUBLIC_PROBES = ("/api/health", "/api/version", "/api/diagnostics", "/api/auth/me")
AUTHENTICATED_PROBES = ("/api/workouts/plan/status",)


@dataclass(frozen=True)
class ProbeResult:
    endpoint: str
    ok: bool
    status: int
    latency_ms: int
    error: str | None = None
    data: Any = None


@dataclass
class DiagnosticsReport:
    api_base_url: ApiBaseUrlInfo
    token_present: bool
    recent_errors: list[ApiErrorRecord] = field(default_factory=list)
    probes: list[ProbeResult] = field(default_factory=list)

    @property
    def healthy(self) -> bool:
        return not self.api_base_url.is_missing and all(p.ok for p in self.probes)


class DiagnosticsService:
    def __init__(self, client: ApiClient, session_store: SessionStore):
        self._client = client
        self._session_store = session_store

    async def _probe(self, endpoint: str) -> ProbeResult:
        started = time.perf_counter()
        # Probes report 401s; they never log the user out
        result = await self._client.get(endpoint, expire_session=False)
        latency_ms = int((time.perf_counter() - started) * 1000)
        if isinstance(result, ApiFailure):
            return ProbeResult(endpoint, False, result.status, latency_ms, error=result.error, data=result.data)
        return ProbeResult(endpoint, True, result.status, latency_ms, data=result.data)

    async def collect(self) -> DiagnosticsReport:
        """Build a diagnostics report. A missing base URL is reported, not raised."""
        base = await self._client.base_url_info()
        token_present = await self._session_store.has_token()

        probes: list[ProbeResult] = []
        if base.is_missing:
            logger.warning("[DIAGNOSTICS] API base URL missing, skipping endpoint probes")
        else:
            endpoints = PUBLIC_PROBES + (AUTHENTICATED_PROBES if token_present else ())
            probes = list(await asyncio.gather(*(self._probe(e) for e in endpoints)))
            failed = [p.endpoint for p in probes if not p.ok]
            logger.info(f"[DIAGNOSTICS] Probed {len(probes)} endpoints, {len(failed)} failed: {failed}")

        return DiagnosticsReport(
            api_base_url=base,
            token_present=token_present,
            recent_errors=self._client.diagnostics.recent(),
            probes=probes,
        )
