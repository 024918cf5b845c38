"""API base URL resolution.

Order: persisted runtime override -> configured FITCOACH_API_BASE_URL -> missing.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from fitcoach.config.settings import Settings
from fitcoach.storage.session_store import SessionStore

ApiBaseUrlSource = Literal["override", "env", "missing"]


@dataclass(frozen=True)
class ApiBaseUrlInfo:
    value: str | None
    source: ApiBaseUrlSource

    @property
    def is_missing(self) -> bool:
        return self.value is None


def normalize_base_url(value: str | None) -> str | None:
    """Strip trailing slashes and a trailing /api segment.

    Endpoints already start with /api, so "https://host/api/" and
    "https://host" resolve to the same base.
    """
    if not value:
        return None
    trimmed = value.strip().rstrip("/")
    if trimmed.endswith("/api"):
        trimmed = trimmed[: -len("/api")]
    return trimmed or None


async def resolve_api_base_url(session_store: SessionStore, settings: Settings) -> ApiBaseUrlInfo:
    override = normalize_base_url(await session_store.get_api_url_override())
    if override:
        return ApiBaseUrlInfo(value=override, source="override")

    configured = normalize_base_url(settings.api_base_url)
    if configured:
        return ApiBaseUrlInfo(value=configured, source="env")

    return ApiBaseUrlInfo(value=None, source="missing")
