"""Bounded log of recent failed requests for the diagnostics screen."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from datetime import UTC, datetime


@dataclass(frozen=True)
class ApiErrorRecord:
    timestamp: str
    endpoint: str
    status: int
    body: str


class DiagnosticLog:
    """Fixed-capacity ring buffer; the oldest record is evicted first."""

    def __init__(self, capacity: int = 5, body_limit: int = 200):
        if capacity < 1:
            raise ValueError("capacity must be >= 1")
        self._records: deque[ApiErrorRecord] = deque(maxlen=capacity)
        self._body_limit = body_limit

    @property
    def capacity(self) -> int:
        return self._records.maxlen or 0

    def record(self, endpoint: str, status: int, body: str) -> ApiErrorRecord:
        entry = ApiErrorRecord(
            timestamp=datetime.now(UTC).isoformat(),
            endpoint=endpoint,
            status=status,
            body=body[: self._body_limit],
        )
        self._records.append(entry)
        return entry

    def recent(self) -> list[ApiErrorRecord]:
        """Records, newest first."""
        return list(reversed(self._records))

    def clear(self) -> None:
        self._records.clear()

    def __len__(self) -> int:
        return len(self._records)
