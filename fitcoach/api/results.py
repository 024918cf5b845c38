"""Discriminated result types returned by every ApiClient call.

Callers branch on ``result.ok``; ordinary failures never raise.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal

from fitcoach.core.errors import ErrorKind


@dataclass(frozen=True)
class ApiSuccess:
    data: Any
    status: int
    ok: Literal[True] = True


@dataclass(frozen=True)
class ApiFailure:
    error: str
    status: int
    kind: ErrorKind
    data: Any = None
    ok: Literal[False] = False


ApiResult = ApiSuccess | ApiFailure
