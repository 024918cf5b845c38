"""Retry policy for transport-level failures.

Only network failures are retried; HTTP error statuses are final.
RetryState is a tiny state machine so the policy is testable without timers.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class RetryDecision(StrEnum):
    RETRY = "retry"
    GIVE_UP = "give_up"


@dataclass(frozen=True)
class RetryPolicy:
    max_attempts: int = 2
    delay_seconds: float = 1.5

    def start(self) -> RetryState:
        return RetryState(policy=self)


@dataclass
class RetryState:
    policy: RetryPolicy
    attempts: int = 0

    def begin_attempt(self) -> int:
        self.attempts += 1
        return self.attempts

    def record_failure(self) -> RetryDecision:
        if self.attempts < self.policy.max_attempts:
            return RetryDecision.RETRY
        return RetryDecision.GIVE_UP

    @property
    def delay(self) -> float:
        """Fixed delay before the next attempt."""
        return self.policy.delay_seconds
