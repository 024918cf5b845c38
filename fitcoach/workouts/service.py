"""Workout plan and stats endpoints. All calls require a stored token."""

from __future__ import annotations

from loguru import logger

from fitcoach.api.client import ApiClient
from fitcoach.api.results import ApiResult


class WorkoutService:
    def __init__(self, client: ApiClient):
        self._client = client

    async def ensure_plan(self) -> ApiResult:
        """Idempotently make sure the user has a generated plan."""
        result = await self._client.post("/api/workouts/plan/ensure", auth=True)
        if result.ok and isinstance(result.data, dict):
            logger.info(
                f"[WORKOUTS] Plan ensured: generated={result.data.get('generated')} "
                f"workouts={result.data.get('workoutsCount')}"
            )
        return result

    async def plan_status(self, *, expire_session: bool = True) -> ApiResult:
        return await self._client.get("/api/workouts/plan/status", auth=True, expire_session=expire_session)

    async def workout_summary(self, workout_id: int | str) -> ApiResult:
        return await self._client.get(f"/api/stats/workout-summary/{workout_id}", auth=True)

    async def favorites(self) -> ApiResult:
        return await self._client.get("/api/stats/favorites", auth=True)
