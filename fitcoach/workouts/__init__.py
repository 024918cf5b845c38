"""Workout plan and stats client."""

from fitcoach.workouts.service import WorkoutService

__all__ = ["WorkoutService"]
