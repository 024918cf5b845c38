"""Onboarding wizard state machine.

One state per step in ONBOARDING_STEPS. "next" is gated by the step's
validation predicate; "back" from the first step leaves the wizard for the
login screen. The terminal step runs coach matching and hands the answers to
the registration collaborator. The wizard never performs I/O itself.
"""

from __future__ import annotations

import random
from collections.abc import Awaitable, Callable
from datetime import date
from enum import StrEnum
from typing import Any

from loguru import logger

from fitcoach.coaches.catalog import CoachId
from fitcoach.coaches.matching import match_coach
from fitcoach.onboarding import validation as v
from fitcoach.onboarding.schemas import OnboardingAnswers
from fitcoach.onboarding.validation import StepValidation, StepValidator


class OnboardingStep(StrEnum):
    WELCOME = "welcome"
    NAME = "name"
    GENDER = "gender"
    GOAL = "goal"
    WORKOUT_TYPE = "workout-type"
    TRAINING_DAYS = "training-days"
    WORKOUT_DURATION = "workout-duration"
    FITNESS_LEVEL = "fitness-level"
    BODY_METRICS = "body-metrics"
    EQUIPMENT = "equipment"
    LIMITATIONS = "limitations"
    ACTIVITY_LEVEL = "activity-level"
    MOTIVATION_STYLE = "motivation-style"
    COACHING_STYLE = "coaching-style"
    COMPLETE = "complete"


ONBOARDING_STEPS: tuple[OnboardingStep, ...] = tuple(OnboardingStep)

STEP_VALIDATORS: dict[OnboardingStep, StepValidator] = {
    OnboardingStep.WELCOME: v.always_valid,
    OnboardingStep.NAME: v.validate_name,
    OnboardingStep.GENDER: v.validate_gender,
    OnboardingStep.GOAL: v.validate_goal,
    OnboardingStep.WORKOUT_TYPE: v.validate_workout_type,
    OnboardingStep.TRAINING_DAYS: v.validate_training_days,
    OnboardingStep.WORKOUT_DURATION: v.validate_workout_duration,
    OnboardingStep.FITNESS_LEVEL: v.validate_fitness_level,
    OnboardingStep.BODY_METRICS: v.validate_body_metrics,
    OnboardingStep.EQUIPMENT: v.validate_equipment,
    OnboardingStep.LIMITATIONS: v.validate_limitations,
    OnboardingStep.ACTIVITY_LEVEL: v.validate_activity_level,
    OnboardingStep.MOTIVATION_STYLE: v.validate_motivation_style,
    OnboardingStep.COACHING_STYLE: v.validate_coaching_style,
    OnboardingStep.COMPLETE: v.always_valid,
}


class Transition(StrEnum):
    ADVANCED = "advanced"
    BLOCKED = "blocked"
    COMPLETED = "completed"
    MOVED_BACK = "moved_back"
    EXITED_TO_LOGIN = "exited_to_login"


CompletionHandler = Callable[[OnboardingAnswers, CoachId], Awaitable[None] | None]
ExitHandler = Callable[[], Awaitable[None] | None]


class OnboardingWizard:
    def __init__(
        self,
        on_complete: CompletionHandler | None = None,
        on_exit_to_login: ExitHandler | None = None,
        *,
        answers: OnboardingAnswers | None = None,
        rng: random.Random | None = None,
        today: Callable[[], date] = date.today,
    ):
        """Initialize the wizard.

        Args:
            on_complete: Registration collaborator, called with the answers and matched coach
            on_exit_to_login: Called when "back" is pressed on the first step
            answers: Pre-filled answers (a fresh record when omitted)
            rng: Random source passed to the coach matcher
            today: Clock used for the age check
        """
        self.answers = answers or OnboardingAnswers()
        self._on_complete = on_complete
        self._on_exit_to_login = on_exit_to_login
        self._rng = rng
        self._today = today
        self._index = 0
        self.matched_coach: CoachId | None = None
        self.last_message = ""

    @property
    def step(self) -> OnboardingStep:
        return ONBOARDING_STEPS[self._index]

    @property
    def is_first_step(self) -> bool:
        return self._index == 0

    @property
    def is_terminal_step(self) -> bool:
        return self._index == len(ONBOARDING_STEPS) - 1

    @property
    def progress(self) -> tuple[int, int]:
        """(1-based step number, total steps)."""
        return self._index + 1, len(ONBOARDING_STEPS)

    def update(self, **fields: Any) -> None:
        """Merge answer fields; pydantic re-validates each assignment.

        Raises:
            ValueError: If a field name is unknown or a value has the wrong type
        """
        for name, value in fields.items():
            if name not in OnboardingAnswers.model_fields:
                raise ValueError(f"Unknown onboarding field: {name}")
            setattr(self.answers, name, value)

    def can_continue(self) -> StepValidation:
        return STEP_VALIDATORS[self.step](self.answers, self._today())

    async def next(self) -> Transition:
        result = self.can_continue()
        if not result.ok:
            self.last_message = result.message
            logger.debug(f"[ONBOARDING] Blocked on step {self.step.value}: {result.message}")
            return Transition.BLOCKED

        self.last_message = ""
        if self.is_terminal_step:
            return await self._complete()

        self._index += 1
        logger.debug(f"[ONBOARDING] Advanced to step {self.step.value}")
        return Transition.ADVANCED

    async def back(self) -> Transition:
        self.last_message = ""
        if self.is_first_step:
            logger.info("[ONBOARDING] Back from first step, exiting to login")
            await _call(self._on_exit_to_login)
            return Transition.EXITED_TO_LOGIN
        self._index -= 1
        return Transition.MOVED_BACK

    async def _complete(self) -> Transition:
        coach_id = match_coach(self.answers, self._rng)
        self.matched_coach = coach_id
        logger.info(f"[ONBOARDING] Completed, matched coach {coach_id.value}")
        await _call(self._on_complete, self.answers, coach_id)
        return Transition.COMPLETED


async def _call(handler: Callable[..., Awaitable[None] | None] | None, *args: Any) -> None:
    if handler is None:
        return
    result = handler(*args)
    if result is not None:
        await result
