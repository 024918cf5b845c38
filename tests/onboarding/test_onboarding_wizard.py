"""Tests for the onboarding wizard state machine."""

import random
from datetime import date
from unittest.mock import AsyncMock, MagicMock

import pytest

from fitcoach.coaches.catalog import CoachId
from fitcoach.onboarding.schemas import OnboardingAnswers
from fitcoach.onboarding.wizard import ONBOARDING_STEPS, OnboardingStep, OnboardingWizard, Transition

TODAY = date(2026, 6, 1)


def _complete_answers() -> OnboardingAnswers:
    return OnboardingAnswers(
        display_name="Sam",
        gender="male",
        primary_goal="build-muscle",
        workout_type="strength",
        training_days_per_week="3-4",
        session_duration="45-60",
        fitness_level="advanced",
        date_of_birth="1990-05-20",
        height_ft="6",
        height_in="0",
        weight="190",
        equipment=["barbells"],
        limitations=["none"],
        activity_level="active",
        motivation_style="challenging",
        coaching_style="straightforward-disciplined",
    )


def _wizard(**kwargs) -> OnboardingWizard:
    return OnboardingWizard(today=lambda: TODAY, rng=random.Random(0), **kwargs)


def test_steps_start_at_welcome_and_end_at_complete():
    assert ONBOARDING_STEPS[0] == OnboardingStep.WELCOME
    assert ONBOARDING_STEPS[1] == OnboardingStep.NAME
    assert ONBOARDING_STEPS[-1] == OnboardingStep.COMPLETE
    assert len(set(ONBOARDING_STEPS)) == len(ONBOARDING_STEPS)


@pytest.mark.asyncio
async def test_name_step_blocks_until_filled():
    wizard = _wizard()
    assert await wizard.next() == Transition.ADVANCED
    assert wizard.step == OnboardingStep.NAME

    assert await wizard.next() == Transition.BLOCKED
    assert wizard.step == OnboardingStep.NAME
    assert wizard.last_message

    wizard.update(display_name="Sam")

    assert wizard.can_continue().ok is True
    assert await wizard.next() == Transition.ADVANCED
    assert wizard.step == OnboardingStep.GENDER
    assert wizard.last_message == ""


@pytest.mark.asyncio
async def test_name_longer_than_30_characters_blocks():
    wizard = _wizard()
    await wizard.next()
    wizard.update(display_name="x" * 31)

    assert await wizard.next() == Transition.BLOCKED


@pytest.mark.asyncio
async def test_back_from_first_step_exits_to_login():
    on_exit = MagicMock(return_value=None)
    wizard = _wizard(on_exit_to_login=on_exit)

    assert await wizard.back() == Transition.EXITED_TO_LOGIN
    on_exit.assert_called_once_with()
    assert wizard.step == OnboardingStep.WELCOME


@pytest.mark.asyncio
async def test_back_moves_to_previous_step():
    wizard = _wizard()
    await wizard.next()

    assert await wizard.back() == Transition.MOVED_BACK
    assert wizard.step == OnboardingStep.WELCOME


@pytest.mark.asyncio
async def test_full_run_matches_coach_and_hands_off_answers():
    on_complete = AsyncMock()
    wizard = _wizard(on_complete=on_complete, answers=_complete_answers())

    transitions = [await wizard.next() for _ in range(len(ONBOARDING_STEPS))]

    assert transitions[:-1] == [Transition.ADVANCED] * (len(ONBOARDING_STEPS) - 1)
    assert transitions[-1] == Transition.COMPLETED
    assert wizard.matched_coach == CoachId.MAX_STONE
    on_complete.assert_awaited_once_with(wizard.answers, CoachId.MAX_STONE)


@pytest.mark.asyncio
async def test_blocked_step_has_no_side_effects():
    on_complete = AsyncMock()
    answers = _complete_answers()
    answers.equipment = []
    wizard = _wizard(on_complete=on_complete, answers=answers)

    for _ in range(len(ONBOARDING_STEPS)):
        if await wizard.next() == Transition.BLOCKED:
            break

    assert wizard.step == OnboardingStep.EQUIPMENT
    on_complete.assert_not_awaited()
    assert wizard.matched_coach is None


def test_progress_reports_position():
    wizard = _wizard()

    assert wizard.progress == (1, len(ONBOARDING_STEPS))


def test_update_rejects_unknown_field():
    with pytest.raises(ValueError, match="Unknown onboarding field"):
        _wizard().update(favourite_colour="blue")


def test_update_validates_enum_values():
    with pytest.raises(ValueError):
        _wizard().update(fitness_level="superhuman")
