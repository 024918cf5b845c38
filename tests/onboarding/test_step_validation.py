"""Tests for per-step onboarding validation."""

from datetime import date

import pytest

from fitcoach.onboarding.schemas import OnboardingAnswers
from fitcoach.onboarding.validation import (
    validate_body_metrics,
    validate_equipment,
    validate_gender,
    validate_goal,
    validate_limitations,
    validate_name,
    validate_training_days,
)

TODAY = date(2026, 6, 1)


def _body(**overrides) -> OnboardingAnswers:
    values = {
        "date_of_birth": "1990-05-20",
        "height_unit": "ft",
        "height_ft": "5",
        "height_in": "10",
        "weight": "170",
        "weight_unit": "lbs",
    }
    values.update(overrides)
    return OnboardingAnswers(**values)


@pytest.mark.parametrize(("name", "ok"), [("", False), ("   ", False), ("A", True), ("x" * 30, True), ("x" * 31, False)])
def test_name_bounds(name, ok):
    assert validate_name(OnboardingAnswers(display_name=name), TODAY).ok is ok


def test_blocked_result_carries_message():
    result = validate_name(OnboardingAnswers(), TODAY)

    assert result.ok is False
    assert result.message


def test_other_selection_requires_companion_text():
    assert validate_goal(OnboardingAnswers(primary_goal="other"), TODAY).ok is False
    assert validate_goal(OnboardingAnswers(primary_goal="other", primary_goal_other="  "), TODAY).ok is False
    assert validate_goal(OnboardingAnswers(primary_goal="other", primary_goal_other="Climb a mountain"), TODAY).ok is True
    assert validate_gender(OnboardingAnswers(gender="female"), TODAY).ok is True


def test_required_choice_blocks_when_missing():
    assert validate_training_days(OnboardingAnswers(), TODAY).ok is False
    assert validate_training_days(OnboardingAnswers(training_days_per_week="3-4"), TODAY).ok is True


def test_valid_body_metrics_imperial():
    assert validate_body_metrics(_body(), TODAY).ok is True


def test_valid_body_metrics_metric():
    answers = _body(height_unit="cm", height_cm="178", weight="72.5", weight_unit="kg")

    assert validate_body_metrics(answers, TODAY).ok is True


@pytest.mark.parametrize(
    "overrides",
    [
        {"date_of_birth": ""},
        {"date_of_birth": "not-a-date"},
        {"date_of_birth": "2014-01-01"},  # 12 years old
        {"date_of_birth": "1920-01-01"},  # 106 years old
        {"height_ft": "2"},
        {"height_ft": "9"},
        {"height_in": "12"},
        {"height_unit": "cm", "height_cm": "99"},
        {"height_unit": "cm", "height_cm": "251"},
        {"weight": "49"},
        {"weight": "501"},
        {"weight": "heavy"},
        {"weight_unit": "kg", "weight": "19"},
        {"weight_unit": "kg", "weight": "251"},
    ],
)
def test_out_of_range_body_metrics_block(overrides):
    assert validate_body_metrics(_body(**overrides), TODAY).ok is False


def test_age_boundaries_are_inclusive():
    assert validate_body_metrics(_body(date_of_birth="2013-06-01"), TODAY).ok is True  # turns 13 today
    assert validate_body_metrics(_body(date_of_birth="2013-06-02"), TODAY).ok is False


def test_equipment_requires_a_selection_and_other_text():
    assert validate_equipment(OnboardingAnswers(), TODAY).ok is False
    assert validate_equipment(OnboardingAnswers(equipment=["other"]), TODAY).ok is False
    assert validate_equipment(OnboardingAnswers(equipment=["other"], equipment_other="Rowing machine"), TODAY).ok is True
    assert validate_equipment(OnboardingAnswers(equipment=["bodyweight"]), TODAY).ok is True


def test_limitations_accept_none_option():
    assert validate_limitations(OnboardingAnswers(), TODAY).ok is False
    assert validate_limitations(OnboardingAnswers(limitations=["none"]), TODAY).ok is True
