"""Per-step validation predicates for the onboarding wizard.

Each predicate looks only at the accumulated answers and returns a
StepValidation; failures block the "next" transition and carry the inline
message to show. Nothing here raises or touches the network.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import date

from fitcoach.onboarding.schemas import HeightUnit, OnboardingAnswers, WeightUnit

NAME_MAX_LENGTH = 30
MIN_AGE = 13
MAX_AGE = 100
HEIGHT_FT_RANGE = (3, 8)
HEIGHT_IN_RANGE = (0, 11)
HEIGHT_CM_RANGE = (100, 250)
WEIGHT_LBS_RANGE = (50.0, 500.0)
WEIGHT_KG_RANGE = (20.0, 250.0)


@dataclass(frozen=True)
class StepValidation:
    ok: bool
    message: str = ""


VALID = StepValidation(ok=True)

StepValidator = Callable[[OnboardingAnswers, date], StepValidation]


def _invalid(message: str) -> StepValidation:
    return StepValidation(ok=False, message=message)


def _select_with_other(value: object, other_text: str, label: str) -> StepValidation:
    if value is None:
        return _invalid(f"Please choose your {label} to continue")
    if getattr(value, "value", value) == "other" and not other_text.strip():
        return _invalid(f"Please describe your {label}")
    return VALID


def _required(value: object, label: str) -> StepValidation:
    if value is None:
        return _invalid(f"Please choose your {label} to continue")
    return VALID


def _int_in_range(text: str, bounds: tuple[int, int]) -> bool:
    try:
        value = int(text.strip())
    except ValueError:
        return False
    return bounds[0] <= value <= bounds[1]


def _float_in_range(text: str, bounds: tuple[float, float]) -> bool:
    try:
        value = float(text.strip())
    except ValueError:
        return False
    return bounds[0] <= value <= bounds[1]


def age_on(born: date, today: date) -> int:
    years = today.year - born.year
    if (today.month, today.day) < (born.month, born.day):
        years -= 1
    return years


def validate_name(answers: OnboardingAnswers, today: date) -> StepValidation:
    if not answers.display_name.strip():
        return _invalid("Please tell us what to call you")
    if len(answers.display_name) > NAME_MAX_LENGTH:
        return _invalid(f"Name must be {NAME_MAX_LENGTH} characters or fewer")
    return VALID


def validate_gender(answers: OnboardingAnswers, today: date) -> StepValidation:
    return _select_with_other(answers.gender, answers.gender_other, "gender")


def validate_goal(answers: OnboardingAnswers, today: date) -> StepValidation:
    return _select_with_other(answers.primary_goal, answers.primary_goal_other, "goal")


def validate_workout_type(answers: OnboardingAnswers, today: date) -> StepValidation:
    return _select_with_other(answers.workout_type, answers.workout_type_other, "workout type")


def validate_training_days(answers: OnboardingAnswers, today: date) -> StepValidation:
    return _required(answers.training_days_per_week, "training days")


def validate_workout_duration(answers: OnboardingAnswers, today: date) -> StepValidation:
    return _required(answers.session_duration, "workout duration")


def validate_fitness_level(answers: OnboardingAnswers, today: date) -> StepValidation:
    return _required(answers.fitness_level, "fitness level")


def validate_body_metrics(answers: OnboardingAnswers, today: date) -> StepValidation:
    born = answers.parsed_date_of_birth()
    if born is None:
        return _invalid("Please enter your date of birth (YYYY-MM-DD)")
    if not MIN_AGE <= age_on(born, today) <= MAX_AGE:
        return _invalid(f"Age must be between {MIN_AGE} and {MAX_AGE}")

    if answers.height_unit == HeightUnit.FT:
        height_ok = _int_in_range(answers.height_ft, HEIGHT_FT_RANGE) and _int_in_range(answers.height_in, HEIGHT_IN_RANGE)
        height_hint = f"{HEIGHT_FT_RANGE[0]}-{HEIGHT_FT_RANGE[1]} ft and {HEIGHT_IN_RANGE[0]}-{HEIGHT_IN_RANGE[1]} in"
    else:
        height_ok = _int_in_range(answers.height_cm, HEIGHT_CM_RANGE)
        height_hint = f"{HEIGHT_CM_RANGE[0]}-{HEIGHT_CM_RANGE[1]} cm"
    if not height_ok:
        return _invalid(f"Height must be {height_hint}")

    bounds = WEIGHT_LBS_RANGE if answers.weight_unit == WeightUnit.LBS else WEIGHT_KG_RANGE
    if not _float_in_range(answers.weight, bounds):
        return _invalid(f"Weight must be {bounds[0]:g}-{bounds[1]:g} {answers.weight_unit.value}")
    return VALID


def validate_equipment(answers: OnboardingAnswers, today: date) -> StepValidation:
    if not answers.equipment:
        return _invalid("Please select at least one option (choose bodyweight if you have no equipment)")
    if "other" in answers.equipment and not answers.equipment_other.strip():
        return _invalid("Please describe your other equipment")
    return VALID


def validate_limitations(answers: OnboardingAnswers, today: date) -> StepValidation:
    if not answers.limitations:
        return _invalid("Please select at least one option (choose none if nothing applies)")
    return VALID


def validate_activity_level(answers: OnboardingAnswers, today: date) -> StepValidation:
    return _required(answers.activity_level, "activity level")


def validate_motivation_style(answers: OnboardingAnswers, today: date) -> StepValidation:
    return _select_with_other(answers.motivation_style, answers.motivation_style_other, "motivation style")


def validate_coaching_style(answers: OnboardingAnswers, today: date) -> StepValidation:
    return _select_with_other(answers.coaching_style, answers.coaching_style_other, "coaching style")


def always_valid(answers: OnboardingAnswers, today: date) -> StepValidation:
    return VALID
