"""Pydantic models for onboarding answers."""

from datetime import date
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Gender(StrEnum):
    MALE = "male"
    FEMALE = "female"
    PREFER_NOT_TO_SAY = "prefer-not-to-say"
    OTHER = "other"


class PrimaryGoal(StrEnum):
    BUILD_MUSCLE = "build-muscle"
    LOSE_FAT = "lose-fat"
    IMPROVE_ENDURANCE = "improve-endurance"
    INCREASE_FLEXIBILITY = "increase-flexibility"
    GENERAL_HEALTH = "general-health"
    OTHER = "other"


class WorkoutType(StrEnum):
    STRENGTH = "strength"
    CARDIO = "cardio"
    CALISTHENICS = "calisthenics"
    YOGA = "yoga"
    MIXED = "mixed"
    OTHER = "other"


class TrainingDays(StrEnum):
    ONE_TO_TWO = "1-2"
    THREE_TO_FOUR = "3-4"
    FIVE_TO_SIX = "5-6"
    EVERY_DAY = "every-day"


class SessionDuration(StrEnum):
    SHORT = "20-30"
    STANDARD = "45-60"
    LONG = "75+"


class FitnessLevel(StrEnum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


class ActivityLevel(StrEnum):
    SEDENTARY = "sedentary"
    LIGHTLY_ACTIVE = "lightly-active"
    ACTIVE = "active"
    VERY_ACTIVE = "very-active"


class MotivationStyle(StrEnum):
    SUPPORTIVE = "supportive"
    CHALLENGING = "challenging"
    TRACKING = "tracking"
    COMMUNITY = "community"
    OTHER = "other"


class CoachingStyle(StrEnum):
    ENCOURAGING_POSITIVE = "encouraging-positive"
    STRAIGHTFORWARD_DISCIPLINED = "straightforward-disciplined"
    CASUAL_FRIENDLY = "casual-friendly"
    OTHER = "other"


class HeightUnit(StrEnum):
    FT = "ft"
    CM = "cm"


class WeightUnit(StrEnum):
    LBS = "lbs"
    KG = "kg"


# Equipment and limitations are free multi-select lists; these are the
# values the UI offers and the matcher understands.
EQUIPMENT_OPTIONS = ("dumbbells", "barbells", "kettlebells", "resistance-bands", "yoga-mat", "bodyweight", "other")
LIMITATION_OPTIONS = ("none", "lower-back", "knees", "shoulders", "wrists", "other")


class OnboardingAnswers(BaseModel):
    """Answers accumulated across wizard steps.

    Every field is optional: the record is built incrementally and is only
    complete on the final step. Validation per step lives in
    fitcoach.onboarding.validation, not here.
    """

    model_config = ConfigDict(validate_assignment=True)

    display_name: str = ""
    gender: Gender | None = None
    gender_other: str = ""
    primary_goal: PrimaryGoal | None = None
    primary_goal_other: str = ""
    workout_type: WorkoutType | None = None
    workout_type_other: str = ""
    training_days_per_week: TrainingDays | None = None
    session_duration: SessionDuration | None = None
    fitness_level: FitnessLevel | None = None

    # Body metrics (raw text as typed; range-checked by the body-metrics step)
    date_of_birth: str = ""
    height_unit: HeightUnit = HeightUnit.FT
    height_ft: str = ""
    height_in: str = ""
    height_cm: str = ""
    weight: str = ""
    weight_unit: WeightUnit = WeightUnit.LBS

    equipment: list[str] = Field(default_factory=list)
    equipment_other: str = ""
    limitations: list[str] = Field(default_factory=list)
    limitations_notes: str = ""
    activity_level: ActivityLevel | None = None
    motivation_style: MotivationStyle | None = None
    motivation_style_other: str = ""
    coaching_style: CoachingStyle | None = None
    coaching_style_other: str = ""

    def parsed_date_of_birth(self) -> date | None:
        try:
            return date.fromisoformat(self.date_of_birth.strip())
        except ValueError:
            return None

    def to_registration_payload(self, *, coach: str, email: str, password: str) -> dict[str, Any]:
        """camelCase body for POST /api/auth/register."""
        return {
            "name": self.display_name.strip(),
            "email": email,
            "password": password,
            "coach": coach,
            "gender": _other_or_value(self.gender, self.gender_other),
            "goal": _other_or_value(self.primary_goal, self.primary_goal_other),
            "trainingType": _other_or_value(self.workout_type, self.workout_type_other),
            "trainingDays": self.training_days_per_week.value if self.training_days_per_week else None,
            "sessionDuration": self.session_duration.value if self.session_duration else None,
            "fitnessLevel": self.fitness_level.value if self.fitness_level else None,
            "dateOfBirth": self.date_of_birth or None,
            "height": _height_cm(self),
            "weight": _weight_kg(self),
            "equipment": list(self.equipment),
            "equipmentOther": self.equipment_other or None,
            "injuries": list(self.limitations),
            "injuriesNotes": self.limitations_notes or None,
            "activityLevel": self.activity_level.value if self.activity_level else None,
            "motivationStyle": _other_or_value(self.motivation_style, self.motivation_style_other),
            "coachingStyle": _other_or_value(self.coaching_style, self.coaching_style_other),
        }


def _other_or_value(value: StrEnum | None, other_text: str) -> str | None:
    if value is None:
        return None
    if value.value == "other" and other_text.strip():
        return other_text.strip()
    return value.value


def _height_cm(answers: OnboardingAnswers) -> float | None:
    try:
        if answers.height_unit == HeightUnit.CM:
            return float(answers.height_cm)
        return round((int(answers.height_ft) * 12 + int(answers.height_in or 0)) * 2.54, 1)
    except ValueError:
        return None


def _weight_kg(answers: OnboardingAnswers) -> float | None:
    try:
        weight = float(answers.weight)
    except ValueError:
        return None
    if answers.weight_unit == WeightUnit.LBS:
        return round(weight * 0.45359237, 1)
    return weight
