"""Coach matching: additive scoring over onboarding answers.

Each rule category adds fixed bonuses to the coaches that fit it, then a
small random jitter breaks ties so identical answers do not always land on
the same coach. The weights are a tuned heuristic, not a contract.
"""

from __future__ import annotations

import random
from collections.abc import Iterable, Mapping

from loguru import logger

from fitcoach.coaches.catalog import COACH_CATALOG, DEFAULT_COACH_ID, FEMALE_COACHES, MALE_COACHES, CoachId
from fitcoach.onboarding.schemas import OnboardingAnswers

GENDER_BONUS = 10
BROAD_APPEAL_BONUS = 4
JITTER_RANGE = 3  # randrange(0, 3) -> 0, 1 or 2

C = CoachId

GOAL_RULES: Mapping[str, Mapping[CoachId, int]] = {
    "build-muscle": {C.MAX_STONE: 8, C.ALEXIS_STEEL: 8, C.LEO_CRUZ: 5, C.MAYA_FLEX: 5},
    "lose-fat": {
        C.ZOEY_BLAZE: 8,
        C.ETHAN_DASH: 8,
        C.AVA_BLAZE: 7,
        C.RYDER_SWIFT: 6,
        C.CHLOE_FLEET: 6,
        C.SOPHIE_GOLD: 9,
        C.NATE_GREEN: 8,
    },
    "improve-endurance": {C.ETHAN_DASH: 8, C.ZOEY_BLAZE: 7, C.RYDER_SWIFT: 10, C.CHLOE_FLEET: 9},
    "increase-flexibility": {C.KAI_RIVERS: 10, C.LILA_SAGE: 10, C.LEO_CRUZ: 5, C.MAYA_FLEX: 5},
    "general-health": {C.DYLAN_POWER: 10, C.AVA_BLAZE: 8},
}

WORKOUT_TYPE_RULES: Mapping[str, Mapping[CoachId, int]] = {
    "strength": {C.MAX_STONE: 9, C.ALEXIS_STEEL: 9, C.LEO_CRUZ: 6, C.MAYA_FLEX: 6},
    "cardio": {C.ETHAN_DASH: 9, C.ZOEY_BLAZE: 9, C.RYDER_SWIFT: 8, C.CHLOE_FLEET: 8, C.AVA_BLAZE: 7},
    "calisthenics": {C.LEO_CRUZ: 10, C.MAYA_FLEX: 10, C.KAI_RIVERS: 5},
    "yoga": {C.KAI_RIVERS: 10, C.LILA_SAGE: 10, C.NATE_GREEN: 6, C.SOPHIE_GOLD: 6},
    "mixed": {C.DYLAN_POWER: 9, C.AVA_BLAZE: 9},
}

# Values whose named coaches get the table bonus and everyone else a broad-appeal bonus
BROAD_APPEAL_VALUES = frozenset({"general-health", "mixed"})

FITNESS_LEVEL_RULES: Mapping[str, Mapping[CoachId, int]] = {
    "beginner": {C.LILA_SAGE: 4, C.MAYA_FLEX: 4, C.DYLAN_POWER: 4, C.SOPHIE_GOLD: 4, C.NATE_GREEN: 3, C.KAI_RIVERS: 3},
    "intermediate": {C.DYLAN_POWER: 4, C.AVA_BLAZE: 4, C.MAYA_FLEX: 3, C.LEO_CRUZ: 3},
    "advanced": {C.MAX_STONE: 5, C.ALEXIS_STEEL: 5, C.AVA_BLAZE: 4, C.RYDER_SWIFT: 4, C.ETHAN_DASH: 4},
}

MOTIVATION_RULES: Mapping[str, Mapping[CoachId, int]] = {
    "supportive": {C.LILA_SAGE: 4, C.SOPHIE_GOLD: 4, C.DYLAN_POWER: 3, C.NATE_GREEN: 3},
    "challenging": {C.MAX_STONE: 4, C.AVA_BLAZE: 4, C.RYDER_SWIFT: 3, C.ETHAN_DASH: 3},
    "tracking": {C.DYLAN_POWER: 4, C.AVA_BLAZE: 3, C.RYDER_SWIFT: 3},
}

FREE_WEIGHTS_BONUS: Mapping[CoachId, int] = {C.MAX_STONE: 4, C.ALEXIS_STEEL: 4}
YOGA_MAT_BONUS: Mapping[CoachId, int] = {C.KAI_RIVERS: 3, C.LILA_SAGE: 3}
BODYWEIGHT_BONUS: Mapping[CoachId, int] = {C.LEO_CRUZ: 5, C.MAYA_FLEX: 5, C.KAI_RIVERS: 3}

_default_rng = random.Random()


def _value(raw: object) -> str | None:
    """Normalize an enum member or raw string to its string value."""
    if raw is None:
        return None
    value = getattr(raw, "value", raw)
    return value if isinstance(value, str) else None


def _add(scores: dict[CoachId, int], bonuses: Mapping[CoachId, int]) -> bool:
    applied = False
    for coach_id, bonus in bonuses.items():
        if coach_id not in scores:
            # A stale rule constant must not break onboarding
            logger.warning(f"[COACH_MATCH] Rule references unknown coach id {coach_id!r}, skipping")
            continue
        scores[coach_id] += bonus
        applied = True
    return applied


def _add_uniform(scores: dict[CoachId, int], coach_ids: Iterable[CoachId], bonus: int) -> bool:
    return _add(scores, dict.fromkeys(coach_ids, bonus))


def _apply_table(scores: dict[CoachId, int], rules: Mapping[str, Mapping[CoachId, int]], value: str | None) -> bool:
    if value is None or value not in rules:
        return False
    applied = _add(scores, rules[value])
    if value in BROAD_APPEAL_VALUES:
        others = [coach_id for coach_id in scores if coach_id not in rules[value]]
        _add_uniform(scores, others, BROAD_APPEAL_BONUS)
    return applied


def _apply_equipment(scores: dict[CoachId, int], equipment: Iterable[str]) -> bool:
    items = {item for item in (_value(e) for e in equipment) if item}
    applied = False
    if items & {"dumbbells", "barbells"}:
        applied |= _add(scores, FREE_WEIGHTS_BONUS)
    if "yoga-mat" in items:
        applied |= _add(scores, YOGA_MAT_BONUS)
    if "bodyweight" in items:
        applied |= _add(scores, BODYWEIGHT_BONUS)
    return applied


def score_coaches(answers: OnboardingAnswers, rng: random.Random | None = None) -> tuple[dict[CoachId, int], bool]:
    """Score every catalog coach for the given answers.

    Returns:
        (scores, recognized) where recognized is False when no answer
        matched any rule category. Jitter is only added when recognized.
    """
    scores: dict[CoachId, int] = dict.fromkeys(COACH_CATALOG, 0)
    recognized = False

    gender = _value(getattr(answers, "gender", None))
    if gender == "male":
        recognized |= _add_uniform(scores, MALE_COACHES, GENDER_BONUS)
    elif gender == "female":
        recognized |= _add_uniform(scores, FEMALE_COACHES, GENDER_BONUS)

    recognized |= _apply_table(scores, GOAL_RULES, _value(getattr(answers, "primary_goal", None)))
    recognized |= _apply_table(scores, WORKOUT_TYPE_RULES, _value(getattr(answers, "workout_type", None)))
    recognized |= _apply_table(scores, FITNESS_LEVEL_RULES, _value(getattr(answers, "fitness_level", None)))
    recognized |= _apply_equipment(scores, getattr(answers, "equipment", None) or ())
    recognized |= _apply_table(scores, MOTIVATION_RULES, _value(getattr(answers, "motivation_style", None)))

    if recognized:
        rng = rng or _default_rng
        for coach_id in scores:
            scores[coach_id] += rng.randrange(0, JITTER_RANGE)

    return scores, recognized


def match_coach(answers: OnboardingAnswers, rng: random.Random | None = None) -> CoachId:
    """Pick the highest-scoring coach; first in catalog order wins ties."""
    scores, recognized = score_coaches(answers, rng)
    if not recognized:
        logger.info(f"[COACH_MATCH] No recognizable answers, using default coach {DEFAULT_COACH_ID.value}")
        return DEFAULT_COACH_ID

    best_coach = DEFAULT_COACH_ID
    best_score: int | None = None
    for coach_id, score in scores.items():
        if best_score is None or score > best_score:
            best_coach, best_score = coach_id, score

    readable = {coach_id.value: score for coach_id, score in scores.items()}
    logger.debug(f"[COACH_MATCH] Scores: {readable}")
    logger.info(f"[COACH_MATCH] Selected coach {best_coach.value} with {best_score} points")
    return best_coach
