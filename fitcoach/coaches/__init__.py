"""Coach catalog and onboarding-to-coach matching."""

from fitcoach.coaches.catalog import COACH_CATALOG, DEFAULT_COACH_ID, CoachId, CoachProfile, get_coach_profile
from fitcoach.coaches.matching import match_coach, score_coaches

__all__ = [
    "COACH_CATALOG",
    "DEFAULT_COACH_ID",
    "CoachId",
    "CoachProfile",
    "get_coach_profile",
    "match_coach",
    "score_coaches",
]
