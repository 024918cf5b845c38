"""Static coach catalog.

Profiles are defined here once and never mutated. Iteration order of
COACH_CATALOG is the tie-break order used by the matcher.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from types import MappingProxyType
from typing import Literal

from loguru import logger

CoachGender = Literal["male", "female"]


class CoachId(StrEnum):
    # Strength Training
    MAX_STONE = "max-stone"
    ALEXIS_STEEL = "alexis-steel"
    # Cardio and Endurance
    ETHAN_DASH = "ethan-dash"
    ZOEY_BLAZE = "zoey-blaze"
    # Yoga and Flexibility
    KAI_RIVERS = "kai-rivers"
    LILA_SAGE = "lila-sage"
    # Calisthenics and Bodyweight
    LEO_CRUZ = "leo-cruz"
    MAYA_FLEX = "maya-flex"
    # Nutrition and Wellness
    NATE_GREEN = "nate-green"
    SOPHIE_GOLD = "sophie-gold"
    # General Fitness and Motivation
    DYLAN_POWER = "dylan-power"
    AVA_BLAZE = "ava-blaze"
    # Running and Triathlon
    RYDER_SWIFT = "ryder-swift"
    CHLOE_FLEET = "chloe-fleet"


DEFAULT_COACH_ID = CoachId.DYLAN_POWER


@dataclass(frozen=True)
class CoachProfile:
    id: CoachId
    name: str
    specialty: str
    description: str
    gender: CoachGender
    specialties: tuple[str, ...] = ()
    welcome_message: str = ""


_PROFILES = (
    CoachProfile(
        id=CoachId.MAX_STONE,
        name="Max Stone",
        specialty="Strength Training",
        description="Powerlifting champion turned coach. I'll help you build serious strength.",
        gender="male",
        specialties=("Powerlifting", "Olympic Lifting", "Functional Strength"),
        welcome_message="Ready to get seriously strong? Let's build some real power together!",
    ),
    CoachProfile(
        id=CoachId.ALEXIS_STEEL,
        name="Alexis Steel",
        specialty="Strength & Conditioning",
        description="Former athlete, now helping others reach their strength goals.",
        gender="female",
        specialties=("Athletic Performance", "Injury Prevention", "Competition Prep"),
        welcome_message="Time to unlock your athletic potential! I'm here to guide every step.",
    ),
    CoachProfile(
        id=CoachId.ETHAN_DASH,
        name="Ethan Dash",
        specialty="Cardio & Endurance",
        description="Marathon runner and endurance specialist. Let's build your cardio base.",
        gender="male",
        specialties=("Running", "HIIT Training", "Endurance Sports"),
        welcome_message="Let's get that heart pumping! Endurance is built one step at a time.",
    ),
    CoachProfile(
        id=CoachId.ZOEY_BLAZE,
        name="Zoey Blaze",
        specialty="HIIT & Cardio",
        description="High-energy trainer specializing in fat-burning workouts.",
        gender="female",
        specialties=("HIIT", "Metabolic Training", "Fat Loss"),
        welcome_message="Ready to turn up the heat? Let's torch some calories together!",
    ),
    CoachProfile(
        id=CoachId.KAI_RIVERS,
        name="Kai Rivers",
        specialty="Yoga & Mindfulness",
        description="Certified yoga instructor focused on mind-body connection.",
        gender="male",
        specialties=("Hatha Yoga", "Meditation", "Flexibility"),
        welcome_message="Welcome to your journey of inner and outer strength. Let's flow together.",
    ),
    CoachProfile(
        id=CoachId.LILA_SAGE,
        name="Lila Sage",
        specialty="Yoga & Flexibility",
        description="Gentle yoga practitioner helping you find balance and flexibility.",
        gender="female",
        specialties=("Restorative Yoga", "Stretching", "Mind-Body Wellness"),
        welcome_message="Let's create space for growth, both physically and mentally.",
    ),
    CoachProfile(
        id=CoachId.LEO_CRUZ,
        name="Leo Cruz",
        specialty="Calisthenics",
        description="Bodyweight movement specialist. Let's master your own body.",
        gender="male",
        specialties=("Bodyweight Training", "Movement Flow", "Skill Development"),
        welcome_message="Your body is your gym! Let's unlock amazing movement patterns together.",
    ),
    CoachProfile(
        id=CoachId.MAYA_FLEX,
        name="Maya Flex",
        specialty="Bodyweight & Flexibility",
        description="Movement artist combining strength with graceful flexibility.",
        gender="female",
        specialties=("Flow Movement", "Bodyweight Strength", "Mobility"),
        welcome_message="Let's explore the beautiful intersection of strength and flexibility!",
    ),
    CoachProfile(
        id=CoachId.NATE_GREEN,
        name="Nate Green",
        specialty="Nutrition",
        description="Nutrition coach pairing smart eating with sustainable training.",
        gender="male",
        specialties=("Meal Planning", "Body Recomposition", "Healthy Habits"),
        welcome_message="Great results start in the kitchen. Let's fuel your progress.",
    ),
    CoachProfile(
        id=CoachId.SOPHIE_GOLD,
        name="Sophie Gold",
        specialty="Wellness",
        description="Wellness specialist focused on balance, recovery and long-term health.",
        gender="female",
        specialties=("Recovery", "Stress Management", "Nutrition"),
        welcome_message="Let's build a routine that feels as good as it looks.",
    ),
    CoachProfile(
        id=CoachId.DYLAN_POWER,
        name="Dylan Power",
        specialty="General Fitness",
        description="All-around fitness expert helping you become your best self.",
        gender="male",
        specialties=("Total Body Fitness", "Lifestyle Coaching", "Habit Building"),
        welcome_message="Ready to transform your life? I'm here to guide you every step of the way!",
    ),
    CoachProfile(
        id=CoachId.AVA_BLAZE,
        name="Ava Blaze",
        specialty="Motivation & HIIT",
        description="Motivational coach who keeps every session intense and fun.",
        gender="female",
        specialties=("HIIT", "Circuit Training", "Accountability"),
        welcome_message="No excuses, just progress. Let's get after it!",
    ),
    CoachProfile(
        id=CoachId.RYDER_SWIFT,
        name="Ryder Swift",
        specialty="Running",
        description="Distance runner building speed and stamina from 5K to marathon.",
        gender="male",
        specialties=("Distance Running", "Speed Work", "Race Prep"),
        welcome_message="Lace up. Every mile makes you stronger.",
    ),
    CoachProfile(
        id=CoachId.CHLOE_FLEET,
        name="Chloe Fleet",
        specialty="Triathlon",
        description="Triathlon coach balancing swim, bike and run training.",
        gender="female",
        specialties=("Triathlon", "Swimming", "Endurance Base"),
        welcome_message="Three sports, one goal. Let's build your engine.",
    ),
)

COACH_CATALOG: MappingProxyType[CoachId, CoachProfile] = MappingProxyType({p.id: p for p in _PROFILES})

MALE_COACHES: tuple[CoachId, ...] = tuple(p.id for p in _PROFILES if p.gender == "male")
FEMALE_COACHES: tuple[CoachId, ...] = tuple(p.id for p in _PROFILES if p.gender == "female")


def get_coach_profile(coach_id: CoachId | str | None) -> CoachProfile:
    """Look up a profile, falling back to the default coach for unknown ids."""
    try:
        return COACH_CATALOG[CoachId(coach_id)]
    except (ValueError, KeyError):
        logger.warning(f"[COACH_CATALOG] Unknown coach id {coach_id!r}, using {DEFAULT_COACH_ID.value}")
        return COACH_CATALOG[DEFAULT_COACH_ID]
