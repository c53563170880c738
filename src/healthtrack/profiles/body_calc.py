"""Metabolic estimates from body metrics.

BMR follows Mifflin-St Jeor (metric units, kcal/day). TDEE is BMR times a
unitless activity multiplier; 1.4 unless a level or number is given.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Union

from healthtrack.errors import InvalidInputError


class Sex(Enum):
    """Biological sex for BMR calculation."""
    MALE = "male"
    FEMALE = "female"


class ActivityLevel(Enum):
    """Named activity levels for TDEE calculation."""
    SEDENTARY = "sedentary"      # desk job, no workouts
    LIGHT = "light"              # 1-3 sessions a week
    MODERATE = "moderate"        # 3-5 sessions a week
    ACTIVE = "active"            # near daily training
    VERY_ACTIVE = "very_active"  # training plus manual work


# Activity level multipliers (Harris-Benedict activity factors)
ACTIVITY_MULTIPLIERS = {
    ActivityLevel.SEDENTARY: 1.2,
    ActivityLevel.LIGHT: 1.375,
    ActivityLevel.MODERATE: 1.55,
    ActivityLevel.ACTIVE: 1.725,
    ActivityLevel.VERY_ACTIVE: 1.9,
}

# Between sedentary and light; used when the caller does not say otherwise
DEFAULT_ACTIVITY_MULTIPLIER = 1.4


@dataclass(frozen=True)
class BiometricProfile:
    """Body metrics needed for metabolic estimates."""

    weight_kg: float
    height_cm: float
    age_years: int
    sex: Sex


def parse_sex(sex: Union[Sex, str]) -> Sex:
    """Coerce a Sex or a case-insensitive string into a Sex."""
    if isinstance(sex, Sex):
        return sex
    try:
        return Sex(str(sex).strip().lower())
    except ValueError:
        raise InvalidInputError(
            f"sex must be 'male' or 'female', got '{sex}'"
        ) from None


def resolve_activity_multiplier(value: Union[float, int, str, ActivityLevel]) -> float:
    """Turn an activity level name or a raw number into a multiplier.

    Args:
        value: ActivityLevel, level name ("moderate"), or numeric multiplier
            (a numeric string such as "1.4" is accepted too)

    Returns:
        Multiplier, finite and > 0
    """
    if isinstance(value, ActivityLevel):
        return ACTIVITY_MULTIPLIERS[value]

    if isinstance(value, str):
        name = value.strip().lower()
        try:
            return ACTIVITY_MULTIPLIERS[ActivityLevel(name)]
        except ValueError:
            try:
                value = float(name)
            except ValueError:
                valid = ", ".join(level.value for level in ActivityLevel)
                raise InvalidInputError(
                    f"activity must be a number or one of: {valid}; got '{value}'"
                ) from None

    try:
        multiplier = float(value)
    except (TypeError, ValueError):
        raise InvalidInputError(
            f"activity multiplier must be a number, got {value!r}"
        ) from None
    if not (0 < multiplier < math.inf):
        raise InvalidInputError(
            f"activity multiplier must be a finite number > 0, got {multiplier}"
        )
    return multiplier


def estimate_bmr(
    weight_kg: float,
    height_cm: float,
    age_years: int,
    sex: Union[Sex, str],
) -> float:
    """Calculate Basal Metabolic Rate using Mifflin-St Jeor equation.

    Args:
        weight_kg: Body weight in kilograms, > 0
        height_cm: Height in centimetres, > 0
        age_years: Age in years, >= 0
        sex: Biological sex

    Returns:
        BMR in kcal per day

    Raises:
        InvalidInputError: If a body metric is out of range
    """
    # Rejects NaN and infinities as well
    if not (0 < weight_kg < math.inf):
        raise InvalidInputError(f"weight must be a finite number > 0 kg, got {weight_kg}")
    if not (0 < height_cm < math.inf):
        raise InvalidInputError(f"height must be a finite number > 0 cm, got {height_cm}")
    if not (0 <= age_years < math.inf):
        raise InvalidInputError(f"age must be a finite number >= 0, got {age_years}")

    sex_enum = parse_sex(sex)

    if sex_enum == Sex.MALE:
        return (10 * weight_kg) + (6.25 * height_cm) - (5 * age_years) + 5
    return (10 * weight_kg) + (6.25 * height_cm) - (5 * age_years) - 161


def estimate_tdee(
    bmr: float,
    activity_multiplier: float = DEFAULT_ACTIVITY_MULTIPLIER,
) -> float:
    """Calculate Total Daily Energy Expenditure.

    Args:
        bmr: Basal Metabolic Rate (kcal/day)
        activity_multiplier: Unitless activity factor, > 0

    Returns:
        TDEE in kcal per day
    """
    if not (0 < activity_multiplier < math.inf):
        raise InvalidInputError(
            f"activity multiplier must be a finite number > 0, got {activity_multiplier}"
        )
    return bmr * activity_multiplier


def profile_bmr(profile: BiometricProfile) -> float:
    """BMR for a BiometricProfile."""
    return estimate_bmr(
        profile.weight_kg, profile.height_cm, profile.age_years, profile.sex
    )
