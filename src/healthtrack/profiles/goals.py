"""Daily calorie and exercise goal recommendations.

Converts a desired weight change over a number of weeks into a daily
calorie target. The total change is priced at 7700 kcal per kilogram of
body mass and spread evenly over the horizon, then added to TDEE.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Union

from healthtrack.errors import InvalidInputError
from healthtrack.profiles.body_calc import (
    DEFAULT_ACTIVITY_MULTIPLIER,
    BiometricProfile,
    Sex,
    estimate_bmr,
    estimate_tdee,
)

# Approximate energy content of one kg of body mass
KCAL_PER_KG = 7700

# Fixed daily exercise target; independent of every input
DAILY_EXERCISE_GOAL_MINUTES = 30

DEFAULT_WEEKS = 4


@dataclass(frozen=True)
class GoalHorizon:
    """Target weight and the number of weeks to reach it."""

    target_weight_kg: float
    weeks: int = DEFAULT_WEEKS


@dataclass(frozen=True)
class DerivedGoals:
    """Recommended daily targets."""

    daily_calorie_goal: int
    daily_exercise_goal_minutes: int

    def to_dict(self) -> dict:
        """Convert to dict for JSON output."""
        return {
            "daily_calorie_goal": self.daily_calorie_goal,
            "daily_exercise_goal_minutes": self.daily_exercise_goal_minutes,
        }


def round_half_up(value: float) -> int:
    """Round to the nearest integer, ties toward +infinity."""
    return int(math.floor(value + 0.5))


def daily_calorie_change(total_change_kg: float, weeks: int) -> float:
    """Spread a total weight change over a horizon as kcal per day.

    Negative results are a deficit (weight loss).
    """
    if isinstance(weeks, bool) or not (0 < weeks < math.inf) or int(weeks) != weeks:
        raise InvalidInputError(f"weeks must be a positive integer, got {weeks}")
    if not math.isfinite(total_change_kg):
        raise InvalidInputError(f"weight change must be finite, got {total_change_kg}")
    days = int(weeks) * 7
    return (total_change_kg * KCAL_PER_KG) / days


def recommend_goals(
    current_weight_kg: float,
    target_weight_kg: float,
    height_cm: float,
    age_years: int,
    sex: Union[Sex, str],
    activity_multiplier: float = DEFAULT_ACTIVITY_MULTIPLIER,
    weeks: int = DEFAULT_WEEKS,
) -> DerivedGoals:
    """Recommend daily calorie and exercise goals.

    Args:
        current_weight_kg: Current body weight
        target_weight_kg: Desired body weight
        height_cm: Height in centimetres
        age_years: Age in years
        sex: "male" or "female"
        activity_multiplier: TDEE activity factor
        weeks: Horizon to reach the target weight, positive integer

    Returns:
        DerivedGoals with a rounded calorie goal and the fixed exercise goal

    Raises:
        InvalidInputError: If weeks <= 0 or a body metric is out of range
    """
    # Horizon is checked before body metrics
    change_per_day = daily_calorie_change(target_weight_kg - current_weight_kg, weeks)
    if not (0 < target_weight_kg < math.inf):
        raise InvalidInputError(
            f"target weight must be a finite number > 0 kg, got {target_weight_kg}"
        )

    bmr = estimate_bmr(current_weight_kg, height_cm, age_years, sex)
    tdee = estimate_tdee(bmr, activity_multiplier)

    return DerivedGoals(
        daily_calorie_goal=round_half_up(tdee + change_per_day),
        daily_exercise_goal_minutes=DAILY_EXERCISE_GOAL_MINUTES,
    )


def recommend_goals_for_profile(
    profile: BiometricProfile,
    horizon: GoalHorizon,
    activity_multiplier: float = DEFAULT_ACTIVITY_MULTIPLIER,
) -> DerivedGoals:
    """recommend_goals over a BiometricProfile and GoalHorizon."""
    return recommend_goals(
        current_weight_kg=profile.weight_kg,
        target_weight_kg=horizon.target_weight_kg,
        height_cm=profile.height_cm,
        age_years=profile.age_years,
        sex=profile.sex,
        activity_multiplier=activity_multiplier,
        weeks=horizon.weeks,
    )
