"""Body metrics, metabolic estimates and goal recommendations."""

from healthtrack.profiles.body_calc import (
    ActivityLevel,
    BiometricProfile,
    Sex,
    estimate_bmr,
    estimate_tdee,
)
from healthtrack.profiles.goals import DerivedGoals, GoalHorizon, recommend_goals

__all__ = [
    "ActivityLevel",
    "BiometricProfile",
    "DerivedGoals",
    "GoalHorizon",
    "Sex",
    "estimate_bmr",
    "estimate_tdee",
    "recommend_goals",
]
