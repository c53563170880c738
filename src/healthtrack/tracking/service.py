"""Operations that combine stores with the calculation core."""

from __future__ import annotations

from datetime import date
from typing import Optional

from healthtrack.errors import UserNotFoundError
from healthtrack.profiles.body_calc import DEFAULT_ACTIVITY_MULTIPLIER
from healthtrack.profiles.goals import (
    DEFAULT_WEEKS,
    DerivedGoals,
    GoalHorizon,
    recommend_goals_for_profile,
)
from healthtrack.tracking.models import UserProfile
from healthtrack.tracking.stores import ActivityStore, ProfileStore
from healthtrack.tracking.summary import (
    GoalTargets,
    WeeklySummary,
    build_weekly_summary,
    window_start,
)


def load_profile(profile_store: ProfileStore, user_id: str) -> UserProfile:
    """Fetch a profile or raise UserNotFoundError."""
    profile = profile_store.get_profile(user_id)
    if profile is None:
        raise UserNotFoundError(user_id)
    return profile


def recommend_user_goals(
    profile_store: ProfileStore,
    user_id: str,
    target_weight_kg: float,
    weeks: int = DEFAULT_WEEKS,
    activity_multiplier: float = DEFAULT_ACTIVITY_MULTIPLIER,
    save: bool = True,
) -> DerivedGoals:
    """Recommend goals from a stored profile and optionally persist them.

    When saved, the target weight is stored as the user's weight goal.
    """
    profile = load_profile(profile_store, user_id)
    goals = recommend_goals_for_profile(
        profile.biometrics(),
        GoalHorizon(target_weight_kg=target_weight_kg, weeks=weeks),
        activity_multiplier,
    )
    if save:
        profile_store.save_goals(user_id, goals, weight_goal_kg=target_weight_kg)
    return goals


def user_weekly_summary(
    profile_store: ProfileStore,
    activity_store: ActivityStore,
    user_id: str,
    end: date,
    days: int = 7,
    fallback_goals: Optional[GoalTargets] = None,
) -> WeeklySummary:
    """Weekly statistics for a user over the ``days`` days ending at ``end``.

    Args:
        fallback_goals: Goals used where the profile has none stored
    """
    start = window_start(end, days)
    profile = load_profile(profile_store, user_id)

    goals = None
    if fallback_goals is not None:
        goals = GoalTargets.from_profile(
            profile,
            calorie_goal=fallback_goals.calorie_goal,
            exercise_goal=fallback_goals.exercise_goal,
            weight_goal_kg=fallback_goals.weight_goal_kg,
        )

    return build_weekly_summary(
        activity_store.get_diet_records(user_id, start, end),
        activity_store.get_exercise_records(user_id, start, end),
        profile,
        end,
        days=days,
        goals=goals,
    )
