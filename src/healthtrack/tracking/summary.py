"""Weekly diet and exercise statistics against a user's goals."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterable, Optional

from healthtrack.errors import InvalidInputError
from healthtrack.tracking.models import ActivityRecord, TrendBucket, UserProfile
from healthtrack.tracking.trends import (
    Granularity,
    aggregate_trend,
    average,
    calorie_goal_met,
    days_goal_met,
    exercise_goal_met,
)

# Used when a profile has no goal stored yet
DEFAULT_CALORIE_GOAL = 2000
DEFAULT_EXERCISE_GOAL = 45
DEFAULT_WEIGHT_GOAL_KG = 60.0


def window_start(end: date, days: int) -> date:
    """First day of the `days`-day window ending at `end` (inclusive)."""
    if days <= 0:
        raise InvalidInputError(f"days must be > 0, got {days}")
    try:
        return end - timedelta(days=days - 1)
    except OverflowError:
        raise InvalidInputError(
            f"a {days}-day window ending {end} starts before year 1"
        ) from None


@dataclass
class GoalTargets:
    """Goals the summary is measured against."""

    calorie_goal: int
    exercise_goal: int
    weight_goal_kg: float

    @classmethod
    def from_profile(
        cls,
        profile: UserProfile,
        calorie_goal: int = DEFAULT_CALORIE_GOAL,
        exercise_goal: int = DEFAULT_EXERCISE_GOAL,
        weight_goal_kg: float = DEFAULT_WEIGHT_GOAL_KG,
    ) -> "GoalTargets":
        """Profile goals, with the given fallbacks for unset ones."""
        return cls(
            calorie_goal=profile.calorie_goal if profile.calorie_goal is not None else calorie_goal,
            exercise_goal=profile.exercise_goal if profile.exercise_goal is not None else exercise_goal,
            weight_goal_kg=profile.weight_goal_kg if profile.weight_goal_kg is not None else weight_goal_kg,
        )


@dataclass
class WeeklySummary:
    """Per-day totals and goal attainment over a trailing window."""

    window_start: date
    window_end: date
    diet: list[TrendBucket]
    exercise: list[TrendBucket]
    avg_calories: float
    avg_exercise_minutes: float
    calorie_goal_days: int
    exercise_goal_days: int
    goals: GoalTargets
    current_weight_kg: float

    @property
    def days(self) -> int:
        return len(self.diet)

    @property
    def weight_gap_kg(self) -> float:
        """Weight still to lose (positive) or gain (negative)."""
        return self.current_weight_kg - self.goals.weight_goal_kg

    def to_dict(self) -> dict:
        """Convert to dict for JSON output."""
        return {
            "window": {
                "start": self.window_start.isoformat(),
                "end": self.window_end.isoformat(),
                "days": self.days,
            },
            "diet": {
                "buckets": [b.to_dict() for b in self.diet],
                "average_kcal": round(self.avg_calories, 1),
                "goal_kcal": self.goals.calorie_goal,
                "days_goal_met": self.calorie_goal_days,
            },
            "exercise": {
                "buckets": [b.to_dict() for b in self.exercise],
                "average_min": round(self.avg_exercise_minutes, 1),
                "goal_min": self.goals.exercise_goal,
                "days_goal_met": self.exercise_goal_days,
            },
            "weight": {
                "current_kg": self.current_weight_kg,
                "goal_kg": self.goals.weight_goal_kg,
                "gap_kg": round(self.weight_gap_kg, 1),
            },
        }


def build_weekly_summary(
    diet_records: Iterable[ActivityRecord],
    exercise_records: Iterable[ActivityRecord],
    profile: UserProfile,
    end: date,
    days: int = 7,
    goals: Optional[GoalTargets] = None,
) -> WeeklySummary:
    """Summarize the ``days`` days ending at ``end`` (inclusive).

    Args:
        diet_records: Diet records (kcal)
        exercise_records: Exercise records (minutes)
        profile: User profile supplying weight and goals
        end: Last day of the window
        days: Window length in days
        goals: Explicit goals; defaults to the profile's goals with fallbacks

    Returns:
        WeeklySummary with per-day buckets, averages and goal-met counts
    """
    start = window_start(end, days)

    if goals is None:
        goals = GoalTargets.from_profile(profile)

    diet = aggregate_trend(diet_records, start, end, Granularity.DAY)
    exercise = aggregate_trend(exercise_records, start, end, Granularity.DAY)

    return WeeklySummary(
        window_start=start,
        window_end=end,
        diet=diet,
        exercise=exercise,
        avg_calories=average(diet),
        avg_exercise_minutes=average(exercise),
        calorie_goal_days=days_goal_met(diet, goals.calorie_goal, calorie_goal_met),
        exercise_goal_days=days_goal_met(exercise, goals.exercise_goal, exercise_goal_met),
        goals=goals,
        current_weight_kg=profile.weight_kg,
    )


def format_weekly_summary(summary: WeeklySummary) -> str:
    """Format weekly summary as text."""
    lines = [
        f"Health Statistics ({summary.window_start} to {summary.window_end})",
        "=" * 50,
        "",
        "Diet",
        "-" * 50,
    ]
    for bucket in summary.diet:
        lines.append(f"  {bucket.period_label:>6}  {bucket.total:8.0f} kcal")
    lines += [
        f"  Average: {summary.avg_calories:.0f} kcal / day",
        f"  Goal:    {summary.goals.calorie_goal} kcal",
        f"  Days goal met: {summary.calorie_goal_days} / {summary.days}",
        "",
        "Exercise",
        "-" * 50,
    ]
    for bucket in summary.exercise:
        lines.append(f"  {bucket.period_label:>6}  {bucket.total:8.0f} min")
    lines += [
        f"  Average: {summary.avg_exercise_minutes:.0f} min / day",
        f"  Goal:    {summary.goals.exercise_goal} min",
        f"  Days goal met: {summary.exercise_goal_days} / {summary.days}",
        "",
        "Weight",
        "-" * 50,
        f"  Current: {summary.current_weight_kg:.1f} kg",
        f"  Goal:    {summary.goals.weight_goal_kg:.1f} kg",
        f"  Gap:     {summary.weight_gap_kg:.1f} kg",
    ]
    return "\n".join(lines)
