"""Diet and exercise tracking with calendar trend aggregation.

Key components:
- Trend buckets per day, week or month (UTC, event time)
- Averages and "days goal met" counts with separate calorie/exercise policies
- Weekly statistics summary against a user's goals
- Profile and activity store interfaces with SQLite implementations
"""

from __future__ import annotations

from healthtrack.tracking.models import (
    ActivityRecord,
    DietEntry,
    ExerciseEntry,
    TrendBucket,
    UserProfile,
)
from healthtrack.tracking.trends import (
    Granularity,
    aggregate_trend,
    average,
    calorie_goal_met,
    days_goal_met,
    exercise_goal_met,
)

__all__ = [
    "ActivityRecord",
    "DietEntry",
    "ExerciseEntry",
    "Granularity",
    "TrendBucket",
    "UserProfile",
    "aggregate_trend",
    "average",
    "calorie_goal_met",
    "days_goal_met",
    "exercise_goal_met",
]
