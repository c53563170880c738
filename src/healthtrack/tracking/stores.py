"""Profile and activity store interfaces, with SQLite implementations.

The calculation core never reads or writes storage itself; services take
stores as explicit arguments. Any object with these methods will do, which
is how a remote document store can be plugged in instead of SQLite.
"""

from __future__ import annotations

from datetime import date
from typing import Optional, Protocol

from healthtrack.db.connection import DatabaseConnection
from healthtrack.profiles.goals import DerivedGoals
from healthtrack.tracking.models import ActivityRecord, UserProfile
from healthtrack.tracking.queries import DietQueries, ExerciseQueries, UserQueries


class ProfileStore(Protocol):
    """Reads body metrics and writes derived goals, keyed by user."""

    def get_profile(self, user_id: str) -> Optional[UserProfile]:
        ...

    def save_goals(
        self,
        user_id: str,
        goals: DerivedGoals,
        weight_goal_kg: Optional[float] = None,
    ) -> bool:
        ...


class ActivityStore(Protocol):
    """Reads diet and exercise records for a user and UTC date range."""

    def get_diet_records(
        self,
        user_id: str,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> list[ActivityRecord]:
        ...

    def get_exercise_records(
        self,
        user_id: str,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> list[ActivityRecord]:
        ...


class SqliteProfileStore:
    """ProfileStore over the local SQLite database."""

    def __init__(self, db: DatabaseConnection):
        self.db = db

    def get_profile(self, user_id: str) -> Optional[UserProfile]:
        with self.db.get_connection() as conn:
            return UserQueries.get_user(conn, user_id)

    def save_goals(
        self,
        user_id: str,
        goals: DerivedGoals,
        weight_goal_kg: Optional[float] = None,
    ) -> bool:
        with self.db.get_connection() as conn:
            return UserQueries.save_goals(
                conn,
                user_id,
                calorie_goal=goals.daily_calorie_goal,
                exercise_goal=goals.daily_exercise_goal_minutes,
                weight_goal_kg=weight_goal_kg,
            )


class SqliteActivityStore:
    """ActivityStore over the local SQLite database.

    Diet records carry kcal; exercise records carry duration in minutes.
    """

    def __init__(self, db: DatabaseConnection):
        self.db = db

    def get_diet_records(
        self,
        user_id: str,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> list[ActivityRecord]:
        with self.db.get_connection() as conn:
            entries = DietQueries.get_entries(conn, user_id, start_date, end_date)
        return [e.to_record() for e in entries]

    def get_exercise_records(
        self,
        user_id: str,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> list[ActivityRecord]:
        with self.db.get_connection() as conn:
            entries = ExerciseQueries.get_entries(conn, user_id, start_date, end_date)
        return [e.to_record() for e in entries]
