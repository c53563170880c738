"""Database queries for profiles and diet/exercise logs."""

from __future__ import annotations

import sqlite3
from datetime import date, datetime, time, timedelta, timezone
from typing import Optional

from healthtrack.tracking.models import (
    DietEntry,
    ExerciseEntry,
    UserProfile,
    to_utc,
)


def format_timestamp(moment: datetime) -> str:
    """Serialize a datetime as UTC ISO-8601 with a fixed offset suffix.

    Every stored timestamp shares this shape, so string comparison in SQL
    orders them chronologically.
    """
    return to_utc(moment).isoformat(timespec="seconds")


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    parsed = datetime.fromisoformat(value)
    # CURRENT_TIMESTAMP defaults are naive UTC
    return to_utc(parsed)


def day_bounds(
    start_date: Optional[date], end_date: Optional[date]
) -> tuple[Optional[str], Optional[str]]:
    """UTC [start, end) timestamp strings covering inclusive dates."""
    lower = None
    upper = None
    if start_date is not None:
        lower = format_timestamp(datetime.combine(start_date, time.min, timezone.utc))
    if end_date is not None:
        next_day = end_date + timedelta(days=1)
        upper = format_timestamp(datetime.combine(next_day, time.min, timezone.utc))
    return lower, upper


def _range_clause(
    start_date: Optional[date], end_date: Optional[date], params: list
) -> str:
    lower, upper = day_bounds(start_date, end_date)
    clause = ""
    if lower is not None:
        clause += " AND occurred_at >= ?"
        params.append(lower)
    if upper is not None:
        clause += " AND occurred_at < ?"
        params.append(upper)
    return clause


class UserQueries:
    """Database queries for user profiles."""

    _COLUMNS = """
        user_id, age, sex, height_cm, weight_kg, calorie_goal,
        exercise_goal, weight_goal_kg, created_at, updated_at
    """

    @staticmethod
    def _row_to_profile(row: sqlite3.Row) -> UserProfile:
        return UserProfile(
            user_id=row[0],
            age=row[1],
            sex=row[2],
            height_cm=row[3],
            weight_kg=row[4],
            calorie_goal=row[5],
            exercise_goal=row[6],
            weight_goal_kg=row[7],
            created_at=parse_timestamp(row[8]),
            updated_at=parse_timestamp(row[9]),
        )

    @staticmethod
    def create_user(conn: sqlite3.Connection, profile: UserProfile) -> str:
        """Create a new user profile and return the user_id."""
        conn.execute(
            """
            INSERT INTO user_profiles (user_id, age, sex, height_cm, weight_kg,
                                       calorie_goal, exercise_goal, weight_goal_kg)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                profile.user_id,
                profile.age,
                profile.sex,
                profile.height_cm,
                profile.weight_kg,
                profile.calorie_goal,
                profile.exercise_goal,
                profile.weight_goal_kg,
            ),
        )
        conn.commit()
        return profile.user_id

    @staticmethod
    def get_user(conn: sqlite3.Connection, user_id: str) -> Optional[UserProfile]:
        """Get user profile by ID."""
        row = conn.execute(
            f"SELECT {UserQueries._COLUMNS} FROM user_profiles WHERE user_id = ?",
            (user_id,),
        ).fetchone()

        if row is None:
            return None
        return UserQueries._row_to_profile(row)

    @staticmethod
    def update_user(conn: sqlite3.Connection, profile: UserProfile) -> None:
        """Update body metrics and goals of an existing profile."""
        cursor = conn.execute(
            """
            UPDATE user_profiles
            SET age = ?, sex = ?, height_cm = ?, weight_kg = ?,
                calorie_goal = ?, exercise_goal = ?, weight_goal_kg = ?,
                updated_at = CURRENT_TIMESTAMP
            WHERE user_id = ?
            """,
            (
                profile.age,
                profile.sex,
                profile.height_cm,
                profile.weight_kg,
                profile.calorie_goal,
                profile.exercise_goal,
                profile.weight_goal_kg,
                profile.user_id,
            ),
        )
        if cursor.rowcount == 0:
            raise ValueError(f"Cannot update missing profile '{profile.user_id}'")
        conn.commit()

    @staticmethod
    def save_goals(
        conn: sqlite3.Connection,
        user_id: str,
        calorie_goal: Optional[int] = None,
        exercise_goal: Optional[int] = None,
        weight_goal_kg: Optional[float] = None,
    ) -> bool:
        """Write the given goals, leaving ``None`` ones untouched.

        Returns True if the profile exists.
        """
        cursor = conn.execute(
            """
            UPDATE user_profiles
            SET calorie_goal = COALESCE(?, calorie_goal),
                exercise_goal = COALESCE(?, exercise_goal),
                weight_goal_kg = COALESCE(?, weight_goal_kg),
                updated_at = CURRENT_TIMESTAMP
            WHERE user_id = ?
            """,
            (calorie_goal, exercise_goal, weight_goal_kg, user_id),
        )
        conn.commit()
        return cursor.rowcount > 0


class DietQueries:
    """Database queries for diet log entries."""

    @staticmethod
    def add_entry(conn: sqlite3.Connection, entry: DietEntry) -> DietEntry:
        """Insert a diet entry and return it with its log_id."""
        cursor = conn.execute(
            """
            INSERT INTO diet_log (user_id, food_name, calories, meal_type, occurred_at)
            VALUES (?, ?, ?, ?, ?)
            """,
            (
                entry.user_id,
                entry.food_name,
                entry.calories,
                entry.meal_type,
                format_timestamp(entry.occurred_at),
            ),
        )
        conn.commit()
        entry.log_id = cursor.lastrowid
        return entry

    @staticmethod
    def get_entries(
        conn: sqlite3.Connection,
        user_id: str,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> list[DietEntry]:
        """Get diet entries by event time, oldest first.

        Args:
            user_id: User ID
            start_date: If set, entries on or after this UTC day
            end_date: If set, entries on or before this UTC day
        """
        params: list = [user_id]
        query = """
            SELECT log_id, user_id, food_name, calories, meal_type,
                   occurred_at, created_at
            FROM diet_log
            WHERE user_id = ?
        """
        query += _range_clause(start_date, end_date, params)
        query += " ORDER BY occurred_at ASC, log_id ASC"

        rows = conn.execute(query, params).fetchall()
        return [
            DietEntry(
                log_id=row[0],
                user_id=row[1],
                food_name=row[2],
                calories=row[3],
                meal_type=row[4],
                occurred_at=parse_timestamp(row[5]),  # type: ignore[arg-type]
                created_at=parse_timestamp(row[6]),
            )
            for row in rows
        ]


class ExerciseQueries:
    """Database queries for exercise log entries."""

    @staticmethod
    def add_entry(conn: sqlite3.Connection, entry: ExerciseEntry) -> ExerciseEntry:
        """Insert an exercise entry and return it with its log_id."""
        cursor = conn.execute(
            """
            INSERT INTO exercise_log (user_id, exercise_type, duration_min,
                                      distance_km, calories_burned, occurred_at)
            VALUES (?, ?, ?, ?, ?, ?)
            """,
            (
                entry.user_id,
                entry.exercise_type,
                entry.duration_min,
                entry.distance_km,
                entry.calories_burned,
                format_timestamp(entry.occurred_at),
            ),
        )
        conn.commit()
        entry.log_id = cursor.lastrowid
        return entry

    @staticmethod
    def get_entries(
        conn: sqlite3.Connection,
        user_id: str,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> list[ExerciseEntry]:
        """Get exercise entries by event time, oldest first."""
        params: list = [user_id]
        query = """
            SELECT log_id, user_id, exercise_type, duration_min, distance_km,
                   calories_burned, occurred_at, created_at
            FROM exercise_log
            WHERE user_id = ?
        """
        query += _range_clause(start_date, end_date, params)
        query += " ORDER BY occurred_at ASC, log_id ASC"

        rows = conn.execute(query, params).fetchall()
        return [
            ExerciseEntry(
                log_id=row[0],
                user_id=row[1],
                exercise_type=row[2],
                duration_min=row[3],
                distance_km=row[4],
                calories_burned=row[5],
                occurred_at=parse_timestamp(row[6]),  # type: ignore[arg-type]
                created_at=parse_timestamp(row[7]),
            )
            for row in rows
        ]
