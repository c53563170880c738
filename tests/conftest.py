"""Pytest fixtures for healthtrack tests."""

from __future__ import annotations

import tempfile
from datetime import date
from pathlib import Path
from typing import Optional

import pytest

from healthtrack.db.connection import DatabaseConnection
from healthtrack.profiles.goals import DerivedGoals
from healthtrack.tracking.models import ActivityRecord, UserProfile
from healthtrack.tracking.queries import UserQueries


class MemoryProfileStore:
    """Dict-backed ProfileStore."""

    def __init__(self, profiles: Optional[dict] = None):
        self.profiles: dict[str, UserProfile] = dict(profiles or {})
        self.saved: list[tuple[str, DerivedGoals, Optional[float]]] = []

    def get_profile(self, user_id: str) -> Optional[UserProfile]:
        return self.profiles.get(user_id)

    def save_goals(self, user_id, goals, weight_goal_kg=None) -> bool:
        profile = self.profiles.get(user_id)
        if profile is None:
            return False
        self.saved.append((user_id, goals, weight_goal_kg))
        profile.calorie_goal = goals.daily_calorie_goal
        profile.exercise_goal = goals.daily_exercise_goal_minutes
        if weight_goal_kg is not None:
            profile.weight_goal_kg = weight_goal_kg
        return True


class MemoryActivityStore:
    """List-backed ActivityStore; filters by UTC day like the SQLite store."""

    def __init__(self, diet=None, exercise=None):
        self.diet: dict[str, list[ActivityRecord]] = dict(diet or {})
        self.exercise: dict[str, list[ActivityRecord]] = dict(exercise or {})

    @staticmethod
    def _filter(records, start: Optional[date], end: Optional[date]):
        return [
            r for r in records
            if (start is None or r.day >= start) and (end is None or r.day <= end)
        ]

    def get_diet_records(self, user_id, start_date=None, end_date=None):
        return self._filter(self.diet.get(user_id, []), start_date, end_date)

    def get_exercise_records(self, user_id, start_date=None, end_date=None):
        return self._filter(self.exercise.get(user_id, []), start_date, end_date)


@pytest.fixture
def temp_db():
    """Create a temporary database with schema."""
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = Path(f.name)

    db = DatabaseConnection(db_path)
    db.initialize_schema()

    yield db

    # Cleanup
    db_path.unlink(missing_ok=True)


@pytest.fixture
def sample_profile() -> UserProfile:
    """65 kg, 170 cm, 25 year old male aiming for 60 kg."""
    return UserProfile(
        user_id="u1",
        age=25,
        sex="male",
        height_cm=170,
        weight_kg=65,
        weight_goal_kg=60,
    )


@pytest.fixture
def sample_user(temp_db, sample_profile):
    """Database with the sample profile stored."""
    with temp_db.get_connection() as conn:
        UserQueries.create_user(conn, sample_profile)
    return temp_db


@pytest.fixture
def profile_store(sample_profile) -> MemoryProfileStore:
    """In-memory profile store holding the sample profile."""
    return MemoryProfileStore({sample_profile.user_id: sample_profile})


@pytest.fixture
def activity_store() -> MemoryActivityStore:
    """Empty in-memory activity store."""
    return MemoryActivityStore()
