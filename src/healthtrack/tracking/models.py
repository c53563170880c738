"""Data models for profiles, activity logs and trend buckets."""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Optional

from healthtrack.errors import InvalidInputError
from healthtrack.profiles.body_calc import BiometricProfile, parse_sex


VALID_MEAL_TYPES = ("breakfast", "lunch", "dinner", "snack", "other")


def to_utc(moment: datetime) -> datetime:
    """Return an aware UTC datetime; naive values are taken to be UTC."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


@dataclass(frozen=True)
class ActivityRecord:
    """A timestamped quantity: kcal for diet, minutes for exercise."""

    occurred_at: datetime
    quantity: float

    @property
    def day(self) -> date:
        """UTC calendar day the record falls on."""
        return to_utc(self.occurred_at).date()


@dataclass(frozen=True)
class TrendBucket:
    """Summed quantity for one calendar period of a trend window."""

    period_label: str
    period_start: date
    period_end: date  # inclusive
    total: float

    def to_dict(self) -> dict:
        """Convert to dict for JSON output."""
        return {
            "period": self.period_label,
            "start": self.period_start.isoformat(),
            "end": self.period_end.isoformat(),
            "total": self.total,
        }


@dataclass
class UserProfile:
    """Stored user profile with body metrics and daily goals."""

    user_id: str
    age: int
    sex: str  # 'male' or 'female'
    height_cm: float
    weight_kg: float
    calorie_goal: Optional[int] = None  # kcal/day
    exercise_goal: Optional[int] = None  # minutes/day
    weight_goal_kg: Optional[float] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def __post_init__(self) -> None:
        self.sex = parse_sex(self.sex).value
        if not (0 < self.weight_kg < math.inf):
            raise InvalidInputError(f"weight must be a finite number > 0 kg, got {self.weight_kg}")
        if not (0 < self.height_cm < math.inf):
            raise InvalidInputError(f"height must be a finite number > 0 cm, got {self.height_cm}")
        if not (0 <= self.age < math.inf):
            raise InvalidInputError(f"age must be a finite number >= 0, got {self.age}")

    def biometrics(self) -> BiometricProfile:
        """Body metrics as a BiometricProfile."""
        return BiometricProfile(
            weight_kg=self.weight_kg,
            height_cm=self.height_cm,
            age_years=self.age,
            sex=parse_sex(self.sex),
        )

    def to_dict(self) -> dict:
        """Convert to dict for JSON output."""
        return {
            "user_id": self.user_id,
            "age": self.age,
            "sex": self.sex,
            "height_cm": self.height_cm,
            "weight_kg": self.weight_kg,
            "calorie_goal": self.calorie_goal,
            "exercise_goal": self.exercise_goal,
            "weight_goal_kg": self.weight_goal_kg,
        }


@dataclass
class DietEntry:
    """A single diet log entry."""

    log_id: Optional[int]
    user_id: str
    food_name: str
    calories: float
    occurred_at: datetime
    meal_type: str = "other"
    created_at: Optional[datetime] = None

    def __post_init__(self) -> None:
        if self.meal_type not in VALID_MEAL_TYPES:
            raise InvalidInputError(
                f"meal_type must be one of {VALID_MEAL_TYPES}, got '{self.meal_type}'"
            )
        if not (0 <= self.calories < math.inf):
            raise InvalidInputError(f"calories must be a finite number >= 0, got {self.calories}")

    def to_record(self) -> ActivityRecord:
        return ActivityRecord(occurred_at=self.occurred_at, quantity=self.calories)


@dataclass
class ExerciseEntry:
    """A single exercise log entry."""

    log_id: Optional[int]
    user_id: str
    exercise_type: str
    duration_min: float
    occurred_at: datetime
    distance_km: float = 0.0
    calories_burned: float = 0.0
    created_at: Optional[datetime] = None

    def __post_init__(self) -> None:
        if not (0 <= self.duration_min < math.inf):
            raise InvalidInputError(
                f"duration must be a finite number >= 0 minutes, got {self.duration_min}"
            )

    def to_record(self) -> ActivityRecord:
        return ActivityRecord(occurred_at=self.occurred_at, quantity=self.duration_min)
