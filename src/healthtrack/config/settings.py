"""YAML configuration for healthtrack.

The file lives at ``~/.healthtrack/config.yaml`` unless a path is given.
Every section and key is optional; missing ones keep their defaults.

Example::

    database:
      path: ~/.healthtrack/healthtrack.db
    goals:
      activity_multiplier: moderate   # or a number such as 1.4
      weeks: 4
    defaults:
      user_id: default_user
      calorie_goal: 2000
      exercise_goal: 45
      weight_goal_kg: 60.0
      granularity: day
      output_format: table
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import yaml

from healthtrack.errors import InvalidInputError
from healthtrack.profiles.body_calc import (
    DEFAULT_ACTIVITY_MULTIPLIER,
    resolve_activity_multiplier,
)
from healthtrack.profiles.goals import DEFAULT_WEEKS
from healthtrack.tracking.summary import (
    DEFAULT_CALORIE_GOAL,
    DEFAULT_EXERCISE_GOAL,
    DEFAULT_WEIGHT_GOAL_KG,
    GoalTargets,
)
from healthtrack.tracking.trends import parse_granularity

OUTPUT_FORMATS = ("table", "json")


def _default_config_dir() -> Path:
    """Directory holding config.yaml and the default database."""
    return Path.home() / ".healthtrack"


def _default_config_path() -> Path:
    return _default_config_dir() / "config.yaml"


def _positive(section: str, key: str, value: Any, integer: bool = False):
    """Finite number > 0; with integer=True, also a whole number."""
    kind = "a positive integer" if integer else "a finite number > 0"
    if isinstance(value, bool):
        raise InvalidInputError(f"{section}.{key} must be {kind}, got {value!r}")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise InvalidInputError(f"{section}.{key} must be {kind}, got {value!r}") from None
    if not (0 < number < math.inf):
        raise InvalidInputError(f"{section}.{key} must be {kind}, got {value!r}")
    if integer:
        if not number.is_integer():
            raise InvalidInputError(f"{section}.{key} must be {kind}, got {value!r}")
        return int(number)
    return number


def _section(data: Any, name: str) -> dict:
    """Mapping at `name`, empty when absent."""
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise InvalidInputError(
            f"{name} must be a mapping of keys to values, got {type(data).__name__}"
        )
    return data


@dataclass
class DatabaseConfig:
    """Where the local SQLite database is stored."""

    path: Path = field(default_factory=lambda: _default_config_dir() / "healthtrack.db")

    @classmethod
    def from_dict(cls, data: dict) -> "DatabaseConfig":
        config = cls()
        if "path" in data:
            config.path = Path(data["path"]).expanduser()
        return config


@dataclass
class GoalsConfig:
    """Defaults for goal recommendations."""

    activity_multiplier: float = DEFAULT_ACTIVITY_MULTIPLIER
    weeks: int = DEFAULT_WEEKS

    @classmethod
    def from_dict(cls, data: dict) -> "GoalsConfig":
        config = cls()
        if "activity_multiplier" in data:
            config.activity_multiplier = resolve_activity_multiplier(
                data["activity_multiplier"]
            )
        if "weeks" in data:
            config.weeks = _positive("goals", "weeks", data["weeks"], integer=True)
        return config


@dataclass
class DefaultsConfig:
    """User and goal fallbacks, plus output preferences."""

    user_id: str = "default_user"
    calorie_goal: int = DEFAULT_CALORIE_GOAL  # kcal/day
    exercise_goal: int = DEFAULT_EXERCISE_GOAL  # min/day
    weight_goal_kg: float = DEFAULT_WEIGHT_GOAL_KG
    granularity: str = "day"  # "day", "week", "month"
    output_format: str = "table"  # "table", "json"

    @classmethod
    def from_dict(cls, data: dict) -> "DefaultsConfig":
        config = cls()
        if "user_id" in data:
            config.user_id = str(data["user_id"])
        if "calorie_goal" in data:
            config.calorie_goal = _positive("defaults", "calorie_goal", data["calorie_goal"], integer=True)
        if "exercise_goal" in data:
            config.exercise_goal = _positive("defaults", "exercise_goal", data["exercise_goal"], integer=True)
        if "weight_goal_kg" in data:
            config.weight_goal_kg = _positive("defaults", "weight_goal_kg", data["weight_goal_kg"])
        if "granularity" in data:
            config.granularity = parse_granularity(data["granularity"]).value
        if "output_format" in data:
            output_format = str(data["output_format"]).lower()
            if output_format not in OUTPUT_FORMATS:
                raise InvalidInputError(
                    f"defaults.output_format must be one of {OUTPUT_FORMATS}, got '{output_format}'"
                )
            config.output_format = output_format
        return config

    def fallback_goals(self) -> GoalTargets:
        """Goals used when a profile has none stored."""
        return GoalTargets(
            calorie_goal=self.calorie_goal,
            exercise_goal=self.exercise_goal,
            weight_goal_kg=self.weight_goal_kg,
        )


@dataclass
class Settings:
    """All configuration sections."""

    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    goals: GoalsConfig = field(default_factory=GoalsConfig)
    defaults: DefaultsConfig = field(default_factory=DefaultsConfig)

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> "Settings":
        """Read settings from YAML, or return defaults if the file is absent.

        Args:
            config_path: Path to config.yaml. If None, uses ~/.healthtrack/config.yaml

        Returns:
            Settings instance

        Raises:
            InvalidInputError: If the file is not a mapping or a value is out of range
        """
        path = config_path or _default_config_path()
        if not path.exists():
            return cls()

        with open(path) as f:
            data = _section(yaml.safe_load(f), "config file")

        return cls(
            database=DatabaseConfig.from_dict(_section(data.get("database"), "database")),
            goals=GoalsConfig.from_dict(_section(data.get("goals"), "goals")),
            defaults=DefaultsConfig.from_dict(_section(data.get("defaults"), "defaults")),
        )

    def to_dict(self) -> dict:
        """Plain dict in the config.yaml layout."""
        return {
            "database": {"path": str(self.database.path)},
            "goals": {
                "activity_multiplier": self.goals.activity_multiplier,
                "weeks": self.goals.weeks,
            },
            "defaults": {
                "user_id": self.defaults.user_id,
                "calorie_goal": self.defaults.calorie_goal,
                "exercise_goal": self.defaults.exercise_goal,
                "weight_goal_kg": self.defaults.weight_goal_kg,
                "granularity": self.defaults.granularity,
                "output_format": self.defaults.output_format,
            },
        }

    def save(self, config_path: Optional[Path] = None) -> Path:
        """Write settings as YAML and return the path written."""
        path = config_path or _default_config_path()
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            yaml.dump(self.to_dict(), f, default_flow_style=False, sort_keys=False)
        return path


# Loaded on first use
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Process-wide settings, read from the default path on first call."""
    global _settings
    if _settings is None:
        _settings = Settings.load()
    return _settings


def reload_settings(config_path: Optional[Path] = None) -> Settings:
    """Re-read settings, optionally from another file, and make them current."""
    global _settings
    _settings = Settings.load(config_path)
    return _settings
