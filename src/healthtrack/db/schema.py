"""SQLite database schema definitions."""

SCHEMA_SQL = """
-- User profiles with body metrics and daily goals
CREATE TABLE IF NOT EXISTS user_profiles (
    user_id TEXT PRIMARY KEY,
    age INTEGER NOT NULL CHECK(age >= 0),
    sex TEXT NOT NULL CHECK(sex IN ('male', 'female')),
    height_cm REAL NOT NULL CHECK(height_cm > 0),
    weight_kg REAL NOT NULL CHECK(weight_kg > 0),
    calorie_goal INTEGER,
    exercise_goal INTEGER,
    weight_goal_kg REAL,
    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
    updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
);

-- Diet log; occurred_at is event time as UTC ISO-8601
CREATE TABLE IF NOT EXISTS diet_log (
    log_id INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id TEXT NOT NULL,
    food_name TEXT NOT NULL,
    calories REAL NOT NULL CHECK(calories >= 0),
    meal_type TEXT NOT NULL DEFAULT 'other'
        CHECK(meal_type IN ('breakfast', 'lunch', 'dinner', 'snack', 'other')),
    occurred_at TEXT NOT NULL,
    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
    FOREIGN KEY (user_id) REFERENCES user_profiles(user_id)
);

CREATE INDEX IF NOT EXISTS idx_diet_log_user_time ON diet_log(user_id, occurred_at);

-- Exercise log; duration in minutes
CREATE TABLE IF NOT EXISTS exercise_log (
    log_id INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id TEXT NOT NULL,
    exercise_type TEXT NOT NULL,
    duration_min REAL NOT NULL DEFAULT 0 CHECK(duration_min >= 0),
    distance_km REAL NOT NULL DEFAULT 0,
    calories_burned REAL NOT NULL DEFAULT 0,
    occurred_at TEXT NOT NULL,
    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
    FOREIGN KEY (user_id) REFERENCES user_profiles(user_id)
);

CREATE INDEX IF NOT EXISTS idx_exercise_log_user_time ON exercise_log(user_id, occurred_at);
"""


TABLE_NAMES = ("user_profiles", "diet_log", "exercise_log")


def get_schema_sql() -> str:
    """Return the complete schema SQL."""
    return SCHEMA_SQL
