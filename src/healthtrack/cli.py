"""CLI interface using Typer."""

from __future__ import annotations

import json
import math
from datetime import date, datetime, timezone
from pathlib import Path
from typing import NoReturn, Optional

import typer
from rich.console import Console
from rich.table import Table

from healthtrack.config import get_settings
from healthtrack.db import get_db
from healthtrack.errors import HealthTrackError, UserNotFoundError

app = typer.Typer(
    help="Diet and exercise tracking with calorie goal recommendations",
    no_args_is_help=True,
)
console = Console()

# Subcommand groups
user_app = typer.Typer(help="Manage user profiles (body metrics and goals)")
goals_app = typer.Typer(help="Recommend, set and show daily goals")
diet_app = typer.Typer(help="Log and list diet records (kcal)")
exercise_app = typer.Typer(help="Log and list exercise records (minutes)")
stats_app = typer.Typer(help="Trend charts and weekly statistics")
config_app = typer.Typer(help="Show or write configuration")

app.add_typer(user_app, name="user")
app.add_typer(goals_app, name="goals")
app.add_typer(diet_app, name="diet")
app.add_typer(exercise_app, name="exercise")
app.add_typer(stats_app, name="stats")
app.add_typer(config_app, name="config")


# ============================================================================
# Helpers
# ============================================================================


def output_json(response: dict, file=None) -> None:
    """Output JSON response to stdout or file."""
    json_str = json.dumps(response, indent=2)
    if file:
        file.write(json_str)
    else:
        print(json_str)


def fail(
    command: str,
    message: str,
    json_output: bool,
    suggestion: Optional[str] = None,
) -> NoReturn:
    """Report an error and exit with code 1."""
    if json_output:
        response: dict = {"success": False, "command": command, "errors": [message]}
        if suggestion:
            response["suggestions"] = [suggestion]
        output_json(response)
    else:
        console.print(f"[red]{message}[/red]")
        if suggestion:
            console.print(suggestion)
    raise typer.Exit(1)


def ensure_tables() -> None:
    """Create the schema on first use."""
    db = get_db()
    if db.missing_tables():
        db.initialize_schema()


def resolve_user(user_id: Optional[str]) -> str:
    return user_id or get_settings().defaults.user_id


def utc_today() -> date:
    return datetime.now(timezone.utc).date()


def parse_day(value: Optional[str], command: str, json_output: bool) -> date:
    """Parse YYYY-MM-DD, defaulting to today (UTC)."""
    if value is None:
        return utc_today()
    try:
        return date.fromisoformat(value)
    except ValueError:
        fail(command, f"Invalid date '{value}', expected YYYY-MM-DD", json_output)


def parse_moment(value: Optional[str], command: str, json_output: bool) -> datetime:
    """Parse an ISO date or datetime, defaulting to now (UTC)."""
    if value is None:
        return datetime.now(timezone.utc)
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        fail(command, f"Invalid timestamp '{value}', expected ISO-8601", json_output)


NO_PROFILE_HINT = (
    "Create one with: healthtrack user create --age 25 --sex male "
    "--height 170 --weight 65"
)


# Callbacks for sub-apps that touch the database
@user_app.callback()
def user_callback() -> None:
    """Ensure tables exist before any user command."""
    ensure_tables()


@goals_app.callback()
def goals_callback() -> None:
    """Ensure tables exist before any goals command."""
    ensure_tables()


@diet_app.callback()
def diet_callback() -> None:
    """Ensure tables exist before any diet command."""
    ensure_tables()


@exercise_app.callback()
def exercise_callback() -> None:
    """Ensure tables exist before any exercise command."""
    ensure_tables()


@stats_app.callback()
def stats_callback() -> None:
    """Ensure tables exist before any stats command."""
    ensure_tables()


# ============================================================================
# Metabolic estimate
# ============================================================================


@app.command()
def bmr(
    weight: float = typer.Option(..., "--weight", help="Weight in kg"),
    height: float = typer.Option(..., "--height", help="Height in cm"),
    age: int = typer.Option(..., "--age", help="Age in years"),
    sex: str = typer.Option(..., "--sex", help="Sex (male/female)"),
    activity: Optional[str] = typer.Option(
        None,
        "--activity",
        help="Activity multiplier (e.g. 1.4) or level (sedentary/light/moderate/active/very_active)",
    ),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Estimate BMR (Mifflin-St Jeor) and TDEE."""
    from healthtrack.profiles.body_calc import (
        estimate_bmr,
        estimate_tdee,
        resolve_activity_multiplier,
    )

    try:
        multiplier = (
            resolve_activity_multiplier(activity)
            if activity is not None
            else get_settings().goals.activity_multiplier
        )
        bmr_value = estimate_bmr(weight, height, age, sex)
        tdee_value = estimate_tdee(bmr_value, multiplier)
    except HealthTrackError as e:
        fail("bmr", str(e), json_output)

    if json_output:
        output_json({
            "success": True,
            "command": "bmr",
            "data": {
                "bmr_kcal": round(bmr_value, 1),
                "tdee_kcal": round(tdee_value, 1),
                "activity_multiplier": multiplier,
            },
            "human_summary": f"BMR {bmr_value:.0f} kcal/day, TDEE {tdee_value:.0f} kcal/day",
        })
    else:
        console.print(f"[bold]BMR:[/bold]  {bmr_value:.1f} kcal/day")
        console.print(f"[bold]TDEE:[/bold] {tdee_value:.1f} kcal/day (x{multiplier})")


# ============================================================================
# User Profile Commands
# ============================================================================


@user_app.command("create")
def user_create(
    age: int = typer.Option(..., "--age", help="Age in years"),
    sex: str = typer.Option(..., "--sex", help="Sex (male/female)"),
    height: float = typer.Option(..., "--height", help="Height in cm"),
    weight: float = typer.Option(..., "--weight", help="Current weight in kg"),
    weight_goal: Optional[float] = typer.Option(
        None, "--weight-goal", help="Target weight in kg"
    ),
    user_id: Optional[str] = typer.Option(None, "--user", help="User ID (default from config)"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Create a user profile."""
    from healthtrack.tracking.models import UserProfile
    from healthtrack.tracking.queries import UserQueries

    uid = resolve_user(user_id)
    try:
        profile = UserProfile(
            user_id=uid,
            age=age,
            sex=sex,
            height_cm=height,
            weight_kg=weight,
            weight_goal_kg=weight_goal,
        )
    except HealthTrackError as e:
        fail("user create", str(e), json_output)

    db = get_db()
    with db.get_connection() as conn:
        if UserQueries.get_user(conn, uid) is not None:
            fail(
                "user create",
                f"User profile '{uid}' already exists",
                json_output,
                "Update it with: healthtrack user update",
            )
        UserQueries.create_user(conn, profile)

    if json_output:
        output_json({
            "success": True,
            "command": "user create",
            "data": {"profile": profile.to_dict()},
            "human_summary": f"Created user profile '{uid}'",
        })
    else:
        console.print(f"[green]Created user profile '{uid}'[/green]")


@user_app.command("show")
def user_show(
    user_id: Optional[str] = typer.Option(None, "--user", help="User ID (default from config)"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Show user profile."""
    from healthtrack.tracking.queries import UserQueries

    uid = resolve_user(user_id)
    db = get_db()
    with db.get_connection() as conn:
        profile = UserQueries.get_user(conn, uid)

    if profile is None:
        fail("user show", f"No user profile found for '{uid}'", json_output, NO_PROFILE_HINT)

    if json_output:
        output_json({
            "success": True,
            "command": "user show",
            "data": profile.to_dict(),
            "human_summary": f"User {uid}: {profile.sex}, {profile.age}y, {profile.height_cm}cm, {profile.weight_kg}kg",
        })
    else:
        console.print(f"[bold]User Profile ({profile.user_id})[/bold]")
        console.print(f"  Age: {profile.age}")
        console.print(f"  Sex: {profile.sex}")
        console.print(f"  Height: {profile.height_cm} cm")
        console.print(f"  Weight: {profile.weight_kg} kg")
        if profile.weight_goal_kg is not None:
            console.print(f"  Weight goal: {profile.weight_goal_kg} kg")
        if profile.calorie_goal is not None:
            console.print(f"  Calorie goal: {profile.calorie_goal} kcal/day")
        if profile.exercise_goal is not None:
            console.print(f"  Exercise goal: {profile.exercise_goal} min/day")


@user_app.command("update")
def user_update(
    user_id: Optional[str] = typer.Option(None, "--user", help="User ID (default from config)"),
    age: Optional[int] = typer.Option(None, "--age", help="Update age"),
    height: Optional[float] = typer.Option(None, "--height", help="Update height (cm)"),
    weight: Optional[float] = typer.Option(None, "--weight", help="Update current weight (kg)"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Update body metrics of a user profile."""
    from healthtrack.tracking.models import UserProfile
    from healthtrack.tracking.queries import UserQueries

    uid = resolve_user(user_id)
    db = get_db()
    with db.get_connection() as conn:
        profile = UserQueries.get_user(conn, uid)
        if profile is None:
            fail("user update", f"No user profile found for '{uid}'", json_output, NO_PROFILE_HINT)

        try:
            # Rebuilt so the new values are validated
            profile = UserProfile(
                user_id=uid,
                age=age if age is not None else profile.age,
                sex=profile.sex,
                height_cm=height if height is not None else profile.height_cm,
                weight_kg=weight if weight is not None else profile.weight_kg,
                calorie_goal=profile.calorie_goal,
                exercise_goal=profile.exercise_goal,
                weight_goal_kg=profile.weight_goal_kg,
            )
        except HealthTrackError as e:
            fail("user update", str(e), json_output)

        UserQueries.update_user(conn, profile)

    if json_output:
        output_json({
            "success": True,
            "command": "user update",
            "data": profile.to_dict(),
            "human_summary": "Profile updated",
        })
    else:
        console.print("[green]Profile updated[/green]")


# ============================================================================
# Goal Commands
# ============================================================================


@goals_app.command("recommend")
def goals_recommend(
    target: Optional[float] = typer.Option(
        None, "--target", "-t", help="Target weight in kg (default: stored weight goal)"
    ),
    weeks: Optional[int] = typer.Option(None, "--weeks", "-w", help="Weeks to reach target"),
    activity: Optional[str] = typer.Option(
        None, "--activity", help="Activity multiplier or level name"
    ),
    save: bool = typer.Option(False, "--save", help="Store the recommendation as the user's goals"),
    user_id: Optional[str] = typer.Option(None, "--user", help="User ID (default from config)"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Recommend daily calorie and exercise goals for a target weight."""
    from healthtrack.profiles.body_calc import (
        estimate_tdee,
        profile_bmr,
        resolve_activity_multiplier,
    )
    from healthtrack.tracking.service import recommend_user_goals
    from healthtrack.tracking.stores import SqliteProfileStore

    settings = get_settings()
    uid = resolve_user(user_id)
    store = SqliteProfileStore(get_db())

    profile = store.get_profile(uid)
    if profile is None:
        fail("goals recommend", f"No user profile found for '{uid}'", json_output, NO_PROFILE_HINT)

    target_weight = target if target is not None else profile.weight_goal_kg
    if target_weight is None:
        fail(
            "goals recommend",
            "No target weight given and none stored",
            json_output,
            "Pass one with: healthtrack goals recommend --target 60",
        )

    horizon_weeks = weeks if weeks is not None else settings.goals.weeks

    try:
        multiplier = (
            resolve_activity_multiplier(activity)
            if activity is not None
            else settings.goals.activity_multiplier
        )
        goals = recommend_user_goals(
            store, uid, target_weight, horizon_weeks, multiplier, save=save
        )
        tdee_value = estimate_tdee(profile_bmr(profile.biometrics()), multiplier)
    except HealthTrackError as e:
        fail("goals recommend", str(e), json_output)

    if json_output:
        output_json({
            "success": True,
            "command": "goals recommend",
            "data": {
                **goals.to_dict(),
                "tdee_kcal": round(tdee_value, 1),
                "current_weight_kg": profile.weight_kg,
                "target_weight_kg": target_weight,
                "weeks": horizon_weeks,
                "saved": save,
            },
            "human_summary": (
                f"{goals.daily_calorie_goal} kcal/day, "
                f"{goals.daily_exercise_goal_minutes} min exercise/day"
            ),
        })
    else:
        change = target_weight - profile.weight_kg
        console.print(
            f"[bold]Target:[/bold] {profile.weight_kg:.1f} -> {target_weight:.1f} kg "
            f"({change:+.1f} kg in {horizon_weeks} weeks)"
        )
        console.print(f"[blue]TDEE:[/blue] {tdee_value:.0f} kcal/day")
        console.print(f"[green]Calorie goal:[/green] {goals.daily_calorie_goal} kcal/day")
        console.print(
            f"[green]Exercise goal:[/green] {goals.daily_exercise_goal_minutes} min/day"
        )
        if save:
            console.print("[green]Goals saved[/green]")


@goals_app.command("set")
def goals_set(
    calories: Optional[int] = typer.Option(None, "--calories", help="Daily calorie goal (kcal)"),
    exercise: Optional[int] = typer.Option(None, "--exercise", help="Daily exercise goal (min)"),
    weight_goal: Optional[float] = typer.Option(None, "--weight-goal", help="Target weight (kg)"),
    user_id: Optional[str] = typer.Option(None, "--user", help="User ID (default from config)"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Set goals manually; options left out keep their stored value."""
    from healthtrack.tracking.queries import UserQueries

    if calories is None and exercise is None and weight_goal is None:
        fail("goals set", "Nothing to set", json_output, "Pass --calories, --exercise or --weight-goal")

    for name, value in (("calories", calories), ("exercise", exercise), ("weight goal", weight_goal)):
        if value is not None and not (0 < value < math.inf):
            fail("goals set", f"{name} must be a finite number > 0, got {value}", json_output)

    uid = resolve_user(user_id)
    db = get_db()
    with db.get_connection() as conn:
        found = UserQueries.save_goals(
            conn,
            uid,
            calorie_goal=calories,
            exercise_goal=exercise,
            weight_goal_kg=weight_goal,
        )
        profile = UserQueries.get_user(conn, uid) if found else None

    if profile is None:
        fail("goals set", f"No user profile found for '{uid}'", json_output, NO_PROFILE_HINT)

    if json_output:
        output_json({
            "success": True,
            "command": "goals set",
            "data": {
                "calorie_goal": profile.calorie_goal,
                "exercise_goal": profile.exercise_goal,
                "weight_goal_kg": profile.weight_goal_kg,
            },
            "human_summary": "Target updated",
        })
    else:
        console.print("[green]Target updated[/green]")


@goals_app.command("show")
def goals_show(
    user_id: Optional[str] = typer.Option(None, "--user", help="User ID (default from config)"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Show the user's goals (configured defaults fill unset ones)."""
    from healthtrack.tracking.service import load_profile
    from healthtrack.tracking.stores import SqliteProfileStore
    from healthtrack.tracking.summary import GoalTargets

    defaults = get_settings().defaults
    uid = resolve_user(user_id)
    try:
        profile = load_profile(SqliteProfileStore(get_db()), uid)
    except UserNotFoundError as e:
        fail("goals show", str(e), json_output, NO_PROFILE_HINT)

    goals = GoalTargets.from_profile(
        profile,
        calorie_goal=defaults.calorie_goal,
        exercise_goal=defaults.exercise_goal,
        weight_goal_kg=defaults.weight_goal_kg,
    )

    if json_output:
        output_json({
            "success": True,
            "command": "goals show",
            "data": {
                "calorie_goal": goals.calorie_goal,
                "exercise_goal": goals.exercise_goal,
                "weight_goal_kg": goals.weight_goal_kg,
                "current_weight_kg": profile.weight_kg,
            },
            "human_summary": f"{goals.calorie_goal} kcal/day, {goals.exercise_goal} min/day",
        })
    else:
        console.print(f"[bold]Goals ({uid})[/bold]")
        console.print(f"  Calories: {goals.calorie_goal} kcal/day")
        console.print(f"  Exercise: {goals.exercise_goal} min/day")
        console.print(
            f"  Weight:   {goals.weight_goal_kg:.1f} kg "
            f"(gap {profile.weight_kg - goals.weight_goal_kg:.1f} kg)"
        )


# ============================================================================
# Diet and Exercise Logging Commands
# ============================================================================


@diet_app.command("log")
def diet_log(
    calories: float = typer.Argument(..., help="Calories (kcal)"),
    food: str = typer.Option(..., "--food", "-f", help="Food name"),
    meal: str = typer.Option("other", "--meal", "-m", help="breakfast/lunch/dinner/snack/other"),
    at: Optional[str] = typer.Option(None, "--at", help="When eaten (ISO-8601, default: now UTC)"),
    user_id: Optional[str] = typer.Option(None, "--user", help="User ID (default from config)"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Log a diet record."""
    from healthtrack.tracking.models import DietEntry
    from healthtrack.tracking.queries import DietQueries, UserQueries, format_timestamp

    uid = resolve_user(user_id)
    occurred_at = parse_moment(at, "diet log", json_output)
    try:
        entry = DietEntry(
            log_id=None,
            user_id=uid,
            food_name=food,
            calories=calories,
            meal_type=meal.lower(),
            occurred_at=occurred_at,
        )
    except HealthTrackError as e:
        fail("diet log", str(e), json_output)

    db = get_db()
    with db.get_connection() as conn:
        if UserQueries.get_user(conn, uid) is None:
            fail("diet log", f"No user profile found for '{uid}'", json_output, NO_PROFILE_HINT)
        entry = DietQueries.add_entry(conn, entry)

    if json_output:
        output_json({
            "success": True,
            "command": "diet log",
            "data": {
                "log_id": entry.log_id,
                "food_name": entry.food_name,
                "calories": entry.calories,
                "meal_type": entry.meal_type,
                "occurred_at": format_timestamp(entry.occurred_at),
            },
            "human_summary": f"Logged {entry.calories:.0f} kcal ({entry.food_name})",
        })
    else:
        console.print(
            f"[green]Logged:[/green] {entry.calories:.0f} kcal {entry.food_name} "
            f"({entry.meal_type}) at {format_timestamp(entry.occurred_at)}"
        )


@diet_app.command("list")
def diet_list(
    start: Optional[str] = typer.Option(None, "--start", help="First day (YYYY-MM-DD)"),
    end: Optional[str] = typer.Option(None, "--end", help="Last day (YYYY-MM-DD)"),
    user_id: Optional[str] = typer.Option(None, "--user", help="User ID (default from config)"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """List diet records by event time."""
    from healthtrack.tracking.queries import DietQueries, format_timestamp

    uid = resolve_user(user_id)
    start_date = parse_day(start, "diet list", json_output) if start else None
    end_date = parse_day(end, "diet list", json_output) if end else None

    with get_db().get_connection() as conn:
        entries = DietQueries.get_entries(conn, uid, start_date, end_date)

    if json_output:
        output_json({
            "success": True,
            "command": "diet list",
            "data": {
                "entries": [
                    {
                        "log_id": e.log_id,
                        "food_name": e.food_name,
                        "calories": e.calories,
                        "meal_type": e.meal_type,
                        "occurred_at": format_timestamp(e.occurred_at),
                    }
                    for e in entries
                ]
            },
            "human_summary": f"{len(entries)} diet records",
        })
        return

    if not entries:
        console.print("No diet records found")
        return

    table = Table(title="Diet Records")
    table.add_column("When (UTC)", style="cyan")
    table.add_column("Food")
    table.add_column("Meal")
    table.add_column("kcal", justify="right")
    for e in entries:
        table.add_row(
            format_timestamp(e.occurred_at), e.food_name, e.meal_type, f"{e.calories:.0f}"
        )
    console.print(table)


@exercise_app.command("log")
def exercise_log(
    minutes: float = typer.Argument(..., help="Duration in minutes"),
    exercise_type: str = typer.Option(..., "--type", "-t", help="Exercise type (e.g. running)"),
    distance: float = typer.Option(0.0, "--distance", help="Distance in km"),
    burned: float = typer.Option(0.0, "--burned", help="Calories burned (kcal)"),
    at: Optional[str] = typer.Option(None, "--at", help="When done (ISO-8601, default: now UTC)"),
    user_id: Optional[str] = typer.Option(None, "--user", help="User ID (default from config)"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Log an exercise record."""
    from healthtrack.tracking.models import ExerciseEntry
    from healthtrack.tracking.queries import ExerciseQueries, UserQueries, format_timestamp

    uid = resolve_user(user_id)
    occurred_at = parse_moment(at, "exercise log", json_output)
    try:
        entry = ExerciseEntry(
            log_id=None,
            user_id=uid,
            exercise_type=exercise_type,
            duration_min=minutes,
            occurred_at=occurred_at,
            distance_km=distance,
            calories_burned=burned,
        )
    except HealthTrackError as e:
        fail("exercise log", str(e), json_output)

    db = get_db()
    with db.get_connection() as conn:
        if UserQueries.get_user(conn, uid) is None:
            fail("exercise log", f"No user profile found for '{uid}'", json_output, NO_PROFILE_HINT)
        entry = ExerciseQueries.add_entry(conn, entry)

    if json_output:
        output_json({
            "success": True,
            "command": "exercise log",
            "data": {
                "log_id": entry.log_id,
                "exercise_type": entry.exercise_type,
                "duration_min": entry.duration_min,
                "distance_km": entry.distance_km,
                "calories_burned": entry.calories_burned,
                "occurred_at": format_timestamp(entry.occurred_at),
            },
            "human_summary": f"Logged {entry.duration_min:.0f} min {entry.exercise_type}",
        })
    else:
        console.print(
            f"[green]Logged:[/green] {entry.duration_min:.0f} min {entry.exercise_type} "
            f"at {format_timestamp(entry.occurred_at)}"
        )


@exercise_app.command("list")
def exercise_list(
    start: Optional[str] = typer.Option(None, "--start", help="First day (YYYY-MM-DD)"),
    end: Optional[str] = typer.Option(None, "--end", help="Last day (YYYY-MM-DD)"),
    user_id: Optional[str] = typer.Option(None, "--user", help="User ID (default from config)"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """List exercise records by event time."""
    from healthtrack.tracking.queries import ExerciseQueries, format_timestamp

    uid = resolve_user(user_id)
    start_date = parse_day(start, "exercise list", json_output) if start else None
    end_date = parse_day(end, "exercise list", json_output) if end else None

    with get_db().get_connection() as conn:
        entries = ExerciseQueries.get_entries(conn, uid, start_date, end_date)

    if json_output:
        output_json({
            "success": True,
            "command": "exercise list",
            "data": {
                "entries": [
                    {
                        "log_id": e.log_id,
                        "exercise_type": e.exercise_type,
                        "duration_min": e.duration_min,
                        "distance_km": e.distance_km,
                        "calories_burned": e.calories_burned,
                        "occurred_at": format_timestamp(e.occurred_at),
                    }
                    for e in entries
                ]
            },
            "human_summary": f"{len(entries)} exercise records",
        })
        return

    if not entries:
        console.print("No exercise records found")
        return

    table = Table(title="Exercise Records")
    table.add_column("When (UTC)", style="cyan")
    table.add_column("Type")
    table.add_column("Minutes", justify="right")
    table.add_column("km", justify="right")
    table.add_column("kcal", justify="right")
    for e in entries:
        table.add_row(
            format_timestamp(e.occurred_at),
            e.exercise_type,
            f"{e.duration_min:.0f}",
            f"{e.distance_km:.1f}",
            f"{e.calories_burned:.0f}",
        )
    console.print(table)


# ============================================================================
# Statistics Commands
# ============================================================================


@stats_app.command("trend")
def stats_trend(
    kind: str = typer.Argument(..., help="diet or exercise"),
    start: Optional[str] = typer.Option(None, "--start", help="First day (YYYY-MM-DD)"),
    end: Optional[str] = typer.Option(None, "--end", help="Last day (YYYY-MM-DD, default: today)"),
    period: str = typer.Option(
        "weekly", "--period", "-p", help="Trailing window when --start is omitted: daily/weekly/monthly"
    ),
    by: Optional[str] = typer.Option(None, "--by", help="Bucket size: day/week/month"),
    user_id: Optional[str] = typer.Option(None, "--user", help="User ID (default from config)"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Show per-period totals for diet (kcal) or exercise (minutes)."""
    from healthtrack.tracking.stores import SqliteActivityStore
    from healthtrack.tracking.trends import (
        aggregate_trend,
        average,
        parse_granularity,
        trailing_window,
    )

    kind = kind.lower()
    if kind not in ("diet", "exercise"):
        fail("stats trend", f"kind must be 'diet' or 'exercise', got '{kind}'", json_output)

    uid = resolve_user(user_id)
    window_end = parse_day(end, "stats trend", json_output)
    try:
        granularity = parse_granularity(by or get_settings().defaults.granularity).value
        if start is not None:
            window_start = parse_day(start, "stats trend", json_output)
        else:
            window_start, window_end = trailing_window(period, window_end)

        store = SqliteActivityStore(get_db())
        if kind == "diet":
            records = store.get_diet_records(uid, window_start, window_end)
        else:
            records = store.get_exercise_records(uid, window_start, window_end)
        buckets = aggregate_trend(records, window_start, window_end, granularity)
    except HealthTrackError as e:
        fail("stats trend", str(e), json_output)

    unit = "kcal" if kind == "diet" else "min"
    mean = average(buckets)

    if json_output:
        output_json({
            "success": True,
            "command": "stats trend",
            "data": {
                "kind": kind,
                "unit": unit,
                "start": window_start.isoformat(),
                "end": window_end.isoformat(),
                "granularity": granularity,
                "buckets": [b.to_dict() for b in buckets],
                "average": round(mean, 1),
            },
            "human_summary": f"{len(buckets)} periods, average {mean:.0f} {unit}",
        })
        return

    table = Table(title=f"{kind.capitalize()} trend ({window_start} to {window_end})")
    table.add_column("Period", style="cyan")
    table.add_column(unit, justify="right")
    for bucket in buckets:
        table.add_row(bucket.period_label, f"{bucket.total:.0f}")
    console.print(table)
    console.print(f"Average: {mean:.0f} {unit} / {granularity}")


@stats_app.command("week")
def stats_week(
    end: Optional[str] = typer.Option(None, "--end", help="Last day (YYYY-MM-DD, default: today)"),
    days: int = typer.Option(7, "--days", "-d", help="Window length in days"),
    user_id: Optional[str] = typer.Option(None, "--user", help="User ID (default from config)"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Weekly diet/exercise statistics against the user's goals."""
    from healthtrack.tracking.service import user_weekly_summary
    from healthtrack.tracking.stores import SqliteActivityStore, SqliteProfileStore
    from healthtrack.tracking.summary import format_weekly_summary

    uid = resolve_user(user_id)
    window_end = parse_day(end, "stats week", json_output)
    db = get_db()

    try:
        summary = user_weekly_summary(
            SqliteProfileStore(db),
            SqliteActivityStore(db),
            uid,
            window_end,
            days=days,
            fallback_goals=get_settings().defaults.fallback_goals(),
        )
    except UserNotFoundError as e:
        fail("stats week", str(e), json_output, NO_PROFILE_HINT)
    except HealthTrackError as e:
        fail("stats week", str(e), json_output)

    if json_output:
        output_json({
            "success": True,
            "command": "stats week",
            "data": summary.to_dict(),
            "human_summary": (
                f"avg {summary.avg_calories:.0f} kcal, {summary.avg_exercise_minutes:.0f} min; "
                f"calorie goal met {summary.calorie_goal_days}/{summary.days} days, "
                f"exercise goal met {summary.exercise_goal_days}/{summary.days} days"
            ),
        })
    else:
        console.print(format_weekly_summary(summary))


# ============================================================================
# Configuration Commands
# ============================================================================


@config_app.command("show")
def config_show(
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Show the active configuration."""
    import yaml

    try:
        data = get_settings().to_dict()
    except HealthTrackError as e:
        fail("config show", str(e), json_output, "Fix the file or run: healthtrack config init --force")
    if json_output:
        output_json({
            "success": True,
            "command": "config show",
            "data": data,
            "human_summary": f"Database at {data['database']['path']}",
        })
    else:
        console.print(yaml.dump(data, default_flow_style=False, sort_keys=False))


@config_app.command("init")
def config_init(
    path: Optional[Path] = typer.Option(
        None, "--path", help="Where to write config.yaml (default: ~/.healthtrack/config.yaml)"
    ),
    force: bool = typer.Option(False, "--force", help="Overwrite an existing file"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Write the current configuration to a YAML file."""
    from healthtrack.config.settings import _default_config_path

    target = path or _default_config_path()
    if target.exists() and not force:
        fail(
            "config init",
            f"{target} already exists",
            json_output,
            "Use --force to overwrite",
        )

    written = get_settings().save(target)

    if json_output:
        output_json({
            "success": True,
            "command": "config init",
            "data": {"path": str(written)},
            "human_summary": f"Wrote {written}",
        })
    else:
        console.print(f"[green]Wrote {written}[/green]")


if __name__ == "__main__":
    app()
