"""
JSON serialization for workout records.

Handles conversion between dataclasses and JSON-compatible dicts.

Records are emitted with snake_case keys.  On read, the camelCase keys of
app exports (``isWarmup``, ``startTime``, ``totalCalories``, a set's
``weight``) are accepted as aliases so an export can be analysed as-is.
"""

import json
from typing import Any

from ..core.models import WorkoutExercise, WorkoutLog, WorkoutSet, parse_day


class ValidationError(Exception):
    """Raised when data validation fails."""

    pass


def _pick(data: dict[str, Any], *keys: str, default: Any = None) -> Any:
    """First present (non-None) value among alias keys."""
    for key in keys:
        if data.get(key) is not None:
            return data[key]
    return default


def validate_date(date_str: Any) -> str:
    """
    Validate an ISO date or date-time string.

    Args:
        date_str: Value to validate

    Returns:
        The string unchanged (time of day is kept)

    Raises:
        ValidationError: If the leading YYYY-MM-DD part is not a valid date
    """
    if not isinstance(date_str, str):
        raise ValidationError(f"Invalid date: {date_str!r}. Expected YYYY-MM-DD")
    try:
        parse_day(date_str)
    except ValueError as e:
        raise ValidationError(str(e)) from e
    return date_str


def validate_non_negative(value: int | float, name: str) -> int | float:
    """
    Validate that a value is non-negative.

    Raises:
        ValidationError: If value is negative
    """
    if value < 0:
        raise ValidationError(f"{name} must be non-negative, got {value}")
    return value


def validate_number(value: Any, name: str) -> float:
    """
    Coerce a JSON value to float.

    Raises:
        ValidationError: If value is not numeric
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError(f"{name} must be a number, got {value!r}")
    return float(value)


def workout_set_to_dict(workout_set: WorkoutSet) -> dict[str, Any]:
    """Convert WorkoutSet to a JSON-compatible dict (optional fields omitted)."""
    d: dict[str, Any] = {
        "weight_kg": workout_set.weight_kg,
        "reps": workout_set.reps,
        "completed": workout_set.completed,
    }
    if workout_set.is_warmup:
        d["is_warmup"] = True
    if workout_set.rir is not None:
        d["rir"] = workout_set.rir
    if workout_set.rpe is not None:
        d["rpe"] = workout_set.rpe
    return d


def dict_to_workout_set(data: dict[str, Any]) -> WorkoutSet:
    """
    Convert dict to WorkoutSet.

    Raises:
        ValidationError: If data is invalid
    """
    weight = validate_number(_pick(data, "weight_kg", "weight", default=0), "weight_kg")
    reps = validate_number(_pick(data, "reps", default=0), "reps")
    validate_non_negative(weight, "weight_kg")
    validate_non_negative(reps, "reps")

    rir = _pick(data, "rir")
    rpe = _pick(data, "rpe")
    try:
        return WorkoutSet(
            weight_kg=weight,
            reps=int(reps),
            completed=bool(_pick(data, "completed", default=True)),
            is_warmup=bool(_pick(data, "is_warmup", "isWarmup", default=False)),
            rir=int(validate_number(rir, "rir")) if rir is not None else None,
            rpe=validate_number(rpe, "rpe") if rpe is not None else None,
        )
    except ValueError as e:
        raise ValidationError(str(e)) from e


def workout_exercise_to_dict(exercise: WorkoutExercise) -> dict[str, Any]:
    d: dict[str, Any] = {
        "name": exercise.name,
        "sets": [workout_set_to_dict(s) for s in exercise.sets],
    }
    if exercise.exercise_id:
        d["exercise_id"] = exercise.exercise_id
    return d


def dict_to_workout_exercise(data: dict[str, Any]) -> WorkoutExercise:
    """
    Convert dict to WorkoutExercise.

    Raises:
        ValidationError: If the name is missing or a set is invalid
    """
    name = data.get("name")
    if not isinstance(name, str) or not name.strip():
        raise ValidationError(f"Exercise name must be a non-empty string, got {name!r}")
    raw_sets = data.get("sets", [])
    if not isinstance(raw_sets, list):
        raise ValidationError(f"'sets' of {name!r} must be a list")
    return WorkoutExercise(
        name=name,
        sets=[dict_to_workout_set(s) for s in raw_sets],
        exercise_id=str(_pick(data, "exercise_id", "exerciseId", default="")),
    )


def workout_log_to_dict(workout: WorkoutLog) -> dict[str, Any]:
    """
    Convert WorkoutLog to JSON-compatible dict.

    Args:
        workout: WorkoutLog to convert

    Returns:
        Dict representation
    """
    d: dict[str, Any] = {
        "id": workout.id,
        "name": workout.name,
        "date": workout.date,
        "exercises": [workout_exercise_to_dict(ex) for ex in workout.exercises],
    }
    if workout.start_time is not None:
        d["start_time"] = workout.start_time
    if workout.end_time is not None:
        d["end_time"] = workout.end_time
    if workout.total_calories is not None:
        d["total_calories"] = workout.total_calories
    return d


def dict_to_workout_log(data: dict[str, Any]) -> WorkoutLog:
    """
    Convert dict to WorkoutLog.

    Args:
        data: Dict representation

    Returns:
        WorkoutLog instance

    Raises:
        ValidationError: If data is invalid
    """
    if "date" not in data:
        raise ValidationError("Workout is missing 'date'")
    date_str = validate_date(data["date"])

    raw_exercises = data.get("exercises", [])
    if not isinstance(raw_exercises, list):
        raise ValidationError("'exercises' must be a list")

    start = _pick(data, "start_time", "startTime")
    end = _pick(data, "end_time", "endTime")
    calories = _pick(data, "total_calories", "totalCalories")

    try:
        return WorkoutLog(
            id=str(data.get("id") or date_str),
            name=str(data.get("name") or "Workout"),
            date=date_str,
            exercises=[dict_to_workout_exercise(ex) for ex in raw_exercises],
            start_time=int(validate_number(start, "start_time")) if start is not None else None,
            end_time=int(validate_number(end, "end_time")) if end is not None else None,
            total_calories=validate_number(calories, "total_calories") if calories is not None else None,
        )
    except ValueError as e:
        raise ValidationError(str(e)) from e


def json_line_to_workout(line: str) -> WorkoutLog:
    """
    Deserialize a JSON line to a WorkoutLog.

    Raises:
        ValidationError: If JSON is invalid or data validation fails
    """
    try:
        data = json.loads(line.strip())
    except json.JSONDecodeError as e:
        raise ValidationError(f"Invalid JSON: {e}") from e
    if not isinstance(data, dict):
        raise ValidationError("Expected a JSON object per line")
    return dict_to_workout_log(data)
