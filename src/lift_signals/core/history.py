"""
History indexing: calendar days, Sunday-aligned weeks, exercise lookups.

Every temporal component builds on these helpers.  None of them mutate the
input list; sorting always works on a copy and is stable, so results do not
depend on the caller's ordering.
"""

from collections import Counter
from datetime import date, timedelta

from .models import WorkoutExercise, WorkoutLog


def workout_day(workout: WorkoutLog) -> date:
    """Calendar day of a workout (time of day is ignored)."""
    return workout.day


def sort_newest_first(history: list[WorkoutLog]) -> list[WorkoutLog]:
    # Secondary key keeps same-day sessions in a deterministic order
    return sorted(history, key=lambda w: (w.day, w.date, w.id), reverse=True)


def sort_oldest_first(history: list[WorkoutLog]) -> list[WorkoutLog]:
    return sorted(history, key=lambda w: (w.day, w.date, w.id))


def unique_workout_dates(history: list[WorkoutLog]) -> list[date]:
    """
    Unique training days, newest first.

    Two sessions on the same day collapse into one entry.
    """
    return sorted({w.day for w in history}, reverse=True)


def week_start(day: date) -> date:
    """
    Sunday that starts the week containing ``day``.

    date.weekday() is Monday=0 … Sunday=6, so Sunday maps to itself.
    """
    return day - timedelta(days=(day.weekday() + 1) % 7)


def group_by_week(history: list[WorkoutLog]) -> dict[date, list[WorkoutLog]]:
    """
    Bucket workouts by Sunday-aligned week start.

    Every workout is kept (same-day sessions are not collapsed).  Keys are
    returned newest week first; workouts inside a bucket are oldest first.
    """
    weeks: dict[date, list[WorkoutLog]] = {}
    for workout in sort_oldest_first(history):
        weeks.setdefault(week_start(workout.day), []).append(workout)
    return dict(sorted(weeks.items(), reverse=True))


def workouts_between(
    history: list[WorkoutLog],
    start: date,
    end: date,
) -> list[WorkoutLog]:
    """Workouts with start <= day < end, oldest first."""
    return [w for w in sort_oldest_first(history) if start <= w.day < end]


def exercise_occurrences(
    history: list[WorkoutLog],
    exercise_name: str,
    exclude_workout_id: str | None = None,
) -> list[tuple[WorkoutLog, WorkoutExercise]]:
    """
    Every (workout, exercise) pair for ``exercise_name``, newest first.

    Matching is case-insensitive exact string match; the first matching
    exercise inside a workout is used.

    Args:
        history: Workout history in any order
        exercise_name: Name to look up
        exclude_workout_id: Skip this workout (usually the one being logged)

    Returns:
        List of (workout, exercise) tuples
    """
    result: list[tuple[WorkoutLog, WorkoutExercise]] = []
    for workout in sort_newest_first(history):
        if exclude_workout_id is not None and workout.id == exclude_workout_id:
            continue
        exercise = workout.find_exercise(exercise_name)
        if exercise is not None:
            result.append((workout, exercise))
    return result


def unique_exercise_names(history: list[WorkoutLog]) -> list[str]:
    """
    Distinct exercise names, sorted.

    Names differing only by case are merged; the first spelling seen
    (oldest workout first) is kept.
    """
    names: dict[str, str] = {}
    for workout in sort_oldest_first(history):
        for ex in workout.exercises:
            names.setdefault(ex.name.lower(), ex.name)
    return sorted(names.values(), key=str.lower)


def most_frequent_exercises(history: list[WorkoutLog], limit: int = 6) -> list[str]:
    """Exercise names ordered by the number of workouts they appear in."""
    counts: Counter[str] = Counter()
    spelling: dict[str, str] = {}
    for workout in sort_oldest_first(history):
        seen: set[str] = set()
        for ex in workout.exercises:
            key = ex.name.lower()
            spelling.setdefault(key, ex.name)
            if key not in seen:
                counts[key] += 1
                seen.add(key)
    ranked = sorted(counts.items(), key=lambda kv: (-kv[1], kv[0]))
    return [spelling[key] for key, _ in ranked[:limit]]


def workout_calendar(
    history: list[WorkoutLog],
    days: int = 90,
    today: date | None = None,
) -> dict[date, int]:
    """
    Workouts per day for the last ``days`` days (heatmap data).

    Days without training are present with a count of 0.  Keys run from
    today backwards.
    """
    if today is None:
        today = date.today()
    calendar = {today - timedelta(days=i): 0 for i in range(days)}
    for workout in history:
        if workout.day in calendar:
            calendar[workout.day] += 1
    return calendar
