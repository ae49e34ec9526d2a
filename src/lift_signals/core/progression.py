"""
Progression comparison and personal-record lookups.

The comparator classifies an exercise occurrence against the most recent
previous occurrence.  Weight is the primary progression signal; reps and
volume only break ties when weight did not change.

Longer-range views (trend, period progress, strength score) work on the
best estimated 1RM of each occurrence.
"""

import calendar
from datetime import date, timedelta

from .config import BIG_LIFTS, TREND_STABLE_BAND_KG, TREND_WORKOUTS
from .history import exercise_occurrences, sort_oldest_first, workouts_between
from .metrics import best_1rm_set, best_estimated_1rm, best_set, estimate_one_rep_max
from .models import (
    LiftScore,
    PeriodProgress,
    PersonalRecord,
    ProgressionMetric,
    ProgressionResult,
    StrengthScore,
    TrendData,
    TrendDirection,
    WorkoutExercise,
    WorkoutLog,
)


def find_previous_exercise(
    history: list[WorkoutLog],
    exercise_name: str,
    exclude_workout_id: str | None = None,
) -> WorkoutExercise | None:
    """
    Find the most recent occurrence of an exercise.

    Args:
        history: Workout history in any order
        exercise_name: Name to match (case-insensitive)
        exclude_workout_id: Skip this workout, usually the one in progress

    Returns:
        The matching WorkoutExercise, or None if never logged
    """
    occurrences = exercise_occurrences(history, exercise_name, exclude_workout_id)
    if not occurrences:
        return None
    return occurrences[0][1]


def calculate_progression(
    current: WorkoutExercise,
    previous: WorkoutExercise | None,
) -> ProgressionResult:
    """
    Compare the best set of two occurrences of the same exercise.

    Cascade: weight delta, then reps delta, then volume delta.  The first
    non-zero delta decides status and metric.

    Args:
        current: Occurrence being evaluated
        previous: Most recent earlier occurrence, or None

    Returns:
        ProgressionResult; "maintained" with delta 0 when either side lacks data
    """
    current_best = best_set(current)
    previous_best = best_set(previous) if previous is not None else None

    if current_best is None or previous_best is None:
        return ProgressionResult(
            status="maintained",
            delta=0,
            metric="weight",
            previous_best=previous_best,
            current_best=current_best,
        )

    deltas: list[tuple[ProgressionMetric, float]] = [
        ("weight", current_best.weight_kg - previous_best.weight_kg),
        ("reps", current_best.reps - previous_best.reps),
        ("volume", current_best.volume - previous_best.volume),
    ]

    for metric, delta in deltas:
        if delta != 0:
            return ProgressionResult(
                status="improved" if delta > 0 else "decreased",
                delta=delta,
                metric=metric,
                previous_best=previous_best,
                current_best=current_best,
            )

    return ProgressionResult(
        status="maintained",
        delta=0,
        metric="weight",
        previous_best=previous_best,
        current_best=current_best,
    )


def get_exercise_progression(
    exercise_name: str,
    current: WorkoutExercise,
    history: list[WorkoutLog],
    exclude_workout_id: str | None = None,
) -> ProgressionResult:
    """Look up the previous occurrence and compare against it."""
    previous = find_previous_exercise(history, exercise_name, exclude_workout_id)
    return calculate_progression(current, previous)


def format_progression_delta(result: ProgressionResult) -> str:
    """Short display string such as "+5kg", "-2 reps" or "+120kg total"."""
    delta = result.delta
    sign = "+" if delta > 0 else ""
    if result.metric == "weight":
        return f"{sign}{delta:g}kg"
    if result.metric == "reps":
        return f"{sign}{delta:g} reps"
    return f"{sign}{delta:.0f}kg total"


def personal_record(exercise_name: str, history: list[WorkoutLog]) -> PersonalRecord | None:
    """
    Highest estimated 1RM ever logged for an exercise.

    The earliest session wins when two sessions tie.
    """
    record: PersonalRecord | None = None
    for workout in sort_oldest_first(history):
        exercise = workout.find_exercise(exercise_name)
        if exercise is None:
            continue
        top = best_1rm_set(exercise)
        if top is None:
            continue
        est = estimate_one_rep_max(top.weight_kg, top.reps)
        if record is None or est > record.estimated_1rm:
            record = PersonalRecord(
                exercise_name=exercise.name,
                estimated_1rm=est,
                date=workout.date,
                weight_kg=top.weight_kg,
                reps=top.reps,
                workout_name=workout.name,
            )
    return record


def recent_personal_records(
    history: list[WorkoutLog],
    days_back: int = 30,
    today: date | None = None,
) -> list[PersonalRecord]:
    """
    PRs set in the last ``days_back`` days, most recent first.

    Walks history chronologically keeping a running best 1RM per exercise
    (case-insensitive); every time the running best is beaten inside the
    window a record is emitted.
    """
    if today is None:
        today = date.today()

    running: dict[str, float] = {}
    records: list[PersonalRecord] = []

    for workout in sort_oldest_first(history):
        for exercise in workout.exercises:
            top = best_1rm_set(exercise)
            if top is None:
                continue
            est = estimate_one_rep_max(top.weight_kg, top.reps)
            key = exercise.name.lower()
            if key in running and est <= running[key]:
                continue
            running[key] = est
            days_ago = (today - workout.day).days
            if 0 <= days_ago <= days_back:
                records.append(
                    PersonalRecord(
                        exercise_name=exercise.name,
                        estimated_1rm=est,
                        date=workout.date,
                        weight_kg=top.weight_kg,
                        reps=top.reps,
                        workout_name=workout.name,
                        days_ago=days_ago,
                    )
                )

    records.sort(key=lambda r: r.days_ago or 0)
    return records


# =============================================================================
# Trends and strength score
# =============================================================================


def exercise_trend(
    exercise_name: str,
    history: list[WorkoutLog],
    last_n: int = TREND_WORKOUTS,
    today: date | None = None,
) -> TrendData:
    """
    Direction of the best e1RM over the last ``last_n`` occurrences.

    The average change between consecutive occurrences (newer minus older)
    above +1 kg is "increasing", below -1 kg "decreasing", anything in
    between "stable".  Occurrences without working sets are dropped after
    the window is taken.

    Args:
        exercise_name: Name to match (case-insensitive)
        history: Workout history in any order
        last_n: Number of most recent occurrences to inspect
        today: Reference day; later entries are ignored

    Returns:
        TrendData; "stable" with fewer than two usable occurrences
    """
    if today is None:
        today = date.today()

    occurrences = [(w, ex) for w, ex in exercise_occurrences(history, exercise_name) if w.day <= today]
    one_rms = [
        est for est in (best_estimated_1rm(ex) for _, ex in occurrences[:last_n]) if est is not None
    ]

    if len(one_rms) < 2:
        return TrendData(direction="stable", average_change=0.0, workout_count=len(one_rms))

    changes = [newer - older for newer, older in zip(one_rms, one_rms[1:])]
    average = sum(changes) / len(changes)

    direction: TrendDirection = "stable"
    if average > TREND_STABLE_BAND_KG:
        direction = "increasing"
    elif average < -TREND_STABLE_BAND_KG:
        direction = "decreasing"

    return TrendData(direction=direction, average_change=average, workout_count=len(one_rms))


def period_progress(
    exercise_name: str,
    history: list[WorkoutLog],
    period_days: int,
    today: date | None = None,
) -> PeriodProgress:
    """
    Best e1RM inside the last ``period_days`` days against the best before.

    The period covers today and the ``period_days - 1`` days before it.
    ``workout_count`` counts every workout logged in the period, whether or
    not it contains the exercise.

    Raises:
        ValueError: If period_days is below 1
    """
    if period_days < 1:
        raise ValueError(f"period_days must be at least 1, got {period_days}")
    if today is None:
        today = date.today()

    start = today - timedelta(days=period_days - 1)
    in_period = workouts_between(history, start, today + timedelta(days=1))
    if not in_period:
        return PeriodProgress(
            current_1rm=None,
            previous_1rm=None,
            change=0.0,
            percentage_change=0.0,
            workout_count=0,
            trend="stable",
        )

    current = personal_record(exercise_name, in_period)
    previous = personal_record(exercise_name, [w for w in history if w.day < start])
    current_1rm = current.estimated_1rm if current is not None else None
    previous_1rm = previous.estimated_1rm if previous is not None else None

    change = 0.0
    percentage = 0.0
    if current_1rm is not None and previous_1rm is not None:
        change = current_1rm - previous_1rm
        if previous_1rm > 0:
            percentage = change / previous_1rm * 100

    trend = exercise_trend(exercise_name, history, min(len(in_period), TREND_WORKOUTS), today)

    return PeriodProgress(
        current_1rm=current_1rm,
        previous_1rm=previous_1rm,
        change=change,
        percentage_change=percentage,
        workout_count=len(in_period),
        trend=trend.direction,
    )


def _one_month_before(day: date) -> date:
    """Same day of the previous month, clamped to that month's length."""
    year, month = (day.year, day.month - 1) if day.month > 1 else (day.year - 1, 12)
    return date(year, month, min(day.day, calendar.monthrange(year, month)[1]))


def _lift_total(lifts: tuple[str, ...], history: list[WorkoutLog]) -> list[LiftScore]:
    scores: list[LiftScore] = []
    for name in lifts:
        record = personal_record(name, history)
        if record is not None:
            scores.append(LiftScore(name=name, estimated_1rm=record.estimated_1rm))
    return scores


def strength_score(
    history: list[WorkoutLog],
    big_lifts: tuple[str, ...] = BIG_LIFTS,
    today: date | None = None,
) -> StrengthScore:
    """
    Sum of the all-time best e1RMs of the big lifts.

    The comparison total uses only workouts on or before the same day one
    month earlier; it is None when no workout is that old.  Lifts never
    logged contribute nothing to either total.

    Args:
        history: Workout history in any order
        big_lifts: Exercise names to sum (case-insensitive exact match)
        today: Reference day; later entries are ignored

    Returns:
        StrengthScore with change and percentage change vs one month ago
    """
    if today is None:
        today = date.today()

    past = [w for w in history if w.day <= today]
    if not past:
        return StrengthScore(total=0.0, lifts=[], previous_total=None, change=0.0, percentage_change=0.0)

    lifts = _lift_total(big_lifts, past)
    total = sum(lift.estimated_1rm for lift in lifts)

    cutoff = _one_month_before(today)
    older = [w for w in past if w.day <= cutoff]
    previous_total = sum(lift.estimated_1rm for lift in _lift_total(big_lifts, older)) if older else None

    change = total - previous_total if previous_total is not None else 0.0
    percentage = change / previous_total * 100 if previous_total else 0.0

    return StrengthScore(
        total=total,
        lifts=lifts,
        previous_total=previous_total,
        change=change,
        percentage_change=percentage,
    )
