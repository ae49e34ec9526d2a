"""
Training volume per muscle group.

Exercises are bucketed into eight coarse groups (chest, back, shoulders,
legs, arms, abs, glutes, calves).  The catalog entry's primary group is
tried first, then name keywords; exercises that match neither are left out
of every total.  Only working sets count.
"""

import logging
from datetime import date, timedelta

from .catalog import ExerciseCatalog
from .config import (
    ANTAGONIST_PAIRS,
    IMBALANCE_RATIO,
    MUSCLE_GROUP_ALIASES,
    MUSCLE_GROUPS,
    MUSCLE_KEYWORDS,
    VOLUME_WINDOW_DAYS,
)
from .history import sort_oldest_first, workouts_between
from .metrics import working_sets
from .models import (
    MuscleGroupVolume,
    MuscleImbalance,
    MuscleVolumeChange,
    VolumeComparison,
    WorkoutLog,
)

logger = logging.getLogger(__name__)


def muscle_group_for(exercise_name: str, catalog: ExerciseCatalog | None = None) -> str | None:
    """
    Coarse muscle group of an exercise, or None when it cannot be placed.

    Args:
        exercise_name: Name as logged
        catalog: Optional exercise catalog consulted before the keyword rules

    Returns:
        One of MUSCLE_GROUPS, or None
    """
    if catalog is not None:
        entry = catalog.find(exercise_name)
        if entry is not None:
            group = entry.group.strip().lower()
            group = MUSCLE_GROUP_ALIASES.get(group, group)
            if group in MUSCLE_GROUPS:
                return group

    lowered = " ".join(exercise_name.lower().split())
    for keyword, group in MUSCLE_KEYWORDS:
        if keyword in lowered:
            return group
    return None


def _volume_by_group(
    workouts: list[WorkoutLog],
    catalog: ExerciseCatalog | None,
) -> list[MuscleGroupVolume]:
    totals: dict[str, MuscleGroupVolume] = {}
    seen: dict[str, set[str]] = {}

    for workout in sort_oldest_first(workouts):
        for exercise in workout.exercises:
            group = muscle_group_for(exercise.name, catalog)
            if group is None:
                logger.debug("No muscle group for %r, left out of volume totals", exercise.name)
                continue

            entry = totals.setdefault(group, MuscleGroupVolume(group=group))
            sets = working_sets(exercise)
            entry.total_sets += len(sets)
            entry.total_reps += sum(s.reps for s in sets)
            entry.total_volume += sum(s.volume for s in sets)

            names = seen.setdefault(group, set())
            if exercise.name.lower() not in names:
                names.add(exercise.name.lower())
                entry.exercises.append(exercise.name)

    return sorted(totals.values(), key=lambda v: v.total_volume, reverse=True)


def muscle_group_volume(
    history: list[WorkoutLog],
    days_back: int = VOLUME_WINDOW_DAYS,
    today: date | None = None,
    catalog: ExerciseCatalog | None = None,
) -> list[MuscleGroupVolume]:
    """
    Sets, reps and volume per muscle group over the last ``days_back`` days.

    The window covers today and the ``days_back - 1`` days before it.

    Args:
        history: Workout history in any order
        days_back: Window length in days
        today: Reference day
        catalog: Optional exercise catalog for group lookups

    Returns:
        One entry per trained group, highest volume first

    Raises:
        ValueError: If days_back is below 1
    """
    if days_back < 1:
        raise ValueError(f"days_back must be at least 1, got {days_back}")
    if today is None:
        today = date.today()

    start = today - timedelta(days=days_back - 1)
    return _volume_by_group(workouts_between(history, start, today + timedelta(days=1)), catalog)


def detect_muscle_imbalances(volumes: list[MuscleGroupVolume]) -> list[MuscleImbalance]:
    """
    Flag antagonist pairs where one side has more than twice the other's volume.

    Pairs where either side was not trained are skipped.
    """
    by_group = {v.group: v.total_volume for v in volumes}
    imbalances: list[MuscleImbalance] = []

    for first, second in ANTAGONIST_PAIRS:
        first_volume = by_group.get(first, 0.0)
        second_volume = by_group.get(second, 0.0)
        if first_volume <= 0 or second_volume <= 0:
            continue

        ratio = first_volume / second_volume
        if ratio > IMBALANCE_RATIO:
            over, under = first, second
        elif ratio < 1 / IMBALANCE_RATIO:
            over, under, ratio = second, first, 1 / ratio
        else:
            continue

        imbalances.append(
            MuscleImbalance(
                overtrained_group=over,
                undertrained_group=under,
                ratio=ratio,
                suggestion=f"Train more {under} - currently {ratio:.1f}x less than {over}",
            )
        )

    return imbalances


def compare_weekly_volume(
    history: list[WorkoutLog],
    today: date | None = None,
    catalog: ExerciseCatalog | None = None,
) -> VolumeComparison:
    """
    Per-group volume of the last 7 days against the 7 days before.

    Changes are ordered by the size of the percentage change; a group with
    no previous volume reports 0 %.
    """
    if today is None:
        today = date.today()

    current = muscle_group_volume(history, VOLUME_WINDOW_DAYS, today, catalog)
    previous = muscle_group_volume(
        history,
        VOLUME_WINDOW_DAYS,
        today - timedelta(days=VOLUME_WINDOW_DAYS),
        catalog,
    )

    current_by_group = {v.group: v.total_volume for v in current}
    previous_by_group = {v.group: v.total_volume for v in previous}
    groups = list(current_by_group) + [g for g in previous_by_group if g not in current_by_group]

    changes: list[MuscleVolumeChange] = []
    for group in groups:
        now_volume = current_by_group.get(group, 0.0)
        before = previous_by_group.get(group, 0.0)
        change = now_volume - before
        changes.append(
            MuscleVolumeChange(
                group=group,
                current_volume=now_volume,
                previous_volume=before,
                change=change,
                percentage_change=change / before * 100 if before > 0 else 0.0,
            )
        )
    changes.sort(key=lambda c: abs(c.percentage_change), reverse=True)

    return VolumeComparison(current_week=current, previous_week=previous, changes=changes)
