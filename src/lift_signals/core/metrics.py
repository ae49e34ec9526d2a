"""
Pure metric computation functions: working sets, best set, 1RM, volume.

All functions are pure and typed for testability.
"""

from .config import ONE_RM_REP_DIVISOR
from .models import BestSet, WorkoutExercise, WorkoutLog, WorkoutSet


def working_sets(exercise: WorkoutExercise) -> list[WorkoutSet]:
    """
    Get completed, non-warm-up sets in their logged order.

    Args:
        exercise: One exercise occurrence

    Returns:
        Working sets only
    """
    return [s for s in exercise.sets if s.is_working]


def estimate_one_rep_max(weight_kg: float, reps: int) -> float:
    """
    Estimate 1RM from a single set.

    1RM = weight * (1 + reps/30)

    Args:
        weight_kg: Load lifted
        reps: Reps performed

    Returns:
        Estimated 1RM in kg, 0.0 when no reps were performed
    """
    if reps <= 0:
        return 0.0
    return weight_kg * (1 + reps / ONE_RM_REP_DIVISOR)


def best_set(exercise: WorkoutExercise) -> BestSet | None:
    """
    Find the working set with the highest weight × reps.

    Ties go to the set logged first.

    Args:
        exercise: One exercise occurrence

    Returns:
        BestSet snapshot, or None if there are no working sets
    """
    sets = working_sets(exercise)
    if not sets:
        return None

    best = sets[0]
    for s in sets[1:]:
        if s.volume > best.volume:
            best = s

    return BestSet(
        weight_kg=best.weight_kg,
        reps=best.reps,
        volume=best.volume,
        estimated_1rm=estimate_one_rep_max(best.weight_kg, best.reps),
    )


def best_estimated_1rm(exercise: WorkoutExercise) -> float | None:
    """
    Highest 1RM estimate across the working sets of one occurrence.

    Args:
        exercise: One exercise occurrence

    Returns:
        Estimated 1RM, or None if there are no working sets
    """
    sets = working_sets(exercise)
    if not sets:
        return None
    return max(estimate_one_rep_max(s.weight_kg, s.reps) for s in sets)


def best_1rm_set(exercise: WorkoutExercise) -> WorkoutSet | None:
    """Working set that produced the highest 1RM estimate (first on ties)."""
    best: WorkoutSet | None = None
    best_est = -1.0
    for s in working_sets(exercise):
        est = estimate_one_rep_max(s.weight_kg, s.reps)
        if est > best_est:
            best, best_est = s, est
    return best


def exercise_volume(exercise: WorkoutExercise) -> float:
    """Sum of weight × reps over working sets."""
    return sum(s.volume for s in working_sets(exercise))


def workout_volume(workout: WorkoutLog) -> float:
    """Sum of working-set volume over every exercise in the session."""
    return sum(exercise_volume(ex) for ex in workout.exercises)


def total_volume(history: list[WorkoutLog]) -> float:
    """Lifetime working-set volume across the history."""
    return sum(workout_volume(w) for w in history)


def workout_working_sets(workouts: list[WorkoutLog]) -> list[WorkoutSet]:
    """Flatten every working set across the given workouts."""
    return [s for w in workouts for ex in w.exercises for s in working_sets(ex)]


def average_rpe(sets: list[WorkoutSet]) -> float | None:
    """Mean RPE across sets that logged one, or None if none did."""
    rated = [s.rpe for s in sets if s.rpe is not None]
    if not rated:
        return None
    return sum(rated) / len(rated)


def average_loaded_weight(workouts: list[WorkoutLog]) -> float:
    """
    Mean weight over completed sets that carried load.

    Used as a coarse performance level when comparing blocks of workouts.
    """
    weights = [
        s.weight_kg
        for w in workouts
        for ex in w.exercises
        for s in ex.sets
        if s.completed and s.weight_kg > 0
    ]
    if not weights:
        return 0.0
    return sum(weights) / len(weights)
