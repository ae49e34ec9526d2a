"""
Progressive-overload advisor.

Suggests the next working weight for an exercise from its most recent
sessions.  No suggestion is made without evidence: callers get None when
history is thin or the decision tiers do not match.
"""

import math
import statistics

from .config import (
    OVERLOAD_HIGH_INCREASE_PCT,
    OVERLOAD_LIGHT_BAND_KG,
    OVERLOAD_LOW_INCREASE_PCT,
    OVERLOAD_MAX_RIR,
    OVERLOAD_MAX_WEIGHT_CV,
    OVERLOAD_MEDIUM_BAND_KG,
    OVERLOAD_MEDIUM_INCREASE_PCT,
    OVERLOAD_MIN_SESSIONS,
    OVERLOAD_MIN_SETS,
    OVERLOAD_REPS_TARGET_RATIO,
    OVERLOAD_SESSION_WINDOW,
    OVERLOAD_SET_WINDOW,
    WEIGHT_INCREMENT_KG,
)
from .history import exercise_occurrences
from .metrics import working_sets
from .models import Confidence, OverloadSuggestion, WorkoutExercise, WorkoutLog


def _band_increase(avg_weight: float, tiers: tuple[float, float, float]) -> float:
    """Pick the increase % for the light / medium / heavy weight band."""
    light, medium, heavy = tiers
    if avg_weight < OVERLOAD_LIGHT_BAND_KG:
        return light
    if avg_weight < OVERLOAD_MEDIUM_BAND_KG:
        return medium
    return heavy


def round_up_to_increment(weight_kg: float, increment: float = WEIGHT_INCREMENT_KG) -> float:
    """
    Round up to the next plate increment.

    The quotient is rounded to 6 decimals first so exact multiples that pick
    up float noise (e.g. 62.50000000001) are not bumped a full step.
    """
    return math.ceil(round(weight_kg / increment, 6)) * increment


def suggest_overload(exercise_name: str, history: list[WorkoutLog]) -> OverloadSuggestion | None:
    """
    Suggest a weight increase for one exercise.

    Needs at least 2 sessions with the exercise and 3 working sets across
    the 3 most recent of them.  The 6 most recent sets drive the decision:

    - high: average RIR <= 2 and average reps >= 90 % of the window max
    - medium: no RIR logged, reps target met and weight CV < 0.10
    - low: the most recent set is heavier than the oldest one in the window

    Args:
        exercise_name: Exercise to advise on (case-insensitive)
        history: Workout history in any order

    Returns:
        OverloadSuggestion, or None when no tier matches or data is thin
    """
    sessions = exercise_occurrences(history, exercise_name)[:OVERLOAD_SESSION_WINDOW]
    if len(sessions) < OVERLOAD_MIN_SESSIONS:
        return None

    # Newest session first, sets in logged order within a session
    sets = [s for _, exercise in sessions for s in working_sets(exercise)]
    if len(sets) < OVERLOAD_MIN_SETS:
        return None

    window = sets[:OVERLOAD_SET_WINDOW]
    weights = [s.weight_kg for s in window]
    reps = [s.reps for s in window]

    avg_weight = statistics.fmean(weights)
    if avg_weight <= 0:
        return None

    weight_cv = statistics.pstdev(weights) / avg_weight
    avg_reps = statistics.fmean(reps)
    reps_on_target = avg_reps >= max(reps) * OVERLOAD_REPS_TARGET_RATIO

    rated = [s.rir for s in sets if s.rir is not None]
    avg_rir = statistics.fmean(rated) if rated else None

    confidence: Confidence
    if avg_rir is not None and avg_rir <= OVERLOAD_MAX_RIR and reps_on_target:
        confidence = "high"
        increase = _band_increase(avg_weight, OVERLOAD_HIGH_INCREASE_PCT)
        reason = "Consistent performance with low RIR"
    elif avg_rir is None and reps_on_target and weight_cv < OVERLOAD_MAX_WEIGHT_CV:
        confidence = "medium"
        increase = _band_increase(avg_weight, OVERLOAD_MEDIUM_INCREASE_PCT)
        reason = "Hitting target reps consistently"
    elif weights[0] > weights[-1]:
        confidence = "low"
        increase = OVERLOAD_LOW_INCREASE_PCT
        reason = "Upward trend in weight"
    else:
        return None

    return OverloadSuggestion(
        exercise_name=exercise_name,
        current_weight_kg=round(avg_weight, 1),
        suggested_weight_kg=round_up_to_increment(avg_weight * (1 + increase / 100)),
        increase_percentage=increase,
        reason=reason,
        confidence=confidence,
    )


def suggest_for_workout(
    exercises: list[WorkoutExercise],
    history: list[WorkoutLog],
) -> dict[str, OverloadSuggestion]:
    """Suggestions keyed by exercise name for every exercise that has one."""
    suggestions: dict[str, OverloadSuggestion] = {}
    for exercise in exercises:
        suggestion = suggest_overload(exercise.name, history)
        if suggestion is not None:
            suggestions[exercise.name] = suggestion
    return suggestions
