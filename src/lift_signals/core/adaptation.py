"""
Plateau detection and deload decisions.

Two separate policies live here:

- Plateau (per exercise): the best estimated 1RM has stopped moving over the
  most recent occurrences of an exercise.
- Deload (global): recent training load is out of line with the trailing
  baseline, or several fatigue signals fire at once.

All thresholds come from config.py; callers override them through
PlateauThresholds / DeloadThresholds rather than editing constants.
"""

import math
from datetime import date, datetime, timedelta

from .config import (
    DELOAD_ANALYSIS_WEEKS,
    DELOAD_BASELINE_WEEKS,
    DELOAD_RECENT_DAYS,
    DELOADING_MIN_SESSIONS,
    HIGH_VOLUME_WEEK_MIN_WORKOUTS,
    HIGH_VOLUME_WEEK_RATIO,
    OVERREACH_DROP_RATIO,
    OVERREACH_SPIKE_RATIO,
    PERFORMANCE_DECLINE_RATIO,
    PERFORMANCE_WINDOW,
    PLATEAU_LOOKBACK_EXTRA,
    PLATEAU_MAX_SUGGESTIONS,
    PLATEAU_SUMMARY_TOP,
    PROTOCOL_CRITICAL_AFTER_WEEKS,
    PROTOCOL_EXTENDED_AFTER_WEEKS,
    PROTOCOL_HIGH_AFTER_WEEKS,
    VOLUME_DECLINE_STEP,
    DeloadThresholds,
    PlateauThresholds,
)
from .history import (
    exercise_occurrences,
    sort_newest_first,
    unique_exercise_names,
    workouts_between,
)
from .metrics import (
    average_loaded_weight,
    average_rpe,
    best_estimated_1rm,
    total_volume,
    workout_working_sets,
)
from .models import (
    DeloadCheck,
    DeloadProtocol,
    DeloadRecommendation,
    DeloadSignal,
    DeloadUrgency,
    PlateauDetection,
    PlateauSeverity,
    PlateauStatus,
    PlateauSummary,
    WeeklySummary,
    WorkoutLog,
)
from .weekly import weekly_summary


def _as_day(now: date | datetime | None) -> date:
    if now is None:
        return date.today()
    if isinstance(now, datetime):
        return now.date()
    return now


# =============================================================================
# Plateau detection
# =============================================================================


def plateau_severity(
    weeks_stagnant: int,
    thresholds: PlateauThresholds = PlateauThresholds(),
) -> PlateauSeverity:
    """Bucket elapsed stagnant weeks into mild / moderate / severe."""
    if weeks_stagnant >= thresholds.severe_weeks:
        return "severe"
    if weeks_stagnant >= thresholds.moderate_weeks:
        return "moderate"
    return "mild"


def plateau_suggestions(
    exercise_name: str,
    weeks_stagnant: int,
    thresholds: PlateauThresholds = PlateauThresholds(),
) -> list[str]:
    """
    Rule-based ideas for breaking a plateau.

    Severity-driven advice comes first, then advice for the exercise family
    (press, squat, deadlift, pull), then general recovery advice.  At most
    four suggestions are returned.
    """
    suggestions: list[str] = []

    if weeks_stagnant >= thresholds.severe_weeks:
        suggestions.append("Consider a deload week (50-60% intensity)")
        suggestions.append("Switch to a variation of this exercise")
    elif weeks_stagnant >= thresholds.moderate_weeks:
        suggestions.append("Try a different rep range (5x5 → 3x8-10)")
        suggestions.append("Add a set at the same weight")

    name = exercise_name.lower()
    if "bench" in name or "press" in name:
        suggestions.append("Add paused reps (2 second hold)")
        suggestions.append("Try a close-grip or incline variation")
    elif "squat" in name:
        suggestions.append("Check your squat depth; full range of motion helps")
        suggestions.append("Try pause squats or box squats")
    elif "deadlift" in name:
        suggestions.append("Add deficit deadlifts")
        suggestions.append("Try Romanian deadlifts for hamstring focus")
    elif "pull" in name:
        suggestions.append("Increase time under tension (slower lowering)")
        suggestions.append("Vary your grip width")

    suggestions.append("Get enough sleep (7-9h) and food")
    suggestions.append("Make sure you apply progressive overload (+2.5kg/week)")

    return suggestions[:PLATEAU_MAX_SUGGESTIONS]


def detect_plateau(
    exercise_name: str,
    history: list[WorkoutLog],
    threshold: int | None = None,
    today: date | None = None,
    thresholds: PlateauThresholds = PlateauThresholds(),
) -> PlateauDetection:
    """
    Decide whether one exercise has stalled.

    The most recent ``threshold + 2`` occurrences that have working sets are
    replayed oldest first with a running best estimated 1RM.  The stagnant
    run starts at the last occurrence that beat the running best by more
    than the tolerance and ends at the newest occurrence, both inclusive.

    Args:
        exercise_name: Exercise to inspect (case-insensitive)
        history: Workout history in any order
        threshold: Stagnant occurrences needed; defaults to
            thresholds.min_occurrences
        today: Reference day for weeks_stagnant
        thresholds: Plateau parameters

    Returns:
        PlateauDetection.  Not plateaued (0 weeks, "mild") when there are
        fewer than ``threshold`` usable occurrences.
    """
    if threshold is None:
        threshold = thresholds.min_occurrences
    today = _as_day(today)

    occurrences: list[tuple[WorkoutLog, float]] = []
    for workout, exercise in exercise_occurrences(history, exercise_name):
        est = best_estimated_1rm(exercise)
        if est is not None:
            occurrences.append((workout, est))
    occurrences = occurrences[: threshold + PLATEAU_LOOKBACK_EXTRA]

    if len(occurrences) < threshold:
        return PlateauDetection(
            exercise_name=exercise_name,
            is_plateaued=False,
            workouts_stagnant=0,
            last_1rm=occurrences[0][1] if occurrences else None,
            weeks_stagnant=0,
            severity="mild",
            last_workout_date=occurrences[0][0].date if occurrences else None,
            suggested_action="Keep training to establish a baseline",
        )

    chronological = list(reversed(occurrences))
    running_best = chronological[0][1]
    last_progress = 0
    for index, (_, est) in enumerate(chronological[1:], start=1):
        if est > running_best + thresholds.tolerance_kg:
            last_progress = index
        running_best = max(running_best, est)

    stagnant = len(chronological) - last_progress
    is_plateaued = stagnant >= threshold

    newest_workout, newest_1rm = occurrences[0]
    weeks = 0
    if is_plateaued:
        first_stagnant_day = chronological[last_progress][0].day
        weeks = math.ceil(max(0, (today - first_stagnant_day).days) / 7)

    return PlateauDetection(
        exercise_name=exercise_name,
        is_plateaued=is_plateaued,
        workouts_stagnant=stagnant,
        last_1rm=newest_1rm,
        weeks_stagnant=weeks,
        severity=plateau_severity(weeks, thresholds),
        last_workout_date=newest_workout.date,
        suggested_action=(
            "Time for a deload or a change in reps/sets"
            if is_plateaued
            else "Keep applying progressive overload"
        ),
        rule_suggestions=(
            plateau_suggestions(exercise_name, weeks, thresholds) if is_plateaued else []
        ),
    )


def detect_all_plateaus(
    history: list[WorkoutLog],
    threshold: int | None = None,
    today: date | None = None,
    thresholds: PlateauThresholds = PlateauThresholds(),
) -> list[PlateauDetection]:
    """Plateaued exercises across the history, longest-stagnant first."""
    today = _as_day(today)
    plateaus: list[PlateauDetection] = []
    for name in unique_exercise_names(history):
        detection = detect_plateau(name, history, threshold, today, thresholds)
        if detection.is_plateaued:
            plateaus.append(detection)
    return sorted(plateaus, key=lambda p: -p.weeks_stagnant)


def plateau_summary(
    history: list[WorkoutLog],
    today: date | None = None,
    thresholds: PlateauThresholds = PlateauThresholds(),
) -> PlateauSummary:
    """
    Dashboard roll-up of every plateau.

    Overall status: critical with any severe plateau, attention with two or
    more moderate ones, good with any plateau at all, excellent otherwise.
    """
    plateaus = detect_all_plateaus(history, today=today, thresholds=thresholds)
    severe = sum(1 for p in plateaus if p.severity == "severe")
    moderate = sum(1 for p in plateaus if p.severity == "moderate")
    mild = sum(1 for p in plateaus if p.severity == "mild")

    status: PlateauStatus = "excellent"
    if severe > 0:
        status = "critical"
    elif moderate >= 2:
        status = "attention"
    elif moderate > 0 or mild > 0:
        status = "good"

    return PlateauSummary(
        total_plateaus=len(plateaus),
        severe_count=severe,
        moderate_count=moderate,
        mild_count=mild,
        top_plateaus=plateaus[:PLATEAU_SUMMARY_TOP],
        overall_status=status,
    )


# =============================================================================
# Deload protocols
# =============================================================================


_PROTOCOLS: dict[DeloadUrgency, tuple[float, float, tuple[str, ...]]] = {
    "critical": (
        50.0,
        40.0,
        (
            "Cut every exercise to 50% of your usual sets",
            "Use 60% of your usual weights",
            "Focus on technique and controlled movement",
            "Aim for 8-9 hours of sleep per night",
            "Consider extra rest days this week",
        ),
    ),
    "high": (
        40.0,
        30.0,
        (
            "Cut volume by 40% (e.g. 5 sets → 3 sets)",
            "Use 70% of your usual weights",
            "Keep your frequency but shorten workouts",
            "Focus on compound movements, skip accessories",
            "Raise protein intake (2g/kg) to support recovery",
        ),
    ),
    "medium": (
        30.0,
        20.0,
        (
            "Cut sets by about 30% this week",
            "Use 75-80% of your usual weights",
            "Keep every exercise but do less volume",
            "Add stretching and mobility work",
            "Eat and hydrate well",
        ),
    ),
    "low": (
        20.0,
        10.0,
        (
            "Light deload: drop 1-2 sets per exercise",
            "Use about 85% of your usual weights",
            "Optional: replace one workout with active recovery",
            "Focus on sleep and stress management",
        ),
    ),
}


def deload_protocol(urgency: DeloadUrgency, weeks_of_high_volume: int = 0) -> DeloadProtocol:
    """
    Build the deload prescription for an urgency tier.

    Six or more high-volume weeks stretch the deload to two weeks.
    """
    volume_pct, intensity_pct, suggestions = _PROTOCOLS[urgency]
    duration = 2 if weeks_of_high_volume >= PROTOCOL_EXTENDED_AFTER_WEEKS else 1
    return DeloadProtocol(
        volume_reduction_pct=volume_pct,
        intensity_reduction_pct=intensity_pct,
        duration_weeks=duration,
        suggestions=list(suggestions),
    )


def _tier_for_high_volume_weeks(weeks: int) -> DeloadUrgency:
    if weeks >= PROTOCOL_CRITICAL_AFTER_WEEKS:
        return "critical"
    if weeks >= PROTOCOL_HIGH_AFTER_WEEKS:
        return "high"
    return "medium"


# =============================================================================
# Deload rule check (volume / RPE)
# =============================================================================


def _recent_and_baseline(
    history: list[WorkoutLog],
    today: date,
) -> tuple[list[WorkoutLog], list[WorkoutLog]]:
    """Workouts in the last 7 days and in the four weeks before them."""
    recent_start = today - timedelta(days=DELOAD_RECENT_DAYS - 1)
    baseline_start = recent_start - timedelta(weeks=DELOAD_BASELINE_WEEKS)
    recent = workouts_between(history, recent_start, today + timedelta(days=1))
    baseline = workouts_between(history, baseline_start, recent_start)
    return recent, baseline


def _consecutive_high_volume_weeks(
    history: list[WorkoutLog],
    today: date,
    baseline_volume: float,
) -> int:
    """
    Count 7-day windows, newest first, whose volume beats the baseline by 10 %.

    The scan stops at the first window that does not.
    """
    if baseline_volume <= 0:
        return 0
    weeks = 0
    end = today + timedelta(days=1)
    for _ in range(DELOAD_ANALYSIS_WEEKS):
        start = end - timedelta(days=DELOAD_RECENT_DAYS)
        if total_volume(workouts_between(history, start, end)) <= baseline_volume * HIGH_VOLUME_WEEK_RATIO:
            break
        weeks += 1
        end = start
    return weeks


def check_deload(
    history: list[WorkoutLog],
    now: date | datetime | None = None,
    thresholds: DeloadThresholds = DeloadThresholds(),
) -> DeloadCheck:
    """
    Compare the last 7 days against the trailing four-week baseline.

    Rules, first match wins:
        1. volume increase above 50 %
        2. increase above 30 % with average RPE above 8.5
        3. average RPE above 9
        4. six or more sessions with an increase above 40 %

    Args:
        history: Workout history in any order
        now: Reference day (a datetime is truncated to its date)
        thresholds: Deload rule parameters

    Returns:
        DeloadCheck.  A protocol is attached only when a deload is advised.
    """
    today = _as_day(now)

    if len(history) < thresholds.min_workouts:
        return DeloadCheck(
            should_deload=False,
            reason="Not enough data",
            weekly_volume=0.0,
            baseline_volume=0.0,
            volume_increase_pct=0.0,
            recent_rpe=None,
            recent_sessions=0,
        )

    recent, baseline = _recent_and_baseline(history, today)
    weekly_volume = total_volume(recent)
    if baseline:
        baseline_volume = total_volume(baseline) / DELOAD_BASELINE_WEEKS
    else:
        baseline_volume = weekly_volume

    increase = (weekly_volume - baseline_volume) / baseline_volume * 100 if baseline_volume > 0 else 0.0
    rpe = average_rpe(workout_working_sets(recent))

    reason = ""
    if increase > thresholds.excessive_increase_pct:
        reason = f"Excessive volume increase (>{thresholds.excessive_increase_pct:g}%)"
    elif increase > thresholds.rpe_increase_pct and rpe is not None and rpe > thresholds.rpe_with_increase:
        reason = "High volume increase + high RPE indicates fatigue"
    elif rpe is not None and rpe > thresholds.rpe_alone:
        reason = f"Consistently high RPE (>{thresholds.rpe_alone:g})"
    elif len(recent) >= thresholds.frequency_sessions and increase > thresholds.frequency_increase_pct:
        reason = "High training frequency + volume increase"

    high_weeks = _consecutive_high_volume_weeks(history, today, baseline_volume)
    protocol = None
    if reason:
        protocol = deload_protocol(_tier_for_high_volume_weeks(high_weeks), high_weeks)

    return DeloadCheck(
        should_deload=bool(reason),
        reason=reason or "Training load is within normal range",
        weekly_volume=weekly_volume,
        baseline_volume=baseline_volume,
        volume_increase_pct=increase,
        recent_rpe=rpe,
        recent_sessions=len(recent),
        consecutive_high_volume_weeks=high_weeks,
        protocol=protocol,
    )


def is_currently_deloading(
    history: list[WorkoutLog],
    now: date | datetime | None = None,
    thresholds: DeloadThresholds = DeloadThresholds(),
) -> bool:
    """
    True when the last 7 days look like a deload week.

    Volume must sit at or below 70 % of the baseline with at least two
    sessions logged, so a missed week does not count.
    """
    today = _as_day(now)
    recent, baseline = _recent_and_baseline(history, today)
    if not baseline or len(recent) < DELOADING_MIN_SESSIONS:
        return False
    baseline_volume = total_volume(baseline) / DELOAD_BASELINE_WEEKS
    if baseline_volume <= 0:
        return False
    return total_volume(recent) <= baseline_volume * thresholds.deloading_volume_ratio


# =============================================================================
# Multi-signal deload review
# =============================================================================


def _volume_decline_signal(weeks: list[WeeklySummary]) -> DeloadSignal | None:
    if len(weeks) < 3:
        return None
    volumes = [w.stats.total_volume for w in weeks[-3:]]
    declines = sum(
        1 for older, newer in zip(volumes, volumes[1:]) if newer < older * VOLUME_DECLINE_STEP
    )
    if declines < 2:
        return None
    drop = (volumes[0] - volumes[-1]) / volumes[0] * 100
    severity = "high" if drop > 20 else "medium" if drop > 10 else "low"
    return DeloadSignal(
        type="volume_decline",
        severity=severity,
        description=f"Volume down {drop:.0f}% over 3 weeks - possible fatigue",
    )


def _performance_decline_signal(history: list[WorkoutLog]) -> DeloadSignal | None:
    ordered = sort_newest_first(history)
    recent = ordered[:PERFORMANCE_WINDOW]
    previous = ordered[PERFORMANCE_WINDOW : 2 * PERFORMANCE_WINDOW]
    if len(recent) < PERFORMANCE_WINDOW or len(previous) < 3:
        return None

    recent_avg = average_loaded_weight(recent)
    previous_avg = average_loaded_weight(previous)
    if previous_avg <= 0 or recent_avg >= previous_avg * PERFORMANCE_DECLINE_RATIO:
        return None

    decline = (previous_avg - recent_avg) / previous_avg * 100
    return DeloadSignal(
        type="performance_decline",
        severity="high" if decline > 10 else "medium",
        description=f"Average weight {decline:.0f}% lower than the previous period",
    )


def _is_high_volume_week(week: WeeklySummary, average: float) -> bool:
    return (
        week.stats.total_workouts >= HIGH_VOLUME_WEEK_MIN_WORKOUTS
        and week.stats.total_volume > average * HIGH_VOLUME_WEEK_RATIO
    )


def _accumulated_fatigue_signal(weeks: list[WeeklySummary]) -> DeloadSignal | None:
    if len(weeks) < 4:
        return None
    average = sum(w.stats.total_volume for w in weeks) / len(weeks)
    streak = 0
    for week in reversed(weeks):
        if not _is_high_volume_week(week, average):
            break
        streak += 1
    if streak < 4:
        return None
    return DeloadSignal(
        type="accumulated_fatigue",
        severity="high" if streak >= 5 else "medium",
        description=f"{streak} weeks of high volume in a row - time to recover",
    )


def _multiple_plateaus_signal(history: list[WorkoutLog], today: date) -> DeloadSignal | None:
    plateaus = detect_all_plateaus(history, today=today)
    if len(plateaus) < 3:
        return None
    long_stalls = sum(1 for p in plateaus if p.weeks_stagnant >= 3)
    return DeloadSignal(
        type="multiple_plateaus",
        severity="high" if long_stalls >= 2 else "medium",
        description=f"{len(plateaus)} exercises stalled - possible systemic fatigue",
    )


def _overreaching_signal(weeks: list[WeeklySummary]) -> DeloadSignal | None:
    if len(weeks) < 4:
        return None
    volumes = [w.stats.total_volume for w in weeks]
    average = sum(volumes) / len(volumes)
    for i in range(len(volumes) - 2):
        spike = volumes[i] > average * OVERREACH_SPIKE_RATIO
        drop = min(volumes[i + 1], volumes[i + 2]) < average * OVERREACH_DROP_RATIO
        if spike and drop:
            return DeloadSignal(
                type="overreaching",
                severity="high",
                description="Volume spike followed by a crash - overreaching detected",
            )
    return None


def deload_urgency(signals: list[DeloadSignal]) -> tuple[bool, DeloadUrgency]:
    """
    Fold signal severities into (should_deload, urgency).

    critical: two or more high signals
    high: one high plus one medium, or three medium
    medium: one high, or two medium
    low: anything else (no deload)
    """
    high = sum(1 for s in signals if s.severity == "high")
    medium = sum(1 for s in signals if s.severity == "medium")

    if high >= 2:
        return True, "critical"
    if (high >= 1 and medium >= 1) or medium >= 3:
        return True, "high"
    if high >= 1 or medium >= 2:
        return True, "medium"
    return False, "low"


_RECOMMENDATIONS: dict[DeloadUrgency, str] = {
    "critical": "Deload strongly recommended! Several signs of overtraining - take it easy this week.",
    "high": "Deload recommended this week or next. Your body needs recovery.",
    "medium": "Consider a deload within 1-2 weeks. Several signs of fatigue.",
    "low": "Monitor your progress. A few signs of fatigue detected.",
}


def detect_deload_need(
    history: list[WorkoutLog],
    weeks_to_analyze: int = DELOAD_ANALYSIS_WEEKS,
    now: date | datetime | None = None,
) -> DeloadRecommendation:
    """
    Review several fatigue signals over recent weeks.

    Signals: declining weekly volume, falling average weight, a run of
    high-volume weeks, three or more simultaneous plateaus, and a volume
    spike followed by a crash.

    Args:
        history: Workout history in any order
        weeks_to_analyze: Sunday-aligned weeks inspected, the current one included
        now: Reference day

    Returns:
        DeloadRecommendation with urgency, recommendation text and, when a
        deload is advised, a protocol matching the urgency
    """
    today = _as_day(now)
    weeks = [weekly_summary(history, offset, today) for offset in range(weeks_to_analyze)]
    weeks.reverse()

    candidates = (
        _volume_decline_signal(weeks),
        _performance_decline_signal(history),
        _accumulated_fatigue_signal(weeks),
        _multiple_plateaus_signal(history, today),
        _overreaching_signal(weeks),
    )
    signals = [s for s in candidates if s is not None]

    should_deload, urgency = deload_urgency(signals)

    high_weeks = 0
    if weeks:
        average = sum(w.stats.total_volume for w in weeks) / len(weeks)
        high_weeks = sum(1 for w in weeks if _is_high_volume_week(w, average))

    if signals:
        recommendation = _RECOMMENDATIONS[urgency]
    else:
        recommendation = "Your training looks good! Keep applying progressive overload."

    return DeloadRecommendation(
        should_deload=should_deload,
        urgency=urgency,
        weeks_of_high_volume=high_weeks,
        signals=signals,
        recommendation=recommendation,
        protocol=deload_protocol(urgency, high_weeks) if should_deload else None,
    )
