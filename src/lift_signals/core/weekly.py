"""
Sunday-aligned weekly summaries and week-over-week comparison.
"""

from datetime import date, timedelta

from .config import WEEKLY_TOP_EXERCISES, WEEKLY_TREND_THRESHOLD_PCT
from .history import week_start, workouts_between
from .metrics import working_sets
from .models import (
    ExerciseWeekStats,
    WeeklyComparison,
    WeeklyStats,
    WeeklySummary,
    WeeklyTrend,
    WorkoutLog,
)


def _week_insights(stats: WeeklyStats, top: list[ExerciseWeekStats]) -> list[str]:
    insights: list[str] = []

    if stats.total_workouts == 0:
        insights.append("No workouts this week yet - time to get started!")
    elif stats.total_workouts >= 4:
        insights.append(f"Great week! {stats.total_workouts} workouts completed")
    elif stats.total_workouts >= 2:
        insights.append(f"Nice work! {stats.total_workouts} workouts this week")

    if stats.total_volume > 0:
        insights.append(f"Total volume: {stats.total_volume / 1000:.1f}k kg moved")

    if top:
        insights.append(f"Top exercise: {top[0].name} ({top[0].sets} sets)")

    return insights


def weekly_summary(
    history: list[WorkoutLog],
    week_offset: int = 0,
    today: date | None = None,
) -> WeeklySummary:
    """
    Summarize one Sunday-to-Saturday week.

    Args:
        history: Workout history in any order
        week_offset: Weeks before the current one (0 = this week, 1 = last week)
        today: Reference day

    Returns:
        WeeklySummary with totals over working sets, the top exercises by
        set count, and short rule-based insights
    """
    if today is None:
        today = date.today()

    start = week_start(today) - timedelta(weeks=week_offset)
    end = start + timedelta(days=6)
    workouts = workouts_between(history, start, end + timedelta(days=1))

    stats = WeeklyStats(total_workouts=len(workouts))
    total_minutes = 0.0
    per_exercise: dict[str, ExerciseWeekStats] = {}

    for workout in workouts:
        stats.total_exercises += len(workout.exercises)
        stats.total_calories += workout.total_calories or 0.0
        total_minutes += workout.duration_minutes or 0.0

        for ex in workout.exercises:
            sets = working_sets(ex)
            stats.total_sets += len(sets)
            stats.total_reps += sum(s.reps for s in sets)
            stats.total_volume += sum(s.volume for s in sets)

            heaviest = max((s.weight_kg for s in sets), default=0.0)
            entry = per_exercise.get(ex.name.lower())
            if entry is None:
                per_exercise[ex.name.lower()] = ExerciseWeekStats(ex.name, len(sets), heaviest)
            else:
                entry.sets += len(sets)
                entry.best_weight_kg = max(entry.best_weight_kg, heaviest)

    if workouts:
        stats.avg_workout_minutes = total_minutes / len(workouts)

    # Stable sort: ties keep first-logged order
    top = sorted(per_exercise.values(), key=lambda e: -e.sets)[:WEEKLY_TOP_EXERCISES]

    return WeeklySummary(
        week_start=start,
        week_end=end,
        stats=stats,
        top_exercises=top,
        insights=_week_insights(stats, top),
    )


def compare_weeks(history: list[WorkoutLog], today: date | None = None) -> WeeklyComparison:
    """
    Compare this week against last week.

    Trend is "improving" above +5 % volume change, "declining" below -5 %,
    "stable" otherwise (including when last week had no volume).
    """
    current = weekly_summary(history, 0, today)
    last = weekly_summary(history, 1, today)

    previous_volume = last.stats.total_volume
    if previous_volume > 0:
        change = (current.stats.total_volume - previous_volume) / previous_volume * 100
    else:
        change = 0.0

    trend: WeeklyTrend = "stable"
    if change > WEEKLY_TREND_THRESHOLD_PCT:
        trend = "improving"
    elif change < -WEEKLY_TREND_THRESHOLD_PCT:
        trend = "declining"

    return WeeklyComparison(
        current_week=current,
        last_week=last,
        trend=trend,
        volume_change_pct=change,
        workout_change=current.stats.total_workouts - last.stats.total_workouts,
    )
