"""
Tests for weekly summaries and week-over-week comparison.

Reference day is Tuesday 2026-03-10: this week runs 2026-03-08..14, last
week 2026-03-01..07.
"""

from datetime import date

import pytest

from lift_signals.core.models import WorkoutExercise, WorkoutLog, WorkoutSet
from lift_signals.core.weekly import compare_weeks, weekly_summary

TODAY = date(2026, 3, 10)


def _workout(day, exercises, **extra):
    return WorkoutLog(id=f"w-{day}", name="Workout", date=day, exercises=exercises, **extra)


def _ex(name, weight, reps, sets=3, warmup=False):
    return WorkoutExercise(
        name=name,
        sets=[WorkoutSet(weight, reps, is_warmup=warmup) for _ in range(sets)],
    )


@pytest.fixture
def history():
    return [
        _workout("2026-03-02", [_ex("Bench Press", 100, 5)]),
        _workout("2026-03-08", [_ex("Bench Press", 100, 5)]),
        _workout(
            "2026-03-09",
            [_ex("Squat", 100, 5), _ex("Bench Press", 50, 10, sets=2, warmup=True)],
            start_time=0,
            end_time=3_600_000,
            total_calories=300,
        ),
    ]


class TestWeeklySummary:

    def test_current_week_bounds(self, history):
        summary = weekly_summary(history, 0, TODAY)
        assert summary.week_start == date(2026, 3, 8)
        assert summary.week_end == date(2026, 3, 14)

    def test_totals_use_working_sets(self, history):
        stats = weekly_summary(history, 0, TODAY).stats
        assert stats.total_workouts == 2
        assert stats.total_exercises == 3
        assert stats.total_sets == 6
        assert stats.total_reps == 30
        assert stats.total_volume == pytest.approx(3000)
        assert stats.total_calories == pytest.approx(300)
        # One timed session of 60 minutes across two workouts
        assert stats.avg_workout_minutes == pytest.approx(30)

    def test_top_exercises_and_insights(self, history):
        summary = weekly_summary(history, 0, TODAY)
        assert [(e.name, e.sets) for e in summary.top_exercises] == [("Bench Press", 3), ("Squat", 3)]
        assert summary.insights == [
            "Nice work! 2 workouts this week",
            "Total volume: 3.0k kg moved",
            "Top exercise: Bench Press (3 sets)",
        ]

    def test_previous_week(self, history):
        summary = weekly_summary(history, 1, TODAY)
        assert summary.week_start == date(2026, 3, 1)
        assert summary.stats.total_workouts == 1
        assert summary.stats.total_volume == pytest.approx(1500)

    def test_empty_week(self):
        summary = weekly_summary([], 0, TODAY)
        assert summary.stats.total_workouts == 0
        assert summary.top_exercises == []
        assert summary.insights == ["No workouts this week yet - time to get started!"]

    def test_busy_week_insight(self):
        history = [_workout(f"2026-03-0{d}", [_ex("Row", 60, 8)]) for d in (1, 2, 3, 4)]
        summary = weekly_summary(history, 0, date(2026, 3, 7))
        assert summary.insights[0] == "Great week! 4 workouts completed"


class TestCompareWeeks:

    def test_improving(self, history):
        comparison = compare_weeks(history, TODAY)
        assert comparison.volume_change_pct == pytest.approx(100)
        assert comparison.trend == "improving"
        assert comparison.workout_change == 1

    def test_declining(self):
        history = [
            _workout("2026-03-02", [_ex("Bench Press", 100, 5)]),
            _workout("2026-03-09", [_ex("Bench Press", 100, 5, sets=2)]),
        ]
        comparison = compare_weeks(history, TODAY)
        assert comparison.trend == "declining"
        assert comparison.workout_change == 0

    def test_small_change_is_stable(self):
        history = [
            _workout("2026-03-02", [_ex("Bench Press", 100, 10, sets=10)]),
            _workout("2026-03-09", [_ex("Bench Press", 104, 10, sets=10)]),
        ]
        assert compare_weeks(history, TODAY).trend == "stable"

    def test_no_previous_volume_is_stable(self, history):
        comparison = compare_weeks(history[1:], TODAY)
        assert comparison.volume_change_pct == 0
        assert comparison.trend == "stable"
