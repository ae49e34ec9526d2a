"""
Unit tests for the history, metric, progression, streak and calorie helpers.

Each test class targets one function and verifies it against hand-computed
expected values.  Dates are in March 2026; 2026-03-01 is a Sunday.
"""

from datetime import date

import pytest

from lift_signals.core.calories import (
    DISCLAIMER,
    calculate_burned_calories,
    calculate_total_workout_calories,
    format_calorie_range,
)
from lift_signals.core.history import (
    exercise_occurrences,
    group_by_week,
    most_frequent_exercises,
    unique_exercise_names,
    unique_workout_dates,
    week_start,
    workout_calendar,
)
from lift_signals.core.metrics import (
    average_rpe,
    best_estimated_1rm,
    best_set,
    estimate_one_rep_max,
    exercise_volume,
    total_volume,
    working_sets,
)
from lift_signals.core.models import (
    ProgressionResult,
    WorkoutExercise,
    WorkoutLog,
    WorkoutSet,
    parse_day,
)
from lift_signals.core.progression import (
    calculate_progression,
    find_previous_exercise,
    format_progression_delta,
    personal_record,
    recent_personal_records,
)
from lift_signals.core.streaks import calculate_streak, is_streak_at_risk


# ---------------------------------------------------------------------------
# Shared helpers
# ---------------------------------------------------------------------------

def _set(weight, reps, rir=None, rpe=None, warmup=False, completed=True):
    return WorkoutSet(
        weight_kg=weight,
        reps=reps,
        completed=completed,
        is_warmup=warmup,
        rir=rir,
        rpe=rpe,
    )


def _ex(name, *sets):
    return WorkoutExercise(name=name, sets=list(sets))


def _workout(day, *exercises, wid=None, name="Workout"):
    return WorkoutLog(
        id=wid or f"w-{day}",
        name=name,
        date=day,
        exercises=list(exercises),
    )


def _bench(day, weight, reps, wid=None):
    return _workout(day, _ex("Bench Press", _set(weight, reps)), wid=wid)


# ===========================================================================
# models.py  parse_day / WorkoutSet validation
# ===========================================================================

class TestModels:
    """Input record validation."""

    def test_parse_day_accepts_datetime(self):
        assert parse_day("2026-03-09T18:30:00Z") == date(2026, 3, 9)

    def test_parse_day_rejects_garbage(self):
        with pytest.raises(ValueError):
            parse_day("yesterday")

    def test_negative_weight_rejected(self):
        with pytest.raises(ValueError):
            WorkoutSet(weight_kg=-5, reps=5)

    def test_rir_out_of_range_rejected(self):
        with pytest.raises(ValueError):
            WorkoutSet(weight_kg=50, reps=5, rir=11)

    def test_end_before_start_rejected(self):
        with pytest.raises(ValueError):
            WorkoutLog(id="a", name="A", date="2026-03-01", start_time=2000, end_time=1000)

    def test_duration_minutes(self):
        w = WorkoutLog(id="a", name="A", date="2026-03-01", start_time=0, end_time=3_600_000)
        assert w.duration_minutes == pytest.approx(60.0)


# ===========================================================================
# history.py  calendar days and Sunday weeks
# ===========================================================================

class TestWeekStart:
    """Weeks start on Sunday."""

    def test_sunday_maps_to_itself(self):
        assert week_start(date(2026, 3, 1)) == date(2026, 3, 1)

    def test_wednesday(self):
        assert week_start(date(2026, 3, 4)) == date(2026, 3, 1)

    def test_saturday_is_last_day(self):
        assert week_start(date(2026, 3, 7)) == date(2026, 3, 1)

    def test_next_sunday_starts_new_week(self):
        assert week_start(date(2026, 3, 8)) == date(2026, 3, 8)


class TestHistoryIndexing:
    """Date and exercise lookups over unordered history."""

    def test_unique_dates_collapse_same_day(self):
        history = [
            _bench("2026-03-02", 100, 5, wid="a"),
            _bench("2026-03-09T07:00:00", 100, 5, wid="b"),
            _bench("2026-03-09T19:00:00", 100, 5, wid="c"),
        ]
        assert unique_workout_dates(history) == [date(2026, 3, 9), date(2026, 3, 2)]

    def test_group_by_week_newest_first(self):
        history = [
            _bench("2026-03-02", 100, 5),
            _bench("2026-03-09", 100, 5),
            _bench("2026-03-04", 100, 5),
        ]
        weeks = group_by_week(history)
        assert list(weeks) == [date(2026, 3, 8), date(2026, 3, 1)]
        assert [w.date for w in weeks[date(2026, 3, 1)]] == ["2026-03-02", "2026-03-04"]

    def test_exercise_occurrences_newest_first_case_insensitive(self):
        history = [
            _workout("2026-03-01", _ex("bench press", _set(90, 5))),
            _workout("2026-03-05", _ex("BENCH PRESS", _set(95, 5))),
            _workout("2026-03-03", _ex("Squat", _set(120, 5))),
        ]
        found = exercise_occurrences(history, "Bench Press")
        assert [w.date for w, _ in found] == ["2026-03-05", "2026-03-01"]

    def test_exclude_workout_id(self):
        history = [_bench("2026-03-01", 90, 5), _bench("2026-03-05", 95, 5)]
        found = exercise_occurrences(history, "bench press", exclude_workout_id="w-2026-03-05")
        assert [w.date for w, _ in found] == ["2026-03-01"]

    def test_unique_names_keep_first_spelling(self):
        history = [
            _workout("2026-03-05", _ex("BENCH PRESS", _set(95, 5))),
            _workout("2026-03-01", _ex("Bench Press", _set(90, 5)), _ex("Squat", _set(100, 5))),
        ]
        assert unique_exercise_names(history) == ["Bench Press", "Squat"]

    def test_most_frequent_exercises(self):
        history = [
            _workout("2026-03-01", _ex("Bench Press", _set(90, 5)), _ex("Squat", _set(100, 5))),
            _workout("2026-03-03", _ex("Bench Press", _set(90, 5))),
            _workout("2026-03-05", _ex("Bench Press", _set(90, 5)), _ex("Row", _set(60, 8))),
        ]
        assert most_frequent_exercises(history, limit=2) == ["Bench Press", "Row"]

    def test_workout_calendar(self):
        history = [
            _bench("2026-03-09", 100, 5, wid="a"),
            _bench("2026-03-09", 100, 5, wid="b"),
            _bench("2026-02-01", 100, 5, wid="c"),
        ]
        calendar = workout_calendar(history, days=7, today=date(2026, 3, 10))
        assert len(calendar) == 7
        assert calendar[date(2026, 3, 9)] == 2
        assert calendar[date(2026, 3, 10)] == 0
        assert date(2026, 2, 1) not in calendar


# ===========================================================================
# metrics.py  1RM, best set, volume
# ===========================================================================

class TestEstimateOneRepMax:
    """
    1RM = weight × (1 + reps/30)
    """

    def test_five_reps(self):
        # 100 × (1 + 5/30) = 116.67
        assert estimate_one_rep_max(100, 5) == pytest.approx(116.6667, rel=1e-4)

    def test_single_rep(self):
        assert estimate_one_rep_max(100, 1) == pytest.approx(103.3333, rel=1e-4)

    def test_zero_reps_is_zero(self):
        assert estimate_one_rep_max(100, 0) == 0.0


class TestBestSet:
    """Highest weight × reps among working sets; first set wins ties."""

    def test_picks_highest_volume(self):
        ex = _ex("Bench Press", _set(100, 5), _set(110, 4), _set(90, 6))
        best = best_set(ex)
        assert best.weight_kg == 90
        assert best.reps == 6
        assert best.volume == pytest.approx(540)

    def test_tie_goes_to_first_logged(self):
        ex = _ex("Bench Press", _set(100, 5), _set(125, 4))
        assert best_set(ex).weight_kg == 100

    def test_warmups_and_failed_sets_ignored(self):
        ex = _ex(
            "Bench Press",
            _set(200, 5, warmup=True),
            _set(150, 5, completed=False),
            _set(100, 5),
        )
        assert best_set(ex).weight_kg == 100
        assert len(working_sets(ex)) == 1

    def test_no_working_sets(self):
        ex = _ex("Bench Press", _set(60, 10, warmup=True))
        assert best_set(ex) is None
        assert best_estimated_1rm(ex) is None


class TestVolume:
    """Volume sums weight × reps over working sets only."""

    def test_exercise_volume(self):
        ex = _ex("Squat", _set(100, 5), _set(100, 5), _set(60, 10, warmup=True))
        assert exercise_volume(ex) == pytest.approx(1000)

    def test_total_volume_across_history(self):
        history = [_bench("2026-03-01", 100, 5), _bench("2026-03-03", 50, 10)]
        assert total_volume(history) == pytest.approx(1000)

    def test_average_rpe_ignores_unrated(self):
        sets = [_set(100, 5, rpe=8), _set(100, 5), _set(100, 5, rpe=9)]
        assert average_rpe(sets) == pytest.approx(8.5)
        assert average_rpe([_set(100, 5)]) is None


# ===========================================================================
# progression.py  comparison cascade and PRs
# ===========================================================================

class TestCalculateProgression:
    """Weight first, then reps, then volume."""

    def test_weight_increase(self):
        result = calculate_progression(_ex("Bench", _set(105, 5)), _ex("Bench", _set(100, 5)))
        assert result.status == "improved"
        assert result.metric == "weight"
        assert result.delta == pytest.approx(5)

    def test_reps_increase_at_same_weight(self):
        result = calculate_progression(_ex("Bench", _set(100, 8)), _ex("Bench", _set(100, 5)))
        assert result.status == "improved"
        assert result.metric == "reps"
        assert result.delta == 3

    def test_identical_sessions_maintained(self):
        result = calculate_progression(_ex("Bench", _set(100, 5)), _ex("Bench", _set(100, 5)))
        assert result.status == "maintained"
        assert result.delta == 0

    def test_weight_drop_is_decrease(self):
        result = calculate_progression(_ex("Bench", _set(95, 5)), _ex("Bench", _set(100, 5)))
        assert result.status == "decreased"
        assert result.delta == pytest.approx(-5)

    def test_weight_beats_reps(self):
        # Heavier for fewer reps still counts as a weight improvement
        result = calculate_progression(_ex("Bench", _set(110, 3)), _ex("Bench", _set(100, 5)))
        assert result.status == "improved"
        assert result.metric == "weight"

    def test_no_previous(self):
        result = calculate_progression(_ex("Bench", _set(100, 5)), None)
        assert result.status == "maintained"
        assert result.previous_best is None
        assert result.current_best is not None

    def test_find_previous_skips_current_workout(self):
        history = [_bench("2026-03-01", 100, 5), _bench("2026-03-03", 105, 5)]
        previous = find_previous_exercise(history, "bench press", "w-2026-03-03")
        assert previous.sets[0].weight_kg == 100


class TestFormatProgressionDelta:

    def test_weight(self):
        assert format_progression_delta(ProgressionResult("improved", 5.0, "weight")) == "+5kg"

    def test_fractional_weight_drop(self):
        assert format_progression_delta(ProgressionResult("decreased", -2.5, "weight")) == "-2.5kg"

    def test_reps(self):
        assert format_progression_delta(ProgressionResult("improved", 3, "reps")) == "+3 reps"


class TestPersonalRecords:
    """PRs track the best estimated 1RM per exercise."""

    @pytest.fixture
    def history(self):
        # e1RM: 116.67, 121.0, 122.5
        return [
            _bench("2026-03-01", 100, 5),
            _bench("2026-03-03", 110, 3),
            _bench("2026-03-05", 105, 5),
        ]

    def test_all_time_record(self, history):
        record = personal_record("bench press", history)
        assert record.date == "2026-03-05"
        assert record.estimated_1rm == pytest.approx(122.5)

    def test_never_logged(self, history):
        assert personal_record("Squat", history) is None

    def test_recent_records_newest_first(self, history):
        records = recent_personal_records(history, 30, date(2026, 3, 10))
        assert [r.date for r in records] == ["2026-03-05", "2026-03-03", "2026-03-01"]
        assert records[0].days_ago == 5

    def test_window_excludes_older_records(self, history):
        records = recent_personal_records(history, 6, date(2026, 3, 10))
        assert [r.date for r in records] == ["2026-03-05"]


# ===========================================================================
# streaks.py
# ===========================================================================

class TestStreaks:
    """Consecutive training days; same-day sessions count once."""

    TODAY = date(2026, 3, 10)

    def test_empty_history(self):
        streak = calculate_streak([], self.TODAY)
        assert streak.current_streak == 0
        assert streak.longest_streak == 0
        assert streak.total_workouts == 0
        assert streak.last_workout_date is None
        assert not is_streak_at_risk(streak, self.TODAY)

    def test_streak_ending_yesterday_is_at_risk(self):
        history = [_bench("2026-03-09", 100, 5), _bench("2026-03-08", 100, 5)]
        streak = calculate_streak(history, self.TODAY)
        assert streak.current_streak == 2
        assert streak.streak_dates == [date(2026, 3, 9), date(2026, 3, 8)]
        assert is_streak_at_risk(streak, self.TODAY)

    def test_trained_today_not_at_risk(self):
        history = [_bench("2026-03-10", 100, 5), _bench("2026-03-09", 100, 5)]
        streak = calculate_streak(history, self.TODAY)
        assert streak.current_streak == 2
        assert not is_streak_at_risk(streak, self.TODAY)

    def test_future_entry_does_not_hide_risk(self):
        # 2026-03-15 is ahead of today; the live streak still ends yesterday
        history = [_bench("2026-03-09", 100, 5), _bench("2026-03-15", 100, 5)]
        streak = calculate_streak(history, self.TODAY)
        assert streak.current_streak == 1
        assert streak.last_workout_date == date(2026, 3, 15)
        assert is_streak_at_risk(streak, self.TODAY)

    def test_gap_breaks_current_but_keeps_longest(self):
        history = [
            _bench("2026-03-03", 100, 5),
            _bench("2026-03-04", 100, 5),
            _bench("2026-03-05", 100, 5),
        ]
        streak = calculate_streak(history, self.TODAY)
        assert streak.current_streak == 0
        assert streak.longest_streak == 3
        assert streak.last_workout_date == date(2026, 3, 5)

    def test_same_day_sessions_count_once(self):
        history = [_bench("2026-03-09", 100, 5, wid="a"), _bench("2026-03-09", 100, 5, wid="b")]
        streak = calculate_streak(history, self.TODAY)
        assert streak.current_streak == 1
        assert streak.total_workouts == 2

    @pytest.mark.parametrize("days", [
        ["2026-03-10"],
        ["2026-03-01", "2026-03-02", "2026-03-09", "2026-03-10"],
        ["2026-02-01", "2026-02-02", "2026-02-03", "2026-02-04", "2026-03-09"],
        ["2026-03-06", "2026-03-08"],
    ])
    def test_longest_never_below_current(self, days):
        history = [_bench(d, 100, 5) for d in days]
        streak = calculate_streak(history, self.TODAY)
        assert streak.longest_streak >= streak.current_streak


# ===========================================================================
# calories.py  MET formula
# ===========================================================================

class TestCalories:
    """
    kcal = MET × 3.5 × kg × minutes / 200
    """

    def test_basic_calculation(self):
        # 5 × 3.5 × 80 × 50 / 200 = 350
        result = calculate_burned_calories(80, 50, 5.0)
        assert result.kcal == 350
        assert result.explanation.endswith("= 350 kcal")
        assert result.disclaimer == DISCLAIMER

    @pytest.mark.parametrize("weight, minutes, met", [
        (29, 50, 5.0),
        (80, 0, 5.0),
        (80, 50, 9.0),
        (80, 50, 2.5),
    ])
    def test_out_of_range_inputs_raise(self, weight, minutes, met):
        with pytest.raises(ValueError):
            calculate_burned_calories(weight, minutes, met)

    def test_total_prefers_estimates(self):
        blocks = [{"estimated_calories": 100}, {"duration_minutes": 50}, {}]
        assert calculate_total_workout_calories(blocks, 80) == 450

    def test_total_propagates_bad_input(self):
        with pytest.raises(ValueError):
            calculate_total_workout_calories([{"duration_minutes": 30}], 20)

    def test_range(self):
        assert format_calorie_range(400) == "340-460 kcal"
