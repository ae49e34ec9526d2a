"""
Tests for record parsing, the JSONL history store and the YAML threshold loader.
"""

import json

import pytest

from lift_signals.core.config import DeloadThresholds, PlateauThresholds
from lift_signals.core.config_loader import (
    _deep_merge,
    get_bundled_yaml_path,
    load_model_config,
    load_thresholds,
)
from lift_signals.core.models import WorkoutExercise, WorkoutLog, WorkoutSet
from lift_signals.io.history_store import HistoryStore, get_default_history_path
from lift_signals.io.serializers import (
    ValidationError,
    dict_to_workout_log,
    dict_to_workout_set,
    json_line_to_workout,
    validate_number,
    workout_log_to_dict,
)


EXPORTED = {
    "id": "abc123",
    "name": "Push Day",
    "date": "2026-03-09T18:30:00.000Z",
    "startTime": 1_773_080_000_000,
    "endTime": 1_773_083_600_000,
    "totalCalories": 250,
    "exercises": [
        {
            "name": "Bench Press",
            "exerciseId": "ex-1",
            "sets": [
                {"weight": 60, "reps": 10, "isWarmup": True, "completed": True},
                {"weight": 100, "reps": 5, "completed": True, "rir": 2, "rpe": 8},
                {"weight": 100, "reps": 3, "completed": False},
            ],
        }
    ],
}


# ===========================================================================
# serializers.py
# ===========================================================================

class TestDictToWorkout:

    def test_exported_camel_case(self):
        workout = dict_to_workout_log(EXPORTED)
        assert workout.id == "abc123"
        assert workout.day.isoformat() == "2026-03-09"
        assert workout.duration_minutes == pytest.approx(60)
        assert workout.total_calories == 250.0

        exercise = workout.exercises[0]
        assert exercise.exercise_id == "ex-1"
        assert exercise.sets[0].is_warmup
        assert exercise.sets[1].rir == 2
        assert exercise.sets[1].rpe == 8.0
        assert not exercise.sets[2].completed

    def test_defaults(self):
        workout = dict_to_workout_log({"date": "2026-03-09"})
        assert workout.id == "2026-03-09"
        assert workout.name == "Workout"
        assert workout.exercises == []

    @pytest.mark.parametrize("data", [
        {},
        {"date": "09/03/2026"},
        {"date": 20260309},
        {"date": "2026-03-09", "exercises": "bench"},
        {"date": "2026-03-09", "exercises": [{"name": "", "sets": []}]},
        {"date": "2026-03-09", "exercises": [{"name": "Bench", "sets": {}}]},
        {"date": "2026-03-09", "totalCalories": -5},
        {"date": "2026-03-09", "startTime": 2000, "endTime": 1000},
    ])
    def test_invalid_workouts(self, data):
        with pytest.raises(ValidationError):
            dict_to_workout_log(data)

    @pytest.mark.parametrize("data", [
        {"weight_kg": -1, "reps": 5},
        {"weight_kg": 100, "reps": "five"},
        {"weight_kg": 100, "reps": 5, "rpe": 11},
        {"weight_kg": 100, "reps": 5, "rir": 12},
    ])
    def test_invalid_sets(self, data):
        with pytest.raises(ValidationError):
            dict_to_workout_set(data)

    def test_bool_is_not_a_number(self):
        with pytest.raises(ValidationError):
            validate_number(True, "reps")


class TestJsonLines:

    def test_dict_uses_snake_case_keys(self):
        workout = WorkoutLog(
            id="w1",
            name="Legs",
            date="2026-03-09",
            exercises=[WorkoutExercise(name="Squat", sets=[WorkoutSet(100, 5, rir=2)])],
        )
        data = workout_log_to_dict(workout)
        assert set(data) == {"id", "name", "date", "exercises"}
        assert data["exercises"][0]["sets"][0] == {
            "weight_kg": 100,
            "reps": 5,
            "completed": True,
            "rir": 2,
        }
        assert json_line_to_workout(json.dumps(data)) == workout

    @pytest.mark.parametrize("line", ["{not json", "[1, 2]"])
    def test_invalid_lines(self, line):
        with pytest.raises(ValidationError):
            json_line_to_workout(line)


# ===========================================================================
# history_store.py
# ===========================================================================

class TestHistoryStore:

    def test_init_creates_file_and_parents(self, tmp_path):
        store = HistoryStore(tmp_path / "nested" / "history.jsonl")
        assert not store.exists()
        store.init()
        assert store.exists()
        assert store.load_history() == []

    def test_init_keeps_existing_content(self, tmp_path):
        path = tmp_path / "history.jsonl"
        path.write_text(json.dumps({"date": "2026-03-09"}) + "\n", encoding="utf-8")
        store = HistoryStore(path)
        store.init()
        assert len(store.load_history()) == 1

    def test_load_sorted_oldest_first(self, tmp_path):
        path = tmp_path / "history.jsonl"
        lines = [
            json.dumps({"id": "b", "date": "2026-03-09"}),
            "",
            json.dumps({"id": "a", "date": "2026-03-02"}),
        ]
        path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        assert [w.id for w in HistoryStore(path).load_history()] == ["a", "b"]

    def test_bad_line_reports_line_number(self, tmp_path):
        path = tmp_path / "history.jsonl"
        path.write_text(json.dumps({"date": "2026-03-09"}) + "\n{oops\n", encoding="utf-8")
        with pytest.raises(ValidationError, match="line 2"):
            HistoryStore(path).load_history()

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            HistoryStore(tmp_path / "history.jsonl").load_history()

    def test_achievements_absent(self, tmp_path):
        assert HistoryStore(tmp_path / "history.jsonl").load_unlocked_achievements() == set()

    def test_achievements_loaded(self, tmp_path):
        (tmp_path / "achievements.json").write_text('["first_workout", "first_pr"]', encoding="utf-8")
        store = HistoryStore(tmp_path / "history.jsonl")
        assert store.load_unlocked_achievements() == {"first_workout", "first_pr"}

    @pytest.mark.parametrize("content", ['{"first_workout": true}', "[1, 2]", "[oops"])
    def test_achievements_invalid(self, tmp_path, content):
        (tmp_path / "achievements.json").write_text(content, encoding="utf-8")
        with pytest.raises(ValidationError):
            HistoryStore(tmp_path / "history.jsonl").load_unlocked_achievements()

    def test_default_path(self):
        path = get_default_history_path()
        assert path.name == "history.jsonl"
        assert path.parent.name == ".lift-signals"


# ===========================================================================
# config_loader.py
# ===========================================================================

class TestThresholdLoader:

    def test_bundled_yaml_matches_defaults(self):
        assert get_bundled_yaml_path().exists()
        config = load_model_config(user_path=get_bundled_yaml_path())
        assert load_thresholds(config) == (PlateauThresholds(), DeloadThresholds())

    def test_user_override(self, tmp_path):
        user = tmp_path / "thresholds.yaml"
        user.write_text("plateau:\n  tolerance_kg: 2.5\ndeload:\n  min_workouts: 8\n", encoding="utf-8")
        plateau, deload = load_thresholds(load_model_config(user_path=user))
        assert plateau.tolerance_kg == 2.5
        assert plateau.min_occurrences == 3
        assert deload.min_workouts == 8
        assert isinstance(deload.min_workouts, int)
        assert deload.excessive_increase_pct == 50.0

    def test_unknown_key_warns(self):
        with pytest.warns(UserWarning, match="unknown plateau threshold"):
            plateau, _ = load_thresholds({"plateau": {"speed": 3}})
        assert plateau == PlateauThresholds()

    def test_invalid_yaml_is_ignored(self, tmp_path):
        user = tmp_path / "thresholds.yaml"
        user.write_text("plateau: [unclosed\n", encoding="utf-8")
        with pytest.warns(UserWarning, match="ignoring"):
            config = load_model_config(user_path=user)
        assert load_thresholds(config)[0] == PlateauThresholds()

    def test_non_mapping_is_ignored(self, tmp_path):
        user = tmp_path / "thresholds.yaml"
        user.write_text("- 1\n- 2\n", encoding="utf-8")
        with pytest.warns(UserWarning, match="not a mapping"):
            load_model_config(user_path=user)

    def test_empty_config_gives_defaults(self):
        assert load_thresholds({}) == (PlateauThresholds(), DeloadThresholds())

    def test_deep_merge_is_non_destructive(self):
        base = {"plateau": {"tolerance_kg": 1.0, "severe_weeks": 4}}
        merged = _deep_merge(base, {"plateau": {"tolerance_kg": 2.0}})
        assert merged == {"plateau": {"tolerance_kg": 2.0, "severe_weeks": 4}}
        assert base["plateau"]["tolerance_kg"] == 1.0
