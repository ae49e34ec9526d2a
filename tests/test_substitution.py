"""
Tests for the exercise catalog and the substitution matcher.

Scores for the small catalog below (source: Barbell Bench Press):

    Dumbbell Bench Press   40 + 20 + 5 + 15 + 0 + 10 = 90
    Push Up                26.7 + 20 + 5 + 15 + 0 + 10 = 76.7
    Plyometric Push Up     26.7 + 20 + 5 + 15 + 0 + 0 = 66.7
    Cable Crossover        13.3 + 20 + 0 + 0 + 0 + 5 = 38.3
    Leg Extension          0 + 0 + 0 + 0 + 0 + 5 = 5 (below the cut-off)
"""

import json

import pytest

from lift_signals.core.catalog import (
    ExerciseCatalog,
    catalog_from_records,
    exercise_from_record,
    load_catalog,
    normalize_name,
    strip_guide_suffix,
)
from lift_signals.core.models import CatalogExercise, ExerciseProfile, SubstitutionFilters
from lift_signals.core.substitution import (
    available_equipment,
    exercise_details,
    find_equipment_alternatives,
    find_injury_friendly_substitutes,
    find_substitutes,
    match_score,
    primary_muscle_group,
)


# ---------------------------------------------------------------------------
# Shared helpers
# ---------------------------------------------------------------------------

def _record(name, groups, equipment, mechanics, level, secondary=()):
    return {
        "name": name,
        "group": groups[0],
        "groups": list(groups),
        "equipment": equipment,
        "mechanics": mechanics,
        "experience_level": level,
        "secondary_muscles": list(secondary),
    }


RECORDS = [
    _record("Barbell Bench Press", ["chest", "shoulders", "triceps"], "Barbell", "Compound", "Beginner",
            ["shoulders", "triceps"]),
    _record("Dumbbell Bench Press", ["chest", "shoulders", "triceps"], "Dumbbell", "Compound", "Beginner",
            ["shoulders", "triceps"]),
    _record("Push Up", ["chest", "triceps"], "Bodyweight", "Compound", "Beginner", ["triceps"]),
    _record("Plyometric Push Up", ["chest", "triceps"], "Bodyweight", "Compound", "Advanced", ["triceps"]),
    _record("Cable Crossover", ["chest"], "Cable", "Isolation", "Intermediate"),
    _record("Leg Extension", ["quads"], "Machine", "Isolation", "Intermediate"),
]


@pytest.fixture
def catalog():
    return catalog_from_records(RECORDS)


def _names(results):
    return [r.name for r in results]


# ===========================================================================
# catalog.py
# ===========================================================================

class TestNames:

    def test_strip_guide_suffix(self):
        assert strip_guide_suffix("Barbell Curl Video Exercise Guide") == "Barbell Curl"

    def test_normalize(self):
        assert normalize_name("  Barbell   Curl VIDEO EXERCISE GUIDE ") == "barbell curl"


class TestExerciseCatalog:

    def test_lookup_ignores_case_and_suffix(self, catalog):
        assert "push up" in catalog
        assert catalog["PUSH UP Video Exercise Guide"].name == "Push Up"
        assert catalog.find("Deadlift") is None

    def test_first_duplicate_wins(self):
        first = _record("Push Up", ["chest"], "Bodyweight", "Compound", "Beginner")
        second = _record("push up", ["triceps"], "Bodyweight", "Compound", "Advanced")
        catalog = catalog_from_records([first, second])
        assert len(catalog) == 1
        assert catalog["Push Up"].group == "chest"

    def test_is_read_only(self, catalog):
        with pytest.raises(TypeError):
            catalog["Squat"] = catalog["Push Up"]

    def test_keeps_load_order(self, catalog):
        assert [e.name for e in catalog.exercises()][:2] == ["Barbell Bench Press", "Dumbbell Bench Press"]

    def test_empty(self):
        assert len(ExerciseCatalog()) == 0


class TestRecords:

    def test_exported_profile_shape(self):
        entry = exercise_from_record({
            "name": "Dumbbell Curl Video Exercise Guide",
            "group": "biceps",
            "groups": ["biceps", "forearms"],
            "profile": {
                "targetMuscleGroup": "Biceps",
                "equipmentRequired": "Dumbbell",
                "mechanics": "Isolation",
                "forceType": "Pull",
                "experienceLevel": "Beginner",
                "secondaryMuscles": ["Forearms"],
            },
        })
        assert entry.display_name == "Dumbbell Curl"
        assert entry.profile.equipment == "Dumbbell"
        assert entry.profile.target_muscle_group == "Biceps"
        assert entry.profile.secondary_muscles == ("Forearms",)

    def test_meta_shape(self):
        entry = exercise_from_record({
            "name": "Cable Row",
            "groups": ["back", "biceps"],
            "meta": {"Equipment": "Cable", "Mechanics": "Compound", "Exp. Level": "Advanced"},
        })
        assert entry.group == "back"
        assert entry.profile.target_muscle_group == "back"
        assert entry.profile.mechanics == "Compound"
        assert entry.profile.experience_level == "Advanced"

    def test_defaults(self):
        entry = exercise_from_record({"name": "Mystery", "group": "abs"})
        assert entry.groups == ("abs",)
        assert entry.profile.experience_level == "Intermediate"
        assert entry.profile.equipment == ""

    @pytest.mark.parametrize("record", [
        {"group": "chest"},
        {"name": "No Group"},
        {"name": "Bad Groups", "groups": 5},
    ])
    def test_invalid_records(self, record):
        with pytest.raises(ValueError):
            exercise_from_record(record)

    def test_invalid_records_skipped(self, caplog):
        catalog = catalog_from_records([{"name": "No Group"}, "junk", RECORDS[2]])
        assert list(catalog) == ["push up"]
        assert "Skipping catalog entry" in caplog.text


class TestLoadCatalog:

    def test_bundled_catalog(self):
        catalog = load_catalog()
        assert len(catalog) == 34
        assert "Barbell Bench Press" in catalog
        assert available_equipment(catalog) == ["Barbell", "Bodyweight", "Cable", "Dumbbell", "Machine"]

    def test_json_list(self, tmp_path):
        path = tmp_path / "catalog.json"
        path.write_text(json.dumps(RECORDS[:2]), encoding="utf-8")
        assert len(load_catalog(path)) == 2

    def test_yaml_mapping(self, tmp_path):
        path = tmp_path / "catalog.yaml"
        path.write_text(
            "exercises:\n  - name: Plank\n    group: abs\n    equipment: Bodyweight\n",
            encoding="utf-8",
        )
        assert load_catalog(path)["plank"].profile.equipment == "Bodyweight"

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_catalog(tmp_path / "nope.yaml")

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("exercises: [unclosed\n", encoding="utf-8")
        with pytest.raises(ValueError):
            load_catalog(path)

    def test_not_a_list(self, tmp_path):
        path = tmp_path / "scalar.yaml"
        path.write_text("just a string\n", encoding="utf-8")
        with pytest.raises(ValueError):
            load_catalog(path)


# ===========================================================================
# substitution.py
# ===========================================================================

class TestMatchScore:

    def test_expected_scores(self, catalog):
        source = catalog["Barbell Bench Press"]
        assert match_score(source, catalog["Dumbbell Bench Press"]) == pytest.approx(90)
        assert match_score(source, catalog["Push Up"]) == pytest.approx(76.6667, rel=1e-4)
        assert match_score(source, catalog["Cable Crossover"]) == pytest.approx(38.3333, rel=1e-4)
        assert match_score(source, catalog["Leg Extension"]) == pytest.approx(5)

    def test_equipment_filter_excludes(self, catalog):
        filters = SubstitutionFilters(equipment=("Bodyweight",))
        source = catalog["Barbell Bench Press"]
        assert match_score(source, catalog["Dumbbell Bench Press"], filters) == 0

    def test_low_impact_penalizes_plyometrics(self, catalog):
        filters = SubstitutionFilters(low_impact=True)
        source = catalog["Barbell Bench Press"]
        # 66.7 + 5 (bodyweight) - 10 (plyometric)
        assert match_score(source, catalog["Plyometric Push Up"], filters) == pytest.approx(61.6667, rel=1e-4)

    def test_low_impact_bonus_ignores_equipment_case(self):
        source = _record("Barbell Bench Press", ["chest"], "Barbell", "Compound", "Beginner")
        title = _record("Cable Press", ["chest"], "Cable", "Compound", "Beginner")
        lower = dict(title, name="Cable Press Low", equipment="cable")
        catalog = catalog_from_records([source, title, lower])
        filters = SubstitutionFilters(low_impact=True)
        # 40 + 20 + 15 + 10 (level) + 5 (low impact)
        assert match_score(catalog["Barbell Bench Press"], catalog["Cable Press"], filters) == pytest.approx(90)
        assert match_score(catalog["Barbell Bench Press"], catalog["Cable Press Low"], filters) == pytest.approx(90)

    def test_mechanics_preference(self, catalog):
        filters = SubstitutionFilters(mechanics="Isolation")
        source = catalog["Barbell Bench Press"]
        assert match_score(source, catalog["Dumbbell Bench Press"], filters) == pytest.approx(80)
        assert match_score(source, catalog["Cable Crossover"], filters) == pytest.approx(38.3333, rel=1e-4)

    def test_score_is_clamped(self):
        same = _record("A", ["chest"], "Dumbbell", "Compound", "Beginner", ["triceps"])
        twin = dict(same, name="B")
        catalog = catalog_from_records([same, twin])
        filters = SubstitutionFilters(low_impact=True)
        assert match_score(catalog["A"], catalog["B"], filters) == 100

    def test_bundled_scores_in_range(self):
        catalog = load_catalog()
        entries = catalog.exercises()
        filters = SubstitutionFilters(low_impact=True, mechanics="Isolation")
        for source in entries[:8]:
            for candidate in entries:
                assert 0 <= match_score(source, candidate) <= 100
                assert 0 <= match_score(source, candidate, filters) <= 100

    def test_invalid_filter_values(self):
        with pytest.raises(ValueError):
            SubstitutionFilters(max_difficulty="Expert")
        with pytest.raises(ValueError):
            SubstitutionFilters(mechanics="Hybrid")


class TestPrimaryMuscleGroup:

    def test_profile_target(self, catalog):
        assert primary_muscle_group(catalog["Push Up"]) == "chest"

    def test_priority_fallback(self):
        entry = CatalogExercise(
            name="X",
            group="triceps",
            groups=("triceps", "chest"),
            profile=ExerciseProfile(target_muscle_group="", equipment="", mechanics=""),
        )
        assert primary_muscle_group(entry) == "chest"


class TestFindSubstitutes:

    def test_ranked_best_first(self, catalog):
        results = find_substitutes("Barbell Bench Press", catalog)
        assert _names(results) == [
            "Dumbbell Bench Press",
            "Push Up",
            "Plyometric Push Up",
            "Cable Crossover",
        ]
        assert results[0].reason == "Targets chest, shoulders • Same compound movement • Dumbbell alternative • Excellent match"

    def test_source_never_included(self, catalog):
        assert "Barbell Bench Press" not in _names(find_substitutes("barbell bench press", catalog))

    def test_max_results(self, catalog):
        assert len(find_substitutes("Barbell Bench Press", catalog, max_results=2)) == 2

    def test_unknown_exercise(self, catalog, caplog):
        assert find_substitutes("Zercher Carry", catalog) == []
        assert "not found in catalog" in caplog.text

    def test_max_difficulty(self, catalog):
        filters = SubstitutionFilters(max_difficulty="Beginner")
        assert _names(find_substitutes("Barbell Bench Press", catalog, filters)) == [
            "Dumbbell Bench Press",
            "Push Up",
        ]

    def test_equipment_alternatives_case_insensitive(self, catalog):
        results = find_equipment_alternatives("Barbell Bench Press", catalog, ["bodyweight"])
        assert _names(results) == ["Push Up", "Plyometric Push Up"]

    def test_injury_friendly(self, catalog):
        results = find_injury_friendly_substitutes("Barbell Bench Press", catalog)
        assert _names(results) == ["Dumbbell Bench Press", "Push Up", "Cable Crossover"]
        assert results[0].match_score == pytest.approx(95)

    def test_all_scores_above_cutoff(self):
        catalog = load_catalog()
        for result in find_substitutes("Barbell Back Squat", catalog, max_results=50):
            assert 20 < result.match_score <= 100

    def test_exercise_details(self, catalog):
        assert exercise_details("cable crossover", catalog).profile.mechanics == "Isolation"
        assert exercise_details("Nothing", catalog) is None
