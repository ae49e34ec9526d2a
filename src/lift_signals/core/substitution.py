"""
Exercise substitution matcher.

Scores every catalog entry against a source exercise (0-100) from muscle
overlap, movement pattern, equipment and difficulty, then applies the
caller's filters.  Equipment and difficulty filters exclude candidates
outright; mechanics and low-impact preferences only move the score.
"""

import logging

from .catalog import ExerciseCatalog, normalize_name
from .config import (
    EXCELLENT_MATCH_SCORE,
    GOOD_MATCH_SCORE,
    HIGH_IMPACT_KEYWORDS,
    LOW_IMPACT_EQUIPMENT,
    MIN_SUBSTITUTE_SCORE,
    MUSCLE_GROUP_PRIORITY,
    SCORE_EQUIPMENT_MATCH,
    SCORE_HIGH_IMPACT_PENALTY,
    SCORE_LEVEL_ADJACENT,
    SCORE_LEVEL_EXACT,
    SCORE_LOW_IMPACT_BONUS,
    SCORE_MECHANICS_FILTER_PENALTY,
    SCORE_MECHANICS_MATCH,
    SCORE_MUSCLE_OVERLAP,
    SCORE_PRIMARY_MATCH,
    SCORE_SECONDARY_OVERLAP,
)
from .models import (
    EXPERIENCE_LEVELS,
    CatalogExercise,
    SubstituteExercise,
    SubstitutionFilters,
)

logger = logging.getLogger(__name__)


def _level_index(level: str) -> int:
    """Position on Beginner < Intermediate < Advanced; unknown counts as Intermediate."""
    for index, known in enumerate(EXPERIENCE_LEVELS):
        if known.lower() == level.strip().lower():
            return index
    return EXPERIENCE_LEVELS.index("Intermediate")


def _lowered(values: tuple[str, ...]) -> list[str]:
    return [v.lower() for v in values]


def primary_muscle_group(exercise: CatalogExercise) -> str:
    """
    The muscle group an exercise mainly trains.

    Uses the profile's target group when present, otherwise the first group
    in the fixed priority order (chest, back, shoulders, legs, ...).
    """
    target = exercise.profile.target_muscle_group.strip().lower()
    if target:
        return target
    groups = _lowered(exercise.groups)
    for muscle in MUSCLE_GROUP_PRIORITY:
        if muscle in groups:
            return muscle
    return groups[0] if groups else "unknown"


def _same(a: str, b: str) -> bool:
    return bool(a) and a.lower() == b.lower()


def match_score(
    source: CatalogExercise,
    candidate: CatalogExercise,
    filters: SubstitutionFilters | None = None,
) -> float:
    """
    Score how well ``candidate`` replaces ``source``.

    Args:
        source: Exercise being replaced
        candidate: Possible replacement
        filters: Optional hard excludes and soft preferences

    Returns:
        Score clamped to [0, 100]; 0 for candidates a filter excludes
    """
    if filters is not None:
        if filters.equipment:
            allowed = {e.lower() for e in filters.equipment}
            if candidate.profile.equipment.lower() not in allowed:
                return 0.0
        if filters.max_difficulty is not None:
            if _level_index(candidate.profile.experience_level) > _level_index(filters.max_difficulty):
                return 0.0

    source_groups = _lowered(source.groups)
    candidate_groups = set(_lowered(candidate.groups))
    common = [m for m in source_groups if m in candidate_groups]
    score = len(common) / max(len(source_groups), 1) * SCORE_MUSCLE_OVERLAP

    if primary_muscle_group(source) == primary_muscle_group(candidate):
        score += SCORE_PRIMARY_MATCH

    if set(_lowered(source.profile.secondary_muscles)) & set(_lowered(candidate.profile.secondary_muscles)):
        score += SCORE_SECONDARY_OVERLAP

    if _same(source.profile.mechanics, candidate.profile.mechanics):
        score += SCORE_MECHANICS_MATCH

    if _same(source.profile.equipment, candidate.profile.equipment):
        score += SCORE_EQUIPMENT_MATCH

    level_gap = abs(
        _level_index(source.profile.experience_level)
        - _level_index(candidate.profile.experience_level)
    )
    if level_gap == 0:
        score += SCORE_LEVEL_EXACT
    elif level_gap == 1:
        score += SCORE_LEVEL_ADJACENT

    if filters is not None:
        if filters.low_impact:
            if candidate.profile.equipment.lower() in LOW_IMPACT_EQUIPMENT:
                score += SCORE_LOW_IMPACT_BONUS
            lowered_name = candidate.name.lower()
            if any(keyword in lowered_name for keyword in HIGH_IMPACT_KEYWORDS):
                score -= SCORE_HIGH_IMPACT_PENALTY
        if filters.mechanics is not None and not _same(candidate.profile.mechanics, filters.mechanics):
            score -= SCORE_MECHANICS_FILTER_PENALTY

    return max(0.0, min(100.0, score))


def match_reason(source: CatalogExercise, candidate: CatalogExercise, score: float) -> str:
    """Readable explanation, in muscle → mechanics → equipment → tier order."""
    reasons: list[str] = []

    candidate_groups = set(_lowered(candidate.groups))
    common = [m for m in source.groups if m.lower() in candidate_groups]
    if common:
        reasons.append(f"Targets {', '.join(common[:2])}")

    if _same(source.profile.mechanics, candidate.profile.mechanics):
        reasons.append(f"Same {source.profile.mechanics.lower()} movement")

    if _same(source.profile.equipment, candidate.profile.equipment):
        reasons.append(f"Uses {source.profile.equipment.lower()}")
    elif candidate.profile.equipment:
        reasons.append(f"{candidate.profile.equipment} alternative")

    if score >= EXCELLENT_MATCH_SCORE:
        reasons.append("Excellent match")
    elif score >= GOOD_MATCH_SCORE:
        reasons.append("Good alternative")

    return " • ".join(reasons)


def find_substitutes(
    exercise_name: str,
    catalog: ExerciseCatalog,
    filters: SubstitutionFilters | None = None,
    max_results: int = 10,
) -> list[SubstituteExercise]:
    """
    Rank catalog alternatives for an exercise.

    Args:
        exercise_name: Source exercise; matched after normalization
        catalog: Exercise reference catalog
        filters: Optional SubstitutionFilters
        max_results: Maximum number of substitutes returned

    Returns:
        Substitutes scoring above 20, best first.  Empty (with a logged
        warning) when the source exercise is not in the catalog.
    """
    source = catalog.find(exercise_name)
    if source is None:
        logger.warning("Exercise %r not found in catalog", exercise_name)
        return []

    source_key = normalize_name(source.name)
    substitutes: list[SubstituteExercise] = []
    for candidate in catalog.exercises():
        if normalize_name(candidate.name) == source_key:
            continue
        score = match_score(source, candidate, filters)
        if score <= MIN_SUBSTITUTE_SCORE:
            continue
        substitutes.append(
            SubstituteExercise(
                name=candidate.display_name,
                match_score=score,
                muscle_groups=list(candidate.groups),
                equipment=candidate.profile.equipment or "Unknown",
                difficulty=candidate.profile.experience_level or "Intermediate",
                mechanics=candidate.profile.mechanics or "Unknown",
                reason=match_reason(source, candidate, score),
            )
        )

    # Stable sort: equal scores keep catalog order
    substitutes.sort(key=lambda s: -s.match_score)
    return substitutes[:max_results]


def find_injury_friendly_substitutes(
    exercise_name: str,
    catalog: ExerciseCatalog,
    max_results: int = 10,
) -> list[SubstituteExercise]:
    """Low-impact alternatives no harder than Intermediate."""
    filters = SubstitutionFilters(low_impact=True, max_difficulty="Intermediate")
    return find_substitutes(exercise_name, catalog, filters, max_results)


def find_equipment_alternatives(
    exercise_name: str,
    catalog: ExerciseCatalog,
    equipment: list[str],
    max_results: int = 10,
) -> list[SubstituteExercise]:
    """Alternatives that only use the given equipment."""
    filters = SubstitutionFilters(equipment=tuple(equipment))
    return find_substitutes(exercise_name, catalog, filters, max_results)


def available_equipment(catalog: ExerciseCatalog) -> list[str]:
    """Sorted distinct equipment names across the catalog."""
    return sorted({ex.profile.equipment for ex in catalog.exercises() if ex.profile.equipment})


def exercise_details(exercise_name: str, catalog: ExerciseCatalog) -> CatalogExercise | None:
    """Catalog entry for an exercise name, or None."""
    return catalog.find(exercise_name)
