"""
Exercise reference catalog.

The catalog is read-only data: built once (usually at process start) and
passed by reference into the substitution matcher.  Entries are keyed by
normalized name so lookups ignore case, extra whitespace and the
"Video Exercise Guide" suffix carried by scraped exports.

Two record shapes are accepted:

- flat (the bundled ``data/exercises.yaml``)::

    name: Barbell Bench Press
    group: chest
    groups: [chest, shoulders, triceps]
    target_muscle_group: chest
    equipment: Barbell
    mechanics: Compound
    force_type: Push
    experience_level: Beginner
    secondary_muscles: [shoulders, triceps]

- exported (``profile`` with camelCase keys and/or a ``meta`` block with
  ``Equipment``, ``Mechanics`` and ``Exp. Level``), as found in JSON dumps
  of third-party exercise libraries.
"""

import json
import logging
import re
from collections.abc import Iterator, Mapping
from pathlib import Path
from types import MappingProxyType

import yaml

from .models import CatalogExercise, ExerciseProfile

logger = logging.getLogger(__name__)

_GUIDE_SUFFIX = re.compile(r"video exercise guide", re.IGNORECASE)
_WHITESPACE = re.compile(r"\s+")


def strip_guide_suffix(name: str) -> str:
    """Remove the "Video Exercise Guide" token and tidy whitespace."""
    return _WHITESPACE.sub(" ", _GUIDE_SUFFIX.sub("", name)).strip()


def normalize_name(name: str) -> str:
    """Lookup key for an exercise name."""
    return strip_guide_suffix(name).lower()


class ExerciseCatalog(Mapping[str, CatalogExercise]):
    """
    Immutable mapping of normalized name → CatalogExercise.

    Iteration follows the order the entries were loaded in.  When two
    records normalize to the same key the first one wins.
    """

    def __init__(self, exercises: list[CatalogExercise] | tuple[CatalogExercise, ...] = ()):
        entries: dict[str, CatalogExercise] = {}
        for exercise in exercises:
            key = normalize_name(exercise.name)
            if key in entries:
                logger.debug("Duplicate catalog entry ignored: %s", exercise.name)
                continue
            entries[key] = exercise
        self._entries = MappingProxyType(entries)

    def __getitem__(self, name: str) -> CatalogExercise:
        return self._entries[normalize_name(name)]

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and normalize_name(name) in self._entries

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def find(self, name: str) -> CatalogExercise | None:
        """Entry for ``name``, or None if it is not in the catalog."""
        return self._entries.get(normalize_name(name))

    def exercises(self) -> list[CatalogExercise]:
        return list(self._entries.values())


def _str_list(value: object) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        return (value,)
    if not isinstance(value, (list, tuple)):
        raise ValueError(f"expected a list of strings, got {type(value).__name__}")
    return tuple(str(v) for v in value)


def exercise_from_record(record: dict) -> CatalogExercise:
    """
    Convert one raw record (flat or exported shape) to a CatalogExercise.

    Raises:
        ValueError: If the record has no name or no muscle group at all
    """
    name = str(record.get("name") or "").strip()
    if not name:
        raise ValueError("catalog record is missing 'name'")

    profile = record.get("profile") or {}
    meta = record.get("meta") or {}
    groups = _str_list(record.get("groups"))
    group = str(record.get("group") or (groups[0] if groups else "")).strip()
    if not group:
        raise ValueError(f"catalog record '{name}' has no muscle group")
    if not groups:
        groups = (group,)

    def pick(flat_key: str, profile_key: str, meta_key: str, default: str = "") -> str:
        value = record.get(flat_key) or profile.get(profile_key) or meta.get(meta_key)
        return str(value).strip() if value else default

    return CatalogExercise(
        name=name,
        group=group,
        groups=groups,
        profile=ExerciseProfile(
            target_muscle_group=pick("target_muscle_group", "targetMuscleGroup", "", group),
            equipment=pick("equipment", "equipmentRequired", "Equipment"),
            mechanics=pick("mechanics", "mechanics", "Mechanics"),
            force_type=pick("force_type", "forceType", ""),
            experience_level=pick("experience_level", "experienceLevel", "Exp. Level", "Intermediate"),
            secondary_muscles=_str_list(
                record.get("secondary_muscles", profile.get("secondaryMuscles"))
            ),
        ),
    )


def catalog_from_records(records: list[dict]) -> ExerciseCatalog:
    """
    Build a catalog from raw records, skipping invalid ones with a warning.
    """
    exercises: list[CatalogExercise] = []
    for index, record in enumerate(records):
        if not isinstance(record, dict):
            logger.warning("Skipping catalog entry #%d: not a mapping", index)
            continue
        try:
            exercises.append(exercise_from_record(record))
        except ValueError as exc:
            logger.warning("Skipping catalog entry #%d: %s", index, exc)
    return ExerciseCatalog(exercises)


def get_bundled_catalog_path() -> Path:
    """Path of the catalog shipped with the package."""
    # catalog.py lives at src/lift_signals/core/catalog.py
    return Path(__file__).parent.parent / "data" / "exercises.yaml"


def load_catalog(path: Path | str | None = None) -> ExerciseCatalog:
    """
    Load an exercise catalog from a YAML or JSON file.

    The file holds either a list of records or a mapping with an
    ``exercises`` list.  ``.json`` files are parsed as JSON, everything else
    as YAML.

    Args:
        path: Catalog file; defaults to the bundled catalog

    Returns:
        ExerciseCatalog

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the file cannot be parsed or is not a list of records
    """
    path = Path(path) if path is not None else get_bundled_catalog_path()
    if not path.exists():
        raise FileNotFoundError(f"Exercise catalog not found: {path}")

    with open(path, "r", encoding="utf-8") as f:
        if path.suffix.lower() == ".json":
            data = json.load(f)
        else:
            try:
                data = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ValueError(f"{path}: invalid YAML ({e})") from e

    if isinstance(data, dict):
        data = data.get("exercises")
    if not isinstance(data, list):
        raise ValueError(f"{path}: expected a list of exercise records")

    catalog = catalog_from_records(data)
    logger.debug("Loaded %d catalog exercises from %s", len(catalog), path)
    return catalog
