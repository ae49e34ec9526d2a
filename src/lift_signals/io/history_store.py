"""
JSONL-based workout history storage.

Handles reading the workout history file.  The analytics never modify
history, so the store only reads, apart from creating an empty file on init.
"""

import json
from pathlib import Path

from ..core.history import sort_oldest_first
from ..core.models import WorkoutLog
from .serializers import ValidationError, dict_to_workout_log


class HistoryStore:
    """
    Reads workout history stored in JSONL format.

    The history file contains one JSON object per line, one workout each.
    A sibling achievements.json (a JSON list of ids) records which
    achievements the app has already unlocked.
    """

    def __init__(self, history_path: str | Path):
        """
        Initialize the history store.

        Args:
            history_path: Path to the JSONL history file
        """
        self.history_path = Path(history_path)
        self.achievements_path = self.history_path.parent / "achievements.json"

    def exists(self) -> bool:
        """Check if the history file exists."""
        return self.history_path.exists()

    def init(self) -> None:
        """
        Initialize empty history file if it doesn't exist.

        Creates parent directories if needed.
        """
        self.history_path.parent.mkdir(parents=True, exist_ok=True)

        if not self.history_path.exists():
            self.history_path.touch()

    def load_history(self) -> list[WorkoutLog]:
        """
        Load all workouts from the history file.

        Returns:
            List of WorkoutLog, oldest first

        Raises:
            FileNotFoundError: If history file doesn't exist
            ValidationError: If a line is not a valid workout (message has the line number)
        """
        if not self.history_path.exists():
            raise FileNotFoundError(
                f"History file not found: {self.history_path}. Run 'init' first."
            )

        workouts: list[WorkoutLog] = []

        with open(self.history_path, "r", encoding="utf-8") as f:
            for line_num, line in enumerate(f, 1):
                line = line.strip()
                if not line:
                    continue

                try:
                    data = json.loads(line)
                    if not isinstance(data, dict):
                        raise ValidationError("Expected a JSON object")
                    workouts.append(dict_to_workout_log(data))
                except (json.JSONDecodeError, ValidationError) as e:
                    raise ValidationError(
                        f"Error parsing line {line_num} in {self.history_path}: {e}"
                    ) from e

        return sort_oldest_first(workouts)

    def load_unlocked_achievements(self) -> set[str]:
        """
        Load the ids of achievements already unlocked.

        Returns:
            Set of ids; empty if achievements.json is absent

        Raises:
            ValidationError: If the file is not a JSON list of strings
        """
        if not self.achievements_path.exists():
            return set()

        try:
            with open(self.achievements_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValidationError(f"Invalid JSON in {self.achievements_path}: {e}") from e

        if not isinstance(data, list) or not all(isinstance(x, str) for x in data):
            raise ValidationError(f"{self.achievements_path} must contain a list of achievement ids")
        return set(data)


def get_default_history_path() -> Path:
    """
    Get the default history file path.

    Returns:
        ~/.lift-signals/history.jsonl
    """
    return Path.home() / ".lift-signals" / "history.jsonl"

