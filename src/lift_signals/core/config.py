"""
Configuration constants for the training signal engine.

All thresholds are centralized here.  The plateau and deload numbers are
product behaviour: change them only deliberately.  Callers that need other
values pass a PlateauThresholds / DeloadThresholds instance instead of
editing this module (see config_loader.py for YAML overrides).
"""

from dataclasses import dataclass
from typing import Final

# =============================================================================
# SETS AND 1RM
# =============================================================================

ONE_RM_REP_DIVISOR: Final[float] = 30.0  # 1RM = w × (1 + reps / 30)
WEIGHT_INCREMENT_KG: Final[float] = 2.5  # Smallest plate step for suggestions

# =============================================================================
# STREAKS
# =============================================================================

STREAK_MAX_GAP_DAYS: Final[int] = 1  # 0 or 1 day between entries keeps a streak alive
STREAK_AT_RISK_DAYS: Final[int] = 1  # Days since last workout that flag at-risk

# =============================================================================
# ACHIEVEMENTS
# =============================================================================

CONSISTENCY_MIN_WORKOUTS_PER_WEEK: Final[int] = 3
NEXT_ACHIEVEMENTS_COUNT: Final[int] = 3

# =============================================================================
# PROGRESSIVE OVERLOAD
# =============================================================================

OVERLOAD_MIN_SESSIONS: Final[int] = 2  # Sessions containing the exercise
OVERLOAD_SESSION_WINDOW: Final[int] = 3  # Most recent sessions inspected
OVERLOAD_MIN_SETS: Final[int] = 3  # Working sets across the session window
OVERLOAD_SET_WINDOW: Final[int] = 6  # Most recent sets averaged
OVERLOAD_REPS_TARGET_RATIO: Final[float] = 0.90  # avg reps vs max reps in window
OVERLOAD_MAX_RIR: Final[float] = 2.0  # avg RIR at or below this → high confidence
OVERLOAD_MAX_WEIGHT_CV: Final[float] = 0.10  # weight coefficient of variation

# Weight bands (kg): below LIGHT, below MEDIUM, otherwise heavy
OVERLOAD_LIGHT_BAND_KG: Final[float] = 60.0
OVERLOAD_MEDIUM_BAND_KG: Final[float] = 100.0

# Increase % per confidence tier: (light, medium, heavy)
OVERLOAD_HIGH_INCREASE_PCT: Final[tuple[float, float, float]] = (5.0, 3.5, 2.5)
OVERLOAD_MEDIUM_INCREASE_PCT: Final[tuple[float, float, float]] = (4.0, 3.0, 2.5)
OVERLOAD_LOW_INCREASE_PCT: Final[float] = 2.5

# =============================================================================
# PLATEAU DETECTION
# =============================================================================

PLATEAU_MIN_OCCURRENCES: Final[int] = 3  # Default stagnation window
PLATEAU_LOOKBACK_EXTRA: Final[int] = 2  # Occurrences scanned beyond the window
PLATEAU_TOLERANCE_KG: Final[float] = 1.0  # 1RM gain needed to count as progress
PLATEAU_MODERATE_WEEKS: Final[int] = 2
PLATEAU_SEVERE_WEEKS: Final[int] = 4
PLATEAU_MAX_SUGGESTIONS: Final[int] = 4
PLATEAU_SUMMARY_TOP: Final[int] = 3

# =============================================================================
# DELOAD (volume / RPE rule check)
# =============================================================================

MIN_WORKOUTS_FOR_DELOAD: Final[int] = 6
DELOAD_RECENT_DAYS: Final[int] = 7
DELOAD_BASELINE_WEEKS: Final[int] = 4  # Weeks before the recent window
DELOAD_EXCESSIVE_INCREASE_PCT: Final[float] = 50.0
DELOAD_RPE_INCREASE_PCT: Final[float] = 30.0
DELOAD_RPE_WITH_INCREASE: Final[float] = 8.5
DELOAD_RPE_ALONE: Final[float] = 9.0
DELOAD_FREQUENCY_SESSIONS: Final[int] = 6
DELOAD_FREQUENCY_INCREASE_PCT: Final[float] = 40.0

# "Currently deloading": recent week at or below this fraction of baseline
DELOADING_VOLUME_RATIO: Final[float] = 0.70
DELOADING_MIN_SESSIONS: Final[int] = 2

# High-volume weeks scale the protocol
HIGH_VOLUME_WEEK_RATIO: Final[float] = 1.10  # vs average weekly volume
HIGH_VOLUME_WEEK_MIN_WORKOUTS: Final[int] = 3
DELOAD_ANALYSIS_WEEKS: Final[int] = 6
PROTOCOL_HIGH_AFTER_WEEKS: Final[int] = 2
PROTOCOL_CRITICAL_AFTER_WEEKS: Final[int] = 4
PROTOCOL_EXTENDED_AFTER_WEEKS: Final[int] = 6  # Two-week deload from here

# =============================================================================
# DELOAD (multi-signal review)
# =============================================================================

VOLUME_DECLINE_STEP: Final[float] = 0.95  # Week counts as a decline below 95 %
PERFORMANCE_DECLINE_RATIO: Final[float] = 0.95
PERFORMANCE_WINDOW: Final[int] = 6  # Workouts per comparison block
OVERREACH_SPIKE_RATIO: Final[float] = 1.5
OVERREACH_DROP_RATIO: Final[float] = 0.8

# =============================================================================
# WEEKLY SUMMARY
# =============================================================================

WEEKLY_TREND_THRESHOLD_PCT: Final[float] = 5.0
WEEKLY_TOP_EXERCISES: Final[int] = 5

# =============================================================================
# STRENGTH TRENDS
# =============================================================================

TREND_WORKOUTS: Final[int] = 5  # Occurrences inspected by the trend
TREND_STABLE_BAND_KG: Final[float] = 1.0  # |average e1RM change| within this is stable
BIG_LIFTS: Final[tuple[str, ...]] = ("Bench Press", "Squat", "Deadlift", "Overhead Press")

# =============================================================================
# MUSCLE GROUP VOLUME
# =============================================================================

VOLUME_WINDOW_DAYS: Final[int] = 7
MUSCLE_GROUPS: Final[tuple[str, ...]] = (
    "chest", "back", "shoulders", "legs", "arms", "abs", "glutes", "calves",
)

# Catalog groups folded into the coarse groups above
MUSCLE_GROUP_ALIASES: Final[dict[str, str]] = {
    "lats": "back",
    "lower-back": "back",
    "traps": "back",
    "quads": "legs",
    "hamstrings": "legs",
    "biceps": "arms",
    "triceps": "arms",
    "forearms": "arms",
}

# Name keywords for exercises missing from the catalog; first hit wins
MUSCLE_KEYWORDS: Final[tuple[tuple[str, str], ...]] = (
    ("bench press", "chest"),
    ("squat", "legs"),
    ("deadlift", "back"),
    ("pull up", "back"),
    ("pullup", "back"),
    ("lat pulldown", "back"),
    ("overhead press", "shoulders"),
    ("shoulder press", "shoulders"),
    ("bicep curl", "arms"),
    ("tricep", "arms"),
    ("leg press", "legs"),
    ("leg curl", "legs"),
    ("leg extension", "legs"),
    ("calf raise", "calves"),
    ("plank", "abs"),
    ("crunch", "abs"),
    ("glute bridge", "glutes"),
)

ANTAGONIST_PAIRS: Final[tuple[tuple[str, str], ...]] = (
    ("chest", "back"),
    ("arms", "back"),
    ("abs", "back"),
)
IMBALANCE_RATIO: Final[float] = 2.0  # Flag when one side has 2x the other's volume

# =============================================================================
# CALORIES (MET formula)
# =============================================================================

MIN_BODYWEIGHT_KG: Final[float] = 30.0
MET_MIN: Final[float] = 3.0
MET_MAX: Final[float] = 8.0
DEFAULT_MET: Final[float] = 5.0

MET_VALUES: Final[dict[str, float]] = {
    "LIGHT": 3.5,  # light resistance training, stretching
    "MODERATE": 5.0,  # machine work
    "VIGOROUS": 6.0,  # free weights, circuits
    "INTENSE": 8.0,  # heavy compound lifts, HIIT
}

# =============================================================================
# SUBSTITUTION SCORING
# =============================================================================

SCORE_MUSCLE_OVERLAP: Final[float] = 40.0
SCORE_PRIMARY_MATCH: Final[float] = 20.0
SCORE_SECONDARY_OVERLAP: Final[float] = 5.0
SCORE_MECHANICS_MATCH: Final[float] = 15.0
SCORE_EQUIPMENT_MATCH: Final[float] = 10.0
SCORE_LEVEL_EXACT: Final[float] = 10.0
SCORE_LEVEL_ADJACENT: Final[float] = 5.0
SCORE_MECHANICS_FILTER_PENALTY: Final[float] = 10.0
SCORE_LOW_IMPACT_BONUS: Final[float] = 5.0
SCORE_HIGH_IMPACT_PENALTY: Final[float] = 10.0
MIN_SUBSTITUTE_SCORE: Final[float] = 20.0  # Results must score above this
EXCELLENT_MATCH_SCORE: Final[float] = 80.0
GOOD_MATCH_SCORE: Final[float] = 60.0

LOW_IMPACT_EQUIPMENT: Final[frozenset[str]] = frozenset(
    {"cable", "machine", "bodyweight", "dumbbell"}
)  # Lower-case; compared against lowered equipment names
HIGH_IMPACT_KEYWORDS: Final[tuple[str, ...]] = ("jump", "explosive", "plyometric", "olympic")

MUSCLE_GROUP_PRIORITY: Final[tuple[str, ...]] = (
    "chest", "back", "shoulders", "legs", "quads", "hamstrings", "glutes",
    "biceps", "triceps", "abs", "calves", "forearms",
)


@dataclass(frozen=True)
class PlateauThresholds:
    """Tunable plateau parameters."""

    min_occurrences: int = PLATEAU_MIN_OCCURRENCES
    tolerance_kg: float = PLATEAU_TOLERANCE_KG
    moderate_weeks: int = PLATEAU_MODERATE_WEEKS
    severe_weeks: int = PLATEAU_SEVERE_WEEKS


@dataclass(frozen=True)
class DeloadThresholds:
    """Tunable deload rule parameters."""

    min_workouts: int = MIN_WORKOUTS_FOR_DELOAD
    excessive_increase_pct: float = DELOAD_EXCESSIVE_INCREASE_PCT
    rpe_increase_pct: float = DELOAD_RPE_INCREASE_PCT
    rpe_with_increase: float = DELOAD_RPE_WITH_INCREASE
    rpe_alone: float = DELOAD_RPE_ALONE
    frequency_sessions: int = DELOAD_FREQUENCY_SESSIONS
    frequency_increase_pct: float = DELOAD_FREQUENCY_INCREASE_PCT
    deloading_volume_ratio: float = DELOADING_VOLUME_RATIO
