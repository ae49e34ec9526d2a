"""
Data models for lift-signals.

Input records (WorkoutLog, WorkoutExercise, WorkoutSet) mirror what the
session/persistence layer hands us.  Everything else in this module is a
derived record: computed by the engine, never persisted by it.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Literal

ProgressionStatus = Literal["improved", "maintained", "decreased"]
ProgressionMetric = Literal["weight", "reps", "volume"]
AchievementCategory = Literal["milestone", "streak", "pr", "volume", "consistency"]
Confidence = Literal["low", "medium", "high"]
PlateauSeverity = Literal["mild", "moderate", "severe"]
PlateauStatus = Literal["excellent", "good", "attention", "critical"]
DeloadUrgency = Literal["low", "medium", "high", "critical"]
DeloadSignalType = Literal[
    "volume_decline",
    "performance_decline",
    "accumulated_fatigue",
    "multiple_plateaus",
    "overreaching",
]
SignalSeverity = Literal["low", "medium", "high"]
WeeklyTrend = Literal["improving", "declining", "stable"]
TrendDirection = Literal["increasing", "decreasing", "stable"]
Mechanics = Literal["Compound", "Isolation"]
ExperienceLevel = Literal["Beginner", "Intermediate", "Advanced"]

ACHIEVEMENT_CATEGORIES: tuple[AchievementCategory, ...] = (
    "milestone", "streak", "pr", "volume", "consistency",
)
EXPERIENCE_LEVELS: tuple[ExperienceLevel, ...] = ("Beginner", "Intermediate", "Advanced")


def parse_day(value: str) -> date:
    """
    Parse the calendar day out of an ISO date or date-time string.

    "2026-03-01" and "2026-03-01T18:30:00Z" both give date(2026, 3, 1).

    Raises:
        ValueError: If the leading YYYY-MM-DD part is not a valid date
    """
    head = value.strip()[:10]
    try:
        return datetime.strptime(head, "%Y-%m-%d").date()
    except ValueError as e:
        raise ValueError(f"Invalid date: {value!r}. Expected YYYY-MM-DD") from e


@dataclass
class WorkoutSet:
    """
    A single set attempt.

    Only completed, non-warm-up sets ("working sets") count toward volume,
    1RM and progression.
    """

    weight_kg: float
    reps: int
    completed: bool = True
    is_warmup: bool = False
    rir: int | None = None  # reps in reserve, 0 = failure
    rpe: float | None = None

    def __post_init__(self) -> None:
        """Validate set data."""
        if self.weight_kg < 0:
            raise ValueError("weight_kg must be non-negative")
        if self.reps < 0:
            raise ValueError("reps must be non-negative")
        if self.rir is not None and not 0 <= self.rir <= 10:
            raise ValueError(f"rir must be between 0 and 10, got {self.rir}")
        if self.rpe is not None and not 1 <= self.rpe <= 10:
            raise ValueError(f"rpe must be between 1 and 10, got {self.rpe}")

    @property
    def is_working(self) -> bool:
        return self.completed and not self.is_warmup

    @property
    def volume(self) -> float:
        return self.weight_kg * self.reps


@dataclass
class WorkoutExercise:
    """One exercise performed within a session."""

    name: str
    sets: list[WorkoutSet] = field(default_factory=list)
    exercise_id: str = ""

    def __post_init__(self) -> None:
        if not self.name.strip():
            raise ValueError("exercise name must be non-empty")

    def matches(self, name: str) -> bool:
        """Case-insensitive exact name match."""
        return self.name.lower() == name.lower()


@dataclass
class WorkoutLog:
    """
    One training session.

    ``date`` may be a plain ISO date or an ISO date-time; only the date part
    is used for calendar grouping.  start/end times are epoch milliseconds.
    """

    id: str
    name: str
    date: str
    exercises: list[WorkoutExercise] = field(default_factory=list)
    start_time: int | None = None
    end_time: int | None = None
    total_calories: float | None = None

    def __post_init__(self) -> None:
        """Validate workout data."""
        parse_day(self.date)
        if self.total_calories is not None and self.total_calories < 0:
            raise ValueError("total_calories must be non-negative")
        if (
            self.start_time is not None
            and self.end_time is not None
            and self.end_time < self.start_time
        ):
            raise ValueError("end_time must not be before start_time")

    @property
    def day(self) -> date:
        """Calendar day of the session."""
        return parse_day(self.date)

    @property
    def duration_minutes(self) -> float | None:
        if self.start_time is None or self.end_time is None:
            return None
        return (self.end_time - self.start_time) / 60_000

    def find_exercise(self, name: str) -> WorkoutExercise | None:
        """Return the first exercise matching ``name`` (case-insensitive)."""
        for ex in self.exercises:
            if ex.matches(name):
                return ex
        return None


# =============================================================================
# Derived records
# =============================================================================


@dataclass(frozen=True)
class BestSet:
    """Snapshot of the best working set of one exercise occurrence."""

    weight_kg: float
    reps: int
    volume: float
    estimated_1rm: float


@dataclass
class StreakData:
    current_streak: int
    longest_streak: int
    total_workouts: int
    workout_dates: list[date]  # unique, newest first
    streak_dates: list[date]  # dates composing the current streak
    last_workout_date: date | None


@dataclass
class ProgressionResult:
    status: ProgressionStatus
    delta: float
    metric: ProgressionMetric
    previous_best: BestSet | None = None
    current_best: BestSet | None = None


@dataclass
class PersonalRecord:
    exercise_name: str
    estimated_1rm: float
    date: str
    weight_kg: float
    reps: int
    workout_name: str
    days_ago: int | None = None


@dataclass
class TrendData:
    direction: TrendDirection
    average_change: float  # kg of e1RM per session, newest minus older
    workout_count: int


@dataclass
class PeriodProgress:
    current_1rm: float | None  # best e1RM inside the period
    previous_1rm: float | None  # best e1RM before the period
    change: float
    percentage_change: float
    workout_count: int
    trend: TrendDirection


@dataclass
class LiftScore:
    name: str
    estimated_1rm: float


@dataclass
class StrengthScore:
    """Sum of the best e1RMs of the big lifts, now and one month ago."""

    total: float
    lifts: list[LiftScore]
    previous_total: float | None
    change: float
    percentage_change: float


@dataclass(frozen=True)
class Achievement:
    id: str
    name: str
    description: str
    category: AchievementCategory
    icon: str
    threshold: float

    def __post_init__(self) -> None:
        if self.category not in ACHIEVEMENT_CATEGORIES:
            raise ValueError(f"Invalid achievement category: {self.category}")
        if self.threshold <= 0:
            raise ValueError("threshold must be positive")


@dataclass(frozen=True)
class AchievementStats:
    """Aggregate statistics every achievement rule is evaluated against."""

    workout_count: int
    current_streak: int
    pr_count: int
    total_volume: float
    consistency_weeks: int


@dataclass
class AchievementProgress:
    achievement: Achievement
    current: float
    target: float
    percentage: float  # 0-100
    unlocked: bool


@dataclass
class OverloadSuggestion:
    exercise_name: str
    current_weight_kg: float  # average working weight, 0.1 kg precision
    suggested_weight_kg: float  # multiple of 2.5 kg
    increase_percentage: float
    reason: str
    confidence: Confidence


@dataclass
class PlateauDetection:
    exercise_name: str
    is_plateaued: bool
    workouts_stagnant: int
    last_1rm: float | None
    weeks_stagnant: int
    severity: PlateauSeverity
    last_workout_date: str | None
    suggested_action: str
    rule_suggestions: list[str] = field(default_factory=list)


@dataclass
class PlateauSummary:
    total_plateaus: int
    severe_count: int
    moderate_count: int
    mild_count: int
    top_plateaus: list[PlateauDetection]
    overall_status: PlateauStatus


@dataclass
class DeloadProtocol:
    volume_reduction_pct: float
    intensity_reduction_pct: float
    duration_weeks: int
    suggestions: list[str] = field(default_factory=list)


@dataclass
class DeloadCheck:
    """Result of the volume/RPE deload rule check."""

    should_deload: bool
    reason: str
    weekly_volume: float
    baseline_volume: float
    volume_increase_pct: float
    recent_rpe: float | None
    recent_sessions: int
    consecutive_high_volume_weeks: int = 0
    protocol: DeloadProtocol | None = None


@dataclass
class DeloadSignal:
    type: DeloadSignalType
    severity: SignalSeverity
    description: str


@dataclass
class DeloadRecommendation:
    should_deload: bool
    urgency: DeloadUrgency
    weeks_of_high_volume: int
    signals: list[DeloadSignal]
    recommendation: str
    protocol: DeloadProtocol | None = None


@dataclass
class WeeklyStats:
    total_workouts: int = 0
    total_exercises: int = 0
    total_sets: int = 0
    total_reps: int = 0
    total_volume: float = 0.0
    total_calories: float = 0.0
    avg_workout_minutes: float = 0.0


@dataclass
class ExerciseWeekStats:
    name: str
    sets: int
    best_weight_kg: float


@dataclass
class WeeklySummary:
    week_start: date
    week_end: date
    stats: WeeklyStats
    top_exercises: list[ExerciseWeekStats] = field(default_factory=list)
    insights: list[str] = field(default_factory=list)


@dataclass
class WeeklyComparison:
    current_week: WeeklySummary
    last_week: WeeklySummary
    trend: WeeklyTrend
    volume_change_pct: float
    workout_change: int


@dataclass
class MuscleGroupVolume:
    group: str
    total_sets: int = 0
    total_reps: int = 0
    total_volume: float = 0.0
    exercises: list[str] = field(default_factory=list)


@dataclass
class MuscleImbalance:
    overtrained_group: str
    undertrained_group: str
    ratio: float  # always >= 1
    suggestion: str


@dataclass
class MuscleVolumeChange:
    group: str
    current_volume: float
    previous_volume: float
    change: float
    percentage_change: float  # 0 when the group was not trained before


@dataclass
class VolumeComparison:
    current_week: list[MuscleGroupVolume]
    previous_week: list[MuscleGroupVolume]
    changes: list[MuscleVolumeChange]


@dataclass
class CalorieResult:
    kcal: int
    explanation: str
    disclaimer: str


# =============================================================================
# Exercise catalog
# =============================================================================


@dataclass(frozen=True)
class ExerciseProfile:
    target_muscle_group: str
    equipment: str
    mechanics: str  # "Compound" | "Isolation" (free text in third-party exports)
    force_type: str = ""
    experience_level: str = "Intermediate"
    secondary_muscles: tuple[str, ...] = ()


@dataclass(frozen=True)
class CatalogExercise:
    """One read-only reference entry of the exercise catalog."""

    name: str
    group: str  # primary muscle group
    groups: tuple[str, ...]  # full muscle-group list
    profile: ExerciseProfile

    @property
    def display_name(self) -> str:
        from .catalog import strip_guide_suffix

        return strip_guide_suffix(self.name)


@dataclass(frozen=True)
class SubstitutionFilters:
    """
    Optional filters for the substitution matcher.

    ``equipment`` and ``max_difficulty`` exclude candidates outright;
    ``mechanics`` and ``low_impact`` only shift the score.
    """

    equipment: tuple[str, ...] = ()
    max_difficulty: ExperienceLevel | None = None
    low_impact: bool = False
    mechanics: Mechanics | None = None

    def __post_init__(self) -> None:
        if self.max_difficulty is not None and self.max_difficulty not in EXPERIENCE_LEVELS:
            raise ValueError(f"Invalid max_difficulty: {self.max_difficulty}")
        if self.mechanics is not None and self.mechanics not in ("Compound", "Isolation"):
            raise ValueError(f"Invalid mechanics: {self.mechanics}")


@dataclass
class SubstituteExercise:
    name: str
    match_score: float  # 0-100
    muscle_groups: list[str]
    equipment: str
    difficulty: str
    mechanics: str
    reason: str
