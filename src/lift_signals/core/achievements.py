"""
Achievement rules: a fixed catalog of thresholds over aggregate statistics.

The engine does not remember what was unlocked.  Callers pass the ids they
have already persisted and get back progress for every catalog entry.
"""

from datetime import date

from .config import CONSISTENCY_MIN_WORKOUTS_PER_WEEK, NEXT_ACHIEVEMENTS_COUNT
from .history import group_by_week, sort_oldest_first
from .metrics import best_estimated_1rm, total_volume
from .models import (
    Achievement,
    AchievementCategory,
    AchievementProgress,
    AchievementStats,
    WorkoutLog,
)
from .streaks import calculate_streak

ALL_ACHIEVEMENTS: tuple[Achievement, ...] = (
    # Milestones
    Achievement("first_workout", "First Step", "Complete your first workout", "milestone", "🎯", 1),
    Achievement("workout_10", "Picking Up Steam", "Complete 10 workouts", "milestone", "💪", 10),
    Achievement("workout_25", "Dedicated", "Complete 25 workouts", "milestone", "🔥", 25),
    Achievement("workout_50", "Half Century", "Complete 50 workouts", "milestone", "⭐", 50),
    Achievement("workout_100", "Hundred Strong", "Complete 100 workouts", "milestone", "👑", 100),
    # Streaks
    Achievement("streak_7", "Week Warrior", "7 day streak", "streak", "🔥", 7),
    Achievement("streak_30", "Month Master", "30 day streak", "streak", "🌟", 30),
    Achievement("streak_60", "Unbreakable", "60 day streak", "streak", "💎", 60),
    Achievement("streak_90", "Legendary Streak", "90 day streak", "streak", "🏆", 90),
    # Personal records
    Achievement("first_pr", "First PR", "Set your first personal record", "pr", "🎉", 1),
    Achievement("pr_5", "PR Collector", "Set 5 personal records", "pr", "📈", 5),
    Achievement("pr_10", "PR Machine", "Set 10 personal records", "pr", "⚡", 10),
    Achievement("pr_25", "PR Legend", "Set 25 personal records", "pr", "🌠", 25),
    # Volume
    Achievement("volume_10k", "10K Club", "Lift 10,000 kg total volume", "volume", "💪", 10_000),
    Achievement("volume_25k", "25K Beast", "Lift 25,000 kg total volume", "volume", "🦍", 25_000),
    Achievement("volume_50k", "50K Titan", "Lift 50,000 kg total volume", "volume", "🏔️", 50_000),
    Achievement("volume_100k", "100K Hercules", "Lift 100,000 kg total volume", "volume", "⚡", 100_000),
    # Consistency
    Achievement("consistency_2week", "Consistent Starter", "Train 3x per week for 2 weeks", "consistency", "📅", 2),
    Achievement("consistency_4week", "Routine Master", "Train 3x per week for 4 weeks", "consistency", "🎯", 4),
    Achievement("consistency_8week", "Discipline King", "Train 3x per week for 8 weeks", "consistency", "👑", 8),
)


def count_personal_records(history: list[WorkoutLog]) -> int:
    """
    Count PRs over the whole history.

    Sessions are scanned oldest first with a running best estimated 1RM per
    exercise name (case-insensitive).  Each time an occurrence beats the
    running best the count goes up, so the first logged occurrence of an
    exercise with any load counts as a PR.
    """
    running: dict[str, float] = {}
    total = 0
    for workout in sort_oldest_first(history):
        for exercise in workout.exercises:
            est = best_estimated_1rm(exercise)
            if est is None:
                continue
            key = exercise.name.lower()
            if est > running.get(key, 0.0):
                running[key] = est
                total += 1
    return total


def calculate_consistency_weeks(
    history: list[WorkoutLog],
    min_workouts: int = CONSISTENCY_MIN_WORKOUTS_PER_WEEK,
) -> int:
    """
    Consecutive most-recent logged weeks with at least ``min_workouts`` sessions.

    Weeks are Sunday-aligned buckets of logged workouts, newest first.  The
    scan stops at the first week below the minimum.
    """
    weeks = 0
    for workouts in group_by_week(history).values():
        if len(workouts) < min_workouts:
            break
        weeks += 1
    return weeks


def compute_achievement_stats(
    history: list[WorkoutLog],
    today: date | None = None,
) -> AchievementStats:
    """Compute every aggregate statistic once per call."""
    return AchievementStats(
        workout_count=len(history),
        current_streak=calculate_streak(history, today).current_streak,
        pr_count=count_personal_records(history),
        total_volume=total_volume(history),
        consistency_weeks=calculate_consistency_weeks(history),
    )


def stat_for_category(stats: AchievementStats, category: AchievementCategory) -> float:
    """Select the statistic an achievement category is measured against."""
    by_category: dict[AchievementCategory, float] = {
        "milestone": stats.workout_count,
        "streak": stats.current_streak,
        "pr": stats.pr_count,
        "volume": stats.total_volume,
        "consistency": stats.consistency_weeks,
    }
    if category not in by_category:
        raise ValueError(f"Unhandled achievement category: {category}")
    return by_category[category]


def check_achievements(
    history: list[WorkoutLog],
    unlocked_ids: set[str] | frozenset[str] | list[str],
    today: date | None = None,
    catalog: tuple[Achievement, ...] = ALL_ACHIEVEMENTS,
) -> list[AchievementProgress]:
    """
    Evaluate every catalog entry against the history.

    Args:
        history: Workout history in any order
        unlocked_ids: Achievement ids already unlocked (trusted as-is)
        today: Reference day for the streak statistic
        catalog: Achievement definitions, in display order

    Returns:
        One AchievementProgress per catalog entry, in catalog order
    """
    stats = compute_achievement_stats(history, today)
    unlocked = set(unlocked_ids)

    progress: list[AchievementProgress] = []
    for achievement in catalog:
        current = stat_for_category(stats, achievement.category)
        progress.append(
            AchievementProgress(
                achievement=achievement,
                current=current,
                target=achievement.threshold,
                percentage=min(100.0, current / achievement.threshold * 100),
                unlocked=achievement.id in unlocked,
            )
        )
    return progress


def get_newly_unlocked(
    progress: list[AchievementProgress],
    previously_unlocked: set[str] | frozenset[str] | list[str],
) -> list[Achievement]:
    """Achievements that reached their target but are not yet recorded."""
    known = set(previously_unlocked)
    return [
        p.achievement
        for p in progress
        if p.current >= p.target and p.achievement.id not in known
    ]


def get_next_achievements(
    progress: list[AchievementProgress],
    count: int = NEXT_ACHIEVEMENTS_COUNT,
) -> list[AchievementProgress]:
    """Locked achievements closest to completion ("almost there")."""
    locked = [p for p in progress if not p.unlocked]
    # sorted() is stable: equal percentages keep catalog order
    return sorted(locked, key=lambda p: -p.percentage)[:count]
