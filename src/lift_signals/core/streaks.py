"""
Consecutive-day training streaks.

A streak continues while each earlier training day is at most one day
before the current anchor.  Multiple sessions on one day count once.
"""

from datetime import date

from .config import STREAK_AT_RISK_DAYS, STREAK_MAX_GAP_DAYS
from .history import unique_workout_dates
from .models import StreakData, WorkoutLog


def _current_streak(workout_dates: list[date], today: date) -> list[date]:
    """Dates (newest first) forming the streak that reaches ``today``."""
    streak: list[date] = []
    anchor = today
    for day in workout_dates:
        gap = (anchor - day).days
        if 0 <= gap <= STREAK_MAX_GAP_DAYS:
            streak.append(day)
            anchor = day
        elif gap < 0:
            # Future-dated entry; it neither extends nor breaks the chain
            continue
        else:
            break
    return streak


def _longest_streak(workout_dates: list[date]) -> int:
    """Longest run of adjacent training days anywhere in history."""
    if not workout_dates:
        return 0
    longest = run = 1
    for newer, older in zip(workout_dates, workout_dates[1:]):
        if (newer - older).days <= STREAK_MAX_GAP_DAYS:
            run += 1
        else:
            longest = max(longest, run)
            run = 1
    return max(longest, run)


def calculate_streak(history: list[WorkoutLog], today: date | None = None) -> StreakData:
    """
    Compute current and longest streak.

    Args:
        history: Workout history in any order
        today: Reference day; defaults to the local calendar day

    Returns:
        StreakData.  total_workouts counts every session, including
        same-day duplicates.
    """
    if today is None:
        today = date.today()

    workout_dates = unique_workout_dates(history)
    streak_dates = _current_streak(workout_dates, today)
    # Entries after ``today`` cannot be part of a streak counted from today
    past_dates = [d for d in workout_dates if d <= today]

    return StreakData(
        current_streak=len(streak_dates),
        longest_streak=max(_longest_streak(past_dates), len(streak_dates)),
        total_workouts=len(history),
        workout_dates=workout_dates,
        streak_dates=streak_dates,
        last_workout_date=workout_dates[0] if workout_dates else None,
    )


def is_streak_at_risk(streak: StreakData, today: date | None = None) -> bool:
    """
    True when today is the last day the current streak can be saved.

    That is: the streak is alive and exactly one day has passed since its
    newest training day.  Future-dated entries are not part of the streak,
    so they do not reset the clock.
    """
    if streak.current_streak == 0:
        return False
    last_day = streak.streak_dates[0] if streak.streak_dates else streak.last_workout_date
    if last_day is None:
        return False
    if today is None:
        today = date.today()
    return (today - last_day).days == STREAK_AT_RISK_DAYS
