"""
CLI view formatters using Rich for pretty console output.

Handles table formatting and display of analytics records.
"""

import dataclasses
import json
from datetime import date
from typing import Any

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ..core.metrics import workout_volume, working_sets
from ..core.models import (
    AchievementProgress,
    CatalogExercise,
    DeloadCheck,
    DeloadProtocol,
    DeloadRecommendation,
    MuscleGroupVolume,
    MuscleVolumeChange,
    OverloadSuggestion,
    PeriodProgress,
    PersonalRecord,
    PlateauDetection,
    PlateauSummary,
    ProgressionResult,
    StreakData,
    StrengthScore,
    SubstituteExercise,
    TrendData,
    WeeklyComparison,
    WeeklySummary,
    WorkoutLog,
)
from ..core.progression import format_progression_delta

console = Console()
err_console = Console(stderr=True)

_STATUS_STYLE = {
    "improved": "green",
    "maintained": "yellow",
    "decreased": "red",
    "excellent": "green",
    "good": "cyan",
    "attention": "yellow",
    "critical": "red",
    "low": "cyan",
    "medium": "yellow",
    "high": "red",
    "severe": "red",
    "moderate": "yellow",
    "mild": "cyan",
    "increasing": "green",
    "decreasing": "red",
    "stable": "yellow",
}


def _styled(value: str) -> str:
    style = _STATUS_STYLE.get(value)
    return f"[{style}]{value}[/{style}]" if style else value


def _json_default(obj: Any) -> Any:
    if isinstance(obj, date):
        return obj.isoformat()
    if isinstance(obj, (set, frozenset, tuple)):
        return list(obj)
    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")


def to_jsonable(obj: Any) -> Any:
    """Dataclasses (or lists/dicts of them) to plain JSON-compatible data."""
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return dataclasses.asdict(obj)
    if isinstance(obj, list):
        return [to_jsonable(x) for x in obj]
    if isinstance(obj, dict):
        return {str(k): to_jsonable(v) for k, v in obj.items()}
    return obj


def print_json(obj: Any) -> None:
    """Print machine-readable output (plain stdout, no Rich markup)."""
    print(json.dumps(to_jsonable(obj), indent=2, default=_json_default))


# =============================================================================
# History
# =============================================================================


def format_history_table(workouts: list[WorkoutLog]) -> Table:
    """
    Create a Rich table displaying workout history.

    Args:
        workouts: Workouts to display, oldest first

    Returns:
        Rich Table object
    """
    table = Table(title="Workout History")

    table.add_column("#", justify="right", style="dim", width=3)
    table.add_column("Date", style="cyan")
    table.add_column("Workout", style="magenta")
    table.add_column("Exercises", justify="right")
    table.add_column("Sets", justify="right")
    table.add_column("Volume(kg)", justify="right", style="bold")
    table.add_column("Min", justify="right")

    for i, workout in enumerate(workouts, 1):
        sets = sum(len(working_sets(ex)) for ex in workout.exercises)
        minutes = workout.duration_minutes
        table.add_row(
            str(i),
            workout.day.isoformat(),
            workout.name,
            str(len(workout.exercises)),
            str(sets),
            f"{workout_volume(workout):,.0f}",
            f"{minutes:.0f}" if minutes is not None else "-",
        )

    return table


def print_history(workouts: list[WorkoutLog]) -> None:
    if not workouts:
        console.print("[yellow]No workouts recorded yet.[/yellow]")
        return
    console.print(format_history_table(workouts))


# =============================================================================
# Streaks, progression, PRs
# =============================================================================


def format_streak_display(streak: StreakData, at_risk: bool) -> str:
    """Format streak data as a text block."""
    lines = [
        "Training streak",
        f"- Current streak: {streak.current_streak} day(s)",
        f"- Longest streak: {streak.longest_streak} day(s)",
        f"- Total workouts: {streak.total_workouts}",
    ]
    if streak.last_workout_date is not None:
        lines.append(f"- Last workout: {streak.last_workout_date.isoformat()}")
    if at_risk:
        lines.append("[yellow]- Streak at risk: train today to keep it alive[/yellow]")
    return "\n".join(lines)


def format_progression_display(exercise_name: str, result: ProgressionResult) -> str:
    """Format a progression comparison as a text block."""
    lines = [f"Progression: {exercise_name}"]
    if result.current_best is not None:
        cur = result.current_best
        lines.append(f"- Latest best set: {cur.weight_kg:g} kg × {cur.reps}  (e1RM {cur.estimated_1rm:.1f})")
    if result.previous_best is not None:
        prev = result.previous_best
        lines.append(f"- Previous best set: {prev.weight_kg:g} kg × {prev.reps}  (e1RM {prev.estimated_1rm:.1f})")
    change = format_progression_delta(result) if result.delta else "no change"
    lines.append(f"- Status: {_styled(result.status)} ({change})")
    return "\n".join(lines)


def format_trend_display(trend: TrendData, period: PeriodProgress, days: int) -> str:
    """Format the e1RM trend and the period comparison as a text block."""
    lines = [
        f"- Trend over {trend.workout_count} sessions: {_styled(trend.direction)} "
        f"({trend.average_change:+.1f} kg e1RM per session)"
    ]
    if period.current_1rm is None:
        lines.append(f"- Not logged in the last {days} days")
    elif period.previous_1rm is None:
        lines.append(f"- Best e1RM in the last {days} days: {period.current_1rm:.1f} (nothing earlier to compare)")
    else:
        lines.append(
            f"- Best e1RM in the last {days} days: {period.current_1rm:.1f} "
            f"vs {period.previous_1rm:.1f} before ({period.percentage_change:+.1f}%)"
        )
    return "\n".join(lines)


def format_strength_score(score: StrengthScore) -> str:
    lines = [f"Strength score: [bold]{score.total:.1f}[/bold] kg"]
    for lift in score.lifts:
        lines.append(f"- {escape(lift.name)}: {lift.estimated_1rm:.1f}")
    if score.previous_total is None:
        lines.append("- No history from a month ago to compare")
    else:
        lines.append(
            f"- One month ago: {score.previous_total:.1f} "
            f"({score.change:+.1f} kg, {score.percentage_change:+.1f}%)"
        )
    return "\n".join(lines)


def format_pr_table(records: list[PersonalRecord], title: str = "Personal Records") -> Table:
    table = Table(title=title)
    table.add_column("Date", style="cyan")
    table.add_column("Exercise", style="magenta")
    table.add_column("Set", justify="right")
    table.add_column("e1RM(kg)", justify="right", style="bold")
    table.add_column("Workout")

    for pr in records:
        table.add_row(
            pr.date[:10],
            pr.exercise_name,
            f"{pr.weight_kg:g} × {pr.reps}",
            f"{pr.estimated_1rm:.1f}",
            pr.workout_name,
        )
    return table


# =============================================================================
# Achievements
# =============================================================================


def format_achievements_table(progress: list[AchievementProgress]) -> Table:
    """
    Create a Rich table of achievement progress.

    Args:
        progress: One entry per catalog achievement

    Returns:
        Rich Table object
    """
    table = Table(title="Achievements")

    table.add_column("", width=2)
    table.add_column("Achievement", style="bold")
    table.add_column("Category", style="magenta")
    table.add_column("Progress", justify="right")
    table.add_column("%", justify="right")
    table.add_column("Unlocked", justify="center")

    for p in progress:
        table.add_row(
            p.achievement.icon,
            p.achievement.name,
            p.achievement.category,
            f"{p.current:,.0f} / {p.target:,.0f}",
            f"{p.percentage:.0f}",
            "[green]✓[/green]" if p.unlocked else "",
        )
    return table


def format_next_achievements(progress: list[AchievementProgress]) -> str:
    if not progress:
        return "All achievements unlocked!"
    lines = ["Almost there:"]
    for p in progress:
        lines.append(f"- {p.achievement.icon} {p.achievement.name}: {p.percentage:.0f}%")
    return "\n".join(lines)


# =============================================================================
# Overload, plateaus, deload
# =============================================================================


def format_overload_table(suggestions: list[OverloadSuggestion]) -> Table:
    table = Table(title="Progressive Overload")
    table.add_column("Exercise", style="magenta")
    table.add_column("Current(kg)", justify="right")
    table.add_column("Next(kg)", justify="right", style="bold green")
    table.add_column("+%", justify="right")
    table.add_column("Confidence", justify="center")
    table.add_column("Reason")

    for s in suggestions:
        table.add_row(
            s.exercise_name,
            f"{s.current_weight_kg:g}",
            f"{s.suggested_weight_kg:g}",
            f"{s.increase_percentage:g}",
            _styled(s.confidence),
            s.reason,
        )
    return table


def format_plateau_table(plateaus: list[PlateauDetection]) -> Table:
    table = Table(title="Plateaus")
    table.add_column("Exercise", style="magenta")
    table.add_column("Stalled sessions", justify="right")
    table.add_column("Weeks", justify="right")
    table.add_column("Severity", justify="center")
    table.add_column("e1RM(kg)", justify="right")
    table.add_column("Last workout", style="cyan")

    for p in plateaus:
        table.add_row(
            p.exercise_name,
            str(p.workouts_stagnant),
            str(p.weeks_stagnant),
            _styled(p.severity),
            f"{p.last_1rm:.1f}" if p.last_1rm is not None else "-",
            (p.last_workout_date or "-")[:10],
        )
    return table


def print_plateaus(summary: PlateauSummary, plateaus: list[PlateauDetection]) -> None:
    console.print(f"Overall: {_styled(summary.overall_status)}  "
                  f"(severe {summary.severe_count}, moderate {summary.moderate_count}, "
                  f"mild {summary.mild_count})")
    if not plateaus:
        console.print("[green]No plateaus detected.[/green]")
        return
    console.print(format_plateau_table(plateaus))
    for p in summary.top_plateaus:
        console.print(f"\n[bold]{p.exercise_name}[/bold]: {p.suggested_action}")
        for tip in p.rule_suggestions:
            console.print(f"  • {tip}")


def _format_protocol(protocol: DeloadProtocol) -> list[str]:
    lines = [
        f"- Protocol: -{protocol.volume_reduction_pct:g}% volume, "
        f"-{protocol.intensity_reduction_pct:g}% intensity, "
        f"{protocol.duration_weeks} week(s)",
    ]
    lines.extend(f"  • {tip}" for tip in protocol.suggestions)
    return lines


def format_deload_check(check: DeloadCheck) -> str:
    """Format the volume/RPE deload check as a text block."""
    lines = [
        "Deload check",
        f"- Last 7 days volume: {check.weekly_volume:,.0f} kg ({check.recent_sessions} sessions)",
        f"- Baseline weekly volume: {check.baseline_volume:,.0f} kg",
        f"- Change vs baseline: {check.volume_increase_pct:+.1f}%",
        f"- Average RPE: {check.recent_rpe:.1f}" if check.recent_rpe is not None else "- Average RPE: -",
        f"- Deload recommended: {'[red]yes[/red]' if check.should_deload else 'no'}",
        f"- Reason: {check.reason}",
    ]
    if check.protocol is not None:
        lines.extend(_format_protocol(check.protocol))
    return "\n".join(lines)


def format_deload_recommendation(rec: DeloadRecommendation) -> str:
    """Format the multi-signal deload review as a text block."""
    lines = [
        "Fatigue review",
        f"- Urgency: {_styled(rec.urgency)}",
        f"- High-volume weeks: {rec.weeks_of_high_volume}",
    ]
    for signal in rec.signals:
        lines.append(escape(f"- [{signal.severity}] {signal.description}"))
    lines.append(rec.recommendation)
    if rec.protocol is not None:
        lines.extend(_format_protocol(rec.protocol))
    return "\n".join(lines)


# =============================================================================
# Weekly summary
# =============================================================================


def format_weekly_display(summary: WeeklySummary) -> str:
    s = summary.stats
    lines = [
        f"Week {summary.week_start.isoformat()} → {summary.week_end.isoformat()}",
        f"- Workouts: {s.total_workouts}",
        f"- Exercises: {s.total_exercises}",
        f"- Working sets: {s.total_sets}  (reps {s.total_reps})",
        f"- Volume: {s.total_volume:,.0f} kg",
        f"- Calories: {s.total_calories:,.0f} kcal",
        f"- Avg duration: {s.avg_workout_minutes:.0f} min",
    ]
    for ex in summary.top_exercises:
        lines.append(f"  • {ex.name}: {ex.sets} sets, best {ex.best_weight_kg:g} kg")
    lines.extend(summary.insights)
    return "\n".join(lines)


def format_week_comparison(comparison: WeeklyComparison) -> str:
    return (
        f"Trend vs last week: {comparison.trend} "
        f"({comparison.volume_change_pct:+.1f}% volume, "
        f"{comparison.workout_change:+d} workouts)"
    )


def format_muscle_volume_table(volumes: list[MuscleGroupVolume], title: str) -> Table:
    table = Table(title=title)
    table.add_column("Group", style="magenta")
    table.add_column("Sets", justify="right")
    table.add_column("Reps", justify="right")
    table.add_column("Volume(kg)", justify="right", style="bold")
    table.add_column("Exercises")

    for v in volumes:
        table.add_row(
            v.group,
            str(v.total_sets),
            str(v.total_reps),
            f"{v.total_volume:.0f}",
            escape(", ".join(v.exercises)),
        )
    return table


def format_volume_changes(changes: list[MuscleVolumeChange]) -> str:
    """One line per muscle group: this week vs the 7 days before."""
    if not changes:
        return "No volume in the last two weeks."
    lines = ["Change vs previous 7 days:"]
    for c in changes:
        if c.previous_volume > 0:
            lines.append(f"- {c.group}: {c.current_volume:.0f} kg ({c.percentage_change:+.1f}%)")
        else:
            lines.append(f"- {c.group}: {c.current_volume:.0f} kg (new)")
    return "\n".join(lines)


# =============================================================================
# Catalog
# =============================================================================


def format_substitutes_table(exercise_name: str, substitutes: list[SubstituteExercise]) -> Table:
    table = Table(title=f"Substitutes for {exercise_name}")
    table.add_column("Score", justify="right", style="bold")
    table.add_column("Exercise", style="magenta")
    table.add_column("Equipment")
    table.add_column("Level")
    table.add_column("Mechanics")
    table.add_column("Why")

    for sub in substitutes:
        table.add_row(
            f"{sub.match_score:.0f}",
            sub.name,
            sub.equipment,
            sub.difficulty,
            sub.mechanics,
            sub.reason,
        )
    return table


def format_exercise_details(exercise: CatalogExercise) -> str:
    p = exercise.profile
    lines = [
        exercise.display_name,
        f"- Muscle groups: {', '.join(exercise.groups)}",
        f"- Target: {p.target_muscle_group}",
        f"- Equipment: {p.equipment or '-'}",
        f"- Mechanics: {p.mechanics or '-'}",
        f"- Level: {p.experience_level}",
    ]
    if p.force_type:
        lines.append(f"- Force: {p.force_type}")
    if p.secondary_muscles:
        lines.append(f"- Secondary: {', '.join(p.secondary_muscles)}")
    return "\n".join(lines)


# =============================================================================
# Messages
# =============================================================================


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[green]{message}[/green]")


def print_error(message: str) -> None:
    """Print an error message."""
    console.print(f"[red]Error: {message}[/red]")


def print_warning(message: str) -> None:
    """Print a warning message."""
    console.print(f"[yellow]Warning: {message}[/yellow]")


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[blue]{message}[/blue]")
