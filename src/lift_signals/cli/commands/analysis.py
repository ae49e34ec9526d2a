"""Analysis commands: streak, progress, prs, strength, achievements, overload, plateaus, deload, weekly, volume."""

from typing import Annotated, Optional

import typer

from ...core.achievements import check_achievements, get_newly_unlocked, get_next_achievements
from ...core.adaptation import (
    check_deload,
    detect_all_plateaus,
    detect_deload_need,
    is_currently_deloading,
    plateau_summary,
)
from ...core.config_loader import load_thresholds
from ...core.history import exercise_occurrences, most_frequent_exercises
from ...core.overload import suggest_overload
from ...core.progression import (
    calculate_progression,
    exercise_trend,
    period_progress,
    personal_record,
    recent_personal_records,
    strength_score,
)
from ...core.streaks import calculate_streak, is_streak_at_risk
from ...core.volume import compare_weekly_volume, detect_muscle_imbalances, muscle_group_volume
from ...core.weekly import compare_weeks, weekly_summary
from ...io.serializers import ValidationError
from .. import views
from ..app import (
    CatalogOption,
    HistoryPathOption,
    JsonOption,
    TodayOption,
    app,
    get_store,
    load_catalog_or_exit,
    load_history_or_exit,
    parse_today_or_exit,
)


@app.command()
def streak(
    history_path: HistoryPathOption = None,
    today: TodayOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Show current and longest training streak.
    """
    history = load_history_or_exit(history_path)
    day = parse_today_or_exit(today)

    data = calculate_streak(history, day)
    at_risk = is_streak_at_risk(data, day)

    if json_out:
        views.print_json({
            "current_streak": data.current_streak,
            "longest_streak": data.longest_streak,
            "total_workouts": data.total_workouts,
            "last_workout_date": data.last_workout_date,
            "streak_dates": data.streak_dates,
            "at_risk": at_risk,
        })
        return

    views.console.print()
    views.console.print(views.format_streak_display(data, at_risk))
    views.console.print()


@app.command()
def progress(
    exercise: Annotated[str, typer.Argument(help="Exercise name (case-insensitive)")],
    history_path: HistoryPathOption = None,
    days: Annotated[
        int,
        typer.Option("--days", "-d", help="Period for the best-e1RM comparison"),
    ] = 30,
    today: TodayOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Compare the latest occurrence of an exercise with the one before it.

    Also shows the e1RM trend and the best e1RM of the last --days days
    against the best before them.
    """
    history = load_history_or_exit(history_path)
    day = parse_today_or_exit(today)

    if days < 1:
        views.print_error("--days must be 1 or more")
        raise typer.Exit(1)

    occurrences = exercise_occurrences(history, exercise)
    if not occurrences:
        views.print_error(f"No workouts found with exercise '{exercise}'")
        raise typer.Exit(1)

    current = occurrences[0][1]
    previous = occurrences[1][1] if len(occurrences) > 1 else None
    result = calculate_progression(current, previous)
    record = personal_record(exercise, history)
    trend = exercise_trend(exercise, history, today=day)
    period = period_progress(exercise, history, days, day)

    if json_out:
        views.print_json({
            "progression": result,
            "personal_record": record,
            "trend": trend,
            "period": period,
        })
        return

    views.console.print()
    views.console.print(views.format_progression_display(current.name, result))
    if record is not None:
        views.console.print(
            f"- All-time best: {record.weight_kg:g} kg × {record.reps} "
            f"(e1RM {record.estimated_1rm:.1f}) on {record.date[:10]}"
        )
    views.console.print(views.format_trend_display(trend, period, days))
    views.console.print()


@app.command()
def prs(
    history_path: HistoryPathOption = None,
    days: Annotated[
        int,
        typer.Option("--days", "-d", help="Look-back window in days"),
    ] = 30,
    today: TodayOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    List personal records set recently.
    """
    history = load_history_or_exit(history_path)
    day = parse_today_or_exit(today)

    records = recent_personal_records(history, days, day)

    if json_out:
        views.print_json(records)
        return

    if not records:
        views.print_info(f"No personal records in the last {days} days.")
        return
    views.console.print(views.format_pr_table(records, f"PRs in the last {days} days"))


@app.command()
def strength(
    history_path: HistoryPathOption = None,
    lift: Annotated[
        Optional[list[str]],
        typer.Option("--lift", "-l", help="Lift to include (repeatable; default: the big four)"),
    ] = None,
    today: TodayOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Sum of best e1RMs for the big lifts, compared with one month ago.
    """
    history = load_history_or_exit(history_path)
    day = parse_today_or_exit(today)

    score = strength_score(history, tuple(lift), day) if lift else strength_score(history, today=day)

    if json_out:
        views.print_json(score)
        return

    views.console.print()
    views.console.print(views.format_strength_score(score))
    views.console.print()


@app.command()
def achievements(
    history_path: HistoryPathOption = None,
    today: TodayOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Show progress for every achievement.
    """
    history = load_history_or_exit(history_path)
    day = parse_today_or_exit(today)

    store = get_store(history_path)
    try:
        unlocked = store.load_unlocked_achievements()
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    progress_list = check_achievements(history, unlocked, day)
    newly = get_newly_unlocked(progress_list, unlocked)
    upcoming = get_next_achievements(progress_list)

    if json_out:
        views.print_json({
            "progress": progress_list,
            "newly_unlocked": newly,
            "next": upcoming,
        })
        return

    views.console.print(views.format_achievements_table(progress_list))
    for achievement in newly:
        views.print_success(f"{achievement.icon} New: {achievement.name} - {achievement.description}")
    views.console.print(views.format_next_achievements(upcoming))


@app.command()
def overload(
    exercise: Annotated[
        Optional[str],
        typer.Argument(help="Exercise name; omit for your most frequent exercises"),
    ] = None,
    history_path: HistoryPathOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Suggest the next working weight (progressive overload).
    """
    history = load_history_or_exit(history_path)

    names = [exercise] if exercise else most_frequent_exercises(history)
    suggestions = [s for s in (suggest_overload(n, history) for n in names) if s is not None]

    if json_out:
        views.print_json(suggestions)
        return

    if not suggestions:
        views.print_info("No overload suggestions yet: log a few more sessions.")
        return
    views.console.print(views.format_overload_table(suggestions))


@app.command()
def plateaus(
    history_path: HistoryPathOption = None,
    today: TodayOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Detect exercises whose estimated 1RM has stalled.
    """
    history = load_history_or_exit(history_path)
    day = parse_today_or_exit(today)
    plateau_thresholds, _ = load_thresholds()

    detected = detect_all_plateaus(history, today=day, thresholds=plateau_thresholds)
    summary = plateau_summary(history, day, plateau_thresholds)

    if json_out:
        views.print_json({"summary": summary, "plateaus": detected})
        return

    views.console.print()
    views.print_plateaus(summary, detected)
    views.console.print()


@app.command()
def deload(
    history_path: HistoryPathOption = None,
    today: TodayOption = None,
    weeks: Annotated[
        int,
        typer.Option("--weeks", "-w", help="Weeks inspected by the fatigue review"),
    ] = 6,
    json_out: JsonOption = False,
) -> None:
    """
    Check whether a deload week is due.
    """
    history = load_history_or_exit(history_path)
    day = parse_today_or_exit(today)
    _, deload_thresholds = load_thresholds()

    check = check_deload(history, day, deload_thresholds)
    deloading = is_currently_deloading(history, day, deload_thresholds)
    review = detect_deload_need(history, weeks, day)

    if json_out:
        views.print_json({
            "check": check,
            "currently_deloading": deloading,
            "review": review,
        })
        return

    views.console.print()
    views.console.print(views.format_deload_check(check))
    if deloading:
        views.print_info("You appear to be in a deload week right now.")
    views.console.print()
    views.console.print(views.format_deload_recommendation(review))
    views.console.print()


@app.command()
def weekly(
    history_path: HistoryPathOption = None,
    weeks_ago: Annotated[
        int,
        typer.Option("--weeks-ago", "-w", help="0 = this week, 1 = last week, ..."),
    ] = 0,
    today: TodayOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Summarize one Sunday-to-Saturday week.
    """
    history = load_history_or_exit(history_path)
    day = parse_today_or_exit(today)

    if weeks_ago < 0:
        views.print_error("--weeks-ago must be 0 or more")
        raise typer.Exit(1)

    summary = weekly_summary(history, weeks_ago, day)
    comparison = compare_weeks(history, day) if weeks_ago == 0 else None

    if json_out:
        views.print_json({"summary": summary, "comparison": comparison})
        return

    views.console.print()
    views.console.print(views.format_weekly_display(summary))
    if comparison is not None:
        views.console.print(views.format_week_comparison(comparison))
    views.console.print()


@app.command()
def volume(
    history_path: HistoryPathOption = None,
    days: Annotated[
        int,
        typer.Option("--days", "-d", help="Window in days for the per-group totals"),
    ] = 7,
    catalog_path: CatalogOption = None,
    today: TodayOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Volume per muscle group, antagonist imbalances and the week-over-week change.
    """
    history = load_history_or_exit(history_path)
    day = parse_today_or_exit(today)
    catalog = load_catalog_or_exit(catalog_path)

    if days < 1:
        views.print_error("--days must be 1 or more")
        raise typer.Exit(1)

    volumes = muscle_group_volume(history, days, day, catalog)
    imbalances = detect_muscle_imbalances(volumes)
    comparison = compare_weekly_volume(history, day, catalog)

    if json_out:
        views.print_json({
            "groups": volumes,
            "imbalances": imbalances,
            "changes": comparison.changes,
        })
        return

    if not volumes:
        views.print_info(f"No volume logged in the last {days} days.")
        return
    views.console.print(views.format_muscle_volume_table(volumes, f"Volume by muscle group, last {days} days"))
    for imbalance in imbalances:
        views.print_warning(imbalance.suggestion)
    views.console.print(views.format_volume_changes(comparison.changes))
