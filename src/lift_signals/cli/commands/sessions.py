"""Session commands: init, history, calories."""

from typing import Annotated

import typer

from ...core.calories import calculate_burned_calories, format_calorie_range
from ...core.config import DEFAULT_MET, MET_VALUES
from ...io.serializers import workout_log_to_dict
from .. import views
from ..app import HistoryPathOption, JsonOption, app, get_store, load_history_or_exit


@app.command()
def init(
    history_path: HistoryPathOption = None,
) -> None:
    """
    Create an empty history file (existing files are left untouched).
    """
    store = get_store(history_path)
    existed = store.exists()
    store.init()

    if existed:
        views.print_info(f"History file already exists: {store.history_path}")
    else:
        views.print_success(f"Created history file: {store.history_path}")


@app.command()
def history(
    history_path: HistoryPathOption = None,
    limit: Annotated[
        int,
        typer.Option("--limit", "-n", help="Show only the most recent N workouts (0 = all)"),
    ] = 0,
    json_out: JsonOption = False,
) -> None:
    """
    Display workout history.

    With --json, records are printed in normalized snake_case form.
    """
    workouts = load_history_or_exit(history_path)
    if limit > 0:
        workouts = workouts[-limit:]

    if json_out:
        views.print_json([workout_log_to_dict(w) for w in workouts])
        return

    views.print_history(workouts)


@app.command()
def calories(
    weight_kg: Annotated[float, typer.Option("--weight-kg", help="Body weight in kg")],
    minutes: Annotated[float, typer.Option("--minutes", "-m", help="Session length in minutes")],
    met: Annotated[
        float,
        typer.Option("--met", help=f"MET value 3-8; presets: {', '.join(f'{k}={v:g}' for k, v in MET_VALUES.items())}"),
    ] = DEFAULT_MET,
    json_out: JsonOption = False,
) -> None:
    """
    Estimate calories burned in a strength session (MET formula).
    """
    try:
        result = calculate_burned_calories(weight_kg, minutes, met)
    except ValueError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    if json_out:
        views.print_json(result)
        return

    views.console.print(f"[bold]{result.kcal} kcal[/bold]  (range {format_calorie_range(result.kcal)})")
    views.console.print(result.explanation)
    views.console.print(f"[dim]{result.disclaimer}[/dim]")
