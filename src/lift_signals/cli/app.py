"""Shared Typer app object, shared option types, and store utilities."""

import logging
from datetime import date
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.logging import RichHandler

from ..core.catalog import ExerciseCatalog, load_catalog
from ..core.models import WorkoutLog, parse_day
from ..io.history_store import HistoryStore, get_default_history_path
from ..io.serializers import ValidationError
from . import views

# Shared option types used across commands
HistoryPathOption = Annotated[
    Optional[Path],
    typer.Option("--history-path", "-p", help="Path to history JSONL file"),
]
JsonOption = Annotated[
    bool,
    typer.Option("--json", "-j", help="Output as JSON for machine processing"),
]
TodayOption = Annotated[
    Optional[str],
    typer.Option("--today", "-t", help="Reference date YYYY-MM-DD (default: today)"),
]
CatalogOption = Annotated[
    Optional[Path],
    typer.Option("--catalog", "-c", help="Exercise catalog YAML/JSON (default: bundled)"),
]

app = typer.Typer(
    name="lift-signals",
    help="Training analytics for strength workouts: streaks, PRs, plateaus, deloads and more.",
    no_args_is_help=True,
)


def configure_logging(verbose: bool = False) -> None:
    """Route library logging through Rich on stderr."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=views.err_console, show_path=False)],
        force=True,
    )


def get_store(history_path: Path | None) -> HistoryStore:
    """Get history store from path or default location."""
    if history_path is None:
        history_path = get_default_history_path()
    return HistoryStore(history_path)


def load_history_or_exit(history_path: Path | None) -> list[WorkoutLog]:
    """Load the history, printing an error and exiting with 1 on failure."""
    store = get_store(history_path)

    if not store.exists():
        views.print_error(f"History file not found: {store.history_path}")
        views.print_info("Run 'init' first or pass --history-path.")
        raise typer.Exit(1)

    try:
        return store.load_history()
    except (FileNotFoundError, ValidationError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)


def parse_today_or_exit(today: str | None) -> date:
    """Resolve the --today option (default: the local calendar day)."""
    if today is None:
        return date.today()
    try:
        return parse_day(today)
    except ValueError as e:
        views.print_error(str(e))
        raise typer.Exit(1)


def load_catalog_or_exit(catalog_path: Path | None) -> ExerciseCatalog:
    """Load the exercise catalog, printing an error and exiting with 1 on failure."""
    try:
        return load_catalog(catalog_path)
    except (FileNotFoundError, ValueError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)
