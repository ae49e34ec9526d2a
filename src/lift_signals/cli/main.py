"""
CLI entry point using Typer.

Provides commands for training analytics:
- init: Create an empty history file
- history: Display workout history
- streak / prs / progress: Consistency, personal records and e1RM trends
- strength: Big-lift strength score
- achievements: Achievement progress
- overload: Next working-weight suggestions
- plateaus / deload: Stagnation and fatigue checks
- weekly: Weekly summary
- volume: Volume per muscle group and imbalances
- substitutes / equipment / exercise-info: Exercise catalog lookups
- calories: MET-based calorie estimate
"""

from typing import Annotated

import typer

from . import views
from .app import app, configure_logging
from .commands import analysis, catalog, sessions  # noqa: F401  (registers commands)


@app.callback()
def main_callback(
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Show debug logging"),
    ] = False,
) -> None:
    """
    Training analytics for strength workouts. Reads a JSONL workout export.
    """
    configure_logging(verbose)


def main() -> None:
    """Console-script entry point."""
    try:
        app()
    except KeyboardInterrupt:
        views.print_info("Cancelled.")
        raise SystemExit(130)


if __name__ == "__main__":
    main()
