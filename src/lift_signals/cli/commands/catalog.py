"""Catalog commands: substitutes, equipment, exercise-info."""

from typing import Annotated, Optional

import typer

from ...core.models import SubstitutionFilters
from ...core.substitution import (
    available_equipment,
    exercise_details,
    find_injury_friendly_substitutes,
    find_substitutes,
)
from .. import views
from ..app import CatalogOption, JsonOption, app, load_catalog_or_exit


@app.command()
def substitutes(
    exercise: Annotated[str, typer.Argument(help="Exercise to replace")],
    catalog_path: CatalogOption = None,
    equipment: Annotated[
        Optional[list[str]],
        typer.Option("--equipment", "-e", help="Allowed equipment (repeatable)"),
    ] = None,
    max_difficulty: Annotated[
        Optional[str],
        typer.Option("--max-difficulty", help="Beginner, Intermediate or Advanced"),
    ] = None,
    mechanics: Annotated[
        Optional[str],
        typer.Option("--mechanics", help="Prefer Compound or Isolation"),
    ] = None,
    low_impact: Annotated[
        bool,
        typer.Option("--low-impact", help="Prefer joint-friendly options"),
    ] = False,
    injury: Annotated[
        bool,
        typer.Option("--injury", help="Low-impact, at most Intermediate (overrides other filters)"),
    ] = False,
    limit: Annotated[int, typer.Option("--limit", "-n", help="Maximum results")] = 10,
    json_out: JsonOption = False,
) -> None:
    """
    Find alternative exercises for one you cannot do.
    """
    catalog = load_catalog_or_exit(catalog_path)

    if exercise_details(exercise, catalog) is None:
        views.print_error(f"Exercise '{exercise}' is not in the catalog")
        raise typer.Exit(1)

    if injury:
        results = find_injury_friendly_substitutes(exercise, catalog, limit)
    else:
        try:
            filters = SubstitutionFilters(
                equipment=tuple(equipment or ()),
                max_difficulty=max_difficulty,  # type: ignore[arg-type]
                low_impact=low_impact,
                mechanics=mechanics,  # type: ignore[arg-type]
            )
        except ValueError as e:
            views.print_error(str(e))
            raise typer.Exit(1)
        results = find_substitutes(exercise, catalog, filters, limit)

    if json_out:
        views.print_json(results)
        return

    if not results:
        views.print_info("No good substitutes found with these filters.")
        return
    views.console.print(views.format_substitutes_table(exercise, results))


@app.command()
def equipment(
    catalog_path: CatalogOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    List the equipment types used in the catalog.
    """
    catalog = load_catalog_or_exit(catalog_path)
    names = available_equipment(catalog)

    if json_out:
        views.print_json(names)
        return

    for name in names:
        views.console.print(f"- {name}")


@app.command("exercise-info")
def exercise_info(
    exercise: Annotated[str, typer.Argument(help="Exercise name")],
    catalog_path: CatalogOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Show catalog details for one exercise.
    """
    catalog = load_catalog_or_exit(catalog_path)
    entry = exercise_details(exercise, catalog)

    if entry is None:
        views.print_error(f"Exercise '{exercise}' is not in the catalog")
        raise typer.Exit(1)

    if json_out:
        views.print_json(entry)
        return

    views.console.print(views.format_exercise_details(entry))
