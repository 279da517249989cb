"""CLI startup entrypoint for Colony Planner."""

from __future__ import annotations

from typing import List

import typer
from rich import print

from colony_planner.cli import CliPlanHandler, parse_placement, render_map
from colony_planner.config import settings
from colony_planner.errors import PlannerError
from colony_planner.memory import JsonPlanStore
from colony_planner.telemetry.logging import configure_logging

app = typer.Typer(help="Colony layout planner")


def _build_handler(store_path: str | None = None) -> CliPlanHandler:
    configure_logging(settings.log_level)
    return CliPlanHandler(JsonPlanStore(store_path or settings.plan_store_path))


def _parse_placements(raw: list[str], area: str) -> list:
    try:
        return [parse_placement(text, area) for text in raw]
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc


@app.command()
def start() -> None:
    """Show runtime configuration."""
    print(
        {
            "app_name": settings.app_name,
            "grid_bound": settings.grid_bound,
            "site_check_frequency": settings.site_check_frequency,
            "max_sites_per_colony": settings.max_sites_per_colony,
            "plan_store_path": settings.plan_store_path,
        }
    )


@app.command()
def preview(
    place: List[str] = typer.Option(..., "--place", help="component=x,y[@rotation], repeatable"),
    tier: int = typer.Option(8, min=1, max=8, help="Capability tier to render"),
    area: str = typer.Option("W1N1", help="Area identifier"),
) -> None:
    """Print the merged structure map for a set of placements."""
    handler = _build_handler()
    structure_map = handler.preview(_parse_placements(place, area), tier)
    print({"tier": tier, "map": render_map(structure_map)})


@app.command()
def finalize(
    colony: str = typer.Option(..., help="Colony / area identifier"),
    place: List[str] = typer.Option(..., "--place", help="component=x,y[@rotation], repeatable"),
    tier: int = typer.Option(1, min=1, max=8, help="Current colony tier"),
    store: str = typer.Option(None, help="Plan store path (defaults to COLONY_PLANNER_PLAN_STORE_PATH)"),
) -> None:
    """Validate placements and persist the finalized plan."""
    handler = _build_handler(store)
    try:
        memory = handler.finalize(colony, _parse_placements(place, colony), tier=tier)
    except PlannerError as exc:
        print({"finalized": False, "error": str(exc)})
        raise typer.Exit(code=1)
    print({"finalized": True, "record": memory.to_dict()})


@app.command()
def show(
    colony: str = typer.Option(..., help="Colony / area identifier"),
    tier: int = typer.Option(8, min=1, max=8, help="Tier to recall the map for"),
    store: str = typer.Option(None, help="Plan store path (defaults to COLONY_PLANNER_PLAN_STORE_PATH)"),
) -> None:
    """Print the stored record and the recalled map for a tier."""
    handler = _build_handler(store)
    memory = handler.load(colony)
    if memory is None:
        print({"colony": colony, "record": None})
        raise typer.Exit(code=1)
    print({"colony": colony, "record": memory.to_dict(), "map": render_map(handler.recall(colony, tier))})


if __name__ == "__main__":
    app()
