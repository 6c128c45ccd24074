"""Mini README: Command line entry point for the flight planner.

Commands:
    * serve - start the FastAPI planning service under uvicorn.
    * export-route - convert a saved plan file into a FlightGear
      route-manager file.

Options fall back to ``FLIGHTPLANNER_*`` environment settings when omitted.
"""

from __future__ import annotations

from pathlib import Path

import typer
import uvicorn

from flightplanner.configuration import get_settings
from flightplanner.exchange import PlanFormatError, export_route_manager, read_plan
from flightplanner.logging_utils import configure_root_logger, level_for_environment
from flightplanner.performance import HANGAR
from flightplanner.plan import PlanSnapshot
from flightplanner.reference import InMemoryReferenceDatabase
from flightplanner.utils import format_distance, format_hours

cli = typer.Typer(help="Flight planner service and plan conversion tools.")


@cli.command()
def serve(
    host: str = typer.Option(None, help="Host interface to bind."),
    port: int = typer.Option(None, help="Port to listen on."),
    production: bool = typer.Option(
        False, help="Use production server settings (disable auto-reload)."
    ),
) -> None:
    """Start the planning service using uvicorn."""

    settings = get_settings()
    effective_host = host or settings.interface_host
    effective_port = port or settings.interface_port
    configure_root_logger(level_for_environment(settings.environment))

    # 0.0.0.0 binds every interface but is not a browsable address.
    browser_host = "127.0.0.1" if effective_host in {"0.0.0.0", "::"} else effective_host
    typer.echo(
        f"Starting flight planner on {effective_host}:{effective_port}.\n"
        f"API docs at http://{browser_host}:{effective_port}/docs"
    )
    uvicorn.run(
        "flightplanner.interface.web_app:create_application",
        host=effective_host,
        port=effective_port,
        factory=True,
        reload=not production,
    )


@cli.command("export-route")
def export_route(
    plan_file: Path = typer.Argument(..., exists=True, dir_okay=False, help="Saved plan XML."),
    destination: Path = typer.Argument(..., help="Route-manager XML to write."),
) -> None:
    """Recompute a saved plan and write it in route-manager format."""

    settings = get_settings()
    configure_root_logger(level_for_environment(settings.environment))
    if settings.hangar_file is not None:
        HANGAR.load_yaml(settings.hangar_file)
    try:
        plan = read_plan(plan_file, database=InMemoryReferenceDatabase(), hangar=HANGAR)
    except PlanFormatError as error:
        typer.echo(f"Cannot read {plan_file}: {error}", err=True)
        raise typer.Exit(code=1) from error

    snapshot = PlanSnapshot.of(plan)
    export_route_manager(snapshot, destination, plan.profile)
    typer.echo(
        f"{snapshot.name}: {len(snapshot.waypoints)} waypoints, "
        f"{format_distance(snapshot.total_distance)}, {format_hours(snapshot.total_duration)} "
        f"-> {destination}"
    )


if __name__ == "__main__":
    cli()
