"""Mini README: Tests for the command line entry point."""

from __future__ import annotations

import xml.etree.ElementTree as ET
from pathlib import Path

from typer.testing import CliRunner

from flightplanner.exchange import write_plan
from flightplanner.logging_utils import level_for_environment
from flightplanner.performance import HANGAR
from flightplanner.plan import FlightPlan, PlanSnapshot, WaypointKind
from flightplanner.reference import InMemoryReferenceDatabase, waypoint_from_record
from main_planner import cli

runner = CliRunner()


def test_export_route_converts_saved_plan(tmp_path: Path) -> None:
    """A saved plan is recomputed and written as a route-manager file."""

    database = InMemoryReferenceDatabase()
    plan = FlightPlan(
        [
            waypoint_from_record(database.get("YSSY")),
            waypoint_from_record(database.get("CH", WaypointKind.NAVAID)),
            waypoint_from_record(database.get("YBBN")),
        ],
        profile=HANGAR.get("Boeing 737"),
    )
    saved = write_plan(PlanSnapshot.of(plan), tmp_path / "trip.xml")
    destination = tmp_path / "route.xml"

    result = runner.invoke(cli, ["export-route", str(saved), str(destination)])

    assert result.exit_code == 0, result.output
    assert "YSSY-YBBN" in result.output
    root = ET.parse(destination).getroot()
    assert [wp.findtext("ident") for wp in root.findall("route/wp")] == ["TOC", "CH", "TOD"]


def test_export_route_reports_unreadable_plan(tmp_path: Path) -> None:
    """Malformed plan files exit with a non-zero status."""

    broken = tmp_path / "broken.xml"
    broken.write_text("<route/>", encoding="utf-8")

    result = runner.invoke(cli, ["export-route", str(broken), str(tmp_path / "out.xml")])

    assert result.exit_code == 1
    assert not (tmp_path / "out.xml").exists()


def test_environment_levels() -> None:
    """Development is verbose; unknown labels fall back to INFO."""

    assert level_for_environment("Development") == 10
    assert level_for_environment("staging") == 20
