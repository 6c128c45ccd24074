"""Mini README: Tests for the FlightGear live link.

A recording stand-in for ``requests.Session`` captures the HTTP traffic so
the route-manager command sequence can be checked without a simulator.
"""

from __future__ import annotations

from typing import Dict, List, Tuple

import pytest
import requests

from flightplanner.configuration import PlannerSettings
from flightplanner.geo import Coordinate
from flightplanner.link import FlightGearLink, SimulatorLinkError
from flightplanner.performance import PerformanceProfile
from flightplanner.plan import FlightPlan, PlanSnapshot, Waypoint


class _Reply:
    def __init__(self, payload: Dict[str, object]) -> None:
        self.payload = payload

    def raise_for_status(self) -> None:
        return None

    def json(self) -> Dict[str, object]:
        return self.payload


class _RecordingSession:
    """Minimal session answering property reads and recording posts."""

    def __init__(self, properties: Dict[str, float]) -> None:
        self.properties = properties
        self.posted: List[Tuple[str, object]] = []

    def get(self, url: str, timeout: float) -> _Reply:
        path = url.split("/json/", 1)[1]
        if path not in self.properties:
            raise requests.exceptions.ConnectionError(f"no property {path}")
        return _Reply({"path": path, "value": self.properties[path]})

    def post(self, url: str, json: object, timeout: float) -> _Reply:
        self.posted.append((url, json))
        return _Reply({})

    def close(self) -> None:
        return None


def _enabled_settings() -> PlannerSettings:
    return PlannerSettings(fgfs_link_enabled=True, fgfs_link_host="sim.local", fgfs_link_port=5400)


def test_fetch_aircraft_position() -> None:
    """Position and heading are read from the property tree."""

    session = _RecordingSession(
        {
            "position/latitude-deg": -33.9,
            "position/longitude-deg": 151.2,
            "orientation/heading-deg": 370.0,
        }
    )
    link = FlightGearLink(_enabled_settings(), session=session)

    reported = link.fetch_aircraft_position()

    assert reported.position == Coordinate(-33.9, 151.2)
    assert reported.heading == pytest.approx(10.0)
    assert link.metadata()["endpoint"] == "http://sim.local:5400/json"


def test_missing_property_raises_link_error() -> None:
    """Transport failures surface as SimulatorLinkError."""

    link = FlightGearLink(_enabled_settings(), session=_RecordingSession({}))

    with pytest.raises(SimulatorLinkError):
        link.fetch_aircraft_position()


def test_send_snapshot_streams_route_commands() -> None:
    """The route is cleared, each waypoint inserted, then activated."""

    profile = PerformanceProfile("Test jet", climb_rate=1800, climb_speed=250, descent_rate=1800, descent_speed=250)
    plan = FlightPlan(
        [Waypoint.airport("AAAA", Coordinate(0.0, 0.0)), Waypoint.airport("BBBB", Coordinate(0.0, 5.0), 120)],
        cruise_altitude=30000,
        profile=profile,
    )
    session = _RecordingSession({})
    link = FlightGearLink(_enabled_settings(), session=session)

    sent = link.send_snapshot(PlanSnapshot.of(plan))

    commands = [payload["value"] for _, payload in session.posted]
    assert sent == 4
    assert commands[0] == "@CLEAR"
    assert commands[1] == "@INSERT0:0.000000,0.000000@0"
    assert commands[-2] == "@INSERT3:5.000000,0.000000@120"
    assert commands[-1] == "@ACTIVATE"
    assert all(url.endswith("/autopilot/route-manager/input") for url, _ in session.posted)


def test_disabled_link_is_silent() -> None:
    """With the link disabled nothing is sent or read."""

    session = _RecordingSession({})
    link = FlightGearLink(PlannerSettings(fgfs_link_enabled=False), session=session)

    assert link.fetch_aircraft_position() is None
    assert link.send_snapshot(PlanSnapshot.of(FlightPlan())) == 0
    assert session.posted == []
