"""Mini README: Tests for the flight plan engine.

Exercises transition placement (TOC/TOD), navigation field derivation,
sector bookkeeping and the atomic edit operations of ``FlightPlan``.
"""

from __future__ import annotations

import logging

import pytest

from flightplanner.geo import Coordinate, destination_point, distance_nm
from flightplanner.performance import PerformanceProfile
from flightplanner.plan import (
    FlightPlan,
    InvalidIndex,
    InvalidWaypoint,
    ProtectedWaypoint,
    TransitionRef,
    TransitionRole,
    Waypoint,
    WaypointKind,
)

JET = PerformanceProfile("Test jet", climb_rate=1800, climb_speed=250, descent_rate=1800, descent_speed=250)
ORIGIN = Waypoint.airport("AAAA", Coordinate(0.0, 0.0))
MIDFIELD = Waypoint.airport("MMMM", Coordinate(0.0, 2.5))
DESTINATION = Waypoint.airport("BBBB", Coordinate(0.0, 5.0))
NAVAID = Waypoint(ident="NAV", kind=WaypointKind.NAVAID, position=Coordinate(0.0, 2.5), name="Test VOR")


def _computed(plan: FlightPlan) -> list[Waypoint]:
    return [waypoint for waypoint in plan.waypoints if waypoint.is_computed]


def _route(plan: FlightPlan) -> list[tuple[str, Coordinate, object]]:
    return [
        (waypoint.ident, waypoint.position, waypoint.altitude)
        for waypoint in plan.waypoints
        if not waypoint.is_computed
    ]


def test_top_of_climb_placed_at_climb_distance() -> None:
    """30000 ft at 1800 ft/min and 250 kt puts TOC about 69.4 nm out."""

    plan = FlightPlan([ORIGIN, DESTINATION], cruise_altitude=30000, profile=JET)

    idents = [waypoint.ident for waypoint in plan.waypoints]
    assert idents == ["AAAA", "TOC", "TOD", "BBBB"]
    toc, tod = _computed(plan)
    assert toc.kind is WaypointKind.COMPUTED
    assert toc.transition == TransitionRef(sector_index=0, role=TransitionRole.CLIMB)
    assert toc.cumulative_distance == pytest.approx(69.44, abs=0.1)
    assert toc.planned_altitude == pytest.approx(30000, abs=1.0)
    assert plan.total_distance - tod.cumulative_distance == pytest.approx(69.44, abs=0.1)
    assert plan[-1].planned_altitude == 0.0


def test_navigation_fields_are_derived() -> None:
    """Headings, distances and leg times are filled for every leg."""

    plan = FlightPlan([ORIGIN, DESTINATION], cruise_altitude=30000, profile=JET)

    assert plan[0].heading is None
    assert plan[0].cumulative_distance == 0.0
    assert all(waypoint.heading == pytest.approx(90.0, abs=1e-6) for waypoint in plan.waypoints[1:])
    assert plan.total_distance == pytest.approx(distance_nm(ORIGIN.position, DESTINATION.position))
    # No cruise speed: every phase is flown at 250 kt.
    assert plan.total_duration == pytest.approx(plan.total_distance / 250.0)
    assert plan.sectors[0].duration == pytest.approx(plan.total_duration)


def test_short_sector_clamps_transitions_to_midpoint() -> None:
    """A 50 nm sector needing 70 nm each way meets at 25 nm with no cruise."""

    profile = PerformanceProfile("Short hop", climb_rate=1000, climb_speed=420, descent_rate=1000, descent_speed=420)
    end = Waypoint.airport("EEEE", destination_point(ORIGIN.position, 90.0, 50.0))
    plan = FlightPlan([ORIGIN, end], cruise_altitude=10000, profile=profile)

    toc, tod = _computed(plan)
    assert toc.cumulative_distance == pytest.approx(25.0, abs=1e-6)
    assert tod.cumulative_distance == pytest.approx(25.0, abs=1e-6)
    assert tod.heading is None
    report = plan.sectors[0].report
    assert report is not None and report.clamped
    assert "no level cruise segment" in report.notes
    legs = [waypoint.leg_distance for waypoint in plan.waypoints]
    assert all(leg >= 0.0 for leg in legs)
    cumulative = [waypoint.cumulative_distance for waypoint in plan.waypoints]
    assert cumulative == sorted(cumulative)


def test_single_transition_longer_than_sector_is_skipped() -> None:
    """Climbing 30000 ft in 50 nm is impossible; no TOC is placed."""

    end = Waypoint.free("HIGH", destination_point(ORIGIN.position, 90.0, 50.0), altitude=30000)
    plan = FlightPlan([ORIGIN, end], cruise_altitude=30000, profile=JET)

    assert _computed(plan) == []
    assert "cruise altitude not reached" in plan.sectors[0].report.notes


def test_missing_profile_disables_transitions() -> None:
    """Without a profile the plan still derives geometry but no TOC/TOD."""

    plan = FlightPlan([ORIGIN, NAVAID, DESTINATION], cruise_altitude=30000)

    assert _computed(plan) == []
    assert not plan.transitions_enabled
    assert plan.sectors[0].report.enabled is False
    assert plan[1].leg_distance == pytest.approx(150.1, abs=0.1)
    assert plan[1].ete_hours is None


def test_recompute_all_is_idempotent() -> None:
    """Recomputing twice gives the same state as recomputing once."""

    plan = FlightPlan([ORIGIN, NAVAID, MIDFIELD, DESTINATION], cruise_altitude=30000, profile=JET)
    before = plan.waypoints

    plan.recompute_all()
    once = plan.waypoints
    plan.recompute_all()

    assert once == before
    assert plan.waypoints == once
    assert not plan.is_dirty


def test_insert_then_remove_restores_plan() -> None:
    """A waypoint inserted and removed again leaves every field unchanged."""

    plan = FlightPlan([ORIGIN, DESTINATION], cruise_altitude=30000, profile=JET)
    before = plan.waypoints
    fix = Waypoint.free("FIX1", Coordinate(0.5, 2.5), altitude=12000)

    index = plan.insert_waypoint(1, fix)
    assert plan[index].ident == "FIX1"
    assert len(_computed(plan)) == 2

    removed = plan.remove_waypoint(index)
    assert removed == fix
    assert plan.waypoints == before


def test_appended_and_prepended_fixes_can_be_removed() -> None:
    """A fix added at either end becomes the plan boundary yet stays removable."""

    start = Waypoint.free("FIXA", Coordinate(0.0, 0.0))
    end = Waypoint.free("FIXB", Coordinate(0.0, 5.0))
    plan = FlightPlan([start, end], cruise_altitude=30000, profile=JET)
    before = plan.waypoints

    appended = plan.append_waypoint(Waypoint.free("FIXC", Coordinate(0.0, 7.5)))
    assert plan.boundary_indices()[-1] == appended
    assert plan.remove_waypoint(appended).ident == "FIXC"
    assert plan.waypoints == before

    assert plan.insert_waypoint(-1, Waypoint.free("FIXD", Coordinate(0.0, -2.5))) == 0
    assert plan.sectors[0].intermediates[0].ident == "FIXA"
    assert plan.remove_waypoint(0).ident == "FIXD"
    assert plan.waypoints == before


def test_missing_profile_warns_once_per_edit(caplog: pytest.LogCaptureFixture) -> None:
    """A multi-sector plan without a profile logs a single warning per recompute."""

    plan = FlightPlan([ORIGIN, MIDFIELD, DESTINATION], cruise_altitude=30000)
    assert len(plan.sectors) == 2

    caplog.clear()
    with caplog.at_level(logging.WARNING):
        plan.set_cruise_altitude(20000)

    warnings = [record for record in caplog.records if "performance profile" in record.getMessage()]
    assert len(warnings) == 1
    assert warnings[0].levelno == logging.WARNING


def test_profile_change_replaces_computed_points_only() -> None:
    """A new profile moves TOC/TOD but leaves the route untouched."""

    plan = FlightPlan([ORIGIN, NAVAID, DESTINATION], cruise_altitude=30000, profile=JET)
    route_before = _route(plan)

    slow = PerformanceProfile("Slow", climb_rate=1000, climb_speed=200, descent_rate=1000, descent_speed=200)
    plan.set_performance_profile(slow)

    computed = _computed(plan)
    assert [waypoint.role for waypoint in computed] == [TransitionRole.CLIMB, TransitionRole.DESCENT]
    assert computed[0].cumulative_distance == pytest.approx(100.0, abs=0.1)
    assert plan.total_distance - computed[1].cumulative_distance == pytest.approx(100.0, abs=0.1)
    assert _route(plan) == route_before
    assert plan.is_dirty


def test_cruise_altitude_falls_back_to_profile() -> None:
    """An unset cruise altitude uses the profile's cruise altitude."""

    profile = PerformanceProfile(
        "Cruiser", climb_rate=1800, climb_speed=250, descent_rate=1800, descent_speed=250, cruise_altitude=15000
    )
    plan = FlightPlan([ORIGIN, DESTINATION], profile=profile)

    assert plan.cruise_altitude is None
    assert plan.effective_cruise_altitude == 15000
    assert _computed(plan)[0].cumulative_distance == pytest.approx(34.72, abs=0.1)

    plan.set_cruise_altitude(30000)
    assert _computed(plan)[0].cumulative_distance == pytest.approx(69.44, abs=0.1)
    with pytest.raises(ValueError):
        plan.set_cruise_altitude(-100)
    assert plan.cruise_altitude == 30000


def test_interior_airport_splits_sectors() -> None:
    """Airports inside the route start new sectors with their own transitions."""

    plan = FlightPlan([ORIGIN, MIDFIELD, DESTINATION], cruise_altitude=30000, profile=JET)

    assert [sector.name for sector in plan.sectors] == ["AAAA --> MMMM", "MMMM --> BBBB"]
    assert plan.boundary_indices() == [0, 3, 6]
    assert [waypoint.transition.sector_index for waypoint in _computed(plan)] == [0, 0, 1, 1]
    assert plan.sectors[0].end == plan.sectors[1].start
    assert plan.name == "AAAA-MMMM"

    plan.remove_waypoint(3)
    assert len(plan.sectors) == 1
    assert [waypoint.ident for waypoint in plan.waypoints] == ["AAAA", "TOC", "TOD", "BBBB"]


def test_collapse_sector_drops_boundary() -> None:
    """Collapsing the first sector drops its start; later sectors drop their end."""

    first = FlightPlan([ORIGIN, MIDFIELD, DESTINATION], cruise_altitude=30000, profile=JET)
    first.collapse_sector(0)
    assert [waypoint.ident for waypoint in first.waypoints if not waypoint.is_computed] == ["MMMM", "BBBB"]

    last = FlightPlan([ORIGIN, MIDFIELD, DESTINATION], cruise_altitude=30000, profile=JET)
    last.collapse_sector(1)
    assert [waypoint.ident for waypoint in last.waypoints if not waypoint.is_computed] == ["AAAA", "MMMM"]

    with pytest.raises(InvalidIndex):
        last.collapse_sector(3)


def test_move_waypoint_reorders_route() -> None:
    """Moving a waypoint returns its new index and re-derives legs."""

    east = Waypoint.free("EAST", Coordinate(0.0, 4.0))
    west = Waypoint.free("WEST", Coordinate(0.0, 1.0))
    plan = FlightPlan([ORIGIN, east, west, DESTINATION])

    index = plan.move_waypoint(1, 2)

    assert index == 2
    assert [waypoint.ident for waypoint in plan.waypoints] == ["AAAA", "WEST", "EAST", "BBBB"]
    assert plan[1].leg_distance == pytest.approx(60.04, abs=0.01)
    assert plan.move_waypoint(1, 1) == 1


def test_invalid_edits_leave_plan_unchanged() -> None:
    """Rejected edits raise typed errors and change nothing."""

    plan = FlightPlan([ORIGIN, NAVAID, DESTINATION], cruise_altitude=30000, profile=JET)
    before = plan.waypoints
    toc_index = next(index for index, waypoint in enumerate(before) if waypoint.is_computed)

    with pytest.raises(InvalidIndex):
        plan.insert_waypoint(len(plan), NAVAID)
    with pytest.raises(IndexError):
        plan.remove_waypoint(-1)
    with pytest.raises(ProtectedWaypoint):
        plan.remove_waypoint(toc_index)
    with pytest.raises(ProtectedWaypoint):
        plan.move_waypoint(toc_index, 0)
    with pytest.raises(InvalidIndex):
        plan.move_waypoint(len(plan), 0)
    with pytest.raises(InvalidIndex):
        plan.move_waypoint(-1, 0)
    with pytest.raises(InvalidIndex):
        plan.move_waypoint(0, len(plan))
    with pytest.raises(ProtectedWaypoint):
        plan.remove_waypoint(0)
    with pytest.raises(InvalidWaypoint):
        plan.insert_waypoint(0, plan[toc_index])

    assert plan.waypoints == before
    assert not plan.is_dirty


def test_removing_everything_leaves_empty_plan() -> None:
    """Intermediates first, then the boundaries, down to an empty plan."""

    plan = FlightPlan([ORIGIN, NAVAID, DESTINATION], cruise_altitude=30000, profile=JET)
    nav_index = next(index for index, waypoint in enumerate(plan.waypoints) if waypoint.ident == "NAV")
    plan.remove_waypoint(nav_index)
    while len(plan):
        plan.remove_waypoint(0)

    assert plan.waypoints == []
    assert plan.sectors == []
    assert plan.name == "new_plan"
    plan.recompute_all()
    assert plan.waypoints == []
    assert plan.total_distance == 0.0


def test_single_waypoint_plan_has_no_sectors() -> None:
    """One waypoint cannot form a sector, and appending a second one can."""

    plan = FlightPlan()
    assert plan.append_waypoint(ORIGIN) == 0
    assert plan.sectors == []
    assert plan[0].planned_altitude == 0.0

    plan.append_waypoint(DESTINATION)
    assert len(plan.sectors) == 1
    assert plan.is_dirty
    plan.mark_saved()
    assert not plan.is_dirty


def test_copy_is_independent() -> None:
    """Edits on a copy never leak into the original."""

    plan = FlightPlan([ORIGIN, DESTINATION], cruise_altitude=30000, profile=JET)
    clone = plan.copy()
    clone.insert_waypoint(0, NAVAID)

    assert len(clone) == len(plan) + 1
    assert plan.sector_of(1) == 0
