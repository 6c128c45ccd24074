"""Mini README: Tests for plan snapshots and the single-writer publisher.

Ensures snapshots expose sector boundaries, that failed edits never reach
readers, and that concurrent writers are serialised.
"""

from __future__ import annotations

import threading

import pytest

from flightplanner.geo import Coordinate
from flightplanner.performance import PerformanceProfile
from flightplanner.plan import FlightPlan, PlanPublisher, PlanSnapshot, ProtectedWaypoint, Waypoint

JET = PerformanceProfile("Test jet", climb_rate=1800, climb_speed=250, descent_rate=1800, descent_speed=250)


def _two_sector_plan() -> FlightPlan:
    return FlightPlan(
        [
            Waypoint.airport("AAAA", Coordinate(0.0, 0.0)),
            Waypoint.airport("MMMM", Coordinate(0.0, 2.5)),
            Waypoint.airport("BBBB", Coordinate(0.0, 5.0)),
        ],
        cruise_altitude=30000,
        profile=JET,
    )


def test_snapshot_marks_sector_boundaries() -> None:
    """Boundary flags in the exported dictionary follow the sectors."""

    snapshot = PlanSnapshot.of(_two_sector_plan())
    payload = snapshot.as_dict()

    assert snapshot.boundary_indices == (0, 3, 6)
    assert [entry["sector_boundary"] for entry in payload["waypoints"]] == [
        True, False, False, True, False, False, True,
    ]
    assert payload["profile"] == "Test jet"
    assert [sector["name"] for sector in payload["sectors"]] == ["AAAA --> MMMM", "MMMM --> BBBB"]
    assert snapshot.total_distance == pytest.approx(sum(sector.distance for sector in snapshot.sectors))


def test_failed_edit_keeps_published_snapshot() -> None:
    """Readers keep seeing the last good snapshot when an edit fails."""

    publisher = PlanPublisher(_two_sector_plan())
    before = publisher.snapshot

    with pytest.raises(ProtectedWaypoint):
        publisher.update(lambda plan: plan.remove_waypoint(1))

    assert publisher.snapshot is before


def test_successful_edit_publishes_new_snapshot() -> None:
    """The edit result is returned and a fresh snapshot published."""

    publisher = PlanPublisher(_two_sector_plan())
    before = publisher.snapshot

    removed = publisher.update(lambda plan: plan.remove_waypoint(3))

    assert removed.ident == "MMMM"
    assert publisher.snapshot is not before
    assert len(publisher.snapshot.sectors) == 1
    assert len(before.sectors) == 2


def test_concurrent_writers_are_serialised() -> None:
    """Appends from several threads all land in the plan."""

    publisher = PlanPublisher()

    def worker(thread_index: int) -> None:
        for step in range(5):
            waypoint = Waypoint.free(
                f"P{thread_index}{step}", Coordinate(float(thread_index), float(step))
            )
            publisher.update(lambda plan, waypoint=waypoint: plan.append_waypoint(waypoint))

    threads = [threading.Thread(target=worker, args=(index,)) for index in range(4)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(publisher.snapshot.waypoints) == 20
    assert len(publisher.snapshot.sectors) == 1


def test_replace_publishes_whole_plan() -> None:
    """Replacing the plan swaps the snapshot in one step."""

    publisher = PlanPublisher()
    snapshot = publisher.replace(_two_sector_plan())

    assert publisher.snapshot is snapshot
    assert snapshot.name == "AAAA-MMMM"
