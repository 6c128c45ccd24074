"""Mini README: Sectors - contiguous runs of a plan between two boundaries.

Structure:
    * TransitionReport - what the transition inserter decided for a sector.
    * Sector - ordered waypoints from a start boundary to an end boundary.
    * split_sectors - partition a flat waypoint list into sector runs.

A waypoint is a boundary when it is the first or last non-computed entry of
the plan, or when it is an airport. Consecutive sectors share a boundary:
the end of sector ``n`` is the start of sector ``n + 1``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from .waypoint import Waypoint


@dataclass(frozen=True, slots=True)
class TransitionReport:
    """Outcome of transition placement for one sector."""

    enabled: bool
    climb_distance: float = 0.0
    descent_distance: float = 0.0
    clamped: bool = False
    notes: tuple[str, ...] = ()


@dataclass(slots=True)
class Sector:
    """Waypoints from ``start`` to ``end`` inclusive, computed points included."""

    index: int
    waypoints: List[Waypoint]
    report: Optional[TransitionReport] = field(default=None)

    def __post_init__(self) -> None:
        if len(self.waypoints) < 2:
            raise ValueError("A sector needs a start and an end waypoint")
        if self.waypoints[0].is_computed or self.waypoints[-1].is_computed:
            raise ValueError("Sector boundaries cannot be computed waypoints")

    @property
    def start(self) -> Waypoint:
        return self.waypoints[0]

    @property
    def end(self) -> Waypoint:
        return self.waypoints[-1]

    @property
    def intermediates(self) -> List[Waypoint]:
        """Non-computed waypoints strictly between the boundaries."""

        return [waypoint for waypoint in self.waypoints[1:-1] if not waypoint.is_computed]

    @property
    def computed(self) -> List[Waypoint]:
        return [waypoint for waypoint in self.waypoints if waypoint.is_computed]

    @property
    def name(self) -> str:
        return f"{self.start.ident} --> {self.end.ident}"

    @property
    def distance(self) -> float:
        """Sum of leg distances from start to end in nautical miles."""

        return sum(waypoint.leg_distance for waypoint in self.waypoints[1:])

    @property
    def duration(self) -> float:
        """Sum of known leg times in hours."""

        return sum(waypoint.ete_hours or 0.0 for waypoint in self.waypoints[1:])


def split_sectors(waypoints: Sequence[Waypoint]) -> List[List[Waypoint]]:
    """Partition ``waypoints`` into sector runs sharing their boundaries.

    Computed waypoints before the first or after the last non-computed
    waypoint belong to no sector and are dropped. Fewer than two
    non-computed waypoints means no sectors at all.
    """

    route_positions = [index for index, waypoint in enumerate(waypoints) if not waypoint.is_computed]
    if len(route_positions) < 2:
        return []
    first, last = route_positions[0], route_positions[-1]
    boundaries = [
        index
        for index in route_positions
        if index in (first, last) or waypoints[index].is_airport
    ]
    return [list(waypoints[a : b + 1]) for a, b in zip(boundaries, boundaries[1:])]


def flatten_sectors(runs: Sequence[Sequence[Waypoint]]) -> List[Waypoint]:
    """Join sector runs back into one list, writing shared boundaries once."""

    flat: List[Waypoint] = []
    for position, run in enumerate(runs):
        flat.extend(run if position == 0 else run[1:])
    return flat
