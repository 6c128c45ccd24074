"""Mini README: Immutable plan snapshots and single-writer publication.

Structure:
    * PlanSnapshot - frozen view of a fully derived plan for exporters, the
      live link and the web front end.
    * PlanPublisher - owns a FlightPlan, applies edits to a private copy and
      swaps the published snapshot once the edit has fully recomputed.

Readers only ever see snapshots, so a renderer or network transport can
never observe a plan halfway through a recompute.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Tuple, TypeVar

from ..logging_utils import get_logger
from .flight_plan import FlightPlan
from .waypoint import Waypoint

LOGGER = get_logger(__name__)

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class SectorSummary:
    """Per-sector totals exposed with a snapshot."""

    name: str
    start_index: int
    end_index: int
    distance: float
    duration: float
    notes: Tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class PlanSnapshot:
    """Point-in-time copy of a plan's flattened, derived state.

    ``cruise_altitude`` is the altitude transitions were computed for;
    ``selected_cruise_altitude`` is the explicit choice, ``None`` while the
    plan follows its profile.
    """

    name: str
    waypoints: Tuple[Waypoint, ...]
    sectors: Tuple[SectorSummary, ...]
    cruise_altitude: int
    profile_name: Optional[str]
    total_distance: float
    total_duration: float
    selected_cruise_altitude: Optional[int] = None

    @classmethod
    def of(cls, plan: FlightPlan) -> "PlanSnapshot":
        boundaries = plan.boundary_indices()
        sectors = tuple(
            SectorSummary(
                name=sector.name,
                start_index=boundaries[sector.index],
                end_index=boundaries[sector.index + 1],
                distance=sector.distance,
                duration=sector.duration,
                notes=sector.report.notes if sector.report else (),
            )
            for sector in plan.sectors
        )
        return cls(
            name=plan.name,
            waypoints=tuple(plan.waypoints),
            sectors=sectors,
            cruise_altitude=plan.effective_cruise_altitude,
            profile_name=plan.profile.name if plan.profile else None,
            total_distance=plan.total_distance,
            total_duration=plan.total_duration,
            selected_cruise_altitude=plan.cruise_altitude,
        )

    @property
    def boundary_indices(self) -> Tuple[int, ...]:
        if not self.sectors:
            return ()
        return (self.sectors[0].start_index,) + tuple(sector.end_index for sector in self.sectors)

    def as_dict(self) -> Dict[str, object]:
        """Export the snapshot with serialisable values."""

        boundaries = set(self.boundary_indices)
        return {
            "name": self.name,
            "cruise_altitude": self.cruise_altitude,
            "selected_cruise_altitude": self.selected_cruise_altitude,
            "profile": self.profile_name,
            "total_distance": self.total_distance,
            "total_duration": self.total_duration,
            "waypoints": [
                dict(waypoint.as_dict(), index=index, sector_boundary=index in boundaries)
                for index, waypoint in enumerate(self.waypoints)
            ],
            "sectors": [
                {
                    "name": sector.name,
                    "start_index": sector.start_index,
                    "end_index": sector.end_index,
                    "distance": sector.distance,
                    "duration": sector.duration,
                    "notes": list(sector.notes),
                }
                for sector in self.sectors
            ],
        }


class PlanPublisher:
    """Single-writer owner of a plan that publishes snapshots atomically."""

    def __init__(self, plan: Optional[FlightPlan] = None) -> None:
        self._plan = plan if plan is not None else FlightPlan()
        self._write_lock = threading.Lock()
        self._snapshot = PlanSnapshot.of(self._plan)

    @property
    def snapshot(self) -> PlanSnapshot:
        """Most recently published snapshot; never a partially edited plan."""

        return self._snapshot

    def update(self, edit: Callable[[FlightPlan], T]) -> T:
        """Apply ``edit`` to a working copy and publish it if it succeeds.

        Exceptions raised by ``edit`` propagate and leave the published plan
        and snapshot unchanged.
        """

        with self._write_lock:
            working = self._plan.copy()
            result = edit(working)
            self._plan = working
            self._snapshot = PlanSnapshot.of(working)
        LOGGER.debug("Published snapshot '%s' with %s waypoints", self._snapshot.name, len(self._snapshot.waypoints))
        return result

    def replace(self, plan: FlightPlan) -> PlanSnapshot:
        """Publish a whole new plan, e.g. one read from a file."""

        with self._write_lock:
            self._plan = plan
            self._snapshot = PlanSnapshot.of(plan)
        return self._snapshot
