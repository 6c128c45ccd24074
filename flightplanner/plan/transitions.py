"""Mini README: Placement of top of climb and top of descent points.

Structure:
    * TransitionInserter - removes stale computed waypoints from a sector and
      inserts fresh TOC/TOD points for the plan's cruise altitude.

Placement rules, per sector:
    * climb distance = (cruise - start altitude) / climb rate x climb speed / 60
    * descent distance = (cruise - end altitude) / descent rate x descent speed / 60
    * when both are needed and together exceed the sector length, both points
      meet at the sector midpoint and no level segment remains
    * a single transition longer than the sector is not placed
    * a missing or incomplete profile places nothing

Points are positioned along existing legs by projecting from the leg's
starting waypoint, so the leg geometry of the sector is preserved.
"""

from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

from ..geo import COINCIDENT_TOLERANCE_NM, bearing_deg, destination_point, distance_nm
from ..logging_utils import get_logger
from ..performance import PerformanceProfile
from .sector import Sector, TransitionReport
from .waypoint import TransitionRef, TransitionRole, Waypoint

LOGGER = get_logger(__name__)

_PLACEMENT_TOLERANCE_NM = 1e-6


def _cumulative_distances(waypoints: Sequence[Waypoint]) -> List[float]:
    """Running distance from the first waypoint to each waypoint."""

    totals = [0.0]
    for previous, current in zip(waypoints, waypoints[1:]):
        totals.append(totals[-1] + distance_nm(previous.position, current.position))
    return totals


class TransitionInserter:
    """Compute and materialise TOC/TOD waypoints for plan sectors."""

    def apply(
        self,
        sector: Sector,
        cruise_altitude: int,
        profile: Optional[PerformanceProfile],
    ) -> Tuple[List[Waypoint], TransitionReport]:
        """Return the sector's waypoints with fresh transitions and a report.

        Every returned non-computed waypoint has its navigation fields
        cleared; the plan derives them again once all sectors are placed.
        """

        route = [waypoint.without_navigation() for waypoint in sector.waypoints if not waypoint.is_computed]
        removed = len(sector.waypoints) - len(route)
        if removed:
            LOGGER.debug("Removed %s stale computed waypoints from sector %s", removed, sector.index)

        if profile is None or not profile.is_complete:
            LOGGER.debug("No usable performance profile for sector %s; transitions skipped", sector.index)
            return route, TransitionReport(enabled=False, notes=("missing performance profile",))

        start_altitude = route[0].altitude_or_ground
        end_altitude = route[-1].altitude_or_ground
        climb = profile.climb_distance(cruise_altitude - start_altitude)
        descent = profile.descent_distance(cruise_altitude - end_altitude)
        cumulative = _cumulative_distances(route)
        total = cumulative[-1]
        notes: List[str] = []
        clamped = False

        if (climb > 0 or descent > 0) and total <= COINCIDENT_TOLERANCE_NM:
            LOGGER.warning("Sector %s has zero length; transitions skipped", sector.index)
            return route, TransitionReport(
                enabled=True, climb_distance=climb, descent_distance=descent, notes=("zero length sector",)
            )

        if climb > 0 and descent > 0 and climb + descent > total:
            LOGGER.info(
                "Sector %s too short for cruise (climb %.1f nm + descent %.1f nm > %.1f nm); "
                "transitions meet at the midpoint",
                sector.index,
                climb,
                descent,
                total,
            )
            climb = descent = total / 2.0
            clamped = True
            notes.append("no level cruise segment")
        else:
            if climb > total:
                LOGGER.debug("Climb of %.1f nm does not fit sector %s (%.1f nm)", climb, sector.index, total)
                notes.append("cruise altitude not reached")
                climb = 0.0
            if descent > total:
                LOGGER.debug("Descent of %.1f nm does not fit sector %s (%.1f nm)", descent, sector.index, total)
                notes.append("descent starts before sector")
                descent = 0.0

        targets: List[Tuple[float, TransitionRole]] = []
        if climb > 0:
            targets.append((climb, TransitionRole.CLIMB))
        if descent > 0:
            targets.append((total - descent, TransitionRole.DESCENT))

        placed = self._place(sector.index, route, cumulative, targets, cruise_altitude)
        report = TransitionReport(
            enabled=True,
            climb_distance=climb,
            descent_distance=descent,
            clamped=clamped,
            notes=tuple(notes),
        )
        return placed, report

    def _place(
        self,
        sector_index: int,
        route: List[Waypoint],
        cumulative: List[float],
        targets: List[Tuple[float, TransitionRole]],
        cruise_altitude: int,
    ) -> List[Waypoint]:
        """Insert a computed waypoint for each ``(distance, role)`` target."""

        by_leg: dict[int, List[Waypoint]] = {}
        for target, role in targets:
            leg = self._leg_containing(cumulative, target)
            leg_start, leg_end = route[leg], route[leg + 1]
            remaining = target - cumulative[leg]
            leg_length = cumulative[leg + 1] - cumulative[leg]
            if remaining <= _PLACEMENT_TOLERANCE_NM:
                position = leg_start.position
            elif remaining >= leg_length - _PLACEMENT_TOLERANCE_NM:
                position = leg_end.position
            else:
                heading = bearing_deg(leg_start.position, leg_end.position)
                position = destination_point(leg_start.position, heading, remaining)
            ref = TransitionRef(sector_index=sector_index, role=role)
            by_leg.setdefault(leg, []).append(Waypoint.computed(ref, position, cruise_altitude))
            LOGGER.debug(
                "Placed %s for sector %s at %.3f nm on leg %s -> %s",
                role.name,
                sector_index,
                target,
                leg_start.ident,
                leg_end.ident,
            )

        placed: List[Waypoint] = []
        for index, waypoint in enumerate(route):
            placed.append(waypoint)
            placed.extend(by_leg.get(index, []))
        return placed

    @staticmethod
    def _leg_containing(cumulative: List[float], target: float) -> int:
        """Index of the first leg whose distance range contains ``target``."""

        for leg in range(len(cumulative) - 1):
            if cumulative[leg + 1] >= target - _PLACEMENT_TOLERANCE_NM:
                return leg
        return len(cumulative) - 2
