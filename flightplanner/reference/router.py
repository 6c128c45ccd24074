"""Mini README: Automatic routing of a sector through reference records.

Structure:
    * PlanType - radio beacons, fixes or plain GPS points.
    * RouteOptions - router preferences (leg length, VOR handling, GPS fill).
    * SectorRouter - builds the intermediate waypoints between a sector's
      start and end boundaries.

Routing rules:
    * radio beacons: shortest path through navaids, finishing at the nearest
      navaid within 10 nm of the destination when one exists
    * fixes: shortest path through fixes
    * gps: split the direct leg into roughly ``max_leg_distance`` pieces
    * legs longer than ``max_leg_distance`` cost an extra twice their excess,
      so the search prefers shorter hops without forbidding long ones
    * with ``vor_preferred`` every leg ending at a VOR is discounted by 10%
    * a leg already shorter than ``max_leg_distance`` gets no intermediates

Waypoints passed as ``via`` are kept in order and routed between.
"""

from __future__ import annotations

import heapq
import math
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Sequence

from ..geo import COINCIDENT_TOLERANCE_NM, Coordinate, midpoint
from ..logging_utils import get_logger
from ..plan import Waypoint, WaypointKind
from .database import VOR_BAND_MHZ, ReferenceDatabase, ReferenceRecord, waypoint_from_record

LOGGER = get_logger(__name__)

ARRIVAL_BEACON_RANGE_NM = 10.0
_LONG_LEG_PENALTY = 2.0
_VOR_DISCOUNT = 0.9


class PlanType(str, Enum):
    RADIO = "radio"
    FIXES = "fixes"
    GPS = "gps"

    @classmethod
    def from_str(cls, value: str) -> "PlanType":
        try:
            return cls(value.strip().lower())
        except ValueError as error:
            raise ValueError(f"Unknown plan type '{value}'") from error


@dataclass(frozen=True, slots=True)
class RouteOptions:
    """Preferences steering the automatic router."""

    plan_type: PlanType = PlanType.RADIO
    max_leg_distance: float = 100.0
    vor_only: bool = False
    vor_preferred: bool = True
    add_gps_waypoints: bool = False
    add_waypoint_bias: bool = True

    def __post_init__(self) -> None:
        if not self.max_leg_distance > 0:
            raise ValueError(f"Maximum leg distance must be positive, got {self.max_leg_distance}")


@dataclass(frozen=True, slots=True)
class _Node:
    position: Coordinate
    waypoint: Waypoint
    is_vor: bool = False


class SectorRouter:
    """Route a sector through navaids, fixes or GPS points."""

    def __init__(self, database: ReferenceDatabase, options: Optional[RouteOptions] = None) -> None:
        self._database = database
        self.options = options or RouteOptions()

    def route(self, start: Waypoint, end: Waypoint, via: Sequence[Waypoint] = ()) -> List[Waypoint]:
        """Intermediate waypoints from ``start`` to ``end``, both excluded."""

        options = self.options
        if options.plan_type is PlanType.GPS:
            points = self._fill_gps(start, end, list(via))
            LOGGER.info("GPS route %s -> %s: %s waypoints", start.ident, end.ident, len(points))
            return points

        kind = WaypointKind.NAVAID if options.plan_type is PlanType.RADIO else WaypointKind.FIX
        route: List[Waypoint] = []
        previous = start
        for waypoint in via:
            route.extend(self._shortest_path(previous, waypoint, kind))
            route.append(waypoint)
            previous = waypoint

        beacon = self._arrival_beacon(end) if kind is WaypointKind.NAVAID else None
        # A via point may already be the arrival beacon.
        if beacon is not None and not previous.same_place(beacon):
            route.extend(self._shortest_path(previous, beacon, kind))
            route.append(beacon)
        else:
            route.extend(self._shortest_path(previous, end, kind))

        if options.add_gps_waypoints:
            route = self._fill_gps(start, end, route)
        LOGGER.info(
            "Routed %s -> %s via %s: %s",
            start.ident,
            end.ident,
            options.plan_type.value,
            " ".join(waypoint.ident for waypoint in route) or "direct",
        )
        return route

    # ------------------------------------------------------------------
    # Reference searches
    # ------------------------------------------------------------------
    def _accepts(self, record: ReferenceRecord, kind: WaypointKind) -> bool:
        if record.kind is not kind:
            return False
        return not (kind is WaypointKind.NAVAID and self.options.vor_only and not record.is_vor)

    def _arrival_beacon(self, end: Waypoint) -> Optional[Waypoint]:
        """Nearest navaid within range of the destination, VORs first when preferred."""

        candidates = [
            record
            for record in self._database.find_near(end.position, ARRIVAL_BEACON_RANGE_NM)
            if self._accepts(record, WaypointKind.NAVAID)
        ]
        if not candidates:
            return None
        if self.options.vor_preferred:
            vors = [record for record in candidates if record.is_vor]
            candidates = vors or candidates
        LOGGER.debug("Arrival beacon for %s is %s", end.ident, candidates[0].ident)
        return waypoint_from_record(candidates[0])

    def _candidates(self, start: Waypoint, end: Waypoint, kind: WaypointKind) -> List[ReferenceRecord]:
        """Records near the direct leg, ordered by distance from ``start``."""

        total = start.position.distance_to(end.position)
        reach = 2.0 * self.options.max_leg_distance
        # Covers both the 1.5 x total ellipse and the reach circles around each end.
        radius = max(0.75 * total, total / 2.0 + reach) + 1.0
        selected = []
        for record in self._database.find_near(midpoint(start.position, end.position), radius):
            if not self._accepts(record, kind):
                continue
            from_start = start.position.distance_to(record.position)
            to_end = end.position.distance_to(record.position)
            if min(from_start, to_end) <= COINCIDENT_TOLERANCE_NM:
                continue
            if from_start + to_end < total * 1.5 or from_start < reach or to_end < reach:
                selected.append((from_start, record))
        selected.sort(key=lambda item: item[0])
        return [record for _, record in selected]

    # ------------------------------------------------------------------
    # Search
    # ------------------------------------------------------------------
    def _leg_cost(self, origin: _Node, target: _Node) -> float:
        distance = origin.position.distance_to(target.position)
        cost = distance
        if distance > self.options.max_leg_distance:
            cost += (distance - self.options.max_leg_distance) * _LONG_LEG_PENALTY
        if self.options.vor_preferred and target.is_vor:
            cost *= _VOR_DISCOUNT
        return cost

    def _shortest_path(self, start: Waypoint, end: Waypoint, kind: WaypointKind) -> List[Waypoint]:
        """Dijkstra over a complete graph of the candidate records."""

        if start.position.distance_to(end.position) < self.options.max_leg_distance:
            return []

        records = self._candidates(start, end, kind)
        nodes = [_Node(start.position, start)]
        nodes.extend(_Node(record.position, waypoint_from_record(record), record.is_vor) for record in records)
        nodes.append(_Node(end.position, end, _is_vor_waypoint(end)))
        LOGGER.debug("Searching %s candidates between %s and %s", len(records), start.ident, end.ident)

        goal = len(nodes) - 1
        costs: Dict[int, float] = {0: 0.0}
        parents: Dict[int, int] = {}
        queue = [(0.0, 0)]
        visited = set()
        while queue:
            cost, current = heapq.heappop(queue)
            if current in visited:
                continue
            visited.add(current)
            if current == goal:
                break
            for following, node in enumerate(nodes):
                if following in visited:
                    continue
                candidate = cost + self._leg_cost(nodes[current], node)
                if candidate < costs.get(following, math.inf):
                    costs[following] = candidate
                    parents[following] = current
                    heapq.heappush(queue, (candidate, following))

        path: List[Waypoint] = []
        step = parents.get(goal)
        while step is not None and step != 0:
            path.append(nodes[step].waypoint)
            step = parents.get(step)
        path.reverse()
        return path

    # ------------------------------------------------------------------
    # GPS points
    # ------------------------------------------------------------------
    def _fill_gps(self, start: Waypoint, end: Waypoint, route: List[Waypoint]) -> List[Waypoint]:
        """Split every leg at least the fill interval long into equal pieces."""

        options = self.options
        interval = options.max_leg_distance * (0.75 if options.add_waypoint_bias else 1.25)
        filled: List[Waypoint] = []
        previous = start
        for waypoint in [*route, end]:
            length = previous.position.distance_to(waypoint.position)
            if length >= interval:
                filled.extend(self._split_leg(previous, waypoint, length))
            filled.append(waypoint)
            previous = waypoint
        return filled[:-1]

    def _split_leg(self, origin: Waypoint, target: Waypoint, length: float) -> List[Waypoint]:
        ratio = length / self.options.max_leg_distance
        if self.options.add_waypoint_bias and ratio - math.floor(ratio) > 0.2:
            legs = math.ceil(ratio)
        else:
            legs = math.floor(ratio)
        legs = max(legs, 1)
        step = length / legs
        points: List[Waypoint] = []
        position = origin.position
        for _ in range(legs - 1):
            position = position.coordinate_at(position.bearing_to(target.position), step)
            points.append(Waypoint.free("GPS", position))
        return points


def _is_vor_waypoint(waypoint: Waypoint) -> bool:
    return (
        waypoint.kind is WaypointKind.NAVAID
        and waypoint.frequency is not None
        and VOR_BAND_MHZ[0] <= waypoint.frequency < VOR_BAND_MHZ[1]
    )
