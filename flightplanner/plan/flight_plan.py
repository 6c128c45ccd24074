"""Mini README: The flight plan and its editing operations.

Structure:
    * FlightPlan - ordered waypoints partitioned into sectors, plus the
      cruise altitude and the selected performance profile.

Every edit builds a candidate waypoint list, runs a full recompute on it
(transition placement then navigation fields) and only then swaps the
result in. A rejected edit therefore leaves the plan untouched, and no
caller ever sees a plan whose computed points are stale.

Indices used by the edit operations refer to ``FlightPlan.waypoints``, the
flattened list including computed TOC/TOD points.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable, List, Optional, Sequence, Tuple

from ..logging_utils import get_logger
from ..performance import PerformanceProfile
from .errors import InvalidIndex, InvalidWaypoint, ProtectedWaypoint
from .navigation import derive_lone_waypoint, derive_sector
from .sector import Sector, flatten_sectors, split_sectors
from .transitions import TransitionInserter
from .waypoint import Waypoint

if TYPE_CHECKING:
    from ..reference.router import SectorRouter

LOGGER = get_logger(__name__)


class FlightPlan:
    """Mutable flight plan that keeps itself fully derived after every edit."""

    def __init__(
        self,
        waypoints: Optional[Iterable[Waypoint]] = None,
        *,
        cruise_altitude: Optional[int] = None,
        profile: Optional[PerformanceProfile] = None,
    ) -> None:
        _check_altitude(cruise_altitude)
        self._cruise_altitude = cruise_altitude
        self._profile = profile
        self._inserter = TransitionInserter()
        self._waypoints: List[Waypoint] = []
        self._sectors: List[Sector] = []
        self._dirty = False
        initial = list(waypoints or [])
        for waypoint in initial:
            _check_insertable(waypoint)
        self._commit(initial)
        self._dirty = False
        LOGGER.debug("Initialised FlightPlan with %s waypoints", len(self._waypoints))

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------
    @property
    def waypoints(self) -> List[Waypoint]:
        """Flattened waypoints in plan order (a copy)."""

        return list(self._waypoints)

    @property
    def sectors(self) -> List[Sector]:
        return list(self._sectors)

    @property
    def cruise_altitude(self) -> Optional[int]:
        """Explicitly selected cruise altitude, ``None`` when unset."""

        return self._cruise_altitude

    @property
    def effective_cruise_altitude(self) -> int:
        """Cruise altitude used for transitions, falling back to the profile's."""

        if self._cruise_altitude is not None:
            return self._cruise_altitude
        if self._profile is not None and self._profile.cruise_altitude is not None:
            return self._profile.cruise_altitude
        return 0

    @property
    def profile(self) -> Optional[PerformanceProfile]:
        return self._profile

    @property
    def transitions_enabled(self) -> bool:
        return self._profile is not None and self._profile.is_complete

    @property
    def is_dirty(self) -> bool:
        """True when the plan changed since it was created or last saved."""

        return self._dirty

    def mark_saved(self) -> None:
        self._dirty = False

    @property
    def name(self) -> str:
        """``START-END`` identifiers of the first sector, or ``new_plan``."""

        if not self._sectors:
            return "new_plan"
        first = self._sectors[0]
        return f"{first.start.ident}-{first.end.ident}"

    @property
    def total_distance(self) -> float:
        return self._waypoints[-1].cumulative_distance if self._waypoints else 0.0

    @property
    def total_duration(self) -> float:
        """Sum of known leg times in hours."""

        return sum(waypoint.ete_hours or 0.0 for waypoint in self._waypoints)

    def __len__(self) -> int:
        return len(self._waypoints)

    def __getitem__(self, index: int) -> Waypoint:
        return self._waypoints[index]

    def boundary_indices(self) -> List[int]:
        """Flat indices of every sector boundary, in plan order."""

        indices: List[int] = []
        position = 0
        for sector in self._sectors:
            if not indices:
                indices.append(position)
            position += len(sector.waypoints) - 1
            indices.append(position)
        return indices

    def sector_of(self, index: int) -> Optional[int]:
        """Index of the first sector containing flat ``index``."""

        self._check_index(index)
        position = 0
        for sector in self._sectors:
            end = position + len(sector.waypoints) - 1
            if position <= index <= end:
                return sector.index
            position = end
        return None

    def copy(self) -> "FlightPlan":
        """Independent plan with the same state; waypoints are immutable and shared."""

        clone = FlightPlan.__new__(FlightPlan)
        clone._cruise_altitude = self._cruise_altitude
        clone._profile = self._profile
        clone._inserter = self._inserter
        clone._waypoints = list(self._waypoints)
        clone._sectors = [
            Sector(index=sector.index, waypoints=list(sector.waypoints), report=sector.report)
            for sector in self._sectors
        ]
        clone._dirty = self._dirty
        return clone

    # ------------------------------------------------------------------
    # Edits
    # ------------------------------------------------------------------
    def insert_waypoint(self, after_index: int, waypoint: Waypoint) -> int:
        """Insert ``waypoint`` after flat ``after_index`` (``-1`` for the front).

        Returns the flat index at which the waypoint ended up once computed
        points were re-placed.
        """

        _check_insertable(waypoint)
        if not -1 <= after_index < len(self._waypoints):
            raise InvalidIndex(after_index, len(self._waypoints), allow_before_start=True)
        candidate = list(self._waypoints)
        candidate.insert(after_index + 1, waypoint)
        route_position = _route_position(candidate, after_index + 1)
        self._commit(candidate)
        index = self._flat_index_of_route_position(route_position)
        LOGGER.info("Inserted %s '%s' at index %s", waypoint.kind.value, waypoint.ident, index)
        return index

    def append_waypoint(self, waypoint: Waypoint) -> int:
        return self.insert_waypoint(len(self._waypoints) - 1, waypoint)

    def remove_waypoint(self, index: int) -> Waypoint:
        """Remove and return the waypoint at flat ``index``."""

        self._check_index(index)
        target = self._waypoints[index]
        if target.is_computed:
            raise ProtectedWaypoint(
                f"{target.ident} at index {index} is computed; change altitude or profile instead"
            )
        self._check_removable_boundary(index)
        candidate = self._waypoints[:index] + self._waypoints[index + 1 :]
        self._commit(candidate)
        LOGGER.info("Removed %s '%s' from index %s", target.kind.value, target.ident, index)
        return target.without_navigation()

    def move_waypoint(self, from_index: int, to_index: int) -> int:
        """Relocate the waypoint at ``from_index`` so it sits at ``to_index``.

        Returns the waypoint's flat index after recomputation.
        """

        self._check_index(from_index)
        self._check_index(to_index)
        moving = self._waypoints[from_index]
        if moving.is_computed:
            raise ProtectedWaypoint(f"{moving.ident} at index {from_index} is computed and cannot be moved")
        if from_index == to_index:
            return from_index
        candidate = list(self._waypoints)
        candidate.pop(from_index)
        candidate.insert(to_index, moving)
        route_position = _route_position(candidate, to_index)
        self._commit(candidate)
        index = self._flat_index_of_route_position(route_position)
        LOGGER.info("Moved '%s' from index %s to %s", moving.ident, from_index, index)
        return index

    def collapse_sector(self, sector_index: int) -> None:
        """Drop a sector: its intermediate waypoints and one of its boundaries.

        The first sector loses its leading boundary; every other sector loses
        its trailing boundary, joining its start to the following sector.
        """

        if not 0 <= sector_index < len(self._sectors):
            raise InvalidIndex(sector_index, len(self._sectors))
        boundaries = self.boundary_indices()
        start, end = boundaries[sector_index], boundaries[sector_index + 1]
        if sector_index == 0:
            drop = range(start, end)
        else:
            drop = range(start + 1, end + 1)
        candidate = [waypoint for index, waypoint in enumerate(self._waypoints) if index not in drop]
        name = self._sectors[sector_index].name
        self._commit(candidate)
        LOGGER.info("Collapsed sector %s (%s)", sector_index, name)

    def route_sector(self, sector_index: int, router: "SectorRouter", *, keep_intermediates: bool = True) -> int:
        """Fill a sector with the waypoints chosen by ``router``.

        Existing intermediates are routed through in order unless
        ``keep_intermediates`` is false, in which case they are replaced.
        Returns the number of intermediates the sector ends up with.
        """

        if not 0 <= sector_index < len(self._sectors):
            raise InvalidIndex(sector_index, len(self._sectors))
        sector = self._sectors[sector_index]
        via = [waypoint.without_navigation() for waypoint in sector.intermediates] if keep_intermediates else []
        route = router.route(sector.start, sector.end, via)
        for waypoint in route:
            _check_insertable(waypoint)
        boundaries = self.boundary_indices()
        start, end = boundaries[sector_index], boundaries[sector_index + 1]
        candidate = self._waypoints[: start + 1] + list(route) + self._waypoints[end:]
        self._commit(candidate)
        LOGGER.info("Routed sector %s (%s) through %s waypoints", sector_index, sector.name, len(route))
        return len(route)

    def set_cruise_altitude(self, altitude: Optional[int]) -> None:
        """Select a cruise altitude in feet; ``None`` falls back to the profile."""

        _check_altitude(altitude)
        previous = self._cruise_altitude
        self._commit(self._waypoints, cruise_altitude=altitude)
        LOGGER.info("Cruise altitude changed from %s to %s", previous, altitude)

    def set_performance_profile(self, profile: Optional[PerformanceProfile]) -> None:
        """Select the aircraft profile used for transitions and leg times."""

        self._commit(self._waypoints, profile=profile)
        LOGGER.info("Performance profile set to %s", profile.name if profile else None)

    def recompute_all(self) -> None:
        """Re-derive every computed point and navigation field.

        Idempotent: calling it repeatedly leaves the plan unchanged.
        """

        self._commit(self._waypoints, mark_dirty=False)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------
    _UNSET = object()

    def _commit(
        self,
        candidate: Sequence[Waypoint],
        *,
        cruise_altitude: object = _UNSET,
        profile: object = _UNSET,
        mark_dirty: bool = True,
    ) -> None:
        """Fully recompute ``candidate`` and swap it in as the plan state."""

        new_altitude = self._cruise_altitude if cruise_altitude is FlightPlan._UNSET else cruise_altitude
        new_profile = self._profile if profile is FlightPlan._UNSET else profile
        waypoints, sectors = self._rebuild(candidate, new_altitude, new_profile)  # type: ignore[arg-type]

        changed = waypoints != self._waypoints or new_altitude != self._cruise_altitude or new_profile != self._profile
        self._waypoints = waypoints
        self._sectors = sectors
        self._cruise_altitude = new_altitude  # type: ignore[assignment]
        self._profile = new_profile  # type: ignore[assignment]
        if mark_dirty and changed:
            self._dirty = True

    def _rebuild(
        self,
        candidate: Sequence[Waypoint],
        cruise_altitude: Optional[int],
        profile: Optional[PerformanceProfile],
    ) -> Tuple[List[Waypoint], List[Sector]]:
        runs = split_sectors(candidate)
        if not runs:
            lone = [derive_lone_waypoint(waypoint) for waypoint in candidate if not waypoint.is_computed]
            return lone, []

        effective_altitude = cruise_altitude
        if effective_altitude is None:
            effective_altitude = profile.cruise_altitude if profile and profile.cruise_altitude else 0

        if profile is None or not profile.is_complete:
            LOGGER.warning(
                "Missing performance profile; no automatic transitions computed for %s sectors",
                len(runs),
            )

        placed_runs = []
        reports = []
        for index, run in enumerate(runs):
            placed, report = self._inserter.apply(Sector(index=index, waypoints=run), effective_altitude, profile)
            placed_runs.append(placed)
            reports.append(report)

        derived_runs: List[List[Waypoint]] = []
        start = derive_lone_waypoint(placed_runs[0][0])
        for run in placed_runs:
            derived = derive_sector(run, start, effective_altitude, profile)
            derived_runs.append(derived)
            start = derived[-1]

        sectors = [
            Sector(index=index, waypoints=run, report=report)
            for index, (run, report) in enumerate(zip(derived_runs, reports))
        ]
        LOGGER.debug(
            "Recomputed plan: %s sectors, %s computed waypoints",
            len(sectors),
            sum(len(sector.computed) for sector in sectors),
        )
        return flatten_sectors(derived_runs), sectors

    def _check_index(self, index: int) -> None:
        if not 0 <= index < len(self._waypoints):
            raise InvalidIndex(index, len(self._waypoints))

    def _check_removable_boundary(self, index: int) -> None:
        """A start/end airport may only go once its sector has no intermediates.

        Non-airport plan ends bound a sector too, but stay removable so an
        appended or prepended fix can be taken off again.
        """

        if not self._sectors or not self._waypoints[index].is_airport:
            return
        boundaries = self.boundary_indices()
        if index == boundaries[0]:
            sector = self._sectors[0]
        elif index == boundaries[-1]:
            sector = self._sectors[-1]
        else:
            return
        if sector.intermediates:
            raise ProtectedWaypoint(
                f"{self._waypoints[index].ident} bounds sector {sector.name} which still has "
                f"{len(sector.intermediates)} waypoints; collapse the sector to remove it"
            )

    def _flat_index_of_route_position(self, route_position: int) -> int:
        """Flat index of the ``route_position``-th non-computed waypoint."""

        seen = -1
        for index, waypoint in enumerate(self._waypoints):
            if not waypoint.is_computed:
                seen += 1
                if seen == route_position:
                    return index
        raise IndexError(route_position)


def _route_position(waypoints: Sequence[Waypoint], index: int) -> int:
    """Number of non-computed waypoints before ``index``."""

    return sum(1 for waypoint in waypoints[:index] if not waypoint.is_computed)


def _check_insertable(waypoint: Waypoint) -> None:
    if waypoint.is_computed:
        raise InvalidWaypoint("Computed waypoints are placed by the plan and cannot be inserted")


def _check_altitude(altitude: Optional[int]) -> None:
    if altitude is not None and altitude < 0:
        raise ValueError(f"Cruise altitude must be non-negative, got {altitude}")
