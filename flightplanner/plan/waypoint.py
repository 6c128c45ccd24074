"""Mini README: Waypoint value type for flight plans.

Structure:
    * WaypointKind - closed set of waypoint tags.
    * TransitionRole - climb (TOC) or descent (TOD) for computed points.
    * TransitionRef - lookup key tying a computed point to its sector.
    * Waypoint - frozen dataclass holding identity, position and the
      navigation fields derived on every recompute.

Waypoints are immutable. The plan engine produces fresh instances with
updated navigation fields via ``dataclasses.replace`` each time it
recomputes, so any list of waypoints handed to a caller is a stable
snapshot.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Dict, Optional

from ..geo import Coordinate


class WaypointKind(str, Enum):
    """Tags describing where a waypoint came from."""

    AIRPORT = "airport"
    NAVAID = "navaid"
    FIX = "fix"
    COMPUTED = "computed"

    @classmethod
    def from_str(cls, value: str) -> "WaypointKind":
        """Coerce arbitrary casing into a valid waypoint kind."""

        try:
            return cls(value.strip().lower())
        except (ValueError, AttributeError) as error:
            raise ValueError(f"Unsupported waypoint kind: {value}") from error


class TransitionRole(str, Enum):
    """Which end of the cruise segment a computed waypoint marks."""

    CLIMB = "toc"
    DESCENT = "tod"


@dataclass(frozen=True, slots=True)
class TransitionRef:
    """Back-reference from a computed waypoint to the sector it serves."""

    sector_index: int
    role: TransitionRole


_TRANSITION_NAMES = {
    TransitionRole.CLIMB: ("TOC", "Top of climb"),
    TransitionRole.DESCENT: ("TOD", "Top of descent"),
}


@dataclass(frozen=True, slots=True)
class Waypoint:
    """Single plan entry.

    ``altitude`` is the target altitude in feet (airport elevation for
    airports). The remaining trailing fields are derived by the plan and
    reset whenever a waypoint is handed back to it:

    * ``heading`` - true course from the previous waypoint, ``None`` for the
      first waypoint and for zero-length legs.
    * ``leg_distance`` / ``cumulative_distance`` - nautical miles.
    * ``ete_hours`` - time for the leg into this waypoint.
    * ``planned_altitude`` - expected altitude from the climb/descent profile.
    """

    ident: str
    kind: WaypointKind
    position: Coordinate
    altitude: Optional[int] = None
    name: str = ""
    frequency: Optional[float] = None
    transition: Optional[TransitionRef] = None
    heading: Optional[float] = None
    leg_distance: float = 0.0
    cumulative_distance: float = 0.0
    ete_hours: Optional[float] = None
    planned_altitude: Optional[float] = None

    def __post_init__(self) -> None:
        if self.kind is WaypointKind.COMPUTED and self.transition is None:
            raise ValueError("Computed waypoints require a transition reference")
        if self.kind is not WaypointKind.COMPUTED and self.transition is not None:
            raise ValueError("Only computed waypoints may carry a transition reference")

    @classmethod
    def airport(
        cls, ident: str, position: Coordinate, elevation: int = 0, name: str = ""
    ) -> "Waypoint":
        return cls(ident=ident, kind=WaypointKind.AIRPORT, position=position, altitude=elevation, name=name)

    @classmethod
    def free(cls, label: str, position: Coordinate, altitude: Optional[int] = None) -> "Waypoint":
        """User placed point identified only by its label."""

        return cls(ident=label, kind=WaypointKind.FIX, position=position, altitude=altitude, name=label)

    @classmethod
    def computed(cls, ref: TransitionRef, position: Coordinate, altitude: int) -> "Waypoint":
        ident, name = _TRANSITION_NAMES[ref.role]
        return cls(
            ident=ident,
            kind=WaypointKind.COMPUTED,
            position=position,
            altitude=altitude,
            name=name,
            transition=ref,
        )

    @property
    def is_computed(self) -> bool:
        return self.kind is WaypointKind.COMPUTED

    @property
    def is_airport(self) -> bool:
        return self.kind is WaypointKind.AIRPORT

    @property
    def role(self) -> Optional[TransitionRole]:
        return self.transition.role if self.transition else None

    @property
    def altitude_or_ground(self) -> int:
        return self.altitude if self.altitude is not None else 0

    def without_navigation(self) -> "Waypoint":
        """Return a copy with every derived field cleared."""

        return replace(
            self,
            heading=None,
            leg_distance=0.0,
            cumulative_distance=0.0,
            ete_hours=None,
            planned_altitude=None,
        )

    def same_place(self, other: "Waypoint") -> bool:
        """True when both waypoints share identity and position."""

        return (
            self.ident == other.ident
            and self.kind is other.kind
            and self.position == other.position
        )

    def as_dict(self) -> Dict[str, object]:
        """Export the waypoint with serialisable values."""

        return {
            "ident": self.ident,
            "kind": self.kind.value,
            "name": self.name,
            "latitude": self.position.latitude,
            "longitude": self.position.longitude,
            "altitude": self.altitude,
            "frequency": self.frequency,
            "transition": (
                {"sector_index": self.transition.sector_index, "role": self.transition.role.value}
                if self.transition
                else None
            ),
            "heading": self.heading,
            "leg_distance": self.leg_distance,
            "cumulative_distance": self.cumulative_distance,
            "ete_hours": self.ete_hours,
            "planned_altitude": self.planned_altitude,
        }
