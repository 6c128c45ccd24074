"""Mini README: Reference database boundary for airports, navaids and fixes.

Structure:
    * ReferenceRecord - one navigation database entry.
    * ReferenceDatabase - abstract read-only lookup used by the front end.
    * InMemoryReferenceDatabase - list backed implementation with demo data.
    * waypoint_from_record - build a plan waypoint from a selected record.

Parsing the simulator's airport/navaid files is left to loaders that feed
``InMemoryReferenceDatabase``; the plan engine only ever receives
waypoints.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

from ..geo import Coordinate, distance_nm
from ..logging_utils import get_logger
from ..plan import Waypoint, WaypointKind

LOGGER = get_logger(__name__)

VOR_BAND_MHZ = (108.0, 118.0)


@dataclass(frozen=True, slots=True)
class ReferenceRecord:
    """Airport, navaid or fix from the navigation database."""

    ident: str
    name: str
    kind: WaypointKind
    position: Coordinate
    elevation: int = 0
    frequency: Optional[float] = None

    def __post_init__(self) -> None:
        if self.kind is WaypointKind.COMPUTED:
            raise ValueError("Reference records cannot be computed waypoints")

    @property
    def is_vor(self) -> bool:
        """Navaids tuned in the VHF band (108-118 MHz) are treated as VORs."""

        return (
            self.kind is WaypointKind.NAVAID
            and self.frequency is not None
            and VOR_BAND_MHZ[0] <= self.frequency < VOR_BAND_MHZ[1]
        )


class ReferenceDatabase(ABC):
    """Synchronous read-only lookup of navigation records."""

    @abstractmethod
    def find_by_id(self, ident: str) -> List[ReferenceRecord]:
        """Return every record whose identifier matches exactly."""

    @abstractmethod
    def search(self, partial: str, *, limit: int = 20) -> List[ReferenceRecord]:
        """Return records whose identifier or name contains ``partial``."""

    @abstractmethod
    def find_near(self, position: Coordinate, radius_nm: float) -> List[ReferenceRecord]:
        """Return records within ``radius_nm`` of ``position``, nearest first."""

    def get(self, ident: str, kind: Optional[WaypointKind] = None) -> ReferenceRecord:
        """Single record lookup raising ``KeyError`` when nothing matches."""

        matches = [record for record in self.find_by_id(ident) if kind is None or record.kind is kind]
        if not matches:
            raise KeyError(f"No reference record '{ident}'")
        return matches[0]


class InMemoryReferenceDatabase(ReferenceDatabase):
    """Reference database holding its records in memory."""

    def __init__(self, records: Optional[Iterable[ReferenceRecord]] = None) -> None:
        if records is None:
            records = self._build_demo_records()
        self._records: List[ReferenceRecord] = list(records)
        self._by_id: Dict[str, List[ReferenceRecord]] = {}
        for record in self._records:
            self._by_id.setdefault(record.ident.upper(), []).append(record)
        LOGGER.debug("Initialised reference database with %s records", len(self._records))

    @staticmethod
    def _build_demo_records() -> List[ReferenceRecord]:
        """Deterministic records covering the Sydney to Brisbane corridor."""

        return [
            ReferenceRecord("YSSY", "Sydney Kingsford Smith", WaypointKind.AIRPORT, Coordinate(-33.9461, 151.1772), 21),
            ReferenceRecord("YSBK", "Sydney Bankstown", WaypointKind.AIRPORT, Coordinate(-33.9244, 150.9883), 29),
            ReferenceRecord("YWLM", "Williamtown", WaypointKind.AIRPORT, Coordinate(-32.7950, 151.8344), 31),
            ReferenceRecord("YCFS", "Coffs Harbour", WaypointKind.AIRPORT, Coordinate(-30.3206, 153.1161), 18),
            ReferenceRecord("YBBN", "Brisbane", WaypointKind.AIRPORT, Coordinate(-27.3842, 153.1175), 13),
            ReferenceRecord("YMML", "Melbourne", WaypointKind.AIRPORT, Coordinate(-37.6733, 144.8433), 434),
            ReferenceRecord("SY", "Sydney VOR", WaypointKind.NAVAID, Coordinate(-33.9433, 151.1794), 21, 112.1),
            ReferenceRecord("WLM", "Williamtown VOR", WaypointKind.NAVAID, Coordinate(-32.7936, 151.8381), 31, 113.5),
            ReferenceRecord("CH", "Coffs Harbour VOR", WaypointKind.NAVAID, Coordinate(-30.3225, 153.1164), 18, 114.1),
            ReferenceRecord("BN", "Brisbane VOR", WaypointKind.NAVAID, Coordinate(-27.3833, 153.1300), 13, 113.2),
            ReferenceRecord("TAREE", "Taree fix", WaypointKind.FIX, Coordinate(-31.8883, 152.5139)),
        ]

    def find_by_id(self, ident: str) -> List[ReferenceRecord]:
        return list(self._by_id.get(ident.strip().upper(), []))

    def search(self, partial: str, *, limit: int = 20) -> List[ReferenceRecord]:
        needle = partial.strip().lower()
        if not needle:
            return []
        matches = [
            record
            for record in self._records
            if needle in record.ident.lower() or needle in record.name.lower()
        ]
        return sorted(matches, key=lambda record: (not record.ident.lower().startswith(needle), record.ident))[:limit]

    def find_near(self, position: Coordinate, radius_nm: float) -> List[ReferenceRecord]:
        if radius_nm < 0:
            raise ValueError("Search radius must be non-negative")
        ranged = [
            (distance_nm(position, record.position), record)
            for record in self._records
        ]
        return [record for distance, record in sorted(ranged, key=lambda item: item[0]) if distance <= radius_nm]


def waypoint_from_record(record: ReferenceRecord, altitude: Optional[int] = None) -> Waypoint:
    """Create a plan waypoint for a database record.

    Airports always use their elevation; navaids and fixes take the optional
    target ``altitude``.
    """

    return Waypoint(
        ident=record.ident,
        kind=record.kind,
        position=record.position,
        altitude=record.elevation if record.kind is WaypointKind.AIRPORT else altitude,
        name=record.name,
        frequency=record.frequency,
    )
