"""Mini README: Great-circle helpers on a spherical earth.

Structure:
    * Coordinate - immutable latitude/longitude pair in degrees.
    * DegenerateGeometry - raised when a bearing is requested between
      coincident points.
    * distance_nm / bearing_deg / destination_point / midpoint - pure
      functions used by the plan engine to derive leg geometry.

All distances are nautical miles on a sphere of radius 3440.065 nm, the
usual aviation approximation. Bearings are true (no magnetic variation)
and normalised into [0, 360).
"""

from __future__ import annotations

import math
from dataclasses import dataclass

EARTH_RADIUS_NM = 3440.065
COINCIDENT_TOLERANCE_NM = 1e-9


class DegenerateGeometry(ValueError):
    """A bearing was requested between two coincident coordinates."""


def _normalise_longitude(longitude: float) -> float:
    """Wrap a longitude into the half-open range (-180, 180]."""

    wrapped = math.fmod(longitude + 180.0, 360.0)
    if wrapped < 0:
        wrapped += 360.0
    wrapped -= 180.0
    if wrapped == -180.0:
        return 180.0
    return wrapped


@dataclass(frozen=True, slots=True)
class Coordinate:
    """Geographic position in decimal degrees."""

    latitude: float
    longitude: float

    def __post_init__(self) -> None:
        if not (math.isfinite(self.latitude) and math.isfinite(self.longitude)):
            raise ValueError(f"Coordinate values must be finite: {self.latitude}, {self.longitude}")
        if not -90.0 <= self.latitude <= 90.0:
            raise ValueError(f"Latitude {self.latitude} outside [-90, 90]")
        object.__setattr__(self, "longitude", _normalise_longitude(float(self.longitude)))
        object.__setattr__(self, "latitude", float(self.latitude))

    def distance_to(self, other: "Coordinate") -> float:
        return distance_nm(self, other)

    def bearing_to(self, other: "Coordinate") -> float:
        return bearing_deg(self, other)

    def coordinate_at(self, bearing: float, distance: float) -> "Coordinate":
        return destination_point(self, bearing, distance)

    def as_tuple(self) -> tuple[float, float]:
        return (self.latitude, self.longitude)


def distance_nm(a: Coordinate, b: Coordinate) -> float:
    """Great-circle distance between two coordinates using the haversine formula."""

    if a == b:
        return 0.0
    lat1 = math.radians(a.latitude)
    lat2 = math.radians(b.latitude)
    d_lat = lat2 - lat1
    d_lon = math.radians(b.longitude - a.longitude)
    h = math.sin(d_lat / 2.0) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(d_lon / 2.0) ** 2
    # Rounding can push h fractionally outside [0, 1] for near antipodal points.
    h = min(1.0, max(0.0, h))
    return 2.0 * EARTH_RADIUS_NM * math.asin(math.sqrt(h))


def bearing_deg(a: Coordinate, b: Coordinate) -> float:
    """Initial great-circle bearing from ``a`` to ``b`` in degrees true.

    Raises ``DegenerateGeometry`` when the two points coincide, since no
    direction is defined between them.
    """

    if distance_nm(a, b) <= COINCIDENT_TOLERANCE_NM:
        raise DegenerateGeometry(f"No bearing between coincident points {a.as_tuple()}")
    lat1 = math.radians(a.latitude)
    lat2 = math.radians(b.latitude)
    d_lon = math.radians(b.longitude - a.longitude)
    y = math.sin(d_lon) * math.cos(lat2)
    x = math.cos(lat1) * math.sin(lat2) - math.sin(lat1) * math.cos(lat2) * math.cos(d_lon)
    bearing = math.degrees(math.atan2(y, x)) % 360.0
    if bearing >= 360.0:
        bearing = 0.0
    return bearing


def destination_point(origin: Coordinate, bearing: float, distance: float) -> Coordinate:
    """Project ``distance`` nautical miles from ``origin`` along ``bearing``."""

    if distance == 0:
        return origin
    angular = distance / EARTH_RADIUS_NM
    theta = math.radians(bearing)
    lat1 = math.radians(origin.latitude)
    lon1 = math.radians(origin.longitude)

    sin_lat2 = math.sin(lat1) * math.cos(angular) + math.cos(lat1) * math.sin(angular) * math.cos(theta)
    lat2 = math.asin(min(1.0, max(-1.0, sin_lat2)))
    lon2 = lon1 + math.atan2(
        math.sin(theta) * math.sin(angular) * math.cos(lat1),
        math.cos(angular) - math.sin(lat1) * math.sin(lat2),
    )
    return Coordinate(latitude=math.degrees(lat2), longitude=math.degrees(lon2))


def midpoint(a: Coordinate, b: Coordinate) -> Coordinate:
    """Point halfway along the great circle between ``a`` and ``b``."""

    try:
        heading = bearing_deg(a, b)
    except DegenerateGeometry:
        return a
    return destination_point(a, heading, distance_nm(a, b) / 2.0)
