"""Mini README: Spherical-earth geometry used by the plan engine.

Exports the ``Coordinate`` value type and the pure great-circle helpers.
Nothing in this package keeps state, so it is safe to call from any thread.
"""

from .geomath import (
    COINCIDENT_TOLERANCE_NM,
    EARTH_RADIUS_NM,
    Coordinate,
    DegenerateGeometry,
    bearing_deg,
    destination_point,
    distance_nm,
    midpoint,
)

__all__ = [
    "COINCIDENT_TOLERANCE_NM",
    "Coordinate",
    "DegenerateGeometry",
    "EARTH_RADIUS_NM",
    "bearing_deg",
    "destination_point",
    "distance_nm",
    "midpoint",
]
