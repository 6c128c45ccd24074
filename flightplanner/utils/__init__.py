"""Mini README: Utility helpers for the flight planner.

Currently exports display formatting used by the web front end.
"""

from .formatting import (
    format_distance,
    format_hours,
    format_latitude,
    format_longitude,
    format_speed,
    parse_angle,
)

__all__ = [
    "format_distance",
    "format_hours",
    "format_latitude",
    "format_longitude",
    "format_speed",
    "parse_angle",
]
