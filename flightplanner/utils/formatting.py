"""Mini README: Display formatting for plan values.

Structure:
    * format_hours - decimal hours as ``HH:MM``.
    * format_distance / format_speed - nautical values in Nm, Mi or Km units.
    * format_latitude / format_longitude - degrees, minutes and seconds.
    * parse_angle - inverse of the lat/long formatters, also accepting
      plain decimal degrees.
"""

from __future__ import annotations

import re
from typing import Optional

_CONVERSIONS = {
    "Nm": (1.0, "Kts"),
    "Mi": (6076.12 / 5280.0, "Mph"),
    "Km": (1.852, "Kph"),
}
_ANGLE_TOKENS = re.compile(r"[\s°'\"]+")


def _conversion(unit: str) -> tuple[float, str]:
    try:
        return _CONVERSIONS[unit]
    except KeyError as error:
        raise ValueError(f"Unsupported unit '{unit}', expected one of {sorted(_CONVERSIONS)}") from error


def format_hours(hours: Optional[float]) -> str:
    """Format decimal hours rounded to the nearest minute, e.g. ``05:30``."""

    if hours is None:
        return "--:--"
    total_minutes = int(round(hours * 60.0))
    return f"{total_minutes // 60:02d}:{total_minutes % 60:02d}"


def format_distance(distance_nm: float, unit: str = "Nm") -> str:
    factor, _ = _conversion(unit)
    return f"{distance_nm * factor:.1f}{unit}"


def format_speed(knots: float, unit: str = "Nm") -> str:
    factor, label = _conversion(unit)
    return f"{knots * factor:.0f}{label}"


def _format_angle(value: float, positive: str, negative: str) -> str:
    hemisphere = positive if value >= 0 else negative
    total_seconds = round(abs(value) * 3600.0)
    degrees, remainder = divmod(total_seconds, 3600)
    minutes, seconds = divmod(remainder, 60)
    return f"{degrees:02d}°{minutes:02d}'{seconds:02d}\"{hemisphere}"


def format_latitude(latitude: float) -> str:
    return _format_angle(latitude, "N", "S")


def format_longitude(longitude: float) -> str:
    return _format_angle(longitude, "E", "W")


def parse_angle(text: str, *, maximum: float = 180.0) -> float:
    """Parse ``"33°56'46\\"S"`` style text or plain decimal degrees."""

    work = text.strip()
    try:
        value = float(work)
    except ValueError:
        value = None
    if value is not None:
        if abs(value) > maximum:
            raise ValueError(f"Angle {value} out of range")
        return value

    sign = 1.0
    if work and work[-1].upper() in "NSEW":
        sign = -1.0 if work[-1].upper() in "SW" else 1.0
        work = work[:-1]
    tokens = [token for token in _ANGLE_TOKENS.split(work) if token]
    if not tokens or len(tokens) > 3:
        raise ValueError(f"Invalid coordinate format: {text!r}")
    try:
        parts = [float(token) for token in tokens]
    except ValueError as error:
        raise ValueError(f"Invalid coordinate format: {text!r}") from error
    parts += [0.0] * (3 - len(parts))
    degrees, minutes, seconds = parts
    if degrees > maximum or minutes >= 60 or seconds >= 60:
        raise ValueError(f"Angle out of range: {text!r}")
    return sign * (degrees + minutes / 60.0 + seconds / 3600.0)
