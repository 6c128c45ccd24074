"""Mini README: Aircraft performance figures used to place transitions.

Structure:
    * PerformanceProfile - frozen dataclass with climb and descent figures.

Profiles are shared, read-only values: many plans (and threads) may hold the
same instance. A profile whose climb or descent figures are zero is legal but
"incomplete" and disables automatic top of climb / top of descent points.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Dict, Optional


@dataclass(frozen=True, slots=True)
class PerformanceProfile:
    """Climb and descent performance of an aircraft type.

    Rates are feet per minute, speeds are knots treated as groundspeed.
    ``cruise_speed`` and ``cruise_altitude`` are optional extras used for
    leg timing and as the default plan altitude.
    """

    name: str
    climb_rate: float
    climb_speed: float
    descent_rate: float
    descent_speed: float
    cruise_speed: Optional[float] = None
    cruise_altitude: Optional[int] = None

    def __post_init__(self) -> None:
        for field_name in ("climb_rate", "climb_speed", "descent_rate", "descent_speed"):
            value = getattr(self, field_name)
            if value is None or not math.isfinite(value) or value < 0:
                raise ValueError(f"{field_name} must be a non-negative number, got {value!r}")
        if self.cruise_speed is not None and (not math.isfinite(self.cruise_speed) or self.cruise_speed < 0):
            raise ValueError(f"cruise_speed must be non-negative, got {self.cruise_speed!r}")
        if self.cruise_altitude is not None and self.cruise_altitude < 0:
            raise ValueError(f"cruise_altitude must be non-negative, got {self.cruise_altitude!r}")

    @property
    def is_complete(self) -> bool:
        """True when every climb and descent figure is strictly positive."""

        return min(self.climb_rate, self.climb_speed, self.descent_rate, self.descent_speed) > 0

    @property
    def level_speed(self) -> float:
        """Speed flown between top of climb and top of descent."""

        return self.cruise_speed or self.climb_speed

    def climb_distance(self, altitude_gain: float) -> float:
        """Nautical miles needed to climb ``altitude_gain`` feet."""

        if altitude_gain <= 0:
            return 0.0
        return altitude_gain / self.climb_rate * (self.climb_speed / 60.0)

    def descent_distance(self, altitude_loss: float) -> float:
        """Nautical miles needed to descend ``altitude_loss`` feet."""

        if altitude_loss <= 0:
            return 0.0
        return altitude_loss / self.descent_rate * (self.descent_speed / 60.0)

    def as_dict(self) -> Dict[str, object]:
        """Export the profile with serialisable values."""

        return {
            "name": self.name,
            "climb_rate": self.climb_rate,
            "climb_speed": self.climb_speed,
            "descent_rate": self.descent_rate,
            "descent_speed": self.descent_speed,
            "cruise_speed": self.cruise_speed,
            "cruise_altitude": self.cruise_altitude,
        }
