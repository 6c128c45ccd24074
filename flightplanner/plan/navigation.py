"""Mini README: Derivation of per-waypoint navigation fields.

Structure:
    * derive_sector - fill heading, distance, ETE and planned altitude for the
      waypoints of one sector in a single left-to-right pass.
    * derive_lone_waypoint - fields for a plan holding a single waypoint.

Each waypoint's fields depend only on itself, its predecessor and the flight
phase reached so far in the sector (climb until TOC, level until TOD,
descent afterwards).
"""

from __future__ import annotations

from dataclasses import replace
from enum import Enum
from typing import List, Optional

from ..geo import DegenerateGeometry, bearing_deg, distance_nm
from ..performance import PerformanceProfile
from .waypoint import TransitionRole, Waypoint


class FlightPhase(str, Enum):
    CLIMB = "climb"
    CRUISE = "cruise"
    DESCENT = "descent"


def _leg_speed(phase: FlightPhase, profile: Optional[PerformanceProfile]) -> Optional[float]:
    if profile is None:
        return None
    if phase is FlightPhase.CLIMB:
        speed = profile.climb_speed
    elif phase is FlightPhase.DESCENT:
        speed = profile.descent_speed
    else:
        speed = profile.level_speed
    return speed if speed > 0 else None


def _planned_altitude(
    distance_from_start: float,
    sector_length: float,
    start_altitude: int,
    end_altitude: int,
    cruise_altitude: int,
    profile: PerformanceProfile,
) -> float:
    """Lowest of the cruise level, the climb line and the descent line."""

    climb_per_nm = profile.climb_rate / (profile.climb_speed / 60.0)
    descent_per_nm = profile.descent_rate / (profile.descent_speed / 60.0)
    climbing = start_altitude + climb_per_nm * distance_from_start
    descending = end_altitude + descent_per_nm * max(0.0, sector_length - distance_from_start)
    return min(float(cruise_altitude), climbing, descending)


def derive_sector(
    waypoints: List[Waypoint],
    start: Waypoint,
    cruise_altitude: int,
    profile: Optional[PerformanceProfile],
) -> List[Waypoint]:
    """Return ``waypoints`` with navigation fields filled in.

    ``start`` replaces ``waypoints[0]``: it is the already derived boundary
    shared with the previous sector (or the plan start).
    """

    sector_length = sum(
        distance_nm(previous.position, current.position) for previous, current in zip(waypoints, waypoints[1:])
    )
    start_altitude = start.altitude_or_ground
    end_altitude = waypoints[-1].altitude_or_ground
    shaped = profile is not None and profile.is_complete and cruise_altitude > 0
    phase = FlightPhase.CLIMB if cruise_altitude > start_altitude else FlightPhase.CRUISE

    derived = [start]
    travelled = 0.0
    last = len(waypoints) - 1
    for position, current in enumerate(waypoints[1:], start=1):
        previous = derived[-1]
        leg = distance_nm(previous.position, current.position)
        try:
            heading: Optional[float] = bearing_deg(previous.position, current.position)
        except DegenerateGeometry:
            heading = None
        speed = _leg_speed(phase, profile)
        travelled += leg
        is_boundary = position == last
        if is_boundary or not shaped:
            planned: Optional[float] = float(current.altitude) if current.altitude is not None else None
            if is_boundary:
                planned = float(end_altitude)
        else:
            planned = _planned_altitude(
                travelled, sector_length, start_altitude, end_altitude, cruise_altitude, profile
            )
        derived.append(
            replace(
                current,
                heading=heading,
                leg_distance=leg,
                cumulative_distance=previous.cumulative_distance + leg,
                ete_hours=leg / speed if speed else None,
                planned_altitude=planned,
            )
        )
        if current.role is TransitionRole.CLIMB:
            phase = FlightPhase.CRUISE
        elif current.role is TransitionRole.DESCENT:
            phase = FlightPhase.DESCENT
    return derived


def derive_lone_waypoint(waypoint: Waypoint) -> Waypoint:
    """First waypoint of a plan: no previous leg."""

    return replace(waypoint.without_navigation(), planned_altitude=float(waypoint.altitude_or_ground))
