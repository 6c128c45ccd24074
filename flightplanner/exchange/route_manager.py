"""Mini README: Export plans in FlightGear's route-manager format.

Structure:
    * build_route_manager_tree - PropertyList element for a PlanSnapshot.
    * export_route_manager - write that tree to disk.

The simulator loads one departure/destination pair and a flat route, so
each sector contributes its airports and its intermediate waypoints,
computed TOC/TOD points included, with the planned altitude as an "at"
restriction.
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Optional

from ..logging_utils import get_logger
from ..performance import PerformanceProfile
from ..plan import PlanSnapshot, Waypoint

LOGGER = get_logger(__name__)


def _typed(parent: ET.Element, tag: str, value_type: str, text: str) -> ET.Element:
    element = ET.SubElement(parent, tag, {"type": value_type})
    element.text = text
    return element


def _airport_element(parent: ET.Element, tag: str, waypoint: Waypoint) -> None:
    element = ET.SubElement(parent, tag)
    _typed(element, "airport", "string", waypoint.ident)


def _route_waypoint(parent: ET.Element, ordinal: int, waypoint: Waypoint) -> None:
    wp = ET.SubElement(parent, "wp", {"n": str(ordinal)})
    _typed(wp, "type", "string", "basic" if waypoint.is_computed else "navaid")
    _typed(wp, "ident", "string", waypoint.ident)
    altitude = waypoint.planned_altitude
    if altitude is None and waypoint.altitude is not None:
        altitude = float(waypoint.altitude)
    if altitude is not None:
        _typed(wp, "alt-restrict", "string", "at")
        _typed(wp, "altitude-ft", "double", f"{altitude:.0f}")
    if waypoint.ete_hours:
        _typed(wp, "speed", "double", f"{waypoint.leg_distance / waypoint.ete_hours:.0f}")
    _typed(wp, "lat", "double", f"{waypoint.position.latitude:.8f}")
    _typed(wp, "lon", "double", f"{waypoint.position.longitude:.8f}")


def build_route_manager_tree(
    snapshot: PlanSnapshot, profile: Optional[PerformanceProfile] = None
) -> ET.Element:
    """Return the ``PropertyList`` root describing ``snapshot``."""

    root = ET.Element("PropertyList")
    _typed(root, "version", "int", "2")
    _typed(root, "estimated-duration-minutes", "int", f"{snapshot.total_duration * 60.0:.0f}")

    for sector in snapshot.sectors:
        members = snapshot.waypoints[sector.start_index : sector.end_index + 1]
        start, end = members[0], members[-1]
        if start.is_airport:
            _airport_element(root, "departure", start)
        if end.is_airport:
            _airport_element(root, "destination", end)

        cruise = ET.SubElement(root, "cruise")
        _typed(cruise, "altitude-ft", "int", str(snapshot.cruise_altitude))
        if profile is not None and profile.cruise_speed:
            _typed(cruise, "knots", "int", f"{profile.cruise_speed:.0f}")

        route = ET.SubElement(root, "route")
        ordinal = 0
        last = len(members) - 1
        for position, waypoint in enumerate(members):
            if waypoint.is_airport and position in (0, last):
                continue
            _route_waypoint(route, ordinal, waypoint)
            ordinal += 1
    return root


def export_route_manager(
    snapshot: PlanSnapshot,
    destination: Path,
    profile: Optional[PerformanceProfile] = None,
) -> Path:
    """Write the route-manager XML for ``snapshot`` to ``destination``."""

    destination.parent.mkdir(parents=True, exist_ok=True)
    tree = ET.ElementTree(build_route_manager_tree(snapshot, profile))
    ET.indent(tree)
    tree.write(destination, encoding="utf-8", xml_declaration=True)
    LOGGER.info("Exported route-manager plan '%s' to %s", snapshot.name, destination)
    return destination
