"""Mini README: Native plan file reader and writer.

Structure:
    * write_plan - serialise a PlanSnapshot to the ``<plan>`` XML format.
    * read_plan - rebuild a FlightPlan from that format.
    * PlanFormatError - raised for malformed documents.

Layout::

    <plan name="YSSY-YBBN" aircraft="Boeing 737" altitude="36000">
      <sector>
        <from-airport id="YSSY"/>
        <waypoint name="..." type="NAVAID" id="WLM" latitude=".." longitude=".." elevation=".."/>
        <to-airport id="YBBN"/>
      </sector>
    </plan>

Boundaries that are not airports are written as ordinary ``waypoint``
elements. A plan too short to have a sector keeps its lone waypoint as a
bare ``waypoint`` child of ``<plan>``. The ``altitude`` attribute is only
written when a cruise altitude was selected explicitly. TOC/TOD entries are
written for other tools but ignored on read, since the plan recomputes them.
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from pathlib import Path
from typing import List, Optional, Union

from ..geo import Coordinate
from ..logging_utils import get_logger
from ..performance import ProfileHangar
from ..plan import FlightPlan, PlanSnapshot, TransitionRole, Waypoint, WaypointKind
from ..reference import ReferenceDatabase, waypoint_from_record

LOGGER = get_logger(__name__)

_TYPE_NAMES = {
    WaypointKind.AIRPORT: "AIRPORT",
    WaypointKind.NAVAID: "NAVAID",
    WaypointKind.FIX: "FIX",
}
_COMPUTED_TYPES = {"TOC", "TOD", "BOD"}
_KIND_BY_TYPE = {
    "AIRPORT": WaypointKind.AIRPORT,
    "NAVAID": WaypointKind.NAVAID,
    "FIX": WaypointKind.FIX,
    "GPS": WaypointKind.FIX,
}


class PlanFormatError(ValueError):
    """The document is not a readable plan file."""


def _type_name(waypoint: Waypoint) -> str:
    if waypoint.is_computed:
        return "TOC" if waypoint.role is TransitionRole.CLIMB else "TOD"
    return _TYPE_NAMES[waypoint.kind]


def _waypoint_element(waypoint: Waypoint) -> ET.Element:
    element = ET.Element("waypoint")
    element.set("name", waypoint.name or waypoint.ident)
    element.set("type", _type_name(waypoint))
    element.set("id", waypoint.ident)
    element.set("latitude", f"{waypoint.position.latitude:.6f}")
    element.set("longitude", f"{waypoint.position.longitude:.6f}")
    if waypoint.altitude is not None:
        element.set("elevation", str(waypoint.altitude))
    return element


def write_plan(snapshot: PlanSnapshot, destination: Path) -> Path:
    """Write ``snapshot`` to ``destination`` and return the path."""

    root = ET.Element("plan")
    root.set("name", snapshot.name)
    if snapshot.profile_name:
        root.set("aircraft", snapshot.profile_name)
    if snapshot.selected_cruise_altitude is not None:
        root.set("altitude", str(snapshot.selected_cruise_altitude))

    if not snapshot.sectors:
        for waypoint in snapshot.waypoints:
            root.append(_waypoint_element(waypoint))

    for sector in snapshot.sectors:
        sector_element = ET.SubElement(root, "sector")
        members = snapshot.waypoints[sector.start_index : sector.end_index + 1]
        start, end = members[0], members[-1]
        if start.is_airport:
            ET.SubElement(sector_element, "from-airport", {"id": start.ident})
        else:
            sector_element.append(_waypoint_element(start))
        for waypoint in members[1:-1]:
            sector_element.append(_waypoint_element(waypoint))
        if end.is_airport:
            ET.SubElement(sector_element, "to-airport", {"id": end.ident})
        else:
            sector_element.append(_waypoint_element(end))

    destination.parent.mkdir(parents=True, exist_ok=True)
    tree = ET.ElementTree(root)
    ET.indent(tree)
    tree.write(destination, encoding="utf-8", xml_declaration=True)
    LOGGER.info("Wrote plan '%s' with %s sectors to %s", snapshot.name, len(snapshot.sectors), destination)
    return destination


def _resolve(
    ident: str,
    kind: WaypointKind,
    database: Optional[ReferenceDatabase],
    altitude: Optional[int],
) -> Optional[Waypoint]:
    if database is None:
        return None
    matches = [record for record in database.find_by_id(ident) if record.kind is kind]
    if not matches:
        return None
    return waypoint_from_record(matches[0], altitude)


def _airport(element: ET.Element, database: Optional[ReferenceDatabase]) -> Waypoint:
    ident = element.get("id")
    if not ident:
        raise PlanFormatError(f"<{element.tag}> requires an id attribute")
    waypoint = _resolve(ident, WaypointKind.AIRPORT, database, None)
    if waypoint is None:
        raise PlanFormatError(f"Unknown airport '{ident}'")
    return waypoint


def _waypoint(element: ET.Element, database: Optional[ReferenceDatabase]) -> Optional[Waypoint]:
    type_name = (element.get("type") or "").upper()
    if type_name in _COMPUTED_TYPES:
        return None
    kind = _KIND_BY_TYPE.get(type_name)
    if kind is None:
        LOGGER.warning("Skipping waypoint with unsupported type '%s'", type_name)
        return None
    elevation = element.get("elevation")
    try:
        altitude = int(float(elevation)) if elevation else None
    except ValueError as error:
        raise PlanFormatError(f"Invalid elevation on waypoint {element.attrib}") from error

    ident = element.get("id") or element.get("name") or ""
    if type_name != "GPS" and ident:
        resolved = _resolve(ident, kind, database, altitude)
        if resolved is not None:
            return resolved
    try:
        position = Coordinate(float(element.get("latitude", "")), float(element.get("longitude", "")))
    except ValueError as error:
        raise PlanFormatError(f"Waypoint '{ident}' has no usable position") from error
    name = element.get("name") or ident
    return Waypoint(ident=ident or "GPS", kind=kind, position=position, altitude=altitude, name=name)


def read_plan(
    source: Union[Path, str],
    *,
    database: Optional[ReferenceDatabase] = None,
    hangar: Optional[ProfileHangar] = None,
) -> FlightPlan:
    """Parse a plan file and rebuild it waypoint by waypoint."""

    try:
        root = ET.parse(source).getroot()
    except (ET.ParseError, OSError) as error:
        raise PlanFormatError(f"Unable to read plan {source}: {error}") from error
    if root.tag != "plan":
        raise PlanFormatError(f"Expected <plan> root element, found <{root.tag}>")

    profile = None
    aircraft = root.get("aircraft")
    if aircraft and hangar is not None:
        try:
            profile = hangar.get(aircraft)
        except KeyError:
            LOGGER.warning("Plan references unknown aircraft '%s'; transitions disabled", aircraft)
    altitude_text = root.get("altitude")
    cruise_altitude = int(altitude_text) if altitude_text and altitude_text.isdigit() else None

    route: List[Waypoint] = []
    for child in root:
        if child.tag == "sector":
            elements = list(child)
        elif child.tag == "waypoint":
            elements = [child]
        else:
            continue
        for element in elements:
            if element.tag in ("from-airport", "to-airport"):
                waypoint: Optional[Waypoint] = _airport(element, database)
            elif element.tag == "waypoint":
                waypoint = _waypoint(element, database)
            else:
                continue
            if waypoint is None:
                continue
            if route and route[-1].same_place(waypoint):
                continue
            route.append(waypoint)

    plan = FlightPlan(cruise_altitude=cruise_altitude, profile=profile)
    for waypoint in route:
        plan.insert_waypoint(len(plan) - 1, waypoint)
    plan.mark_saved()
    LOGGER.info("Read plan '%s' with %s waypoints from %s", plan.name, len(route), source)
    return plan
