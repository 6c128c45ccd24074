"""Mini README: FastAPI-powered planning service.

Structure:
    * create_application - application factory wiring routes to a
      ``PlanPublisher``, the reference database, the profile hangar and the
      simulator link.

Every edit route runs through ``PlanPublisher.update`` so concurrent
readers of ``GET /plan`` only ever see complete snapshots. Edit errors are
mapped to HTTP status codes: bad indices or waypoints -> 400, protected
waypoints -> 409, unknown references -> 404.

Simulator link routes are plain functions because the link uses blocking
``requests`` calls; FastAPI runs them in its threadpool.
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from typing import Callable, Dict, Optional, TypeVar

from fastapi import FastAPI, Form, HTTPException, Query
from fastapi.responses import JSONResponse, Response

from ..configuration import get_settings
from ..exchange import build_route_manager_tree
from ..geo import Coordinate
from ..link import FlightGearLink, SimulatorLink, SimulatorLinkError
from ..logging_utils import get_logger
from ..performance import HANGAR, ProfileHangar
from ..plan import (
    FlightPlan,
    InvalidIndex,
    InvalidWaypoint,
    PlanPublisher,
    PlanSnapshot,
    ProtectedWaypoint,
    Waypoint,
    WaypointKind,
)
from ..reference import (
    InMemoryReferenceDatabase,
    PlanType,
    ReferenceDatabase,
    ReferenceRecord,
    RouteOptions,
    SectorRouter,
    waypoint_from_record,
)
from ..utils import format_distance, format_hours, format_latitude, format_longitude, parse_angle

LOGGER = get_logger(__name__)

T = TypeVar("T")


def _snapshot_payload(snapshot: PlanSnapshot) -> Dict[str, object]:
    """Snapshot dictionary enriched with display strings for the UI."""

    payload = snapshot.as_dict()
    for entry, waypoint in zip(payload["waypoints"], snapshot.waypoints):  # type: ignore[arg-type]
        entry["display"] = {
            "latitude": format_latitude(waypoint.position.latitude),
            "longitude": format_longitude(waypoint.position.longitude),
            "leg_distance": format_distance(waypoint.leg_distance),
            "ete": format_hours(waypoint.ete_hours),
        }
    payload["display"] = {
        "total_distance": format_distance(snapshot.total_distance),
        "total_duration": format_hours(snapshot.total_duration),
    }
    return payload


def _record_payload(record: ReferenceRecord) -> Dict[str, object]:
    return {
        "ident": record.ident,
        "name": record.name,
        "kind": record.kind.value,
        "latitude": record.position.latitude,
        "longitude": record.position.longitude,
        "elevation": record.elevation,
        "frequency": record.frequency,
    }


def create_application(
    publisher: Optional[PlanPublisher] = None,
    database: Optional[ReferenceDatabase] = None,
    hangar: Optional[ProfileHangar] = None,
    link: Optional[SimulatorLink] = None,
) -> FastAPI:
    """Create the FastAPI application with routes and dependencies."""

    app = FastAPI(title="Flight Planner", version="0.1.0")
    settings = get_settings()
    hangar = hangar or HANGAR
    if settings.hangar_file is not None and hangar is HANGAR:
        hangar.load_yaml(settings.hangar_file)
    database = database or InMemoryReferenceDatabase()
    link = link or FlightGearLink(settings)
    if publisher is None:
        try:
            profile = hangar.get(settings.default_profile)
        except KeyError:
            LOGGER.warning("Default profile '%s' not in hangar", settings.default_profile)
            profile = None
        publisher = PlanPublisher(
            FlightPlan(cruise_altitude=settings.default_cruise_altitude, profile=profile)
        )

    def edit(operation: Callable[[FlightPlan], T]) -> T:
        """Apply an edit, translating plan errors into HTTP errors."""

        try:
            return publisher.update(operation)
        except ProtectedWaypoint as error:
            raise HTTPException(status_code=409, detail=str(error)) from error
        except (InvalidIndex, InvalidWaypoint, ValueError) as error:
            raise HTTPException(status_code=400, detail=str(error)) from error

    @app.get("/plan")
    async def get_plan() -> JSONResponse:
        """Return the current plan snapshot."""

        return JSONResponse(_snapshot_payload(publisher.snapshot))

    @app.post("/plan/waypoints")
    async def insert_waypoint(
        after_index: int = Form(...),
        ident: Optional[str] = Form(None),
        kind: Optional[str] = Form(None),
        latitude: Optional[str] = Form(None),
        longitude: Optional[str] = Form(None),
        altitude: Optional[int] = Form(None),
        label: Optional[str] = Form(None),
    ) -> JSONResponse:
        """Insert a database waypoint (by ident) or a free point (by position)."""

        if ident:
            try:
                wanted = WaypointKind.from_str(kind) if kind else None
                record = database.get(ident, wanted)
            except ValueError as error:
                raise HTTPException(status_code=400, detail=str(error)) from error
            except KeyError as error:
                raise HTTPException(status_code=404, detail=str(error)) from error
            waypoint = waypoint_from_record(record, altitude)
        else:
            if latitude is None or longitude is None:
                raise HTTPException(status_code=400, detail="Provide an ident or a latitude/longitude pair")
            try:
                position = Coordinate(parse_angle(latitude, maximum=90.0), parse_angle(longitude))
            except ValueError as error:
                raise HTTPException(status_code=400, detail=str(error)) from error
            waypoint = Waypoint.free(label or "GPS", position, altitude)

        index = edit(lambda plan: plan.insert_waypoint(after_index, waypoint))
        LOGGER.info("Inserted '%s' via web at index %s", waypoint.ident, index)
        return JSONResponse({"index": index, "plan": _snapshot_payload(publisher.snapshot)})

    @app.delete("/plan/waypoints/{index}")
    async def remove_waypoint(index: int) -> JSONResponse:
        """Remove the waypoint at ``index``."""

        removed = edit(lambda plan: plan.remove_waypoint(index))
        return JSONResponse({"removed": removed.as_dict(), "plan": _snapshot_payload(publisher.snapshot)})

    @app.post("/plan/move")
    async def move_waypoint(from_index: int = Form(...), to_index: int = Form(...)) -> JSONResponse:
        """Move a waypoint to a new position."""

        index = edit(lambda plan: plan.move_waypoint(from_index, to_index))
        return JSONResponse({"index": index, "plan": _snapshot_payload(publisher.snapshot)})

    @app.post("/plan/sectors/{sector_index}/collapse")
    async def collapse_sector(sector_index: int) -> JSONResponse:
        """Remove a sector and one of its boundaries."""

        edit(lambda plan: plan.collapse_sector(sector_index))
        return JSONResponse({"plan": _snapshot_payload(publisher.snapshot)})

    @app.post("/plan/sectors/{sector_index}/route")
    async def route_sector(
        sector_index: int,
        plan_type: str = Form(PlanType.RADIO.value),
        max_leg_distance: float = Form(100.0),
        vor_only: bool = Form(False),
        vor_preferred: bool = Form(True),
        add_gps_waypoints: bool = Form(False),
        keep_intermediates: bool = Form(True),
    ) -> JSONResponse:
        """Fill a sector automatically from the reference database."""

        try:
            options = RouteOptions(
                plan_type=PlanType.from_str(plan_type),
                max_leg_distance=max_leg_distance,
                vor_only=vor_only,
                vor_preferred=vor_preferred,
                add_gps_waypoints=add_gps_waypoints,
            )
        except ValueError as error:
            raise HTTPException(status_code=400, detail=str(error)) from error
        router = SectorRouter(database, options)
        added = edit(lambda plan: plan.route_sector(sector_index, router, keep_intermediates=keep_intermediates))
        return JSONResponse({"intermediates": added, "plan": _snapshot_payload(publisher.snapshot)})

    @app.post("/plan/cruise-altitude")
    async def set_cruise_altitude(altitude: Optional[int] = Form(None)) -> JSONResponse:
        """Select the cruise altitude; omit it to follow the aircraft profile."""

        edit(lambda plan: plan.set_cruise_altitude(altitude))
        return JSONResponse({"plan": _snapshot_payload(publisher.snapshot)})

    @app.post("/plan/profile")
    async def set_profile(name: Optional[str] = Form(None)) -> JSONResponse:
        """Select an aircraft profile by name; omit it to clear the profile."""

        profile = None
        if name:
            try:
                profile = hangar.get(name)
            except KeyError as error:
                raise HTTPException(status_code=404, detail=str(error)) from error
        edit(lambda plan: plan.set_performance_profile(profile))
        return JSONResponse({"plan": _snapshot_payload(publisher.snapshot)})

    @app.get("/profiles")
    async def list_profiles() -> JSONResponse:
        """Return the aircraft profiles available in the hangar."""

        return JSONResponse(
            {"profiles": [hangar.get(name).as_dict() for name in hangar.available_profiles()]}
        )

    @app.get("/reference/search")
    async def search_reference(q: str = Query(..., min_length=1), limit: int = Query(20, ge=1)) -> JSONResponse:
        """Find airports, navaids and fixes by partial identifier or name."""

        records = database.search(q, limit=limit)
        LOGGER.debug("Reference search '%s' returned %s records", q, len(records))
        return JSONResponse({"records": [_record_payload(record) for record in records]})

    @app.get("/reference/near")
    async def reference_near(
        latitude: float = Query(...),
        longitude: float = Query(...),
        radius_nm: float = Query(25.0, ge=0),
    ) -> JSONResponse:
        """Find records within a radius of a position."""

        try:
            centre = Coordinate(latitude, longitude)
        except ValueError as error:
            raise HTTPException(status_code=400, detail=str(error)) from error
        records = database.find_near(centre, radius_nm)
        return JSONResponse({"records": [_record_payload(record) for record in records]})

    @app.get("/plan/export/route-manager")
    async def export_route_manager() -> Response:
        """Return the plan as FlightGear route-manager XML."""

        snapshot = publisher.snapshot
        profile = None
        if snapshot.profile_name:
            try:
                profile = hangar.get(snapshot.profile_name)
            except KeyError:
                profile = None
        body = ET.tostring(build_route_manager_tree(snapshot, profile), encoding="unicode")
        return Response(content=body, media_type="application/xml")

    @app.get("/link/position")
    def link_position() -> JSONResponse:
        """Return the simulator's aircraft position when the link is enabled."""

        try:
            position = link.fetch_aircraft_position()
        except SimulatorLinkError as error:
            raise HTTPException(status_code=502, detail=str(error)) from error
        if position is None:
            return JSONResponse({"position": None, "link": link.metadata()})
        return JSONResponse(
            {
                "position": {
                    "latitude": position.position.latitude,
                    "longitude": position.position.longitude,
                    "heading": position.heading,
                },
                "link": link.metadata(),
            }
        )

    @app.post("/link/send")
    def link_send() -> JSONResponse:
        """Stream the current snapshot to the simulator."""

        try:
            sent = link.send_snapshot(publisher.snapshot)
        except SimulatorLinkError as error:
            raise HTTPException(status_code=502, detail=str(error)) from error
        return JSONResponse({"sent": sent, "link": link.metadata()})

    return app
