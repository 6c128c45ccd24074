"""Mini README: Navigation reference data consumed by the planner.

Exports the lookup interface, an in-memory implementation, the helper that
turns a selected record into a plan waypoint and the sector auto-router.
"""

from .database import InMemoryReferenceDatabase, ReferenceDatabase, ReferenceRecord, waypoint_from_record
from .router import ARRIVAL_BEACON_RANGE_NM, PlanType, RouteOptions, SectorRouter

__all__ = [
    "ARRIVAL_BEACON_RANGE_NM",
    "InMemoryReferenceDatabase",
    "PlanType",
    "ReferenceDatabase",
    "ReferenceRecord",
    "RouteOptions",
    "SectorRouter",
    "waypoint_from_record",
]
