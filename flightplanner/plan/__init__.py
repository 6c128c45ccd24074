"""Mini README: Flight plan model and computation engine.

Re-exports the waypoint and sector types, the ``FlightPlan`` editing API,
the transition inserter and the snapshot/publication helpers. Edit errors
live in ``errors`` and are re-exported here for callers.
"""

from .errors import InvalidIndex, InvalidWaypoint, PlanEditError, ProtectedWaypoint
from .flight_plan import FlightPlan
from .sector import Sector, TransitionReport
from .snapshot import PlanPublisher, PlanSnapshot, SectorSummary
from .transitions import TransitionInserter
from .waypoint import TransitionRef, TransitionRole, Waypoint, WaypointKind

__all__ = [
    "FlightPlan",
    "InvalidIndex",
    "InvalidWaypoint",
    "PlanEditError",
    "PlanPublisher",
    "PlanSnapshot",
    "ProtectedWaypoint",
    "Sector",
    "SectorSummary",
    "TransitionInserter",
    "TransitionRef",
    "TransitionReport",
    "TransitionRole",
    "Waypoint",
    "WaypointKind",
]
