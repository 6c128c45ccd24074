"""Mini README: Import/export collaborators for plan files.

``plan_xml`` reads and writes the planner's own format; ``route_manager``
exports plans FlightGear's route manager can load. Both work from
``PlanSnapshot`` objects so they never see a plan mid-edit.
"""

from .plan_xml import PlanFormatError, read_plan, write_plan
from .route_manager import build_route_manager_tree, export_route_manager

__all__ = [
    "PlanFormatError",
    "build_route_manager_tree",
    "export_route_manager",
    "read_plan",
    "write_plan",
]
