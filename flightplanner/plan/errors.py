"""Mini README: Errors surfaced by flight plan edit operations.

Only structurally invalid requests reach the caller. Geometry and
performance problems are recovered inside the engine and logged instead.
"""

from __future__ import annotations


class PlanEditError(Exception):
    """Base class for rejected plan edits; the plan is left unchanged."""


class InvalidIndex(PlanEditError, IndexError):
    """An edit referenced a position outside the plan."""

    def __init__(self, index: int, size: int, *, allow_before_start: bool = False) -> None:
        lower = -1 if allow_before_start else 0
        super().__init__(f"Index {index} outside plan bounds [{lower}, {size - 1}]")
        self.index = index
        self.size = size


class ProtectedWaypoint(PlanEditError):
    """An edit tried to remove or move a waypoint the plan must keep."""


class InvalidWaypoint(PlanEditError, ValueError):
    """A waypoint cannot be placed into a plan (e.g. a computed point)."""
