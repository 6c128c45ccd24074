"""Mini README: Abstract interface for live simulator links.

Structure:
    * AircraftPosition - position and heading reported by a simulator.
    * SimulatorLinkError - transport failure talking to the simulator.
    * SimulatorLink - interface implemented by concrete transports.

Links consume ``PlanSnapshot`` objects only, so streaming a plan can run on
any thread while the plan itself is being edited elsewhere.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, Optional

from ..geo import Coordinate
from ..logging_utils import get_logger
from ..plan import PlanSnapshot

LOGGER = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class AircraftPosition:
    """Where the simulated aircraft currently is."""

    position: Coordinate
    heading: float


class SimulatorLinkError(RuntimeError):
    """The simulator could not be reached or answered unexpectedly."""


class SimulatorLink(ABC):
    """Base interface for simulator transports."""

    link_name: str = "generic"

    @abstractmethod
    def fetch_aircraft_position(self) -> Optional[AircraftPosition]:
        """Return the aircraft position, or ``None`` when the link is disabled."""

    @abstractmethod
    def send_snapshot(self, snapshot: PlanSnapshot) -> int:
        """Stream the plan to the simulator and return the waypoints sent."""

    def close(self) -> None:
        """Release transport resources."""

        LOGGER.debug("Closing %s link", self.link_name)

    def metadata(self) -> Dict[str, str]:
        return {"link": self.link_name}
