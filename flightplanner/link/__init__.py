"""Mini README: Live link to an external flight simulator.

``base`` defines the transport interface; ``flightgear`` implements it for
FlightGear's HTTP property server.
"""

from .base import AircraftPosition, SimulatorLink, SimulatorLinkError
from .flightgear import FlightGearLink

__all__ = ["AircraftPosition", "FlightGearLink", "SimulatorLink", "SimulatorLinkError"]
