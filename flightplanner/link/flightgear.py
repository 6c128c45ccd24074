"""Mini README: Live link to FlightGear over its HTTP property server.

Structure:
    * FlightGearLink - reads the aircraft position and loads the plan into
      the simulator's route manager.

FlightGear must be started with ``--httpd=<port>``. Properties are read from
``/json/<property path>``; the route is loaded by posting route-manager
commands (``@CLEAR``, ``@INSERT<n>:<lon>,<lat>@<alt>``, ``@ACTIVATE``) to
``/autopilot/route-manager/input``.
"""

from __future__ import annotations

from typing import Dict, Optional

import requests

from ..configuration import PlannerSettings, get_settings
from ..geo import Coordinate
from ..logging_utils import get_logger
from ..plan import PlanSnapshot
from .base import AircraftPosition, SimulatorLink, SimulatorLinkError

LOGGER = get_logger(__name__)

_ROUTE_INPUT = "autopilot/route-manager/input"


class FlightGearLink(SimulatorLink):
    """HTTP transport talking to a running FlightGear instance."""

    link_name = "flightgear"

    def __init__(
        self,
        settings: Optional[PlannerSettings] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.session = session or requests.Session()
        self.base_url = f"http://{self.settings.fgfs_link_host}:{self.settings.fgfs_link_port}/json"
        LOGGER.debug("Initialised FlightGear link at %s (enabled=%s)", self.base_url, self.enabled)

    @property
    def enabled(self) -> bool:
        return self.settings.fgfs_link_enabled

    def _fetch_property(self, path: str) -> float:
        url = f"{self.base_url}/{path}"
        try:
            response = self.session.get(url, timeout=self.settings.fgfs_link_timeout)
            response.raise_for_status()
            return float(response.json()["value"])
        except requests.exceptions.RequestException as error:
            raise SimulatorLinkError(f"FlightGear property {path} unavailable: {error}") from error
        except (KeyError, TypeError, ValueError) as error:
            raise SimulatorLinkError(f"Unexpected FlightGear reply for {path}") from error

    def _post_command(self, command: str) -> None:
        url = f"{self.base_url}/{_ROUTE_INPUT}"
        try:
            response = self.session.post(
                url, json={"value": command}, timeout=self.settings.fgfs_link_timeout
            )
            response.raise_for_status()
        except requests.exceptions.RequestException as error:
            raise SimulatorLinkError(f"FlightGear rejected route command {command!r}: {error}") from error

    def fetch_aircraft_position(self) -> Optional[AircraftPosition]:
        if not self.enabled:
            return None
        latitude = self._fetch_property("position/latitude-deg")
        longitude = self._fetch_property("position/longitude-deg")
        heading = self._fetch_property("orientation/heading-deg")
        return AircraftPosition(position=Coordinate(latitude, longitude), heading=heading % 360.0)

    def send_snapshot(self, snapshot: PlanSnapshot) -> int:
        if not self.enabled:
            LOGGER.debug("FlightGear link disabled; snapshot '%s' not sent", snapshot.name)
            return 0
        try:
            self._post_command("@CLEAR")
            for ordinal, waypoint in enumerate(snapshot.waypoints):
                altitude = waypoint.planned_altitude
                if altitude is None:
                    altitude = float(waypoint.altitude_or_ground)
                self._post_command(
                    f"@INSERT{ordinal}:{waypoint.position.longitude:.6f},"
                    f"{waypoint.position.latitude:.6f}@{altitude:.0f}"
                )
            if snapshot.waypoints:
                self._post_command("@ACTIVATE")
        except SimulatorLinkError:
            LOGGER.error("Failed to send plan '%s' to FlightGear", snapshot.name)
            raise
        LOGGER.info("Sent %s waypoints of '%s' to FlightGear", len(snapshot.waypoints), snapshot.name)
        return len(snapshot.waypoints)

    def close(self) -> None:
        super().close()
        self.session.close()

    def metadata(self) -> Dict[str, str]:
        return {
            "link": self.link_name,
            "endpoint": self.base_url,
            "enabled": str(self.enabled).lower(),
        }
