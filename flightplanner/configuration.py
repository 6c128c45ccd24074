"""Mini README: Centralised configuration for the flight planner front end.

Structure:
    * PlannerSettings - Pydantic model describing runtime configuration.
    * get_settings - cached accessor for environment-aware settings.

Usage:
    The computation core never reads settings; the web front end, the
    profile hangar and the simulator link do. Values come from
    ``FLIGHTPLANNER_*`` environment variables or a local ``.env`` file and
    are validated once per process.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field, validator
from pydantic_settings import BaseSettings


class PlannerSettings(BaseSettings):
    """Runtime configuration for the flight planner."""

    environment: str = Field(
        "development",
        description="Environment label controlling debug toggles and logging levels.",
    )
    interface_host: str = Field(
        "0.0.0.0",
        description="Network interface for the planning service to bind to.",
    )
    interface_port: int = Field(
        8000,
        description="Port the planning service exposes.",
        ge=1,
        le=65535,
    )
    default_profile: str = Field(
        "Cessna C-172 - High wing",
        description="Name of the hangar profile selected for new plans.",
    )
    default_cruise_altitude: Optional[int] = Field(
        None,
        description=(
            "Cruise altitude in feet applied to new plans. Leave unset to use"
            " the cruise altitude of the selected aircraft profile."
        ),
        ge=0,
    )
    hangar_file: Optional[Path] = Field(
        None,
        description="Optional YAML file with additional aircraft performance profiles.",
    )
    fgfs_link_enabled: bool = Field(
        False,
        description="Enable the live link to a running FlightGear instance.",
    )
    fgfs_link_host: str = Field(
        "127.0.0.1",
        description="Host running the FlightGear HTTP property server.",
    )
    fgfs_link_port: int = Field(
        5100,
        description="Port of the FlightGear HTTP property server.",
        ge=1,
        le=65535,
    )
    fgfs_link_timeout: float = Field(
        2.0,
        description="Seconds to wait for the simulator before giving up on a request.",
        gt=0,
    )

    class Config:
        env_prefix = "FLIGHTPLANNER_"
        env_file = ".env"
        case_sensitive = False

    @validator("hangar_file", pre=True)
    def _expand_path(cls, value: Optional[str | Path]) -> Optional[Path]:
        """Expand user directories in the hangar path without requiring it to exist."""

        if value in (None, ""):
            return None
        return Path(value).expanduser().resolve()


@lru_cache()
def get_settings() -> PlannerSettings:
    """Return cached settings, ensuring consistent configuration across modules."""

    return PlannerSettings()
