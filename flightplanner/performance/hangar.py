"""Mini README: Registry of named aircraft performance profiles.

Structure:
    * ProfileHangar - register, look up and list ``PerformanceProfile``
      instances; optionally load extra profiles from YAML.
    * HANGAR - process-wide hangar seeded with the built-in aircraft.

YAML files hold a list of mappings using the hyphenated keys
``name``, ``climb-rate``, ``climb-speed``, ``sink-rate``, ``sink-speed``,
``cruise-speed`` and ``cruise-altitude``.
"""

from __future__ import annotations

from pathlib import Path
from typing import Dict, Iterable, List, Optional

import yaml

from ..logging_utils import get_logger
from .profile import PerformanceProfile

LOGGER = get_logger(__name__)

_BUILT_IN_PROFILES = [
    PerformanceProfile(
        name="Cessna C-172 - High wing",
        climb_rate=1000,
        climb_speed=110,
        descent_rate=500,
        descent_speed=100,
        cruise_speed=140,
        cruise_altitude=7000,
    ),
    PerformanceProfile(
        name="Boeing 737",
        climb_rate=2000,
        climb_speed=300,
        descent_rate=1000,
        descent_speed=200,
        cruise_speed=450,
        cruise_altitude=36000,
    ),
    PerformanceProfile(
        name="777-200B",
        climb_rate=5000,
        climb_speed=250,
        descent_rate=3000,
        descent_speed=280,
        cruise_speed=490,
        cruise_altitude=35000,
    ),
]


def _profile_from_mapping(entry: Dict[str, object]) -> PerformanceProfile:
    """Build a profile from one YAML mapping."""

    try:
        cruise_altitude = entry.get("cruise-altitude")
        cruise_speed = entry.get("cruise-speed")
        return PerformanceProfile(
            name=str(entry["name"]),
            climb_rate=float(entry["climb-rate"]),
            climb_speed=float(entry["climb-speed"]),
            descent_rate=float(entry["sink-rate"]),
            descent_speed=float(entry["sink-speed"]),
            cruise_speed=float(cruise_speed) if cruise_speed is not None else None,
            cruise_altitude=int(cruise_altitude) if cruise_altitude is not None else None,
        )
    except (AttributeError, KeyError, TypeError) as error:
        raise ValueError(f"Incomplete aircraft profile entry: {entry!r}") from error


class ProfileHangar:
    """Simple registry mapping profile names to performance profiles."""

    def __init__(self, profiles: Optional[Iterable[PerformanceProfile]] = None) -> None:
        self._profiles: Dict[str, PerformanceProfile] = {}
        for profile in profiles if profiles is not None else _BUILT_IN_PROFILES:
            self.register(profile)

    def register(self, profile: PerformanceProfile) -> None:
        """Add or replace a profile, keyed case-insensitively by name."""

        LOGGER.debug("Registering aircraft profile '%s'", profile.name)
        self._profiles[profile.name.lower()] = profile

    def available_profiles(self) -> List[str]:
        """Return profile names sorted for display."""

        return sorted(profile.name for profile in self._profiles.values())

    def get(self, name: str) -> PerformanceProfile:
        """Retrieve a profile, raising informative errors when missing."""

        profile = self._profiles.get(name.lower())
        if profile is None:
            raise KeyError(f"Unknown aircraft profile '{name}'")
        return profile

    def load_yaml(self, path: Path) -> List[PerformanceProfile]:
        """Register every profile listed in a YAML file and return them."""

        with path.open("r", encoding="utf-8") as handle:
            document = yaml.safe_load(handle) or []
        if not isinstance(document, list):
            raise ValueError(f"Aircraft file {path} must contain a list of profiles")
        loaded = [_profile_from_mapping(entry) for entry in document]
        for profile in loaded:
            self.register(profile)
        LOGGER.info("Loaded %s aircraft profiles from %s", len(loaded), path)
        return loaded


HANGAR = ProfileHangar()
