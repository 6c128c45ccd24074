"""Mini README: Application-wide logging helpers for the flight planner.

Structure:
    * get_logger - module logger factory; installs the shared handler once.
    * configure_root_logger - set the root level, by number or by name.
    * level_for_environment - map ``PlannerSettings.environment`` to a level.

Usage:
    Library modules keep ``LOGGER = get_logger(__name__)`` at import time.
    Entry points call ``configure_root_logger`` once they know the
    environment; calling it again only adjusts the level and never stacks
    handlers.
"""

from __future__ import annotations

import logging
from typing import Optional, Union

_HANDLER: Optional[logging.Handler] = None

_ENVIRONMENT_LEVELS = {
    "development": logging.DEBUG,
    "test": logging.WARNING,
    "production": logging.INFO,
}


def _install_handler() -> logging.Logger:
    global _HANDLER
    root_logger = logging.getLogger()
    if _HANDLER is None:
        _HANDLER = logging.StreamHandler()
        _HANDLER.setFormatter(
            logging.Formatter(
                "[%(asctime)s] [%(levelname)s] %(name)s - %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        root_logger.addHandler(_HANDLER)
        root_logger.setLevel(logging.INFO)
    return root_logger


def configure_root_logger(level: Union[int, str] = logging.INFO) -> None:
    """Install the stream handler if needed and set the root level."""

    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        if not isinstance(resolved, int):
            raise ValueError(f"Unknown logging level '{level}'")
        level = resolved
    _install_handler().setLevel(level)


def level_for_environment(environment: str) -> int:
    """DEBUG while developing, quieter elsewhere."""

    return _ENVIRONMENT_LEVELS.get(environment.strip().lower(), logging.INFO)


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a module-specific logger sharing the root handler."""

    _install_handler()
    return logging.getLogger(name)
