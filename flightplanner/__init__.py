"""Mini README: Core package initialiser for the flight planner.

The package is split into a pure computation core (``geo``, ``performance``
and ``plan``) and the collaborators that surround it (``reference``,
``exchange``, ``link`` and ``interface``). Only the logging helper is
re-exported here so importing the package never pulls in web or network
dependencies.
"""

from .logging_utils import get_logger

__all__ = ["get_logger"]
