"""Mini README: Aircraft performance data.

``PerformanceProfile`` holds climb and descent figures; ``HANGAR`` is the
shared registry of named profiles used by the front end.
"""

from .hangar import HANGAR, ProfileHangar
from .profile import PerformanceProfile

__all__ = ["HANGAR", "PerformanceProfile", "ProfileHangar"]
