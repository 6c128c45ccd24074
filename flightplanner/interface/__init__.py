"""Mini README: Interactive front end for the flight planner.

The package exposes the FastAPI application factory which wires plan
editing, reference lookups, exports and the simulator link together.
"""

from .web_app import create_application

__all__ = ["create_application"]
