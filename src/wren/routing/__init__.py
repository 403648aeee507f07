"""Routing — exact-path route table.

Routes are registered during setup and compiled into an immutable
lookup structure when the app freezes.
"""

from wren.routing.route import Route, normalize_methods
from wren.routing.router import ROOT_PATH, STATIC_PREFIX, Router, check_path

__all__ = ["ROOT_PATH", "STATIC_PREFIX", "Route", "Router", "check_path", "normalize_methods"]
