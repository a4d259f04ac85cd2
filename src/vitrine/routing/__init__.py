"""Routing — an ordered route table where the first match wins.

Routes are registered during setup and compiled into an immutable
lookup structure when the app freezes.
"""

from vitrine.routing.route import Route, RouteMatch
from vitrine.routing.router import Router

__all__ = ["Route", "RouteMatch", "Router"]
