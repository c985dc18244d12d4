"""Routing functionality: @route decorator, metadata and method index."""

from querybind.core.routing.core import build_route_entry, collect_routes, get_route_meta, route
from querybind.core.routing.models import RouteEntry, RouteMeta

__all__ = [
    # Models
    "RouteMeta",
    "RouteEntry",
    # Core
    "route",
    "get_route_meta",
    "build_route_entry",
    "collect_routes",
]
