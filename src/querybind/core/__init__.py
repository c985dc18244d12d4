"""Core functionalities: stateless routing metadata, packing and classification.

Architecture Note:
    core/ contains pure, stateless building blocks with no runtime state.
    The stateful proxy and dispatcher live in dispatch/.
"""

from querybind.core.params import bind_arguments, pack_params
from querybind.core.returns import ReturnKind, classify_annotation, classify_return
from querybind.core.routing import (
    RouteEntry,
    RouteMeta,
    build_route_entry,
    collect_routes,
    get_route_meta,
    route,
)

__all__ = [
    # Routing
    "route",
    "get_route_meta",
    "build_route_entry",
    "collect_routes",
    "RouteMeta",
    "RouteEntry",
    # Returns
    "ReturnKind",
    "classify_annotation",
    "classify_return",
    # Params
    "bind_arguments",
    "pack_params",
]
