"""querybind: route interface methods to registered query and command objects.

Usage:
    from typing import Protocol

    from querybind import build_proxy, route

    class UserQueries(Protocol):
        @route(return_one=True)
        def find_user(self, user_id: int) -> User | None: ...

        @route("rename_user", param_names=("name", "user_id"))
        def rename(self, name: str, user_id: int) -> bool: ...

    queries = build_proxy(UserQueries, registry=registry)
    user = queries.find_user(7)
"""

__version__ = "0.1.0"

# Configuration
from querybind.config import DispatchSettings

# Core primitives
from querybind.core import (
    ReturnKind,
    RouteEntry,
    RouteMeta,
    collect_routes,
    get_route_meta,
    pack_params,
    route,
)

# Dispatch
from querybind.dispatch import (
    ConfigurationError,
    Dispatcher,
    ProxyHandler,
    build_proxy,
    get_handler,
)

# Executable contracts
from querybind.executables import (
    GroupResult,
    Registry,
    Statement,
    StatementGroup,
    StatementKind,
)

__all__ = [
    # Version
    "__version__",
    # Core
    "route",
    "get_route_meta",
    "collect_routes",
    "pack_params",
    "RouteMeta",
    "RouteEntry",
    "ReturnKind",
    # Executables
    "StatementKind",
    "GroupResult",
    "Statement",
    "StatementGroup",
    "Registry",
    # Dispatch
    "build_proxy",
    "get_handler",
    "ProxyHandler",
    "Dispatcher",
    "ConfigurationError",
    # Configuration
    "DispatchSettings",
]
