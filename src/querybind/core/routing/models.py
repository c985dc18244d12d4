"""Routing models: per-method metadata and resolved route entries."""

from __future__ import annotations

import inspect
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from querybind.core.returns import ReturnKind


@dataclass(frozen=True, slots=True)
class RouteMeta:
    """Routing metadata attached to an interface method by @route.

    Attributes:
        id: Explicit logical id of the executable.
        value: Alternate logical id, used when id is unset.
        param_names: Names binding positional arguments into a parameter
            dict. An empty name leaves that slot unbound.
        return_one: Collapse a list result to its first element.
        return_id: Sub-result to return from a group execution.
    """

    id: str | None = None
    value: str | None = None
    param_names: tuple[str, ...] = ()
    return_one: bool = False
    return_id: str | None = None

    def logical_id(self, method_name: str) -> str:
        """Resolve the registry key: id, else value, else the method name."""
        return self.id or self.value or method_name


@dataclass(frozen=True, slots=True)
class RouteEntry:
    """A routed interface method, resolved once when a proxy is built.

    Attributes:
        name: Attribute name of the method on the interface.
        function: The undecorated interface function.
        meta: Routing metadata.
        signature: Signature used to bind call arguments.
        param_count: Positional parameters excluding self/cls.
        returns: Classified return annotation.
    """

    name: str
    function: Callable[..., Any]
    meta: RouteMeta
    signature: inspect.Signature
    param_count: int
    returns: ReturnKind
