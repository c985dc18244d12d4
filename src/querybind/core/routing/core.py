"""Route decorator and method index construction.

Usage:
    class UserQueries(Protocol):
        # Logical id defaults to the method name
        @route
        def find_all(self) -> list[User]: ...

        # Explicit id, single row
        @route("user_by_id", return_one=True)
        def find(self, user_id: int) -> User | None: ...

        # Two or more parameters need names
        @route(param_names=("name", "user_id"))
        def rename(self, name: str, user_id: int) -> bool: ...
"""

from __future__ import annotations

import inspect
from collections.abc import Callable, Iterable
from typing import Any, Generic, Protocol, TypeVar, overload

from querybind.core.returns import classify_return
from querybind.core.routing.models import RouteEntry, RouteMeta

F = TypeVar("F", bound=Callable[..., Any])

_POSITIONAL = (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)
_SKIPPED_BASES = (object, Protocol, Generic)


def _normalize_param_names(param_names: Iterable[str]) -> tuple[str, ...]:
    if isinstance(param_names, str):
        raise TypeError(
            f"param_names must be a sequence of names, not a string: {param_names!r}. "
            f"Did you mean param_names=({param_names!r},)?"
        )
    names = tuple(param_names)
    for name in names:
        if not isinstance(name, str):
            raise TypeError(f"param_names entries must be strings, got {type(name).__name__}")
    return names


def _unwrap(attr: Any) -> Callable[..., Any] | None:
    """Get the plain function behind a class attribute, if it is one."""
    if isinstance(attr, staticmethod | classmethod):
        attr = attr.__func__
    if inspect.isfunction(attr):
        return attr
    return None


@overload
def route(value: F) -> F: ...


@overload
def route(
    value: str | None = None,
    *,
    id: str | None = None,
    param_names: Iterable[str] = (),
    return_one: bool = False,
    return_id: str | None = None,
) -> Callable[[F], F]: ...


def route(
    value: str | F | None = None,
    *,
    id: str | None = None,
    param_names: Iterable[str] = (),
    return_one: bool = False,
    return_id: str | None = None,
) -> F | Callable[[F], F]:
    """Mark an interface method as routed to a registered executable.

    Supports three forms:
        @route                          # bare decorator
        @route()                        # parenthesized, no args
        @route("logical_id", ...)       # factory with args

    Args:
        value: Alternate logical id, or the function when used bare.
        id: Explicit logical id. Takes precedence over value.
        param_names: Names for positional arguments. Required when the
            method takes two or more parameters.
        return_one: Return only the first row of a list result.
        return_id: Sub-result to return from a group execution.

    Returns:
        The same function with routing metadata attached, or a decorator.

    Raises:
        TypeError: If param_names is a bare string or contains non-strings.
    """
    if isinstance(value, staticmethod | classmethod) or callable(value):
        return route()(value)

    meta = RouteMeta(
        id=id,
        value=value,
        param_names=_normalize_param_names(param_names),
        return_one=return_one,
        return_id=return_id,
    )

    def decorator(fn: F) -> F:
        target = fn.__func__ if isinstance(fn, staticmethod | classmethod) else fn
        target.__route_meta__ = meta  # type: ignore[attr-defined]
        return fn

    return decorator


def get_route_meta(fn: Any) -> RouteMeta | None:
    """Get routing metadata attached to a function.

    Args:
        fn: Function, staticmethod or classmethod.

    Returns:
        Attached metadata, or None if the function is not routed.
    """
    func = _unwrap(fn) or fn
    meta = getattr(func, "__route_meta__", None)
    return meta if isinstance(meta, RouteMeta) else None


def build_route_entry(name: str, attr: Any, meta: RouteMeta) -> RouteEntry:
    """Resolve signature, parameter count and return kind for a routed method.

    Args:
        name: Attribute name on the interface.
        attr: Raw class attribute (function, staticmethod or classmethod).
        meta: Routing metadata attached to it.

    Returns:
        Immutable route entry. The stored signature excludes self/cls.
    """
    func = _unwrap(attr)
    if func is None:
        raise TypeError(f"Routed attribute {name!r} is not a function")

    signature = inspect.signature(func)
    parameters = list(signature.parameters.values())
    if not isinstance(attr, staticmethod) and parameters:
        parameters = parameters[1:]
    signature = signature.replace(parameters=parameters)

    return RouteEntry(
        name=name,
        function=func,
        meta=meta,
        signature=signature,
        param_count=sum(1 for p in parameters if p.kind in _POSITIONAL),
        returns=classify_return(func),
    )


def collect_routes(interface: type) -> dict[str, RouteEntry]:
    """Build the method index for an interface.

    Walks the MRO so inherited and directly declared methods are both
    covered. Each name is resolved on the interface itself, so an override
    in a sub-interface replaces the base declaration (and drops routing if
    the override is not decorated).

    Args:
        interface: Class, ABC or Protocol declaring routed methods.

    Returns:
        Method name to route entry, base classes first, then declaration order.
    """
    names: dict[str, None] = {}
    for klass in reversed(interface.__mro__):
        if klass in _SKIPPED_BASES:
            continue
        for name in vars(klass):
            names.setdefault(name, None)

    routes: dict[str, RouteEntry] = {}
    for name in names:
        attr = inspect.getattr_static(interface, name)
        func = _unwrap(attr)
        if func is None:
            continue
        meta = get_route_meta(func)
        if meta is not None:
            routes[name] = build_route_entry(name, attr, meta)
    return routes
