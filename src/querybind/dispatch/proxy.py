"""Proxy construction: turn an interface into dispatching method calls.

Usage:
    class UserQueries(Protocol):
        @route(return_one=True)
        def find_user(self, user_id: int) -> User | None: ...

        @route(param_names=("name", "user_id"))
        def rename(self, name: str, user_id: int) -> bool: ...

        def describe(self) -> str: ...  # Not routed

    queries = build_proxy(UserQueries, registry=registry)
    queries.find_user(7)

    # Non-routed methods pass through to a delegate when one is given
    queries = build_proxy(UserQueries, UserQueriesImpl(), registry=registry)
    queries.describe()

The proxy is an instance of a generated subclass of the interface, so
isinstance(queries, UserQueries) holds for plain classes, ABCs and
runtime-checkable Protocols.
"""

from __future__ import annotations

import functools
import inspect
import logging
from collections.abc import Callable, Mapping
from types import MappingProxyType
from typing import Any, Generic, Protocol, TypeVar

from querybind.config import DispatchSettings
from querybind.core.params import bind_arguments
from querybind.core.routing import RouteEntry, collect_routes
from querybind.dispatch.engine import Dispatcher
from querybind.executables import Registry

logger = logging.getLogger(__name__)

T = TypeVar("T")

_HANDLER_ATTR = "__querybind_handler__"
_SKIPPED_BASES = (object, Protocol, Generic)


class ProxyHandler:
    """Intercepts calls made on a proxy and hands routed ones to a Dispatcher.

    Owns the interface's method index, built once here and read-only
    afterwards, so one handler can serve concurrent callers.

    Args:
        interface: Interface the proxy implements.
        registry: Lookup of executables by logical id.
        delegate: Implementation for methods without routing metadata.
        settings: Dispatch settings.

    Raises:
        ConfigurationError: If settings.validate_on_build and settings.strict
            are both set and a route is misconfigured.
    """

    def __init__(
        self,
        interface: type,
        registry: Registry,
        delegate: object | None = None,
        settings: DispatchSettings | None = None,
    ) -> None:
        self._interface = interface
        self._interface_name = f"{interface.__module__}.{interface.__qualname__}"
        self._routes: Mapping[str, RouteEntry] = MappingProxyType(collect_routes(interface))
        self._dispatcher = Dispatcher(self._interface_name, registry, settings)
        self._delegate = delegate

        logger.debug(
            "Built method index for %s: %d routed method(s)",
            self._interface_name,
            len(self._routes),
        )
        if self._dispatcher.settings.validate_on_build:
            self.validate_routes()

    @property
    def interface(self) -> type:
        return self._interface

    @property
    def routes(self) -> Mapping[str, RouteEntry]:
        """Read-only method index: name to route entry."""
        return self._routes

    @property
    def delegate(self) -> object | None:
        """Implementation receiving calls to methods without routing metadata."""
        return self._delegate

    @delegate.setter
    def delegate(self, delegate: object | None) -> None:
        self._delegate = delegate

    def validate_routes(self) -> list[str]:
        """Check every routed method's param_names against its signature.

        Problems are reported the same way as at call time (logged, or raised
        in strict mode).

        Returns:
            Names of misconfigured methods.
        """
        invalid = []
        for entry in self._routes.values():
            reason = self._dispatcher.validate(entry)
            if reason is not None:
                self._dispatcher.configuration_error(entry, reason)
                invalid.append(entry.name)
        return invalid

    def call(self, entry: RouteEntry, args: tuple[Any, ...], kwargs: dict[str, Any]) -> Any:
        """Bind a routed call's arguments and dispatch it."""
        return self._dispatcher.dispatch(entry, bind_arguments(entry, args, kwargs))

    def invoke(self, name: str, *args: Any, **kwargs: Any) -> Any:
        """Call an interface method by name.

        Routed methods are dispatched; others go to the delegate.

        Raises:
            AttributeError: If the method is not routed and there is no
                delegate to receive it.
        """
        entry = self._routes.get(name)
        if entry is not None:
            return self.call(entry, args, kwargs)
        if self._delegate is None:
            raise AttributeError(
                f"{self._interface_name}.{name} is not routed and the proxy has no delegate"
            )
        return getattr(self._delegate, name)(*args, **kwargs)

    def __repr__(self) -> str:
        return f"ProxyHandler({self._interface_name}, routes={list(self._routes)})"


def _routed_method(entry: RouteEntry) -> Callable[..., Any]:
    @functools.wraps(entry.function, updated=())
    def method(self: Any, *args: Any, **kwargs: Any) -> Any:
        return get_handler(self).call(entry, args, kwargs)

    return method


def _passthrough_method(name: str, func: Callable[..., Any]) -> Callable[..., Any]:
    abstract = getattr(func, "__isabstractmethod__", False)

    @functools.wraps(func, updated=())
    def method(self: Any, *args: Any, **kwargs: Any) -> Any:
        delegate = get_handler(self).delegate
        if delegate is not None:
            return getattr(delegate, name)(*args, **kwargs)
        if abstract:
            return None
        return func(self, *args, **kwargs)

    return method


def _passthrough_names(interface: type) -> dict[str, Callable[..., Any]]:
    """Plain, non-dunder functions declared anywhere on the interface.

    Static methods, class methods and properties are left out.
    """
    found: dict[str, Callable[..., Any]] = {}
    for klass in reversed(interface.__mro__):
        if klass in _SKIPPED_BASES:
            continue
        for name in vars(klass):
            if name.startswith("__") and name.endswith("__"):
                continue
            attr = inspect.getattr_static(interface, name)
            if inspect.isfunction(attr):
                found[name] = attr
    return found


def _proxy_class(interface: type, routes: Mapping[str, RouteEntry]) -> type:
    def __init__(self: Any, handler: ProxyHandler) -> None:
        object.__setattr__(self, _HANDLER_ATTR, handler)

    def __repr__(self: Any) -> str:
        return f"<{interface.__qualname__} proxy at {id(self):#x}>"

    def __eq__(self: Any, other: object) -> bool:
        return self is other

    def __hash__(self: Any) -> int:
        return id(self)

    namespace: dict[str, Any] = {
        "__init__": __init__,
        "__repr__": __repr__,
        "__eq__": __eq__,
        "__hash__": __hash__,
        "__module__": interface.__module__,
        "__qualname__": f"{interface.__qualname__}Proxy",
    }
    for name, func in _passthrough_names(interface).items():
        if name not in routes:
            namespace[name] = _passthrough_method(name, func)
    for name, entry in routes.items():
        namespace[name] = _routed_method(entry)

    cls = type(interface)(f"{interface.__name__}Proxy", (interface,), namespace)
    # Abstract members left on the interface (properties, static methods) must
    # not block instantiation
    cls.__abstractmethods__ = frozenset()
    return cls


def build_proxy(
    interface: type[T],
    delegate: object | None = None,
    *,
    registry: Registry,
    settings: DispatchSettings | None = None,
) -> T:
    """Build a proxy implementing interface by dispatching routed methods.

    Only plain functions are forwarded to the delegate. Static methods,
    class methods, properties and dunders without routing keep the
    interface's own behaviour on the proxy; reach the delegate's versions
    through get_handler(proxy).invoke(name, ...).

    Args:
        interface: Class, ABC or Protocol declaring @route methods.
        delegate: Optional implementation for methods without routing metadata.
        registry: Lookup of executables by logical id.
        settings: Dispatch settings. Defaults to DispatchSettings().

    Returns:
        Instance of a generated subclass of interface.
    """
    handler = ProxyHandler(interface, registry, delegate, settings)
    cls = _proxy_class(interface, handler.routes)
    return cls(handler)  # type: ignore[no-any-return]


def get_handler(proxy: object) -> ProxyHandler:
    """Get the handler behind a proxy built by build_proxy.

    Raises:
        TypeError: If proxy was not built by build_proxy.
    """
    handler = getattr(proxy, _HANDLER_ATTR, None)
    if not isinstance(handler, ProxyHandler):
        raise TypeError(f"{type(proxy).__name__} is not a querybind proxy")
    return handler
