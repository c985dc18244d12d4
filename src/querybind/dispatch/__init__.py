"""Dispatch: proxies, the dispatcher and its errors."""

from querybind.dispatch.engine import Dispatcher
from querybind.dispatch.errors import ConfigurationError
from querybind.dispatch.proxy import ProxyHandler, build_proxy, get_handler

__all__ = [
    "Dispatcher",
    "ConfigurationError",
    "ProxyHandler",
    "build_proxy",
    "get_handler",
]
