"""Argument binding and parameter packing.

Executables take a single params argument. A routed call's arguments are
packed into it as:
    - None when the call has no arguments
    - the first argument as-is when the route declares no param_names
    - a fresh {name: value} dict when it does
"""

from __future__ import annotations

import inspect
from collections.abc import Sequence
from typing import Any

from querybind.core.routing.models import RouteEntry, RouteMeta

_POSITIONAL = (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)


def bind_arguments(
    entry: RouteEntry, args: Sequence[Any], kwargs: dict[str, Any]
) -> tuple[Any, ...]:
    """Bind a call against the interface signature and order its arguments.

    Keyword arguments and defaults are resolved so packing only ever sees
    positional values.

    Args:
        entry: Routed method being called.
        args: Positional call arguments (without self).
        kwargs: Keyword call arguments.

    Returns:
        Values of the method's positional parameters, in declaration order.

    Raises:
        TypeError: If the arguments do not fit the signature.
    """
    bound = entry.signature.bind(*args, **kwargs)
    bound.apply_defaults()
    return tuple(
        bound.arguments[p.name]
        for p in entry.signature.parameters.values()
        if p.kind in _POSITIONAL
    )


def pack_params(meta: RouteMeta, args: Sequence[Any]) -> Any:
    """Pack positional arguments into the parameter shape executables expect.

    Args:
        meta: Routing metadata of the called method.
        args: Positional arguments in declaration order.

    Returns:
        None, a single value, or a new dict of named values.

    Note:
        Arguments beyond len(param_names) are ignored. Callers must have
        checked that param_names is not longer than args.
    """
    if not meta.param_names:
        if not args:
            return None
        return args[0]

    params: dict[str, Any] = {}
    for index, name in enumerate(meta.param_names):
        if name:
            params[name] = args[index]
    return params
