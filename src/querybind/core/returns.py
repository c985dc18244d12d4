"""Return annotation classification.

The dispatcher shapes raw execution output according to what the routed
method declares it returns. Annotations are reduced once, at proxy
construction, to a closed set of kinds.
"""

from __future__ import annotations

import logging
import types
import typing
from collections.abc import Callable, Mapping, MutableMapping, MutableSequence, Sequence
from enum import Enum, auto
from typing import Any

from querybind.executables.models import GroupResult

logger = logging.getLogger(__name__)

_MAPPING_TYPES = (dict, Mapping, MutableMapping)
_SEQUENCE_TYPES = (list, tuple, Sequence, MutableSequence)


class ReturnKind(Enum):
    """Shape a routed method declares for its result."""

    VOID = auto()  # -> None
    BOOL = auto()  # -> bool
    INT = auto()  # -> int
    LIST = auto()  # -> list[...], Sequence[...], tuple[...]
    MAP = auto()  # -> dict[...], Mapping[...]
    OBJECT = auto()  # -> object, Any, or no annotation
    GROUP_RESULT = auto()  # -> GroupResult (or subclass)
    OPAQUE = auto()  # Anything else: records, str, float, ...

    def fallback(self) -> Any:
        """Value returned when a call cannot be dispatched.

        Returns:
            False for BOOL so "false means not done" holds, None otherwise.
        """
        return False if self is ReturnKind.BOOL else None


def classify_annotation(annotation: Any) -> ReturnKind:
    """Reduce a resolved return annotation to a ReturnKind.

    Optional[X] and X | None classify as X. Unions of several non-None
    members are OPAQUE.

    Args:
        annotation: Resolved annotation (not a string).

    Returns:
        The matching kind.
    """
    if annotation is None or annotation is types.NoneType:
        return ReturnKind.VOID
    if annotation is Any or annotation is object:
        return ReturnKind.OBJECT

    origin = typing.get_origin(annotation)
    if origin is typing.Union or origin is types.UnionType:
        members = [a for a in typing.get_args(annotation) if a is not types.NoneType]
        if len(members) == 1:
            return classify_annotation(members[0])
        return ReturnKind.OPAQUE

    base = origin or annotation
    if base is bool:
        return ReturnKind.BOOL
    if base is int:
        return ReturnKind.INT
    if isinstance(base, type):
        if issubclass(base, GroupResult):
            return ReturnKind.GROUP_RESULT
        if base in _MAPPING_TYPES:
            return ReturnKind.MAP
        if base in _SEQUENCE_TYPES:
            return ReturnKind.LIST
    return ReturnKind.OPAQUE


def classify_return(func: Callable[..., Any]) -> ReturnKind:
    """Classify a function's declared return type.

    Postponed (string) annotations are resolved against the function's
    module. Only the return annotation is resolved, so parameter types
    imported under TYPE_CHECKING do not matter. A missing or unresolvable
    return annotation counts as OBJECT.

    Args:
        func: Plain function as declared on the interface.

    Returns:
        The function's ReturnKind.
    """
    annotations = getattr(func, "__annotations__", None) or {}
    if "return" not in annotations:
        return ReturnKind.OBJECT

    return_only = types.SimpleNamespace(__annotations__={"return": annotations["return"]})
    try:
        hints = typing.get_type_hints(return_only, globalns=getattr(func, "__globals__", None))
    except (NameError, TypeError) as e:
        logger.debug("Cannot resolve return annotation of %s: %s", func.__qualname__, e)
        return ReturnKind.OBJECT
    return classify_annotation(hints["return"])
