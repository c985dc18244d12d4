"""Dispatcher: routes a called method to its registered executable.

Each call runs Validate -> Resolve -> Execute -> Shape and keeps no state
between calls:

    1. Validate param_names against the method's parameter count.
    2. Resolve the logical id in the registry to a Statement or a
       StatementGroup.
    3. Execute along the path selected by the statement kind (or the group).
    4. Shape the raw output to the method's declared return kind.

Configuration problems never reach the caller as exceptions unless strict
mode is on: they are logged and the method's fallback value is returned
(False for bool methods, None otherwise). Exceptions raised by executables
propagate unchanged.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, MutableSequence, Sequence
from typing import Any, assert_never

from querybind.config import DispatchSettings
from querybind.core.params import pack_params
from querybind.core.returns import ReturnKind
from querybind.core.routing import RouteEntry
from querybind.dispatch.errors import ConfigurationError
from querybind.executables import (
    GroupResult,
    Registry,
    Statement,
    StatementGroup,
    StatementKind,
)

logger = logging.getLogger(__name__)


def _invoke(method: Callable[..., Any], args: Sequence[Any], params: Any) -> Any:
    """Use the parameterless form when the call had no arguments."""
    if not args:
        return method()
    return method(params)


class Dispatcher:
    """Executes routed calls for one interface.

    Args:
        interface_name: Qualified interface name used in diagnostics.
        registry: Lookup of executables by logical id.
        settings: Dispatch settings. Defaults to DispatchSettings() which
            reads QUERYBIND_* environment variables.
    """

    def __init__(
        self,
        interface_name: str,
        registry: Registry,
        settings: DispatchSettings | None = None,
    ) -> None:
        self._interface_name = interface_name
        self._registry = registry
        self._settings = settings or DispatchSettings()

    @property
    def settings(self) -> DispatchSettings:
        return self._settings

    def validate(self, entry: RouteEntry) -> str | None:
        """Check param_names against the method's parameter count.

        Args:
            entry: Routed method to check.

        Returns:
            Reason the route is misconfigured, or None if it is valid.
        """
        names = entry.meta.param_names
        if not names and entry.param_count >= 2:
            return "Method parameter count >= 2, but route param_names is empty."
        if names and len(names) > entry.param_count:
            return "Route param_names count is greater than method parameter count."
        return None

    def configuration_error(self, entry: RouteEntry, reason: str) -> Any:
        """Report a configuration error and produce the method's fallback value.

        Args:
            entry: Routed method that cannot be dispatched.
            reason: Diagnostic message.

        Returns:
            False for bool methods, None otherwise.

        Raises:
            ConfigurationError: In strict mode.
        """
        if self._settings.strict:
            raise ConfigurationError(self._interface_name, entry.name, reason)
        logger.error("Call %s.%s: %s", self._interface_name, entry.name, reason)
        return entry.returns.fallback()

    def dispatch(self, entry: RouteEntry, args: Sequence[Any]) -> Any:
        """Execute a routed call.

        Args:
            entry: Routed method being called.
            args: Bound positional arguments, in declaration order.

        Returns:
            The shaped result, or the fallback value on configuration errors.
        """
        reason = self.validate(entry)
        if reason is not None:
            return self.configuration_error(entry, reason)

        logical_id = entry.meta.logical_id(entry.name)
        target = self._registry.resolve(logical_id)

        if target is None:
            return self.configuration_error(entry, f"Logical id [{logical_id}] does not exist.")
        if isinstance(target, Statement):
            return self._execute_statement(entry, target, args)
        if isinstance(target, StatementGroup):
            return self._execute_group(entry, target, args)
        return self.configuration_error(
            entry,
            f"Logical id [{logical_id}] resolves to {type(target).__name__}, "
            f"which is neither a Statement nor a StatementGroup.",
        )

    def _execute_statement(
        self, entry: RouteEntry, statement: Statement, args: Sequence[Any]
    ) -> Any:
        kind = statement.statement_kind
        if not isinstance(kind, StatementKind):
            return self.configuration_error(entry, f"Unsupported statement kind {kind!r}.")

        logger.debug(
            "Dispatching %s.%s as %s returning %s",
            self._interface_name,
            entry.name,
            kind.name,
            entry.returns.name,
        )
        params = pack_params(entry.meta, args)

        match kind:
            case StatementKind.QUERY:
                return self._shape_query(entry, _invoke(statement.query, args, params))
            case StatementKind.INSERT | StatementKind.UPDATE | StatementKind.DELETE:
                return self._shape_count(entry, _invoke(statement.execute_update, args, params))
            case StatementKind.DDL | StatementKind.UNKNOWN:
                return self._shape_flag(entry, _invoke(statement.execute, args, params))
            case StatementKind.CALL:
                return self._shape_call(entry, _invoke(statement.call, args, params))
            case _:
                assert_never(kind)

    def _shape_query(self, entry: RouteEntry, raw: Any) -> Any:
        if entry.returns is ReturnKind.VOID:
            return None
        if entry.meta.return_one and isinstance(raw, MutableSequence) and len(raw) >= 1:
            return raw[0]
        return raw

    def _shape_count(self, entry: RouteEntry, count: int) -> Any:
        if entry.returns is ReturnKind.BOOL:
            return count >= 1
        if entry.returns is ReturnKind.INT:
            return count
        # VOID, and any return type a row count cannot satisfy
        return None

    def _shape_flag(self, entry: RouteEntry, flag: bool) -> Any:
        if entry.returns is ReturnKind.BOOL:
            return flag
        return None

    def _shape_call(self, entry: RouteEntry, raw: Any) -> Any:
        if entry.returns is ReturnKind.VOID:
            return None
        return raw

    def _execute_group(self, entry: RouteEntry, group: StatementGroup, args: Sequence[Any]) -> Any:
        logger.debug(
            "Dispatching %s.%s as group returning %s",
            self._interface_name,
            entry.name,
            entry.returns.name,
        )
        params = pack_params(entry.meta, args)
        result: GroupResult = _invoke(group.executes, args, params)

        if not result.success:
            group.log_diagnostics(result)

        returns = entry.returns
        if returns is ReturnKind.VOID:
            return None
        if entry.meta.return_id:
            return result.returns.get(entry.meta.return_id) if result.success else None
        if returns is ReturnKind.MAP:
            return result.returns if result.success else None
        if returns is ReturnKind.BOOL:
            return result.success
        if returns in (ReturnKind.GROUP_RESULT, ReturnKind.OBJECT):
            return result
        return None
