"""Protocols for registered executables and the registry that holds them.

The dispatcher never executes SQL itself. Applications register statement
and group objects under logical ids and hand the dispatcher a registry:

Usage:
    class Registry:
        def __init__(self, objects: dict[str, object]) -> None:
            self._objects = objects

        def resolve(self, logical_id: str) -> object | None:
            return self._objects.get(logical_id)

    proxy = build_proxy(UserQueries, registry=Registry({"find_user": stmt}))

Both executable protocols are runtime checkable. The dispatcher uses
isinstance() to tell a Statement from a StatementGroup, checking Statement
first.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from querybind.executables.models import GroupResult, StatementKind


@runtime_checkable
class Statement(Protocol):
    """A single registered query or command.

    Each method is called without arguments when the intercepted call had
    none, and with the packed parameters otherwise. Exceptions raised here
    propagate to the caller untouched.
    """

    @property
    def statement_kind(self) -> StatementKind:
        """Kind of statement, selects the execution path."""
        ...

    def query(self, params: Any = None) -> Any:
        """Run a query and return its record set."""
        ...

    def execute_update(self, params: Any = None) -> int:
        """Run an insert/update/delete and return the affected row count."""
        ...

    def execute(self, params: Any = None) -> bool:
        """Run a generic statement (DDL or unknown) and return its success flag."""
        ...

    def call(self, params: Any = None) -> Any:
        """Run a stored procedure/function and return its value."""
        ...


@runtime_checkable
class StatementGroup(Protocol):
    """A batch of statements executed together with one aggregate outcome."""

    def executes(self, params: Any = None) -> GroupResult:
        """Execute every statement in the group.

        Args:
            params: Packed parameters shared by the group's statements.

        Returns:
            Aggregate result. Execution failures are reported through
            GroupResult.success rather than raised.
        """
        ...

    def log_diagnostics(self, result: GroupResult) -> None:
        """Write the group's own diagnostic output for a failed execution."""
        ...


@runtime_checkable
class Registry(Protocol):
    """Lookup of executables by logical id."""

    def resolve(self, logical_id: str) -> object | None:
        """Find the executable registered under logical_id.

        Returns:
            The registered object, or None if nothing is registered.
        """
        ...
