"""Executable models: statement kinds and group results.

These types are shared between the dispatcher and the query/command objects
registered by the application. The dispatcher only reads them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any


class StatementKind(Enum):
    """What a single statement does when executed."""

    QUERY = auto()  # Returns a record set
    INSERT = auto()  # Returns affected row count
    UPDATE = auto()  # Returns affected row count
    DELETE = auto()  # Returns affected row count
    DDL = auto()  # Returns success flag
    CALL = auto()  # Stored procedure/function, returns opaque value
    UNKNOWN = auto()  # Treated like DDL

    def is_write(self) -> bool:
        """Check if statement mutates rows and reports an affected count.

        Returns:
            True for INSERT, UPDATE and DELETE.
        """
        return self in (StatementKind.INSERT, StatementKind.UPDATE, StatementKind.DELETE)


@dataclass
class GroupResult:
    """Aggregate outcome of executing a statement group.

    Returned whole to callers whose method is annotated with this type (or
    with no specific type), so they can inspect sub-results or drive their
    own commit/rollback through a subclass.

    Attributes:
        success: True if every statement in the group succeeded.
        returns: Named sub-results keyed by sub-identifier.
        error: Exception that stopped the group, if any.
        failed_id: Identifier of the statement that failed, if known.
    """

    success: bool
    returns: dict[str, Any] = field(default_factory=dict)
    error: BaseException | None = None
    failed_id: str | None = None

    def get(self, return_id: str) -> Any:
        """Get a named sub-result.

        Args:
            return_id: Sub-identifier to look up.

        Returns:
            The sub-result, or None if the group produced nothing under that id.
        """
        return self.returns.get(return_id)
