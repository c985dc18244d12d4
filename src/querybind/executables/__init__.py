"""Executable contracts: statement kinds, group results and registry protocols."""

from querybind.executables.models import GroupResult, StatementKind
from querybind.executables.protocol import Registry, Statement, StatementGroup

__all__ = [
    # Models
    "StatementKind",
    "GroupResult",
    # Protocols
    "Statement",
    "StatementGroup",
    "Registry",
]
