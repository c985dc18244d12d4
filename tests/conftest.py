"""Shared test fixtures and executable fakes."""

import sys
from typing import Any

import pytest

# Ensure src is in path
sys.path.insert(0, "src")

from querybind import DispatchSettings, Dispatcher, GroupResult, RouteEntry, StatementKind
from querybind.core.routing import build_route_entry, get_route_meta


class FakeStatement:
    """Statement double recording which execution method was called and how."""

    def __init__(self, kind: StatementKind, result: Any = None) -> None:
        self.statement_kind = kind
        self.result = result
        self.calls: list[tuple[str, tuple[Any, ...]]] = []

    def _record(self, name: str, args: tuple[Any, ...]) -> Any:
        self.calls.append((name, args))
        return self.result

    def query(self, *args: Any) -> Any:
        return self._record("query", args)

    def execute_update(self, *args: Any) -> Any:
        return self._record("execute_update", args)

    def execute(self, *args: Any) -> Any:
        return self._record("execute", args)

    def call(self, *args: Any) -> Any:
        return self._record("call", args)


class FakeGroup:
    """StatementGroup double returning a fixed GroupResult."""

    def __init__(self, result: GroupResult) -> None:
        self.result = result
        self.calls: list[tuple[Any, ...]] = []
        self.logged: list[GroupResult] = []

    def executes(self, *args: Any) -> GroupResult:
        self.calls.append(args)
        return self.result

    def log_diagnostics(self, result: GroupResult) -> None:
        self.logged.append(result)


class FakeRegistry:
    """Registry double backed by a dict, recording every lookup."""

    def __init__(self, objects: dict[str, object] | None = None) -> None:
        self.objects = dict(objects or {})
        self.lookups: list[str] = []

    def resolve(self, logical_id: str) -> object | None:
        self.lookups.append(logical_id)
        return self.objects.get(logical_id)


def make_entry(fn: Any) -> RouteEntry:
    """Build a route entry for a module-level @route function taking self."""
    meta = get_route_meta(fn)
    assert meta is not None, f"{fn.__name__} is not routed"
    return build_route_entry(fn.__name__, fn, meta)


@pytest.fixture
def registry():
    """Empty FakeRegistry."""
    return FakeRegistry()


@pytest.fixture
def settings():
    """Default settings, independent of QUERYBIND_* environment variables."""
    return DispatchSettings(strict=False, validate_on_build=False)


@pytest.fixture
def dispatcher(registry, settings):
    """Dispatcher over the empty registry fixture."""
    return Dispatcher("tests.Interface", registry, settings)


@pytest.fixture
def statement_cls():
    return FakeStatement


@pytest.fixture
def group_cls():
    return FakeGroup


@pytest.fixture
def entry_for():
    return make_entry
