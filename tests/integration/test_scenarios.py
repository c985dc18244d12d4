"""End-to-end journeys through build_proxy.

The sqlite-backed executables here are minimal stand-ins for the
application's real statement objects.
"""

import logging
import sqlite3
from dataclasses import dataclass, field
from typing import Any, Protocol

import pytest

from querybind import GroupResult, StatementKind, build_proxy, get_handler, route


class Accounts(Protocol):
    @route(param_names=("name",))
    def update_name(self, name: str) -> int: ...

    @route
    def run_batch(self) -> bool: ...

    @route
    def find(self, a: str, b: int) -> list[dict]: ...


def test_update_returns_affected_rows(registry, settings, statement_cls):
    statement = statement_cls(StatementKind.UPDATE, 1)
    registry.objects["update_name"] = statement
    accounts = build_proxy(Accounts, registry=registry, settings=settings)

    assert accounts.update_name("ann") == 1
    assert statement.calls == [("execute_update", ({"name": "ann"},))]


def test_failed_batch_returns_false_and_logs_once(registry, settings, group_cls):
    group = group_cls(GroupResult(success=False))
    registry.objects["run_batch"] = group
    accounts = build_proxy(Accounts, registry=registry, settings=settings)

    assert accounts.run_batch() is False
    assert len(group.logged) == 1


def test_unnamed_two_parameter_method_never_reaches_registry(registry, settings, caplog):
    accounts = build_proxy(Accounts, registry=registry, settings=settings)

    with caplog.at_level(logging.ERROR):
        assert accounts.find("a", 1) is None

    assert registry.lookups == []
    assert "Accounts.find" in caplog.text


# --- sqlite journey ---


@dataclass
class SqliteStatement:
    connection: sqlite3.Connection
    sql: str
    statement_kind: StatementKind

    def _run(self, params: Any) -> sqlite3.Cursor:
        if params is None:
            return self.connection.execute(self.sql)
        if isinstance(params, dict):
            return self.connection.execute(self.sql, params)
        return self.connection.execute(self.sql, (params,))

    def query(self, params: Any = None) -> list[dict]:
        cursor = self._run(params)
        columns = [c[0] for c in cursor.description]
        return [dict(zip(columns, row, strict=True)) for row in cursor.fetchall()]

    def execute_update(self, params: Any = None) -> int:
        return self._run(params).rowcount

    def execute(self, params: Any = None) -> bool:
        self._run(params)
        return True

    def call(self, params: Any = None) -> Any:
        return self._run(params).fetchone()[0]


@dataclass
class SqliteGroup:
    connection: sqlite3.Connection
    steps: list[tuple[str, SqliteStatement]]
    log: list[GroupResult] = field(default_factory=list)

    def executes(self, params: Any = None) -> GroupResult:
        returns: dict[str, Any] = {}
        for step_id, statement in self.steps:
            try:
                if statement.statement_kind is StatementKind.QUERY:
                    returns[step_id] = statement.query(params)
                else:
                    returns[step_id] = statement.execute_update(params)
            except sqlite3.Error as e:
                self.connection.rollback()
                return GroupResult(success=False, returns=returns, error=e, failed_id=step_id)
        self.connection.commit()
        return GroupResult(success=True, returns=returns)

    def log_diagnostics(self, result: GroupResult) -> None:
        self.log.append(result)


class DictRegistry:
    def __init__(self, objects: dict[str, object]) -> None:
        self._objects = objects

    def resolve(self, logical_id: str) -> object | None:
        return self._objects.get(logical_id)


class Users(Protocol):
    @route("create_users")
    def create_table(self) -> bool: ...

    @route(param_names=("name", "age"))
    def add_user(self, name: str, age: int) -> bool: ...

    @route("users_by_name", return_one=True)
    def find_user(self, name: str) -> dict | None: ...

    @route("all_users")
    def list_users(self) -> list[dict]: ...

    @route("count_users")
    def count(self) -> int: ...

    @route("birthday", param_names=("name",))
    def birthday(self, name: str) -> dict[str, Any]: ...

    @route("birthday", param_names=("name",), return_id="user")
    def birthday_user(self, name: str) -> list[dict]: ...

    @route("broken_batch")
    def broken(self) -> GroupResult: ...


@pytest.fixture
def users(settings):
    connection = sqlite3.connect(":memory:")

    def stmt(sql: str, kind: StatementKind) -> SqliteStatement:
        return SqliteStatement(connection, sql, kind)

    objects: dict[str, object] = {
        "create_users": stmt(
            "CREATE TABLE users (name TEXT PRIMARY KEY, age INTEGER)", StatementKind.DDL
        ),
        "add_user": stmt("INSERT INTO users VALUES (:name, :age)", StatementKind.INSERT),
        "users_by_name": stmt("SELECT * FROM users WHERE name = ?", StatementKind.QUERY),
        "all_users": stmt("SELECT * FROM users ORDER BY name", StatementKind.QUERY),
        "count_users": stmt("SELECT COUNT(*) FROM users", StatementKind.CALL),
        "birthday": SqliteGroup(
            connection,
            [
                (
                    "updated",
                    stmt("UPDATE users SET age = age + 1 WHERE name = :name", StatementKind.UPDATE),
                ),
                ("user", stmt("SELECT * FROM users WHERE name = :name", StatementKind.QUERY)),
            ],
        ),
        "broken_batch": SqliteGroup(
            connection, [("missing", stmt("SELECT * FROM missing_table", StatementKind.QUERY))]
        ),
    }
    yield build_proxy(Users, registry=DictRegistry(objects), settings=settings)
    connection.close()


def test_sqlite_journey(users):
    assert users.create_table() is True
    assert users.add_user("ann", 41) is True
    assert users.add_user(name="bob", age=29) is True

    assert users.find_user("ann") == {"name": "ann", "age": 41}
    assert users.find_user("nobody") == []
    assert [u["name"] for u in users.list_users()] == ["ann", "bob"]
    assert users.count() == 2


def test_sqlite_group_sub_results(users):
    users.create_table()
    users.add_user("ann", 41)

    returns = users.birthday("ann")
    assert returns["updated"] == 1
    assert returns["user"] == [{"name": "ann", "age": 42}]

    assert users.birthday_user("ann") == [{"name": "ann", "age": 43}]


def test_sqlite_group_failure_is_inspectable(users):
    result = users.broken()

    assert result.success is False
    assert result.failed_id == "missing"
    assert isinstance(result.error, sqlite3.OperationalError)
    assert get_handler(users).routes["broken"].meta.id is None
