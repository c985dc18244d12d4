import logging
import sqlite3
from dataclasses import dataclass
from typing import Any, Protocol

from querybind import DispatchSettings, StatementKind, build_proxy, route


@dataclass
class SqliteStatement:
    """Minimal statement object: one SQL string bound to a connection."""

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


class Registry:
    def __init__(self) -> None:
        self._objects: dict[str, object] = {}

    def register(self, logical_id: str, executable: object) -> None:
        self._objects[logical_id] = executable

    def resolve(self, logical_id: str) -> object | None:
        return self._objects.get(logical_id)


class Notes(Protocol):
    @route("create_notes")
    def create_table(self) -> bool: ...

    @route(param_names=("title", "body"))
    def add_note(self, title: str, body: str) -> int: ...

    @route("note_by_title", return_one=True)
    def find_note(self, title: str) -> dict | None: ...

    @route
    def all_notes(self) -> list[dict]: ...

    # Two parameters but no param_names: logged and answered with the fallback
    @route("all_notes")
    def broken(self, title: str, body: str) -> bool: ...


def main() -> None:
    logging.basicConfig(level=logging.INFO)
    connection = sqlite3.connect(":memory:")
    registry = Registry()

    def register(logical_id: str, sql: str, kind: StatementKind) -> None:
        registry.register(logical_id, SqliteStatement(connection, sql, kind))

    register("create_notes", "CREATE TABLE notes (title TEXT, body TEXT)", StatementKind.DDL)
    register("add_note", "INSERT INTO notes VALUES (:title, :body)", StatementKind.INSERT)
    register("note_by_title", "SELECT * FROM notes WHERE title = ?", StatementKind.QUERY)
    register("all_notes", "SELECT * FROM notes ORDER BY title", StatementKind.QUERY)

    notes = build_proxy(Notes, registry=registry, settings=DispatchSettings())
    notes.create_table()
    print(f"Inserted {notes.add_note('groceries', 'milk, eggs')} row(s).")
    notes.add_note(title="ideas", body="route interface methods to SQL")

    print(notes.find_note("ideas"))
    print([n["title"] for n in notes.all_notes()])
    print(f"Misconfigured call returned {notes.broken('a', 'b')!r}")


if __name__ == "__main__":
    main()
