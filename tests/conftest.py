from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import pytest

from db.mysql_database import MySqlDatabase


@dataclass
class FakeResult:
    columns: list[str] | None = None
    rows: list[tuple] = field(default_factory=list)
    rowcount: int = 0
    error: Exception | None = None


class FakeCursor:
    """Minimal buffered mysql.connector cursor backed by queued results."""

    def __init__(self, conn: "FakeConnection"):
        self.conn = conn
        self.description = None
        self.rowcount = -1
        self.closed = False
        self._rows: list[tuple] = []
        self._stored: list["FakeCursor"] = []

    def _load(self, result: FakeResult) -> None:
        if result.error is not None:
            raise result.error
        self.description = (
            [(name, None, None, None, None, None, True) for name in result.columns]
            if result.columns is not None
            else None
        )
        self._rows = list(result.rows)
        self.rowcount = result.rowcount if result.columns is None else len(result.rows)

    def execute(self, operation: str, params: Any = None) -> None:
        self.conn.executed.append((operation, params))
        self._load(self.conn.next_result())

    def fetchall(self) -> list[tuple]:
        rows, self._rows = self._rows, []
        return rows

    def callproc(self, procname: str, args: Any = ()) -> Any:
        self.conn.executed.append((f"CALL {procname}", tuple(args)))
        stored = FakeCursor(self.conn)
        stored._load(self.conn.next_result())
        self._stored = [stored] if stored.description is not None else []
        return args

    def stored_results(self):
        return iter(self._stored)

    def close(self) -> None:
        self.closed = True


class FakeConnection:
    def __init__(self, results: list[FakeResult] | None = None):
        self.results = list(results or [])
        self.executed: list[tuple[str, Any]] = []
        self.cursors: list[FakeCursor] = []
        self.closed = False
        self.events: list[str] = []

    def queue(self, *results: FakeResult) -> None:
        self.results.extend(results)

    def next_result(self) -> FakeResult:
        return self.results.pop(0) if self.results else FakeResult()

    def cursor(self, buffered: bool = False, **kwargs) -> FakeCursor:
        cur = FakeCursor(self)
        self.cursors.append(cur)
        return cur

    def start_transaction(self) -> None:
        self.events.append("begin")

    def commit(self) -> None:
        self.events.append("commit")

    def rollback(self) -> None:
        self.events.append("rollback")

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def conn() -> FakeConnection:
    return FakeConnection()


@pytest.fixture
def db(conn: FakeConnection) -> MySqlDatabase:
    return MySqlDatabase(conn, database_name="shop")
