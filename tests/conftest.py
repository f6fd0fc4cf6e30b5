"""Shared test fixtures.

The fakes mirror the parts of the Spanner client surface SpanQuery
touches: ``Database.snapshot()``, ``Database.batch()`` and
``execute_sql`` on snapshots and read-write transactions.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

import pytest

COMMIT_TS = datetime(2024, 5, 1, 12, 0, 0, tzinfo=timezone.utc)


class FakeSnapshot:
    def __init__(self, database: FakeDatabase) -> None:
        self._database = database
        self.closed = 0

    def __enter__(self) -> FakeSnapshot:
        return self

    def __exit__(self, *exc: Any) -> None:
        self.closed += 1
        self._database.released += 1

    def execute_sql(self, sql: str, **kwargs: Any) -> list[list[Any]]:
        self._database.queries.append((sql, kwargs))
        return list(self._database.rows)


class FakeBatch:
    def __init__(self, database: FakeDatabase) -> None:
        self._database = database
        self.calls: list[tuple[Any, ...]] = []
        self.committed: datetime | None = None

    def __enter__(self) -> FakeBatch:
        return self

    def __exit__(self, exc_type: Any, *exc: Any) -> None:
        if exc_type is not None:
            return
        self._database.commits.append(self.calls)
        if self._database.commit_error is not None:
            raise self._database.commit_error
        self.committed = COMMIT_TS

    def insert(self, table: str, columns: Any, values: Any) -> None:
        self.calls.append(("insert", table, tuple(columns), list(values)))

    def update(self, table: str, columns: Any, values: Any) -> None:
        self.calls.append(("update", table, tuple(columns), list(values)))

    def insert_or_update(self, table: str, columns: Any, values: Any) -> None:
        self.calls.append(("insert_or_update", table, tuple(columns), list(values)))

    def delete(self, table: str, keyset: Any) -> None:
        self.calls.append(("delete", table, keyset))


class FakeReadWriteTransaction:
    def __init__(self, rows: list[list[Any]]) -> None:
        self.rows = rows
        self.queries: list[tuple[str, dict[str, Any]]] = []

    def execute_sql(self, sql: str, **kwargs: Any) -> list[list[Any]]:
        self.queries.append((sql, kwargs))
        return list(self.rows)


class FakeDatabase:
    def __init__(self, rows: list[list[Any]] | None = None) -> None:
        self.rows: list[list[Any]] = rows or []
        self.queries: list[tuple[str, dict[str, Any]]] = []
        self.commits: list[list[tuple[Any, ...]]] = []
        self.commit_error: Exception | None = None
        self.released = 0
        self.snapshots = 0
        self.batches = 0

    def snapshot(self) -> FakeSnapshot:
        self.snapshots += 1
        return FakeSnapshot(self)

    def batch(self) -> FakeBatch:
        self.batches += 1
        return FakeBatch(self)


@pytest.fixture
def database() -> FakeDatabase:
    """Fake Spanner database with no rows."""
    return FakeDatabase()


@pytest.fixture
def commit_ts() -> datetime:
    """Commit timestamp reported by the fake batch."""
    return COMMIT_TS


@pytest.fixture
def rw_transaction():
    """Build a fake read-write transaction handle returning *rows*."""

    def _make(rows: list[list[Any]]) -> FakeReadWriteTransaction:
        return FakeReadWriteTransaction(rows)

    return _make
