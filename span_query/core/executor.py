"""Query executor.

The Executor renders statements, runs them against Spanner (either as a
strong single-use read or inside a caller's read-write transaction) and
decodes each result row into an entity through a RowMapper.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import Any, Generic, TypeVar

from span_query.core.connection import ConnectionConfig, ConnectionManager
from span_query.core.exceptions import RowDecodeError, RowNotFoundError
from span_query.core.statement import SQLBuilder, Statement, statement_from_builder
from span_query.mapping.model import RowMapper

E = TypeVar("E")

logger = logging.getLogger(__name__)


def _execute_kwargs(stmt: Statement, timeout: float | None) -> dict[str, Any]:
    kwargs: dict[str, Any] = {"params": dict(stmt.params)}
    if stmt.param_types is not None:
        kwargs["param_types"] = dict(stmt.param_types)
    if timeout is not None:
        kwargs["timeout"] = timeout
    return kwargs


class Executor(Generic[E]):
    """Runs SQL and maps result rows into entities of type ``E``.

    Args:
        database: A ``google.cloud.spanner_v1.database.Database``.
        factory: Zero-argument callable producing an empty ``E``.
        timeout: Default per-call deadline in seconds for queries.
        connection_manager: Manager owned by this executor; closed by
            ``close()``.
    """

    def __init__(
        self,
        database: Any,
        factory: Callable[[], E],
        *,
        timeout: float | None = None,
        connection_manager: ConnectionManager | None = None,
    ) -> None:
        self._database = database
        self._mapper: RowMapper[E] = RowMapper(factory)
        self._timeout = timeout
        self._connection_manager = connection_manager

    @classmethod
    def from_config(
        cls,
        config: ConnectionConfig,
        factory: Callable[[], E],
    ) -> Executor[E]:
        """Create an Executor that owns a new client built from *config*.

        Args:
            config: ConnectionConfig instance
            factory: Entity factory

        Returns:
            Executor instance; call ``close()`` or use it as a context
            manager to release the client.
        """
        manager = ConnectionManager(config)
        return cls(
            manager.database,
            factory,
            timeout=manager.query_timeout,
            connection_manager=manager,
        )

    @classmethod
    def from_connection_manager(
        cls,
        manager: ConnectionManager,
        factory: Callable[[], E],
    ) -> Executor[E]:
        """Create an Executor sharing *manager*'s client.

        The caller keeps ownership of *manager* and closes it.
        """
        return cls(manager.database, factory, timeout=manager.query_timeout)

    def close(self) -> None:
        """Close the owned connection manager, if any."""
        if self._connection_manager is not None:
            self._connection_manager.close()
            self._connection_manager = None

    def __enter__(self) -> Executor[E]:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: Any,
    ) -> None:
        self.close()

    @contextmanager
    def _result_stream(
        self,
        stmt: Statement,
        transaction: Any,
        timeout: float | None,
    ) -> Iterator[Any]:
        """Open a result stream scoped to the ``with`` block."""
        kwargs = _execute_kwargs(stmt, timeout if timeout is not None else self._timeout)
        logger.debug("Executing %s (in transaction: %s)", stmt.sql, transaction is not None)

        if transaction is not None:
            yield transaction.execute_sql(stmt.sql, **kwargs)
            return

        with self._database.snapshot() as snapshot:
            yield snapshot.execute_sql(stmt.sql, **kwargs)

    def rows_for_stmt(
        self,
        stmt: Statement,
        transaction: Any = None,
        *,
        timeout: float | None = None,
    ) -> list[E]:
        """Fetch all rows of *stmt* as entities.

        When *transaction* (a Spanner read-write transaction) is given the
        query runs inside it and sees its uncommitted writes; otherwise it
        runs as a strongly consistent single read.

        A single read releases its snapshot on every exit path. Inside a
        transaction the result stream belongs to that transaction: the
        Python client has no public call to stop a stream early, so after
        a decode failure the unread remainder is released when the
        transaction commits or rolls back.
        """
        with self._result_stream(stmt, transaction, timeout) as results:
            return self._mapper.map_many(results)

    def rows(self, builder: SQLBuilder, *extra: Any) -> list[E]:
        """Build a statement from *builder* and fetch all its rows.

        *extra* holds additional named parameters as flat key/value pairs.
        """
        return self.rows_for_stmt(statement_from_builder(builder, *extra))

    def scalar(self, builder: SQLBuilder, *extra: Any) -> E:
        """Fetch the single column of the first row.

        Returns a fresh zero value when the query yields no rows, which
        is indistinguishable from a row holding that zero value.
        """
        stmt = statement_from_builder(builder, *extra)
        with self._result_stream(stmt, None, None) as results:
            for values in results:
                if len(values) != 1:
                    raise RowDecodeError(
                        "scalar", 0, f"expected exactly 1 column, got {len(values)}"
                    )
                return values[0]  # type: ignore[no-any-return]

        logger.debug("Scalar query returned no rows: %s", stmt.sql)
        return self._mapper.new()

    def row(self, builder: SQLBuilder, *extra: Any) -> E:
        """Build a statement from *builder* and fetch exactly one row."""
        return self.row_for_stmt(statement_from_builder(builder, *extra))

    def row_for_stmt(
        self,
        stmt: Statement,
        transaction: Any = None,
        *,
        timeout: float | None = None,
    ) -> E:
        """Fetch the first row of *stmt*.

        Raises:
            RowNotFoundError: the query produced no rows.
        """
        entities = self.rows_for_stmt(stmt, transaction, timeout=timeout)
        if not entities:
            raise RowNotFoundError(stmt.sql)
        return entities[0]
