"""SpanQuery exception hierarchy and error classification helpers.

Usage errors are raised before the database is contacted. Errors raised
by the Spanner client itself (query and commit failures) are propagated
unchanged so callers can inspect the driver's status codes.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

# Substring Spanner puts into the error text of a mutation whose
# interleaved parent (or foreign-key referenced) row does not exist.
_PARENT_MISSING_MARKER = "is missing. Row cannot"


class SpanQueryError(Exception):
    """Base exception for all SpanQuery errors."""


# --- Statement ---


class StatementError(SpanQueryError):
    """Base for statement construction errors."""


class StatementBuildError(StatementError):
    """Raised when a statement builder fails to produce SQL."""

    def __init__(self, builder: object, detail: str) -> None:
        self.builder = builder
        super().__init__(f"Cannot build statement from {type(builder).__name__}: {detail}")


class ParameterBindingError(StatementError):
    """Raised on malformed additional query arguments."""

    def __init__(self, detail: str) -> None:
        super().__init__(f"Parameter binding error: {detail}")


# --- Execution ---


class ExecutionError(SpanQueryError):
    """Base for query execution errors."""


class RowNotFoundError(ExecutionError):
    """Raised when a query that must yield a row produced none."""

    def __init__(self, sql: str | None = None) -> None:
        self.sql = sql
        if sql is None:
            super().__init__("row not found")
        else:
            super().__init__(f"row not found for statement: {sql}")


# --- Mapping ---


class MappingError(SpanQueryError):
    """Base for mapping errors."""


class RowDecodeError(MappingError):
    """Raised when an entity cannot be decoded from a result row."""

    def __init__(self, target_class: str, row_index: int, detail: str) -> None:
        self.target_class = target_class
        self.row_index = row_index
        super().__init__(f"Cannot decode row {row_index} into {target_class}: {detail}")


# --- Adapter ---


class AdapterError(SpanQueryError):
    """Base for client/adapter errors."""


class ConnectionError(AdapterError):  # noqa: A001
    """Raised when the Spanner client or database handle cannot be created."""


# --- Helpers ---


def none_if_not_found(exc: BaseException | None) -> BaseException | None:
    """Return None for a not-found error, otherwise return *exc* unchanged.

    Lets callers that treat "no row" as a normal outcome collapse it
    without catching every other failure::

        try:
            user = executor.row_for_stmt(stmt)
        except SpanQueryError as e:
            if none_if_not_found(e) is not None:
                raise
            user = None
    """
    if isinstance(exc, RowNotFoundError):
        return None
    return exc


@contextmanager
def suppress_not_found() -> Iterator[None]:
    """Swallow RowNotFoundError raised inside the block; re-raise anything else."""
    try:
        yield
    except RowNotFoundError:
        pass


def parent_is_missing(exc: BaseException) -> bool:
    """Return True if *exc* reports a missing parent row.

    Matches on the error text because Spanner reports the condition as
    a generic NOT_FOUND/FAILED_PRECONDITION status.
    """
    return _PARENT_MISSING_MARKER in str(exc)
