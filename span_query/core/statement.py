"""Statements and the statement-builder boundary.

Any object with a ``to_sql()`` method returning ``(sql, args)`` can feed
the executor. SQL must use ``@pN`` placeholders, 1-indexed.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable

from span_query.core.exceptions import StatementBuildError
from span_query.core.params import build_params


@runtime_checkable
class SQLBuilder(Protocol):
    """Anything that renders itself into SQL text and positional args."""

    def to_sql(self) -> tuple[str, Sequence[Any]]:
        ...


class SQL:
    """Literal SQL text with positional arguments.

    Example:
        SQL("SELECT id, name FROM users WHERE id = @p1", 42)
    """

    def __init__(self, text: str, *args: Any) -> None:
        self.text = text
        self.args = args

    def to_sql(self) -> tuple[str, Sequence[Any]]:
        return self.text, self.args

    def __repr__(self) -> str:
        return f"SQL({self.text!r}, {len(self.args)} args)"


@dataclass(frozen=True)
class Statement:
    """SQL text plus its named parameters."""

    sql: str
    params: Mapping[str, Any] = field(default_factory=dict)
    param_types: Mapping[str, Any] | None = None


def statement_from_builder(builder: SQLBuilder, *extra: Any) -> Statement:
    """Render *builder* and bind its arguments plus *extra* key/value pairs.

    Raises:
        StatementBuildError: the builder raised.
        ParameterBindingError: *extra* is malformed.
    """
    try:
        sql, args = builder.to_sql()
    except Exception as e:
        raise StatementBuildError(builder, str(e)) from e

    return Statement(sql=sql, params=build_params(args, extra))
