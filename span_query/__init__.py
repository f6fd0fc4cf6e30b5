"""SpanQuery - typed queries and buffered mutations for Cloud Spanner."""

from __future__ import annotations

from span_query.core.connection import ConnectionConfig, ConnectionManager
from span_query.core.exceptions import (
    AdapterError,
    ConnectionError,  # noqa: A004
    ExecutionError,
    MappingError,
    ParameterBindingError,
    RowDecodeError,
    RowNotFoundError,
    SpanQueryError,
    StatementBuildError,
    StatementError,
    none_if_not_found,
    parent_is_missing,
    suppress_not_found,
)
from span_query.core.executor import Executor
from span_query.core.mutation import Mutation, MutationType
from span_query.core.params import build_params
from span_query.core.statement import SQL, SQLBuilder, Statement, statement_from_builder
from span_query.core.transaction import Transaction, TransactionFactory
from span_query.mapping.entity import DataAsEntity, DataAsPrimaryKey, Entity
from span_query.mapping.model import RowMapper
from span_query.mapping.protocol import Decodable, EntityData, EntityPrimaryKey

__all__ = [
    # Connection
    "ConnectionConfig",
    "ConnectionManager",
    # Statements
    "SQL",
    "SQLBuilder",
    "Statement",
    "statement_from_builder",
    "build_params",
    # Executor
    "Executor",
    # Transaction
    "Transaction",
    "TransactionFactory",
    "Mutation",
    "MutationType",
    # Mapping
    "RowMapper",
    "Entity",
    "DataAsEntity",
    "DataAsPrimaryKey",
    "Decodable",
    "EntityData",
    "EntityPrimaryKey",
    # Exceptions
    "SpanQueryError",
    "StatementError",
    "StatementBuildError",
    "ParameterBindingError",
    "ExecutionError",
    "RowNotFoundError",
    "MappingError",
    "RowDecodeError",
    "AdapterError",
    "ConnectionError",
    # Helpers
    "none_if_not_found",
    "suppress_not_found",
    "parent_is_missing",
]
