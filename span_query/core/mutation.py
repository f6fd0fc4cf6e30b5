"""Buffered write operations.

A Mutation captures an entity's column values (or primary key) at the
moment it is buffered and replays them onto a Spanner batch at commit.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any

from google.cloud.spanner import KeySet

from span_query.mapping.protocol import EntityData, EntityPrimaryKey


class MutationType(Enum):
    """Kinds of buffered write operations."""

    INSERT = "insert"
    UPDATE = "update"
    INSERT_OR_UPDATE = "insert_or_update"
    DELETE = "delete"


@dataclass(frozen=True)
class Mutation:
    """A single buffered write against one table."""

    op: MutationType
    table: str
    columns: tuple[str, ...] = ()
    values: tuple[Any, ...] = ()
    key: tuple[Any, ...] = ()

    @classmethod
    def _from_data(cls, op: MutationType, table: str, entity: EntityData) -> Mutation:
        data = entity.data()
        return cls(
            op=op,
            table=table,
            columns=tuple(data.keys()),
            values=tuple(data.values()),
        )

    @classmethod
    def insert(cls, table: str, entity: EntityData) -> Mutation:
        return cls._from_data(MutationType.INSERT, table, entity)

    @classmethod
    def update(cls, table: str, entity: EntityData) -> Mutation:
        return cls._from_data(MutationType.UPDATE, table, entity)

    @classmethod
    def insert_or_update(cls, table: str, entity: EntityData) -> Mutation:
        return cls._from_data(MutationType.INSERT_OR_UPDATE, table, entity)

    @classmethod
    def delete(cls, table: str, entity: EntityPrimaryKey) -> Mutation:
        return cls(op=MutationType.DELETE, table=table, key=tuple(entity.primary_key()))

    def apply(self, batch: Any) -> None:
        """Replay this mutation onto a Spanner ``Batch`` or ``Transaction``."""
        if self.op is MutationType.DELETE:
            batch.delete(self.table, KeySet(keys=[list(self.key)]))
            return

        write = getattr(batch, self.op.value)
        write(self.table, columns=self.columns, values=[self.values])


def mutations_summary(mutations: Sequence[Mutation]) -> str:
    """Short ``op:table`` listing for log records."""
    return ", ".join(f"{m.op.value}:{m.table}" for m in mutations)
