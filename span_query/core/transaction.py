"""Mutation-buffering transactions.

A Transaction collects insert/update/upsert/delete mutations and commits
them atomically in one Spanner batch. Nested participants share an
outer transaction through ``mock_write()``: each mock absorbs exactly one
later ``write()`` so only the outermost caller really commits.

Usage:
    factory = TransactionFactory(database)

    def create_user(user, tx=None):
        tx = factory.new_transaction_or_mock(tx)
        tx.insert("users", user)
        return tx.write()  # commits only when this call owns tx
"""

from __future__ import annotations

import logging
import threading
from datetime import datetime, timezone
from typing import Any

from span_query.core.connection import ConnectionConfig, ConnectionManager
from span_query.core.mutation import Mutation, mutations_summary
from span_query.mapping.protocol import EntityData, EntityPrimaryKey

logger = logging.getLogger(__name__)


class Transaction:
    """Lock-guarded mutation buffer with reentrant commit emulation."""

    def __init__(self, database: Any) -> None:
        self._database = database
        self._mutations: list[Mutation] = []
        self._deepness = 0
        self._lock = threading.Lock()
        self.committed_at: datetime | None = None

    @property
    def mutations(self) -> tuple[Mutation, ...]:
        """Snapshot of the buffered mutations, in append order."""
        with self._lock:
            return tuple(self._mutations)

    @property
    def deepness(self) -> int:
        return self._deepness

    def _append(self, mutation: Mutation) -> None:
        with self._lock:
            self._mutations.append(mutation)

    def insert(self, table: str, entity: EntityData) -> None:
        """Buffer an insert of *entity* into *table*."""
        self._append(Mutation.insert(table, entity))

    def update(self, table: str, entity: EntityData) -> None:
        """Buffer an update of *entity* in *table*."""
        self._append(Mutation.update(table, entity))

    def insert_or_update(self, table: str, entity: EntityData) -> None:
        """Buffer an upsert of *entity* into *table*."""
        self._append(Mutation.insert_or_update(table, entity))

    def delete(self, table: str, entity: EntityPrimaryKey) -> None:
        """Buffer a delete of the row keyed by *entity*'s primary key."""
        self._append(Mutation.delete(table, entity))

    def mock_write(self) -> Transaction:
        """Join this transaction as a nested participant.

        The next ``write()`` becomes a no-op. Every call must be matched
        by exactly one later ``write()``; an unmatched mock swallows the
        real commit.
        """
        with self._lock:
            self._deepness += 1
            logger.debug("Transaction %#x nested, deepness=%d", id(self), self._deepness)
        return self

    def reset(self) -> None:
        """Discard every buffered mutation."""
        with self._lock:
            self._mutations.clear()

    def write(self) -> datetime | None:
        """Commit the buffered mutations.

        Returns:
            ``None`` when this call balances an earlier ``mock_write()``;
            the current UTC time when there was nothing to commit;
            otherwise the server commit timestamp.

        Raises:
            Whatever the Spanner client raises on commit. The buffer is
            cleared either way so the transaction can be reused.
        """
        with self._lock:
            if self._deepness > 0:
                self._deepness -= 1
                logger.debug(
                    "Transaction %#x nested write absorbed, deepness=%d",
                    id(self),
                    self._deepness,
                )
                return None

            if not self._mutations:
                return datetime.now(timezone.utc)

            logger.debug(
                "Committing %d mutations: %s",
                len(self._mutations),
                mutations_summary(self._mutations),
            )
            try:
                with self._database.batch() as batch:
                    for mutation in self._mutations:
                        mutation.apply(batch)
            finally:
                self._mutations.clear()

            self.committed_at = batch.committed
            logger.debug("Committed at %s", self.committed_at)
            return self.committed_at

    def __enter__(self) -> Transaction:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: Any,
    ) -> None:
        if exc_type is None:
            self.write()
            return

        with self._lock:
            if self._deepness > 0:
                self._deepness -= 1
            else:
                logger.debug(
                    "Transaction %#x aborted, discarding %d mutations",
                    id(self),
                    len(self._mutations),
                )
                self._mutations.clear()


class TransactionFactory:
    """Creates root transactions or nests into an existing one."""

    def __init__(
        self,
        database: Any,
        *,
        connection_manager: ConnectionManager | None = None,
    ) -> None:
        self._database = database
        self._connection_manager = connection_manager

    @classmethod
    def from_config(cls, config: ConnectionConfig) -> TransactionFactory:
        """Create a TransactionFactory that owns a new client built from *config*."""
        manager = ConnectionManager(config)
        return cls(manager.database, connection_manager=manager)

    @classmethod
    def from_connection_manager(cls, manager: ConnectionManager) -> TransactionFactory:
        """Create a TransactionFactory sharing *manager*'s client."""
        return cls(manager.database)

    def close(self) -> None:
        """Close the owned connection manager, if any."""
        if self._connection_manager is not None:
            self._connection_manager.close()
            self._connection_manager = None

    def __enter__(self) -> TransactionFactory:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: Any,
    ) -> None:
        self.close()

    def new_transaction(self) -> Transaction:
        """Return a fresh, empty, non-nested Transaction."""
        return Transaction(self._database)

    def new_transaction_or_mock(self, tx: Transaction | None) -> Transaction:
        """Nest into *tx* when given, otherwise start a new transaction.

        Lets a function run either as the owner of a transaction or as a
        participant in its caller's, with identical code in both cases.
        """
        if tx is not None:
            return tx.mock_write()
        return self.new_transaction()
