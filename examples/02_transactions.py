"""
Example 02: Buffered Transactions

This example demonstrates buffering mutations and nesting one logical
operation inside another so only the outermost caller commits.
"""

import os
from dataclasses import dataclass

from span_query import ConnectionConfig, DataAsPrimaryKey, Entity, TransactionFactory


@dataclass
class User(Entity):
    __primary_key__ = ("id",)

    id: int = 0
    name: str = ""


def main():
    config = ConnectionConfig(
        project=os.environ.get("SPANNER_PROJECT", "test-project"),
        instance=os.environ.get("SPANNER_INSTANCE", "demo"),
        database=os.environ.get("SPANNER_DATABASE", "demo"),
        emulator_host=os.environ.get("SPANNER_EMULATOR_HOST"),
    )
    # The factory owns its client and closes it on exit
    with TransactionFactory.from_config(config) as factory:
        run(factory)


def run(factory):
    def register(user, tx=None):
        # Commits when called on its own, joins the caller's transaction otherwise
        tx = factory.new_transaction_or_mock(tx)
        tx.insert_or_update("users", user)
        return tx.write()

    print("=== Transaction Management ===\n")

    print("1. Standalone call commits immediately:")
    print(f"   committed at {register(User(1, 'Alice'))}")

    print("\n2. Nested calls share one commit:")
    tx = factory.new_transaction()
    print(f"   inner write -> {register(User(2, 'Bob'), tx)}")
    print(f"   inner write -> {register(User(3, 'Carol'), tx)}")
    print(f"   outer write -> {tx.write()}")

    print("\n3. Context manager discards the buffer on error:")
    try:
        with factory.new_transaction() as tx:
            tx.delete("users", DataAsPrimaryKey(1))
            raise RuntimeError("changed my mind")
    except RuntimeError as e:
        print(f"   rolled back: {e}")


if __name__ == "__main__":
    main()
