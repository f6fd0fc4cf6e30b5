"""
Example 01: Basic Query Execution

This example demonstrates reading typed rows with SpanQuery's Executor.
Run it against the Spanner emulator (SPANNER_EMULATOR_HOST=localhost:9010)
with an existing instance/database containing a `users` table.
"""

import os
from dataclasses import dataclass

from span_query import (
    SQL,
    ConnectionConfig,
    ConnectionManager,
    Entity,
    Executor,
    RowNotFoundError,
)


@dataclass
class User(Entity):
    id: int = 0
    name: str = ""


def main():
    config = ConnectionConfig(
        project=os.environ.get("SPANNER_PROJECT", "test-project"),
        instance=os.environ.get("SPANNER_INSTANCE", "demo"),
        database=os.environ.get("SPANNER_DATABASE", "demo"),
        emulator_host=os.environ.get("SPANNER_EMULATOR_HOST"),
        query_timeout=10.0,
    )

    # One client for both executors, closed on exit
    with ConnectionManager(config) as manager:
        users = Executor.from_connection_manager(manager, User)
        counts = Executor.from_connection_manager(manager, int)

        print("=== Basic Queries ===\n")

        print("1. All users:")
        for user in users.rows(SQL("SELECT id, name FROM users ORDER BY id")):
            print(f"   {user}")

        print("\n2. Users with a name prefix (extra named argument):")
        rows = users.rows(
            SQL("SELECT id, name FROM users WHERE STARTS_WITH(name, @prefix) LIMIT @p1", 10),
            "prefix",
            "A",
        )
        print(f"   {rows}")

        print("\n3. Single user:")
        try:
            print(f"   {users.row(SQL('SELECT id, name FROM users WHERE id = @p1', 1))}")
        except RowNotFoundError:
            print("   user 1 not found")

        print("\n4. Count:")
        print(f"   {counts.scalar(SQL('SELECT COUNT(*) FROM users'))}")


if __name__ == "__main__":
    main()
