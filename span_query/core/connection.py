"""Connection configuration and management.

ConnectionConfig is a Pydantic model for type-safe connection config.
ConnectionManager lazily builds the Spanner client, instance and
database handles the executor and transaction factory run against.
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import BaseModel

from span_query.core.exceptions import ConnectionError  # noqa: A004

logger = logging.getLogger(__name__)


class ConnectionConfig(BaseModel):
    """Configuration for a Spanner database."""

    project: str | None = None
    instance: str
    database: str
    emulator_host: str | None = None
    query_timeout: float | None = None
    extra: dict[str, Any] = {}


class ConnectionManager:
    """Owns the Spanner client and hands out the database handle."""

    def __init__(self, config: ConnectionConfig | None = None) -> None:
        self.config = config
        self._client: Any = None
        self._database: Any = None

    @classmethod
    def from_database(cls, database: Any) -> ConnectionManager:
        """Wrap an existing ``Database`` handle."""
        manager = cls()
        manager._database = database
        return manager

    @property
    def query_timeout(self) -> float | None:
        if self.config is None:
            return None
        return self.config.query_timeout

    @property
    def client(self) -> Any:
        """The ``google.cloud.spanner.Client``; opens the database if needed."""
        if self._client is None:
            self._database = self._connect()
        return self._client

    @property
    def database(self) -> Any:
        """The ``google.cloud.spanner_v1.database.Database`` handle."""
        if self._database is None:
            self._database = self._connect()
        return self._database

    def _connect(self) -> Any:
        if self.config is None:
            raise ConnectionError("ConnectionManager has neither a config nor a database")

        from google.cloud import spanner

        kwargs: dict[str, Any] = dict(self.config.extra)
        if self.config.emulator_host is not None:
            from google.auth.credentials import AnonymousCredentials

            kwargs.setdefault("credentials", AnonymousCredentials())
            kwargs.setdefault("client_options", {"api_endpoint": self.config.emulator_host})

        try:
            self._client = spanner.Client(project=self.config.project, **kwargs)
            instance = self._client.instance(self.config.instance)
            database = instance.database(self.config.database)
        except Exception as e:
            raise ConnectionError(
                f"Failed to open {self.config.instance}/{self.config.database}: {e}"
            ) from e

        logger.debug(
            "Opened Spanner database %s/%s", self.config.instance, self.config.database
        )
        return database

    def close(self) -> None:
        """Drop the client and database handles."""
        if self._client is not None:
            self._client.close()
            self._client = None
            self._database = None

    def __enter__(self) -> ConnectionManager:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: Any,
    ) -> None:
        self.close()
