"""Entity capability protocols.

Reads need ``Decodable`` entities; writes need ``EntityData`` (inserts,
updates, upserts) or ``EntityPrimaryKey`` (deletes). Entities never
carry their table name; it is passed with each call.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class Decodable(Protocol):
    """Entity that can be filled from a result row.

    ``scan_fields()`` lists attribute names in the exact order of the
    SELECT column list; column *i* is assigned to attribute *i*.
    """

    def scan_fields(self) -> Sequence[str]:
        ...


@runtime_checkable
class EntityData(Protocol):
    """Entity that exposes its column values for writes."""

    def data(self) -> Mapping[str, Any]:
        ...


@runtime_checkable
class EntityPrimaryKey(Protocol):
    """Entity that exposes its primary key values in key-column order."""

    def primary_key(self) -> Sequence[Any]:
        ...
