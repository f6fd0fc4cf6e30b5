"""Row-to-entity mapper.

Each row is decoded into a fresh entity produced by a factory, so no
instance is ever shared between rows or between concurrent calls.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from typing import Any, Generic, TypeVar

from span_query.core.exceptions import RowDecodeError
from span_query.mapping.entity import _is_pydantic_model

E = TypeVar("E")


def _factory_name(factory: Callable[[], Any]) -> str:
    return getattr(factory, "__name__", type(factory).__name__)


class RowMapper(Generic[E]):
    """Decodes positional row values into entities.

    Detection order per entity:
    1. ``scan(values)`` method -> called with the raw row
    2. ``scan_fields()`` -> values assigned to the named attributes in order

    Args:
        factory: Zero-argument callable returning an empty entity. A
            Pydantic model class is instantiated with ``model_construct()``
            so required fields need no defaults.
    """

    def __init__(self, factory: Callable[[], E]) -> None:
        if isinstance(factory, type) and _is_pydantic_model(factory):
            self._factory: Callable[[], E] = factory.model_construct  # type: ignore[attr-defined]
        else:
            self._factory = factory
        self._target_name = _factory_name(factory)

    def new(self) -> E:
        """Return a fresh zero-value entity."""
        return self._factory()

    def map_one(self, values: Sequence[Any], index: int = 0) -> E:
        """Decode one row into a fresh entity."""
        try:
            entity = self._factory()
            scan = getattr(entity, "scan", None)
            if callable(scan):
                scan(values)
                return entity

            fields = entity.scan_fields()  # type: ignore[attr-defined]
            if len(fields) != len(values):
                raise ValueError(
                    f"row has {len(values)} columns but entity scans {len(fields)} fields"
                )
            for name, value in zip(fields, values, strict=True):
                setattr(entity, name, value)
            return entity
        except RowDecodeError:
            raise
        except Exception as e:
            raise RowDecodeError(self._target_name, index, str(e)) from e

    def map_many(self, rows: Iterable[Sequence[Any]]) -> list[E]:
        """Decode every row; the first failure aborts with no partial result."""
        return [self.map_one(values, i) for i, values in enumerate(rows)]
