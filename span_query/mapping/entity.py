"""Ready-made entity implementations.

``DataAsEntity`` and ``DataAsPrimaryKey`` adapt plain mappings and
tuples; ``Entity`` is a mixin for dataclasses and Pydantic models.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Mapping, Sequence
from typing import Any, ClassVar


def _is_pydantic_model(cls: type) -> bool:
    """Check if a class is a Pydantic BaseModel."""
    try:
        from pydantic import BaseModel

        return issubclass(cls, BaseModel)
    except ImportError:
        return False


class DataAsEntity(dict):  # type: ignore[type-arg]
    """A column -> value mapping usable as write data."""

    def data(self) -> Mapping[str, Any]:
        return self


class DataAsPrimaryKey(tuple):  # type: ignore[type-arg]
    """Primary key values usable as a delete target."""

    def __new__(cls, *values: Any) -> DataAsPrimaryKey:
        return super().__new__(cls, values)

    def primary_key(self) -> Sequence[Any]:
        return self


class Entity:
    """Mixin giving dataclasses and Pydantic models all entity capabilities.

    Field order is declaration order, so a SELECT must list columns in
    the same order the fields are declared. Set ``__primary_key__`` to
    the key attribute names to support deletes.

    Example:
        @dataclass
        class User(Entity):
            __primary_key__ = ("id",)
            id: int = 0
            name: str = ""
    """

    __primary_key__: ClassVar[tuple[str, ...]] = ()

    def scan_fields(self) -> Sequence[str]:
        cls = type(self)
        if _is_pydantic_model(cls):
            return tuple(cls.model_fields)  # type: ignore[attr-defined]
        if dataclasses.is_dataclass(self):
            return tuple(f.name for f in dataclasses.fields(self))
        raise TypeError(f"{cls.__name__} is neither a dataclass nor a Pydantic model")

    def data(self) -> Mapping[str, Any]:
        return {name: getattr(self, name) for name in self.scan_fields()}

    def primary_key(self) -> Sequence[Any]:
        if not self.__primary_key__:
            raise TypeError(f"{type(self).__name__} does not declare __primary_key__")
        return tuple(getattr(self, name) for name in self.__primary_key__)
