"""Unit tests for RowMapper."""

from __future__ import annotations

from dataclasses import dataclass

import pytest
from pydantic import BaseModel

from span_query.core.exceptions import RowDecodeError
from span_query.mapping.entity import Entity
from span_query.mapping.model import RowMapper


@dataclass
class UserDC(Entity):
    id: int = 0
    name: str = ""
    email: str = ""


class UserPydantic(Entity, BaseModel):
    id: int
    name: str


class UserScanner:
    """Entity that decodes the raw row itself."""

    def __init__(self) -> None:
        self.id = 0
        self.display = ""

    def scan(self, values) -> None:
        self.id, first, last = values
        self.display = f"{first} {last}"


class TestRowMapper:
    def test_map_to_dataclass(self) -> None:
        mapper = RowMapper(UserDC)
        result = mapper.map_one([1, "Alice", "alice@ex.com"])
        assert result == UserDC(1, "Alice", "alice@ex.com")

    def test_map_to_pydantic_without_defaults(self) -> None:
        mapper = RowMapper(UserPydantic)
        result = mapper.map_one([1, "Alice"])
        assert isinstance(result, UserPydantic)
        assert result.id == 1
        assert result.name == "Alice"

    def test_custom_scan(self) -> None:
        mapper = RowMapper(UserScanner)
        result = mapper.map_one([5, "Ada", "Lovelace"])
        assert result.id == 5
        assert result.display == "Ada Lovelace"

    def test_custom_scan_error_wrapped(self) -> None:
        mapper = RowMapper(UserScanner)
        with pytest.raises(RowDecodeError, match="UserScanner"):
            mapper.map_one([5, "Ada"])

    def test_column_count_mismatch(self) -> None:
        mapper = RowMapper(UserDC)
        with pytest.raises(RowDecodeError, match="2 columns but entity scans 3"):
            mapper.map_one([1, "Alice"])

    def test_map_many_reports_failing_row(self) -> None:
        mapper = RowMapper(UserDC)
        rows = [[1, "A", "a@ex.com"], [2, "B"]]
        with pytest.raises(RowDecodeError) as exc_info:
            mapper.map_many(rows)
        assert exc_info.value.row_index == 1
        assert exc_info.value.target_class == "UserDC"

    def test_map_many_empty(self) -> None:
        assert RowMapper(UserDC).map_many([]) == []

    def test_factory_called_per_row(self) -> None:
        made = []

        def factory() -> UserDC:
            user = UserDC()
            made.append(user)
            return user

        results = RowMapper(factory).map_many([[1, "A", "a"], [2, "B", "b"]])
        assert len(made) == 2
        assert results[0] is not results[1]

    def test_new_returns_zero_value(self) -> None:
        assert RowMapper(int).new() == 0
        assert RowMapper(UserDC).new() == UserDC()
