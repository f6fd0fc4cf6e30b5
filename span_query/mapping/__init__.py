"""Mapping layer - decode result rows into typed entities."""

from __future__ import annotations

from span_query.mapping.entity import DataAsEntity, DataAsPrimaryKey, Entity
from span_query.mapping.model import RowMapper
from span_query.mapping.protocol import Decodable, EntityData, EntityPrimaryKey

__all__ = [
    "RowMapper",
    "Entity",
    "DataAsEntity",
    "DataAsPrimaryKey",
    "Decodable",
    "EntityData",
    "EntityPrimaryKey",
]
