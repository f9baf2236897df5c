"""Mapping tables, logical units and the in-memory unit registry."""

from __future__ import annotations

from cellbridge.core.mapping import Direction, MappingEntry, MappingTable, cache_key
from cellbridge.core.registry import Cell, Notebook, UnitRegistry
from cellbridge.core.units import IdentityResolver, LogicalUnit, MappingProvider, TextStore

__all__ = [
    "Cell",
    "Direction",
    "IdentityResolver",
    "LogicalUnit",
    "MappingEntry",
    "MappingProvider",
    "MappingTable",
    "Notebook",
    "TextStore",
    "UnitRegistry",
    "cache_key",
]
