"""Rewrite ``line``/``column`` pairs using a cell's mapping table."""

from __future__ import annotations

import logging
from typing import Any

from cellbridge.core.mapping import Direction, MappingEntry, MappingTable, cache_key
from cellbridge.core.units import IdentityResolver, LogicalUnit, MappingProvider

logger = logging.getLogger(__name__)


def _is_number(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def pick_entry(columns: Any, column: int | None) -> MappingEntry:
    """Choose the mapping entry for ``column`` within one line's entries.

    Exact column first, then column 0, then the lowest mapped column.
    """
    if column is not None:
        exact = columns.get(column)
        if exact is not None:
            return exact
    start = columns.get(0)
    if start is not None:
        return start
    return columns[min(columns)]


class LocationRemapper:
    """Maps locations of one direction through the owning cell's mapping table."""

    def __init__(
        self,
        resolver: IdentityResolver,
        mappings: MappingProvider,
        *,
        use_cache: bool = True,
    ) -> None:
        self._resolver = resolver
        self._mappings = mappings
        self._use_cache = use_cache

    def resolve_unit(self, source_path: str, direction: Direction) -> LogicalUnit | None:
        """Find the cell behind a source path.

        Outbound paths must already be compiled-text paths; a cell URI still present
        there means the source was not translated. Inbound paths may be either, since
        the source hook rewrites them to the cell URI first.
        """
        unit = self._resolver.resolve_from_physical_path(source_path)
        if unit is None and direction is Direction.TO_EDITOR:
            unit = self._resolver.resolve(source_path)
        return unit

    def remap(
        self, locations: list[dict[str, Any]], source_path: str, direction: Direction
    ) -> None:
        """Rewrite every location in place; no-op when the cell or its table is unknown."""
        unit = self.resolve_unit(source_path, direction)
        if unit is None:
            return
        table = self._mappings.mapping_table_of(unit)
        if table is None:
            return
        for location in locations:
            self.remap_one(location, table, direction)

    def remap_one(
        self, location: dict[str, Any], table: MappingTable, direction: Direction
    ) -> bool:
        line = location.get("line")
        if not _is_number(line):
            return False
        raw_column = location.get("column")
        column = raw_column if _is_number(raw_column) else None
        key = cache_key(line, column)

        if self._use_cache:
            cached = table.cached(direction, key)
            if cached is not None:
                location["line"], location["column"] = cached
                return True

        columns = table.directional_map(direction).get(line)
        if not columns:
            return False
        target = pick_entry(columns, column).target(direction)
        location["line"], location["column"] = target
        logger.debug("%s %s -> %d,%d", direction.value, key, *target)

        if self._use_cache:
            table.remember(direction, key, target)
        return True
