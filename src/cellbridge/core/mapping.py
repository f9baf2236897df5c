"""Line/column mapping tables between a cell's original text and its generated text.

A table is built once per compilation and read by the location remapper. The two
directional maps are persistent (immutable); only the memoisation cache changes, and
it is swapped copy-on-write so readers on other threads always see a whole snapshot.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum

from pyrsistent import PMap, pmap


class Direction(Enum):
    """Which way a message crosses the bridge."""

    TO_SERVER = "toServer"
    TO_EDITOR = "toEditor"


@dataclass(frozen=True)
class MappingEntry:
    """One correspondence point between original and generated coordinates."""

    original_line: int
    original_column: int
    generated_line: int
    generated_column: int

    def target(self, direction: Direction) -> tuple[int, int]:
        """Return the (line, column) this entry maps to when travelling ``direction``."""
        if direction is Direction.TO_SERVER:
            return (self.generated_line, self.generated_column)
        return (self.original_line, self.original_column)


LineMap = PMap  # column -> MappingEntry
DirectionalMap = PMap  # line -> LineMap


def cache_key(line: int, column: int | None) -> str:
    """Composite cache key; an absent column renders as the empty string."""
    return f"{line},{'' if column is None else column}"


def _index(entries: Iterable[MappingEntry], *, by_generated: bool) -> DirectionalMap:
    lines: dict[int, dict[int, MappingEntry]] = {}
    for entry in entries:
        if by_generated:
            line, column = entry.generated_line, entry.generated_column
        else:
            line, column = entry.original_line, entry.original_column
        # First entry wins when a compiler emits duplicate points.
        lines.setdefault(line, {}).setdefault(column, entry)
    return pmap({line: pmap(columns) for line, columns in lines.items()})


class MappingTable:
    """Bidirectional mapping for one logical unit plus its lookup cache."""

    def __init__(
        self,
        generated_to_original: DirectionalMap,
        original_to_generated: DirectionalMap,
    ) -> None:
        self.generated_to_original = generated_to_original
        self.original_to_generated = original_to_generated
        self._cache: PMap = pmap({direction: pmap() for direction in Direction})

    @classmethod
    def from_entries(cls, entries: Iterable[MappingEntry]) -> MappingTable:
        entries = list(entries)
        return cls(
            generated_to_original=_index(entries, by_generated=True),
            original_to_generated=_index(entries, by_generated=False),
        )

    def directional_map(self, direction: Direction) -> DirectionalMap:
        """Map keyed by the coordinates being translated *from*."""
        if direction is Direction.TO_SERVER:
            return self.original_to_generated
        return self.generated_to_original

    def cached(self, direction: Direction, key: str) -> tuple[int, int] | None:
        return self._cache[direction].get(key)

    def remember(self, direction: Direction, key: str, value: tuple[int, int]) -> None:
        self._cache = self._cache.set(direction, self._cache[direction].set(key, value))

    def clear_cache(self) -> None:
        self._cache = pmap({direction: pmap() for direction in Direction})

    def cache_size(self, direction: Direction | None = None) -> int:
        if direction is not None:
            return len(self._cache[direction])
        return sum(len(entries) for entries in self._cache.values())

    def __repr__(self) -> str:
        return (
            f"MappingTable(lines={len(self.generated_to_original)}->"
            f"{len(self.original_to_generated)}, cached={self.cache_size()})"
        )
