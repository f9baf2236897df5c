"""Pytest configuration and test helpers."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import pytest

from cellbridge.core import MappingEntry, MappingTable, Notebook, UnitRegistry


@dataclass
class FakeUnit:
    """Minimal ``LogicalUnit`` with directly settable attributes."""

    uri: str
    container_name: str = "notebook.ipynb"
    position: int = 0
    is_live: bool = True


@dataclass
class FakeHost:
    """Resolver, text store and mapping provider backed by plain dicts.

    Counts collaborator calls so tests can assert what was consulted.
    """

    units: dict[str, FakeUnit] = field(default_factory=dict)
    physical: dict[str, str] = field(default_factory=dict)
    tables: dict[str, MappingTable] = field(default_factory=dict)
    store_error: OSError | None = None
    calls: list[tuple[str, str]] = field(default_factory=list)

    def add(
        self,
        unit: FakeUnit,
        physical_path: str,
        table: MappingTable | None = None,
    ) -> FakeUnit:
        self.units[unit.uri] = unit
        self.physical[unit.uri] = physical_path
        if table is not None:
            self.tables[unit.uri] = table
        return unit

    def resolve(self, identity: str) -> FakeUnit | None:
        self.calls.append(("resolve", identity))
        return self.units.get(identity)

    def resolve_from_physical_path(self, path: str) -> FakeUnit | None:
        self.calls.append(("resolve_from_physical_path", path))
        for uri, physical in self.physical.items():
            if physical == path:
                return self.units[uri]
        return None

    def physical_location_of(self, unit: FakeUnit) -> str:
        self.calls.append(("physical_location_of", unit.uri))
        if self.store_error is not None:
            raise self.store_error
        return self.physical[unit.uri]

    def mapping_table_of(self, unit: FakeUnit) -> MappingTable | None:
        self.calls.append(("mapping_table_of", unit.uri))
        return self.tables.get(unit.uri)


def entry(
    original_line: int, original_column: int, generated_line: int, generated_column: int
) -> MappingEntry:
    return MappingEntry(
        original_line=original_line,
        original_column=original_column,
        generated_line=generated_line,
        generated_column=generated_column,
    )


def table(*entries: MappingEntry) -> MappingTable:
    return MappingTable.from_entries(entries)


@pytest.fixture
def host() -> FakeHost:
    return FakeHost()


@pytest.fixture
def units(tmp_path: Path) -> UnitRegistry:
    return UnitRegistry(tmp_path / "cells")


@pytest.fixture
def notebook(units: UnitRegistry) -> Notebook:
    nb = Notebook("file:///work/analysis.ipynb")
    units.register(nb)
    return nb
