"""Interfaces the bridge consumes from its host."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from cellbridge.core.mapping import MappingTable

DEFAULT_CELL_SCHEME = "vscode-notebook-cell"


@runtime_checkable
class LogicalUnit(Protocol):
    """An editable unit of source (a notebook cell) that compiles to runnable text."""

    @property
    def uri(self) -> str:
        """Canonical user-facing identifier."""
        ...

    @property
    def is_live(self) -> bool: ...

    @property
    def container_name(self) -> str: ...

    @property
    def position(self) -> int:
        """Zero-based index within the container, or -1 when unknown."""
        ...


class IdentityResolver(Protocol):
    def resolve(self, identity: str) -> LogicalUnit | None: ...

    def resolve_from_physical_path(self, path: str) -> LogicalUnit | None: ...


class TextStore(Protocol):
    def physical_location_of(self, unit: LogicalUnit) -> str:
        """Ensure the unit's compiled text is readable by the debugger; return its path."""
        ...


class MappingProvider(Protocol):
    def mapping_table_of(self, unit: LogicalUnit) -> MappingTable | None: ...
