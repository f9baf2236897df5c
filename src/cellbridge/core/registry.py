"""In-memory notebooks, cells and the registry that resolves them.

``UnitRegistry`` implements every collaborator interface in ``cellbridge.core.units``
so a host without its own document model can drive the bridge directly. Entries are
held strongly and purged only by ``unregister``; hosts call it when a notebook goes away.
"""

from __future__ import annotations

import hashlib
import logging
import os
from pathlib import Path, PurePosixPath
from urllib.parse import urlsplit

from cellbridge.core.mapping import MappingTable
from cellbridge.core.units import DEFAULT_CELL_SCHEME

logger = logging.getLogger(__name__)


def canonical_path(path: str) -> str:
    return os.path.normcase(os.path.normpath(os.path.abspath(path)))


class Notebook:
    """A container of cells addressed by a URI."""

    def __init__(self, uri: str, *, cell_scheme: str = DEFAULT_CELL_SCHEME) -> None:
        self.uri = uri
        self.cell_scheme = cell_scheme
        self.cells: list[Cell] = []
        self.closed = False
        self._next_handle = 0

    @property
    def name(self) -> str:
        """Basename of the URI path, or the whole URI when the path has none."""
        return PurePosixPath(urlsplit(self.uri).path).name or self.uri

    def add_cell(self, source: str = "") -> Cell:
        parts = urlsplit(self.uri)
        fragment = f"C{self._next_handle}"
        self._next_handle += 1
        authority = f"//{parts.netloc}" if parts.netloc else ""
        uri = f"{self.cell_scheme}:{authority}{parts.path}#{fragment}"
        cell = Cell(self, uri, source)
        self.cells.append(cell)
        return cell

    def remove_cell(self, cell: Cell) -> None:
        self.cells.remove(cell)

    def close(self) -> None:
        self.closed = True

    def __repr__(self) -> str:
        return f"Notebook({self.uri!r}, cells={len(self.cells)}, closed={self.closed})"


class Cell:
    """One cell; satisfies the ``LogicalUnit`` protocol."""

    def __init__(self, notebook: Notebook, uri: str, source: str = "") -> None:
        self.notebook = notebook
        self.uri = uri
        self.source = source

    @property
    def is_live(self) -> bool:
        return not self.notebook.closed

    @property
    def container_name(self) -> str:
        return self.notebook.name

    @property
    def position(self) -> int:
        try:
            return self.notebook.cells.index(self)
        except ValueError:
            return -1

    def __repr__(self) -> str:
        return f"Cell({self.uri!r})"


class UnitRegistry:
    """Resolves cells by URI or by the physical path of their compiled text."""

    def __init__(self, storage_dir: str | Path, *, suffix: str = ".py") -> None:
        self.storage_dir = Path(storage_dir)
        self.suffix = suffix
        self._notebooks: dict[str, Notebook] = {}
        self._compiled: dict[str, str] = {}
        self._tables: dict[str, MappingTable] = {}
        self._path_to_uri: dict[str, str] = {}
        self._uri_to_path: dict[str, str] = {}

    def register(self, notebook: Notebook) -> None:
        self._notebooks[notebook.uri] = notebook

    def unregister(self, notebook: Notebook) -> None:
        """Forget a notebook and every path, compiled text and table of its cells."""
        self._notebooks.pop(notebook.uri, None)
        for cell in notebook.cells:
            self._forget(cell.uri)
        logger.debug("Unregistered notebook %s", notebook.uri)

    def notebooks(self) -> list[Notebook]:
        return list(self._notebooks.values())

    def set_compiled(
        self, cell: Cell, text: str, mapping_table: MappingTable | None = None
    ) -> None:
        """Record the cell's compiled text and, optionally, its mapping table."""
        self._compiled[cell.uri] = text
        if mapping_table is None:
            self._tables.pop(cell.uri, None)
        else:
            self._tables[cell.uri] = mapping_table

    def set_mapping_table(self, cell: Cell, mapping_table: MappingTable) -> None:
        self._tables[cell.uri] = mapping_table

    def resolve(self, identity: str) -> Cell | None:
        for notebook in self._notebooks.values():
            for cell in notebook.cells:
                if cell.uri == identity:
                    return cell
        return None

    def resolve_from_physical_path(self, path: str) -> Cell | None:
        uri = self._path_to_uri.get(canonical_path(path))
        if uri is None:
            return None
        return self.resolve(uri)

    def physical_location_of(self, unit: Cell) -> str:
        """Write the cell's compiled text to disk (if changed) and return the file path."""
        digest = hashlib.sha1(unit.uri.encode("utf-8")).hexdigest()[:16]
        target = self.storage_dir / f"cell_{digest}{self.suffix}"
        text = self._compiled.get(unit.uri, unit.source)
        if not target.is_file() or target.read_text(encoding="utf-8") != text:
            self.storage_dir.mkdir(parents=True, exist_ok=True)
            target.write_text(text, encoding="utf-8")
            logger.debug("Wrote compiled text for %s to %s", unit.uri, target)
        path = str(target)
        self._path_to_uri[canonical_path(path)] = unit.uri
        self._uri_to_path[unit.uri] = path
        return path

    def mapping_table_of(self, unit: Cell) -> MappingTable | None:
        return self._tables.get(unit.uri)

    def _forget(self, uri: str) -> None:
        self._compiled.pop(uri, None)
        self._tables.pop(uri, None)
        path = self._uri_to_path.pop(uri, None)
        if path is not None:
            self._path_to_uri.pop(canonical_path(path), None)
