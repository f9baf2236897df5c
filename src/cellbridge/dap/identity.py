"""Translate ``source`` references between cell identities and physical paths.

Outbound (editor to debugger) a cell URI becomes the path of the cell's compiled text.
Inbound (debugger to editor) such a path becomes the cell URI again, with a readable
name like ``"analysis.ipynb, Cell 3"``. Anything that does not resolve is left alone.
"""

from __future__ import annotations

import logging
from typing import Any, NamedTuple
from urllib.parse import urlsplit

from cellbridge.config import BridgeConfig
from cellbridge.core.mapping import Direction
from cellbridge.core.units import IdentityResolver, LogicalUnit, TextStore

logger = logging.getLogger(__name__)


class InboundSource(NamedTuple):
    identity: str
    display_name: str


def display_name(unit: LogicalUnit, *, label: str = "Cell") -> str:
    name = unit.container_name
    if unit.position >= 0:
        name += f", {label} {unit.position + 1}"
    return name


class SourceIdentityTranslator:
    """Rewrites source paths using the host's resolver and text store."""

    def __init__(
        self,
        resolver: IdentityResolver,
        text_store: TextStore,
        config: BridgeConfig | None = None,
    ) -> None:
        self._resolver = resolver
        self._text_store = text_store
        self._config = config or BridgeConfig()

    def translate_outbound(self, path: str) -> str | None:
        """Physical path for a cell URI, or ``None`` when ``path`` is not a known cell."""
        try:
            scheme = urlsplit(path).scheme
        except ValueError as exc:
            logger.debug("Unparseable source path %r: %s", path, exc)
            return None
        if scheme != self._config.cell_scheme:
            return None

        unit = self._resolver.resolve(path)
        if unit is None:
            return None
        try:
            return self._text_store.physical_location_of(unit)
        except OSError as exc:
            logger.warning("Could not store compiled text for %s: %s", path, exc)
            return None

    def translate_inbound(self, path: str) -> InboundSource | None:
        """Cell identity and display name for a physical path, if it belongs to a live cell."""
        unit = self._resolver.resolve_from_physical_path(path)
        if unit is None or not unit.is_live:
            return None
        return InboundSource(
            identity=unit.uri,
            display_name=display_name(unit, label=self._config.cell_label),
        )

    def rewrite_source(self, source: dict[str, Any], direction: Direction) -> bool:
        """Rewrite ``source`` in place; return whether anything changed."""
        path = source.get("path")
        if not isinstance(path, str) or not path:
            return False

        if direction is Direction.TO_SERVER:
            physical = self.translate_outbound(path)
            if physical is None:
                return False
            source["path"] = physical
            logger.debug("source %s -> %s", path, physical)
            return True

        inbound = self.translate_inbound(path)
        if inbound is None:
            return False
        source["name"] = inbound.display_name
        source["path"] = inbound.identity
        logger.debug("source %s -> %s (%s)", path, inbound.identity, inbound.display_name)
        return True
