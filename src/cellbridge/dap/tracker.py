"""Per-notebook message tracker that plugs the rewriting into a debug session."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from cellbridge.config import BridgeConfig
from cellbridge.core.mapping import Direction
from cellbridge.core.registry import UnitRegistry
from cellbridge.core.units import IdentityResolver, MappingProvider, TextStore
from cellbridge.dap.identity import SourceIdentityTranslator
from cellbridge.dap.remap import LocationRemapper
from cellbridge.dap.visitor import visit_message

logger = logging.getLogger(__name__)

JsonDict = dict[str, Any]


class TrackerRegistry:
    """Active trackers keyed by container (notebook) URI.

    Entries stay until ``DebugTracker.stop`` removes them or the host calls ``clear``.
    """

    def __init__(self) -> None:
        self._trackers: dict[str, DebugTracker] = {}

    def add(self, tracker: DebugTracker) -> None:
        previous = self._trackers.get(tracker.container)
        if previous is not None and previous is not tracker:
            logger.debug("Replacing active tracker for %s", tracker.container)
        self._trackers[tracker.container] = tracker

    def get(self, container: str) -> DebugTracker | None:
        return self._trackers.get(container)

    def remove(self, tracker: DebugTracker) -> None:
        # A newer tracker for the same container is left in place.
        if self._trackers.get(tracker.container) is tracker:
            del self._trackers[tracker.container]

    def clear(self) -> None:
        self._trackers.clear()

    def __contains__(self, container: object) -> bool:
        return container in self._trackers

    def __len__(self) -> int:
        return len(self._trackers)


ACTIVE_TRACKERS = TrackerRegistry()


class DebugTracker:
    """Rewrites each message of one debug session, in arrival order.

    ``on_outbound_message`` handles editor-to-debugger traffic and
    ``on_inbound_message`` debugger-to-editor traffic. Both mutate and return the
    message so the host can forward it.
    """

    def __init__(
        self,
        container: str,
        resolver: IdentityResolver,
        text_store: TextStore,
        mappings: MappingProvider,
        *,
        config: BridgeConfig | None = None,
        registry: TrackerRegistry | None = None,
        on_stop: Callable[[], None] | None = None,
    ) -> None:
        self.container = container
        self.config = config or BridgeConfig()
        self.translator = SourceIdentityTranslator(resolver, text_store, self.config)
        self.remapper = LocationRemapper(
            resolver, mappings, use_cache=self.config.cache_enabled
        )
        self._registry = registry if registry is not None else ACTIVE_TRACKERS
        self._on_stop = on_stop
        self._stopped = False
        self._registry.add(self)

    @classmethod
    def for_registry(
        cls,
        container: str,
        units: UnitRegistry,
        **kwargs: Any,
    ) -> DebugTracker:
        """Tracker whose resolver, text store and mapping provider are all ``units``."""
        return cls(container, units, units, units, **kwargs)

    @property
    def stopped(self) -> bool:
        return self._stopped

    def rewrite(self, message: JsonDict, direction: Direction) -> JsonDict:
        def on_source(source: JsonDict) -> None:
            self.translator.rewrite_source(source, direction)

        def on_locations(source: JsonDict | None, locations: list[JsonDict]) -> None:
            path = source.get("path") if source is not None else None
            if not isinstance(path, str) or not path:
                return
            self.remapper.remap(locations, path, direction)

        visit_message(message, on_source, on_locations)
        if self.config.trace_messages:
            logger.debug("[%s] %s", direction.value, message)
        return message

    def on_outbound_message(self, message: JsonDict) -> JsonDict:
        return self.rewrite(message, Direction.TO_SERVER)

    def on_inbound_message(self, message: JsonDict) -> JsonDict:
        return self.rewrite(message, Direction.TO_EDITOR)

    def on_error(self, error: BaseException) -> None:
        logger.error("Debug session for %s reported an error: %s", self.container, error)

    def stop(self) -> None:
        """Unregister the tracker and ask the host to end the session."""
        if self._stopped:
            return
        self._stopped = True
        self._registry.remove(self)
        if self._on_stop is not None:
            self._on_stop()
