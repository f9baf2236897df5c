"""Debug Adapter Protocol message rewriting for notebook cells."""

from __future__ import annotations

from cellbridge.dap.identity import InboundSource, SourceIdentityTranslator
from cellbridge.dap.remap import LocationRemapper
from cellbridge.dap.tracker import ACTIVE_TRACKERS, DebugTracker, TrackerRegistry
from cellbridge.dap.visitor import VISITED_SHAPES, visit_message

__all__ = [
    "ACTIVE_TRACKERS",
    "DebugTracker",
    "InboundSource",
    "LocationRemapper",
    "SourceIdentityTranslator",
    "TrackerRegistry",
    "VISITED_SHAPES",
    "visit_message",
]
