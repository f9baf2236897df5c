"""cellbridge: map debugger locations between compiled text and notebook cells."""

from __future__ import annotations

from cellbridge.config import BridgeConfig, load_config, load_config_file
from cellbridge.core import Cell, Direction, MappingEntry, MappingTable, Notebook, UnitRegistry
from cellbridge.dap import DebugTracker, TrackerRegistry
from cellbridge.errors import CellBridgeError, ConfigError

__all__ = [
    "BridgeConfig",
    "Cell",
    "CellBridgeError",
    "ConfigError",
    "DebugTracker",
    "Direction",
    "MappingEntry",
    "MappingTable",
    "Notebook",
    "TrackerRegistry",
    "UnitRegistry",
    "load_config",
    "load_config_file",
]
