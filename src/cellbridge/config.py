"""Bridge settings."""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from cellbridge.args import coerce_bool, parse_args
from cellbridge.core.units import DEFAULT_CELL_SCHEME
from cellbridge.errors import ConfigError


@dataclass(frozen=True)
class BridgeConfig:
    """Settings shared by every tracker of a host.

    Attributes:
        cell_scheme: URI scheme that marks a source path as a cell identity.
        cell_label: Word used in display names, as in ``"nb.ipynb, Cell 3"``.
        cache_enabled: Memoise location lookups in each mapping table.
        trace_messages: Log every rewritten message at DEBUG level.
    """

    cell_scheme: str = DEFAULT_CELL_SCHEME
    cell_label: str = "Cell"
    cache_enabled: bool = True
    trace_messages: bool = False


_COERCERS = {
    "cache_enabled": coerce_bool,
    "trace_messages": coerce_bool,
}


def load_config(raw: Any) -> BridgeConfig:
    """Build a ``BridgeConfig`` from a JSON-like mapping; ``None`` gives the defaults."""
    if raw is None:
        return BridgeConfig()
    config = parse_args(
        BridgeConfig, raw, error=ConfigError, coercers=_COERCERS, allow_unknown=False
    )
    if not config.cell_scheme.strip():
        raise ConfigError("cell_scheme must not be empty")
    return config


def load_config_file(path: str | Path) -> BridgeConfig:
    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Invalid JSON in {path}: {exc}") from exc
    except OSError as exc:
        raise ConfigError(f"Cannot read config file {path}: {exc}") from exc
    return load_config(data)
