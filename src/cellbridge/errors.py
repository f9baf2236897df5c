"""Exceptions raised by cellbridge."""

from __future__ import annotations


class CellBridgeError(Exception):
    """Base class for cellbridge errors."""


class ConfigError(CellBridgeError, ValueError):
    """Bridge configuration is missing a field or has an ill-typed value."""
