"""Dataclass-driven parsing of JSON objects into typed settings."""

from __future__ import annotations

import dataclasses
from collections.abc import Callable, Mapping
from typing import Any, TypeVar, cast, get_args, get_origin, get_type_hints

T = TypeVar("T")

_TRUE_WORDS = frozenset({"1", "true", "yes", "on"})
_FALSE_WORDS = frozenset({"0", "false", "no", "off"})


def parse_args(
    model: type[T],
    raw_args: object,
    *,
    error: Callable[[str], Exception] = ValueError,
    coercers: Mapping[str, Callable[[Any], Any]] | None = None,
    allow_unknown: bool = True,
) -> T:
    """Instantiate ``model`` from ``raw_args`` with field-level validation.

    - Missing required fields raise ``error(...)``.
    - Field values are type-checked against the dataclass annotation.
    - Optional coercers can be supplied per field name.
    - Unknown keys raise ``error(...)`` unless ``allow_unknown`` is set.
    """
    if not dataclasses.is_dataclass(model):
        raise TypeError("model must be a dataclass type")
    if not isinstance(raw_args, Mapping):
        raise error("Arguments must be an object")
    args_map = cast(Mapping[str, Any], raw_args)

    fields = dataclasses.fields(model)
    if not allow_unknown:
        known = {field.name for field in fields}
        unknown = sorted(str(key) for key in args_map if key not in known)
        if unknown:
            raise error(f"Unknown field: {unknown[0]}")

    coercers = coercers or {}
    resolved_types = get_type_hints(model)
    kwargs: dict[str, Any] = {}
    for field in fields:
        has_value = field.name in args_map
        if not has_value:
            if field.default is not dataclasses.MISSING:
                kwargs[field.name] = field.default
                continue
            if field.default_factory is not dataclasses.MISSING:
                kwargs[field.name] = field.default_factory()
                continue
            raise error(f"Missing required field: {field.name}")

        value = args_map[field.name]
        coercer = coercers.get(field.name)
        if coercer is not None:
            try:
                value = coercer(value)
            except Exception as exc:
                raise error(f"Invalid value for field: {field.name}") from exc

        field_type = resolved_types.get(field.name, field.type)
        if not _matches_type(value, field_type):
            raise error(f"Invalid type for field: {field.name}")
        kwargs[field.name] = value

    return model(**kwargs)


def coerce_bool(value: Any) -> bool:
    """Accept real booleans and the usual string spellings of them."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        word = value.strip().lower()
        if word in _TRUE_WORDS:
            return True
        if word in _FALSE_WORDS:
            return False
    raise ValueError(f"not a boolean: {value!r}")


def _matches_type(value: Any, annotation: Any) -> bool:
    origin = get_origin(annotation)
    if origin is None:
        if annotation is Any:
            return True
        if annotation is type(None):
            return value is None
        if annotation is int and isinstance(value, bool):
            return False
        return isinstance(value, annotation)

    if origin in {list, tuple, set, frozenset, dict, Mapping}:
        return isinstance(value, origin)

    if origin is Callable:
        return callable(value)

    # PEP 604 unions and typing.Union resolve to UnionType/Union as origin.
    return any(_matches_type(value, member) for member in get_args(annotation))
