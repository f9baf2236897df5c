"""Find the source references and locations inside a DAP message.

Only the message shapes listed in ``_HANDLERS`` are inspected; everything else is
left untouched. Keep this table in sync with the DAP specification when adding
commands or events that carry a ``source``.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from typing import Any

JsonDict = dict[str, Any]
SourceHook = Callable[[JsonDict], None]
LocationHook = Callable[[JsonDict | None, list[JsonDict]], None]


class _Hooks:
    __slots__ = ("on_source", "on_locations")

    def __init__(self, on_source: SourceHook, on_locations: LocationHook) -> None:
        self.on_source = on_source
        self.on_locations = on_locations

    def source(self, value: Any) -> None:
        if isinstance(value, dict):
            self.on_source(value)

    def locations(self, owner: JsonDict, locations: Any) -> None:
        if not isinstance(locations, list):
            return
        source = owner.get("source")
        self.on_locations(
            source if isinstance(source, dict) else None,
            [location for location in locations if isinstance(location, dict)],
        )

    def source_and_self(self, item: JsonDict) -> None:
        """Visit ``item.source`` and then ``item`` itself as a location."""
        self.source(item.get("source"))
        self.locations(item, [item])


def _object(value: Any) -> JsonDict:
    return value if isinstance(value, dict) else {}


def _objects(value: Any) -> Iterator[JsonDict]:
    if isinstance(value, list):
        for item in value:
            if isinstance(item, dict):
                yield item


def _payload_source(payload: JsonDict, hooks: _Hooks) -> None:
    hooks.source(payload.get("source"))


def _breakpoint_event(payload: JsonDict, hooks: _Hooks) -> None:
    hooks.source(_object(payload.get("breakpoint")).get("source"))


def _set_breakpoints_request(payload: JsonDict, hooks: _Hooks) -> None:
    hooks.source(payload.get("source"))
    hooks.locations(payload, payload.get("breakpoints"))


def _stack_trace_response(payload: JsonDict, hooks: _Hooks) -> None:
    for frame in _objects(payload.get("stackFrames")):
        hooks.source_and_self(frame)


def _loaded_sources_response(payload: JsonDict, hooks: _Hooks) -> None:
    for source in _objects(payload.get("sources")):
        hooks.source(source)


def _scopes_response(payload: JsonDict, hooks: _Hooks) -> None:
    for scope in _objects(payload.get("scopes")):
        hooks.source_and_self(scope)


def _breakpoints_response(payload: JsonDict, hooks: _Hooks) -> None:
    for breakpoint in _objects(payload.get("breakpoints")):
        hooks.source_and_self(breakpoint)


_Handler = Callable[[JsonDict, _Hooks], None]

# (message type, event or command) -> handler over the body/arguments object.
_HANDLERS: dict[tuple[str, str], _Handler] = {
    ("event", "output"): _payload_source,
    ("event", "loadedSource"): _payload_source,
    ("event", "breakpoint"): _breakpoint_event,
    ("request", "setBreakpoints"): _set_breakpoints_request,
    ("request", "breakpointLocations"): _payload_source,
    ("request", "source"): _payload_source,
    ("request", "gotoTargets"): _payload_source,
    ("response", "stackTrace"): _stack_trace_response,
    ("response", "loadedSources"): _loaded_sources_response,
    ("response", "scopes"): _scopes_response,
    ("response", "setFunctionBreakpoints"): _breakpoints_response,
    ("response", "setBreakpoints"): _breakpoints_response,
}

VISITED_SHAPES: frozenset[tuple[str, str]] = frozenset(_HANDLERS)


def _dispatch_key(message: JsonDict) -> tuple[tuple[str, str], Any] | None:
    kind = message.get("type")
    if kind == "event":
        return (kind, message.get("event")), message.get("body")
    if kind == "request":
        return (kind, message.get("command")), message.get("arguments")
    if kind == "response":
        if not message.get("success") or not message.get("body"):
            return None
        return (kind, message.get("command")), message.get("body")
    return None


def visit_message(
    message: JsonDict, on_source: SourceHook, on_locations: LocationHook
) -> JsonDict:
    """Call the hooks on every source and location group ``message`` carries.

    ``on_source`` receives each source object. ``on_locations`` receives the source
    of the object owning a group of locations (``None`` when it has none) and the
    location objects themselves; it runs after ``on_source`` for that owner. The
    message is returned so callers can chain.
    """
    dispatch = _dispatch_key(message)
    if dispatch is None:
        return message
    key, payload = dispatch
    handler = _HANDLERS.get(key)
    if handler is None or not isinstance(payload, dict):
        return message
    handler(payload, _Hooks(on_source, on_locations))
    return message
