"""Tests for the DAP message visitor allow-list."""

from __future__ import annotations

import copy
from typing import Any

import pytest

from cellbridge.dap.visitor import VISITED_SHAPES, visit_message


class _Recorder:
    def __init__(self) -> None:
        self.sources: list[dict[str, Any]] = []
        self.groups: list[tuple[dict[str, Any] | None, list[dict[str, Any]]]] = []
        self.order: list[str] = []

    def on_source(self, source: dict[str, Any]) -> None:
        self.sources.append(source)
        self.order.append(f"source:{source.get('path')}")

    def on_locations(
        self, source: dict[str, Any] | None, locations: list[dict[str, Any]]
    ) -> None:
        self.groups.append((source, locations))
        self.order.append(f"locations:{len(locations)}")

    def visit(self, message: dict[str, Any]) -> dict[str, Any]:
        return visit_message(message, self.on_source, self.on_locations)


def _src(path: str) -> dict[str, Any]:
    return {"path": path, "name": path.rsplit("/", 1)[-1]}


def test_visited_shapes_is_the_documented_allow_list() -> None:
    assert VISITED_SHAPES == {
        ("event", "output"),
        ("event", "loadedSource"),
        ("event", "breakpoint"),
        ("request", "setBreakpoints"),
        ("request", "breakpointLocations"),
        ("request", "source"),
        ("request", "gotoTargets"),
        ("response", "stackTrace"),
        ("response", "loadedSources"),
        ("response", "scopes"),
        ("response", "setFunctionBreakpoints"),
        ("response", "setBreakpoints"),
    }


@pytest.mark.parametrize("event", ["output", "loadedSource"])
def test_events_with_body_source(event: str) -> None:
    recorder = _Recorder()
    source = _src("/tmp/a.py")

    recorder.visit({"type": "event", "event": event, "body": {"source": source}})

    assert recorder.sources == [source]
    assert recorder.groups == []


def test_breakpoint_event_visits_nested_source() -> None:
    recorder = _Recorder()
    source = _src("/tmp/a.py")

    recorder.visit(
        {"type": "event", "event": "breakpoint", "body": {"breakpoint": {"source": source}}}
    )

    assert recorder.sources == [source]


@pytest.mark.parametrize("command", ["breakpointLocations", "source", "gotoTargets"])
def test_requests_with_argument_source(command: str) -> None:
    recorder = _Recorder()
    source = _src("/tmp/a.py")

    recorder.visit(
        {"type": "request", "command": command, "arguments": {"source": source, "line": 4}}
    )

    assert recorder.sources == [source]
    assert recorder.groups == []


def test_set_breakpoints_request_visits_source_then_breakpoints() -> None:
    recorder = _Recorder()
    source = _src("cell://a")
    breakpoints = [{"line": 3}, {"line": 5, "column": 2}]

    recorder.visit(
        {
            "type": "request",
            "command": "setBreakpoints",
            "arguments": {"source": source, "breakpoints": breakpoints},
        }
    )

    assert recorder.order == ["source:cell://a", "locations:2"]
    assert recorder.groups == [(source, breakpoints)]


def test_stack_trace_response_visits_each_frame() -> None:
    recorder = _Recorder()
    frames = [
        {"id": 1, "line": 10, "column": 1, "source": _src("/tmp/a.py")},
        {"id": 2, "line": 20, "column": 1},
    ]

    recorder.visit(
        {
            "type": "response",
            "command": "stackTrace",
            "success": True,
            "body": {"stackFrames": frames, "totalFrames": 2},
        }
    )

    assert recorder.order == ["source:/tmp/a.py", "locations:1", "locations:1"]
    assert recorder.groups[0] == (frames[0]["source"], [frames[0]])
    assert recorder.groups[1] == (None, [frames[1]])


def test_loaded_sources_response_visits_every_source() -> None:
    recorder = _Recorder()
    sources = [_src("/tmp/a.py"), _src("/tmp/b.py")]

    recorder.visit(
        {
            "type": "response",
            "command": "loadedSources",
            "success": True,
            "body": {"sources": sources},
        }
    )

    assert recorder.sources == sources


@pytest.mark.parametrize(
    ("command", "field"),
    [
        ("scopes", "scopes"),
        ("setFunctionBreakpoints", "breakpoints"),
        ("setBreakpoints", "breakpoints"),
    ],
)
def test_responses_visit_item_source_and_item_location(command: str, field: str) -> None:
    recorder = _Recorder()
    item = {"line": 7, "column": 0, "source": _src("/tmp/a.py")}

    recorder.visit(
        {"type": "response", "command": command, "success": True, "body": {field: [item]}}
    )

    assert recorder.sources == [item["source"]]
    assert recorder.groups == [(item["source"], [item])]


def test_failed_response_is_not_visited() -> None:
    recorder = _Recorder()

    recorder.visit(
        {
            "type": "response",
            "command": "stackTrace",
            "success": False,
            "body": {"stackFrames": [{"line": 1, "source": _src("/tmp/a.py")}]},
        }
    )

    assert recorder.order == []


def test_response_without_body_is_not_visited() -> None:
    recorder = _Recorder()

    recorder.visit({"type": "response", "command": "stackTrace", "success": True})

    assert recorder.order == []


@pytest.mark.parametrize(
    "message",
    [
        {"type": "event", "event": "stopped", "body": {"source": {"path": "/tmp/a.py"}}},
        {"type": "request", "command": "evaluate", "arguments": {"source": {"path": "x"}}},
        {
            "type": "response",
            "command": "variables",
            "success": True,
            "body": {"variables": [{"source": {"path": "x"}, "line": 1}]},
        },
        {"type": "request", "command": "launchVSCode", "arguments": {"args": []}},
        {"type": "mystery", "command": "setBreakpoints"},
        {"seq": 1},
    ],
)
def test_unlisted_shapes_pass_through_unchanged(message: dict[str, Any]) -> None:
    recorder = _Recorder()
    before = copy.deepcopy(message)

    result = recorder.visit(message)

    assert result is message
    assert message == before
    assert recorder.order == []


def test_missing_or_non_object_sources_are_skipped() -> None:
    recorder = _Recorder()

    recorder.visit({"type": "event", "event": "output", "body": {"output": "hi"}})
    recorder.visit({"type": "event", "event": "output", "body": {"source": None}})
    recorder.visit({"type": "request", "command": "source", "arguments": {"source": "x"}})
    recorder.visit({"type": "event", "event": "breakpoint", "body": {}})

    assert recorder.sources == []


def test_malformed_collections_are_skipped() -> None:
    recorder = _Recorder()

    recorder.visit(
        {
            "type": "response",
            "command": "stackTrace",
            "success": True,
            "body": {"stackFrames": "nope"},
        }
    )
    recorder.visit(
        {
            "type": "response",
            "command": "scopes",
            "success": True,
            "body": {"scopes": [1, None, {"line": 2}]},
        }
    )
    recorder.visit({"type": "event", "event": "output"})
    recorder.visit(
        {
            "type": "request",
            "command": "setBreakpoints",
            "arguments": {"source": {"path": "x"}, "breakpoints": [{"line": 1}, "bad"]},
        }
    )

    assert recorder.groups == [(None, [{"line": 2}]), ({"path": "x"}, [{"line": 1}])]


def test_visit_returns_same_message() -> None:
    recorder = _Recorder()
    message = {"type": "event", "event": "output", "body": {"source": _src("/tmp/a.py")}}

    assert recorder.visit(message) is message
