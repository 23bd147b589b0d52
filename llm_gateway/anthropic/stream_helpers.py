"""Anthropic streaming helpers.

Purpose:
- Translate raw Messages API stream events (``stream=True``) into unified
  stream events written through an :class:`EventSink`.

Event handling:
- ``message_start`` carries input token usage.
- ``content_block_start`` opens a tool-use block; its JSON arguments arrive
  as ``input_json_delta`` fragments keyed by block index and are emitted as
  one complete :class:`ToolCall` on ``content_block_stop``.
- ``text_delta`` becomes a ``content_delta`` event; thinking deltas are not
  surfaced while streaming.
- ``message_delta`` carries the stop reason and cumulative output tokens.
- ``message_stop`` (or exhaustion of the stream) yields ``message_done``.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from ..base.models import ToolCall, Usage
from ..base.streaming import EventSink
from ..base.tokens import coerce_count, field_of
from .mapping import map_stop_reason


@dataclass
class _PendingToolUse:
    id: str
    name: str
    initial_input: Any = None
    fragments: List[str] = field(default_factory=list)

    def to_call(self) -> ToolCall:
        arguments = "".join(self.fragments)
        if not arguments:
            arguments = json.dumps(self.initial_input or {})
        return ToolCall(id=self.id, name=self.name, arguments=arguments)


@dataclass
class _StreamState:
    input_tokens: int = 0
    output_tokens: int = 0
    stop_reason: Optional[str] = None
    tools: Dict[int, _PendingToolUse] = field(default_factory=dict)

    def usage(self) -> Usage:
        return Usage(
            input_tokens=self.input_tokens,
            output_tokens=self.output_tokens,
            total_tokens=self.input_tokens + self.output_tokens,
        )


def translate_events(events: Iterable[Any], sink: EventSink) -> None:
    """Drain ``events`` into ``sink``, finishing with ``message_done``."""
    state = _StreamState()
    for event in events:
        sink.raise_if_cancelled()
        kind = field_of(event, "type")
        if kind == "message_start":
            usage = field_of(field_of(event, "message"), "usage")
            state.input_tokens = coerce_count(field_of(usage, "input_tokens"))
            state.output_tokens = coerce_count(field_of(usage, "output_tokens"))
        elif kind == "content_block_start":
            _open_block(state, event)
        elif kind == "content_block_delta":
            _apply_delta(state, event, sink)
        elif kind == "content_block_stop":
            pending = state.tools.pop(coerce_count(field_of(event, "index")), None)
            if pending is not None:
                sink.tool_call(pending.to_call())
        elif kind == "message_delta":
            state.stop_reason = field_of(field_of(event, "delta"), "stop_reason") or state.stop_reason
            # Output tokens on message_delta are cumulative for the message.
            output = coerce_count(field_of(field_of(event, "usage"), "output_tokens"))
            if output:
                state.output_tokens = output
        elif kind == "message_stop":
            break
    sink.done(map_stop_reason(state.stop_reason), state.usage())


def _open_block(state: _StreamState, event: Any) -> None:
    block = field_of(event, "content_block")
    if field_of(block, "type") != "tool_use":
        return
    state.tools[coerce_count(field_of(event, "index"))] = _PendingToolUse(
        id=field_of(block, "id", "") or "",
        name=field_of(block, "name", "") or "",
        initial_input=field_of(block, "input"),
    )


def _apply_delta(state: _StreamState, event: Any, sink: EventSink) -> None:
    delta = field_of(event, "delta")
    kind = field_of(delta, "type")
    if kind == "text_delta":
        sink.text(field_of(delta, "text", "") or "")
    elif kind == "input_json_delta":
        pending = state.tools.get(coerce_count(field_of(event, "index")))
        if pending is not None:
            pending.fragments.append(field_of(delta, "partial_json", "") or "")


__all__ = ["translate_events"]
