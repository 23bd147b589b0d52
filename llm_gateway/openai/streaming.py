"""OpenAI streaming translation.

Purpose:
- Translate ``ChatCompletionChunk`` objects from a ``stream=True`` request
  (with ``stream_options.include_usage``) into unified stream events.

Behavior:
- ``delta.content`` becomes a ``content_delta`` event.
- ``delta.tool_calls`` fragments are accumulated per ``index``; the complete
  calls are emitted once the choice reports a ``finish_reason``.
- A stream that ends without a finish reason still emits its pending calls,
  unless any call's arguments are not valid JSON: that raises
  :class:`IncompleteToolCallError`, which the stream runner latches as the
  iterator's error.
- The trailing usage-only chunk (empty ``choices``) supplies token usage; the
  ``message_done`` event is written after the stream is exhausted.

This module performs no I/O and has no SDK import.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from ..base.errors import IncompleteToolCallError
from ..base.models import ToolCall, Usage
from ..base.streaming import EventSink
from ..base.tokens import coerce_count, extract_openai_usage, field_of
from .mapping import map_finish_reason


@dataclass
class _PendingCall:
    id: str = ""
    name: str = ""
    fragments: List[str] = field(default_factory=list)

    def to_call(self) -> ToolCall:
        return ToolCall(id=self.id, name=self.name, arguments="".join(self.fragments) or "{}")

    def is_complete(self) -> bool:
        try:
            json.loads("".join(self.fragments) or "{}")
        except ValueError:
            return False
        return True


def _accumulate(pending: Dict[int, _PendingCall], fragments: Iterable[Any]) -> None:
    for fragment in fragments:
        call = pending.setdefault(coerce_count(field_of(fragment, "index")), _PendingCall())
        call.id = field_of(fragment, "id") or call.id
        function = field_of(fragment, "function")
        call.name = field_of(function, "name") or call.name
        arguments = field_of(function, "arguments")
        if arguments:
            call.fragments.append(arguments)


def _flush(pending: Dict[int, _PendingCall], sink: EventSink) -> None:
    for index in sorted(pending):
        sink.tool_call(pending[index].to_call())
    pending.clear()


def translate_chunks(chunks: Iterable[Any], sink: EventSink) -> None:
    """Drain ``chunks`` into ``sink``, finishing with ``message_done``."""
    pending: Dict[int, _PendingCall] = {}
    finish_reason: Optional[str] = None
    usage: Optional[Usage] = None
    for chunk in chunks:
        sink.raise_if_cancelled()
        raw_usage = field_of(chunk, "usage")
        if raw_usage is not None:
            usage = extract_openai_usage(raw_usage)
        choices = field_of(chunk, "choices") or []
        if not choices:
            continue
        choice = choices[0]
        delta = field_of(choice, "delta")
        sink.text(field_of(delta, "content") or "")
        _accumulate(pending, field_of(delta, "tool_calls") or [])
        reason = field_of(choice, "finish_reason")
        if reason:
            finish_reason = reason
            _flush(pending, sink)
    # Calls still open when the stream ends without a finish reason.
    truncated = [pending[i].id or pending[i].name for i in sorted(pending) if not pending[i].is_complete()]
    if truncated:
        raise IncompleteToolCallError(
            "stream ended before tool call arguments were complete: " + ", ".join(truncated)
        )
    _flush(pending, sink)
    sink.done(map_finish_reason(finish_reason), usage)


__all__ = ["translate_chunks"]
