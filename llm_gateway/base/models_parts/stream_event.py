"""
Unified streaming events.

Lifecycle of one stream: zero or more ``content_delta`` / ``tool_call_delta``
events, then exactly one terminal event, either ``message_done`` or ``error``.
A ``tool_call_delta`` is provisional until ``message_done`` arrives; adapters
differ in whether they emit fragments or completed calls.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .generation_result import StopReason
from .tool_parts import ToolCall
from .usage import Usage


class StreamEventType(str, Enum):
    """Discriminator for :class:`StreamEvent`."""

    CONTENT_DELTA = "content_delta"
    TOOL_CALL_DELTA = "tool_call_delta"
    MESSAGE_DONE = "message_done"
    ERROR = "error"


@dataclass
class StreamEvent:
    """A single event in a streaming response."""

    type: StreamEventType
    text_delta: str = ""
    tool_call: Optional[ToolCall] = None
    stop_reason: Optional[StopReason] = None
    usage: Optional[Usage] = None
    error: Optional[BaseException] = None

    @property
    def is_terminal(self) -> bool:
        """True for ``message_done`` and ``error`` events."""
        return self.type in (StreamEventType.MESSAGE_DONE, StreamEventType.ERROR)

    @classmethod
    def content_delta(cls, text: str) -> "StreamEvent":
        return cls(type=StreamEventType.CONTENT_DELTA, text_delta=text)

    @classmethod
    def tool_call_delta(cls, call: ToolCall) -> "StreamEvent":
        return cls(type=StreamEventType.TOOL_CALL_DELTA, tool_call=call)

    @classmethod
    def message_done(
        cls,
        stop_reason: Optional[StopReason] = None,
        usage: Optional[Usage] = None,
    ) -> "StreamEvent":
        return cls(type=StreamEventType.MESSAGE_DONE, stop_reason=stop_reason, usage=usage)

    @classmethod
    def error_event(cls, error: BaseException) -> "StreamEvent":
        return cls(type=StreamEventType.ERROR, error=error)


__all__ = ["StreamEventType", "StreamEvent"]
