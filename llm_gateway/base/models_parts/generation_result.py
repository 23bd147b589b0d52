"""
Response envelope shared by every provider.

``raw_request`` and ``raw_response`` keep the untranslated vendor payloads for
debugging only; calling code must not parse them.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Optional

from .content_block import ContentBlock, ContentBlockType
from .tool_parts import ToolCall
from .usage import Usage


class StopReason(str, Enum):
    """Why generation stopped."""

    END_TURN = "end_turn"
    MAX_TOKENS = "max_tokens"
    TOOL_USE = "tool_use"
    STOP = "stop"


@dataclass
class GenerateTextResult:
    """Result of a text generation request (or a collected stream)."""

    content: List[ContentBlock] = field(default_factory=list)
    stop_reason: Optional[StopReason] = None
    usage: Usage = field(default_factory=Usage)
    model_id: str = ""
    raw_request: Any = None
    raw_response: Any = None

    def text(self) -> str:
        """Return concatenated text from all text blocks, in order."""
        return "".join(
            b.text or "" for b in self.content if b.type == ContentBlockType.TEXT
        )

    def tool_calls(self) -> List[ToolCall]:
        """Return every tool call carried by the result, in order."""
        return [
            b.tool_call
            for b in self.content
            if b.type == ContentBlockType.TOOL_CALL and b.tool_call is not None
        ]


__all__ = ["StopReason", "GenerateTextResult"]
