"""
Tagged-union content block for unified messages.

Exactly one payload field is populated per ``type``. Construction does not
enforce this (so partially built blocks can be assembled), but every adapter
calls :meth:`ContentBlock.validate` before translating and rejects a block
whose payload does not match its tag.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..errors_parts.validation_errors import InvalidContentBlockError
from .media_parts import AudioPart, FilePart, ImagePart
from .tool_parts import ToolCall, ToolResult


class ContentBlockType(str, Enum):
    """Discriminator for :class:`ContentBlock` payloads."""

    TEXT = "text"
    IMAGE = "image"
    AUDIO = "audio"
    FILE = "file"
    TOOL_CALL = "tool_call"
    TOOL_RESULT = "tool_result"


# Tag -> attribute holding that tag's payload
_PAYLOAD_FIELDS = {
    ContentBlockType.TEXT: "text",
    ContentBlockType.IMAGE: "image",
    ContentBlockType.AUDIO: "audio",
    ContentBlockType.FILE: "file",
    ContentBlockType.TOOL_CALL: "tool_call",
    ContentBlockType.TOOL_RESULT: "tool_result",
}


@dataclass
class ContentBlock:
    """A single piece of content within a :class:`Message`."""

    type: ContentBlockType
    text: Optional[str] = None
    image: Optional[ImagePart] = None
    audio: Optional[AudioPart] = None
    file: Optional[FilePart] = None
    tool_call: Optional[ToolCall] = None
    tool_result: Optional[ToolResult] = None

    def validate(self) -> "ContentBlock":
        """Check the "exactly one payload matching the tag" invariant.

        Returns the block itself so callers can validate inline.

        Raises:
            InvalidContentBlockError: when the tag's payload is missing or a
                different payload is also populated.
        """
        try:
            tag = ContentBlockType(self.type)
        except ValueError as exc:
            raise InvalidContentBlockError(f"unknown content block type {self.type!r}") from exc
        expected = _PAYLOAD_FIELDS[tag]
        populated = [name for name in _PAYLOAD_FIELDS.values() if getattr(self, name) is not None]
        if expected not in populated:
            raise InvalidContentBlockError(f"{tag.value} block is missing its {expected} payload")
        if len(populated) != 1:
            extra = ", ".join(p for p in populated if p != expected)
            raise InvalidContentBlockError(f"{tag.value} block also carries: {extra}")
        return self


__all__ = ["ContentBlock", "ContentBlockType"]
