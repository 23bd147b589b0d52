"""
Message DTO and constructors for common message shapes.

A :class:`Message` is one conversational turn: a role plus an ordered list of
:class:`ContentBlock` items. Empty content is allowed at construction time;
adapters drop messages whose blocks all map to nothing.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Union

from .content_block import ContentBlock, ContentBlockType
from .media_parts import AudioPart, ImageDetail, ImagePart
from .role import Role
from .tool_parts import JSONLike, ToolCall, ToolResult


@dataclass
class Message:
    """A single message in a conversation.

    Attributes:
        role: Author role; plain strings are coerced to :class:`Role`.
        content: Ordered content blocks.
    """

    role: Role
    content: List[ContentBlock] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.role = Role(self.role)

    def text(self) -> str:
        """Return the concatenation of this message's text blocks."""
        return "".join(
            b.text or "" for b in self.content if b.type == ContentBlockType.TEXT
        )


def text_block(text: str) -> ContentBlock:
    """Create a text content block."""
    return ContentBlock(type=ContentBlockType.TEXT, text=text)


def new_text_message(role: Union[Role, str], text: str) -> Message:
    """Create a message holding a single text block."""
    return Message(role=Role(role), content=[text_block(text)])


def new_image_message(
    role: Union[Role, str],
    image_url: str,
    detail: Optional[ImageDetail] = None,
) -> Message:
    """Create a message holding a single image referenced by URL (or ``data:`` URI)."""
    image = ImagePart(url=image_url, detail=detail)
    return Message(role=Role(role), content=[ContentBlock(type=ContentBlockType.IMAGE, image=image)])


def new_audio_message(role: Union[Role, str], audio_url: str) -> Message:
    """Create a message holding a single audio clip referenced by URL."""
    audio = AudioPart(url=audio_url)
    return Message(role=Role(role), content=[ContentBlock(type=ContentBlockType.AUDIO, audio=audio)])


def new_tool_call_block(call_id: str, name: str, arguments: JSONLike = None) -> ContentBlock:
    """Create a tool call content block (assistant side)."""
    return ContentBlock(
        type=ContentBlockType.TOOL_CALL,
        tool_call=ToolCall(id=call_id, name=name, arguments=arguments),
    )


def new_tool_result_block(tool_call_id: str, content: str, is_error: bool = False) -> ContentBlock:
    """Create a tool result content block (sent back in a ``tool`` message)."""
    return ContentBlock(
        type=ContentBlockType.TOOL_RESULT,
        tool_result=ToolResult(tool_call_id=tool_call_id, content=content, is_error=is_error),
    )


__all__ = [
    "Message",
    "text_block",
    "new_text_message",
    "new_image_message",
    "new_audio_message",
    "new_tool_call_block",
    "new_tool_result_block",
]
