"""Unified data model parts (messages, generation options/results, streaming, batch).

Prefer importing from ``llm_gateway.base.models`` for the stable surface.
"""

from .role import Role
from .media_parts import AudioPart, FilePart, ImageDetail, ImagePart
from .tool_parts import ToolCall, ToolDefinition, ToolResult
from .content_block import ContentBlock, ContentBlockType
from .message import Message
from .generation_options import GenerateTextOptions, ResponseFormat, SafetySetting, ToolChoice
from .usage import Usage
from .generation_result import GenerateTextResult, StopReason
from .stream_event import StreamEvent, StreamEventType
from .batch_parts import BatchJob, BatchResult, BatchStatus, BatchStorage

__all__ = [
    "Role",
    "AudioPart",
    "FilePart",
    "ImageDetail",
    "ImagePart",
    "ToolCall",
    "ToolDefinition",
    "ToolResult",
    "ContentBlock",
    "ContentBlockType",
    "Message",
    "GenerateTextOptions",
    "ResponseFormat",
    "SafetySetting",
    "ToolChoice",
    "Usage",
    "GenerateTextResult",
    "StopReason",
    "StreamEvent",
    "StreamEventType",
    "BatchJob",
    "BatchResult",
    "BatchStatus",
    "BatchStorage",
]
