"""Unified data model public surface.

Re-exports the implementations under ``llm_gateway.base.models_parts`` so
callers and adapters share a single import path.
"""

from .models_parts.role import Role
from .models_parts.media_parts import AudioPart, FilePart, ImageDetail, ImagePart
from .models_parts.tool_parts import ToolCall, ToolDefinition, ToolResult
from .models_parts.content_block import ContentBlock, ContentBlockType
from .models_parts.message import (
    Message,
    new_audio_message,
    new_image_message,
    new_text_message,
    new_tool_call_block,
    new_tool_result_block,
    text_block,
)
from .models_parts.data_url import (
    decode_data_url,
    detect_mime_from_url,
    encode_data_url,
    is_data_url,
)
from .models_parts.generation_options import (
    GenerateTextOptions,
    ResponseFormat,
    SafetySetting,
    StreamTextOptions,
    ToolChoice,
)
from .models_parts.usage import Usage
from .models_parts.generation_result import GenerateTextResult, StopReason
from .models_parts.stream_event import StreamEvent, StreamEventType
from .models_parts.batch_parts import (
    BatchJob,
    BatchRequest,
    BatchRequestItem,
    BatchResult,
    BatchStatus,
    BatchStorage,
    ListBatchOptions,
)

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
    "new_audio_message",
    "new_image_message",
    "new_text_message",
    "new_tool_call_block",
    "new_tool_result_block",
    "text_block",
    "decode_data_url",
    "detect_mime_from_url",
    "encode_data_url",
    "is_data_url",
    "GenerateTextOptions",
    "ResponseFormat",
    "SafetySetting",
    "StreamTextOptions",
    "ToolChoice",
    "Usage",
    "GenerateTextResult",
    "StopReason",
    "StreamEvent",
    "StreamEventType",
    "BatchJob",
    "BatchRequest",
    "BatchRequestItem",
    "BatchResult",
    "BatchStatus",
    "BatchStorage",
    "ListBatchOptions",
]
