"""OpenAI Chat Completions mapping helpers.

Purpose:
- Translate unified :class:`GenerateTextOptions` into keyword arguments for
  ``client.chat.completions.create`` and map ``ChatCompletion`` objects (or
  their JSON form from batch output files) back into
  :class:`GenerateTextResult`.

Role mapping:
- ``system`` prompt and ``system`` messages -> ``developer`` messages
- ``user`` -> plain text, or content parts when images/audio are present
- ``assistant`` -> text plus ``tool_calls``
- ``tool`` -> one ``tool`` message per tool result block

Failure modes:
- ``InvalidContentBlockError`` for blocks whose payload does not match their
  tag. Unsupported block kinds for a role and empty text blocks are skipped;
  a message left without content is dropped.
"""

from __future__ import annotations

import base64
from typing import Any, Dict, List, Optional

from ..base.constants import DEFAULT_AUDIO_MIME, DEFAULT_IMAGE_MIME
from ..base.dto import ConfigTarget
from ..base.media import resolve_media
from ..base.models import (
    AudioPart,
    ContentBlock,
    ContentBlockType,
    GenerateTextOptions,
    GenerateTextResult,
    ImageDetail,
    ImagePart,
    Message,
    ResponseFormat,
    Role,
    StopReason,
    ToolDefinition,
    encode_data_url,
    new_tool_call_block,
    text_block,
)
from ..base.tokens import extract_openai_usage, field_of

# Thinking budget thresholds for reasoning_effort.
REASONING_LOW_MAX = 1000
REASONING_HIGH_MIN = 10000

_FINISH_REASONS = {
    "stop": StopReason.END_TURN,
    "length": StopReason.MAX_TOKENS,
    "tool_calls": StopReason.TOOL_USE,
    "content_filter": StopReason.STOP,
}

_AUDIO_FORMATS = {
    "audio/mpeg": "mp3",
    "audio/mp3": "mp3",
    "audio/wav": "wav",
    "audio/x-wav": "wav",
    "audio/wave": "wav",
}


def build_params(options: GenerateTextOptions, target: ConfigTarget) -> Dict[str, Any]:
    """Build ``chat.completions.create`` keyword arguments."""
    messages: List[Dict[str, Any]] = []
    if options.system:
        messages.append({"role": "developer", "content": options.system})
    for msg in options.messages:
        messages.extend(map_message(msg))

    params: Dict[str, Any] = {"model": target.model, "messages": messages}
    if options.tools:
        params["tools"] = map_tools(options.tools)
    if options.tool_choice is not None:
        params["tool_choice"] = options.tool_choice.value
    if options.response_format is not None:
        params["response_format"] = map_response_format(options.response_format)
    if options.thinking_budget is not None:
        params["reasoning_effort"] = map_reasoning_effort(options.thinking_budget)

    max_tokens = options.max_tokens or target.max_tokens
    if max_tokens > 0:
        params["max_completion_tokens"] = max_tokens
    if options.temperature is not None:
        params["temperature"] = options.temperature
    elif target.temperature and target.temperature > 0:
        params["temperature"] = target.temperature
    if options.top_p is not None:
        params["top_p"] = options.top_p
    if options.stop_words:
        params["stop"] = list(options.stop_words)

    params.update(options.extensions_for("openai"))
    return params


def map_message(msg: Message) -> List[Dict[str, Any]]:
    """Map one unified message to zero or more OpenAI messages."""
    for block in msg.content:
        block.validate()
    role = Role(msg.role)
    if role is Role.USER:
        return _map_user(msg.content)
    if role is Role.ASSISTANT:
        return _map_assistant(msg.content)
    if role is Role.SYSTEM:
        text = _joined_text(msg.content)
        return [{"role": "developer", "content": text}] if text else []
    return [
        {
            "role": "tool",
            "tool_call_id": block.tool_result.tool_call_id,
            "content": block.tool_result.content,
        }
        for block in msg.content
        if ContentBlockType(block.type) is ContentBlockType.TOOL_RESULT
    ]


def _map_user(blocks: List[ContentBlock]) -> List[Dict[str, Any]]:
    multimodal = any(
        ContentBlockType(b.type) in (ContentBlockType.IMAGE, ContentBlockType.AUDIO) for b in blocks
    )
    if not multimodal:
        text = _joined_text(blocks)
        return [{"role": "user", "content": text}] if text else []

    parts: List[Dict[str, Any]] = []
    for block in blocks:
        kind = ContentBlockType(block.type)
        if kind is ContentBlockType.TEXT:
            if block.text:
                parts.append({"type": "text", "text": block.text})
        elif kind is ContentBlockType.IMAGE:
            part = map_image_part(block.image)
            if part is not None:
                parts.append(part)
        elif kind is ContentBlockType.AUDIO:
            part = map_audio_part(block.audio)
            if part is not None:
                parts.append(part)
    return [{"role": "user", "content": parts}] if parts else []


def _map_assistant(blocks: List[ContentBlock]) -> List[Dict[str, Any]]:
    text = _joined_text(blocks)
    tool_calls = [
        {
            "id": b.tool_call.id,
            "type": "function",
            "function": {"name": b.tool_call.name, "arguments": b.tool_call.arguments or "{}"},
        }
        for b in blocks
        if ContentBlockType(b.type) is ContentBlockType.TOOL_CALL
    ]
    if not text and not tool_calls:
        return []
    out: Dict[str, Any] = {"role": "assistant"}
    if text:
        out["content"] = text
    if tool_calls:
        out["tool_calls"] = tool_calls
    return [out]


def map_image_part(part: Optional[ImagePart]) -> Optional[Dict[str, Any]]:
    """Image as ``image_url``; inline bytes are re-encoded as a data URL."""
    if part is None:
        return None
    media = resolve_media(
        data=part.data, url=part.url, mime_type=part.mime_type, default_mime=DEFAULT_IMAGE_MIME
    )
    if media is None:
        return None
    url = encode_data_url(media.mime_type, media.data) if media.inline else media.url
    detail = ImageDetail(part.detail).value if part.detail else ImageDetail.AUTO.value
    return {"type": "image_url", "image_url": {"url": url, "detail": detail}}


def map_audio_part(part: Optional[AudioPart]) -> Optional[Dict[str, Any]]:
    """Audio as ``input_audio`` (base64 payload, mp3 or wav)."""
    if part is None:
        return None
    media = resolve_media(
        data=part.data, url=part.url, mime_type=part.mime_type, default_mime=DEFAULT_AUDIO_MIME
    )
    if media is None:
        return None
    data = base64.b64encode(media.data).decode("ascii") if media.inline else media.url
    return {
        "type": "input_audio",
        "input_audio": {"data": data, "format": map_audio_format(media.mime_type)},
    }


def map_audio_format(mime_type: str) -> str:
    return _AUDIO_FORMATS.get((mime_type or "").lower(), "mp3")


def map_tools(tools: List[ToolDefinition]) -> List[Dict[str, Any]]:
    out: List[Dict[str, Any]] = []
    for tool in tools:
        function: Dict[str, Any] = {"name": tool.name}
        if tool.description:
            function["description"] = tool.description
        schema = tool.parameters_schema()
        if schema is not None:
            function["parameters"] = schema
        out.append({"type": "function", "function": function})
    return out


def map_response_format(fmt: ResponseFormat) -> Dict[str, Any]:
    if fmt.type == "json_schema":
        return {
            "type": "json_schema",
            "json_schema": {
                "name": fmt.name or "response",
                "schema": fmt.schema_dict() or {},
                "strict": True,
            },
        }
    if fmt.type == "json_object":
        return {"type": "json_object"}
    return {"type": "text"}


def map_reasoning_effort(budget: int) -> str:
    if budget <= REASONING_LOW_MAX:
        return "low"
    if budget >= REASONING_HIGH_MIN:
        return "high"
    return "medium"


def map_finish_reason(reason: Optional[str]) -> StopReason:
    return _FINISH_REASONS.get(reason or "", StopReason.STOP)


def map_completion(completion: Any) -> GenerateTextResult:
    """Map a ``ChatCompletion`` (object or JSON mapping) to a unified result."""
    result = GenerateTextResult(
        usage=extract_openai_usage(field_of(completion, "usage")),
        model_id=field_of(completion, "model", "") or "",
    )
    choices = field_of(completion, "choices") or []
    if not choices:
        return result
    choice = choices[0]
    result.stop_reason = map_finish_reason(field_of(choice, "finish_reason"))
    message = field_of(choice, "message")
    text = field_of(message, "content")
    if text:
        result.content.append(text_block(text))
    for call in field_of(message, "tool_calls") or []:
        function = field_of(call, "function")
        result.content.append(
            new_tool_call_block(
                field_of(call, "id", "") or "",
                field_of(function, "name", "") or "",
                field_of(function, "arguments", "") or "",
            )
        )
    return result


def _joined_text(blocks: List[ContentBlock]) -> str:
    return "".join(
        b.text or "" for b in blocks if ContentBlockType(b.type) is ContentBlockType.TEXT
    )


__all__ = [
    "build_params",
    "map_message",
    "map_image_part",
    "map_audio_part",
    "map_audio_format",
    "map_tools",
    "map_response_format",
    "map_reasoning_effort",
    "map_finish_reason",
    "map_completion",
    "REASONING_LOW_MAX",
    "REASONING_HIGH_MIN",
]
