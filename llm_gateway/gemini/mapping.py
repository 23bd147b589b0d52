"""Google GenAI mapping shared by the Gemini and Vertex AI adapters.

Purpose:
- Translate unified options into ``models.generate_content`` keyword
  arguments (``model``, ``contents``, ``config``) for the ``google-genai``
  SDK, and map ``GenerateContentResponse`` objects back.
- Requests are built from plain mappings; the SDK validates them into its
  pydantic types, so this module never imports the SDK.

Role mapping:
- ``user`` and ``tool`` -> ``"user"``; ``assistant`` -> ``"model"``
- ``system`` messages are excluded (their blocks are still validated); the
  system prompt travels as ``config.system_instruction``.
- Empty text blocks are dropped, and so is a message left without parts.

Tool results are sent as ``function_response`` parts. The function name is
recovered from the assistant tool call with the same id earlier in the
conversation, falling back to the call id itself.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional

from ..base.constants import DEFAULT_AUDIO_MIME, DEFAULT_IMAGE_MIME
from ..base.dto import ConfigTarget
from ..base.media import resolve_media
from ..base.models import (
    ContentBlock,
    ContentBlockType,
    GenerateTextOptions,
    GenerateTextResult,
    ImagePart,
    Message,
    ResponseFormat,
    Role,
    StopReason,
    ToolCall,
    ToolChoice,
    ToolDefinition,
    detect_mime_from_url,
    text_block,
)
from ..base.streaming import EventSink
from ..base.tokens import extract_google_usage, field_of

ROLE_USER = "user"
ROLE_MODEL = "model"
TOOL_CALL_ID_PREFIX = "call_"

_FINISH_REASONS = {
    "STOP": StopReason.END_TURN,
    "MAX_TOKENS": StopReason.MAX_TOKENS,
}

_TOOL_MODES = {
    ToolChoice.AUTO: "AUTO",
    ToolChoice.NONE: "NONE",
    ToolChoice.REQUIRED: "ANY",
}


def build_request(options: GenerateTextOptions, target: ConfigTarget, provider: str) -> Dict[str, Any]:
    """Build ``generate_content`` keyword arguments."""
    return {
        "model": target.model,
        "contents": map_messages(options.messages),
        "config": build_config(options, target, provider),
    }


def map_messages(messages: List[Message]) -> List[Dict[str, Any]]:
    """Convert unified messages to GenAI contents (system messages excluded)."""
    call_names: Dict[str, str] = {}
    contents: List[Dict[str, Any]] = []
    for msg in messages:
        role = Role(msg.role)
        if role is Role.SYSTEM:
            for block in msg.content:
                block.validate()
            continue
        parts = []
        for block in msg.content:
            part = map_block(block, call_names)
            if part is not None:
                parts.append(part)
        if parts:
            contents.append({"role": ROLE_MODEL if role is Role.ASSISTANT else ROLE_USER, "parts": parts})
    return contents


def map_block(block: ContentBlock, call_names: Optional[Dict[str, str]] = None) -> Optional[Dict[str, Any]]:
    """Map one content block to a GenAI part mapping."""
    block.validate()
    names = call_names if call_names is not None else {}
    kind = ContentBlockType(block.type)
    if kind is ContentBlockType.TEXT:
        return {"text": block.text} if block.text else None
    if kind is ContentBlockType.IMAGE:
        return _media_part(block.image, DEFAULT_IMAGE_MIME)
    if kind is ContentBlockType.AUDIO:
        return _media_part(block.audio, DEFAULT_AUDIO_MIME)
    if kind is ContentBlockType.FILE:
        mime = block.file.mime_type or detect_mime_from_url(block.file.uri)
        return {"file_data": {"file_uri": block.file.uri, "mime_type": mime}}
    if kind is ContentBlockType.TOOL_CALL:
        call = block.tool_call
        names[call.id] = call.name
        function_call: Dict[str, Any] = {"name": call.name, "args": call.arguments_dict()}
        if call.id and call.id != TOOL_CALL_ID_PREFIX + call.name:
            function_call["id"] = call.id
        return {"function_call": function_call}
    result = block.tool_result
    response: Dict[str, Any] = {"result": result.content}
    if result.is_error:
        response["error"] = result.content
    return {
        "function_response": {
            "name": names.get(result.tool_call_id, result.tool_call_id),
            "response": response,
        }
    }


def _media_part(part: Any, default_mime: str) -> Optional[Dict[str, Any]]:
    if part is None:
        return None
    media = resolve_media(data=part.data, url=part.url, mime_type=part.mime_type, default_mime=default_mime)
    if media is None:
        return None
    if media.inline:
        return {"inline_data": {"mime_type": media.mime_type, "data": media.data}}
    return {"file_data": {"file_uri": media.url, "mime_type": media.mime_type}}


def build_config(options: GenerateTextOptions, target: ConfigTarget, provider: str) -> Dict[str, Any]:
    """Build the ``GenerateContentConfig`` mapping."""
    config: Dict[str, Any] = {}
    if options.system:
        config["system_instruction"] = options.system
    max_tokens = options.max_tokens or target.max_tokens
    if max_tokens > 0:
        config["max_output_tokens"] = max_tokens
    if options.temperature is not None:
        config["temperature"] = options.temperature
    elif target.temperature and target.temperature > 0:
        config["temperature"] = target.temperature
    if options.top_p is not None:
        config["top_p"] = options.top_p
    if options.stop_words:
        config["stop_sequences"] = list(options.stop_words)
    if options.tools:
        config["tools"] = [{"function_declarations": map_tools(options.tools)}]
    if options.tool_choice is not None:
        config["tool_config"] = {"function_calling_config": {"mode": _TOOL_MODES[options.tool_choice]}}
    if options.safety_settings:
        config["safety_settings"] = [
            {"category": s.category, "threshold": s.threshold} for s in options.safety_settings
        ]
    if options.response_format is not None:
        config.update(map_response_format(options.response_format))
    if options.thinking_budget is not None:
        config["thinking_config"] = {"thinking_budget": int(options.thinking_budget)}
    config.update(options.extensions_for(provider))
    return config


def map_tools(tools: List[ToolDefinition]) -> List[Dict[str, Any]]:
    out: List[Dict[str, Any]] = []
    for tool in tools:
        declaration: Dict[str, Any] = {"name": tool.name, "description": tool.description}
        schema = tool.parameters_schema()
        if schema is not None:
            declaration["parameters_json_schema"] = schema
        out.append(declaration)
    return out


def map_response_format(fmt: ResponseFormat) -> Dict[str, Any]:
    if fmt.type in ("json_schema", "json_object"):
        out: Dict[str, Any] = {"response_mime_type": "application/json"}
        schema = fmt.schema_dict()
        if schema is not None:
            out["response_json_schema"] = schema
        return out
    if fmt.type == "text":
        return {"response_mime_type": "text/plain"}
    return {}


def map_finish_reason(reason: Any) -> StopReason:
    name = str(getattr(reason, "value", reason) or "")
    return _FINISH_REASONS.get(name, StopReason.STOP)


def map_parts(parts: Iterable[Any]) -> List[ContentBlock]:
    """Map response parts: text, function calls, and inline data (as images)."""
    blocks: List[ContentBlock] = []
    for part in parts or []:
        if part is None:
            continue
        text = field_of(part, "text")
        if text:
            blocks.append(text_block(text))
        call = field_of(part, "function_call")
        if call is not None:
            blocks.append(ContentBlock(type=ContentBlockType.TOOL_CALL, tool_call=_tool_call(call)))
        inline = field_of(part, "inline_data")
        if inline is not None:
            blocks.append(
                ContentBlock(
                    type=ContentBlockType.IMAGE,
                    image=ImagePart(
                        mime_type=field_of(inline, "mime_type", "") or "",
                        data=field_of(inline, "data", b"") or b"",
                    ),
                )
            )
    return blocks


def _tool_call(call: Any) -> ToolCall:
    name = field_of(call, "name", "") or ""
    return ToolCall(
        id=field_of(call, "id") or TOOL_CALL_ID_PREFIX + name,
        name=name,
        arguments=dict(field_of(call, "args") or {}),
    )


def _first_candidate(response: Any) -> Any:
    candidates = field_of(response, "candidates") or []
    return candidates[0] if candidates else None


def map_response(response: Any) -> GenerateTextResult:
    """Map a ``GenerateContentResponse`` to a unified result."""
    if response is None:
        raise ValueError("genai returned no response")
    result = GenerateTextResult(
        usage=extract_google_usage(field_of(response, "usage_metadata")),
        model_id=field_of(response, "model_version", "") or "",
    )
    candidate = _first_candidate(response)
    if candidate is None:
        return result
    result.stop_reason = map_finish_reason(field_of(candidate, "finish_reason"))
    result.content = map_parts(field_of(field_of(candidate, "content"), "parts"))
    return result


def translate_chunks(chunks: Iterable[Any], sink: EventSink) -> None:
    """Drain streamed responses into ``sink``.

    Each chunk may carry text deltas and complete function calls. The chunk
    that carries both a finish reason and usage metadata yields
    ``message_done``.
    """
    finish: Any = None
    for chunk in chunks:
        sink.raise_if_cancelled()
        candidate = _first_candidate(chunk)
        if candidate is None:
            continue
        for block in map_parts(field_of(field_of(candidate, "content"), "parts")):
            if block.type is ContentBlockType.TEXT:
                sink.text(block.text or "")
            elif block.type is ContentBlockType.TOOL_CALL:
                sink.tool_call(block.tool_call)
        finish = field_of(candidate, "finish_reason") or finish
        metadata = field_of(chunk, "usage_metadata")
        if finish and metadata is not None:
            sink.done(map_finish_reason(finish), extract_google_usage(metadata))
    if not sink.terminal_sent:
        sink.done(map_finish_reason(finish) if finish else StopReason.END_TURN)


__all__ = [
    "ROLE_USER",
    "ROLE_MODEL",
    "TOOL_CALL_ID_PREFIX",
    "build_request",
    "build_config",
    "map_messages",
    "map_block",
    "map_tools",
    "map_response_format",
    "map_finish_reason",
    "map_parts",
    "map_response",
    "translate_chunks",
]
