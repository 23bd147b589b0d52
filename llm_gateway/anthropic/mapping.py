"""Anthropic Messages API mapping helpers.

Purpose:
- Translate unified :class:`GenerateTextOptions` into keyword arguments for
  ``client.messages.create`` and map Anthropic ``Message`` objects back into
  :class:`GenerateTextResult`.

External dependencies:
- None at import time. Responses are read structurally through
  :func:`field_of`, so SDK models, batch result payloads and test doubles are
  all accepted.

Failure modes:
- ``InvalidContentBlockError`` for blocks whose payload does not match their
  tag, system messages included. Empty text blocks are dropped, as are audio
  and file blocks which the Messages API cannot carry. A message left
  without blocks is dropped entirely.
"""

from __future__ import annotations

import base64
from typing import Any, Dict, List, Optional

from ..base.constants import DEFAULT_IMAGE_MIME
from ..base.dto import ConfigTarget
from ..base.media import resolve_media
from ..base.models import (
    ContentBlock,
    ContentBlockType,
    GenerateTextOptions,
    GenerateTextResult,
    ImagePart,
    Message,
    Role,
    StopReason,
    ToolChoice,
    ToolDefinition,
    new_tool_call_block,
    text_block,
)
from ..base.tokens import extract_anthropic_usage, field_of
from ..config.defaults import ANTHROPIC_DEFAULT_MAX_TOKENS

_EMPTY_INPUT_SCHEMA: Dict[str, Any] = {"type": "object", "properties": {}}

_STOP_REASONS = {
    "end_turn": StopReason.END_TURN,
    "max_tokens": StopReason.MAX_TOKENS,
    "tool_use": StopReason.TOOL_USE,
    "stop_sequence": StopReason.STOP,
}


def build_params(options: GenerateTextOptions, target: ConfigTarget) -> Dict[str, Any]:
    """Build ``messages.create`` keyword arguments from unified options."""
    max_tokens = options.max_tokens or target.max_tokens or ANTHROPIC_DEFAULT_MAX_TOKENS
    params: Dict[str, Any] = {
        "model": target.model,
        "messages": map_messages(options.messages),
        "max_tokens": max_tokens,
    }
    # System prompt is a dedicated parameter, never a message.
    if options.system:
        params["system"] = options.system

    if options.temperature is not None:
        params["temperature"] = options.temperature
    elif target.temperature and target.temperature > 0:
        params["temperature"] = target.temperature
    if options.top_p is not None:
        params["top_p"] = options.top_p
    if options.stop_words:
        params["stop_sequences"] = list(options.stop_words)
    if options.tools:
        params["tools"] = map_tools(options.tools)
    if options.tool_choice is not None:
        params["tool_choice"] = map_tool_choice(options.tool_choice)
    if options.thinking_budget is not None:
        # Extended thinking requires temperature 1.
        params["temperature"] = 1.0
        params["thinking"] = {"type": "enabled", "budget_tokens": int(options.thinking_budget)}

    params.update(options.extensions_for("anthropic"))
    return params


def map_messages(messages: List[Message]) -> List[Dict[str, Any]]:
    """Convert unified messages to Anthropic message params (system skipped)."""
    out: List[Dict[str, Any]] = []
    for msg in messages:
        role = Role(msg.role)
        if role is Role.SYSTEM:
            for block in msg.content:
                block.validate()
            continue
        blocks = [b for b in (map_block(block) for block in msg.content) if b is not None]
        if not blocks:
            continue
        out.append(
            {
                "role": "assistant" if role is Role.ASSISTANT else "user",
                "content": blocks,
            }
        )
    return out


def map_block(block: ContentBlock) -> Optional[Dict[str, Any]]:
    """Map one content block; ``None`` for kinds the Messages API cannot carry."""
    block.validate()
    kind = ContentBlockType(block.type)
    if kind is ContentBlockType.TEXT:
        if not block.text:
            return None
        return {"type": "text", "text": block.text}
    if kind is ContentBlockType.IMAGE:
        return map_image(block.image)
    if kind is ContentBlockType.TOOL_CALL:
        call = block.tool_call
        return {
            "type": "tool_use",
            "id": call.id,
            "name": call.name,
            "input": call.arguments_dict(),
        }
    if kind is ContentBlockType.TOOL_RESULT:
        result = block.tool_result
        return {
            "type": "tool_result",
            "tool_use_id": result.tool_call_id,
            "content": result.content,
            "is_error": bool(result.is_error),
        }
    return None


def map_image(part: Optional[ImagePart]) -> Optional[Dict[str, Any]]:
    """Map an image to a base64 or URL source."""
    if part is None:
        return None
    media = resolve_media(
        data=part.data, url=part.url, mime_type=part.mime_type, default_mime=DEFAULT_IMAGE_MIME
    )
    if media is None:
        return None
    if media.inline:
        source = {
            "type": "base64",
            "media_type": media.mime_type,
            "data": base64.b64encode(media.data).decode("ascii"),
        }
    else:
        source = {"type": "url", "url": media.url}
    return {"type": "image", "source": source}


def map_tools(tools: List[ToolDefinition]) -> List[Dict[str, Any]]:
    out: List[Dict[str, Any]] = []
    for tool in tools:
        entry: Dict[str, Any] = {
            "name": tool.name,
            "input_schema": tool.parameters_schema() or dict(_EMPTY_INPUT_SCHEMA),
        }
        if tool.description:
            entry["description"] = tool.description
        out.append(entry)
    return out


def map_tool_choice(choice: ToolChoice) -> Dict[str, Any]:
    if ToolChoice(choice) is ToolChoice.REQUIRED:
        return {"type": "any"}
    return {"type": ToolChoice(choice).value}


def map_stop_reason(reason: Optional[str]) -> StopReason:
    return _STOP_REASONS.get(reason or "", StopReason.END_TURN)


def map_response(message: Any) -> GenerateTextResult:
    """Map an Anthropic ``Message`` (object or mapping) to a unified result."""
    content: List[ContentBlock] = []
    for block in field_of(message, "content") or []:
        kind = field_of(block, "type")
        if kind == "text":
            content.append(text_block(field_of(block, "text", "") or ""))
        elif kind == "thinking":
            content.append(text_block(field_of(block, "thinking", "") or ""))
        elif kind == "tool_use":
            content.append(
                new_tool_call_block(
                    field_of(block, "id", "") or "",
                    field_of(block, "name", "") or "",
                    field_of(block, "input") or {},
                )
            )
    return GenerateTextResult(
        content=content,
        stop_reason=map_stop_reason(field_of(message, "stop_reason")),
        usage=extract_anthropic_usage(field_of(message, "usage")),
        model_id=field_of(message, "model", "") or "",
    )


__all__ = [
    "build_params",
    "map_messages",
    "map_block",
    "map_image",
    "map_tools",
    "map_tool_choice",
    "map_stop_reason",
    "map_response",
]
