"""
Request configuration shared by ``generate_text`` and ``stream_text``.

``temperature`` and ``top_p`` are ``Optional`` so that an explicit ``0.0`` is
distinguishable from "unset" (adapters only forward values that were set).
``extensions`` carries provider-only knobs; adapters read the keys they know
and ignore the rest.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from .message import Message
from .tool_parts import JSONLike, ToolDefinition, json_to_mapping


class ToolChoice(str, Enum):
    """How the model may select tools."""

    AUTO = "auto"
    NONE = "none"
    REQUIRED = "required"


@dataclass
class ResponseFormat:
    """Structured output request.

    Attributes:
        type: ``"json_schema"``, ``"json_object"`` or ``"text"``.
        name: Schema name (OpenAI structured output requires one).
        json_schema: JSON Schema definition, as text or mapping.
    """

    type: str
    name: str = ""
    json_schema: JSONLike = None

    def schema_dict(self) -> Optional[Dict[str, Any]]:
        """Return the JSON Schema as a mapping, or ``None`` when absent/unparsable."""
        return json_to_mapping(self.json_schema)


@dataclass
class SafetySetting:
    """Harm-category threshold for Google providers (e.g. ``BLOCK_NONE``)."""

    category: str
    threshold: str


@dataclass
class GenerateTextOptions:
    """Configures a single text generation (or streaming) request."""

    messages: List[Message] = field(default_factory=list)
    tools: List[ToolDefinition] = field(default_factory=list)
    system: str = ""
    max_tokens: int = 0
    temperature: Optional[float] = None
    top_p: Optional[float] = None
    stop_words: List[str] = field(default_factory=list)
    tool_choice: Optional[ToolChoice] = None
    response_format: Optional[ResponseFormat] = None
    thinking_budget: Optional[int] = None
    safety_settings: List[SafetySetting] = field(default_factory=list)
    extensions: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.tool_choice is not None:
            self.tool_choice = ToolChoice(self.tool_choice)

    def extensions_for(self, provider: str) -> Dict[str, Any]:
        """Return extra request fields scoped to ``provider``.

        ``extensions`` is keyed by provider name; each value is a mapping of
        vendor request fields merged into the outbound request. Non-mapping
        values are ignored.
        """
        scoped = self.extensions.get(provider)
        if isinstance(scoped, dict):
            return dict(scoped)
        return {}


# Streaming uses the same option set; the alias documents intent at call sites.
StreamTextOptions = GenerateTextOptions


__all__ = [
    "ToolChoice",
    "ResponseFormat",
    "SafetySetting",
    "GenerateTextOptions",
    "StreamTextOptions",
]
