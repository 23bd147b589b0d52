"""
Tool calling DTOs: definitions offered to the model, calls it makes, and the
results the caller sends back.

Arguments and parameter schemas are opaque JSON. They may be supplied as a
JSON string/bytes or as a mapping; the helpers below normalise to whichever
form an adapter needs without validating the schema itself.
"""
from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Union

JSONLike = Union[str, bytes, Mapping[str, Any], None]


def json_to_text(value: JSONLike) -> str:
    if value is None:
        return ""
    if isinstance(value, bytes):
        return value.decode("utf-8")
    if isinstance(value, str):
        return value
    return json.dumps(dict(value), ensure_ascii=False)


def json_to_mapping(value: JSONLike) -> Optional[Dict[str, Any]]:
    if value is None:
        return None
    if isinstance(value, Mapping):
        return dict(value)
    text = value.decode("utf-8") if isinstance(value, bytes) else value
    if not text.strip():
        return None
    try:
        parsed = json.loads(text)
    except ValueError:
        return None
    return parsed if isinstance(parsed, dict) else None


@dataclass
class ToolCall:
    """A function/tool invocation requested by the model.

    Attributes:
        id: Provider-assigned call identifier, echoed back in ``ToolResult``.
        name: Tool name as declared in ``ToolDefinition``.
        arguments: JSON text of the call arguments (a mapping is accepted at
            construction and serialised).
    """

    id: str
    name: str
    arguments: JSONLike = ""

    def __post_init__(self) -> None:
        self.arguments = json_to_text(self.arguments)

    def arguments_dict(self) -> Dict[str, Any]:
        """Return parsed arguments, or an empty dict when absent or not an object."""
        return json_to_mapping(self.arguments) or {}


@dataclass
class ToolResult:
    """Result of executing a tool call, sent back to the model."""

    tool_call_id: str
    content: str
    is_error: bool = False


@dataclass
class ToolDefinition:
    """Declares a callable capability offered to the model.

    ``parameters`` is a JSON Schema passed through to the vendor untouched.
    """

    name: str
    description: str = ""
    parameters: JSONLike = None

    def parameters_schema(self) -> Optional[Dict[str, Any]]:
        """Return the schema as a mapping (``None`` when absent or unparsable)."""
        return json_to_mapping(self.parameters)


__all__ = ["ToolCall", "ToolResult", "ToolDefinition", "JSONLike", "json_to_text", "json_to_mapping"]
