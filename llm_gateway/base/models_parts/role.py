"""Message sender roles shared by every provider adapter."""
from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Role of a message author in the unified conversation model."""

    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"
    TOOL = "tool"


__all__ = ["Role"]
