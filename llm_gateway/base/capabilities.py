"""Provider capability names and introspection helpers.

Callers feature-detect before invoking an optional operation instead of
relying on a runtime failure::

    if supports_batch(model):
        job = model.submit_batch(request)
"""
from __future__ import annotations

from enum import Enum
from typing import Any


class ProviderCapability(str, Enum):
    """Named optional features a provider/model may support."""

    TEXT_GENERATION = "text_generation"
    STREAMING = "streaming"
    TOOL_CALLING = "tool_calling"
    VISION = "vision"
    AUDIO = "audio"
    BATCH_PROCESSING = "batch_processing"
    STRUCTURED_OUTPUT = "structured_output"
    REASONING = "reasoning"


def has_capability(model: Any, capability: ProviderCapability | str) -> bool:
    """Return True when ``model`` declares ``capability``."""
    try:
        wanted = ProviderCapability(capability)
    except ValueError:
        return False
    return wanted in set(model.get_capabilities())


def supports_batch(model: Any) -> bool:
    """True when ``model`` both declares batch processing and implements it."""
    from .interfaces import BatchCapableModel  # local import to avoid a cycle

    return has_capability(model, ProviderCapability.BATCH_PROCESSING) and isinstance(model, BatchCapableModel)


__all__ = ["ProviderCapability", "has_capability", "supports_batch"]
