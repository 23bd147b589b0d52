"""
Provider sentinels identifying which adapter subsystem failed.

A sentinel is the outermost tag of every adapter error. Its value is the
human-readable prefix used when the error is rendered.
"""
from __future__ import annotations

from enum import Enum


class ProviderSentinel(str, Enum):
    """Failing subsystem, one member per provider and operation family."""

    ANTHROPIC_GENERATION_FAILED = "anthropic generation failed"
    ANTHROPIC_STREAM_FAILED = "anthropic stream failed"
    ANTHROPIC_BATCH_FAILED = "anthropic batch failed"
    ANTHROPIC_CLIENT_CREATION_FAILED = "anthropic client creation failed"

    OPENAI_GENERATION_FAILED = "openai generation failed"
    OPENAI_STREAM_FAILED = "openai stream failed"
    OPENAI_BATCH_FAILED = "openai batch failed"
    OPENAI_CLIENT_CREATION_FAILED = "openai client creation failed"

    GEMINI_GENERATION_FAILED = "gemini generation failed"
    GEMINI_STREAM_FAILED = "gemini stream failed"
    GEMINI_CLIENT_CREATION_FAILED = "gemini client creation failed"

    VERTEXAI_GENERATION_FAILED = "vertexai generation failed"
    VERTEXAI_STREAM_FAILED = "vertexai stream failed"
    VERTEXAI_CLIENT_CREATION_FAILED = "vertexai client creation failed"

    MOCK_GENERATION_FAILED = "mock generation failed"
    MOCK_STREAM_FAILED = "mock stream failed"
    MOCK_BATCH_FAILED = "mock batch failed"


__all__ = ["ProviderSentinel"]
