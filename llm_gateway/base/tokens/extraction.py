"""Token usage extraction helpers.

This module centralizes extraction of token accounting from raw vendor SDK
objects into the unified :class:`~llm_gateway.base.models.Usage` record:

    Usage(input_tokens, output_tokens, total_tokens, thinking_tokens)

Design Principles
-----------------
1. Structural access: SDK response models and plain mappings (batch output
   lines, test doubles) are read through the same :func:`field_of` accessor.
2. Coercion: counts are coerced via ``int``; absent, negative or
   non-numeric values become ``0``.
3. Derived total: when the vendor omits ``total`` it is derived as
   ``input + output (+ thinking)``.
4. Disjoint thinking: ``thinking_tokens`` never overlaps ``output_tokens``.
   Vendors that fold reasoning into completion counts (OpenAI) have it
   subtracted here.

Supported Vendors
-----------------
Anthropic:
    ``usage.input_tokens``, ``usage.output_tokens``
OpenAI:
    ``usage.prompt_tokens``, ``usage.completion_tokens``, ``usage.total_tokens``,
    ``usage.completion_tokens_details.reasoning_tokens``
Google (Gemini / Vertex AI):
    ``usage_metadata.prompt_token_count``, ``candidates_token_count``,
    ``total_token_count``, ``thoughts_token_count``

All helpers accept ``None`` and return an all-zero ``Usage``; they never raise.
"""

from __future__ import annotations

from typing import Any, Mapping

from ..models import Usage


def field_of(obj: Any, name: str, default: Any = None) -> Any:
    """Read ``name`` from a mapping key or an attribute, whichever exists."""
    if obj is None:
        return default
    if isinstance(obj, Mapping):
        return obj.get(name, default)
    return getattr(obj, name, default)


def coerce_count(value: Any) -> int:
    """Coerce an arbitrary token count to a non-negative ``int`` (``0`` on failure)."""
    if value is None or isinstance(value, bool):
        return 0
    try:
        iv = int(value)
    except (TypeError, ValueError):
        return 0
    return iv if iv >= 0 else 0


def _finalize(prompt: int, completion: int, total: int, thinking: int = 0) -> Usage:
    if total <= 0:
        total = prompt + completion + thinking
    return Usage(
        input_tokens=prompt,
        output_tokens=completion,
        total_tokens=total,
        thinking_tokens=thinking,
    )


def extract_anthropic_usage(usage_obj: Any) -> Usage:
    """Map an Anthropic ``usage`` object (``input_tokens``/``output_tokens``)."""
    if usage_obj is None:
        return Usage()
    prompt = coerce_count(field_of(usage_obj, "input_tokens"))
    completion = coerce_count(field_of(usage_obj, "output_tokens"))
    return _finalize(prompt, completion, 0)


def extract_openai_usage(usage_obj: Any) -> Usage:
    """Map an OpenAI ``CompletionUsage`` including reasoning tokens.

    ``completion_tokens`` includes reasoning tokens; they are moved to
    ``thinking_tokens`` so the two counters stay disjoint.
    """
    if usage_obj is None:
        return Usage()
    prompt = coerce_count(field_of(usage_obj, "prompt_tokens"))
    completion = coerce_count(field_of(usage_obj, "completion_tokens"))
    total = coerce_count(field_of(usage_obj, "total_tokens"))
    details = field_of(usage_obj, "completion_tokens_details")
    reasoning = coerce_count(field_of(details, "reasoning_tokens"))
    reasoning = min(reasoning, completion)
    return _finalize(prompt, completion - reasoning, total, reasoning)


def extract_google_usage(metadata: Any) -> Usage:
    """Map a Google ``usage_metadata`` block (Gemini and Vertex AI)."""
    if metadata is None:
        return Usage()
    prompt = coerce_count(field_of(metadata, "prompt_token_count"))
    completion = coerce_count(field_of(metadata, "candidates_token_count"))
    total = coerce_count(field_of(metadata, "total_token_count"))
    thinking = coerce_count(field_of(metadata, "thoughts_token_count"))
    return _finalize(prompt, completion, total, thinking)


__all__ = [
    "field_of",
    "coerce_count",
    "extract_anthropic_usage",
    "extract_openai_usage",
    "extract_google_usage",
]
