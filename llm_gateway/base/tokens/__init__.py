"""Token usage helpers package."""

from .extraction import (
    coerce_count,
    extract_anthropic_usage,
    extract_google_usage,
    extract_openai_usage,
    field_of,
)

__all__ = [
    "coerce_count",
    "field_of",
    "extract_anthropic_usage",
    "extract_google_usage",
    "extract_openai_usage",
]
