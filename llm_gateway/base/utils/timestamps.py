"""Timestamp normalization for vendor batch objects.

Vendors report times as ``datetime`` (Anthropic SDK models), Unix seconds
(OpenAI) or RFC 3339 strings (raw JSON payloads). Everything is normalized to
timezone-aware ``datetime`` in UTC; absent or unparsable values become ``None``.
"""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Optional


def as_datetime(value: Any) -> Optional[datetime]:
    if value is None or value == "" or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    if isinstance(value, (int, float)):
        if value <= 0:
            return None
        return datetime.fromtimestamp(value, tz=timezone.utc)
    if isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
        return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)
    return None


__all__ = ["as_datetime"]
