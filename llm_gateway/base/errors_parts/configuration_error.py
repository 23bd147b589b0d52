"""Configuration error raised at model construction time.

Missing credentials, model identifiers, or region settings are fatal and
surface immediately from ``ProviderFactory.create_model``. They are never
classified into provider categories and never retried.
"""
from __future__ import annotations

from typing import Optional


class ConfigurationError(ValueError):
    """Raised when a config target lacks a field required by its provider."""

    def __init__(self, provider: str, field: str, message: Optional[str] = None) -> None:
        self.provider = provider
        self.field = field
        super().__init__(message or f"{provider}: {field} is required")


__all__ = ["ConfigurationError"]
