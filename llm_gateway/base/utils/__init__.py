"""Small shared helpers used by provider adapters."""

from .timestamps import as_datetime

__all__ = ["as_datetime"]
