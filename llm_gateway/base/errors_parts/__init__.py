"""Errors parts package public surface.

Re-exports individual error taxonomy components for optional direct imports.
Prefer importing from ``llm_gateway.base.errors`` for the stable surface.
"""

from .error_category import ErrorCategory
from .provider_sentinel import ProviderSentinel
from .provider_error import ProviderError, error_is
from .classification import classify_and_wrap, classify_exception, classify_status_code

__all__ = [
    "ErrorCategory",
    "ProviderSentinel",
    "ProviderError",
    "error_is",
    "classify_and_wrap",
    "classify_exception",
    "classify_status_code",
]
