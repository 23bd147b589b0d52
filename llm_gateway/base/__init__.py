"""
Gateway Base Package

Exports the provider-agnostic contracts, data model, error taxonomy,
streaming pipeline and registry used by every adapter.

Layout:
- Interfaces: ``LanguageModel``, ``BatchCapableModel``, ``ProviderFactory``
- Models (DTOs): messages, content blocks, generation options/results, batch types
- Errors: sentinels, categories, ``ProviderError`` and classification
- Registry/Factory: lazy creation of adapters by canonical provider name
"""

from .cancellation import CancellationToken, CancelledError, DeadlineExceededError
from .capabilities import ProviderCapability, has_capability, supports_batch
from .dto import ConfigTarget, GatewayConfig
from .errors import (
    ConfigurationError,
    ErrorCategory,
    ProviderError,
    ProviderSentinel,
    classify_and_wrap,
    classify_status_code,
    error_is,
)
from .factory import ProviderFactories, create_model
from .interfaces import BatchCapableModel, LanguageModel, ProviderFactory
from .registry import Registry, get_typed_client
from .streaming import StreamIterator

__all__ = [
    "CancellationToken",
    "CancelledError",
    "DeadlineExceededError",
    "ProviderCapability",
    "has_capability",
    "supports_batch",
    "ConfigTarget",
    "GatewayConfig",
    "ConfigurationError",
    "ErrorCategory",
    "ProviderError",
    "ProviderSentinel",
    "classify_and_wrap",
    "classify_status_code",
    "error_is",
    "ProviderFactories",
    "create_model",
    "BatchCapableModel",
    "LanguageModel",
    "ProviderFactory",
    "Registry",
    "get_typed_client",
    "StreamIterator",
]
