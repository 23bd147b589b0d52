"""Unified error taxonomy public surface.

Re-exports the implementations under ``llm_gateway.base.errors_parts`` so
callers can test ``error_is(err, ErrorCategory.RATE_LIMITED)`` without
importing any vendor SDK.
"""

from .errors_parts.error_category import ErrorCategory
from .errors_parts.provider_sentinel import ProviderSentinel
from .errors_parts.provider_error import ProviderError, error_is
from .errors_parts.classification import (
    classify_and_wrap,
    classify_exception,
    classify_status_code,
    is_cancellation,
)
from .errors_parts.configuration_error import ConfigurationError
from .errors_parts.validation_errors import (
    IncompleteToolCallError,
    InvalidContentBlockError,
    InvalidDataURLError,
)
from .errors_parts.registry_errors import (
    InvalidClientTypeError,
    ModelAlreadyExistsError,
    ModelCreationError,
    ModelNotFoundError,
    ModelsCloseError,
    RawClientIsNoneError,
    RegistryError,
    RegistryIsNoneError,
    UnsupportedProviderError,
)
from .errors_parts.batch_errors import (
    BatchError,
    BatchMissingOutputError,
    BatchNotCompletedError,
    BatchUnsupportedError,
)

__all__ = [
    "ErrorCategory",
    "ProviderSentinel",
    "ProviderError",
    "error_is",
    "classify_and_wrap",
    "classify_exception",
    "classify_status_code",
    "is_cancellation",
    "ConfigurationError",
    "InvalidContentBlockError",
    "IncompleteToolCallError",
    "InvalidDataURLError",
    "RegistryError",
    "InvalidClientTypeError",
    "ModelAlreadyExistsError",
    "ModelCreationError",
    "ModelNotFoundError",
    "ModelsCloseError",
    "RawClientIsNoneError",
    "RegistryIsNoneError",
    "UnsupportedProviderError",
    "BatchError",
    "BatchMissingOutputError",
    "BatchNotCompletedError",
    "BatchUnsupportedError",
]
