"""llm_gateway package

Provider-agnostic gateway over large-language-model vendors.

Purpose:
    One request/response vocabulary (messages, content blocks, tool calls,
    streaming events, batch jobs) for Anthropic, OpenAI, Gemini, Vertex AI
    and an offline mock provider. Vendor SDKs are imported lazily by each
    adapter, so importing this package never requires every SDK.

Public API (re-exported):
    - Version: ``__version__``
    - Data model: messages, content blocks, generation options/results, batch types
    - Errors: :class:`ProviderError`, :class:`ErrorCategory`,
      :class:`ProviderSentinel`, :func:`error_is`, configuration/registry errors
    - Registry: :class:`Registry`, :func:`get_typed_client`, :func:`create_model`
    - Configuration: :func:`load_gateway_config`, :class:`ConfigTarget`,
      :class:`GatewayConfig`
    - Streaming: :class:`StreamIterator`
"""

from .base.cancellation import CancellationToken, CancelledError, DeadlineExceededError
from .base.capabilities import ProviderCapability, has_capability, supports_batch
from .base.dto import ConfigTarget, GatewayConfig
from .base.errors import (
    BatchMissingOutputError,
    BatchNotCompletedError,
    ConfigurationError,
    ErrorCategory,
    InvalidClientTypeError,
    InvalidContentBlockError,
    InvalidDataURLError,
    ModelAlreadyExistsError,
    ModelCreationError,
    ModelNotFoundError,
    ModelsCloseError,
    ProviderError,
    ProviderSentinel,
    RawClientIsNoneError,
    RegistryIsNoneError,
    UnsupportedProviderError,
    error_is,
)
from .base.factory import ProviderFactories, create_model
from .base.interfaces import BatchCapableModel, LanguageModel, ProviderFactory
from .base.logging import configure_logger, get_logger
from .base.models import (
    AudioPart,
    BatchJob,
    BatchRequest,
    BatchRequestItem,
    BatchResult,
    BatchStatus,
    BatchStorage,
    ContentBlock,
    ContentBlockType,
    FilePart,
    GenerateTextOptions,
    GenerateTextResult,
    ImageDetail,
    ImagePart,
    ListBatchOptions,
    Message,
    ResponseFormat,
    Role,
    SafetySetting,
    StopReason,
    StreamEvent,
    StreamEventType,
    StreamTextOptions,
    ToolCall,
    ToolChoice,
    ToolDefinition,
    ToolResult,
    Usage,
    decode_data_url,
    detect_mime_from_url,
    encode_data_url,
    is_data_url,
    new_audio_message,
    new_image_message,
    new_text_message,
    new_tool_call_block,
    new_tool_result_block,
    text_block,
)
from .base.registry import Registry, get_typed_client
from .base.streaming import StreamIterator
from .config import load_gateway_config

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # cancellation
    "CancellationToken",
    "CancelledError",
    "DeadlineExceededError",
    # capabilities
    "ProviderCapability",
    "has_capability",
    "supports_batch",
    # config
    "ConfigTarget",
    "GatewayConfig",
    "load_gateway_config",
    # errors
    "BatchMissingOutputError",
    "BatchNotCompletedError",
    "ConfigurationError",
    "ErrorCategory",
    "InvalidClientTypeError",
    "InvalidContentBlockError",
    "InvalidDataURLError",
    "ModelAlreadyExistsError",
    "ModelCreationError",
    "ModelNotFoundError",
    "ModelsCloseError",
    "ProviderError",
    "ProviderSentinel",
    "RawClientIsNoneError",
    "RegistryIsNoneError",
    "UnsupportedProviderError",
    "error_is",
    # factory / registry
    "ProviderFactories",
    "create_model",
    "Registry",
    "get_typed_client",
    "BatchCapableModel",
    "LanguageModel",
    "ProviderFactory",
    # logging
    "configure_logger",
    "get_logger",
    # data model
    "AudioPart",
    "BatchJob",
    "BatchRequest",
    "BatchRequestItem",
    "BatchResult",
    "BatchStatus",
    "BatchStorage",
    "ContentBlock",
    "ContentBlockType",
    "FilePart",
    "GenerateTextOptions",
    "GenerateTextResult",
    "ImageDetail",
    "ImagePart",
    "ListBatchOptions",
    "Message",
    "ResponseFormat",
    "Role",
    "SafetySetting",
    "StopReason",
    "StreamEvent",
    "StreamEventType",
    "StreamTextOptions",
    "ToolCall",
    "ToolChoice",
    "ToolDefinition",
    "ToolResult",
    "Usage",
    "decode_data_url",
    "detect_mime_from_url",
    "encode_data_url",
    "is_data_url",
    "new_audio_message",
    "new_image_message",
    "new_text_message",
    "new_tool_call_block",
    "new_tool_result_block",
    "text_block",
    # streaming
    "StreamIterator",
]
