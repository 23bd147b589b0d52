"""Gemini adapter (Google GenAI SDK, Gemini Developer API).

Key behaviors / architecture notes:
* Uses ``google-genai`` (``from google import genai``): blocking calls go
  through ``client.models.generate_content`` and streaming through
  ``client.models.generate_content_stream``.
* Request/response mapping is shared with the Vertex AI adapter via
  :mod:`llm_gateway.gemini.mapping`; :class:`GenAIModel` carries the common
  call plumbing and both adapters only differ in naming and client setup.
* Per-call deadlines are forwarded as ``config.http_options.timeout``
  (milliseconds).
"""

from __future__ import annotations

from typing import Any, Dict, Optional

try:
    from google import genai  # type: ignore
except Exception:  # pragma: no cover - optional dependency
    genai = None  # type: ignore

from ..base.capabilities import ProviderCapability
from ..base.dto import ConfigTarget
from ..base.errors import ProviderError, ProviderSentinel
from ..base.model_base import BaseLanguageModel, build_vendor_client, require_target_fields
from ..base.models import GenerateTextOptions, GenerateTextResult
from ..base.streaming import EventSink
from .mapping import build_request, map_response, translate_chunks

PROVIDER_NAME = "gemini"

GENAI_CAPABILITIES = (
    ProviderCapability.TEXT_GENERATION,
    ProviderCapability.STREAMING,
    ProviderCapability.TOOL_CALLING,
    ProviderCapability.VISION,
    ProviderCapability.AUDIO,
    ProviderCapability.STRUCTURED_OUTPUT,
    ProviderCapability.REASONING,
)


class GenAIModel(BaseLanguageModel):
    """Common ``LanguageModel`` plumbing for google-genai backed providers."""

    capabilities = GENAI_CAPABILITIES

    def _build_request(self, options: GenerateTextOptions) -> Dict[str, Any]:
        return build_request(options, self._target, self.provider_name)

    def _invoke_generate(self, request: Dict[str, Any], timeout: Optional[float]) -> Any:
        return self._client.models.generate_content(**_with_http_timeout(request, timeout))

    def _map_response(self, response: Any) -> GenerateTextResult:
        return map_response(response)

    def _produce_stream(self, request: Dict[str, Any], sink: EventSink, timeout: Optional[float]) -> None:
        chunks = self._client.models.generate_content_stream(**_with_http_timeout(request, timeout))
        try:
            translate_chunks(chunks, sink)
        finally:
            closer = getattr(chunks, "close", None)
            if callable(closer):
                closer()


class GeminiModel(GenAIModel):
    """Gemini Developer API model."""

    provider_name = PROVIDER_NAME
    generation_sentinel = ProviderSentinel.GEMINI_GENERATION_FAILED
    stream_sentinel = ProviderSentinel.GEMINI_STREAM_FAILED


class GeminiFactory:
    """Creates :class:`GeminiModel` instances from config targets."""

    def get_provider(self) -> str:
        return PROVIDER_NAME

    def create_model(self, target: ConfigTarget) -> GeminiModel:
        """Validate ``target`` and construct the GenAI client.

        Raises:
            ConfigurationError: ``api_key`` or ``model`` is missing.
            ProviderError: client construction failed (``gemini client creation failed``).
        """
        require_target_fields(PROVIDER_NAME, target, "api_key", "model")
        client = build_vendor_client(
            ProviderSentinel.GEMINI_CLIENT_CREATION_FAILED, target, lambda: _build_client(target)
        )
        return GeminiModel(client=client, target=target)


def http_options_for(target: ConfigTarget) -> Dict[str, Any]:
    """Client-level ``http_options`` from the target (base URL, timeout in ms)."""
    options: Dict[str, Any] = {}
    if target.base_url:
        options["base_url"] = target.base_url
    if target.request_timeout:
        options["timeout"] = int(target.request_timeout * 1000)
    return options


def require_genai(sentinel: ProviderSentinel, target: ConfigTarget) -> Any:
    """Return the ``google.genai`` module or raise a client-creation error."""
    if genai is None:
        raise ProviderError(
            sentinel=sentinel,
            message="google-genai SDK not installed",
            provider=target.provider,
            model=target.model,
        )
    return genai


def _build_client(target: ConfigTarget) -> Any:
    sdk = require_genai(ProviderSentinel.GEMINI_CLIENT_CREATION_FAILED, target)
    kwargs: Dict[str, Any] = {"api_key": target.api_key}
    http_options = http_options_for(target)
    if http_options:
        kwargs["http_options"] = http_options
    return sdk.Client(**kwargs)


def _with_http_timeout(request: Dict[str, Any], timeout: Optional[float]) -> Dict[str, Any]:
    if timeout is None:
        return request
    config = dict(request.get("config") or {})
    http_options = dict(config.get("http_options") or {})
    http_options["timeout"] = max(1, int(timeout * 1000))
    config["http_options"] = http_options
    return {**request, "config": config}


__all__ = [
    "GenAIModel",
    "GeminiModel",
    "GeminiFactory",
    "GENAI_CAPABILITIES",
    "PROVIDER_NAME",
    "http_options_for",
    "require_genai",
]
