"""Vertex AI adapter (Google GenAI SDK in Vertex mode).

Same request/response mapping as the Gemini adapter; the client is created
with ``vertexai=True`` scoped to a GCP project and location and
authenticates with Application Default Credentials.

Notes:
* ``project_id`` and ``location`` are required.
* ``api_key`` is optional. The SDK treats an API key and project/location as
  mutually exclusive, so a configured key is not forwarded to the client.
"""

from __future__ import annotations

from typing import Any, Dict

from ..base.dto import ConfigTarget
from ..base.errors import ProviderSentinel
from ..base.model_base import build_vendor_client, require_target_fields
from ..gemini.client import GenAIModel, http_options_for, require_genai

PROVIDER_NAME = "vertexai"


class VertexAIModel(GenAIModel):
    """Vertex AI hosted Gemini model."""

    provider_name = PROVIDER_NAME
    generation_sentinel = ProviderSentinel.VERTEXAI_GENERATION_FAILED
    stream_sentinel = ProviderSentinel.VERTEXAI_STREAM_FAILED


class VertexAIFactory:
    """Creates :class:`VertexAIModel` instances from config targets."""

    def get_provider(self) -> str:
        return PROVIDER_NAME

    def create_model(self, target: ConfigTarget) -> VertexAIModel:
        """Validate ``target`` and construct the Vertex-mode GenAI client.

        Raises:
            ConfigurationError: ``project_id``, ``location`` or ``model`` is missing.
            ProviderError: client construction failed (``vertexai client creation failed``).
        """
        require_target_fields(PROVIDER_NAME, target, "project_id", "location", "model")
        client = build_vendor_client(
            ProviderSentinel.VERTEXAI_CLIENT_CREATION_FAILED, target, lambda: _build_client(target)
        )
        return VertexAIModel(client=client, target=target)


def _build_client(target: ConfigTarget) -> Any:
    sdk = require_genai(ProviderSentinel.VERTEXAI_CLIENT_CREATION_FAILED, target)
    kwargs: Dict[str, Any] = {
        "vertexai": True,
        "project": target.project_id,
        "location": target.location,
    }
    http_options = http_options_for(target)
    if http_options:
        kwargs["http_options"] = http_options
    return sdk.Client(**kwargs)


__all__ = ["VertexAIModel", "VertexAIFactory", "PROVIDER_NAME"]
