"""Typed configuration for one named model target.

Purpose
-------
Capture everything a provider factory needs to construct a model: provider,
credentials, model identifier, optional endpoint/region fields, generation
defaults, and an opaque ``properties`` bag for provider-only settings
(service-account material, batch storage bucket, ...). The gateway passes
``properties`` through without interpreting them.

External dependencies
---------------------
- Pydantic v2 ``BaseModel`` for validation and ``model_dump``.

Notes
-----
- Required-field checks are provider specific and happen in each factory's
  ``create_model`` (raising ``ConfigurationError``), not here, so one schema
  serves every provider.
- ``api_key`` is excluded from ``repr`` to keep it out of logs.
"""
from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ConfigTarget(BaseModel):
    """Configuration for one named target.

    Attributes
    ----------
    provider:
        Canonical provider name (``"anthropic"``, ``"openai"``, ``"gemini"``,
        ``"vertexai"``, ``"mock"``).
    api_key:
        Credential for API-key based providers.
    model:
        Vendor model identifier.
    base_url:
        Optional API base URL override (proxies, compatible gateways).
    project_id / location:
        Region-scoped providers (Vertex AI).
    max_tokens / temperature:
        Defaults applied when a request leaves them unset.
    request_timeout:
        Optional per-request timeout in seconds forwarded to the vendor client.
    properties:
        Opaque provider-only settings.
    """

    model_config = ConfigDict(extra="forbid")

    provider: str
    api_key: Optional[str] = Field(default=None, repr=False)
    model: Optional[str] = None
    base_url: Optional[str] = None
    project_id: Optional[str] = None
    location: Optional[str] = None
    max_tokens: int = Field(default=0, ge=0)
    temperature: Optional[float] = None
    request_timeout: Optional[float] = Field(default=None, gt=0)
    properties: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("provider")
    @classmethod
    def _normalize_provider(cls, value: str) -> str:
        name = (value or "").strip().lower()
        if not name:
            raise ValueError("provider must be a non-empty string")
        return name


__all__ = ["ConfigTarget"]
