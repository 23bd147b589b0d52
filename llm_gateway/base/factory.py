"""Provider factory lookup.

Purpose
-------
Resolve a canonical provider name to its :class:`ProviderFactory`. Adapter
modules are imported lazily with ``importlib`` so that importing the gateway
never imports every vendor SDK, and a missing SDK only fails the provider
that needs it.

External dependencies
---------------------
- Standard library only (``importlib``). Adapters import their own SDKs.

Failure modes
-------------
- Unknown names, import failures and missing factory classes all raise
  :class:`UnsupportedProviderError` with an actionable message.
"""

from __future__ import annotations

from importlib import import_module
from typing import Dict, List, Tuple, Type

from .dto import ConfigTarget
from .errors import UnsupportedProviderError
from .interfaces import LanguageModel, ProviderFactory


class ProviderFactories:
    """Lazy mapping from canonical provider name to factory class."""

    # Map canonical provider names to import paths and factory class names
    _PROVIDERS: Dict[str, Dict[str, str]] = {
        "anthropic": {"module": "llm_gateway.anthropic.client", "class": "AnthropicFactory"},
        "openai": {"module": "llm_gateway.openai.client", "class": "OpenAIFactory"},
        "gemini": {"module": "llm_gateway.gemini.client", "class": "GeminiFactory"},
        "vertexai": {"module": "llm_gateway.vertexai.client", "class": "VertexAIFactory"},
        "mock": {"module": "llm_gateway.mock.client", "class": "MockFactory"},
    }

    @classmethod
    def create(cls, provider: str) -> ProviderFactory:
        """Import and instantiate the factory for ``provider``.

        Raises
        ------
        UnsupportedProviderError
            If the provider is unknown, its module fails to import, or the
            factory class is missing.
        """
        name = (provider or "").lower().strip()
        entry = cls._PROVIDERS.get(name)
        if not entry:
            raise UnsupportedProviderError(f"unsupported provider '{provider}'")

        module_path, class_name = entry["module"], entry["class"]
        try:
            mod = import_module(module_path)
        except ImportError as exc:
            raise UnsupportedProviderError(
                f"failed to import module '{module_path}' for provider '{provider}': {exc}"
            ) from exc
        try:
            klass: Type = getattr(mod, class_name)
        except AttributeError as exc:
            raise UnsupportedProviderError(
                f"factory class '{class_name}' not found in '{module_path}' for provider '{provider}'"
            ) from exc
        return klass()

    @classmethod
    def supported(cls) -> Tuple[str, ...]:
        """Canonical provider names in deterministic order."""
        return tuple(cls._PROVIDERS.keys())

    @classmethod
    def create_all(cls) -> List[ProviderFactory]:
        """Instantiate every known factory (adapter modules are imported)."""
        return [cls.create(name) for name in cls.supported()]


def create_model(target: ConfigTarget) -> LanguageModel:
    """Create a model directly from one target, bypassing any registry."""
    return ProviderFactories.create(target.provider).create_model(target)


__all__ = ["ProviderFactories", "create_model"]
