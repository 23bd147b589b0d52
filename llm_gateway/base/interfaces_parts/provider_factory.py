"""ProviderFactory Protocol (single-class module)."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from ..dto import ConfigTarget
    from .language_model import LanguageModel


@runtime_checkable
class ProviderFactory(Protocol):
    """Creates :class:`LanguageModel` instances for one provider.

    ``create_model`` raises :class:`~llm_gateway.base.errors.ConfigurationError`
    when a required field (API key, model, project/location for
    region-scoped providers) is absent.
    """

    def get_provider(self) -> str:
        ...

    def create_model(self, target: "ConfigTarget") -> "LanguageModel":
        ...


__all__ = ["ProviderFactory"]
