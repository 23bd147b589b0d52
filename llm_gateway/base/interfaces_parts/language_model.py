"""LanguageModel Protocol (single-class module).

The minimal contract every provider adapter satisfies.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, List, Optional, Protocol, runtime_checkable

from ..models import GenerateTextOptions, GenerateTextResult

if TYPE_CHECKING:
    from ..capabilities import ProviderCapability
    from ..cancellation import CancellationToken
    from ..streaming import StreamIterator


@runtime_checkable
class LanguageModel(Protocol):
    """A configured model instance backed by one vendor.

    Implementations translate :class:`GenerateTextOptions` into the vendor
    request, map the response back, and wrap failures into classified
    :class:`~llm_gateway.base.errors.ProviderError` values. Instances are safe
    for concurrent use by multiple callers.
    """

    def get_capabilities(self) -> List["ProviderCapability"]:
        """Capabilities declared by this model."""
        ...

    def get_provider(self) -> str:
        """Canonical provider name, e.g. ``"anthropic"``."""
        ...

    def get_model_id(self) -> str:
        """Vendor model identifier this instance targets."""
        ...

    def generate_text(
        self,
        options: GenerateTextOptions,
        *,
        token: Optional["CancellationToken"] = None,
    ) -> GenerateTextResult:
        """Run one blocking generation and return the unified result."""
        ...

    def stream_text(
        self,
        options: GenerateTextOptions,
        *,
        token: Optional["CancellationToken"] = None,
    ) -> "StreamIterator":
        """Start a streaming generation; returns immediately with an iterator."""
        ...

    def close(self) -> None:
        """Release the vendor client. Idempotent."""
        ...

    def get_raw_client(self) -> Any:
        """Escape hatch: the underlying vendor SDK client.

        Using the raw client voids the unified-surface guarantees; prefer
        :func:`llm_gateway.base.registry.get_typed_client` which checks types.
        """
        ...


__all__ = ["LanguageModel"]
