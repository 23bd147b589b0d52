"""
Structured provider error carrying an ordered classification tag chain.

The chain reads ``sentinel -> category (optional) -> original error``. The
original error is kept in ``raw`` and as ``__cause__`` so tracebacks show it.
Use :func:`error_is` to ask "does this error carry tag X" regardless of how
deeply it was wrapped.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, List, Optional, Union

from .error_category import ErrorCategory
from .provider_sentinel import ProviderSentinel

Tag = Union[ProviderSentinel, ErrorCategory]


@dataclass
class ProviderError(Exception):
    """Represents a classified adapter failure.

    Attributes:
        sentinel: Failing subsystem (e.g. ``anthropic generation failed``).
        message: Human-readable message of the original failure.
        provider: Provider key where the error originated (e.g. ``"openai"``).
        model: Optional model identifier associated with the failure.
        category: Provider-agnostic category, ``None`` when unclassified.
        retryable: Hint for caller retry policy; ``True`` only for transient
            categories.
        raw: Original exception for diagnostics.
    """

    sentinel: ProviderSentinel
    message: str
    provider: str
    model: Optional[str] = None
    category: Optional[ErrorCategory] = None
    retryable: bool = False
    raw: Optional[BaseException] = None

    def __str__(self) -> str:
        """Render the chain as ``sentinel: category: message``."""
        parts = [self.sentinel.value]
        if self.category is not None:
            parts.append(self.category.value)
        parts.append(self.message)
        return ": ".join(parts)

    @property
    def tags(self) -> List[Tag]:
        """Classification tags in chain order (sentinel first)."""
        out: List[Tag] = [self.sentinel]
        if self.category is not None:
            out.append(self.category)
        return out

    def has(self, tag: object) -> bool:
        """Shorthand for :func:`error_is` on this error."""
        return error_is(self, tag)


def _walk_chain(err: BaseException) -> Iterator[BaseException]:
    seen = set()
    current: Optional[BaseException] = err
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        yield current
        if isinstance(current, ProviderError) and current.raw is not None:
            current = current.raw
        else:
            current = current.__cause__


def error_is(err: Optional[BaseException], tag: object) -> bool:
    """Return True when ``err`` (or anything it wraps) carries ``tag``.

    ``tag`` may be a :class:`ProviderSentinel`, an :class:`ErrorCategory`, an
    exception class, or a specific exception instance.
    """
    if err is None:
        return False
    for item in _walk_chain(err):
        if isinstance(tag, (ProviderSentinel, ErrorCategory)):
            if isinstance(item, ProviderError) and tag in item.tags:
                return True
        elif isinstance(tag, type) and issubclass(tag, BaseException):
            if isinstance(item, tag):
                return True
        elif item is tag:
            return True
    return False


__all__ = ["ProviderError", "error_is", "Tag"]
