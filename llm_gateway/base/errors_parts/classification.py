"""
Error classification: build the ``sentinel -> category -> original`` chain.

Classification order is a hard contract:

1. Cancellation or deadline (``CancelledError``, ``TimeoutError``, or a
   cancelled token supplied by the caller) always maps to
   ``service_unavailable``. A cancelled request is never reported as a generic
   provider failure.
2. A vendor API error exposing an HTTP-like status is mapped through
   ``_STATUS_CATEGORY_MAP``.
3. Otherwise the error is wrapped with the provider sentinel only.
"""
from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Dict, Optional

from ..cancellation_parts.cancelled_error import CancelledError
from .error_category import ErrorCategory
from .provider_error import ProviderError
from .provider_sentinel import ProviderSentinel

if TYPE_CHECKING:
    from ..cancellation_parts.cancellation_token import CancellationToken


def _extract_status(exc: BaseException) -> Optional[int]:
    """Attempt to extract an HTTP status code from a vendor exception.

    Supported attribute shapes (checked in order):
    - ``exc.status_code`` (anthropic, openai)
    - ``exc.status``
    - ``exc.code`` (google-genai ``APIError``)
    - ``exc.response.status_code``
    Returns ``None`` if no valid status can be found.
    """
    for attr in ("status_code", "status", "code"):
        val = getattr(exc, attr, None)
        if isinstance(val, int) and not isinstance(val, bool) and 100 <= val < 600:
            return val
    resp = getattr(exc, "response", None)
    if resp is not None:
        sc = getattr(resp, "status_code", None)
        if isinstance(sc, int) and 100 <= sc < 600:
            return sc
    return None


_STATUS_CATEGORY_MAP: Dict[int, ErrorCategory] = {
    429: ErrorCategory.RATE_LIMITED,
    401: ErrorCategory.AUTH_FAILED,
    402: ErrorCategory.INSUFFICIENT_CREDITS,
    400: ErrorCategory.BAD_REQUEST,
    500: ErrorCategory.SERVICE_UNAVAILABLE,
    503: ErrorCategory.SERVICE_UNAVAILABLE,
    529: ErrorCategory.SERVICE_UNAVAILABLE,
}


def classify_status_code(status_code: Optional[int]) -> Optional[ErrorCategory]:
    """Map an HTTP status code to a category, ``None`` when not in the table."""
    if status_code is None:
        return None
    return _STATUS_CATEGORY_MAP.get(status_code)


def is_cancellation(exc: BaseException, token: "CancellationToken | None" = None) -> bool:
    """True when ``exc`` stems from cancellation or an elapsed deadline."""
    if token is not None and token.cancelled:
        return True
    return isinstance(exc, (CancelledError, TimeoutError, asyncio.TimeoutError, asyncio.CancelledError))


def classify_exception(
    exc: BaseException,
    token: "CancellationToken | None" = None,
) -> Optional[ErrorCategory]:
    """Return the category for ``exc`` following the documented order."""
    if isinstance(exc, ProviderError):
        return exc.category
    if is_cancellation(exc, token):
        return ErrorCategory.SERVICE_UNAVAILABLE
    return classify_status_code(_extract_status(exc))


def classify_and_wrap(
    sentinel: ProviderSentinel,
    exc: BaseException,
    *,
    provider: str,
    model: Optional[str] = None,
    token: "CancellationToken | None" = None,
) -> ProviderError:
    """Wrap ``exc`` into a :class:`ProviderError` carrying the classified chain.

    An exception that is already a ``ProviderError`` is returned unchanged so
    repeated wrapping at layered call sites never stacks sentinels.
    """
    if isinstance(exc, ProviderError):
        return exc
    category = classify_exception(exc, token)
    err = ProviderError(
        sentinel=sentinel,
        message=str(exc) or type(exc).__name__,
        provider=provider,
        model=model,
        category=category,
        retryable=bool(category and category.retryable),
        raw=exc,
    )
    err.__cause__ = exc
    return err


__all__ = [
    "classify_status_code",
    "classify_exception",
    "classify_and_wrap",
    "is_cancellation",
    "_extract_status",
    "_STATUS_CATEGORY_MAP",
]
