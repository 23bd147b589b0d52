"""
Provider-agnostic error categories.

Adapters attach one of these to a :class:`ProviderError` so callers can react
to a failure class (rate limit, bad credentials, ...) without importing any
vendor SDK. Values are lowercase snake_case and are a stable public contract
for logging.
"""
from __future__ import annotations

from enum import Enum


class ErrorCategory(str, Enum):
    """Classified failure categories (HTTP-status equivalents)."""

    RATE_LIMITED = "rate_limited"  # 429
    AUTH_FAILED = "auth_failed"  # 401
    INSUFFICIENT_CREDITS = "insufficient_credits"  # 402
    BAD_REQUEST = "bad_request"  # 400
    SERVICE_UNAVAILABLE = "service_unavailable"  # 500/503/529, cancellation, deadline

    @property
    def retryable(self) -> bool:
        """Whether a caller may reasonably retry this category with backoff."""
        return self in (ErrorCategory.RATE_LIMITED, ErrorCategory.SERVICE_UNAVAILABLE)


__all__ = ["ErrorCategory"]
