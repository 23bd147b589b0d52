"""Cancellation error types.

``CancelledError`` signals caller-driven cooperative cancellation;
``DeadlineExceededError`` signals that a token's deadline elapsed. Both are
classified as ``service_unavailable`` by the error classifier.
"""

from __future__ import annotations


class CancelledError(RuntimeError):
    """Raised when an operation observes a cancelled token."""


class DeadlineExceededError(CancelledError, TimeoutError):
    """Raised when an operation observes a token whose deadline has passed."""


__all__ = ["CancelledError", "DeadlineExceededError"]
