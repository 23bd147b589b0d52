"""Cooperative cancellation primitives (public API facade).

Purpose
-------
Expose the gateway's stand-in for a request context via the canonical
``llm_gateway.base.cancellation`` import path while the implementations live
under ``cancellation_parts``.

Notes
-----
- ``CancellationToken`` is passed to ``stream_text`` and batch downloads; the
  streaming producer observes it on every queue write.
- ``CancelledError`` / ``DeadlineExceededError`` are raised by operations that
  observe a cancelled token and are classified as ``service_unavailable``.
"""

from .cancellation_parts.cancelled_error import CancelledError, DeadlineExceededError
from .cancellation_parts.cancellation_token import CancellationToken

__all__ = ["CancellationToken", "CancelledError", "DeadlineExceededError"]
