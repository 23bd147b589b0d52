"""Cancellation parts package (token, state, error types)."""

from .cancelled_error import CancelledError, DeadlineExceededError
from .cancellation_token import CancellationToken

__all__ = ["CancellationToken", "CancelledError", "DeadlineExceededError"]
