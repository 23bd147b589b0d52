"""Cooperative cancellation token implementation.

Exposes the ``CancellationToken`` class that plays the role of a request
context: callers pass one into ``stream_text`` (or any long-running gateway
operation) and cancel it, or give it a deadline, to stop the work early.
"""

from __future__ import annotations

import time
from threading import Lock
from typing import List, Optional

from .cancelled_error import CancelledError, DeadlineExceededError
from .state import State

DEADLINE_REASON = "deadline exceeded"


class CancellationToken:
    """A cooperative cancellation token with cascading and deadline semantics.

    Thread-safe. Child tokens inherit cancellation when the parent is
    cancelled; cancelling a child never affects the parent. A token created
    with ``timeout`` cancels itself (reason ``"deadline exceeded"``) the first
    time it is inspected after the deadline.
    """

    def __init__(
        self,
        *,
        parent: "CancellationToken | None" = None,
        timeout: Optional[float] = None,
    ) -> None:
        self._state = State()
        self._lock = Lock()
        self._children: List[CancellationToken] = []
        self._deadline = time.monotonic() + timeout if timeout is not None else None
        if parent is not None:
            parent.link_child(self)

    @property
    def cancelled(self) -> bool:  # noqa: D401 - short form
        """Whether cancellation has been requested (or the deadline passed)."""
        self._check_deadline()
        return self._state.cancelled

    @property
    def reason(self) -> str | None:  # noqa: D401 - short form
        """Reason string supplied at cancel time (if any)."""
        return self._state.reason

    @property
    def deadline_exceeded(self) -> bool:
        """True when the token was cancelled because its deadline elapsed."""
        return self._state.deadline_exceeded

    def remaining(self) -> Optional[float]:
        """Seconds until the deadline, ``None`` when the token has none."""
        if self._deadline is None:
            return None
        return max(0.0, self._deadline - time.monotonic())

    def cancel(self, reason: str | None = None) -> None:
        """Request cooperative cancellation and cascade to children."""
        self._cancel(reason, deadline=False)

    def _cancel(self, reason: str | None, *, deadline: bool) -> None:
        with self._lock:
            if self._state.cancelled:
                return
            self._state.reason = reason
            self._state.deadline_exceeded = deadline
            self._state.event.set()
            children = list(self._children)
        for child in children:
            child._cancel(reason, deadline=deadline)

    def _check_deadline(self) -> None:
        if self._deadline is not None and not self._state.cancelled and time.monotonic() >= self._deadline:
            self._cancel(DEADLINE_REASON, deadline=True)

    def link_child(self, token: "CancellationToken") -> "CancellationToken":
        """Link a child token so parent cancellation cascades (returns child)."""
        self._check_deadline()
        with self._lock:
            self._children.append(token)
            should_cancel = self._state.cancelled
            reason = self._state.reason
            deadline = self._state.deadline_exceeded
        if should_cancel:
            token._cancel(reason, deadline=deadline)
        return token

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until cancelled or ``timeout`` elapses; return ``cancelled``."""
        remaining = self.remaining()
        if remaining is not None:
            timeout = remaining if timeout is None else min(timeout, remaining)
        self._state.event.wait(timeout)
        return self.cancelled

    def raise_if_cancelled(self) -> None:
        """Raise ``CancelledError`` (or ``DeadlineExceededError``) if cancelled."""
        if not self.cancelled:
            return
        if self._state.deadline_exceeded:
            raise DeadlineExceededError(self._state.reason or DEADLINE_REASON)
        raise CancelledError(self._state.reason or "operation cancelled")

    def child(self, timeout: Optional[float] = None) -> "CancellationToken":
        """Create and link a child token (shortcut)."""
        return CancellationToken(parent=self, timeout=timeout)

    def __repr__(self) -> str:  # pragma: no cover - introspection aid
        return (
            f"CancellationToken(cancelled={self._state.cancelled}, "
            f"reason={self._state.reason!r}, children={len(self._children)})"
        )


__all__ = ["CancellationToken", "DEADLINE_REASON"]
