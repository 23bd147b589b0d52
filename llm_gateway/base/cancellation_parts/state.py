"""Internal state holder for cancellation tokens."""

from __future__ import annotations

from dataclasses import dataclass, field
from threading import Event
from typing import Optional


@dataclass
class State:
    """Internal state for cooperative cancellation tokens.

    ``event`` is set once cancellation is requested so waiters can block on it
    instead of polling.
    """

    reason: Optional[str] = None
    deadline_exceeded: bool = False
    event: Event = field(default_factory=Event)

    @property
    def cancelled(self) -> bool:
        return self.event.is_set()


__all__ = ["State"]
