"""Producer-side handle onto a stream's bounded event queue.

The background producer is the sole writer. Every write races against the
stream's cancellation token: the sink re-checks the token between bounded
``put`` attempts, so a cancelled stream never leaves the producer blocked on
a full queue, and cancellation wins when both are ready.
"""
from __future__ import annotations

import queue
from typing import Optional

from ..cancellation import CancellationToken
from ..constants import STREAM_POLL_INTERVAL
from ..models import StreamEvent, StopReason, ToolCall, Usage


class EventSink:
    """Writes unified events for one stream.

    Events sent after a terminal event (``message_done`` / ``error``) are
    dropped so the terminal event is always the last one a consumer sees.
    """

    def __init__(self, events: "queue.Queue[object]", token: CancellationToken) -> None:
        self._queue = events
        self._token = token
        self._terminal_sent = False
        self.emitted = 0

    @property
    def token(self) -> CancellationToken:
        return self._token

    @property
    def cancelled(self) -> bool:
        return self._token.cancelled

    @property
    def terminal_sent(self) -> bool:
        return self._terminal_sent

    def raise_if_cancelled(self) -> None:
        """Raise ``CancelledError`` when the stream has been cancelled."""
        self._token.raise_if_cancelled()

    def send(self, event: StreamEvent) -> None:
        """Enqueue ``event``, blocking while the queue is full.

        Raises:
            CancelledError: when the token is (or becomes) cancelled before
                the event could be enqueued.
        """
        if self._terminal_sent:
            return
        while True:
            self._token.raise_if_cancelled()
            try:
                self._queue.put(event, timeout=STREAM_POLL_INTERVAL)
                break
            except queue.Full:
                continue
        self.emitted += 1
        if event.is_terminal:
            self._terminal_sent = True

    def text(self, delta: str) -> None:
        if delta:
            self.send(StreamEvent.content_delta(delta))

    def tool_call(self, call: ToolCall) -> None:
        self.send(StreamEvent.tool_call_delta(call))

    def done(self, stop_reason: Optional[StopReason] = None, usage: Optional[Usage] = None) -> None:
        self.send(StreamEvent.message_done(stop_reason, usage))

    def offer(self, item: object) -> bool:
        """Non-blocking best-effort enqueue used for end-of-stream markers."""
        try:
            self._queue.put_nowait(item)
        except queue.Full:
            return False
        return True


__all__ = ["EventSink"]
