"""
Pull-based iterator over one stream's events.

State machine: ``active`` -> ``done``. ``next()`` blocks until an event is
available and returns ``False`` (moving to ``done``) when the producer has
finished, an ``error`` event arrives (the error is latched), or after a
``message_done`` event has been returned. The consumer observes the
cancellation token while waiting, so a cancelled stream ends within one poll
interval even if the producer is stuck in a vendor read.
"""
from __future__ import annotations

import queue
import threading
from typing import Iterator, List, Optional

from ..cancellation import CancellationToken, CancelledError
from ..constants import STREAM_POLL_INTERVAL
from ..errors import ProviderSentinel, classify_and_wrap
from ..models import (
    ContentBlock,
    ContentBlockType,
    GenerateTextResult,
    StreamEvent,
    StreamEventType,
    ToolCall,
    Usage,
)

# Marker enqueued by the producer once it has nothing more to send.
END_OF_STREAM = object()


class StreamIterator:
    """Consumer side of a ``stream_text`` call.

    Usage::

        it = model.stream_text(options)
        try:
            while it.next():
                handle(it.current())
            if it.err():
                raise it.err()
        finally:
            it.close()

    The iterator is also iterable (``for event in it``) and a context manager
    that closes on exit. ``collect()`` folds the whole stream into a
    :class:`GenerateTextResult`.
    """

    def __init__(
        self,
        events: "queue.Queue[object]",
        token: CancellationToken,
        *,
        sentinel: ProviderSentinel,
        provider: str,
        model: str = "",
        producer: Optional[threading.Thread] = None,
    ) -> None:
        self._queue = events
        self._token = token
        self._sentinel = sentinel
        self._provider = provider
        self._model = model
        self._producer = producer
        self._current: Optional[StreamEvent] = None
        self._err: Optional[BaseException] = None
        self._done = False
        self._closing = False
        self._lock = threading.Lock()

    def attach_producer(self, producer: threading.Thread) -> None:
        self._producer = producer

    def next(self) -> bool:
        """Advance to the next event; ``False`` once the stream is done."""
        with self._lock:
            if self._done:
                return False
            while True:
                if self._closing:
                    self._done = True
                    return False
                if self._token.cancelled:
                    self._latch_cancellation()
                    return False
                try:
                    item = self._queue.get(timeout=STREAM_POLL_INTERVAL)
                except queue.Empty:
                    if self._producer is not None and not self._producer.is_alive() and self._queue.empty():
                        self._done = True
                        return False
                    continue
                if item is END_OF_STREAM:
                    self._done = True
                    return False
                return self._accept(item)  # type: ignore[arg-type]

    def _accept(self, event: StreamEvent) -> bool:
        self._current = event
        if event.type == StreamEventType.ERROR:
            self._err = event.error
            self._done = True
            return False
        if event.type == StreamEventType.MESSAGE_DONE:
            self._done = True
        return True

    def _latch_cancellation(self) -> None:
        try:
            self._token.raise_if_cancelled()
        except CancelledError as exc:
            self._err = classify_and_wrap(
                self._sentinel, exc, provider=self._provider, model=self._model, token=self._token
            )
        self._done = True

    def current(self) -> Optional[StreamEvent]:
        """Return the most recently read event."""
        with self._lock:
            return self._current

    def err(self) -> Optional[BaseException]:
        """Return the latched error, ``None`` when the stream did not fail."""
        with self._lock:
            return self._err

    @property
    def done(self) -> bool:
        return self._done

    def close(self) -> None:
        """Cancel the producer and mark the iterator done. Idempotent."""
        self._closing = True
        self._token.cancel("stream closed")
        with self._lock:
            self._done = True

    def collect(self) -> GenerateTextResult:
        """Drain the stream into a single result.

        Text deltas are concatenated in arrival order; tool call deltas are
        accumulated (deltas sharing an id are merged). On a latched error the
        error is raised and any partial content is discarded.
        """
        text_parts: List[str] = []
        calls: List[ToolCall] = []
        stop_reason = None
        usage = Usage()
        try:
            while self.next():
                event = self.current()
                if event is None:
                    continue
                if event.type == StreamEventType.CONTENT_DELTA:
                    text_parts.append(event.text_delta)
                elif event.type == StreamEventType.TOOL_CALL_DELTA and event.tool_call is not None:
                    _merge_tool_call(calls, event.tool_call)
                elif event.type == StreamEventType.MESSAGE_DONE:
                    stop_reason = event.stop_reason
                    if event.usage is not None:
                        usage = event.usage
        finally:
            self.close()
        err = self.err()
        if err is not None:
            raise err
        content: List[ContentBlock] = []
        text = "".join(text_parts)
        if text:
            content.append(ContentBlock(type=ContentBlockType.TEXT, text=text))
        content.extend(ContentBlock(type=ContentBlockType.TOOL_CALL, tool_call=c) for c in calls)
        return GenerateTextResult(content=content, stop_reason=stop_reason, usage=usage, model_id=self._model)

    def __iter__(self) -> Iterator[StreamEvent]:
        while self.next():
            event = self.current()
            if event is not None:
                yield event

    def __enter__(self) -> "StreamIterator":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


def _merge_tool_call(calls: List[ToolCall], delta: ToolCall) -> None:
    """Fold a tool call delta into ``calls``.

    A delta whose id matches an earlier call updates it: arguments that
    already start with the accumulated text replace it (full re-emission),
    anything else is appended (incremental fragment).
    """
    for existing in calls:
        if delta.id and existing.id == delta.id:
            prev = existing.arguments or ""
            new = delta.arguments or ""
            existing.arguments = new if new.startswith(prev) else prev + new
            existing.name = delta.name or existing.name
            return
    calls.append(ToolCall(id=delta.id, name=delta.name, arguments=delta.arguments))


__all__ = ["StreamIterator", "END_OF_STREAM"]
