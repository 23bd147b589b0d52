"""Background producer for ``stream_text`` calls.

Each call to :func:`start_stream` spawns exactly one daemon thread that owns
a bounded queue (``STREAM_QUEUE_SIZE`` events) for the lifetime of the
stream. The thread runs the adapter's ``produce(sink)`` callable, which reads
the vendor SDK stream, translates each chunk, and writes unified events
through the :class:`EventSink`.

Termination guarantees
----------------------
- Exactly one terminal event per stream, and it is the last event.
- A producer that returns without a terminal event gets a ``message_done``
  with ``end_turn``.
- Any exception is classified with the stream sentinel and delivered as one
  ``error`` event.
- On cancellation the producer exits without writing further events; the
  consumer observes the token and latches a ``service_unavailable`` error.
"""
from __future__ import annotations

import logging
import queue
import threading
import time
from contextlib import suppress
from typing import Callable, Optional

from ..cancellation import CancellationToken, CancelledError
from ..constants import STREAM_QUEUE_SIZE
from ..errors import ProviderSentinel, classify_and_wrap
from ..logging import LogContext, get_logger, normalized_log_event
from ..models import StopReason, StreamEvent
from .event_sink import EventSink
from .stream_iterator import END_OF_STREAM, StreamIterator

Producer = Callable[[EventSink], None]

_logger = get_logger("llm_gateway.streaming")


def start_stream(
    produce: Producer,
    *,
    sentinel: ProviderSentinel,
    provider: str,
    model: str = "",
    token: Optional[CancellationToken] = None,
    queue_size: int = STREAM_QUEUE_SIZE,
    on_close: Optional[Callable[[], None]] = None,
) -> StreamIterator:
    """Spawn the producer thread and return the consumer iterator immediately.

    Parameters
    ----------
    produce:
        Adapter callable that writes events via the sink. It should call
        ``sink.raise_if_cancelled()`` between vendor reads.
    sentinel:
        Provider stream sentinel used to classify producer failures.
    token:
        Caller's cancellation token. The stream uses a child token so that
        ``StreamIterator.close()`` never cancels the caller's token.
    on_close:
        Optional cleanup (e.g. closing the vendor stream) run by the producer
        thread once it exits, whatever the outcome.
    """
    stream_token = token.child() if token is not None else CancellationToken()
    events: "queue.Queue[object]" = queue.Queue(maxsize=queue_size)
    sink = EventSink(events, stream_token)
    iterator = StreamIterator(events, stream_token, sentinel=sentinel, provider=provider, model=model)
    ctx = LogContext(provider=provider, model=model)

    def _run() -> None:
        t0 = time.perf_counter()
        normalized_log_event(_logger, "stream.start", ctx, phase="start", emitted=False)
        try:
            produce(sink)
            if not sink.terminal_sent:
                sink.send(StreamEvent.message_done(StopReason.END_TURN))
            normalized_log_event(
                _logger,
                "stream.end",
                ctx,
                phase="finalize",
                emitted=sink.emitted,
                latency_ms=(time.perf_counter() - t0) * 1000.0,
            )
        except CancelledError as exc:
            normalized_log_event(
                _logger,
                "stream.cancelled",
                ctx,
                phase="finalize",
                emitted=sink.emitted,
                reason=str(exc),
            )
        except Exception as exc:  # noqa: BLE001
            err = classify_and_wrap(sentinel, exc, provider=provider, model=model, token=stream_token)
            normalized_log_event(
                _logger,
                "stream.error",
                ctx,
                phase="finalize",
                emitted=sink.emitted,
                error_code=err.category.value if err.category else "unclassified",
                error=str(err),
            )
            # consumer already latched its own error when the token is cancelled
            with suppress(CancelledError):
                sink.send(StreamEvent.error_event(err))
        finally:
            sink.offer(END_OF_STREAM)
            if on_close is not None:
                try:
                    on_close()
                except Exception as close_exc:  # noqa: BLE001
                    normalized_log_event(
                        _logger, "stream.cleanup_error", ctx, phase="finalize", error=str(close_exc), level=logging.WARNING
                    )

    thread = threading.Thread(target=_run, name=f"llm-gateway-stream-{provider}", daemon=True)
    iterator.attach_producer(thread)
    thread.start()
    return iterator


__all__ = ["start_stream", "Producer"]
