"""Streaming pipeline: bounded producer thread plus pull-based iterator.

Public surface:
- :class:`StreamIterator` consumer API (``next``/``current``/``err``/``close``/``collect``)
- :class:`EventSink` producer handle passed to adapter ``produce`` callables
- :func:`start_stream` spawns the producer for one ``stream_text`` call
"""

from .event_sink import EventSink
from .stream_iterator import END_OF_STREAM, StreamIterator
from .stream_runner import Producer, start_stream

__all__ = ["EventSink", "StreamIterator", "END_OF_STREAM", "Producer", "start_stream"]
