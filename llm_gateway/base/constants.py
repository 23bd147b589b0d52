"""Base shared constants for the gateway.

Central location to avoid scattering magic strings and default numbers across
adapters, the streaming pipeline, and the registry.
"""
from __future__ import annotations

# Bounded event queue size for each StreamText producer
STREAM_QUEUE_SIZE = 64

# Poll interval (seconds) used by the producer when the queue is full and by
# the consumer while waiting for the next event
STREAM_POLL_INTERVAL = 0.05

# Name of the registry target returned by ``Registry.get_default``
DEFAULT_TARGET_NAME = "default"

# MIME fallbacks used by media resolution
DEFAULT_IMAGE_MIME = "image/png"
DEFAULT_AUDIO_MIME = "audio/mpeg"
DEFAULT_BINARY_MIME = "application/octet-stream"

__all__ = [
    "STREAM_QUEUE_SIZE",
    "STREAM_POLL_INTERVAL",
    "DEFAULT_TARGET_NAME",
    "DEFAULT_IMAGE_MIME",
    "DEFAULT_AUDIO_MIME",
    "DEFAULT_BINARY_MIME",
]
