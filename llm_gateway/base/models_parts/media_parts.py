"""
Multi-modal payload DTOs carried by content blocks.

``ImagePart`` and ``AudioPart`` hold either raw bytes (with a MIME type) or a
URL. The URL may itself be a ``data:`` URI; adapters resolve it to inline
bytes at translation time. ``FilePart`` references a provider-side file
(e.g. ``gs://bucket/path`` or an uploaded file id).
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class ImageDetail(str, Enum):
    """Image processing detail level hint (used by OpenAI-style vendors)."""

    LOW = "low"
    HIGH = "high"
    AUTO = "auto"


@dataclass
class ImagePart:
    """Image input given as raw bytes or as an HTTP/``data:`` URL."""

    url: str = ""
    mime_type: str = ""
    detail: Optional[ImageDetail] = None
    data: bytes = b""


@dataclass
class AudioPart:
    """Audio input given as raw bytes or as an HTTP/``data:`` URL."""

    url: str = ""
    mime_type: str = ""
    data: bytes = b""


@dataclass
class FilePart:
    """Reference to a file already addressable by the provider."""

    uri: str
    mime_type: str = ""


__all__ = ["ImageDetail", "ImagePart", "AudioPart", "FilePart"]
