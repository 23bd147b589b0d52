"""
Helpers for ``data:`` URLs and URL-based MIME detection.

Adapters use these during outbound mapping to turn inline ``data:`` URLs into
raw bytes plus a MIME type, and to guess a MIME type for remote references
when the caller did not supply one.

Format handled: ``data:[<mediatype>][;base64],<data>``. A missing media type
defaults to ``application/octet-stream``. Non-base64 payloads are
percent-decoded and returned as UTF-8 bytes.
"""
from __future__ import annotations

import base64
import binascii
import posixpath
from typing import Dict, Tuple
from urllib.parse import unquote_to_bytes, urlparse

from ..constants import DEFAULT_BINARY_MIME
from ..errors_parts.validation_errors import InvalidDataURLError

_DATA_PREFIX = "data:"
_BASE64_SUFFIX = ";base64"

_EXTENSION_MIME: Dict[str, str] = {
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".gif": "image/gif",
    ".webp": "image/webp",
    ".svg": "image/svg+xml",
    ".mp3": "audio/mpeg",
    ".wav": "audio/wav",
    ".ogg": "audio/ogg",
    ".flac": "audio/flac",
    ".mp4": "video/mp4",
    ".webm": "video/webm",
    ".pdf": "application/pdf",
}


def is_data_url(url: str | None) -> bool:
    """Return True when ``url`` is a ``data:`` URI."""
    return bool(url) and url.startswith(_DATA_PREFIX)  # type: ignore[union-attr]


def decode_data_url(data_url: str) -> Tuple[str, bytes]:
    """Decode a ``data:`` URI into ``(mime_type, raw_bytes)``.

    Raises:
        InvalidDataURLError: when the URI has no ``,`` separator or the base64
            payload is malformed.
    """
    if not is_data_url(data_url):
        raise InvalidDataURLError("not a data URL")
    rest = data_url[len(_DATA_PREFIX):]
    meta, sep, encoded = rest.partition(",")
    if not sep:
        raise InvalidDataURLError("data URL has no payload separator")

    is_b64 = meta.endswith(_BASE64_SUFFIX)
    if is_b64:
        meta = meta[: -len(_BASE64_SUFFIX)]
    mime_type = meta or DEFAULT_BINARY_MIME

    if not is_b64:
        return mime_type, unquote_to_bytes(encoded)
    try:
        return mime_type, base64.b64decode(encoded, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise InvalidDataURLError(f"invalid base64 payload: {exc}") from exc


def encode_data_url(mime_type: str, data: bytes) -> str:
    """Build a base64 ``data:`` URI from raw bytes."""
    return f"{_DATA_PREFIX}{mime_type}{_BASE64_SUFFIX},{base64.b64encode(data).decode('ascii')}"


def detect_mime_from_url(url: str | None) -> str:
    """Guess a MIME type from the file extension of ``url``.

    Query strings and fragments are ignored. Unknown extensions map to
    ``application/octet-stream``.
    """
    if not url:
        return DEFAULT_BINARY_MIME
    path = urlparse(url).path or url
    ext = posixpath.splitext(path)[1].lower()
    return _EXTENSION_MIME.get(ext, DEFAULT_BINARY_MIME)


__all__ = [
    "is_data_url",
    "decode_data_url",
    "encode_data_url",
    "detect_mime_from_url",
]
