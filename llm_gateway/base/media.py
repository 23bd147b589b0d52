"""Three-way media resolution shared by every adapter.

Vendors differ in whether they fetch remote URLs themselves, so image/audio
parts are resolved in a fixed order:

1. raw bytes already on the part -> inline bytes (MIME from the part, else
   the adapter's default);
2. a ``data:`` URL -> decoded inline bytes with the URL's MIME type;
3. anything else -> remote reference (MIME from the part, else guessed from
   the URL extension).

A malformed ``data:`` URL does not fail the request; it falls through to
step 3 and is passed on as an opaque reference.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .errors import InvalidDataURLError
from .logging import get_logger
from .models import decode_data_url, detect_mime_from_url, is_data_url

_logger = get_logger("llm_gateway.media")


@dataclass
class ResolvedMedia:
    """Outcome of media resolution: inline bytes or a remote URL."""

    mime_type: str
    data: bytes = b""
    url: str = ""

    @property
    def inline(self) -> bool:
        return bool(self.data)


def resolve_media(
    *,
    data: bytes = b"",
    url: str = "",
    mime_type: str = "",
    default_mime: str,
) -> Optional[ResolvedMedia]:
    """Resolve a media payload; ``None`` when it carries neither bytes nor URL."""
    if data:
        return ResolvedMedia(mime_type=mime_type or default_mime, data=data)
    if is_data_url(url):
        try:
            decoded_mime, raw = decode_data_url(url)
            return ResolvedMedia(mime_type=decoded_mime, data=raw)
        except InvalidDataURLError as exc:
            _logger.debug("malformed data URL passed through as remote reference: %s", exc)
    if url:
        return ResolvedMedia(mime_type=mime_type or detect_mime_from_url(url), url=url)
    return None


__all__ = ["ResolvedMedia", "resolve_media"]
