"""Validation errors raised by the unified message model.

Most are programmer/input errors detected before any vendor call is made.
:class:`IncompleteToolCallError` is the exception: it is raised while
translating a vendor stream. All are plain ``ValueError`` subclasses and are
never classified into provider categories.
"""
from __future__ import annotations


class InvalidDataURLError(ValueError):
    """Raised when a ``data:`` URL cannot be decoded into MIME type and bytes."""


class InvalidContentBlockError(ValueError):
    """Raised when a content block's populated payload does not match its tag.

    A block is valid only when exactly one payload field is set and that field
    is the one named by ``ContentBlock.type``.
    """



class IncompleteToolCallError(ValueError):
    """Raised when a stream ends while a tool call's arguments are not valid JSON."""


__all__ = ["InvalidDataURLError", "InvalidContentBlockError", "IncompleteToolCallError"]
