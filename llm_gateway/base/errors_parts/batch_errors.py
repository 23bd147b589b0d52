"""Batch protocol errors raised before any vendor call is made."""
from __future__ import annotations


class BatchError(Exception):
    """Base class for batch protocol misuse."""


class BatchNotCompletedError(BatchError):
    """``download_batch_results`` was called on a job that is not completed."""


class BatchMissingOutputError(BatchError):
    """A completed job carries no output reference to download from."""


class BatchUnsupportedError(BatchError):
    """The resolved model does not implement the batch protocol."""


__all__ = [
    "BatchError",
    "BatchNotCompletedError",
    "BatchMissingOutputError",
    "BatchUnsupportedError",
]
