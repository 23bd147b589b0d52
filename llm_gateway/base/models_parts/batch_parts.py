"""
Batch protocol DTOs.

A batch moves through ``pending -> processing -> {completed | failed |
cancelled}``. ``BatchStorage`` abstracts where the vendor keeps bulk input and
output (an uploaded file id, an object-storage URI, or a results URL) so the
job can later be downloaded without re-deriving provider details.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from .generation_options import GenerateTextOptions
from .generation_result import GenerateTextResult


class BatchStatus(str, Enum):
    """Unified batch job status."""

    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self in (BatchStatus.COMPLETED, BatchStatus.FAILED, BatchStatus.CANCELLED)


@dataclass
class BatchStorage:
    """Provider-specific reference to a batch's bulk input/output."""

    type: str
    input_ref: str = ""
    output_ref: str = ""
    properties: Dict[str, str] = field(default_factory=dict)


@dataclass
class BatchRequestItem:
    """One request in a batch, matched back to results via ``custom_id``."""

    custom_id: str
    options: GenerateTextOptions


@dataclass
class BatchRequest:
    """A bulk submission of generation requests."""

    items: List[BatchRequestItem] = field(default_factory=list)
    metadata: Dict[str, str] = field(default_factory=dict)


@dataclass
class ListBatchOptions:
    """Pagination for ``list_batch_jobs``."""

    limit: int = 0
    after: str = ""


@dataclass
class BatchJob:
    """Status snapshot of a vendor-side batch job."""

    id: str
    status: BatchStatus = BatchStatus.PENDING
    created_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    total_count: int = 0
    done_count: int = 0
    failed_count: int = 0
    storage: Optional[BatchStorage] = None
    error: str = ""
    metadata: Dict[str, Any] = field(default_factory=dict)


@dataclass
class BatchResult:
    """Outcome of one batch item; exactly one of ``result``/``error`` is set."""

    custom_id: str
    result: Optional[GenerateTextResult] = None
    error: Optional[str] = None

    def __post_init__(self) -> None:
        if (self.result is None) == (self.error is None):
            raise ValueError(
                f"batch result {self.custom_id!r} must carry exactly one of result or error"
            )

    @property
    def ok(self) -> bool:
        return self.error is None and self.result is not None


__all__ = [
    "BatchStatus",
    "BatchStorage",
    "BatchRequestItem",
    "BatchRequest",
    "ListBatchOptions",
    "BatchJob",
    "BatchResult",
]
