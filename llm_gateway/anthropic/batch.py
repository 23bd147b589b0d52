"""Anthropic Message Batches mapping.

Purpose:
- Build ``messages.batches.create`` request entries from unified batch items
  and map ``MessageBatch`` objects and result entries back to the unified
  batch protocol types.

Status mapping:
- ``in_progress`` and ``canceling`` -> ``processing``
- ``ended`` -> ``completed``
- anything else -> ``pending``

Counts are derived from ``request_counts``: total is the sum of every bucket,
done is ``succeeded`` and failed is ``errored``. Result entries without a
``custom_id`` cannot be matched to a request; they are skipped with a
``batch.parse_error`` warning.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, Iterator, List

from ..base.dto import ConfigTarget
from ..base.logging import LogContext, get_logger, normalized_log_event
from ..base.models import BatchJob, BatchRequestItem, BatchResult, BatchStatus, BatchStorage
from ..base.tokens import coerce_count, field_of
from ..base.utils import as_datetime
from .mapping import build_params, map_response

STORAGE_TYPE = "anthropic_batch"

_logger = get_logger("llm_gateway.anthropic.batch")

_STATUS_MAP = {
    "in_progress": BatchStatus.PROCESSING,
    "canceling": BatchStatus.PROCESSING,
    "ended": BatchStatus.COMPLETED,
}

_COUNT_BUCKETS = ("processing", "succeeded", "errored", "canceled", "expired")


def build_batch_requests(items: Iterable[BatchRequestItem], target: ConfigTarget) -> List[Dict[str, Any]]:
    """Map every item up front so one invalid item fails the whole submission."""
    return [
        {"custom_id": item.custom_id, "params": build_params(item.options, target)}
        for item in items
    ]


def map_batch_status(status: Any) -> BatchStatus:
    return _STATUS_MAP.get(str(status or ""), BatchStatus.PENDING)


def map_batch_job(batch: Any) -> BatchJob:
    """Map an Anthropic ``MessageBatch`` to a :class:`BatchJob`."""
    counts = field_of(batch, "request_counts")
    per_bucket = {name: coerce_count(field_of(counts, name)) for name in _COUNT_BUCKETS}
    batch_id = field_of(batch, "id", "") or ""
    return BatchJob(
        id=batch_id,
        status=map_batch_status(field_of(batch, "processing_status")),
        created_at=as_datetime(field_of(batch, "created_at")),
        completed_at=as_datetime(field_of(batch, "ended_at")),
        total_count=sum(per_bucket.values()),
        done_count=per_bucket["succeeded"],
        failed_count=per_bucket["errored"],
        storage=BatchStorage(
            type=STORAGE_TYPE,
            output_ref=field_of(batch, "results_url", "") or "",
            properties={"batch_id": batch_id},
        ),
    )


def iter_batch_results(entries: Iterable[Any]) -> Iterator[BatchResult]:
    """Yield one :class:`BatchResult` per result entry; non-success entries become item errors."""
    for index, entry in enumerate(entries):
        custom_id = str(field_of(entry, "custom_id", "") or "")
        if not custom_id:
            normalized_log_event(
                _logger,
                "batch.parse_error",
                LogContext(provider="anthropic"),
                phase="finalize",
                error_code="parse",
                entry=index,
                error="missing custom_id",
                level=logging.WARNING,
            )
            continue
        result = field_of(entry, "result")
        kind = str(field_of(result, "type", "") or "unknown")
        if kind == "succeeded":
            yield BatchResult(custom_id=custom_id, result=map_response(field_of(result, "message")))
            continue
        yield BatchResult(custom_id=custom_id, error=_entry_error(kind, result))


def _entry_error(kind: str, result: Any) -> str:
    detail = field_of(field_of(field_of(result, "error"), "error"), "message")
    return f"{kind}: {detail}" if detail else kind


__all__ = [
    "STORAGE_TYPE",
    "build_batch_requests",
    "map_batch_status",
    "map_batch_job",
    "iter_batch_results",
]
