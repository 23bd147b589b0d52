"""OpenAI Batch API mapping.

Purpose:
- Serialize unified batch items into the JSONL input file expected by the
  Batch API (one ``POST /v1/chat/completions`` request per line).
- Map ``Batch`` objects to :class:`BatchJob` and parse output/error files
  into :class:`BatchResult` records.

Status mapping:
- ``validating`` / ``in_progress`` / ``finalizing`` -> ``processing``
- ``completed`` -> ``completed``
- ``failed`` / ``expired`` -> ``failed``
- ``cancelling`` / ``cancelled`` -> ``cancelled``
- anything else -> ``pending``

Failure modes:
- Output parsing is line-isolated: a non-2xx line yields an item error and
  never aborts the remaining lines. A line that is not JSON or carries no
  ``custom_id`` cannot be matched to a request; it is skipped with a
  ``batch.parse_error`` warning naming its line number.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Iterable, Iterator, Optional

from ..base.dto import ConfigTarget
from ..base.logging import LogContext, get_logger, normalized_log_event
from ..base.models import BatchJob, BatchRequestItem, BatchResult, BatchStatus, BatchStorage
from ..base.tokens import coerce_count, field_of
from ..base.utils import as_datetime
from ..config.defaults import OPENAI_BATCH_ENDPOINT
from .mapping import build_params, map_completion

STORAGE_TYPE = "openai_file"
ERROR_FILE_PROPERTY = "error_file_id"

_logger = get_logger("llm_gateway.openai.batch")

_STATUS_MAP = {
    "validating": BatchStatus.PROCESSING,
    "in_progress": BatchStatus.PROCESSING,
    "finalizing": BatchStatus.PROCESSING,
    "completed": BatchStatus.COMPLETED,
    "failed": BatchStatus.FAILED,
    "expired": BatchStatus.FAILED,
    "cancelling": BatchStatus.CANCELLED,
    "cancelled": BatchStatus.CANCELLED,
}


def build_batch_jsonl(items: Iterable[BatchRequestItem], target: ConfigTarget) -> bytes:
    """Render every item as one JSONL line; any mapping failure aborts the batch."""
    lines = []
    for item in items:
        line = {
            "custom_id": item.custom_id,
            "method": "POST",
            "url": OPENAI_BATCH_ENDPOINT,
            "body": build_params(item.options, target),
        }
        lines.append(json.dumps(line, ensure_ascii=False))
    return ("\n".join(lines) + "\n").encode("utf-8") if lines else b""


def map_batch_status(status: Any) -> BatchStatus:
    return _STATUS_MAP.get(str(status or ""), BatchStatus.PENDING)


def map_batch_job(batch: Any) -> BatchJob:
    """Map an OpenAI ``Batch`` to a :class:`BatchJob`."""
    counts = field_of(batch, "request_counts")
    errors = field_of(field_of(batch, "errors"), "data") or []
    properties = {}
    error_file = field_of(batch, "error_file_id")
    if error_file:
        properties[ERROR_FILE_PROPERTY] = error_file
    return BatchJob(
        id=field_of(batch, "id", "") or "",
        status=map_batch_status(field_of(batch, "status")),
        created_at=as_datetime(field_of(batch, "created_at")),
        completed_at=as_datetime(field_of(batch, "completed_at")),
        total_count=coerce_count(field_of(counts, "total")),
        done_count=coerce_count(field_of(counts, "completed")),
        failed_count=coerce_count(field_of(counts, "failed")),
        storage=BatchStorage(
            type=STORAGE_TYPE,
            input_ref=field_of(batch, "input_file_id", "") or "",
            output_ref=field_of(batch, "output_file_id", "") or "",
            properties=properties,
        ),
        error="; ".join(str(field_of(e, "message", "") or "") for e in errors),
        metadata=dict(field_of(batch, "metadata") or {}),
    )


def parse_output_lines(text: str) -> Iterator[BatchResult]:
    """Yield one :class:`BatchResult` per matchable JSONL line."""
    for line_no, raw_line in enumerate(text.splitlines(), start=1):
        line = raw_line.strip()
        if not line:
            continue
        try:
            record = json.loads(line)
        except ValueError as exc:
            _skip_line(line_no, f"invalid JSON: {exc}")
            continue
        custom_id = _custom_id(record)
        if not custom_id:
            _skip_line(line_no, "missing custom_id")
            continue
        yield _line_result(custom_id, record)


def _custom_id(record: Any) -> Optional[str]:
    if not isinstance(record, dict):
        return None
    value = record.get("custom_id")
    return str(value) if value else None


def _skip_line(line_no: int, reason: str) -> None:
    normalized_log_event(
        _logger,
        "batch.parse_error",
        LogContext(provider="openai"),
        phase="finalize",
        error_code="parse",
        line=line_no,
        error=reason,
        level=logging.WARNING,
    )


def _line_result(custom_id: str, record: Any) -> BatchResult:
    error = field_of(record, "error")
    if error:
        return BatchResult(custom_id=custom_id, error=str(field_of(error, "message", "") or error))
    response = field_of(record, "response")
    status = coerce_count(field_of(response, "status_code"))
    body = field_of(response, "body")
    if status >= 400:
        message = field_of(field_of(body, "error"), "message") or f"status {status}"
        return BatchResult(custom_id=custom_id, error=str(message))
    if not isinstance(body, dict):
        return BatchResult(custom_id=custom_id, error="missing completion body")
    return BatchResult(custom_id=custom_id, result=map_completion(body))


def file_text(content: Any) -> str:
    """Extract text from a ``files.content`` response (SDK object, bytes or str)."""
    if isinstance(content, bytes):
        return content.decode("utf-8")
    if isinstance(content, str):
        return content
    text = getattr(content, "text", None)
    if isinstance(text, str):
        return text
    raw = getattr(content, "content", b"")
    return raw.decode("utf-8") if isinstance(raw, bytes) else str(raw or "")


__all__ = [
    "STORAGE_TYPE",
    "ERROR_FILE_PROPERTY",
    "build_batch_jsonl",
    "map_batch_status",
    "map_batch_job",
    "parse_output_lines",
    "file_text",
]
