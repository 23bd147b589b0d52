"""Deterministic mock provider for offline tests and local development.

Purpose
-------
Implement the full ``LanguageModel`` and ``BatchCapableModel`` contracts
without network traffic. By default the model echoes the last user text.
Responses can be scripted per prompt from a JSON fixture catalog bundled
with the package (``fixtures/responses.json``) or from the target's
``properties["responses"]``, which take precedence.

Fixture entry fields
--------------------
``text``         response text (``echo: true`` replays the prompt instead)
``stream``       explicit list of stream deltas (defaults to 16-char chunks)
``tool_calls``   list of ``{"id", "name", "arguments"}``
``stop_reason``  unified stop reason (default ``end_turn``)
``error``        ``{"status": int, "message": str}`` raised as a vendor error

External dependencies
---------------------
Standard library only. Fixtures are loaded via ``importlib.resources``.

Batch semantics
---------------
Batches are held in memory by :class:`MockClient`. A job completes after
``properties["batch_polls_to_complete"]`` calls to ``get_batch_job``
(default ``0``: completed on submission).
"""

from __future__ import annotations

import json
import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone
from importlib import resources
from typing import Any, Dict, Iterator, List, Mapping, Optional

from ..base.cancellation import CancellationToken
from ..base.capabilities import ProviderCapability
from ..base.dto import ConfigTarget
from ..base.errors import ProviderSentinel
from ..base.model_base import BaseLanguageModel, require_target_fields
from ..base.models import (
    BatchJob,
    BatchRequest,
    BatchResult,
    BatchStatus,
    BatchStorage,
    ContentBlockType,
    GenerateTextOptions,
    GenerateTextResult,
    ListBatchOptions,
    Role,
    StopReason,
    ToolCall,
    Usage,
    new_tool_call_block,
    text_block,
)
from ..base.streaming import EventSink

PROVIDER_NAME = "mock"
STORAGE_TYPE = "mock_memory"
_FIXTURE_RESOURCE = "responses.json"
_CHUNK_SIZE = 16


class MockAPIError(Exception):
    """Scripted vendor failure carrying an HTTP-like status code."""

    def __init__(self, message: str, status_code: int) -> None:
        super().__init__(message)
        self.status_code = status_code


@dataclass
class FixtureResponse:
    """Resolved fixture entry for one prompt."""

    text: str
    stream: List[str]
    tool_calls: List[ToolCall]
    stop_reason: StopReason
    error: Optional[Mapping[str, Any]] = None
    prompt: str = ""


def load_fixture_catalog(resource: str = _FIXTURE_RESOURCE) -> Dict[str, Any]:
    """Load the JSON fixture catalog bundled with the mock provider."""
    package = "llm_gateway.mock.fixtures"
    data = resources.files(package).joinpath(resource).read_text(encoding="utf-8")
    return json.loads(data)


@dataclass
class _StoredBatch:
    job: BatchJob
    results: List[BatchResult]
    polls_remaining: int = 0


@dataclass
class MockClient:
    """In-memory stand-in for a vendor SDK client.

    ``calls`` records every request the model issued, which tests use to
    assert on outbound mapping.
    """

    responses: Dict[str, Any] = field(default_factory=dict)
    batch_polls_to_complete: int = 0
    calls: List[Dict[str, Any]] = field(default_factory=list)
    closed: bool = False
    _batches: Dict[str, _StoredBatch] = field(default_factory=dict)
    _lock: threading.Lock = field(default_factory=threading.Lock)

    def respond(self, request: Dict[str, Any]) -> FixtureResponse:
        """Resolve the fixture for ``request`` (raises scripted errors)."""
        with self._lock:
            self.calls.append(request)
        prompt = request.get("prompt", "")
        raw = (
            self.responses.get(prompt)
            or self.responses.get(prompt.lower())
            or self.responses.get("*")
            or {"echo": True}
        )
        entry = _fixture_from(raw, prompt)
        if entry.error:
            raise MockAPIError(
                str(entry.error.get("message", "mock failure")),
                int(entry.error.get("status", 500)),
            )
        return entry

    def close(self) -> None:
        self.closed = True

    # ---- batches ----
    def store_batch(self, job: BatchJob, results: List[BatchResult]) -> None:
        with self._lock:
            self._batches[job.id] = _StoredBatch(
                job=job, results=results, polls_remaining=self.batch_polls_to_complete
            )
            if self.batch_polls_to_complete <= 0:
                _complete(self._batches[job.id])

    def poll_batch(self, job_id: str) -> BatchJob:
        with self._lock:
            stored = self._stored(job_id)
            if stored.job.status is BatchStatus.PROCESSING:
                stored.polls_remaining -= 1
                if stored.polls_remaining <= 0:
                    _complete(stored)
            return stored.job

    def list_batches(self) -> List[BatchJob]:
        with self._lock:
            return [b.job for b in self._batches.values()]

    def batch_results(self, job_id: str) -> List[BatchResult]:
        with self._lock:
            return list(self._stored(job_id).results)

    def cancel_batch(self, job_id: str) -> None:
        with self._lock:
            stored = self._stored(job_id)
            if not stored.job.status.is_terminal:
                stored.job.status = BatchStatus.CANCELLED

    def _stored(self, job_id: str) -> _StoredBatch:
        stored = self._batches.get(job_id)
        if stored is None:
            raise MockAPIError(f"batch {job_id!r} not found", 404)
        return stored


class MockModel(BaseLanguageModel):
    """Offline ``LanguageModel`` with an in-memory batch implementation."""

    provider_name = PROVIDER_NAME
    capabilities = (
        ProviderCapability.TEXT_GENERATION,
        ProviderCapability.STREAMING,
        ProviderCapability.TOOL_CALLING,
        ProviderCapability.BATCH_PROCESSING,
    )
    generation_sentinel = ProviderSentinel.MOCK_GENERATION_FAILED
    stream_sentinel = ProviderSentinel.MOCK_STREAM_FAILED
    batch_sentinel = ProviderSentinel.MOCK_BATCH_FAILED

    def __init__(self, *, client: MockClient, target: ConfigTarget) -> None:
        super().__init__(client=client, target=target)
        self._batch_seq = 0
        self._seq_lock = threading.Lock()

    def _build_request(self, options: GenerateTextOptions) -> Dict[str, Any]:
        for msg in options.messages:
            for block in msg.content:
                block.validate()
        return {
            "model": self._model,
            "prompt": _last_user_text(options),
            "system": options.system,
            "messages": len(options.messages),
            "tools": [t.name for t in options.tools],
            "max_tokens": options.max_tokens,
        }

    def _invoke_generate(self, request: Dict[str, Any], timeout: Optional[float]) -> FixtureResponse:
        return self._client.respond(request)

    def _map_response(self, response: FixtureResponse) -> GenerateTextResult:
        content = [text_block(response.text)] if response.text else []
        content.extend(new_tool_call_block(c.id, c.name, c.arguments) for c in response.tool_calls)
        return GenerateTextResult(
            content=content,
            stop_reason=response.stop_reason,
            usage=_usage_for(response.prompt, response.text),
            model_id=self._model,
        )

    def _produce_stream(self, request: Dict[str, Any], sink: EventSink, timeout: Optional[float]) -> None:
        entry = self._client.respond(request)
        for delta in entry.stream:
            sink.raise_if_cancelled()
            sink.text(delta)
        for call in entry.tool_calls:
            sink.tool_call(call)
        sink.done(entry.stop_reason, _usage_for(entry.prompt, entry.text))

    # ---- batch protocol ----
    def submit_batch(self, request: BatchRequest) -> BatchJob:
        """Run every item synchronously and store the outcomes in memory."""
        requests = [(item.custom_id, self._build_request(item.options)) for item in request.items]
        with self._seq_lock:
            self._batch_seq += 1
            job_id = f"mock_batch_{self._batch_seq}"
        results = [self._run_item(custom_id, req) for custom_id, req in requests]
        job = BatchJob(
            id=job_id,
            status=BatchStatus.PROCESSING,
            created_at=datetime.now(timezone.utc),
            total_count=len(results),
            storage=BatchStorage(type=STORAGE_TYPE, properties={"batch_id": job_id}),
            metadata=dict(request.metadata),
        )
        self._batch_call("submit", lambda: self._client.store_batch(job, results), items=len(results))
        return job

    def _run_item(self, custom_id: str, request: Dict[str, Any]) -> BatchResult:
        try:
            entry = self._client.respond(request)
        except MockAPIError as exc:
            return BatchResult(custom_id=custom_id, error=str(exc))
        return BatchResult(custom_id=custom_id, result=self._map_response(entry))

    def get_batch_job(self, job_id: str) -> BatchJob:
        return self._batch_call("get", lambda: self._client.poll_batch(job_id), job_id=job_id)

    def list_batch_jobs(self, options: Optional[ListBatchOptions] = None) -> List[BatchJob]:
        jobs = self._batch_call("list", self._client.list_batches)
        if options is not None and options.after:
            ids = [j.id for j in jobs]
            jobs = jobs[ids.index(options.after) + 1 :] if options.after in ids else []
        if options is not None and options.limit > 0:
            jobs = jobs[: options.limit]
        return jobs

    def download_batch_results(
        self,
        job: BatchJob,
        *,
        token: Optional[CancellationToken] = None,
    ) -> Iterator[BatchResult]:
        self._require_completed(job)
        results = self._batch_call("download", lambda: self._client.batch_results(job.id), job_id=job.id)
        return self._guarded_results(iter(results), token)

    def cancel_batch_job(self, job_id: str) -> None:
        self._batch_call("cancel", lambda: self._client.cancel_batch(job_id), job_id=job_id)


class MockFactory:
    """Creates :class:`MockModel` instances; only ``model`` is required."""

    def get_provider(self) -> str:
        return PROVIDER_NAME

    def create_model(self, target: ConfigTarget) -> MockModel:
        require_target_fields(PROVIDER_NAME, target, "model")
        catalog = load_fixture_catalog()
        responses = dict(catalog.get("responses", {}))
        responses.update(target.properties.get("responses") or {})
        client = MockClient(
            responses=responses,
            batch_polls_to_complete=int(target.properties.get("batch_polls_to_complete", 0)),
        )
        return MockModel(client=client, target=target)


# ---------------------------------------------------------------------------
# Module-level helpers


def _complete(stored: _StoredBatch) -> None:
    job = stored.job
    job.status = BatchStatus.COMPLETED
    job.completed_at = datetime.now(timezone.utc)
    job.failed_count = sum(1 for r in stored.results if not r.ok)
    job.done_count = len(stored.results) - job.failed_count


def _fixture_from(raw: Any, prompt: str) -> FixtureResponse:
    if isinstance(raw, str):
        raw = {"text": raw}
    text = prompt if raw.get("echo") else str(raw.get("text", ""))
    stream = [str(s) for s in raw.get("stream", [])] or _chunk_text(text)
    tool_calls = [
        ToolCall(id=str(c.get("id", "")), name=str(c.get("name", "")), arguments=c.get("arguments"))
        for c in raw.get("tool_calls", [])
    ]
    default_reason = StopReason.TOOL_USE if tool_calls else StopReason.END_TURN
    return FixtureResponse(
        text=text,
        stream=stream,
        tool_calls=tool_calls,
        stop_reason=StopReason(raw.get("stop_reason", default_reason)),
        error=raw.get("error"),
        prompt=prompt,
    )


def _chunk_text(text: str, chunk_size: int = _CHUNK_SIZE) -> List[str]:
    """Split text into fixed-size chunks for deterministic streaming."""
    if not text:
        return []
    return [text[i : i + chunk_size] for i in range(0, len(text), chunk_size)]


def _last_user_text(options: GenerateTextOptions) -> str:
    for msg in reversed(options.messages):
        if Role(msg.role) is Role.USER:
            return "".join(
                b.text or "" for b in msg.content if ContentBlockType(b.type) is ContentBlockType.TEXT
            )
    return ""


def _usage_for(prompt: str, text: str) -> Usage:
    # Whitespace word counts stand in for a tokenizer.
    prompt_tokens = len(prompt.split())
    output = len(text.split())
    return Usage(input_tokens=prompt_tokens, output_tokens=output, total_tokens=prompt_tokens + output)


__all__ = [
    "MockClient",
    "MockModel",
    "MockFactory",
    "MockAPIError",
    "FixtureResponse",
    "load_fixture_catalog",
]
