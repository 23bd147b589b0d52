"""OpenAI provider adapter (Chat Completions + Batch API).

Key behaviors / architecture notes:
* Blocking and streaming generation both use ``client.chat.completions.create``;
  streaming adds ``stream=True`` and ``stream_options={"include_usage": True}``.
* Batch submission uploads a JSONL file (``purpose="batch"``) and creates a
  batch against ``/v1/chat/completions`` with a 24h completion window.
* The SDK client is created with ``max_retries=0``; the gateway never retries.
"""

from __future__ import annotations

from typing import Any, Dict, Iterator, List, Optional

try:
    from openai import OpenAI as _OpenAIClient  # type: ignore
except Exception:  # pragma: no cover - optional dependency
    _OpenAIClient = None  # type: ignore

from ..base.cancellation import CancellationToken
from ..base.capabilities import ProviderCapability
from ..base.dto import ConfigTarget
from ..base.errors import BatchMissingOutputError, ProviderError, ProviderSentinel
from ..base.model_base import (
    BaseLanguageModel,
    build_vendor_client,
    require_target_fields,
    with_timeout,
)
from ..base.models import (
    BatchJob,
    BatchRequest,
    BatchResult,
    GenerateTextOptions,
    GenerateTextResult,
    ListBatchOptions,
)
from ..base.streaming import EventSink
from ..config.defaults import OPENAI_BATCH_COMPLETION_WINDOW, OPENAI_BATCH_ENDPOINT
from .batch import ERROR_FILE_PROPERTY, build_batch_jsonl, file_text, map_batch_job, parse_output_lines
from .mapping import build_params, map_completion
from .streaming import translate_chunks

PROVIDER_NAME = "openai"
BATCH_INPUT_FILENAME = "batch_input.jsonl"


class OpenAIModel(BaseLanguageModel):
    """``LanguageModel`` and ``BatchCapableModel`` backed by Chat Completions."""

    provider_name = PROVIDER_NAME
    capabilities = tuple(ProviderCapability)
    generation_sentinel = ProviderSentinel.OPENAI_GENERATION_FAILED
    stream_sentinel = ProviderSentinel.OPENAI_STREAM_FAILED
    batch_sentinel = ProviderSentinel.OPENAI_BATCH_FAILED

    def _build_request(self, options: GenerateTextOptions) -> Dict[str, Any]:
        return build_params(options, self._target)

    def _invoke_generate(self, request: Dict[str, Any], timeout: Optional[float]) -> Any:
        return self._client.chat.completions.create(**with_timeout(request, timeout))

    def _map_response(self, response: Any) -> GenerateTextResult:
        return map_completion(response)

    def _produce_stream(self, request: Dict[str, Any], sink: EventSink, timeout: Optional[float]) -> None:
        stream = self._client.chat.completions.create(
            **with_timeout(request, timeout),
            stream=True,
            stream_options={"include_usage": True},
        )
        try:
            translate_chunks(stream, sink)
        finally:
            closer = getattr(stream, "close", None)
            if callable(closer):
                closer()

    # ---- batch protocol ----
    def submit_batch(self, request: BatchRequest) -> BatchJob:
        """Upload the JSONL input file and create the batch."""
        payload = build_batch_jsonl(request.items, self._target)
        uploaded = self._batch_call(
            "upload",
            lambda: self._client.files.create(file=(BATCH_INPUT_FILENAME, payload), purpose="batch"),
            items=len(request.items),
        )
        params: Dict[str, Any] = {
            "input_file_id": uploaded.id,
            "endpoint": OPENAI_BATCH_ENDPOINT,
            "completion_window": OPENAI_BATCH_COMPLETION_WINDOW,
        }
        if request.metadata:
            params["metadata"] = dict(request.metadata)
        batch = self._batch_call("submit", lambda: self._client.batches.create(**params))
        return map_batch_job(batch)

    def get_batch_job(self, job_id: str) -> BatchJob:
        batch = self._batch_call("get", lambda: self._client.batches.retrieve(job_id), job_id=job_id)
        return map_batch_job(batch)

    def list_batch_jobs(self, options: Optional[ListBatchOptions] = None) -> List[BatchJob]:
        params: Dict[str, Any] = {}
        if options is not None:
            if options.limit > 0:
                params["limit"] = options.limit
            if options.after:
                params["after"] = options.after
        page = self._batch_call("list", lambda: self._client.batches.list(**params))
        return [map_batch_job(batch) for batch in getattr(page, "data", page)]

    def download_batch_results(
        self,
        job: BatchJob,
        *,
        token: Optional[CancellationToken] = None,
    ) -> Iterator[BatchResult]:
        """Return a lazy iterator over the output file, then the error file.

        Raises:
            BatchNotCompletedError: ``job`` is not completed.
            BatchMissingOutputError: the completed job has no output file.
        """
        self._require_completed(job)
        storage = job.storage
        if storage is None or not (storage.output_ref or storage.properties.get(ERROR_FILE_PROPERTY)):
            raise BatchMissingOutputError(f"batch {job.id} has no output file")
        file_ids = [storage.output_ref, storage.properties.get(ERROR_FILE_PROPERTY, "")]
        return self._guarded_results(self._iter_files([f for f in file_ids if f]), token)

    def _iter_files(self, file_ids: List[str]) -> Iterator[BatchResult]:
        for file_id in file_ids:
            content = self._batch_call(
                "download", lambda: self._client.files.content(file_id), file_id=file_id
            )
            yield from parse_output_lines(file_text(content))

    def cancel_batch_job(self, job_id: str) -> None:
        self._batch_call("cancel", lambda: self._client.batches.cancel(job_id), job_id=job_id)


class OpenAIFactory:
    """Creates :class:`OpenAIModel` instances from config targets."""

    def get_provider(self) -> str:
        return PROVIDER_NAME

    def create_model(self, target: ConfigTarget) -> OpenAIModel:
        """Validate ``target`` and construct the SDK client.

        Raises:
            ConfigurationError: ``api_key`` or ``model`` is missing.
            ProviderError: the SDK is unavailable or client construction failed.
        """
        require_target_fields(PROVIDER_NAME, target, "api_key", "model")
        client = build_vendor_client(
            ProviderSentinel.OPENAI_CLIENT_CREATION_FAILED, target, lambda: _build_client(target)
        )
        return OpenAIModel(client=client, target=target)


def _build_client(target: ConfigTarget) -> Any:
    if _OpenAIClient is None:
        raise ProviderError(
            sentinel=ProviderSentinel.OPENAI_CLIENT_CREATION_FAILED,
            message="openai SDK not installed",
            provider=PROVIDER_NAME,
            model=target.model,
        )
    kwargs: Dict[str, Any] = {"api_key": target.api_key, "max_retries": 0}
    if target.base_url:
        kwargs["base_url"] = target.base_url
    if target.request_timeout:
        kwargs["timeout"] = target.request_timeout
    organization = target.properties.get("organization")
    if organization:
        kwargs["organization"] = organization
    return _OpenAIClient(**kwargs)


__all__ = ["OpenAIModel", "OpenAIFactory", "PROVIDER_NAME"]
