"""Anthropic adapter.

This module implements the Anthropic provider integration on the
``anthropic`` SDK Messages API: ``client.messages.create`` for blocking and
streaming (``stream=True``) generation and ``client.messages.batches`` for the
batch protocol.

Key behaviors / architecture notes:
* Request/response mapping lives in :mod:`.mapping`; raw stream events are
  translated in :mod:`.stream_helpers`; batch mapping in :mod:`.batch`.
* The SDK client is created with ``max_retries=0``; the gateway never retries.
* ``max_tokens`` is mandatory for the Messages API and falls back to the
  target default, then ``ANTHROPIC_DEFAULT_MAX_TOKENS``.
* Audio and file blocks are not supported and are dropped during mapping.
"""

from __future__ import annotations

from typing import Any, Dict, Iterator, List, Optional

try:
    import anthropic  # type: ignore
except Exception:  # pragma: no cover
    anthropic = None  # type: ignore

from ..base.cancellation import CancellationToken
from ..base.capabilities import ProviderCapability
from ..base.dto import ConfigTarget
from ..base.errors import ProviderError, ProviderSentinel
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
from .batch import build_batch_requests, iter_batch_results, map_batch_job
from .mapping import build_params, map_response
from .stream_helpers import translate_events

PROVIDER_NAME = "anthropic"


class AnthropicModel(BaseLanguageModel):
    """``LanguageModel`` and ``BatchCapableModel`` backed by the Messages API."""

    provider_name = PROVIDER_NAME
    capabilities = (
        ProviderCapability.TEXT_GENERATION,
        ProviderCapability.STREAMING,
        ProviderCapability.TOOL_CALLING,
        ProviderCapability.VISION,
        ProviderCapability.BATCH_PROCESSING,
    )
    generation_sentinel = ProviderSentinel.ANTHROPIC_GENERATION_FAILED
    stream_sentinel = ProviderSentinel.ANTHROPIC_STREAM_FAILED
    batch_sentinel = ProviderSentinel.ANTHROPIC_BATCH_FAILED

    # ---- generation hooks ----
    def _build_request(self, options: GenerateTextOptions) -> Dict[str, Any]:
        return build_params(options, self._target)

    def _invoke_generate(self, request: Dict[str, Any], timeout: Optional[float]) -> Any:
        return self._client.messages.create(**with_timeout(request, timeout))

    def _map_response(self, response: Any) -> GenerateTextResult:
        return map_response(response)

    def _produce_stream(self, request: Dict[str, Any], sink: EventSink, timeout: Optional[float]) -> None:
        stream = self._client.messages.create(**with_timeout(request, timeout), stream=True)
        try:
            translate_events(stream, sink)
        finally:
            closer = getattr(stream, "close", None)
            if callable(closer):
                closer()

    # ---- batch protocol ----
    def submit_batch(self, request: BatchRequest) -> BatchJob:
        """Submit every item through the Message Batches API.

        All items are mapped before the vendor call so one invalid item
        rejects the whole submission.
        """
        requests = build_batch_requests(request.items, self._target)
        batch = self._batch_call(
            "submit",
            lambda: self._client.messages.batches.create(requests=requests),
            items=len(requests),
        )
        job = map_batch_job(batch)
        job.metadata = dict(request.metadata)
        return job

    def get_batch_job(self, job_id: str) -> BatchJob:
        batch = self._batch_call("get", lambda: self._client.messages.batches.retrieve(job_id), job_id=job_id)
        return map_batch_job(batch)

    def list_batch_jobs(self, options: Optional[ListBatchOptions] = None) -> List[BatchJob]:
        params: Dict[str, Any] = {}
        if options is not None:
            if options.limit > 0:
                params["limit"] = options.limit
            if options.after:
                params["after_id"] = options.after
        page = self._batch_call("list", lambda: self._client.messages.batches.list(**params))
        return [map_batch_job(batch) for batch in getattr(page, "data", page)]

    def download_batch_results(
        self,
        job: BatchJob,
        *,
        token: Optional[CancellationToken] = None,
    ) -> Iterator[BatchResult]:
        """Return a lazy iterator over per-item results of a completed job.

        Raises:
            BatchNotCompletedError: immediately, when ``job`` is not completed.
        """
        self._require_completed(job)
        entries = self._batch_call(
            "download", lambda: self._client.messages.batches.results(job.id), job_id=job.id
        )
        return self._guarded_results(iter_batch_results(entries), token)

    def cancel_batch_job(self, job_id: str) -> None:
        self._batch_call("cancel", lambda: self._client.messages.batches.cancel(job_id), job_id=job_id)


class AnthropicFactory:
    """Creates :class:`AnthropicModel` instances from config targets."""

    def get_provider(self) -> str:
        return PROVIDER_NAME

    def create_model(self, target: ConfigTarget) -> AnthropicModel:
        """Validate ``target`` and construct the SDK client.

        Raises:
            ConfigurationError: ``api_key`` or ``model`` is missing.
            ProviderError: the SDK is unavailable or client construction failed.
        """
        require_target_fields(PROVIDER_NAME, target, "api_key", "model")
        client = build_vendor_client(
            ProviderSentinel.ANTHROPIC_CLIENT_CREATION_FAILED, target, lambda: _build_client(target)
        )
        return AnthropicModel(client=client, target=target)


def _build_client(target: ConfigTarget) -> Any:
    if anthropic is None:
        raise ProviderError(
            sentinel=ProviderSentinel.ANTHROPIC_CLIENT_CREATION_FAILED,
            message="anthropic SDK not installed",
            provider=PROVIDER_NAME,
            model=target.model,
        )
    kwargs: Dict[str, Any] = {"api_key": target.api_key, "max_retries": 0}
    if target.base_url:
        kwargs["base_url"] = target.base_url
    if target.request_timeout:
        kwargs["timeout"] = target.request_timeout
    return anthropic.Anthropic(**kwargs)


__all__ = ["AnthropicModel", "AnthropicFactory", "PROVIDER_NAME"]
