"""Shared ``LanguageModel`` scaffolding for provider adapters.

Purpose
-------
Every adapter follows the same lifecycle: map options to a vendor request,
issue one SDK call, map the response back, and wrap any failure into a
classified :class:`ProviderError`. This base class owns that lifecycle and
its structured logging so adapters only implement the vendor-specific hooks:

- ``_build_request(options)``: outbound mapping (may raise validation errors)
- ``_invoke_generate(request, timeout)``: single SDK call
- ``_map_response(response)``: inbound mapping
- ``_produce_stream(request, sink, timeout)``: streaming producer body

Failure modes
-------------
- Validation errors from outbound mapping propagate unwrapped (programmer
  errors, never classified).
- Everything raised by the SDK call or inbound mapping is classified with the
  adapter's generation sentinel. No retries are attempted.
"""
from __future__ import annotations

import threading
import time
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple, TypeVar

from .cancellation import CancellationToken
from .capabilities import ProviderCapability
from .dto import ConfigTarget
from .errors import BatchNotCompletedError, ConfigurationError, ProviderSentinel, classify_and_wrap
from .logging import LogContext, get_logger, normalized_log_event
from .models import BatchJob, BatchStatus, GenerateTextOptions, GenerateTextResult
from .streaming import EventSink, StreamIterator, start_stream

T = TypeVar("T")


class BaseLanguageModel:
    """Template for adapters implementing :class:`LanguageModel`."""

    provider_name: str = ""
    capabilities: Tuple[ProviderCapability, ...] = ()
    generation_sentinel: ProviderSentinel
    stream_sentinel: ProviderSentinel
    batch_sentinel: Optional[ProviderSentinel] = None

    def __init__(self, *, client: Any, target: ConfigTarget) -> None:
        self._client = client
        self._target = target
        self._model = target.model or ""
        self._closed = False
        self._close_lock = threading.Lock()
        self._logger = get_logger(f"llm_gateway.{self.provider_name}")

    # ---- introspection ----
    def get_capabilities(self) -> List[ProviderCapability]:
        return list(self.capabilities)

    def get_provider(self) -> str:
        return self.provider_name

    def get_model_id(self) -> str:
        return self._model

    def get_raw_client(self) -> Any:
        return self._client

    @property
    def target(self) -> ConfigTarget:
        return self._target

    @property
    def closed(self) -> bool:
        return self._closed

    def _log_ctx(self) -> LogContext:
        return LogContext(provider=self.provider_name, model=self._model)

    # ---- lifecycle ----
    def close(self) -> None:
        """Release the vendor client exactly once."""
        with self._close_lock:
            if self._closed:
                return
            self._closed = True
        closer = getattr(self._client, "close", None)
        if callable(closer):
            closer()

    # ---- generation ----
    def generate_text(
        self,
        options: GenerateTextOptions,
        *,
        token: Optional[CancellationToken] = None,
    ) -> GenerateTextResult:
        """Run one blocking generation.

        Raises:
            ProviderError: classified failure (sentinel, optional category).
            InvalidContentBlockError: a content block fails validation.
        """
        request = self._build_request(options)
        ctx = self._log_ctx()
        normalized_log_event(
            self._logger,
            "chat.start",
            ctx,
            phase="start",
            messages=len(options.messages),
            has_tools=bool(options.tools),
            has_schema=options.response_format is not None,
            max_tokens=options.max_tokens or None,
        )
        t0 = time.perf_counter()
        try:
            if token is not None:
                token.raise_if_cancelled()
            response = self._invoke_generate(request, _timeout_from(token))
            result = self._map_response(response)
        except Exception as exc:
            err = classify_and_wrap(
                self.generation_sentinel, exc, provider=self.provider_name, model=self._model, token=token
            )
            normalized_log_event(
                self._logger,
                "chat.error",
                ctx,
                phase="finalize",
                error_code=err.category.value if err.category else "unclassified",
                error=str(err),
            )
            if err is exc:
                raise
            raise err from exc
        result.model_id = result.model_id or self._model
        result.raw_request = request
        result.raw_response = response
        normalized_log_event(
            self._logger,
            "chat.end",
            ctx,
            phase="finalize",
            emitted=True,
            tokens=result.usage,
            stop_reason=result.stop_reason.value if result.stop_reason else None,
            latency_ms=(time.perf_counter() - t0) * 1000.0,
        )
        return result

    def stream_text(
        self,
        options: GenerateTextOptions,
        *,
        token: Optional[CancellationToken] = None,
    ) -> StreamIterator:
        """Start a streaming generation and return its iterator immediately.

        Outbound mapping runs synchronously so invalid input raises here; all
        vendor failures surface through the iterator's latched error.
        """
        request = self._build_request(options)
        timeout = _timeout_from(token)
        return start_stream(
            lambda sink: self._produce_stream(request, sink, timeout),
            sentinel=self.stream_sentinel,
            provider=self.provider_name,
            model=self._model,
            token=token,
        )

    # ---- batch plumbing ----
    def _batch_call(self, op: str, call: Callable[[], T], **fields: Any) -> T:
        """Run one vendor batch API call with ``batch.*`` logging.

        Failures are classified with :attr:`batch_sentinel`.
        """
        ctx = self._log_ctx()
        normalized_log_event(self._logger, f"batch.{op}", ctx, phase="start", **fields)
        try:
            out = call()
        except Exception as exc:
            err = classify_and_wrap(
                self.batch_sentinel or self.generation_sentinel,
                exc,
                provider=self.provider_name,
                model=self._model,
            )
            normalized_log_event(
                self._logger,
                "batch.error",
                ctx,
                phase="finalize",
                error_code=err.category.value if err.category else "unclassified",
                op=op,
                error=str(err),
            )
            if err is exc:
                raise
            raise err from exc
        normalized_log_event(self._logger, f"batch.{op}", ctx, phase="finalize", emitted=True)
        return out

    @staticmethod
    def _require_completed(job: BatchJob) -> None:
        """Reject downloads for jobs that have not reached ``completed``."""
        if BatchStatus(job.status) is not BatchStatus.COMPLETED:
            raise BatchNotCompletedError(
                f"batch {job.id} is {BatchStatus(job.status).value}; results are only available once completed"
            )

    def _guarded_results(
        self, results: Iterator[T], token: Optional[CancellationToken] = None
    ) -> Iterator[T]:
        """Yield from a lazy vendor result stream, classifying mid-stream failures."""
        try:
            for item in results:
                if token is not None:
                    token.raise_if_cancelled()
                yield item
        except Exception as exc:
            err = classify_and_wrap(
                self.batch_sentinel or self.generation_sentinel,
                exc,
                provider=self.provider_name,
                model=self._model,
                token=token,
            )
            if err is exc:
                raise
            raise err from exc

    # ---- adapter hooks ----
    def _build_request(self, options: GenerateTextOptions) -> Dict[str, Any]:  # pragma: no cover - abstract
        raise NotImplementedError

    def _invoke_generate(self, request: Dict[str, Any], timeout: Optional[float]) -> Any:  # pragma: no cover - abstract
        raise NotImplementedError

    def _map_response(self, response: Any) -> GenerateTextResult:  # pragma: no cover - abstract
        raise NotImplementedError

    def _produce_stream(  # pragma: no cover - abstract
        self, request: Dict[str, Any], sink: EventSink, timeout: Optional[float]
    ) -> None:
        raise NotImplementedError


def _timeout_from(token: Optional[CancellationToken]) -> Optional[float]:
    """Per-call timeout derived from the token's deadline, if it has one."""
    if token is None:
        return None
    return token.remaining()


def with_timeout(request: Dict[str, Any], timeout: Optional[float]) -> Dict[str, Any]:
    """Return SDK call kwargs with a per-request ``timeout`` when one applies."""
    if timeout is None:
        return request
    return {**request, "timeout": timeout}


def require_target_fields(provider: str, target: ConfigTarget, *fields: str) -> None:
    """Raise :class:`ConfigurationError` for the first empty required field."""
    for name in fields:
        value = getattr(target, name, None)
        if value is None or (isinstance(value, str) and not value.strip()):
            raise ConfigurationError(provider, name)


def build_vendor_client(
    sentinel: ProviderSentinel,
    target: ConfigTarget,
    build: Callable[[], T],
) -> T:
    """Construct a vendor SDK client, classifying construction failures."""
    try:
        return build()
    except Exception as exc:
        err = classify_and_wrap(sentinel, exc, provider=target.provider, model=target.model)
        if err is exc:
            raise
        raise err from exc


__all__ = ["BaseLanguageModel", "require_target_fields", "build_vendor_client", "with_timeout"]
