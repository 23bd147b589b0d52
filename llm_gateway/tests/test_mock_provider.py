"""Unit tests covering the deterministic mock provider fixtures and batch lifecycle."""

from __future__ import annotations

from typing import List

import pytest

from llm_gateway.base.cancellation import CancellationToken
from llm_gateway.base.dto import ConfigTarget
from llm_gateway.base.errors import (
    BatchNotCompletedError,
    ConfigurationError,
    ErrorCategory,
    ProviderError,
    ProviderSentinel,
    error_is,
)
from llm_gateway.base.models import (
    BatchJob,
    BatchRequest,
    BatchRequestItem,
    BatchStatus,
    ContentBlock,
    ContentBlockType,
    GenerateTextOptions,
    ListBatchOptions,
    Message,
    StopReason,
    StreamEventType,
    ToolDefinition,
    new_text_message,
)
from llm_gateway.mock import MockFactory


def _options(prompt: str, **kwargs) -> GenerateTextOptions:
    """Helper to construct minimal options with one user message."""

    return GenerateTextOptions(messages=[new_text_message("user", prompt)], **kwargs)


def _scripted(responses, **props):
    return MockFactory().create_model(
        ConfigTarget(provider="mock", model="mock-echo", properties={"responses": responses, **props})
    )


class TestMockGeneration:
    """Verify generate and stream behaviour for the mock provider."""

    def test_echo_by_default(self, mock_model) -> None:
        result = mock_model.generate_text(_options("hello there"))
        assert result.text() == "hello there"  # nosec B101 - pytest assert in tests
        assert result.stop_reason is StopReason.END_TURN  # nosec B101 - pytest assert in tests
        assert result.usage.input_tokens == 2 and result.usage.output_tokens == 2  # nosec B101
        assert result.model_id == "mock-echo"  # nosec B101 - pytest assert in tests
        assert result.raw_request["prompt"] == "hello there"  # nosec B101 - pytest assert in tests

    def test_catalog_fixture_and_tool_calls(self, mock_model) -> None:
        assert mock_model.generate_text(_options("ping")).text() == "pong"  # nosec B101
        result = mock_model.generate_text(
            _options("weather", tools=[ToolDefinition(name="get_weather", parameters={"type": "object"})])
        )
        calls = result.tool_calls()
        assert calls[0].name == "get_weather"  # nosec B101 - pytest assert in tests
        assert calls[0].arguments_dict() == {"city": "Paris"}  # nosec B101 - pytest assert in tests
        assert result.stop_reason is StopReason.TOOL_USE  # nosec B101 - pytest assert in tests
        assert mock_model.get_raw_client().calls[-1]["tools"] == ["get_weather"]  # nosec B101

    def test_scripted_error_is_classified(self) -> None:
        model = _scripted({"slow down": {"error": {"status": 429, "message": "too many"}}})
        with pytest.raises(ProviderError) as exc_info:
            model.generate_text(_options("slow down"))
        err = exc_info.value
        assert error_is(err, ProviderSentinel.MOCK_GENERATION_FAILED)  # nosec B101
        assert error_is(err, ErrorCategory.RATE_LIMITED) and err.retryable  # nosec B101

    def test_invalid_block_raises_before_any_call(self, mock_model) -> None:
        bad = Message(role="user", content=[ContentBlock(type=ContentBlockType.IMAGE, text="oops")])
        with pytest.raises(ValueError):
            mock_model.generate_text(GenerateTextOptions(messages=[bad]))
        assert mock_model.get_raw_client().calls == []  # nosec B101 - pytest assert in tests

    def test_cancelled_token_fails_generation(self, mock_model) -> None:
        token = CancellationToken()
        token.cancel("nope")
        with pytest.raises(ProviderError) as exc_info:
            mock_model.generate_text(_options("hi"), token=token)
        assert error_is(exc_info.value, ErrorCategory.SERVICE_UNAVAILABLE)  # nosec B101

    def test_stream_emits_chunks_then_done(self) -> None:
        model = _scripted({"story": {"stream": ["Once ", "upon ", "a time"]}})
        it = model.stream_text(_options("story"))
        events = list(it)
        deltas: List[str] = [e.text_delta for e in events if e.type == StreamEventType.CONTENT_DELTA]
        assert deltas == ["Once ", "upon ", "a time"]  # nosec B101 - pytest assert in tests
        assert events[-1].type == StreamEventType.MESSAGE_DONE  # nosec B101 - pytest assert in tests
        assert it.err() is None  # nosec B101 - pytest assert in tests

    def test_stream_collect_includes_tool_calls(self, mock_model) -> None:
        result = mock_model.stream_text(_options("weather")).collect()
        assert [c.name for c in result.tool_calls()] == ["get_weather"]  # nosec B101
        assert result.stop_reason is StopReason.TOOL_USE  # nosec B101 - pytest assert in tests

    def test_stream_error_is_latched(self) -> None:
        model = _scripted({"*": {"error": {"status": 401, "message": "bad key"}}})
        it = model.stream_text(_options("anything"))
        assert it.next() is False  # nosec B101 - pytest assert in tests
        assert error_is(it.err(), ErrorCategory.AUTH_FAILED)  # nosec B101 - pytest assert in tests
        assert error_is(it.err(), ProviderSentinel.MOCK_STREAM_FAILED)  # nosec B101

    def test_factory_requires_model(self) -> None:
        with pytest.raises(ConfigurationError):
            MockFactory().create_model(ConfigTarget(provider="mock"))

    def test_close_is_idempotent(self, mock_model) -> None:
        mock_model.close()
        mock_model.close()
        assert mock_model.closed and mock_model.get_raw_client().closed  # nosec B101


class TestMockBatch:
    """Batch lifecycle: submit, poll, list, download, cancel."""

    def _request(self) -> BatchRequest:
        return BatchRequest(
            items=[
                BatchRequestItem(custom_id="a", options=_options("ping")),
                BatchRequestItem(custom_id="b", options=_options("boom")),
            ],
            metadata={"run": "nightly"},
        )

    def test_lifecycle_with_polling(self) -> None:
        model = _scripted({"boom": {"error": {"status": 500, "message": "exploded"}}}, batch_polls_to_complete=2)
        job = model.submit_batch(self._request())
        assert job.status is BatchStatus.PROCESSING and job.total_count == 2  # nosec B101
        assert job.metadata == {"run": "nightly"}  # nosec B101 - pytest assert in tests

        with pytest.raises(BatchNotCompletedError):
            model.download_batch_results(job)

        assert model.get_batch_job(job.id).status is BatchStatus.PROCESSING  # nosec B101
        done = model.get_batch_job(job.id)
        assert done.status is BatchStatus.COMPLETED  # nosec B101 - pytest assert in tests
        assert done.done_count == 1 and done.failed_count == 1  # nosec B101

        results = {r.custom_id: r for r in model.download_batch_results(done)}
        assert results["a"].ok and results["a"].result.text() == "pong"  # nosec B101
        assert not results["b"].ok and "exploded" in results["b"].error  # nosec B101

    def test_list_pagination_and_cancel(self) -> None:
        model = _scripted({}, batch_polls_to_complete=5)
        ids = [model.submit_batch(BatchRequest(items=[BatchRequestItem("x", _options("hi"))])).id for _ in range(3)]
        listed = model.list_batch_jobs(ListBatchOptions(limit=1, after=ids[0]))
        assert [j.id for j in listed] == [ids[1]]  # nosec B101 - pytest assert in tests

        model.cancel_batch_job(ids[2])
        assert model.get_batch_job(ids[2]).status is BatchStatus.CANCELLED  # nosec B101

    def test_unknown_batch_is_classified(self, mock_model) -> None:
        with pytest.raises(ProviderError) as exc_info:
            mock_model.get_batch_job("missing")
        assert error_is(exc_info.value, ProviderSentinel.MOCK_BATCH_FAILED)  # nosec B101
        assert exc_info.value.category is None  # nosec B101 - pytest assert in tests

    def test_download_rejects_failed_job(self, mock_model) -> None:
        with pytest.raises(BatchNotCompletedError):
            mock_model.download_batch_results(BatchJob(id="x", status=BatchStatus.FAILED))
