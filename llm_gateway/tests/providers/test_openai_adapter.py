"""OpenAI adapter tests using a fake SDK client.

Covers Chat Completions request mapping (roles, multimodal parts, tools,
structured output, reasoning effort), streaming chunk translation, and the
JSONL-file batch protocol.
"""
from __future__ import annotations

import json
import logging
from types import SimpleNamespace
from typing import Any, Dict, List

import pytest

from llm_gateway.base.dto import ConfigTarget
from llm_gateway.base.errors import (
    BatchMissingOutputError,
    ConfigurationError,
    ErrorCategory,
    IncompleteToolCallError,
    ProviderError,
    ProviderSentinel,
    error_is,
)
from llm_gateway.base.models import (
    AudioPart,
    BatchJob,
    BatchRequest,
    BatchRequestItem,
    BatchStatus,
    BatchStorage,
    ContentBlock,
    ContentBlockType,
    GenerateTextOptions,
    ImageDetail,
    ListBatchOptions,
    Message,
    ResponseFormat,
    StopReason,
    StreamEventType,
    ToolChoice,
    ToolDefinition,
    new_image_message,
    new_text_message,
    new_tool_call_block,
    new_tool_result_block,
    text_block,
)
from llm_gateway.openai import OpenAIFactory, OpenAIModel
from llm_gateway.openai import client as openai_client
from llm_gateway.openai import batch as openai_batch
from llm_gateway.openai.batch import map_batch_job, parse_output_lines
from llm_gateway.openai.mapping import map_reasoning_effort


class _RateLimitError(Exception):
    status_code = 429


class _FakeCompletions:
    def __init__(self) -> None:
        self.calls: List[Dict[str, Any]] = []
        self.response: Any = None
        self.chunks: List[Dict[str, Any]] = []
        self.error: Exception | None = None

    def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        if kwargs.get("stream"):
            return iter(self.chunks)
        return self.response


class _FakeFiles:
    def __init__(self) -> None:
        self.uploads: List[Dict[str, Any]] = []
        self.contents: Dict[str, bytes] = {}

    def create(self, **kwargs):
        self.uploads.append(kwargs)
        return SimpleNamespace(id="file-in")

    def content(self, file_id):
        return SimpleNamespace(text=self.contents[file_id].decode("utf-8"))


class _FakeBatches:
    def __init__(self) -> None:
        self.calls: List[tuple] = []
        self.batch: Dict[str, Any] = {
            "id": "batch_1",
            "status": "validating",
            "input_file_id": "file-in",
            "created_at": 1735689600,
            "request_counts": {"total": 2, "completed": 0, "failed": 0},
        }

    def create(self, **kwargs):
        self.calls.append(("create", kwargs))
        return {**self.batch, "metadata": kwargs.get("metadata")}

    def retrieve(self, batch_id):
        self.calls.append(("retrieve", batch_id))
        return self.batch

    def list(self, **kwargs):
        self.calls.append(("list", kwargs))
        return SimpleNamespace(data=[self.batch])

    def cancel(self, batch_id):
        self.calls.append(("cancel", batch_id))


class _FakeClient:
    def __init__(self) -> None:
        self.chat = SimpleNamespace(completions=_FakeCompletions())
        self.files = _FakeFiles()
        self.batches = _FakeBatches()


def _model(**target_fields) -> tuple[OpenAIModel, _FakeClient]:
    fake = _FakeClient()
    target = ConfigTarget(provider="openai", api_key="k", model="gpt-test", **target_fields)
    return OpenAIModel(client=fake, target=target), fake


def _completion(**message) -> Dict[str, Any]:
    return {
        "model": "gpt-test-0001",
        "choices": [{"finish_reason": "stop", "message": {"content": "Hi!", **message}}],
        "usage": {"prompt_tokens": 4, "completion_tokens": 3, "total_tokens": 7},
    }


def _user(prompt: str) -> GenerateTextOptions:
    return GenerateTextOptions(messages=[new_text_message("user", prompt)])


def test_generate_maps_roles_and_parameters():
    model, fake = _model(max_tokens=100)
    fake.chat.completions.response = _completion()
    opts = GenerateTextOptions(
        system="stay factual",
        messages=[
            new_text_message("system", "extra rules"),
            new_text_message("user", "Hello"),
            Message(role="assistant", content=[text_block("calling"), new_tool_call_block("call_1", "lookup", {"q": 1})]),
            Message(role="tool", content=[new_tool_result_block("call_1", "found")]),
        ],
        tools=[ToolDefinition(name="lookup", description="search", parameters={"type": "object"})],
        tool_choice=ToolChoice.AUTO,
        temperature=0.0,
        stop_words=["###"],
        extensions={"openai": {"seed": 11}},
    )
    result = model.generate_text(opts)

    sent = fake.chat.completions.calls[-1]
    assert [m["role"] for m in sent["messages"]] == ["developer", "developer", "user", "assistant", "tool"]  # nosec B101
    assert sent["messages"][2]["content"] == "Hello"  # nosec B101 - pytest assert in tests
    assistant = sent["messages"][3]
    assert assistant["content"] == "calling"  # nosec B101 - pytest assert in tests
    assert assistant["tool_calls"][0]["function"] == {"name": "lookup", "arguments": '{"q": 1}'}  # nosec B101
    assert sent["messages"][4] == {"role": "tool", "tool_call_id": "call_1", "content": "found"}  # nosec B101
    assert sent["tools"][0]["function"]["parameters"] == {"type": "object"}  # nosec B101
    assert sent["tool_choice"] == "auto" and sent["temperature"] == 0.0  # nosec B101
    assert sent["max_completion_tokens"] == 100 and sent["stop"] == ["###"]  # nosec B101
    assert sent["seed"] == 11  # nosec B101 - pytest assert in tests

    assert result.text() == "Hi!" and result.stop_reason is StopReason.END_TURN  # nosec B101
    assert result.usage.total_tokens == 7 and result.model_id == "gpt-test-0001"  # nosec B101


def test_structured_output_and_reasoning_effort():
    model, fake = _model()
    fake.chat.completions.response = _completion()
    model.generate_text(
        GenerateTextOptions(
            messages=[new_text_message("user", "json please")],
            response_format=ResponseFormat(type="json_schema", json_schema='{"type": "object"}'),
            thinking_budget=5000,
        )
    )
    sent = fake.chat.completions.calls[-1]
    expected_format = {
        "type": "json_schema",
        "json_schema": {"name": "response", "schema": {"type": "object"}, "strict": True},
    }
    assert sent["response_format"] == expected_format  # nosec B101 - pytest assert in tests
    assert sent["reasoning_effort"] == "medium"  # nosec B101 - pytest assert in tests
    assert "max_completion_tokens" not in sent  # nosec B101 - pytest assert in tests


@pytest.mark.parametrize("budget, effort", [(0, "low"), (1000, "low"), (1001, "medium"), (10000, "high")])
def test_reasoning_effort_thresholds(budget, effort):
    assert map_reasoning_effort(budget) == effort  # nosec B101 - pytest assert in tests


def test_multimodal_user_parts():
    model, fake = _model()
    fake.chat.completions.response = _completion()
    image = new_image_message("user", "https://x/cat.png", detail=ImageDetail.HIGH)
    image.content.insert(0, text_block("what is this?"))
    audio = Message(
        role="user",
        content=[ContentBlock(type=ContentBlockType.AUDIO, audio=AudioPart(data=b"RIFF", mime_type="audio/wav"))],
    )
    model.generate_text(GenerateTextOptions(messages=[image, audio]))
    sent = fake.chat.completions.calls[-1]["messages"]
    assert sent[0]["content"][0] == {"type": "text", "text": "what is this?"}  # nosec B101
    assert sent[0]["content"][1] == {"type": "image_url", "image_url": {"url": "https://x/cat.png", "detail": "high"}}  # nosec B101
    assert sent[1]["content"][0] == {"type": "input_audio", "input_audio": {"data": "UklGRg==", "format": "wav"}}  # nosec B101


def test_tool_call_response_mapping():
    model, fake = _model()
    fake.chat.completions.response = {
        "choices": [
            {
                "finish_reason": "tool_calls",
                "message": {
                    "content": None,
                    "tool_calls": [{"id": "call_7", "function": {"name": "calc", "arguments": '{"x": 2}'}}],
                },
            }
        ],
    }
    result = model.generate_text(_user("compute"))
    assert result.content[0].type == ContentBlockType.TOOL_CALL  # nosec B101 - pytest assert in tests
    assert result.tool_calls()[0].arguments_dict() == {"x": 2}  # nosec B101 - pytest assert in tests
    assert result.stop_reason is StopReason.TOOL_USE  # nosec B101 - pytest assert in tests
    assert result.model_id == "gpt-test"  # nosec B101 - pytest assert in tests


def test_vendor_error_classified_as_rate_limited():
    model, fake = _model()
    fake.chat.completions.error = _RateLimitError("slow down")
    with pytest.raises(ProviderError) as exc_info:
        model.generate_text(_user("x"))
    assert error_is(exc_info.value, ProviderSentinel.OPENAI_GENERATION_FAILED)  # nosec B101
    assert error_is(exc_info.value, ErrorCategory.RATE_LIMITED)  # nosec B101 - pytest assert in tests


def test_stream_accumulates_tool_call_fragments_and_usage():
    model, fake = _model()
    fake.chat.completions.chunks = [
        {"choices": [{"delta": {"content": "Sure, "}}]},
        {"choices": [{"delta": {"content": "checking."}}]},
        {"choices": [{"delta": {"tool_calls": [{"index": 0, "id": "call_1", "function": {"name": "weather", "arguments": '{"ci'}}]}}]},
        {"choices": [{"delta": {"tool_calls": [{"index": 0, "function": {"arguments": 'ty": "Oslo"}'}}]}}]},
        {"choices": [{"delta": {}, "finish_reason": "tool_calls"}]},
        {"choices": [], "usage": {"prompt_tokens": 5, "completion_tokens": 6, "total_tokens": 11}},
    ]
    result = model.stream_text(_user("weather")).collect()
    sent = fake.chat.completions.calls[-1]
    assert sent["stream"] is True and sent["stream_options"] == {"include_usage": True}  # nosec B101
    assert result.text() == "Sure, checking."  # nosec B101 - pytest assert in tests
    call = result.tool_calls()[0]
    assert (call.id, call.name) == ("call_1", "weather")  # nosec B101 - pytest assert in tests
    assert call.arguments_dict() == {"city": "Oslo"}  # nosec B101 - pytest assert in tests
    assert result.stop_reason is StopReason.TOOL_USE and result.usage.total_tokens == 11  # nosec B101


def test_batch_submit_uploads_jsonl_then_creates_batch():
    model, fake = _model()
    request = BatchRequest(
        items=[BatchRequestItem("r1", _user("one")), BatchRequestItem("r2", _user("two"))],
        metadata={"job": "nightly"},
    )
    job = model.submit_batch(request)

    upload = fake.files.uploads[0]
    assert upload["purpose"] == "batch"  # nosec B101 - pytest assert in tests
    filename, payload = upload["file"]
    lines = [json.loads(line) for line in payload.decode("utf-8").splitlines()]
    assert filename == "batch_input.jsonl" and [line["custom_id"] for line in lines] == ["r1", "r2"]  # nosec B101
    assert lines[0]["method"] == "POST" and lines[0]["url"] == "/v1/chat/completions"  # nosec B101
    assert lines[0]["body"]["model"] == "gpt-test"  # nosec B101 - pytest assert in tests

    kind, params = fake.batches.calls[0]
    assert kind == "create" and params["input_file_id"] == "file-in"  # nosec B101
    assert params["completion_window"] == "24h" and params["metadata"] == {"job": "nightly"}  # nosec B101
    assert job.status is BatchStatus.PROCESSING and job.total_count == 2  # nosec B101
    assert job.created_at is not None and job.created_at.year == 2025  # nosec B101


def test_batch_list_get_cancel_use_vendor_paging():
    model, fake = _model()
    jobs = model.list_batch_jobs(ListBatchOptions(limit=3, after="batch_0"))
    assert [j.id for j in jobs] == ["batch_1"]  # nosec B101 - pytest assert in tests
    assert fake.batches.calls[-1] == ("list", {"limit": 3, "after": "batch_0"})  # nosec B101
    assert model.get_batch_job("batch_1").storage.input_ref == "file-in"  # nosec B101
    model.cancel_batch_job("batch_1")
    assert fake.batches.calls[-1] == ("cancel", "batch_1")  # nosec B101 - pytest assert in tests


@pytest.mark.parametrize(
    "vendor, unified",
    [
        ("validating", BatchStatus.PROCESSING),
        ("finalizing", BatchStatus.PROCESSING),
        ("completed", BatchStatus.COMPLETED),
        ("expired", BatchStatus.FAILED),
        ("cancelling", BatchStatus.CANCELLED),
        ("brand_new", BatchStatus.PENDING),
    ],
)
def test_batch_status_mapping(vendor, unified):
    assert map_batch_job({"id": "b", "status": vendor}).status is unified  # nosec B101


def test_batch_job_collects_errors_and_error_file():
    job = map_batch_job(
        {
            "id": "b",
            "status": "failed",
            "error_file_id": "file-err",
            "errors": {"data": [{"message": "bad line 1"}, {"message": "bad line 2"}]},
        }
    )
    assert job.error == "bad line 1; bad line 2"  # nosec B101 - pytest assert in tests
    assert job.storage.properties == {"error_file_id": "file-err"}  # nosec B101


def test_parse_output_lines_isolates_failures():
    text = "\n".join(
        [
            json.dumps({"custom_id": "ok", "response": {"status_code": 200, "body": _completion()}}),
            json.dumps({"custom_id": "http", "response": {"status_code": 400, "body": {"error": {"message": "bad model"}}}}),
            json.dumps({"custom_id": "err", "error": {"message": "expired"}}),
            "",
            json.dumps({"custom_id": "nobody", "response": {"status_code": 200}}),
        ]
    )
    results = list(parse_output_lines(text))
    assert [r.custom_id for r in results] == ["ok", "http", "err", "nobody"]  # nosec B101
    assert results[0].ok and results[0].result.text() == "Hi!"  # nosec B101
    assert results[1].error == "bad model" and results[2].error == "expired"  # nosec B101
    assert results[3].error == "missing completion body"  # nosec B101 - pytest assert in tests


class _ListHandler(logging.Handler):
    def __init__(self) -> None:
        super().__init__(level=logging.DEBUG)
        self.records: List[logging.LogRecord] = []

    def emit(self, record: logging.LogRecord) -> None:
        self.records.append(record)


def test_parse_output_lines_skips_unmatchable_lines_with_warning(monkeypatch):
    handler = _ListHandler()
    logger = logging.getLogger("tests.openai.batch")
    logger.handlers[:] = [handler]
    logger.propagate = False
    logger.setLevel(logging.DEBUG)
    monkeypatch.setattr(openai_batch, "_logger", logger)
    text = "\n".join(
        [
            "{not json",
            json.dumps({"response": {"status_code": 200, "body": _completion()}}),
            json.dumps({"custom_id": "kept", "error": {"message": "expired"}}),
        ]
    )
    results = list(parse_output_lines(text))
    records = handler.records
    assert [r.custom_id for r in results] == ["kept"]  # nosec B101 - pytest assert in tests
    payloads = [json.loads(r.getMessage()) for r in records]
    assert [p["line"] for p in payloads] == [1, 2]  # nosec B101 - pytest assert in tests
    assert all(p["event"] == "batch.parse_error" and p["error_code"] == "parse" for p in payloads)  # nosec B101
    assert all(r.levelno == logging.WARNING for r in records)  # nosec B101 - pytest assert in tests


def test_batch_download_reads_output_then_error_file():
    model, fake = _model()
    fake.files.contents = {
        "file-out": (json.dumps({"custom_id": "a", "response": {"status_code": 200, "body": _completion()}}) + "\n").encode(),
        "file-err": (json.dumps({"custom_id": "b", "error": {"message": "timeout"}}) + "\n").encode(),
    }
    job = BatchJob(
        id="batch_1",
        status=BatchStatus.COMPLETED,
        storage=BatchStorage(type="openai_file", output_ref="file-out", properties={"error_file_id": "file-err"}),
    )
    results = list(model.download_batch_results(job))
    assert [(r.custom_id, r.ok) for r in results] == [("a", True), ("b", False)]  # nosec B101


def test_batch_download_without_output_file():
    model, _ = _model()
    job = BatchJob(id="batch_1", status=BatchStatus.COMPLETED, storage=BatchStorage(type="openai_file"))
    with pytest.raises(BatchMissingOutputError):
        model.download_batch_results(job)


def test_factory_configuration_and_client_construction(monkeypatch):
    with pytest.raises(ConfigurationError):
        OpenAIFactory().create_model(ConfigTarget(provider="openai", model="gpt"))

    captured: Dict[str, Any] = {}

    def _ctor(**kwargs):
        captured.update(kwargs)
        return _FakeClient()

    monkeypatch.setattr(openai_client, "_OpenAIClient", _ctor)
    model = OpenAIFactory().create_model(
        ConfigTarget(provider="openai", api_key="k", model="gpt", properties={"organization": "org-1"})
    )
    assert captured == {"api_key": "k", "max_retries": 0, "organization": "org-1"}  # nosec B101
    assert isinstance(model.get_raw_client(), _FakeClient)  # nosec B101 - pytest assert in tests


def test_factory_without_sdk(monkeypatch):
    monkeypatch.setattr(openai_client, "_OpenAIClient", None)
    with pytest.raises(ProviderError) as exc_info:
        OpenAIFactory().create_model(ConfigTarget(provider="openai", api_key="k", model="gpt"))
    assert error_is(exc_info.value, ProviderSentinel.OPENAI_CLIENT_CREATION_FAILED)  # nosec B101


class _EchoCompletions:
    """Answers with the content of the last mapped message, verbatim."""

    def create(self, **kwargs):
        return _completion(content=kwargs["messages"][-1]["content"])


def test_text_survives_mapping_and_echo_unchanged():
    model = OpenAIModel(
        client=SimpleNamespace(chat=SimpleNamespace(completions=_EchoCompletions())),
        target=ConfigTarget(provider="openai", api_key="k", model="gpt-test"),
    )
    text = "naïve café ✓\n\ttabs  and  spaces {\"json\": [1, 2]}"
    assert model.generate_text(_user(text)).text() == text  # nosec B101 - pytest assert in tests


def test_empty_text_blocks_and_messages_are_dropped():
    model, fake = _model()
    fake.chat.completions.response = _completion()
    image = new_image_message("user", "https://x/cat.png").content[0]
    model.generate_text(
        GenerateTextOptions(
            messages=[
                Message(role="user", content=[text_block(""), image, text_block("what is this?")]),
                new_text_message("user", ""),
                new_text_message("assistant", ""),
            ]
        )
    )
    sent = fake.chat.completions.calls[-1]["messages"]
    assert len(sent) == 1  # nosec B101 - pytest assert in tests
    assert [p["type"] for p in sent[0]["content"]] == ["image_url", "text"]  # nosec B101


def test_stream_truncated_mid_tool_call_latches_error():
    model, fake = _model()
    fake.chat.completions.chunks = [
        {"choices": [{"delta": {"content": "Let me look."}}]},
        {
            "choices": [
                {
                    "delta": {"tool_calls": [{"index": 0, "id": "c1", "function": {"name": "f", "arguments": '{"q": '}}]},
                    "finish_reason": None,
                }
            ]
        },
    ]
    it = model.stream_text(_user("go"))
    events = list(it)
    assert [e.type for e in events] == [StreamEventType.CONTENT_DELTA]  # nosec B101
    err = it.err()
    assert error_is(err, ProviderSentinel.OPENAI_STREAM_FAILED)  # nosec B101 - pytest assert in tests
    assert error_is(err, IncompleteToolCallError) and "c1" in str(err)  # nosec B101
    with pytest.raises(ProviderError):
        model.stream_text(_user("go")).collect()


def test_stream_without_finish_reason_keeps_complete_tool_calls():
    model, fake = _model()
    fake.chat.completions.chunks = [
        {"choices": [{"delta": {"tool_calls": [{"index": 0, "id": "c1", "function": {"name": "f", "arguments": '{"q": 1}'}}]}}]},
    ]
    result = model.stream_text(_user("go")).collect()
    assert result.tool_calls()[0].arguments_dict() == {"q": 1}  # nosec B101 - pytest assert in tests
