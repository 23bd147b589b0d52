"""Unit tests for the unified message model.

Covers data URL decoding (base64, percent-encoded, malformed), MIME guessing
from URLs, content block tag/payload validation, tool argument parsing, and the
one-outcome rule for batch results.
"""
from __future__ import annotations

import pytest

from llm_gateway.base.errors import InvalidContentBlockError, InvalidDataURLError
from llm_gateway.base.media import resolve_media
from llm_gateway.base.models import (
    BatchResult,
    ContentBlock,
    ContentBlockType,
    GenerateTextOptions,
    GenerateTextResult,
    ImagePart,
    Message,
    Role,
    ToolCall,
    ToolChoice,
    decode_data_url,
    detect_mime_from_url,
    encode_data_url,
    new_image_message,
    new_text_message,
    new_tool_call_block,
    text_block,
)


def test_decode_base64_data_url():
    mime, data = decode_data_url("data:image/png;base64,aGVsbG8=")
    assert mime == "image/png"  # nosec B101 - pytest assert in tests
    assert data == b"hello"  # nosec B101 - pytest assert in tests


def test_decode_percent_encoded_data_url_without_mime_defaults_to_octet_stream():
    mime, data = decode_data_url("data:,hello%20world")
    assert mime == "application/octet-stream"  # nosec B101 - pytest assert in tests
    assert data == b"hello world"  # nosec B101 - pytest assert in tests


@pytest.mark.parametrize(
    "url",
    [
        "data:image/png;base64",  # no comma
        "data:image/png;base64,@@not-base64@@",
        "https://example.com/cat.png",
    ],
)
def test_decode_rejects_malformed_data_urls(url):
    with pytest.raises(InvalidDataURLError):
        decode_data_url(url)


def test_encode_data_url_is_decodable():
    url = encode_data_url("audio/wav", b"\x00\x01")
    assert url.startswith("data:audio/wav;base64,")  # nosec B101 - pytest assert in tests
    assert decode_data_url(url) == ("audio/wav", b"\x00\x01")  # nosec B101 - pytest assert in tests


@pytest.mark.parametrize(
    "url, expected",
    [
        ("https://cdn.test/a/photo.JPG?size=large", "image/jpeg"),
        ("gs://bucket/clip.mp3", "audio/mpeg"),
        ("https://cdn.test/doc.pdf#page=2", "application/pdf"),
        ("https://cdn.test/blob", "application/octet-stream"),
        ("", "application/octet-stream"),
    ],
)
def test_detect_mime_from_url(url, expected):
    assert detect_mime_from_url(url) == expected  # nosec B101 - pytest assert in tests


def test_resolve_media_prefers_bytes_then_data_url_then_remote():
    inline = resolve_media(data=b"raw", url="https://x/y.png", default_mime="image/png")
    assert inline is not None and inline.inline and inline.mime_type == "image/png"  # nosec B101

    decoded = resolve_media(url="data:image/gif;base64,R0lG", default_mime="image/png")
    assert decoded is not None and decoded.mime_type == "image/gif"  # nosec B101
    assert decoded.data == b"GIF"  # nosec B101 - pytest assert in tests

    remote = resolve_media(url="https://x/y.webp", default_mime="image/png")
    assert remote is not None and not remote.inline  # nosec B101
    assert remote.url == "https://x/y.webp" and remote.mime_type == "image/webp"  # nosec B101

    assert resolve_media(default_mime="image/png") is None  # nosec B101 - pytest assert in tests


def test_resolve_media_passes_malformed_data_url_through_as_remote():
    bad = "data:image/png;base64,%%%"
    resolved = resolve_media(url=bad, default_mime="image/png")
    assert resolved is not None and not resolved.inline  # nosec B101
    assert resolved.url == bad  # nosec B101 - pytest assert in tests


def test_content_block_validate_accepts_matching_payload():
    block = text_block("hi")
    assert block.validate() is block  # nosec B101 - pytest assert in tests


def test_content_block_validate_rejects_missing_payload():
    with pytest.raises(InvalidContentBlockError):
        ContentBlock(type=ContentBlockType.IMAGE).validate()


def test_content_block_validate_rejects_extra_payload():
    block = ContentBlock(type=ContentBlockType.TEXT, text="hi", image=ImagePart(url="https://x/y.png"))
    with pytest.raises(InvalidContentBlockError, match="image"):
        block.validate()


def test_message_role_coercion_and_text():
    msg = Message(role="user", content=[text_block("a"), text_block("b")])
    assert msg.role is Role.USER  # nosec B101 - pytest assert in tests
    assert msg.text() == "ab"  # nosec B101 - pytest assert in tests
    with pytest.raises(ValueError):
        Message(role="narrator")


def test_image_message_constructor():
    msg = new_image_message(Role.USER, "https://x/cat.png")
    block = msg.content[0]
    assert block.type == ContentBlockType.IMAGE  # nosec B101 - pytest assert in tests
    assert block.image is not None and block.image.url == "https://x/cat.png"  # nosec B101


def test_tool_call_arguments_serialised_and_parsed():
    call = ToolCall(id="c1", name="get_weather", arguments={"city": "Oslo"})
    assert call.arguments == '{"city": "Oslo"}'  # nosec B101 - pytest assert in tests
    assert call.arguments_dict() == {"city": "Oslo"}  # nosec B101 - pytest assert in tests
    assert ToolCall(id="c2", name="x", arguments="not json").arguments_dict() == {}  # nosec B101


def test_result_text_and_tool_calls():
    result = GenerateTextResult(
        content=[text_block("a"), new_tool_call_block("c1", "f", "{}"), text_block("b")]
    )
    assert result.text() == "ab"  # nosec B101 - pytest assert in tests
    assert [c.id for c in result.tool_calls()] == ["c1"]  # nosec B101 - pytest assert in tests


def test_options_tool_choice_coercion_and_extensions():
    opts = GenerateTextOptions(
        messages=[new_text_message("user", "hi")],
        tool_choice="required",
        extensions={"openai": {"seed": 7}, "anthropic": "ignored"},
    )
    assert opts.tool_choice is ToolChoice.REQUIRED  # nosec B101 - pytest assert in tests
    assert opts.extensions_for("openai") == {"seed": 7}  # nosec B101 - pytest assert in tests
    assert opts.extensions_for("anthropic") == {}  # nosec B101 - pytest assert in tests
    assert opts.extensions_for("gemini") == {}  # nosec B101 - pytest assert in tests


def test_batch_result_carries_exactly_one_outcome():
    assert BatchResult(custom_id="a", error="timeout").ok is False  # nosec B101 - pytest assert in tests
    assert BatchResult(custom_id="b", result=GenerateTextResult()).ok  # nosec B101 - pytest assert in tests
    with pytest.raises(ValueError):
        BatchResult(custom_id="c")
    with pytest.raises(ValueError):
        BatchResult(custom_id="d", result=GenerateTextResult(), error="timeout")
