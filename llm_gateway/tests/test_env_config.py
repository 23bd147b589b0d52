"""Tests for the layered gateway config loader.

Order under test: built-in defaults, then file (JSON or YAML), then
environment (fills unset fields only), then in-code overrides.
"""
from __future__ import annotations

import json

import pytest
from pydantic import ValidationError

from llm_gateway.config import load_config_file, load_gateway_config
from llm_gateway.config.env import env_names, get_env_value, is_placeholder


def test_placeholder_heuristics():
    assert is_placeholder("CHANGEME")  # nosec B101 - pytest assert in tests
    assert is_placeholder(" your-key-placeholder ")  # nosec B101 - pytest assert in tests
    assert is_placeholder("test_abc")  # nosec B101 - pytest assert in tests
    assert not is_placeholder("sk-live-123")  # nosec B101 - pytest assert in tests
    assert not is_placeholder(None)  # nosec B101 - pytest assert in tests


def test_env_alias_precedence(clean_env):
    clean_env.setenv("GOOGLE_API_KEY", "google-key")
    assert get_env_value("gemini", "api_key") == "google-key"  # nosec B101 - pytest assert in tests
    clean_env.setenv("GEMINI_API_KEY", "gemini-key")
    assert get_env_value("gemini", "api_key") == "gemini-key"  # nosec B101 - pytest assert in tests
    clean_env.setenv("OPENAI_API_KEY", "changeme")
    assert get_env_value("openai", "api_key") is None  # nosec B101 - pytest assert in tests
    assert env_names("mock", "api_key") == ("MOCK_API_KEY",)  # nosec B101 - pytest assert in tests


def test_yaml_file_with_placeholders_and_env_fill(tmp_path, clean_env):
    clean_env.setenv("ANTHROPIC_API_KEY", "sk-ant-1")
    clean_env.setenv("MY_PROJECT", "proj-9")
    path = tmp_path / "gateway.yaml"
    path.write_text(
        "targets:\n"
        "  default:\n"
        "    provider: anthropic\n"
        "    max_tokens: 512\n"
        "  vision:\n"
        "    provider: vertexai\n"
        "    project_id: ${MY_PROJECT}\n"
        "    properties:\n"
        "      batch_bucket: gs://b/batches\n",
        encoding="utf-8",
    )
    config = load_gateway_config(path)
    default = config.targets["default"]
    assert default.api_key == "sk-ant-1"  # nosec B101 - pytest assert in tests
    assert default.model == "claude-sonnet-4-5"  # nosec B101 - pytest assert in tests
    assert default.max_tokens == 512  # nosec B101 - pytest assert in tests
    vision = config.targets["vision"]
    assert vision.project_id == "proj-9"  # nosec B101 - pytest assert in tests
    assert vision.location == "us-central1"  # nosec B101 - pytest assert in tests
    assert vision.properties["batch_bucket"] == "gs://b/batches"  # nosec B101 - pytest assert in tests


def test_file_value_wins_over_env(tmp_path, clean_env):
    clean_env.setenv("OPENAI_API_KEY", "from-env")
    path = tmp_path / "gateway.json"
    path.write_text(json.dumps({"fast": {"provider": "openai", "api_key": "from-file"}}), encoding="utf-8")
    config = load_gateway_config(path)
    assert config.targets["fast"].api_key == "from-file"  # nosec B101 - pytest assert in tests


def test_env_var_selects_config_file(tmp_path, clean_env):
    path = tmp_path / "gateway.json"
    path.write_text(json.dumps({"targets": {"m": {"provider": "mock"}}}), encoding="utf-8")
    clean_env.setenv("LLM_GATEWAY_CONFIG_FILE", str(path))
    config = load_gateway_config()
    assert config.targets["m"].model == "mock-echo"  # nosec B101 - pytest assert in tests


def test_overrides_apply_last_and_merge_properties(tmp_path, clean_env):
    path = tmp_path / "gateway.json"
    path.write_text(
        json.dumps({"targets": {"m": {"provider": "mock", "properties": {"a": 1}}}}),
        encoding="utf-8",
    )
    config = load_gateway_config(
        path,
        overrides={"m": {"model": "scripted", "properties": {"b": 2}}, "extra": {"provider": "mock"}},
    )
    assert config.targets["m"].model == "scripted"  # nosec B101 - pytest assert in tests
    assert config.targets["m"].properties == {"a": 1, "b": 2}  # nosec B101 - pytest assert in tests
    assert "extra" in config.targets  # nosec B101 - pytest assert in tests


def test_use_env_false_leaves_credentials_unset(clean_env):
    clean_env.setenv("OPENAI_API_KEY", "sk-real")
    config = load_gateway_config(overrides={"o": {"provider": "openai"}}, use_env=False)
    assert config.targets["o"].api_key is None  # nosec B101 - pytest assert in tests


def test_invalid_target_raises_validation_error(clean_env):
    with pytest.raises(ValidationError):
        load_gateway_config(overrides={"bad": {"provider": "mock", "max_tokens": -1}})
    with pytest.raises(ValidationError):
        load_gateway_config(overrides={"bad": {"provider": "mock", "unknown_field": 1}})


def test_missing_file_yields_empty_mapping(tmp_path):
    assert load_config_file(tmp_path / "nope.yaml") == {}  # nosec B101 - pytest assert in tests


def test_placeholder_screening_only_applies_to_credentials(tmp_path, clean_env):
    clean_env.setenv("OPENAI_BASE_URL", "https://api.example.com/v1")
    assert get_env_value("openai", "base_url") == "https://api.example.com/v1"  # nosec B101
    clean_env.setenv("ANTHROPIC_API_KEY", "your-example-key")
    assert get_env_value("anthropic", "api_key") is None  # nosec B101 - pytest assert in tests

    path = tmp_path / "gateway.yaml"
    path.write_text(
        "targets:\n"
        "  proxy:\n"
        "    provider: openai\n"
        "    model: example-tuned-model\n"
        "    base_url: https://api.example.com\n"
        "    api_key: changeme\n",
        encoding="utf-8",
    )
    proxy = load_gateway_config(path).targets["proxy"]
    assert proxy.model == "example-tuned-model"  # nosec B101 - pytest assert in tests
    assert proxy.base_url == "https://api.example.com"  # nosec B101 - pytest assert in tests
    assert proxy.api_key is None  # nosec B101 - pytest assert in tests
