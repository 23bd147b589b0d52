"""Pytest configuration for the gateway test suite.

Provides a ready-made mock model plus an environment fixture that strips
provider credentials so config tests never pick up a developer's real keys.
"""

from __future__ import annotations

from typing import Iterator

import pytest

from llm_gateway.base.dto import ConfigTarget
from llm_gateway.config.env import ENV_ALIASES
from llm_gateway.mock import MockFactory, MockModel

_EXTRA_ENV = ("LLM_GATEWAY_CONFIG_FILE", "LLM_GATEWAY_LOG_LEVEL")


@pytest.fixture()
def clean_env(monkeypatch: pytest.MonkeyPatch) -> Iterator[pytest.MonkeyPatch]:
    """Remove every provider env var the config loader consults."""

    for names in ENV_ALIASES.values():
        for name in names:
            monkeypatch.delenv(name, raising=False)
    for name in _EXTRA_ENV:
        monkeypatch.delenv(name, raising=False)
    yield monkeypatch


@pytest.fixture()
def mock_model() -> Iterator[MockModel]:
    """Yield a mock model built through its factory with the bundled fixtures."""

    model = MockFactory().create_model(ConfigTarget(provider="mock", model="mock-echo"))
    yield model
    model.close()
