"""Registry, factory lookup and typed raw-client tests.

Uses the mock provider so no vendor SDK is needed; failure paths use small
hand-written factories and models.
"""
from __future__ import annotations

import pytest

from llm_gateway.base.capabilities import ProviderCapability, has_capability, supports_batch
from llm_gateway.base.dto import ConfigTarget, GatewayConfig
from llm_gateway.base.errors import (
    ConfigurationError,
    InvalidClientTypeError,
    ModelAlreadyExistsError,
    ModelCreationError,
    ModelNotFoundError,
    ModelsCloseError,
    RawClientIsNoneError,
    RegistryIsNoneError,
    UnsupportedProviderError,
)
from llm_gateway.base.factory import ProviderFactories, create_model
from llm_gateway.base.registry import Registry, get_typed_client
from llm_gateway.mock import MockClient, MockFactory, MockModel


def _mock_target(model: str = "mock-echo") -> ConfigTarget:
    return ConfigTarget(provider="mock", model=model)


class _ExplodingFactory:
    def get_provider(self) -> str:
        return "exploding"

    def create_model(self, target):
        raise RuntimeError("kaboom")


class _NoClientModel(MockModel):
    def get_raw_client(self):
        return None


class _FailingCloseModel(MockModel):
    def close(self) -> None:
        raise RuntimeError("socket stuck")


class _CustomFactory:
    def __init__(self, model_cls, provider: str = "custom") -> None:
        self._model_cls = model_cls
        self._provider = provider

    def get_provider(self) -> str:
        return self._provider

    def create_model(self, target):
        return self._model_cls(client=MockClient(), target=target)


@pytest.fixture()
def registry():
    reg = Registry(factories=[MockFactory()])
    yield reg
    reg.close()


def test_add_and_lookup(registry):
    model = registry.add_model("default", _mock_target())
    assert registry.get_default() is model  # nosec B101 - pytest assert in tests
    assert registry.get_named("default") is model  # nosec B101 - pytest assert in tests
    assert registry.get_named("missing") is None  # nosec B101 - pytest assert in tests
    assert "default" in registry and len(registry) == 1  # nosec B101 - pytest assert in tests
    assert registry.get_by_provider("mock") == [model]  # nosec B101 - pytest assert in tests
    assert registry.get_by_capability(ProviderCapability.BATCH_PROCESSING) == [model]  # nosec B101
    assert registry.get_by_capability("vision") == []  # nosec B101 - pytest assert in tests


def test_duplicate_name_rejected(registry):
    registry.add_model("a", _mock_target())
    with pytest.raises(ModelAlreadyExistsError):
        registry.add_model("a", _mock_target())


def test_unknown_provider_rejected(registry):
    with pytest.raises(UnsupportedProviderError):
        registry.add_model("x", ConfigTarget(provider="nope", model="m"))


def test_configuration_error_propagates_unwrapped(registry):
    with pytest.raises(ConfigurationError) as exc_info:
        registry.add_model("x", ConfigTarget(provider="mock"))
    assert exc_info.value.field == "model"  # nosec B101 - pytest assert in tests
    assert "x" not in registry  # nosec B101 - pytest assert in tests


def test_factory_failure_wrapped_as_creation_error():
    reg = Registry(factories=[_ExplodingFactory()])
    with pytest.raises(ModelCreationError, match="kaboom"):
        reg.add_model("x", ConfigTarget(provider="exploding", model="m"))


def test_remove_model_closes_client(registry):
    model = registry.add_model("a", _mock_target())
    registry.remove_model("a")
    assert model.get_raw_client().closed  # nosec B101 - pytest assert in tests
    with pytest.raises(ModelNotFoundError):
        registry.remove_model("a")


def test_close_aggregates_failures_and_clears():
    reg = Registry(factories=[_CustomFactory(_FailingCloseModel), MockFactory()])
    reg.add_model("bad", ConfigTarget(provider="custom", model="m"))
    good = reg.add_model("good", _mock_target())
    with pytest.raises(ModelsCloseError, match="bad"):
        reg.close()
    assert len(reg) == 0  # nosec B101 - pytest assert in tests
    assert good.get_raw_client().closed  # nosec B101 - pytest assert in tests


def test_load_from_mapping_validates_and_adds_sorted():
    with Registry(factories=[MockFactory()]) as reg:
        added = reg.load_from_config({"targets": {"b": {"provider": "mock", "model": "m"}, "a": {"provider": "mock", "model": "m"}}})
        assert added == ["a", "b"]  # nosec B101 - pytest assert in tests
        assert reg.list_models() == ["a", "b"]  # nosec B101 - pytest assert in tests


def test_load_from_gateway_config():
    config = GatewayConfig(targets={"default": _mock_target()})
    with Registry(factories=[MockFactory()]) as reg:
        assert reg.load_from_config(config) == ["default"]  # nosec B101 - pytest assert in tests


def test_register_default_factories_subset():
    reg = Registry()
    reg.register_default_factories(["mock"])
    assert reg.list_registered_providers() == ["mock"]  # nosec B101 - pytest assert in tests


def test_get_typed_client_success_and_errors(registry):
    registry.add_model("default", _mock_target())
    client = get_typed_client(registry, "default", MockClient)
    assert isinstance(client, MockClient)  # nosec B101 - pytest assert in tests

    with pytest.raises(RegistryIsNoneError):
        get_typed_client(None, "default", MockClient)
    with pytest.raises(ModelNotFoundError):
        get_typed_client(registry, "missing", MockClient)
    with pytest.raises(InvalidClientTypeError):
        get_typed_client(registry, "default", dict)


def test_get_typed_client_raw_client_none():
    reg = Registry(factories=[_CustomFactory(_NoClientModel)])
    reg.add_model("n", ConfigTarget(provider="custom", model="m"))
    with pytest.raises(RawClientIsNoneError):
        get_typed_client(reg, "n", MockClient)


def test_provider_factories_lookup():
    assert ProviderFactories.supported() == ("anthropic", "openai", "gemini", "vertexai", "mock")  # nosec B101
    assert ProviderFactories.create("MOCK").get_provider() == "mock"  # nosec B101 - pytest assert in tests
    with pytest.raises(UnsupportedProviderError):
        ProviderFactories.create("bedrock")


def test_create_model_bypasses_registry():
    model = create_model(_mock_target("mock-direct"))
    assert model.get_model_id() == "mock-direct"  # nosec B101 - pytest assert in tests
    assert has_capability(model, "streaming") and supports_batch(model)  # nosec B101
    assert not has_capability(model, "telepathy")  # nosec B101 - pytest assert in tests
