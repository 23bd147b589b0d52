"""Model registry: named, configured ``LanguageModel`` instances.

Purpose
-------
Hold models keyed by a caller-chosen target name (not the provider name, as
one provider may back several targets) and resolve them for callers. The
registry owns model lifetime: models are created from configuration and
closed by :meth:`Registry.close` (or on context-manager exit).

Concurrency
-----------
The map is populated during a registration phase and read thereafter. A
re-entrant lock still guards mutation so late ``add_model``/``remove_model``
calls are safe.

Escape hatch
------------
:func:`get_typed_client` extracts a vendor SDK client from a registered
model, failing with a distinct error for each way the lookup can go wrong.
It is never required for the generate/stream/batch paths.
"""
from __future__ import annotations

import logging
import threading
from typing import Any, Dict, Iterable, List, Mapping, Optional, Type, TypeVar, Union

from .capabilities import ProviderCapability, has_capability
from .constants import DEFAULT_TARGET_NAME
from .dto import ConfigTarget, GatewayConfig
from .errors import (
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
from .factory import ProviderFactories
from .interfaces import LanguageModel, ProviderFactory
from .logging import LogContext, get_logger, normalized_log_event

T = TypeVar("T")


class Registry:
    """Registry of named language models and the factories that build them."""

    def __init__(self, *, factories: Iterable[ProviderFactory] = ()) -> None:
        self._models: Dict[str, LanguageModel] = {}
        self._factories: Dict[str, ProviderFactory] = {}
        self._lock = threading.RLock()
        self._logger = get_logger("llm_gateway.registry")
        for factory in factories:
            self.register_factory(factory)

    # ---- factories ----
    def register_factory(self, factory: ProviderFactory) -> None:
        """Register (or replace) the factory for ``factory.get_provider()``."""
        with self._lock:
            self._factories[factory.get_provider()] = factory

    def register_default_factories(self, providers: Optional[Iterable[str]] = None) -> None:
        """Register the built-in factories (all, or only ``providers``)."""
        for name in providers or ProviderFactories.supported():
            self.register_factory(ProviderFactories.create(name))

    def list_registered_providers(self) -> List[str]:
        with self._lock:
            return sorted(self._factories)

    # ---- lookup ----
    def get_default(self) -> Optional[LanguageModel]:
        """Return the model registered as ``"default"``, if any."""
        return self.get_named(DEFAULT_TARGET_NAME)

    def get_named(self, name: str) -> Optional[LanguageModel]:
        """Return the model for ``name``; ``None`` for unknown names."""
        with self._lock:
            return self._models.get(name)

    def get_by_provider(self, provider: str) -> List[LanguageModel]:
        with self._lock:
            return [self._models[n] for n in sorted(self._models) if self._models[n].get_provider() == provider]

    def get_by_capability(self, capability: Union[ProviderCapability, str]) -> List[LanguageModel]:
        with self._lock:
            return [self._models[n] for n in sorted(self._models) if has_capability(self._models[n], capability)]

    def list_models(self) -> List[str]:
        """Registered target names, sorted."""
        with self._lock:
            return sorted(self._models)

    def __contains__(self, name: object) -> bool:
        with self._lock:
            return name in self._models

    def __len__(self) -> int:
        with self._lock:
            return len(self._models)

    # ---- lifecycle ----
    def add_model(self, name: str, target: ConfigTarget) -> LanguageModel:
        """Create a model from ``target`` and register it under ``name``.

        Raises
        ------
        ModelAlreadyExistsError
            ``name`` is already registered.
        UnsupportedProviderError
            No factory is registered for ``target.provider``.
        ConfigurationError
            The factory rejected the target (missing required fields).
        ModelCreationError
            The factory failed for any other reason.
        """
        ctx = LogContext(provider=target.provider, model=target.model, target=name)
        with self._lock:
            if name in self._models:
                raise ModelAlreadyExistsError(f"model already exists (name={name!r})")
            factory = self._factories.get(target.provider)
            if factory is None:
                raise UnsupportedProviderError(f"unsupported provider (provider={target.provider!r})")
            normalized_log_event(self._logger, "registry.add.start", ctx, phase="start", level=logging.DEBUG)
            try:
                model = factory.create_model(target)
            except ConfigurationError as exc:
                normalized_log_event(
                    self._logger, "registry.add.error", ctx, phase="start", error_code="configuration", error=str(exc)
                )
                raise
            except Exception as exc:
                normalized_log_event(
                    self._logger, "registry.add.error", ctx, phase="start", error_code="creation", error=str(exc)
                )
                raise ModelCreationError(f"failed to create model (name={name!r}): {exc}") from exc
            self._models[name] = model
        normalized_log_event(self._logger, "registry.add.end", ctx, phase="finalize", level=logging.DEBUG)
        return model

    def remove_model(self, name: str) -> None:
        """Close and unregister ``name``. Close failures are logged, not raised."""
        with self._lock:
            model = self._models.pop(name, None)
        if model is None:
            raise ModelNotFoundError(f"model not found (name={name!r})")
        ctx = LogContext(provider=model.get_provider(), model=model.get_model_id(), target=name)
        try:
            model.close()
        except Exception as exc:  # noqa: BLE001
            normalized_log_event(
                self._logger, "registry.remove.close_error", ctx, phase="finalize", error_code="close", error=str(exc)
            )
        normalized_log_event(self._logger, "registry.remove", ctx, phase="finalize", level=logging.DEBUG)

    def load_from_config(self, config: Union[GatewayConfig, Mapping[str, Any]]) -> List[str]:
        """Create every target in ``config``; returns the names added.

        Accepts a :class:`GatewayConfig`, or a raw mapping of the same shape
        (``{"targets": {...}}``) which is validated first.
        """
        if not isinstance(config, GatewayConfig):
            config = GatewayConfig.model_validate(config)
        added: List[str] = []
        for name in sorted(config.targets):
            self.add_model(name, config.targets[name])
            added.append(name)
        return added

    def close(self) -> None:
        """Close every model and clear the registry.

        Raises
        ------
        ModelsCloseError
            When one or more models failed to close; the message joins every
            failure with ``"; "``. The registry is cleared regardless.
        """
        with self._lock:
            models = dict(self._models)
            self._models.clear()
        failures: List[str] = []
        for name in sorted(models):
            try:
                models[name].close()
            except Exception as exc:  # noqa: BLE001
                failures.append(f"failed to close model (name={name!r}): {exc}")
        if failures:
            raise ModelsCloseError("failed to close models: " + "; ".join(failures))

    def __enter__(self) -> "Registry":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


def get_typed_client(registry: Optional[Registry], name: str, expected_type: Type[T]) -> T:
    """Return the raw vendor client of model ``name`` as ``expected_type``.

    Using the raw client bypasses the unified surface and its guarantees.

    Raises
    ------
    RegistryIsNoneError
        ``registry`` is ``None``.
    ModelNotFoundError
        No model is registered under ``name``.
    RawClientIsNoneError
        The model exposes no raw client.
    InvalidClientTypeError
        The raw client is not an instance of ``expected_type``.
    """
    if registry is None:
        raise RegistryIsNoneError("registry is None")
    model = registry.get_named(name)
    if model is None:
        raise ModelNotFoundError(f"model not found (name={name!r})")
    client = model.get_raw_client()
    if client is None:
        raise RawClientIsNoneError(f"raw client is None (name={name!r})")
    if not isinstance(client, expected_type):
        raise InvalidClientTypeError(
            f"invalid client type (name={name!r}): expected {expected_type.__name__}, got {type(client).__name__}"
        )
    return client


__all__ = ["Registry", "get_typed_client"]
