"""Errors raised by the model registry, provider factory lookup, and the
typed raw-client escape hatch.

Each failure has its own type so callers can distinguish "no such target"
from "the handle is not what you asked for".
"""
from __future__ import annotations


class RegistryError(Exception):
    """Base class for registry and factory lookup failures."""


class ModelNotFoundError(RegistryError, KeyError):
    """No model is registered under the requested target name."""

    def __str__(self) -> str:  # KeyError quotes its argument otherwise
        return Exception.__str__(self)


class ModelAlreadyExistsError(RegistryError):
    """A model is already registered under the requested target name."""


class UnsupportedProviderError(RegistryError):
    """No factory is registered (or importable) for the requested provider."""


class ModelCreationError(RegistryError):
    """The provider factory failed to create the model for a target."""


class ModelsCloseError(RegistryError):
    """One or more models failed to close during registry shutdown."""


class RegistryIsNoneError(RegistryError):
    """``get_typed_client`` was called without a registry."""


class RawClientIsNoneError(RegistryError):
    """The resolved model exposes no raw vendor client."""


class InvalidClientTypeError(RegistryError, TypeError):
    """The raw vendor client is not of the type the caller expected."""


__all__ = [
    "RegistryError",
    "ModelNotFoundError",
    "ModelAlreadyExistsError",
    "UnsupportedProviderError",
    "ModelCreationError",
    "ModelsCloseError",
    "RegistryIsNoneError",
    "RawClientIsNoneError",
    "InvalidClientTypeError",
]
