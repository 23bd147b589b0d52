"""Anthropic provider package."""

from .client import AnthropicFactory, AnthropicModel

__all__ = ["AnthropicFactory", "AnthropicModel"]
