"""OpenAI provider package."""

from .client import OpenAIFactory, OpenAIModel

__all__ = ["OpenAIFactory", "OpenAIModel"]
