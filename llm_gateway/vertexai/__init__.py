"""Vertex AI provider package."""

from .client import VertexAIFactory, VertexAIModel

__all__ = ["VertexAIFactory", "VertexAIModel"]
