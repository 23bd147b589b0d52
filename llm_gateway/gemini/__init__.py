"""Gemini provider package (also hosts the mapping shared with Vertex AI)."""

from .client import GeminiFactory, GeminiModel

__all__ = ["GeminiFactory", "GeminiModel"]
