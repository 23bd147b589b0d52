"""llm_gateway.config.defaults
===========================

Central place for small, stable default values used when a config target
leaves a field unset. Only plain constants live here (no I/O, no imports from
other gateway packages) to keep this module free of circular dependencies.
"""

from __future__ import annotations

# ---- Provider default models ----
ANTHROPIC_DEFAULT_MODEL = "claude-sonnet-4-5"
OPENAI_DEFAULT_MODEL = "gpt-4o-mini"
GEMINI_DEFAULT_MODEL = "gemini-2.5-flash"
VERTEXAI_DEFAULT_MODEL = "gemini-2.5-flash"
MOCK_DEFAULT_MODEL = "mock-echo"

# The Messages API requires max_tokens; used when neither request nor target sets it.
ANTHROPIC_DEFAULT_MAX_TOKENS = 4096

# ---- Batch defaults ----
OPENAI_BATCH_ENDPOINT = "/v1/chat/completions"
OPENAI_BATCH_COMPLETION_WINDOW = "24h"

# ---- Vertex AI ----
VERTEXAI_DEFAULT_LOCATION = "us-central1"

# ---- Config file discovery ----
CONFIG_FILE_ENV = "LLM_GATEWAY_CONFIG_FILE"

DEFAULT_MODELS = {
    "anthropic": ANTHROPIC_DEFAULT_MODEL,
    "openai": OPENAI_DEFAULT_MODEL,
    "gemini": GEMINI_DEFAULT_MODEL,
    "vertexai": VERTEXAI_DEFAULT_MODEL,
    "mock": MOCK_DEFAULT_MODEL,
}

__all__ = [
    "ANTHROPIC_DEFAULT_MODEL",
    "OPENAI_DEFAULT_MODEL",
    "GEMINI_DEFAULT_MODEL",
    "VERTEXAI_DEFAULT_MODEL",
    "MOCK_DEFAULT_MODEL",
    "ANTHROPIC_DEFAULT_MAX_TOKENS",
    "OPENAI_BATCH_ENDPOINT",
    "OPENAI_BATCH_COMPLETION_WINDOW",
    "VERTEXAI_DEFAULT_LOCATION",
    "CONFIG_FILE_ENV",
    "DEFAULT_MODELS",
]
