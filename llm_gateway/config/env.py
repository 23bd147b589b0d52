"""llm_gateway.config.env
======================

Environment variable mapping for provider credentials and region settings.

Design Notes
------------
- ``ENV_ALIASES`` lists acceptable variable names per provider and field,
  canonical name first to establish precedence.
- Placeholder-looking credentials (``changeme``, ``placeholder``...) are
  treated as unset. Only ``CREDENTIAL_FIELDS`` are screened; model names,
  URLs and regions are taken as given.
- Helpers never raise; callers decide what a missing value means.
"""

from __future__ import annotations

import os
from typing import Dict, Optional, Tuple

# (provider, field) -> ordered env var names (canonical first)
ENV_ALIASES: Dict[Tuple[str, str], Tuple[str, ...]] = {
    ("anthropic", "api_key"): ("ANTHROPIC_API_KEY",),
    ("anthropic", "base_url"): ("ANTHROPIC_BASE_URL",),
    ("openai", "api_key"): ("OPENAI_API_KEY",),
    ("openai", "base_url"): ("OPENAI_BASE_URL",),
    # Gemini has used both names historically; GEMINI_API_KEY wins.
    ("gemini", "api_key"): ("GEMINI_API_KEY", "GOOGLE_API_KEY"),
    ("vertexai", "api_key"): ("VERTEXAI_API_KEY", "GOOGLE_API_KEY"),
    ("vertexai", "project_id"): ("VERTEXAI_PROJECT_ID", "GOOGLE_CLOUD_PROJECT"),
    ("vertexai", "location"): ("VERTEXAI_LOCATION", "GOOGLE_CLOUD_LOCATION"),
}


# Fields screened by :func:`is_placeholder`
CREDENTIAL_FIELDS: Tuple[str, ...] = ("api_key",)


def is_placeholder(val: Optional[str]) -> bool:
    """Return True if the value looks like a placeholder/test value.

    Heuristics: contains 'placeholder', 'changeme', 'example', or starts with
    'test_'. Case-insensitive and tolerant of surrounding spaces.
    """
    if val is None:
        return False
    v = str(val).strip().lower()
    return "placeholder" in v or "changeme" in v or "example" in v or v.startswith("test_")


def env_names(provider: str, field: str) -> Tuple[str, ...]:
    """Env var names consulted for ``field`` of ``provider``.

    Unlisted combinations fall back to ``<PROVIDER>_<FIELD>``.
    """
    key = ((provider or "").lower().strip(), field)
    return ENV_ALIASES.get(key, (f"{key[0].upper()}_{field.upper()}",))


def get_env_value(provider: str, field: str) -> Optional[str]:
    """First non-empty env value for ``field`` of ``provider``.

    Placeholder-looking values are skipped for credential fields.
    """
    screen = field in CREDENTIAL_FIELDS
    for name in env_names(provider, field):
        val = os.getenv(name)
        if val and val.strip() and not (screen and is_placeholder(val)):
            return val.strip()
    return None


__all__ = ["ENV_ALIASES", "CREDENTIAL_FIELDS", "is_placeholder", "env_names", "get_env_value"]
