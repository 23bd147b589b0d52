"""Layered configuration loader for gateway targets.

Goals
-----
* Describe every named target once (provider, credentials, model, defaults).
* Merge sources in a predictable order (later wins):
    1. Built-in defaults (default model per provider)
    2. External config file (JSON or YAML) given explicitly or via
       ``LLM_GATEWAY_CONFIG_FILE``
    3. Environment variables, filling only fields the file left unset
       (``ANTHROPIC_API_KEY``, ``GOOGLE_CLOUD_PROJECT``, ...)
    4. In-code overrides passed to :func:`load_gateway_config`
* ``${VAR}`` references inside string values are expanded from the
  environment.

File structure example
----------------------
```
targets:
  default:
    provider: anthropic
    model: claude-sonnet-4-5
    api_key: ${ANTHROPIC_API_KEY}
    max_tokens: 2048
  vision:
    provider: vertexai
    project_id: my-project
    location: europe-west4
    properties:
      batch_bucket: gs://my-bucket/batches
```
A file without a ``targets`` key is treated as the targets mapping itself.

Public API
----------
* load_gateway_config(path=None, overrides=None, use_env=True) -> GatewayConfig
* load_config_file(path) -> dict
"""
from __future__ import annotations

import json
import os
import re
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from ..base.dto import GatewayConfig
from .defaults import CONFIG_FILE_ENV, DEFAULT_MODELS, VERTEXAI_DEFAULT_LOCATION
from .env import CREDENTIAL_FIELDS, get_env_value, is_placeholder

_ENV_REF = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)\}")

# Fields that may be filled from the environment when left unset
_ENV_FIELDS = ("api_key", "base_url", "project_id", "location")


def load_config_file(path: str | os.PathLike[str]) -> Dict[str, Any]:
    """Parse a JSON or YAML config file into a dict.

    JSON is tried first; YAML (a superset) is the fallback. A missing file or
    a document that is not a mapping yields ``{}``.
    """
    p = Path(path)
    if not p.exists():
        return {}
    text = p.read_text(encoding="utf-8")
    try:
        data = json.loads(text)
    except ValueError:
        data = yaml.safe_load(text) or {}
    return data if isinstance(data, dict) else {}


def _expand(value: Any) -> Any:
    """Expand ``${VAR}`` references recursively; unknown variables become ''."""
    if isinstance(value, str):
        return _ENV_REF.sub(lambda m: os.getenv(m.group(1), ""), value)
    if isinstance(value, dict):
        return {k: _expand(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_expand(v) for v in value]
    return value


def _merge_target(base: Dict[str, Any], extra: Mapping[str, Any]) -> Dict[str, Any]:
    merged = dict(base)
    for key, val in extra.items():
        if key == "properties" and isinstance(val, Mapping):
            props = dict(merged.get("properties") or {})
            props.update(val)
            merged["properties"] = props
        else:
            merged[key] = val
    return merged


def _is_unset(field: str, value: str) -> bool:
    return not value.strip() or (field in CREDENTIAL_FIELDS and is_placeholder(value))


def _apply_defaults_and_env(target: Dict[str, Any], use_env: bool) -> Dict[str, Any]:
    provider = str(target.get("provider") or "").lower().strip()
    out = {k: v for k, v in target.items() if not (isinstance(v, str) and _is_unset(k, v))}
    if not out.get("model") and provider in DEFAULT_MODELS:
        out["model"] = DEFAULT_MODELS[provider]
    if use_env and provider:
        for field in _ENV_FIELDS:
            if not out.get(field):
                val = get_env_value(provider, field)
                if val is not None:
                    out[field] = val
    if provider == "vertexai" and not out.get("location"):
        out["location"] = VERTEXAI_DEFAULT_LOCATION
    return out


def load_gateway_config(
    path: Optional[str | os.PathLike[str]] = None,
    overrides: Optional[Mapping[str, Mapping[str, Any]]] = None,
    *,
    use_env: bool = True,
) -> GatewayConfig:
    """Return the merged, validated gateway configuration.

    Parameters
    ----------
    path:
        Config file path; defaults to ``$LLM_GATEWAY_CONFIG_FILE`` when set.
    overrides:
        ``{target_name: {field: value}}`` applied last. A target that only
        appears here is created from the overrides alone.
    use_env:
        Fill unset credential/region fields from environment variables.

    Raises
    ------
    pydantic.ValidationError
        When a merged target is structurally invalid (unknown field, missing
        provider, negative ``max_tokens``...).
    """
    file_path = path or os.getenv(CONFIG_FILE_ENV)
    raw: Dict[str, Any] = load_config_file(file_path) if file_path else {}
    targets_raw = raw.get("targets", raw) if isinstance(raw.get("targets", raw), dict) else {}

    targets: Dict[str, Dict[str, Any]] = {}
    for name, section in targets_raw.items():
        if isinstance(section, Mapping):
            targets[str(name)] = dict(_expand(dict(section)))
    for name, section in (overrides or {}).items():
        targets[name] = _merge_target(targets.get(name, {}), section)

    resolved = {name: _apply_defaults_and_env(t, use_env) for name, t in targets.items()}
    return GatewayConfig.model_validate({"targets": resolved})


__all__ = ["load_gateway_config", "load_config_file"]
