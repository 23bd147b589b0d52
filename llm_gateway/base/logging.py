"""Structured logging utilities for the gateway.

Rationale:
- One place configures JSON (or plain) output for every adapter, the
  streaming pipeline, and the registry.
- Adapters obtain child loggers (``llm_gateway.anthropic`` ...) that
  propagate to the shared ``llm_gateway`` logger, so applications can attach
  their own handlers or silence the gateway with one call.

``normalized_log_event`` guarantees a stable key set across providers:
``structured``, ``phase``, ``attempt``, ``error_code``, ``emitted`` and
``tokens``. ``error_code`` is omitted when ``None``.

Credentials are never passed to these helpers; adapters log provider, model
and counters only.
"""
from __future__ import annotations

import contextlib
import json
import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from typing import Any, Dict, Mapping, Optional

from .log_support import JsonFormatter, LogContext

ROOT_LOGGER_NAME = "llm_gateway"
LOG_LEVEL_ENV = "LLM_GATEWAY_LOG_LEVEL"
_PLAIN_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"

_INITIALIZED_ATTR = "_llm_gateway_initialized"
_CONSOLE_HANDLER_ATTR = "_llm_gateway_console_handler"
_FILE_HANDLER_ATTR = "_llm_gateway_file_handler"


def _parse_level(value: str | None, default: int = logging.INFO) -> int:
    """Parse a logging level name into its integer constant.

    Accepts DEBUG, INFO, WARN/WARNING, ERROR, CRITICAL case-insensitively.
    Falls back to ``default`` on unknown or empty values.
    """
    if not value:
        return default
    mapping = {
        "DEBUG": logging.DEBUG,
        "INFO": logging.INFO,
        "WARN": logging.WARNING,
        "WARNING": logging.WARNING,
        "ERROR": logging.ERROR,
        "CRITICAL": logging.CRITICAL,
    }
    return mapping.get(value.strip().upper(), default)


def _formatter(json_mode: bool) -> logging.Formatter:
    return JsonFormatter() if json_mode else logging.Formatter(_PLAIN_FORMAT)


def _ensure_root_logger(json_mode: bool, level: int) -> logging.Logger:
    """Initialize (once) and return the shared ``llm_gateway`` logger."""
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    desired = _parse_level(os.getenv(LOG_LEVEL_ENV), default=level)
    if getattr(logger, _INITIALIZED_ATTR, False):
        if logger.level != desired:
            logger.setLevel(desired)
        return logger
    logger.setLevel(desired)
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(desired)
    handler.setFormatter(_formatter(json_mode))
    setattr(handler, _CONSOLE_HANDLER_ATTR, True)
    logger.handlers[:] = [h for h in logger.handlers if not getattr(h, _CONSOLE_HANDLER_ATTR, False)]
    logger.addHandler(handler)
    logger.propagate = False
    setattr(logger, _INITIALIZED_ATTR, True)
    return logger


def get_logger(name: str = ROOT_LOGGER_NAME, json_mode: bool = True, level: int = logging.INFO) -> logging.Logger:
    """Return a gateway logger; child names propagate to the shared root."""
    root = _ensure_root_logger(json_mode=json_mode, level=level)
    if name == ROOT_LOGGER_NAME:
        return root
    if not name.startswith(ROOT_LOGGER_NAME + "."):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    logger = logging.getLogger(name)
    logger.propagate = True
    return logger


def configure_logger(
    *,
    level: int | str | None = None,
    file_path: Optional[str] = None,
    json_mode: bool = True,
) -> logging.Logger:
    """Reconfigure the shared gateway logger at runtime.

    Parameters
    ----------
    level: int | str | None
        New level (numeric or name). ``None`` keeps the current level.
    file_path: Optional[str]
        Attach a rotating file handler writing to this path (10MB x 5).
        ``None`` removes any file handler previously attached here.
    json_mode: bool
        JSON formatter (default) or plain text for managed handlers.

    Returns
    -------
    logging.Logger
        The shared ``llm_gateway`` logger. Handlers not managed by this
        module are left untouched.
    """
    logger = _ensure_root_logger(json_mode=json_mode, level=logging.INFO)
    if level is not None:
        resolved = _parse_level(level, default=logger.level) if isinstance(level, str) else level
        logger.setLevel(resolved)
    for h in logger.handlers:
        if getattr(h, _CONSOLE_HANDLER_ATTR, False):
            h.setLevel(logger.level)
            h.setFormatter(_formatter(json_mode))

    managed = [h for h in logger.handlers if getattr(h, _FILE_HANDLER_ATTR, False)]
    abs_path = os.path.abspath(os.path.expanduser(file_path)) if file_path else None
    for h in managed:
        if abs_path is None or getattr(h, "baseFilename", None) != abs_path:
            logger.removeHandler(h)
            with contextlib.suppress(OSError):
                h.close()
        else:
            h.setLevel(logger.level)
            h.setFormatter(_formatter(json_mode))
            return logger
    if abs_path is None:
        return logger

    os.makedirs(os.path.dirname(abs_path), exist_ok=True)
    fh = RotatingFileHandler(abs_path, maxBytes=10 * 1024 * 1024, backupCount=5, encoding="utf-8")
    setattr(fh, _FILE_HANDLER_ATTR, True)
    fh.setLevel(logger.level)
    fh.setFormatter(_formatter(json_mode))
    logger.addHandler(fh)
    return logger


def log_event(
    logger: logging.Logger,
    event: str,
    ctx: LogContext | None = None,
    *,
    level: int = logging.INFO,
    keep_none: bool = False,
    **fields: Any,
) -> None:
    """Emit one structured event as a single JSON line.

    ``None`` values are dropped unless ``keep_none`` is set, which
    ``normalized_log_event`` uses to guarantee its schema keys are present.
    """
    if not logger.isEnabledFor(level):
        return
    payload: Dict[str, Any] = {"event": event}
    if ctx:
        payload |= ctx.to_dict()
    if keep_none:
        payload.update(fields)
    else:
        payload.update({k: v for k, v in fields.items() if v is not None})
    logger.log(level, json.dumps(payload, ensure_ascii=False, default=str))


REQUIRED_NORMALIZED_KEYS = (
    "structured",
    "phase",
    "attempt",
    "error_code",
    "emitted",
    "tokens",
)


def _coerce_tokens(tokens: Any) -> Any:
    """Coerce token usage info (mapping, pairs, or object with ``to_dict``) to a dict."""
    if tokens is None:
        return None
    if isinstance(tokens, Mapping):
        return dict(tokens.items())
    to_dict = getattr(tokens, "to_dict", None)
    if callable(to_dict):
        return to_dict()
    if isinstance(tokens, (list, tuple)):
        try:
            return dict(tokens)
        except (TypeError, ValueError):
            return {"value": repr(tokens)}
    return {"value": repr(tokens)}


def normalized_log_event(  # noqa: PLR0913
    logger: logging.Logger,
    event: str,
    ctx: LogContext | None = None,
    *,
    phase: str,
    attempt: int | None = None,
    error_code: str | None = None,
    emitted: Any = None,
    tokens: Any = None,
    level: int | None = None,
    **extra_fields: Any,
) -> None:
    """Emit a structured event with the normalized key set.

    ``level`` defaults to WARNING when ``error_code`` is set, INFO otherwise.
    Extra fields never overwrite the normalized keys.
    """
    base_fields: Dict[str, Any] = {
        "structured": True,
        "phase": phase,
        "attempt": attempt,
        "error_code": error_code,
        "emitted": emitted,
        "tokens": _coerce_tokens(tokens),
    }
    if error_code is None:
        base_fields.pop("error_code")
    for k, v in extra_fields.items():
        if v is None or k in base_fields:
            continue
        base_fields[k] = v
    if level is None:
        level = logging.WARNING if error_code is not None else logging.INFO
    log_event(logger, event, ctx, level=level, keep_none=True, **base_fields)


__all__ = [
    "LogContext",
    "ROOT_LOGGER_NAME",
    "get_logger",
    "configure_logger",
    "log_event",
    "normalized_log_event",
    "REQUIRED_NORMALIZED_KEYS",
]
