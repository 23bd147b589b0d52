"""Top-level gateway configuration: named targets.

A target name is chosen by the caller (``"default"``, ``"fast"``,
``"batch-cheap"``...) and is independent of the provider, since one provider
may back several named configurations.
"""
from __future__ import annotations

from typing import Dict

from pydantic import BaseModel, Field

from .config_target import ConfigTarget


class GatewayConfig(BaseModel):
    """Mapping of target name to :class:`ConfigTarget`."""

    targets: Dict[str, ConfigTarget] = Field(default_factory=dict)


__all__ = ["GatewayConfig"]
