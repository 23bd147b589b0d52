"""Pydantic configuration DTOs for the gateway."""

from .config_target import ConfigTarget
from .gateway_config import GatewayConfig

__all__ = ["ConfigTarget", "GatewayConfig"]
