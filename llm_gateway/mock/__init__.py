"""Mock provider package."""

from .client import MockAPIError, MockClient, MockFactory, MockModel

__all__ = ["MockAPIError", "MockClient", "MockFactory", "MockModel"]
