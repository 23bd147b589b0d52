"""Interface parts package (one Protocol per module)."""

from .language_model import LanguageModel
from .batch_capable_model import BatchCapableModel
from .provider_factory import ProviderFactory

__all__ = ["LanguageModel", "BatchCapableModel", "ProviderFactory"]
