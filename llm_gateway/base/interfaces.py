"""Gateway interfaces public surface.

``LanguageModel`` is the minimal contract; ``BatchCapableModel`` is a
capability extension checked via introspection before use, never assumed.
"""

from .interfaces_parts.language_model import LanguageModel
from .interfaces_parts.batch_capable_model import BatchCapableModel
from .interfaces_parts.provider_factory import ProviderFactory

__all__ = ["LanguageModel", "BatchCapableModel", "ProviderFactory"]
