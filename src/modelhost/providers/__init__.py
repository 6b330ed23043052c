"""Resource providers for modelhost."""

from modelhost.providers.base import BaseProvider
from modelhost.providers.registry import ProviderRegistry

__all__ = [
    "BaseProvider",
    "ProviderRegistry",
]
