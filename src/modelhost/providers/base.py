"""Base provider interface."""

from abc import ABC, abstractmethod
from typing import Any, TYPE_CHECKING

if TYPE_CHECKING:
    from modelhost.providers.registry import ProviderRegistry


class BaseProvider(ABC):
    """Base provider interface that all providers must implement."""

    @abstractmethod
    async def initialize(self, config: Any, registry: "ProviderRegistry") -> None:
        """Initialize the provider with configuration and its peers."""
        pass
