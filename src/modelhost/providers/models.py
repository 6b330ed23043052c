"""Model provider for resources held inside the serving container."""

import logging
from typing import Iterable, List, Optional, TYPE_CHECKING

from modelhost.errors import ResourceError
from modelhost.models.config import ModelsConfig
from modelhost.models.container import ContainerSpec
from modelhost.models.resource import ModelEntry, normalize_name, parse_model_listing
from modelhost.providers.base import BaseProvider

if TYPE_CHECKING:
    from modelhost.providers.registry import ProviderRegistry
    from modelhost.providers.container import ContainerProvider


logger = logging.getLogger(__name__)


def is_present(name: str, entries: Iterable[ModelEntry]) -> bool:
    """True if any listed model shares the required model's base name."""
    wanted = normalize_name(name)
    return any(entry.base_name == wanted for entry in entries)


class ModelProvider(BaseProvider):
    """Ensures required models exist inside the managed container."""

    def __init__(self):
        """Initialize model provider."""
        self.config: Optional[ModelsConfig] = None
        self._container_provider: Optional["ContainerProvider"] = None

    async def initialize(self, config, registry: "ProviderRegistry") -> None:
        """Initialize provider with configuration and registry."""
        self.config = config.models
        self._container_provider = registry.get_provider("container")

    @property
    def container_provider(self) -> Optional["ContainerProvider"]:
        """Get container provider."""
        return self._container_provider

    async def list_models(self, spec: ContainerSpec) -> List[ModelEntry]:
        """List models currently held by the service (one exec call)."""
        result = await self.container_provider.execute(spec, self.config.list_command)
        if not result.ok:
            logger.warning(f"Could not list models in {spec.name}: {result.stderr.strip()}")
            return []
        return parse_model_listing(result.stdout)

    async def pull(self, spec: ContainerSpec, name: str) -> None:
        """Fetch a model by its exact qualified name."""
        result = await self.container_provider.execute(
            spec, [*self.config.pull_command, name]
        )
        if not result.ok:
            raise ResourceError(name, hint=result.stderr.strip() or None)
        logger.debug(f"Pulled model {name}")

    async def ensure_models(self, spec: ContainerSpec, required: List[str]) -> List[str]:
        """Fetch every required model that is missing; stop at the first failure.

        Returns the names that were pulled.
        """
        logger.info("Verifying required models...")
        entries = await self.list_models(spec)

        pulled = []
        for name in required:
            if is_present(name, entries):
                continue
            logger.warning(f"Model {name} not found, pulling...")
            await self.pull(spec, name)
            pulled.append(name)

        logger.info("All models ready")
        return pulled
