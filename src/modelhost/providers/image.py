"""Image provider for pulling and identifying container images."""

import logging
import subprocess
from typing import Optional, TYPE_CHECKING

from modelhost.models.config import RuntimeConfig
from modelhost.providers.base import BaseProvider
from modelhost.utils.process import run_command

if TYPE_CHECKING:
    from modelhost.providers.registry import ProviderRegistry


logger = logging.getLogger(__name__)


class ImageProvider(BaseProvider):
    """Provider for runtime images."""

    def __init__(self):
        """Initialize image provider."""
        self.config: Optional[RuntimeConfig] = None

    async def initialize(self, config, registry: "ProviderRegistry") -> None:
        """Initialize provider with configuration."""
        self.config = config.runtime

    async def pull(self, image: str) -> None:
        """Pull the latest version of an image.

        Raises ``subprocess.CalledProcessError`` or ``subprocess.TimeoutExpired``;
        callers decide whether a failed pull is fatal.
        """
        logger.info(f"Pulling latest image: {image}")
        try:
            await run_command(
                [self.config.executable, "pull", image],
                timeout=self.config.command_timeout,
            )
        except subprocess.CalledProcessError as e:
            logger.debug(f"Pull of {image} failed: {e}. Stderr: {e.stderr}")
            raise

    async def image_id(self, image: str) -> Optional[str]:
        """Return the local image id for a reference, or None if unknown."""
        result = await run_command(
            [self.config.executable, "inspect", "--format={{.Id}}", image],
            check=False,
        )
        image_id = result.stdout.strip()
        if not result.ok or not image_id:
            return None
        return image_id
