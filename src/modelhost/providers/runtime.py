"""Container runtime and accelerator capability detection."""

import logging
import re
from typing import Optional, TYPE_CHECKING

from modelhost.errors import EnvironmentMissing
from modelhost.models.config import RuntimeConfig
from modelhost.models.container import AccelerationMode
from modelhost.providers.base import BaseProvider
from modelhost.utils.process import run_command, which

if TYPE_CHECKING:
    from modelhost.providers.registry import ProviderRegistry


logger = logging.getLogger(__name__)


class RuntimeProvider(BaseProvider):
    """Probes the host for the container runtime and GPU support."""

    def __init__(self):
        """Initialize runtime provider."""
        self.config: Optional[RuntimeConfig] = None

    async def initialize(self, config, registry: "ProviderRegistry") -> None:
        """Initialize provider with configuration."""
        self.config = config.runtime

    @property
    def executable(self) -> str:
        return self.config.executable

    def ensure_available(self) -> str:
        """Return the runtime path, or fail if it is not installed."""
        path = which(self.executable)
        if not path:
            raise EnvironmentMissing(
                f"{self.executable.capitalize()} is not installed",
                hint=f"Install {self.executable} and make sure it is on PATH",
            )
        logger.debug(f"Found container runtime at {path}")
        return path

    async def has_gpu_hardware(self) -> bool:
        """Check that the GPU probe exists and runs cleanly."""
        if not which(self.config.gpu_probe):
            return False
        result = await run_command([self.config.gpu_probe], check=False)
        return result.ok

    async def has_gpu_plugin(self) -> bool:
        """Check that the runtime can hand GPUs to containers."""
        result = await run_command([self.executable, "info"], check=False)
        if result.ok and re.search(self.config.gpu_runtime_pattern, result.stdout):
            return True
        return which(self.config.gpu_plugin_cli) is not None

    async def detect_acceleration(self) -> AccelerationMode:
        """Decide whether containers should be created with GPU support."""
        if not await self.has_gpu_hardware():
            logger.info("No GPU detected - containers will be CPU-only")
            return AccelerationMode.DISABLED

        if not await self.has_gpu_plugin():
            logger.warning(
                "NVIDIA GPU detected but Docker GPU support "
                "(nvidia-container-toolkit) not available"
            )
            logger.warning("Install nvidia-container-toolkit for GPU support")
            logger.warning(f"See: {self.config.gpu_help_url}")
            return AccelerationMode.DISABLED

        logger.info("NVIDIA GPU and Docker GPU support detected")
        return AccelerationMode.ENABLED
