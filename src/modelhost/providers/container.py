"""Container provider for the managed model-serving container."""

import logging
import subprocess
from typing import Optional, List, Dict, TYPE_CHECKING

from modelhost.errors import DriftCheckError, ProvisionError
from modelhost.models.config import RuntimeConfig
from modelhost.models.container import (
    AccelerationMode,
    ContainerSpec,
    ContainerState,
    ReconcileOutcome,
)
from modelhost.providers.base import BaseProvider
from modelhost.utils.process import CommandResult, run_command

if TYPE_CHECKING:
    from modelhost.providers.registry import ProviderRegistry
    from modelhost.providers.image import ImageProvider


logger = logging.getLogger(__name__)


def _stderr_hint(error: subprocess.SubprocessError) -> Optional[str]:
    """Runtime stderr from a failed command, if any."""
    stderr = getattr(error, "stderr", None) or ""
    if isinstance(stderr, bytes):
        stderr = stderr.decode(errors="replace")
    return stderr.strip() or None


class ContainerProvider(BaseProvider):
    """Provider for a single named container driven through the runtime CLI.

    Only one container name is managed per invocation. Two invocations racing
    against the same name can interleave create and remove calls; that is
    not guarded against.
    """

    def __init__(self):
        """Initialize container provider."""
        self.config: Optional[RuntimeConfig] = None
        self._image_provider: Optional["ImageProvider"] = None

    async def initialize(self, config, registry: "ProviderRegistry") -> None:
        """Initialize provider with configuration and registry."""
        self.config = config.runtime
        self._image_provider = registry.get_provider("image")

    @property
    def image_provider(self) -> Optional["ImageProvider"]:
        """Get image provider."""
        return self._image_provider

    def _cmd(self, *args: str) -> List[str]:
        return [self.config.executable, *args]

    async def _container_states(self) -> Dict[str, str]:
        """Map every container name (running or not) to its runtime state."""
        result = await run_command(
            self._cmd("ps", "-a", "--format", "{{.Names}}\t{{.State}}"),
            check=False,
        )
        if not result.ok:
            logger.debug(f"Listing containers failed: {result.stderr.strip()}")
            return {}

        states = {}
        for line in result.stdout.splitlines():
            name, _, state = line.strip().partition("\t")
            if name:
                states[name] = state.strip().lower()
        return states

    async def status(self, spec: ContainerSpec) -> ContainerState:
        """Check whether the container exists and is running (exact name match)."""
        states = await self._container_states()
        if spec.name not in states:
            return ContainerState.ABSENT
        if states[spec.name] == "running":
            return ContainerState.RUNNING
        return ContainerState.STOPPED

    async def current_image_id(self, spec: ContainerSpec) -> Optional[str]:
        """Image id the existing container was created from."""
        result = await run_command(
            self._cmd("inspect", "--format={{.Image}}", spec.name),
            check=False,
        )
        image_id = result.stdout.strip()
        if not result.ok or not image_id:
            return None
        return image_id

    async def create(self, spec: ContainerSpec, accel: AccelerationMode) -> None:
        """Create and start the container."""
        if accel is AccelerationMode.ENABLED:
            logger.info(f"Creating container {spec.name} with GPU support")
        else:
            logger.info(f"Creating CPU-only container {spec.name}")

        try:
            await run_command(
                self._cmd(*spec.run_args(accel)),
                timeout=self.config.command_timeout,
            )
        except (subprocess.CalledProcessError, subprocess.TimeoutExpired) as e:
            message = f"Failed to create container {spec.name}"
            if accel is AccelerationMode.ENABLED:
                message += " with GPU support"
            raise ProvisionError(message, hint=_stderr_hint(e)) from e

    async def start(self, spec: ContainerSpec) -> None:
        """Start the container."""
        logger.info(f"Starting container {spec.name}")
        try:
            await run_command(self._cmd("start", spec.name), timeout=self.config.command_timeout)
        except (subprocess.CalledProcessError, subprocess.TimeoutExpired) as e:
            raise ProvisionError(f"Failed to start container {spec.name}", hint=_stderr_hint(e)) from e

    async def stop(self, spec: ContainerSpec) -> None:
        """Stop the container; failures are logged only."""
        result = await run_command(
            self._cmd("stop", spec.name),
            check=False,
            timeout=self.config.command_timeout,
        )
        if not result.ok:
            logger.warning(f"Failed to stop container {spec.name}: {result.stderr.strip()}")

    async def remove(self, spec: ContainerSpec) -> None:
        """Remove the container; failures are logged only."""
        result = await run_command(
            self._cmd("rm", spec.name),
            check=False,
            timeout=self.config.command_timeout,
        )
        if not result.ok:
            logger.warning(f"Failed to remove container {spec.name}: {result.stderr.strip()}")

    async def execute(
        self,
        spec: ContainerSpec,
        command: List[str],
        timeout: Optional[float] = None,
    ) -> CommandResult:
        """Execute command in container."""
        return await run_command(
            self._cmd("exec", spec.name, *command),
            check=False,
            timeout=timeout,
        )

    async def check_drift(self, spec: ContainerSpec) -> bool:
        """Pull the image and report whether the container runs an older one.

        Raises DriftCheckError when either identity cannot be determined.
        """
        current = await self.current_image_id(spec)
        if not current:
            raise DriftCheckError(f"Could not inspect image of container {spec.name}")

        try:
            await self.image_provider.pull(spec.image)
        except (subprocess.CalledProcessError, subprocess.TimeoutExpired) as e:
            raise DriftCheckError(f"Could not pull {spec.image}") from e

        latest = await self.image_provider.image_id(spec.image)
        if not latest:
            raise DriftCheckError(f"Could not inspect image {spec.image}")

        logger.debug(f"Container image {current}, latest {latest}")
        return current != latest

    async def _is_stale(self, spec: ContainerSpec) -> bool:
        try:
            return await self.check_drift(spec)
        except DriftCheckError as e:
            logger.debug(f"Update check skipped: {e}")
            return False

    async def _provision(self, spec: ContainerSpec, accel: AccelerationMode) -> None:
        try:
            await self.image_provider.pull(spec.image)
        except (subprocess.CalledProcessError, subprocess.TimeoutExpired) as e:
            raise ProvisionError(f"Failed to pull image {spec.image}", hint=_stderr_hint(e)) from e
        await self.create(spec, accel)

    async def _recreate(self, spec: ContainerSpec, accel: AccelerationMode) -> None:
        # No rollback: if create fails here the old container is already gone.
        await self.stop(spec)
        await self.remove(spec)
        await self.create(spec, accel)

    async def reconcile(self, spec: ContainerSpec, accel: AccelerationMode) -> ReconcileOutcome:
        """Bring the container to present, current and running."""
        state = await self.status(spec)

        if state is ContainerState.ABSENT:
            logger.info(f"Container {spec.name} not found, creating new container")
            await self._provision(spec, accel)
            outcome = ReconcileOutcome.CREATED
        else:
            logger.info(f"Checking for {spec.image} updates")
            if await self._is_stale(spec):
                logger.warning(f"New {spec.image} version available, updating container")
                await self._recreate(spec, accel)
                outcome = ReconcileOutcome.RECREATED
            else:
                outcome = ReconcileOutcome.UNCHANGED

        if outcome is not ReconcileOutcome.UNCHANGED:
            state = await self.status(spec)

        if state is not ContainerState.RUNNING:
            await self.start(spec)
            if outcome is ReconcileOutcome.UNCHANGED:
                outcome = ReconcileOutcome.STARTED

        return outcome
