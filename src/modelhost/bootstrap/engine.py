"""Bootstrap sequence: reconcile the service, then prepare the handoff."""

import logging
from datetime import datetime
from pathlib import Path
from typing import Mapping, Optional, Sequence

from modelhost.bootstrap.handoff import LaunchPlan, build_launch_plan, verify_executable
from modelhost.bootstrap.readiness import ReadinessPoller
from modelhost.errors import ResourceError
from modelhost.models.config import ModelhostConfig
from modelhost.models.container import ContainerSpec, ReconcileOutcome
from modelhost.providers import ProviderRegistry


logger = logging.getLogger(__name__)


class Bootstrapper:
    """Runs each step in order and stops at the first fatal error.

    Steps raise ``BootstrapError`` subclasses; nothing here catches them
    except the best-effort model pass right after a fresh container is created.
    """

    def __init__(
        self,
        config: ModelhostConfig,
        home: Path,
        provider_registry: Optional[ProviderRegistry] = None,
        poller: Optional[ReadinessPoller] = None,
    ):
        """Initialize bootstrapper."""
        self.config = config
        self.home = home
        self.provider_registry = provider_registry or ProviderRegistry()
        self.poller = poller or ReadinessPoller(config.readiness)
        self.spec = ContainerSpec.from_service(config.service)
        self.outcome: Optional[ReconcileOutcome] = None

    async def initialize(self):
        """Initialize providers."""
        await self.provider_registry.initialize(self.config)

    def _provider(self, name: str):
        provider = self.provider_registry.get_provider(name)
        if not provider:
            raise RuntimeError(f"{name.capitalize()} provider not available")
        return provider

    async def reconcile(self) -> ReconcileOutcome:
        """Make sure the service container is present, current, running and stocked."""
        runtime = self._provider("runtime")
        containers = self._provider("container")
        models = self._provider("models")

        runtime.ensure_available()
        accel = await runtime.detect_acceleration()

        self.outcome = await containers.reconcile(self.spec, accel)
        logger.info(f"Container {self.spec.name}: {self.outcome.value}")

        if self.outcome is ReconcileOutcome.CREATED:
            # The server inside a fresh container may not answer yet; the
            # post-readiness pass below is the one that must succeed.
            try:
                await models.ensure_models(self.spec, self.config.models.required)
            except ResourceError as e:
                logger.warning(f"{e}; retrying once the service is ready")
            else:
                logger.info("Container setup completed successfully")

        logger.info("Waiting for service API...")
        await self.poller.wait_ready(self.config.service.health_url)

        await models.ensure_models(self.spec, self.config.models.required)
        return self.outcome

    def prepare_launch(self, args: Sequence[str], environ: Mapping[str, str]) -> LaunchPlan:
        """Build and check the downstream command."""
        plan = build_launch_plan(self.config.launch, self.home, args, environ)
        verify_executable(plan.executable)
        return plan

    async def run(self, args: Sequence[str], environ: Mapping[str, str]) -> LaunchPlan:
        """Perform the full bootstrap and return the plan to exec."""
        start_time = datetime.now()
        await self.initialize()
        await self.reconcile()
        plan = self.prepare_launch(args, environ)

        duration = (datetime.now() - start_time).total_seconds()
        logger.debug(f"Bootstrap completed in {duration:.2f}s")
        return plan
