"""Readiness polling against the service's HTTP endpoint."""

import asyncio
import logging
from typing import Optional

import httpx

from modelhost.errors import ReadinessTimeout
from modelhost.models.config import ReadinessConfig


logger = logging.getLogger(__name__)


class ReadinessPoller:
    """Fixed-interval poll until the endpoint answers.

    Any HTTP response counts as ready, regardless of status or body; only
    transport errors mean "not yet".
    """

    def __init__(
        self,
        config: ReadinessConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.config = config
        self.transport = transport

    async def probe(self, url: str) -> bool:
        """Issue one request; True if anything answered."""
        try:
            async with httpx.AsyncClient(
                transport=self.transport,
                timeout=self.config.probe_timeout,
                follow_redirects=False,
            ) as client:
                response = await client.get(url)
        except httpx.HTTPError as e:
            logger.debug(f"Probe {url} failed: {type(e).__name__}: {e}")
            return False
        logger.debug(f"Probe {url} answered HTTP {response.status_code}")
        return True

    async def wait_ready(self, url: str) -> int:
        """Block until ready; returns the attempt number that succeeded."""
        attempts = self.config.max_attempts
        for attempt in range(1, attempts + 1):
            if await self.probe(url):
                logger.info("Service API is ready")
                return attempt
            if attempt < attempts:
                await asyncio.sleep(self.config.interval)

        total = attempts * self.config.interval
        raise ReadinessTimeout(
            f"Service API failed to respond after {total:g} seconds",
            hint=f"Check the container logs and that {url} is reachable",
        )
