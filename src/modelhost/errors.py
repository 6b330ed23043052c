"""Error types raised by the bootstrap steps."""

from typing import Optional


class BootstrapError(Exception):
    """Base error for every fatal bootstrap failure."""

    def __init__(self, message: str, hint: Optional[str] = None):
        super().__init__(message)
        self.hint = hint


class EnvironmentMissing(BootstrapError):
    """A required tool or configuration file is not available."""


class ProvisionError(BootstrapError):
    """Image pull, container creation or container start failed."""


class DriftCheckError(BootstrapError):
    """The update check could not determine the latest image identity."""


class ResourceError(BootstrapError):
    """A required model could not be fetched into the service."""

    def __init__(self, name: str, message: Optional[str] = None, hint: Optional[str] = None):
        super().__init__(message or f"Failed to pull model {name}", hint=hint)
        self.name = name


class ReadinessTimeout(BootstrapError):
    """The service endpoint never answered within the polling window."""


class LaunchError(BootstrapError):
    """The downstream executable is missing or cannot be executed."""
