"""Container specification models."""

from enum import Enum
from typing import List

from pydantic import BaseModel, Field

from modelhost.models.config import ServiceConfig


class AccelerationMode(Enum):
    """Whether the container gets hardware acceleration."""
    ENABLED = "enabled"
    DISABLED = "disabled"


class ContainerState(Enum):
    """Observed lifecycle state of the managed container."""
    ABSENT = "absent"
    STOPPED = "stopped"
    RUNNING = "running"


class ReconcileOutcome(Enum):
    """What a reconciliation pass did to the container."""
    CREATED = "created"
    RECREATED = "recreated"
    STARTED = "started"
    UNCHANGED = "unchanged"


class ContainerSpec(BaseModel):
    """Container specification."""
    name: str = Field(..., description="Container name")
    image: str = Field(..., description="Image reference to run")
    host_port: int = Field(default=11434)
    container_port: int = Field(default=11434)
    volume: str = Field(default="ollama:/root/.ollama")
    gpu_flags: List[str] = Field(default_factory=lambda: ["--gpus", "all"])

    @classmethod
    def from_service(cls, service: ServiceConfig) -> "ContainerSpec":
        return cls(
            name=service.container_name,
            image=service.image,
            host_port=service.host_port,
            container_port=service.container_port,
            volume=service.volume,
            gpu_flags=service.gpu_flags,
        )

    def run_args(self, accel: AccelerationMode) -> List[str]:
        """Arguments for ``<runtime> run`` creating this container."""
        args = ["run", "-d"]
        if accel is AccelerationMode.ENABLED:
            args.extend(self.gpu_flags)
        args.extend([
            "--name", self.name,
            "-p", f"{self.host_port}:{self.container_port}",
            "-v", self.volume,
            self.image,
        ])
        return args
