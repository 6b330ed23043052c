"""Configuration models."""

from typing import List
from pydantic import BaseModel, ConfigDict, Field, field_validator


DEFAULT_MODELS = [
    "nomic-embed-text:latest",
    "hf.co/limcheekin/CodeRankEmbed-GGUF:Q4_K_M",
]


class RuntimeConfig(BaseModel):
    """Container runtime and accelerator tooling."""
    executable: str = Field(default="docker")
    gpu_probe: str = Field(default="nvidia-smi")
    gpu_plugin_cli: str = Field(default="nvidia-container-cli")
    gpu_runtime_pattern: str = Field(default=r"Runtimes.*nvidia")
    gpu_help_url: str = Field(default="https://hub.docker.com/r/ollama/ollama#nvidia-gpu")
    command_timeout: int = Field(default=600, ge=1)


class ServiceConfig(BaseModel):
    """The managed model-serving container."""
    container_name: str = Field(default="ollama")
    image: str = Field(default="ollama/ollama:latest")
    host_port: int = Field(default=11434, ge=1, le=65535)
    container_port: int = Field(default=11434, ge=1, le=65535)
    volume: str = Field(default="ollama:/root/.ollama")
    gpu_flags: List[str] = Field(default_factory=lambda: ["--gpus", "all"])
    health_host: str = Field(default="localhost")
    health_path: str = Field(default="/api/tags")

    @field_validator("health_path")
    @classmethod
    def validate_health_path(cls, v):
        """Keep the health path a plain absolute path."""
        if not v.startswith("/"):
            raise ValueError("health_path must start with '/'")
        return v

    @property
    def health_url(self) -> str:
        return f"http://{self.health_host}:{self.host_port}{self.health_path}"


class ReadinessConfig(BaseModel):
    """Readiness polling knobs."""
    max_attempts: int = Field(default=15, ge=1)
    interval: float = Field(default=2.0, ge=0)
    probe_timeout: float = Field(default=2.0, gt=0)


class ModelsConfig(BaseModel):
    """Models the service must hold before handoff."""
    required: List[str] = Field(default_factory=lambda: list(DEFAULT_MODELS))
    list_command: List[str] = Field(default_factory=lambda: ["ollama", "list"])
    pull_command: List[str] = Field(default_factory=lambda: ["ollama", "pull"])


class LaunchConfig(BaseModel):
    """Downstream executable launched after bootstrap."""
    executable: str = Field(default="remembrances-mcp")
    config_file: str = Field(default="config.yaml")
    config_flag: str = Field(default="--config")
    library_dir: str = Field(default="lib")
    library_path_var: str = Field(default="LD_LIBRARY_PATH")


class ModelhostConfig(BaseModel):
    """Main configuration model."""
    model_config = ConfigDict(extra="ignore")

    log_level: str = Field(default="INFO")
    runtime: RuntimeConfig = Field(default_factory=RuntimeConfig)
    service: ServiceConfig = Field(default_factory=ServiceConfig)
    readiness: ReadinessConfig = Field(default_factory=ReadinessConfig)
    models: ModelsConfig = Field(default_factory=ModelsConfig)
    launch: LaunchConfig = Field(default_factory=LaunchConfig)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Invalid log level: {v}")
        return v.upper()
