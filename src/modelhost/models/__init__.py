"""Pydantic models for configuration and validation."""

from modelhost.models.config import (
    ModelhostConfig,
    RuntimeConfig,
    ServiceConfig,
    ReadinessConfig,
    ModelsConfig,
    LaunchConfig,
)
from modelhost.models.container import (
    AccelerationMode,
    ContainerSpec,
    ContainerState,
    ReconcileOutcome,
)
from modelhost.models.resource import ModelEntry, normalize_name, parse_model_listing

__all__ = [
    "ModelhostConfig",
    "RuntimeConfig",
    "ServiceConfig",
    "ReadinessConfig",
    "ModelsConfig",
    "LaunchConfig",
    "AccelerationMode",
    "ContainerSpec",
    "ContainerState",
    "ReconcileOutcome",
    "ModelEntry",
    "normalize_name",
    "parse_model_listing",
]
