"""
modelhost - bootstrapper for a local containerized model server.

Keeps an Ollama container present, current, running and stocked with the
required models, then execs the downstream binary that depends on it.
"""

__version__ = "1.0.0"

# Re-export key components for easier access
from modelhost.errors import BootstrapError
from modelhost.models.config import ModelhostConfig
from modelhost.models.container import ContainerSpec

__all__ = [
    "BootstrapError",
    "ModelhostConfig",
    "ContainerSpec",
]
