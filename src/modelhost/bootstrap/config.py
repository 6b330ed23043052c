"""Configuration loading for the bootstrapper."""

import logging
import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from pydantic import ValidationError
from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from modelhost.errors import EnvironmentMissing
from modelhost.models.config import ModelhostConfig


logger = logging.getLogger(__name__)

CONFIG_ENV = "MODELHOST_CONFIG"
HOME_ENV = "MODELHOST_HOME"
LOG_LEVEL_ENV = "MODELHOST_LOG_LEVEL"
DEFAULT_CONFIG_NAME = "modelhost.yaml"


class ConfigManager:
    """Resolves the install home and loads the optional YAML config."""

    def __init__(self, environ: Optional[Mapping[str, str]] = None):
        """Initialize configuration manager."""
        self.environ = os.environ if environ is None else environ
        self.home = Path(self.environ.get(HOME_ENV) or Path.cwd()).resolve()
        self.yaml = YAML(typ="safe")
        self.config: Optional[ModelhostConfig] = None
        self.source: Optional[Path] = None

    def config_path(self) -> Optional[Path]:
        """Pick the config file: env override, then home default, else none."""
        explicit = self.environ.get(CONFIG_ENV)
        if explicit:
            path = Path(explicit).expanduser()
            if not path.is_file():
                raise EnvironmentMissing(
                    f"Config file not found: {path}",
                    hint=f"Unset {CONFIG_ENV} or point it at an existing file",
                )
            return path

        default = self.home / DEFAULT_CONFIG_NAME
        return default if default.is_file() else None

    def load(self) -> ModelhostConfig:
        """Load configuration, falling back to built-in defaults."""
        path = self.config_path()
        data: Dict[str, Any] = {}
        if path is not None:
            data = self._read_yaml(path)
            self.source = path

        level = self.environ.get(LOG_LEVEL_ENV)
        if level:
            data["log_level"] = level

        try:
            self.config = ModelhostConfig(**data)
        except ValidationError as e:
            raise EnvironmentMissing(f"Invalid configuration in {path or 'environment'}: {e}") from e

        return self.config

    def _read_yaml(self, file_path: Path) -> Dict[str, Any]:
        """Read and parse YAML file."""
        try:
            text = file_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise EnvironmentMissing(f"Could not read {file_path}: {e}") from e
        try:
            data = self.yaml.load(text)
        except YAMLError as e:
            raise EnvironmentMissing(f"Could not parse {file_path}: {e}") from e
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise EnvironmentMissing(f"Config file {file_path} must contain a mapping")
        return dict(data)
