"""Tests for configuration loading."""

import pytest

from modelhost.bootstrap.config import ConfigManager
from modelhost.errors import EnvironmentMissing


class TestConfigManager:
    """Test ConfigManager file resolution and loading."""

    def test_defaults_without_file(self, tmp_path):
        """Test built-in defaults when no config file exists."""
        manager = ConfigManager({"MODELHOST_HOME": str(tmp_path)})

        config = manager.load()

        assert manager.home == tmp_path.resolve()
        assert manager.source is None
        assert config.service.container_name == "ollama"

    def test_home_config_file(self, tmp_path):
        """Test modelhost.yaml in the home directory is picked up."""
        (tmp_path / "modelhost.yaml").write_text("""
log_level: debug
service:
  container_name: llm
models:
  required:
    - llama3:8b
""")
        manager = ConfigManager({"MODELHOST_HOME": str(tmp_path)})

        config = manager.load()

        assert manager.source == tmp_path / "modelhost.yaml"
        assert config.log_level == "DEBUG"
        assert config.service.container_name == "llm"
        assert config.service.image == "ollama/ollama:latest"
        assert config.models.required == ["llama3:8b"]

    def test_explicit_config_file(self, tmp_path):
        """Test MODELHOST_CONFIG wins over the home default."""
        (tmp_path / "modelhost.yaml").write_text("service:\n  container_name: home\n")
        explicit = tmp_path / "custom.yaml"
        explicit.write_text("service:\n  container_name: explicit\n")

        manager = ConfigManager({
            "MODELHOST_HOME": str(tmp_path),
            "MODELHOST_CONFIG": str(explicit),
        })

        assert manager.load().service.container_name == "explicit"

    def test_missing_explicit_file(self, tmp_path):
        """Test a missing explicit config file is fatal."""
        manager = ConfigManager({
            "MODELHOST_HOME": str(tmp_path),
            "MODELHOST_CONFIG": str(tmp_path / "nope.yaml"),
        })

        with pytest.raises(EnvironmentMissing) as exc_info:
            manager.load()

        assert "Config file not found" in str(exc_info.value)

    def test_explicit_config_is_directory(self, tmp_path):
        """Test a directory is not accepted as the config file."""
        manager = ConfigManager({
            "MODELHOST_HOME": str(tmp_path),
            "MODELHOST_CONFIG": str(tmp_path),
        })

        with pytest.raises(EnvironmentMissing) as exc_info:
            manager.load()

        assert "Config file not found" in str(exc_info.value)

    def test_home_config_directory_is_ignored(self, tmp_path):
        """Test a directory named like the default config falls back to defaults."""
        (tmp_path / "modelhost.yaml").mkdir()
        manager = ConfigManager({"MODELHOST_HOME": str(tmp_path)})

        assert manager.load().service.container_name == "ollama"
        assert manager.source is None

    def test_unreadable_file(self, tmp_path):
        """Test read errors become EnvironmentMissing."""
        manager = ConfigManager({"MODELHOST_HOME": str(tmp_path)})

        with pytest.raises(EnvironmentMissing) as exc_info:
            manager._read_yaml(tmp_path)

        assert "Could not read" in str(exc_info.value)

    def test_non_utf8_file(self, tmp_path):
        """Test undecodable bytes become EnvironmentMissing."""
        (tmp_path / "modelhost.yaml").write_bytes(b"\xff\xfe")
        manager = ConfigManager({"MODELHOST_HOME": str(tmp_path)})

        with pytest.raises(EnvironmentMissing) as exc_info:
            manager.load()

        assert "Could not read" in str(exc_info.value)

    def test_invalid_values(self, tmp_path):
        """Test validation errors surface as EnvironmentMissing."""
        (tmp_path / "modelhost.yaml").write_text("readiness:\n  max_attempts: 0\n")
        manager = ConfigManager({"MODELHOST_HOME": str(tmp_path)})

        with pytest.raises(EnvironmentMissing) as exc_info:
            manager.load()

        assert "max_attempts" in str(exc_info.value)

    def test_non_mapping_file(self, tmp_path):
        """Test a YAML list at top level is rejected."""
        (tmp_path / "modelhost.yaml").write_text("- a\n- b\n")
        manager = ConfigManager({"MODELHOST_HOME": str(tmp_path)})

        with pytest.raises(EnvironmentMissing):
            manager.load()

    def test_empty_file(self, tmp_path):
        """Test an empty file means defaults."""
        (tmp_path / "modelhost.yaml").write_text("")
        manager = ConfigManager({"MODELHOST_HOME": str(tmp_path)})

        assert manager.load().log_level == "INFO"

    def test_log_level_env_override(self, tmp_path):
        """Test MODELHOST_LOG_LEVEL overrides the file."""
        (tmp_path / "modelhost.yaml").write_text("log_level: ERROR\n")
        manager = ConfigManager({
            "MODELHOST_HOME": str(tmp_path),
            "MODELHOST_LOG_LEVEL": "warning",
        })

        assert manager.load().log_level == "WARNING"
