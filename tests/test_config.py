"""Tests for application settings."""

import os
from pathlib import Path

import pytest

from speedlingo.config import ConfigManager, AppConfig, get_config, get_config_manager, reset_config_manager
from speedlingo.error_handling import ConfigurationError


class TestConfigManager:
    def test_defaults(self):
        config = ConfigManager().load_config()
        assert config.github.api_base_url == "https://api.github.com"
        assert config.fork.poll_interval == 2.0
        assert config.fork.timeout == 300.0
        assert config.tool.executable == "lingo"
        assert config.tool.results_path == Path(os.path.expanduser("~")) / "speedlingo-review-results"

    def test_settings_file_overrides_defaults(self, tmp_path):
        settings = tmp_path / "settings.yaml"
        settings.write_text("fork:\n  timeout: 60\ntool:\n  executable: /opt/lingo\n")
        config = ConfigManager(settings).load_config()
        assert config.fork.timeout == 60
        assert config.fork.poll_interval == 2.0
        assert config.tool.executable == "/opt/lingo"

    def test_environment_overrides_file(self, tmp_path, monkeypatch):
        settings = tmp_path / "settings.yaml"
        settings.write_text("fork:\n  timeout: 60\n")
        monkeypatch.setenv("SPEEDLINGO_FORK_TIMEOUT", "10")
        monkeypatch.setenv("LOG_LEVEL", "debug")
        config = ConfigManager(settings).load_config()
        assert config.fork.timeout == 10
        assert config.logging.level == "DEBUG"

    def test_env_var_substitution(self, tmp_path, monkeypatch):
        settings = tmp_path / "settings.yaml"
        settings.write_text("tool:\n  results_dir: ${REPORTS}\n")
        monkeypatch.setenv("REPORTS", str(tmp_path / "reports"))
        config = ConfigManager(settings).load_config()
        assert config.tool.results_path == tmp_path / "reports"

    def test_unknown_section_rejected(self, tmp_path):
        settings = tmp_path / "settings.yaml"
        settings.write_text("aws:\n  region: us-east-1\n")
        with pytest.raises(ConfigurationError, match="Unknown settings section"):
            ConfigManager(settings).load_config()

    def test_unknown_key_rejected(self, tmp_path):
        settings = tmp_path / "settings.yaml"
        settings.write_text("fork:\n  retries: 3\n")
        with pytest.raises(ConfigurationError, match="retries"):
            ConfigManager(settings).load_config()

    def test_invalid_log_level(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "LOUD")
        with pytest.raises(ConfigurationError, match="Invalid log level"):
            ConfigManager().load_config()

    @pytest.mark.parametrize("value", ["0", "-1"])
    def test_fork_timeout_must_be_positive(self, monkeypatch, value):
        monkeypatch.setenv("SPEEDLINGO_FORK_TIMEOUT", value)
        with pytest.raises(ConfigurationError, match="fork.timeout"):
            ConfigManager().load_config()

    def test_unreadable_settings_file(self, tmp_path):
        with pytest.raises(ConfigurationError, match="Failed to load settings"):
            ConfigManager(tmp_path / "missing.yaml").load_config()

    def test_global_manager_is_shared(self):
        assert get_config_manager() is get_config_manager()
        assert isinstance(get_config(), AppConfig)
        first = get_config_manager()
        reset_config_manager()
        assert get_config_manager() is not first
