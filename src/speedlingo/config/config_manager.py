"""
Application settings for speedlingo.

Settings cover everything except the operator's identity: API endpoint,
fork polling cadence, the lingo executable, the results directory and
logging. Credentials live in :mod:`speedlingo.config.credentials` and are
passed explicitly to the components that need them.
"""

import os
import yaml
from pathlib import Path
from typing import Dict, Any, Optional, Union
from dataclasses import dataclass, field, asdict
import logging

from ..error_handling import ConfigurationError

logger = logging.getLogger(__name__)


@dataclass
class GitHubConfig:
    """GitHub API configuration."""
    api_base_url: str = "https://api.github.com"
    timeout: int = 30
    max_retries: int = 3


@dataclass
class ForkConfig:
    """Fork readiness polling configuration."""
    poll_interval: float = 2.0  # seconds
    timeout: float = 300.0  # seconds


@dataclass
class ToolConfig:
    """External lingo tool configuration."""
    executable: str = "lingo"
    results_dir: str = "~/speedlingo-review-results"

    @property
    def results_path(self) -> Path:
        """Results directory with ``~`` expanded."""
        return Path(os.path.expanduser(self.results_dir))


@dataclass
class LoggingConfig:
    """Logging configuration."""
    level: str = "WARNING"
    file: Optional[str] = None
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    max_file_size: int = 10  # MB
    backup_count: int = 5
    structured: bool = False


@dataclass
class AppConfig:
    """Complete application configuration."""
    github: GitHubConfig = field(default_factory=GitHubConfig)
    fork: ForkConfig = field(default_factory=ForkConfig)
    tool: ToolConfig = field(default_factory=ToolConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class ConfigManager:
    """
    Manages application settings from multiple sources.

    Settings are loaded in the following order (later sources override earlier):
    1. Default configuration
    2. Settings file (optional YAML)
    3. Environment variables
    """

    _SECTIONS = {
        "github": GitHubConfig,
        "fork": ForkConfig,
        "tool": ToolConfig,
        "logging": LoggingConfig,
    }

    def __init__(self, config_file: Optional[Union[str, Path]] = None):
        """
        Initialize configuration manager.

        Args:
            config_file: Path to a settings file
        """
        self.config_file = Path(config_file) if config_file else None
        self._config: Optional[AppConfig] = None
        self._env_var_mapping = self._create_env_var_mapping()

    def _create_env_var_mapping(self) -> Dict[str, str]:
        """Create mapping of environment variables to config paths."""
        return {
            # GitHub configuration
            "SPEEDLINGO_GITHUB_API_URL": "github.api_base_url",
            "SPEEDLINGO_GITHUB_TIMEOUT": "github.timeout",
            "SPEEDLINGO_GITHUB_MAX_RETRIES": "github.max_retries",

            # Fork polling
            "SPEEDLINGO_FORK_POLL_INTERVAL": "fork.poll_interval",
            "SPEEDLINGO_FORK_TIMEOUT": "fork.timeout",

            # External tool
            "SPEEDLINGO_TOOL": "tool.executable",
            "SPEEDLINGO_RESULTS_DIR": "tool.results_dir",

            # Logging configuration
            "LOG_LEVEL": "logging.level",
            "LOG_FILE": "logging.file",
            "LOG_FORMAT": "logging.format",
            "LOG_MAX_SIZE": "logging.max_file_size",
            "LOG_BACKUP_COUNT": "logging.backup_count",
            "LOG_STRUCTURED": "logging.structured",
        }

    def load_config(self) -> AppConfig:
        """
        Load configuration from all sources.

        Returns:
            Complete application configuration

        Raises:
            ConfigurationError: If the settings file or a value is invalid
        """
        if self._config is not None:
            return self._config

        config_dict = AppConfig().to_dict()

        if self.config_file is not None:
            file_config = self._load_config_file(self.config_file)
            config_dict = self._merge_configs(config_dict, file_config)

        env_config = self._load_env_config()
        config_dict = self._merge_configs(config_dict, env_config)

        config_dict = self._substitute_env_vars(config_dict)

        self._validate_config(config_dict)

        self._config = self._dict_to_config(config_dict)

        return self._config

    def _load_config_file(self, config_path: Path) -> Dict[str, Any]:
        """
        Load settings from YAML file.

        Args:
            config_path: Path to settings file

        Returns:
            Configuration dictionary
        """
        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                config = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise ConfigurationError(
                f"Failed to load settings file {config_path}",
                config_path=str(config_path),
                cause=e
            ) from e

        if config is None:
            return {}
        if not isinstance(config, dict):
            raise ConfigurationError("Settings file must contain a mapping", config_path=str(config_path))

        logger.info(f"Loaded settings from {config_path}")
        return config

    def _load_env_config(self) -> Dict[str, Any]:
        """
        Load configuration from environment variables.

        Returns:
            Configuration dictionary from environment variables
        """
        env_config = {}

        for env_var, config_path in self._env_var_mapping.items():
            value = os.getenv(env_var)
            if value is not None:
                value = self._convert_env_value(value)
                self._set_nested_value(env_config, config_path, value)

        return env_config

    def _convert_env_value(self, value: str) -> Any:
        """
        Convert environment variable string to appropriate type.

        Args:
            value: String value from environment variable

        Returns:
            Converted value
        """
        if value.lower() in ('true', 'yes', 'on'):
            return True
        elif value.lower() in ('false', 'no', 'off'):
            return False

        try:
            if '.' in value:
                return float(value)
            else:
                return int(value)
        except ValueError:
            pass

        return value

    def _set_nested_value(self, config: Dict[str, Any], path: str, value: Any) -> None:
        """
        Set a nested configuration value using dot notation.

        Args:
            config: Configuration dictionary
            path: Dot-separated path (e.g., 'fork.timeout')
            value: Value to set
        """
        keys = path.split('.')
        current = config

        for key in keys[:-1]:
            if key not in current:
                current[key] = {}
            current = current[key]

        current[keys[-1]] = value

    def _substitute_env_vars(self, config: Dict[str, Any]) -> Dict[str, Any]:
        """
        Substitute ``${VAR}`` references in configuration values.

        Args:
            config: Configuration dictionary

        Returns:
            Configuration with environment variables substituted
        """
        def substitute_recursive(obj):
            if isinstance(obj, dict):
                return {k: substitute_recursive(v) for k, v in obj.items()}
            elif isinstance(obj, list):
                return [substitute_recursive(item) for item in obj]
            elif isinstance(obj, str) and obj.startswith('${') and obj.endswith('}'):
                env_var = obj[2:-1]
                return os.getenv(env_var, obj)
            else:
                return obj

        return substitute_recursive(config)

    def _merge_configs(self, base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        """
        Merge two configuration dictionaries.

        Args:
            base: Base configuration
            override: Override configuration

        Returns:
            Merged configuration
        """
        result = base.copy()

        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._merge_configs(result[key], value)
            else:
                result[key] = value

        return result

    def _validate_config(self, config: Dict[str, Any]) -> None:
        """
        Validate configuration values.

        Args:
            config: Configuration dictionary

        Raises:
            ConfigurationError: If configuration is invalid
        """
        for section, values in config.items():
            if section not in self._SECTIONS:
                raise ConfigurationError(f"Unknown settings section: {section}")
            if not isinstance(values, dict):
                raise ConfigurationError(f"Settings section '{section}' must be a mapping")
            known = set(self._SECTIONS[section].__dataclass_fields__)
            unknown = set(values) - known
            if unknown:
                raise ConfigurationError(
                    f"Unknown settings in section '{section}': {', '.join(sorted(unknown))}"
                )

        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        log_level = str(config.get("logging", {}).get("level", "WARNING")).upper()
        if log_level not in valid_levels:
            raise ConfigurationError(f"Invalid log level: {log_level}. Valid levels: {sorted(valid_levels)}")
        config["logging"]["level"] = log_level

        fork = config.get("fork", {})
        for key in ("poll_interval", "timeout"):
            value = fork.get(key)
            if not isinstance(value, (int, float)) or isinstance(value, bool) or value <= 0:
                raise ConfigurationError(f"fork.{key} must be a positive number, got {value!r}")

        if not config.get("tool", {}).get("executable"):
            raise ConfigurationError("tool.executable must not be empty")

    def _dict_to_config(self, config_dict: Dict[str, Any]) -> AppConfig:
        """
        Convert configuration dictionary to AppConfig object.

        Args:
            config_dict: Configuration dictionary

        Returns:
            AppConfig object
        """
        return AppConfig(
            github=GitHubConfig(**config_dict.get("github", {})),
            fork=ForkConfig(**config_dict.get("fork", {})),
            tool=ToolConfig(**config_dict.get("tool", {})),
            logging=LoggingConfig(**config_dict.get("logging", {}))
        )

    def get_config(self) -> AppConfig:
        """
        Get the current configuration.

        Returns:
            Application configuration
        """
        if self._config is None:
            return self.load_config()
        return self._config


# Global configuration manager instance
_config_manager: Optional[ConfigManager] = None


def get_config_manager(config_file: Optional[Union[str, Path]] = None) -> ConfigManager:
    """
    Get the global configuration manager instance.

    Args:
        config_file: Path to settings file (only used on first call)

    Returns:
        ConfigManager instance
    """
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager(config_file)
    return _config_manager


def reset_config_manager() -> None:
    """Forget the global configuration manager (used between CLI runs and in tests)."""
    global _config_manager
    _config_manager = None


def get_config() -> AppConfig:
    """
    Get the current application configuration.

    Returns:
        Application configuration
    """
    return get_config_manager().get_config()
