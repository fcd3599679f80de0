"""
Configuration management for speedlingo.
"""

from .config_manager import (
    ConfigManager, AppConfig, GitHubConfig, ForkConfig, ToolConfig,
    LoggingConfig, get_config_manager, get_config, reset_config_manager
)
from .credentials import Credentials, load_credentials, DEFAULT_CREDENTIALS_FILE

__all__ = [
    "ConfigManager",
    "AppConfig",
    "GitHubConfig",
    "ForkConfig",
    "ToolConfig",
    "LoggingConfig",
    "get_config_manager",
    "get_config",
    "reset_config_manager",
    "Credentials",
    "load_credentials",
    "DEFAULT_CREDENTIALS_FILE"
]
