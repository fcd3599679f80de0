"""
Logger configuration and setup for speedlingo.
"""

import logging
import sys
from typing import Optional, Dict, Iterable
from dataclasses import dataclass

from ..config import get_config
from .log_formatter import StructuredFormatter, ColoredFormatter
from .log_handler import RotatingFileHandler, ConsoleHandler, SecretRedactingFilter


@dataclass
class LoggerConfig:
    """Configuration for logging system."""
    level: str = "WARNING"
    file_path: Optional[str] = None
    format_string: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    max_file_size: int = 10  # MB
    backup_count: int = 5
    enable_console: bool = True
    enable_structured: bool = False
    enable_colors: bool = True


class LoggingManager:
    """
    Centralized logging manager.

    Installs the console and optional rotating file handlers on the root
    logger, each guarded by a filter that masks registered secrets.
    """

    THIRD_PARTY_LOGGERS = ('urllib3', 'requests', 'git')

    def __init__(self):
        self._handlers: Dict[str, logging.Handler] = {}
        self._configured = False
        self._redactor = SecretRedactingFilter()
        self.config: Optional[LoggerConfig] = None

    def setup_logging(self, config: Optional[LoggerConfig] = None, secrets: Optional[Iterable[str]] = None) -> None:
        """
        Set up the logging system.

        Args:
            config: Logging configuration (built from app settings if not provided)
            secrets: Values to mask in every log record
        """
        for secret in secrets or []:
            self._redactor.add_secret(secret)

        if self._configured:
            return

        if config is None:
            app_config = get_config()
            config = LoggerConfig(
                level=app_config.logging.level,
                file_path=app_config.logging.file,
                format_string=app_config.logging.format,
                max_file_size=app_config.logging.max_file_size,
                backup_count=app_config.logging.backup_count,
                enable_structured=app_config.logging.structured
            )

        self.config = config
        level = self._get_log_level(config.level)

        root_logger = logging.getLogger()
        root_logger.setLevel(level)
        for handler in self._handlers.values():
            root_logger.removeHandler(handler)
        self._handlers.clear()

        if config.enable_console:
            self._install('console', self._create_console_handler(config), level)

        if config.file_path:
            self._install('file', self._create_file_handler(config), level)

        # Third-party libraries only report problems unless we are debugging
        if level > logging.DEBUG:
            for name in self.THIRD_PARTY_LOGGERS:
                logging.getLogger(name).setLevel(logging.WARNING)

        logging.getLogger(__name__).debug(f"Logging system initialized with level: {config.level}")
        self._configured = True

    def _install(self, name: str, handler: logging.Handler, level: int) -> None:
        handler.setLevel(level)
        handler.addFilter(self._redactor)
        logging.getLogger().addHandler(handler)
        self._handlers[name] = handler

    def _create_console_handler(self, config: LoggerConfig) -> logging.Handler:
        handler = ConsoleHandler(sys.stdout)

        if config.enable_structured:
            formatter = StructuredFormatter()
        elif config.enable_colors and sys.stdout.isatty():
            formatter = ColoredFormatter(config.format_string)
        else:
            formatter = logging.Formatter(config.format_string)

        handler.setFormatter(formatter)
        return handler

    def _create_file_handler(self, config: LoggerConfig) -> logging.Handler:
        handler = RotatingFileHandler(
            filename=config.file_path,
            maxBytes=config.max_file_size * 1024 * 1024,
            backupCount=config.backup_count,
            encoding='utf-8'
        )

        if config.enable_structured:
            handler.setFormatter(StructuredFormatter())
        else:
            handler.setFormatter(logging.Formatter(config.format_string))
        return handler

    def _get_log_level(self, level_str: str) -> int:
        """Convert string log level to logging constant."""
        level_mapping = {
            'DEBUG': logging.DEBUG,
            'INFO': logging.INFO,
            'WARNING': logging.WARNING,
            'ERROR': logging.ERROR,
            'CRITICAL': logging.CRITICAL
        }
        return level_mapping.get(level_str.upper(), logging.INFO)

    def add_secret(self, secret: str) -> None:
        self._redactor.add_secret(secret)

    def redact(self, text: str) -> str:
        return self._redactor.redact(text)

    def close_handlers(self) -> None:
        """Detach and close all handlers."""
        root_logger = logging.getLogger()
        for handler in self._handlers.values():
            root_logger.removeHandler(handler)
            handler.close()

        self._handlers.clear()
        self._configured = False


# Global logging manager instance
_logging_manager = LoggingManager()


def setup_logging(config: Optional[LoggerConfig] = None, secrets: Optional[Iterable[str]] = None) -> None:
    """
    Set up the global logging system.

    Args:
        config: Logging configuration
        secrets: Values to mask in every log record
    """
    _logging_manager.setup_logging(config, secrets)


def add_secret(secret: str) -> None:
    """Mask ``secret`` in all subsequent log output."""
    _logging_manager.add_secret(secret)


def redact(text: str) -> str:
    """Mask registered secrets and URL credentials in ``text``."""
    return _logging_manager.redact(text)


def close_logging() -> None:
    """Close logging system and clean up resources."""
    _logging_manager.close_handlers()
