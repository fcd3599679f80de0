"""
Logging system for speedlingo.
"""

from .logger_config import setup_logging, add_secret, redact, close_logging, LoggerConfig
from .log_formatter import StructuredFormatter, ColoredFormatter
from .log_handler import RotatingFileHandler, ConsoleHandler, SecretRedactingFilter

__all__ = [
    "setup_logging",
    "add_secret",
    "redact",
    "close_logging",
    "LoggerConfig",
    "StructuredFormatter",
    "ColoredFormatter",
    "RotatingFileHandler",
    "ConsoleHandler",
    "SecretRedactingFilter"
]
