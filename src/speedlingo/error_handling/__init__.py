"""
Error types shared by every pipeline stage.
"""

from .exceptions import (
    SpeedlingoError, ConfigurationError, UsageError, UnsupportedModeError,
    GitHubAPIError, ForkScheduled, ForkTimeoutError, WorkspaceError,
    ScaffoldingError, ToolInvocationError, VersionControlError
)

__all__ = [
    "SpeedlingoError",
    "ConfigurationError",
    "UsageError",
    "UnsupportedModeError",
    "GitHubAPIError",
    "ForkScheduled",
    "ForkTimeoutError",
    "WorkspaceError",
    "ScaffoldingError",
    "ToolInvocationError",
    "VersionControlError"
]
