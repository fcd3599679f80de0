"""
Custom exceptions for speedlingo.
"""

from typing import Optional, Dict, Any, List


class SpeedlingoError(Exception):
    """
    Base exception for all speedlingo errors.

    Every pipeline stage wraps the first error it meets in one of the
    subclasses below, so the CLI only has to catch this type.
    """

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None
    ):
        """
        Initialize speedlingo error.

        Args:
            message: Error message
            error_code: Optional error code for categorization
            context: Additional context information
            cause: Original exception that caused this error
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.context = context or {}
        self.cause = cause

    def __str__(self) -> str:
        """String representation of the error."""
        parts = [self.message]

        if self.error_code:
            parts.append(f"Code: {self.error_code}")

        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            parts.append(f"Context: {context_str}")

        if self.cause:
            parts.append(f"Caused by: {self.cause}")

        return " | ".join(parts)


class ConfigurationError(SpeedlingoError):
    """
    Exception for credentials and settings problems.
    """

    def __init__(self, message: str, config_path: Optional[str] = None, **kwargs):
        context = kwargs.get('context', {})
        if config_path:
            context['config_path'] = config_path

        kwargs['context'] = context
        kwargs.setdefault('error_code', 'CONFIG')
        super().__init__(message, **kwargs)

        self.config_path = config_path


class UsageError(SpeedlingoError):
    """Exception for invalid command-line usage."""

    def __init__(self, message: str, **kwargs):
        kwargs.setdefault('error_code', 'USAGE')
        super().__init__(message, **kwargs)


class UnsupportedModeError(UsageError):
    """
    Raised when the requested pipeline mode is not one of the supported modes.
    """

    def __init__(self, mode: str, supported: List[str], **kwargs):
        message = f"command not found. Commands available: {', '.join(supported)}"
        context = kwargs.get('context', {})
        context['mode'] = mode
        kwargs['context'] = context
        super().__init__(message, **kwargs)

        self.mode = mode
        self.supported = supported


class GitHubAPIError(SpeedlingoError):
    """
    Exception for GitHub API errors.
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        response_data: Optional[Dict] = None,
        **kwargs
    ):
        """
        Initialize GitHub API error.

        Args:
            message: Error message
            status_code: HTTP status code returned by the API
            response_data: Decoded JSON error body, if any
            **kwargs: Additional arguments for base class
        """
        kwargs.setdefault('error_code', 'GITHUB')
        super().__init__(message, **kwargs)
        self.status_code = status_code
        self.response_data = response_data

    def __str__(self) -> str:
        if self.status_code is not None:
            return f"{super().__str__()} (HTTP {self.status_code})"
        return super().__str__()


class ForkScheduled(GitHubAPIError):
    """
    The fork request was accepted but GitHub has not finished creating it.

    This is not a failure: the fork becomes queryable after a short delay.
    """

    MESSAGE = "job scheduled on GitHub side; try again later"

    def __init__(self, response_data: Optional[Dict] = None):
        super().__init__(self.MESSAGE, status_code=202, response_data=response_data)


class ForkTimeoutError(SpeedlingoError):
    """
    Raised when a fork does not become available before the poll deadline.
    """

    def __init__(self, message: str, repository: Optional[str] = None, timeout: Optional[float] = None, **kwargs):
        context = kwargs.get('context', {})
        if repository:
            context['repository'] = repository
        if timeout is not None:
            context['timeout_seconds'] = timeout

        kwargs['context'] = context
        kwargs.setdefault('error_code', 'FORK_TIMEOUT')
        super().__init__(message, **kwargs)

        self.repository = repository
        self.timeout = timeout


class WorkspaceError(SpeedlingoError):
    """
    Exception for temporary workspace and clone failures.
    """

    def __init__(self, message: str, repository_url: Optional[str] = None, **kwargs):
        context = kwargs.get('context', {})
        if repository_url:
            context['repository_url'] = repository_url

        kwargs['context'] = context
        kwargs.setdefault('error_code', 'WORKSPACE')
        super().__init__(message, **kwargs)

        self.repository_url = repository_url


class ScaffoldingError(SpeedlingoError):
    """
    Exception raised when the lingo configuration files cannot be written.
    """

    def __init__(self, message: str, file_path: Optional[str] = None, **kwargs):
        context = kwargs.get('context', {})
        if file_path:
            context['file_path'] = file_path

        kwargs['context'] = context
        kwargs.setdefault('error_code', 'SCAFFOLDING')
        super().__init__(message, **kwargs)

        self.file_path = file_path


class ToolInvocationError(SpeedlingoError):
    """
    Exception for lingo launch failures and non-zero exits.
    """

    def __init__(
        self,
        message: str,
        command: Optional[List[str]] = None,
        returncode: Optional[int] = None,
        **kwargs
    ):
        """
        Initialize tool invocation error.

        Args:
            message: Error message
            command: Argument list that was executed
            returncode: Exit status, None when the process never started
            **kwargs: Additional arguments for base class
        """
        context = kwargs.get('context', {})
        if command:
            context['command'] = " ".join(command)
        if returncode is not None:
            context['returncode'] = returncode

        kwargs['context'] = context
        kwargs.setdefault('error_code', 'TOOL')
        super().__init__(message, **kwargs)

        self.command = command
        self.returncode = returncode


class VersionControlError(SpeedlingoError):
    """
    Exception for local git failures, annotated with the failing operation.
    """

    def __init__(self, message: str, operation: Optional[str] = None, **kwargs):
        context = kwargs.get('context', {})
        if operation:
            context['operation'] = operation

        kwargs['context'] = context
        kwargs.setdefault('error_code', 'GIT')
        super().__init__(message, **kwargs)

        self.operation = operation
