"""
Fork creation and readiness polling.
"""

import time
import logging
from typing import Callable, Optional

from ..config import Credentials, get_config
from ..error_handling import GitHubAPIError, ForkScheduled, ForkTimeoutError
from ..models import ForkHandle, ForkState
from .github_client import GitHubClient

logger = logging.getLogger(__name__)


def is_fork_scheduled(error: Exception) -> bool:
    """
    Tell whether a fork request error means "accepted, not yet complete".

    Args:
        error: Exception raised by :meth:`GitHubClient.create_fork`

    Returns:
        True when GitHub accepted the fork and is still creating it
    """
    if isinstance(error, ForkScheduled):
        return True
    if isinstance(error, GitHubAPIError) and error.status_code == 202:
        return True
    return ForkScheduled.MESSAGE in str(error)


class ForkOrchestrator:
    """
    Forks a repository into the authenticated account and waits until the
    fork can be cloned.

    Fork creation is never retried: a second request could leave GitHub
    with a duplicate or conflicting fork. Only the readiness lookup is
    repeated, every ``poll_interval`` seconds until ``timeout`` seconds have
    passed since the fork was requested. A lookup never waits on rate limits
    past that deadline.
    """

    def __init__(
        self,
        github_client: GitHubClient,
        credentials: Credentials,
        poll_interval: Optional[float] = None,
        timeout: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep
    ):
        """
        Initialize the fork orchestrator.

        Args:
            github_client: Authenticated GitHub client
            credentials: Operator credentials; the fork is looked up under ``username``
            poll_interval: Seconds between readiness checks
            timeout: Seconds from the fork request until giving up
            clock: Monotonic time source
            sleep: Sleep function
        """
        config = get_config()

        self.github_client = github_client
        self.credentials = credentials
        self.poll_interval = poll_interval if poll_interval is not None else config.fork.poll_interval
        self.timeout = timeout if timeout is not None else config.fork.timeout
        self._clock = clock
        self._sleep = sleep

    def fork(self, owner: str, repo: str) -> ForkHandle:
        """
        Fork ``owner/repo`` and wait for the fork to become available.

        Args:
            owner: Owner of the upstream repository
            repo: Repository name

        Returns:
            Fork handle in the ready state

        Raises:
            GitHubAPIError: If GitHub rejected the fork request
            ForkTimeoutError: If the fork was not available before the deadline
        """
        handle = ForkHandle(upstream_owner=owner, name=repo)
        deadline = self._clock() + self.timeout

        logger.info(f"Requesting fork of {handle.upstream_full_name}")
        try:
            self.github_client.create_fork(owner, repo)
        except GitHubAPIError as e:
            if not is_fork_scheduled(e):
                handle.state = ForkState.FAILED
                raise
            logger.info(f"Fork of {handle.upstream_full_name} scheduled, waiting for it to become available")
        handle.state = ForkState.PENDING

        self._wait_until_ready(handle, deadline)

        logger.info(f"Forked {handle.upstream_full_name} to {handle.full_name}")
        return handle

    def _wait_until_ready(self, handle: ForkHandle, deadline: float) -> None:
        last_error: Optional[Exception] = None

        while True:
            if self._clock() > deadline:
                handle.state = ForkState.FAILED
                raise ForkTimeoutError(
                    f"Fork of {handle.upstream_full_name} not available after {self.timeout:g} seconds",
                    repository=handle.upstream_full_name,
                    timeout=self.timeout,
                    cause=last_error
                ) from last_error

            try:
                repo_info = self.github_client.get_repository(
                    self.credentials.username, handle.name, max_wait=max(deadline - self._clock(), 0)
                )
            except GitHubAPIError as e:
                last_error = e
                logger.info(f"Fork not ready yet: {e}")
                self._sleep(self.poll_interval)
                continue

            handle.mark_ready(repo_info)
            return
