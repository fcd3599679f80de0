"""
GitHub API client with authentication and rate limiting support.
"""

import requests
import time
import logging
from typing import Dict, Any, Optional
from dataclasses import dataclass
from datetime import datetime
import json

from .. import __version__
from ..config import get_config
from ..error_handling import GitHubAPIError, ForkScheduled

logger = logging.getLogger(__name__)


@dataclass
class RateLimitInfo:
    """GitHub API rate limit information."""
    limit: int
    remaining: int
    reset_time: datetime
    used: int


class GitHubClient:
    """
    GitHub API client covering the calls speedlingo needs: fork a
    repository and look a repository up.

    Lookups retry server errors and dropped connections with exponential
    backoff. Fork requests are not retried. Every other failure surfaces as
    :class:`GitHubAPIError`.
    """

    def __init__(
        self,
        access_token: str,
        base_url: Optional[str] = None,
        timeout: Optional[int] = None,
        max_retries: Optional[int] = None
    ):
        """
        Initialize GitHub API client.

        Args:
            access_token: GitHub personal access token
            base_url: GitHub API base URL
            timeout: Per-request timeout in seconds
            max_retries: Retries for server errors and connection failures
        """
        config = get_config()

        self.access_token = access_token
        self.base_url = base_url or config.github.api_base_url
        self.timeout = timeout if timeout is not None else config.github.timeout
        self.max_retries = max_retries if max_retries is not None else config.github.max_retries

        self.session = requests.Session()
        self._setup_session()

        self._rate_limit_info: Optional[RateLimitInfo] = None

    def _setup_session(self) -> None:
        """Set up the requests session with headers and authentication."""
        headers = {
            "Accept": "application/vnd.github.v3+json",
            "User-Agent": f"speedlingo/{__version__}"
        }

        if self.access_token:
            headers["Authorization"] = f"token {self.access_token}"

        self.session.headers.update(headers)

    def _make_request(
        self,
        method: str,
        endpoint: str,
        retry: bool = True,
        max_wait: Optional[float] = None,
        **kwargs
    ) -> requests.Response:
        """
        Make a request to the GitHub API with retry logic and rate limiting.

        Args:
            method: HTTP method (GET, POST, etc.)
            endpoint: API endpoint (without base URL)
            retry: Whether server errors, dropped connections and rate limiting
                are retried; requests with side effects pass False
            max_wait: Upper bound in seconds on the total time spent waiting
                for rate limits and backoff; None waits as long as needed
            **kwargs: Additional arguments for requests

        Returns:
            Response object (any 2xx status)

        Raises:
            GitHubAPIError: If the request fails after retries, or a wait
                would exceed ``max_wait``
        """
        url = f"{self.base_url.rstrip('/')}/{endpoint.lstrip('/')}"
        attempts = self.max_retries + 1 if retry else 1
        wait_until = time.monotonic() + max_wait if max_wait is not None else None

        for attempt in range(attempts):
            can_retry = attempt + 1 < attempts
            try:
                self._check_rate_limits(wait_until)

                response = self.session.request(
                    method=method,
                    url=url,
                    timeout=self.timeout,
                    **kwargs
                )

                self._update_rate_limit_info(response)

                if response.status_code == 403 and "rate limit" in response.text.lower():
                    if can_retry:
                        wait_time = self._calculate_rate_limit_wait()
                        logger.warning(f"Rate limited. Waiting {wait_time} seconds before retry {attempt + 1}")
                        self._wait(wait_time, wait_until)
                        continue
                    raise GitHubAPIError(
                        "Rate limit exceeded and max retries reached" if retry else "Rate limit exceeded",
                        status_code=response.status_code,
                        response_data=self._decode_error(response)
                    )

                if not response.ok:
                    error_data = self._decode_error(response)

                    error_message = f"GitHub API request failed: {method} {endpoint}"
                    if error_data and "message" in error_data:
                        error_message += f" - {error_data['message']}"

                    if can_retry and response.status_code >= 500:
                        wait_time = 2 ** attempt
                        logger.warning(f"Server error {response.status_code}. Retrying in {wait_time} seconds")
                        self._wait(wait_time, wait_until)
                        continue

                    raise GitHubAPIError(
                        error_message,
                        status_code=response.status_code,
                        response_data=error_data
                    )

                return response

            except requests.exceptions.RequestException as e:
                if can_retry:
                    wait_time = 2 ** attempt
                    logger.warning(f"Request failed: {e}. Retrying in {wait_time} seconds")
                    self._wait(wait_time, wait_until)
                    continue
                raise GitHubAPIError(
                    f"Request failed after {attempts - 1} retries: {e}",
                    cause=e
                ) from e

        raise GitHubAPIError("Unexpected error in request retry logic")

    @staticmethod
    def _wait(seconds: float, wait_until: Optional[float]) -> None:
        if wait_until is not None and time.monotonic() + seconds > wait_until:
            raise GitHubAPIError(f"Giving up instead of waiting {seconds:g} seconds past the time limit")
        time.sleep(seconds)

    @staticmethod
    def _decode_error(response: requests.Response) -> Optional[Dict[str, Any]]:
        if not response.content:
            return None
        try:
            data = response.json()
        except json.JSONDecodeError:
            return None
        return data if isinstance(data, dict) else None

    def _update_rate_limit_info(self, response: requests.Response) -> None:
        headers = response.headers

        if "X-RateLimit-Limit" in headers:
            self._rate_limit_info = RateLimitInfo(
                limit=int(headers["X-RateLimit-Limit"]),
                remaining=int(headers.get("X-RateLimit-Remaining", 0)),
                reset_time=datetime.fromtimestamp(int(headers.get("X-RateLimit-Reset", 0))),
                used=int(headers.get("X-RateLimit-Used", 0))
            )

    def _check_rate_limits(self, wait_until: Optional[float] = None) -> None:
        """Wait for the rate limit window to reset when nearly exhausted."""
        if not self._rate_limit_info:
            return

        if self._rate_limit_info.remaining < 10:
            now = datetime.now()
            if now < self._rate_limit_info.reset_time:
                wait_time = (self._rate_limit_info.reset_time - now).total_seconds() + 1
                logger.info(f"Rate limit nearly exhausted. Waiting {wait_time} seconds until reset")
                self._wait(wait_time, wait_until)

    def _calculate_rate_limit_wait(self) -> int:
        if self._rate_limit_info and self._rate_limit_info.reset_time:
            now = datetime.now()
            if now < self._rate_limit_info.reset_time:
                return int((self._rate_limit_info.reset_time - now).total_seconds()) + 1

        return 60

    def create_fork(self, owner: str, repo: str) -> Dict[str, Any]:
        """
        Ask GitHub to fork ``owner/repo`` into the authenticated account.

        GitHub creates forks asynchronously and answers ``202 Accepted``
        while the copy is in progress. The request is sent exactly once.

        Args:
            owner: Owner of the upstream repository
            repo: Repository name

        Returns:
            Normalized repository information when the fork already exists

        Raises:
            ForkScheduled: If the fork was accepted but is not available yet
            GitHubAPIError: If GitHub rejected the request
        """
        response = self._make_request("POST", f"/repos/{owner}/{repo}/forks", retry=False)

        if response.status_code == 202:
            raise ForkScheduled(response_data=self._decode_error(response))

        logger.info(f"Fork of {owner}/{repo} is available")
        return self._normalize_repository(response.json())

    def get_repository(self, owner: str, repo: str, max_wait: Optional[float] = None) -> Dict[str, Any]:
        """
        Get repository information from GitHub API.

        Args:
            owner: Repository owner
            repo: Repository name
            max_wait: Longest time in seconds to spend waiting on rate limits
                and retries

        Returns:
            Normalized repository information dictionary

        Raises:
            GitHubAPIError: If repository information cannot be retrieved
        """
        try:
            response = self._make_request("GET", f"/repos/{owner}/{repo}", max_wait=max_wait)
        except GitHubAPIError as e:
            if e.status_code == 404:
                raise GitHubAPIError(
                    f"Repository not found: {owner}/{repo}",
                    status_code=404,
                    response_data=e.response_data
                ) from e
            raise

        logger.debug(f"Retrieved information for repository: {owner}/{repo}")
        return self._normalize_repository(response.json())

    @staticmethod
    def _normalize_repository(repo_data: Dict[str, Any]) -> Dict[str, Any]:
        parent = repo_data.get("parent") or {}
        return {
            "name": repo_data["name"],
            "full_name": repo_data["full_name"],
            "owner": repo_data["owner"]["login"],
            "clone_url": repo_data["clone_url"],
            "html_url": repo_data.get("html_url"),
            "default_branch": repo_data.get("default_branch", "main"),
            "fork": repo_data.get("fork", False),
            "parent": parent.get("full_name"),
            "private": repo_data.get("private", False),
            "archived": repo_data.get("archived", False)
        }
