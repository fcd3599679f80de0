"""
Publishes lingo's modifications to a dedicated branch on the fork.
"""

import logging
import re
from typing import Iterable, Optional, Sequence
from urllib.parse import urlsplit, urlunsplit

from git import Actor, Repo, GitCommandError

from ..config import Credentials
from ..error_handling import VersionControlError

logger = logging.getLogger(__name__)

REWRITE_BRANCH = "rewrite"
COMMIT_MESSAGE = "Update comments based on best practices from Effective Go"
# GitHub ignores the username for token auth over HTTPS, but it must not be empty
PUSH_USERNAME = "emptystring"
# One line per ref in `git push --porcelain` output: flag, refspec, summary
PORCELAIN_REF = re.compile(r"^([ +\-*!=])\t(\S+)\t(.*)$", re.MULTILINE)


def authenticated_url(url: str, token: str, username: str = PUSH_USERNAME) -> str:
    """
    Embed basic-auth credentials into an HTTP(S) remote URL.

    Other URLs (local paths, ``file://``, ssh) are returned unchanged.
    """
    parts = urlsplit(url)
    if parts.scheme not in ("http", "https"):
        return url

    host = parts.hostname or ""
    if parts.port:
        host = f"{host}:{parts.port}"
    return urlunsplit((parts.scheme, f"{username}:{token}@{host}", parts.path, parts.query, parts.fragment))


class GitPublisher:
    """
    Checks out the rewrite branch, commits the working tree minus the
    scaffolding files and pushes the branch to ``origin``.

    None of these steps are retried: repeating a commit or push after a
    partial failure risks duplicate commits or a diverged branch.
    """

    def __init__(
        self,
        repo: Repo,
        credentials: Credentials,
        branch: str = REWRITE_BRANCH,
        remote: str = "origin"
    ):
        """
        Initialize publisher.

        Args:
            repo: Repository of the workspace clone
            credentials: Commit identity and push token
            branch: Branch that receives the changes
            remote: Remote to push to
        """
        self.repo = repo
        self.credentials = credentials
        self.branch = branch
        self.remote = remote

    def checkout_branch(self) -> bool:
        """
        Switch to the rewrite branch, creating it only if it does not exist.

        A plain checkout also picks up the branch from ``origin`` when an
        earlier run already pushed it, so repeated runs reuse the branch.
        The trailing ``--`` keeps git from reading the branch name as a path
        when the work tree has a file or directory of the same name.

        Returns:
            True if the branch was created, False if an existing one was reused

        Raises:
            VersionControlError: If the branch can be neither checked out nor created
        """
        try:
            self.repo.git.checkout(self.branch, "--")
            logger.info(f"Checked out existing branch {self.branch}")
            return False
        except GitCommandError as e:
            logger.debug(f"Branch {self.branch} not found ({e.stderr.strip() if e.stderr else e}), creating it")

        try:
            self.repo.git.checkout("-b", self.branch)
        except GitCommandError as e:
            raise VersionControlError(
                f"Failed to create branch {self.branch}",
                operation="checkout",
                cause=e
            ) from e

        logger.info(f"Created new branch {self.branch}")
        return True

    def stage_changes(self, excluded_paths: Sequence[str] = ()) -> bool:
        """
        Stage every working-tree change, then unstage ``excluded_paths``.

        Args:
            excluded_paths: Paths relative to the work tree to keep out of the commit

        Returns:
            True if anything remains staged

        Raises:
            VersionControlError: If staging fails
        """
        try:
            self.repo.git.add(all=True)
        except GitCommandError as e:
            raise VersionControlError("Failed to stage changes", operation="stage", cause=e) from e

        if excluded_paths:
            try:
                self.repo.git.reset("--quiet", "HEAD", "--", *excluded_paths)
            except GitCommandError as e:
                raise VersionControlError(
                    f"Failed to unstage {', '.join(excluded_paths)}",
                    operation="unstage",
                    cause=e
                ) from e

        return self.has_staged_changes()

    def has_staged_changes(self) -> bool:
        """Check whether the index differs from HEAD."""
        try:
            return bool(self.repo.index.diff("HEAD"))
        except GitCommandError as e:
            raise VersionControlError("Failed to inspect staged changes", operation="stage", cause=e) from e

    def commit(self, message: str = COMMIT_MESSAGE) -> str:
        """
        Commit the staged changes as the operator.

        Returns:
            SHA of the new commit

        Raises:
            VersionControlError: If the commit cannot be created
        """
        author = Actor(self.credentials.username, self.credentials.email)
        try:
            commit = self.repo.index.commit(message, author=author, committer=author)
        except (GitCommandError, ValueError, OSError) as e:
            raise VersionControlError("Failed to commit changes", operation="commit", cause=e) from e

        logger.info(f"Committed {commit.hexsha[:8]} on {self.branch}")
        return commit.hexsha

    def push(self) -> None:
        """
        Push the branch to the remote using the access token.

        Raises:
            VersionControlError: If the push fails or any ref is rejected
        """
        try:
            remote = self.repo.remote(self.remote)
        except ValueError as e:
            raise VersionControlError(f"Remote {self.remote} not found", operation="push", cause=e) from e

        push_url = authenticated_url(remote.url, self.credentials.token)
        refspec = f"refs/heads/{self.branch}:refs/heads/{self.branch}"

        # Push straight to the URL so the token is never written to .git/config
        try:
            output = self.repo.git.push("--porcelain", push_url, refspec)
        except GitCommandError as e:
            raise VersionControlError(f"Failed to push {self.branch}", operation="push", cause=e) from e

        refs = [match.groups() for match in PORCELAIN_REF.finditer(output)]
        rejected = [summary for flag, _, summary in refs if flag == "!"]
        if rejected or not refs:
            summary = "; ".join(rejected) or "no refs pushed"
            raise VersionControlError(f"Push of {self.branch} was rejected: {summary}", operation="push")

        logger.info(f"Pushed {self.branch} to {self.remote}")

    def publish(self, excluded_paths: Iterable[str] = (), message: str = COMMIT_MESSAGE) -> Optional[str]:
        """
        Stage, commit and push the working tree.

        When nothing is left to commit once ``excluded_paths`` are unstaged,
        no commit is created and nothing is pushed.

        Returns:
            SHA of the pushed commit, or None when there was nothing to publish
        """
        if not self.stage_changes(list(excluded_paths)):
            logger.warning(f"No changes to commit on {self.branch}; skipping commit and push")
            return None

        sha = self.commit(message)
        self.push()
        return sha
