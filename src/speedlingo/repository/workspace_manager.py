"""
Workspace manager for cloning forks into temporary directories.
"""

import shutil
import sys
import tempfile
import logging
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Optional, TextIO

from git import Repo, GitCommandError, RemoteProgress

from ..error_handling import WorkspaceError

logger = logging.getLogger(__name__)


class ConsoleProgress(RemoteProgress):
    """Streams git clone/push progress lines to the console."""

    def __init__(self, stream: Optional[TextIO] = None):
        super().__init__()
        self.stream = stream if stream is not None else sys.stdout

    def update(self, op_code, cur_count, max_count=None, message=''):
        line = self._cur_line
        if line:
            self.stream.write(line + "\n")
            self.stream.flush()


@dataclass
class Workspace:
    """A full working copy of a fork in an ephemeral directory."""
    path: Path
    repo: Repo
    clone_url: str

    def exists(self) -> bool:
        return self.path.exists()


class WorkspaceManager:
    """
    Creates fresh clones in uniquely named temporary directories and
    guarantees their removal.

    Use :meth:`workspace` as a context manager: the directory is deleted
    when the ``with`` block exits, whether it completes or raises.
    """

    def __init__(self, temp_root: Optional[str] = None, progress: Optional[RemoteProgress] = None):
        """
        Initialize workspace manager.

        Args:
            temp_root: Parent directory for workspaces (system temp dir by default)
            progress: Clone progress reporter (console by default)
        """
        self.temp_root = Path(temp_root) if temp_root else None
        if self.temp_root is not None:
            self.temp_root.mkdir(parents=True, exist_ok=True)
        self.progress = progress if progress is not None else ConsoleProgress()

    def create_workspace(self, clone_url: str) -> Workspace:
        """
        Clone ``clone_url`` into a new temporary directory.

        The clone is complete (no depth limit) so existing branches on the
        fork can be checked out.

        Args:
            clone_url: URL or path of the repository to clone

        Returns:
            Workspace holding the clone

        Raises:
            WorkspaceError: If the directory cannot be created or the clone fails
        """
        try:
            path = Path(tempfile.mkdtemp(prefix="speedlingo-", dir=self.temp_root))
        except OSError as e:
            raise WorkspaceError("Failed to create temporary directory", repository_url=clone_url, cause=e) from e

        logger.info(f"Created temp dir {path}")
        logger.info(f"Attempting to clone {clone_url}")

        try:
            repo = Repo.clone_from(clone_url, path, progress=self.progress)
        except GitCommandError as e:
            self._remove(path)
            raise WorkspaceError(f"Git clone failed for {clone_url}", repository_url=clone_url, cause=e) from e

        logger.info(f"Cloned to {path}")
        return Workspace(path=path, repo=repo, clone_url=clone_url)

    def cleanup(self, workspace: Workspace) -> None:
        """
        Remove a workspace directory. Safe to call more than once.
        """
        workspace.repo.close()
        self._remove(workspace.path)

    def _remove(self, path: Path) -> None:
        if path.exists():
            shutil.rmtree(path, ignore_errors=True)
            logger.info(f"Cleaned up workspace directory: {path}")

    @contextmanager
    def workspace(self, clone_url: str) -> Iterator[Workspace]:
        """
        Context manager yielding a fresh clone that is removed on exit.

        Args:
            clone_url: URL or path of the repository to clone

        Yields:
            Workspace object
        """
        workspace = self.create_workspace(clone_url)
        try:
            yield workspace
        finally:
            self.cleanup(workspace)
