"""
Runs the lingo executable against a workspace.
"""

import subprocess
import logging
from pathlib import Path
from typing import List, Optional, Union

from ..config import get_config
from ..error_handling import ToolInvocationError, ScaffoldingError
from ..models import PipelineMode

logger = logging.getLogger(__name__)

COMMON_FLAGS = ["--debug", "--keep-all"]


def report_path(results_dir: Union[str, Path], repo: str) -> Path:
    """Where review mode asks lingo to write the report for ``repo``."""
    return Path(results_dir) / f"{repo}-results.json"


def build_command(mode: PipelineMode, repo: str, executable: str, results_dir: Union[str, Path]) -> List[str]:
    """
    Build the lingo argument list for a mode.

    Args:
        mode: Pipeline mode
        repo: Repository name, used to name the review report
        executable: lingo executable name or path
        results_dir: Directory receiving review reports

    Returns:
        Argument list suitable for :func:`subprocess.run`
    """
    command = [executable, "run", mode.value] + COMMON_FLAGS
    if mode is PipelineMode.REVIEW:
        command += ["-o", str(report_path(results_dir, repo))]
    return command


def ensure_results_dir(results_dir: Union[str, Path]) -> Path:
    """
    Create the review results directory if it does not exist.

    Raises:
        ScaffoldingError: If the directory cannot be created
    """
    path = Path(results_dir)
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise ScaffoldingError(f"Failed to create results directory {path}", file_path=str(path), cause=e) from e
    return path


class ToolRunner:
    """
    Launches lingo in the workspace with its output passed straight through
    to the console.
    """

    def __init__(self, executable: Optional[str] = None, results_dir: Optional[Union[str, Path]] = None):
        config = get_config()

        self.executable = executable or config.tool.executable
        self.results_dir = Path(results_dir) if results_dir else config.tool.results_path

    def command_for(self, mode: PipelineMode, repo: str) -> List[str]:
        return build_command(mode, repo, self.executable, self.results_dir)

    def run(self, workspace_path: Union[str, Path], mode: PipelineMode, repo: str) -> Optional[Path]:
        """
        Run lingo in ``workspace_path`` and wait for it to finish.

        stdout and stderr are inherited from this process, so lingo's output
        appears on the console as it is produced.

        Args:
            workspace_path: Working directory for lingo
            mode: Pipeline mode
            repo: Repository name

        Returns:
            Expected report path in review mode, None in rewrite mode

        Raises:
            ToolInvocationError: If lingo cannot be started or exits non-zero
        """
        command = self.command_for(mode, repo)

        if mode is PipelineMode.REVIEW:
            logger.info(f"Results will be stored in {self.results_dir}")
        logger.info(f"Running lingo command: {' '.join(command)}")

        try:
            subprocess.run(command, cwd=str(workspace_path), check=True)
        except OSError as e:
            raise ToolInvocationError(
                f"Failed to start {self.executable}",
                command=command,
                cause=e
            ) from e
        except subprocess.CalledProcessError as e:
            raise ToolInvocationError(
                f"{self.executable} exited with status {e.returncode}",
                command=command,
                returncode=e.returncode,
                cause=e
            ) from e

        logger.info("lingo finished successfully")
        if mode is PipelineMode.REVIEW:
            return report_path(self.results_dir, repo)
        return None
