"""
Writes the lingo configuration into a workspace before lingo runs.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Union

from ..error_handling import ScaffoldingError
from ..models import PipelineMode

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "codelingo.yaml"
IGNORE_FILENAME = ".codelingoignore"
VENDOR_DIRECTORY = "vendor"
IGNORE_CONTENT = "vendor/"

REVIEW_CONFIG = """tenets:
  - import: codelingo/code-review-comments
  - import: codelingo/effective-go
"""

REWRITE_CONFIG = """tenets:
  - import: codelingo/effective-go/comment-first-word-as-subject
"""

MODE_CONFIGS = {
    PipelineMode.REVIEW: REVIEW_CONFIG,
    PipelineMode.REWRITE: REWRITE_CONFIG,
}


@dataclass
class ScaffoldingResult:
    """Files written into the workspace for lingo's benefit."""
    config_path: Path
    ignore_path: Optional[Path] = None

    @property
    def paths(self) -> List[str]:
        """Names of the written files relative to the workspace root."""
        names = [self.config_path.name]
        if self.ignore_path is not None:
            names.append(self.ignore_path.name)
        return names


def has_vendor_directory(workspace_path: Union[str, Path]) -> bool:
    """
    Check the top level of the workspace for a ``vendor`` directory.

    Raises:
        ScaffoldingError: If the workspace cannot be listed
    """
    root = Path(workspace_path)
    try:
        for entry in root.iterdir():
            if entry.name == VENDOR_DIRECTORY and entry.is_dir():
                logger.info("Found vendor directory")
                return True
    except OSError as e:
        raise ScaffoldingError(f"Failed to scan workspace {root}", file_path=str(root), cause=e) from e
    return False


def _write(path: Path, content: str) -> None:
    try:
        path.write_text(content, encoding="utf-8")
    except OSError as e:
        raise ScaffoldingError(f"Failed to write {path.name}", file_path=str(path), cause=e) from e
    logger.info(f"Wrote {path.name} file")


def inject_scaffolding(workspace_path: Union[str, Path], mode: PipelineMode) -> ScaffoldingResult:
    """
    Write the mode's lingo configuration, plus an ignore file when the
    workspace vendors its dependencies.

    An existing configuration file is overwritten.

    Args:
        workspace_path: Root of the workspace clone
        mode: Pipeline mode selecting the configuration content

    Returns:
        The files that were written

    Raises:
        ScaffoldingError: If the workspace cannot be scanned or a file cannot be written
    """
    root = Path(workspace_path)
    needs_ignore_file = has_vendor_directory(root)

    config_path = root / CONFIG_FILENAME
    _write(config_path, MODE_CONFIGS[mode])

    ignore_path = None
    if needs_ignore_file:
        ignore_path = root / IGNORE_FILENAME
        _write(ignore_path, IGNORE_CONTENT)

    return ScaffoldingResult(config_path=config_path, ignore_path=ignore_path)
