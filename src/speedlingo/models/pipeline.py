"""
Pipeline mode selection and run results.
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional, List

from ..error_handling import UnsupportedModeError
from .fork import ForkHandle


class PipelineMode(Enum):
    """Which lingo pipeline to run against the fork."""
    REVIEW = "review"  # read-only: lingo writes a report
    REWRITE = "rewrite"  # mutating: lingo edits files, changes are pushed

    @classmethod
    def choices(cls) -> List[str]:
        return [mode.value for mode in cls]

    @classmethod
    def from_string(cls, value: str) -> "PipelineMode":
        """
        Map an invocation mode to a pipeline mode.

        Raises:
            UnsupportedModeError: If ``value`` is not ``review`` or ``rewrite``
        """
        for mode in cls:
            if mode.value == value:
                return mode
        raise UnsupportedModeError(value, cls.choices())


@dataclass
class PipelineResult:
    """Outcome of a successful pipeline run."""
    mode: PipelineMode
    fork: ForkHandle
    report_path: Optional[Path] = None
    branch: Optional[str] = None
    commit_sha: Optional[str] = None
    pushed: bool = False
