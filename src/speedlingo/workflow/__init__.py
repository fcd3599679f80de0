"""
Pipeline stages run inside a workspace: scaffolding and lingo invocation.
"""

from .scaffolding import (
    inject_scaffolding, has_vendor_directory, ScaffoldingResult,
    CONFIG_FILENAME, IGNORE_FILENAME
)
from .tool_runner import ToolRunner, build_command, ensure_results_dir, report_path

__all__ = [
    "inject_scaffolding",
    "has_vendor_directory",
    "ScaffoldingResult",
    "CONFIG_FILENAME",
    "IGNORE_FILENAME",
    "ToolRunner",
    "build_command",
    "ensure_results_dir",
    "report_path"
]
