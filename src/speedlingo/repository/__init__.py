"""
GitHub and local git operations: forking, cloning and publishing.
"""

from .github_client import GitHubClient
from .fork_orchestrator import ForkOrchestrator, is_fork_scheduled
from .workspace_manager import WorkspaceManager, Workspace, ConsoleProgress
from .git_publisher import GitPublisher, REWRITE_BRANCH, COMMIT_MESSAGE

__all__ = [
    "GitHubClient",
    "ForkOrchestrator",
    "is_fork_scheduled",
    "WorkspaceManager",
    "Workspace",
    "ConsoleProgress",
    "GitPublisher",
    "REWRITE_BRANCH",
    "COMMIT_MESSAGE"
]
