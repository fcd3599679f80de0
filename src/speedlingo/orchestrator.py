"""
Pipeline orchestration: fork -> clone -> scaffold -> lingo -> (report | commit + push).
"""

import logging
from typing import Optional

from .config import AppConfig, Credentials, get_config
from .models import PipelineMode, PipelineResult
from .repository import (
    GitHubClient, ForkOrchestrator, WorkspaceManager, Workspace, GitPublisher, REWRITE_BRANCH
)
from .workflow import ToolRunner, inject_scaffolding, ensure_results_dir

logger = logging.getLogger(__name__)


class PipelineOrchestrator:
    """
    Coordinates one pipeline run against one repository.

    The run is all-or-nothing: the first error from any stage propagates
    unchanged to the caller. The workspace is a scoped resource and is
    removed on every exit path, including a failed lingo run, before the
    error reaches the caller.
    """

    def __init__(
        self,
        credentials: Credentials,
        config: Optional[AppConfig] = None,
        github_client: Optional[GitHubClient] = None,
        fork_orchestrator: Optional[ForkOrchestrator] = None,
        workspace_manager: Optional[WorkspaceManager] = None,
        tool_runner: Optional[ToolRunner] = None
    ):
        """
        Initialize the pipeline orchestrator.

        Args:
            credentials: Operator credentials
            config: Application settings
            github_client: GitHub API client (built from credentials if omitted)
            fork_orchestrator: Fork stage (built from the client if omitted)
            workspace_manager: Workspace stage
            tool_runner: lingo invocation stage
        """
        self.credentials = credentials
        self.config = config or get_config()

        self.github_client = github_client or GitHubClient(
            credentials.token,
            base_url=self.config.github.api_base_url,
            timeout=self.config.github.timeout,
            max_retries=self.config.github.max_retries
        )
        self.fork_orchestrator = fork_orchestrator or ForkOrchestrator(
            self.github_client,
            credentials,
            poll_interval=self.config.fork.poll_interval,
            timeout=self.config.fork.timeout
        )
        self.workspace_manager = workspace_manager or WorkspaceManager()
        self.tool_runner = tool_runner or ToolRunner(
            executable=self.config.tool.executable,
            results_dir=self.config.tool.results_path
        )

    def run(self, mode: PipelineMode, owner: str, repo: str) -> PipelineResult:
        """
        Run the pipeline for ``owner/repo``.

        Args:
            mode: Review or rewrite
            owner: Owner of the upstream repository
            repo: Repository name

        Returns:
            Result of the run
        """
        logger.info(f"Starting {mode.value} pipeline for {owner}/{repo}")

        ensure_results_dir(self.tool_runner.results_dir)

        fork = self.fork_orchestrator.fork(owner, repo)
        result = PipelineResult(mode=mode, fork=fork)

        with self.workspace_manager.workspace(fork.clone_url) as workspace:
            if mode is PipelineMode.REVIEW:
                self._review(workspace, repo, result)
            else:
                self._rewrite(workspace, repo, result)

        logger.info(f"Finished {mode.value} pipeline for {owner}/{repo}")
        return result

    def _review(self, workspace: Workspace, repo: str, result: PipelineResult) -> None:
        inject_scaffolding(workspace.path, PipelineMode.REVIEW)
        result.report_path = self.tool_runner.run(workspace.path, PipelineMode.REVIEW, repo)

    def _rewrite(self, workspace: Workspace, repo: str, result: PipelineResult) -> None:
        publisher = GitPublisher(workspace.repo, self.credentials, branch=REWRITE_BRANCH)

        # Switch branches while the tree is still clean
        publisher.checkout_branch()
        result.branch = publisher.branch

        scaffolding = inject_scaffolding(workspace.path, PipelineMode.REWRITE)
        self.tool_runner.run(workspace.path, PipelineMode.REWRITE, repo)

        result.commit_sha = publisher.publish(scaffolding.paths)
        result.pushed = result.commit_sha is not None
