"""End-to-end pipeline tests against local git remotes and a stand-in lingo."""

import io
from unittest.mock import MagicMock

import pytest
from git import Repo

from speedlingo.config import AppConfig
from speedlingo.error_handling import ForkScheduled, ForkTimeoutError, GitHubAPIError, ToolInvocationError
from speedlingo.models import PipelineMode
from speedlingo.orchestrator import PipelineOrchestrator
from speedlingo.repository import ForkOrchestrator, WorkspaceManager, ConsoleProgress, COMMIT_MESSAGE
from speedlingo.workflow import ToolRunner


def fork_payload(clone_url):
    return {
        "name": "widget",
        "full_name": "octocat/widget",
        "owner": "octocat",
        "clone_url": clone_url,
        "html_url": "https://github.com/octocat/widget",
        "default_branch": "main",
    }


@pytest.fixture
def results_dir(tmp_path):
    return tmp_path / "results"


@pytest.fixture
def workspaces(tmp_path):
    return tmp_path / "workspaces"


def build(credentials, origin, fake_lingo, results_dir, workspaces, github=None):
    if github is None:
        github = MagicMock()
        github.create_fork.side_effect = ForkScheduled()
        github.get_repository.return_value = fork_payload(str(origin))

    return PipelineOrchestrator(
        credentials,
        config=AppConfig(),
        github_client=github,
        fork_orchestrator=ForkOrchestrator(github, credentials, poll_interval=2, timeout=300, sleep=lambda s: None),
        workspace_manager=WorkspaceManager(temp_root=str(workspaces), progress=ConsoleProgress(io.StringIO())),
        tool_runner=ToolRunner(executable=str(fake_lingo), results_dir=results_dir),
    )


class TestReviewPipeline:
    def test_report_written_and_nothing_pushed(self, credentials, origin_repo, fake_lingo, results_dir, workspaces):
        remote = Repo(origin_repo)
        main_before = remote.commit("main").hexsha

        result = build(credentials, origin_repo, fake_lingo, results_dir, workspaces).run(
            PipelineMode.REVIEW, "acme", "widget"
        )

        assert result.report_path == results_dir / "widget-results.json"
        assert result.report_path.is_file()
        assert result.pushed is False
        assert result.commit_sha is None
        assert [head.name for head in remote.heads] == ["main"]
        assert remote.commit("main").hexsha == main_before
        assert list(workspaces.iterdir()) == []


class TestRewritePipeline:
    def test_fresh_branch(self, credentials, origin_repo, fake_lingo, results_dir, workspaces):
        result = build(credentials, origin_repo, fake_lingo, results_dir, workspaces).run(
            PipelineMode.REWRITE, "acme", "widget"
        )

        remote = Repo(origin_repo)
        commit = remote.commit("rewrite")
        assert result.pushed is True
        assert result.branch == "rewrite"
        assert result.commit_sha == commit.hexsha
        assert commit.message == COMMIT_MESSAGE
        assert commit.author.name == credentials.username
        assert commit.author.email == credentials.email
        assert set(commit.stats.files) == {"main.go"}
        assert commit.parents[0].hexsha == remote.commit("main").hexsha
        assert list(workspaces.iterdir()) == []

    def test_second_run_reuses_branch(self, credentials, origin_repo, fake_lingo, results_dir, workspaces):
        first = build(credentials, origin_repo, fake_lingo, results_dir, workspaces).run(
            PipelineMode.REWRITE, "acme", "widget"
        )
        second = build(credentials, origin_repo, fake_lingo, results_dir, workspaces).run(
            PipelineMode.REWRITE, "acme", "widget"
        )

        head = Repo(origin_repo).commit("rewrite")
        assert head.hexsha == second.commit_sha
        assert head.parents[0].hexsha == first.commit_sha

    def test_ignore_file_excluded(self, credentials, origin_repo_with_vendor, fake_lingo, results_dir, workspaces):
        build(credentials, origin_repo_with_vendor, fake_lingo, results_dir, workspaces).run(
            PipelineMode.REWRITE, "acme", "widget"
        )

        tree_paths = [blob.path for blob in Repo(origin_repo_with_vendor).commit("rewrite").tree.traverse()]
        assert "codelingo.yaml" not in tree_paths
        assert ".codelingoignore" not in tree_paths
        assert "vendor/lib.go" in tree_paths

    def test_no_changes_means_no_push(self, credentials, origin_repo, fake_lingo, results_dir, workspaces, monkeypatch):
        monkeypatch.setenv("FAKE_LINGO_NOOP", "1")

        result = build(credentials, origin_repo, fake_lingo, results_dir, workspaces).run(
            PipelineMode.REWRITE, "acme", "widget"
        )

        assert result.pushed is False
        assert result.commit_sha is None
        assert [head.name for head in Repo(origin_repo).heads] == ["main"]


class TestFailures:
    def test_tool_failure_removes_workspace(self, credentials, origin_repo, fake_lingo, results_dir, workspaces, monkeypatch):
        monkeypatch.setenv("FAKE_LINGO_EXIT", "1")

        with pytest.raises(ToolInvocationError):
            build(credentials, origin_repo, fake_lingo, results_dir, workspaces).run(
                PipelineMode.REWRITE, "acme", "widget"
            )

        assert list(workspaces.iterdir()) == []
        assert [head.name for head in Repo(origin_repo).heads] == ["main"]

    def test_fork_timeout_skips_everything(self, credentials, tmp_path):
        github = MagicMock()
        github.create_fork.side_effect = ForkScheduled()
        github.get_repository.side_effect = GitHubAPIError("Repository not found", status_code=404)

        clock = iter(range(0, 1000, 100))
        fork_orchestrator = ForkOrchestrator(
            github, credentials, poll_interval=2, timeout=300,
            clock=lambda: next(clock), sleep=lambda s: None
        )
        workspace_manager = MagicMock()
        tool_runner = MagicMock()
        tool_runner.results_dir = tmp_path / "results"

        orchestrator = PipelineOrchestrator(
            credentials,
            config=AppConfig(),
            github_client=github,
            fork_orchestrator=fork_orchestrator,
            workspace_manager=workspace_manager,
            tool_runner=tool_runner,
        )

        with pytest.raises(ForkTimeoutError):
            orchestrator.run(PipelineMode.REWRITE, "acme", "widget")

        workspace_manager.workspace.assert_not_called()
        tool_runner.run.assert_not_called()
