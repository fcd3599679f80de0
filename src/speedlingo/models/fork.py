"""
Fork data model.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Dict, Any


class ForkState(Enum):
    """Lifecycle of a fork request."""
    REQUESTED = "requested"
    PENDING = "pending"  # accepted by GitHub, not yet queryable
    READY = "ready"
    FAILED = "failed"


@dataclass
class ForkHandle:
    """
    A fork of a repository owned by the authenticated user.

    Created by :class:`~speedlingo.repository.fork_orchestrator.ForkOrchestrator`
    and read-only once it reaches :attr:`ForkState.READY`.
    """

    upstream_owner: str
    name: str
    owner: Optional[str] = None
    clone_url: Optional[str] = None
    html_url: Optional[str] = None
    default_branch: str = "main"
    state: ForkState = ForkState.REQUESTED
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def full_name(self) -> str:
        """Full name of the fork (owner/repo), or of the upstream before it is ready."""
        return f"{self.owner or self.upstream_owner}/{self.name}"

    @property
    def upstream_full_name(self) -> str:
        return f"{self.upstream_owner}/{self.name}"

    def is_ready(self) -> bool:
        """Check whether the fork can be cloned."""
        return self.state is ForkState.READY and bool(self.clone_url)

    def mark_ready(self, repo_info: Dict[str, Any]) -> None:
        """
        Record the repository information returned once the fork is queryable.

        Args:
            repo_info: Normalized repository dictionary from the GitHub client
        """
        self.owner = repo_info.get("owner", self.owner)
        self.clone_url = repo_info["clone_url"]
        self.html_url = repo_info.get("html_url")
        self.default_branch = repo_info.get("default_branch") or self.default_branch
        self.metadata = dict(repo_info)
        self.state = ForkState.READY

