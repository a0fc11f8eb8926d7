"""
Data models for the PR workflow re-trigger action.

This module contains the data classes passed between the finder, the committer
and the orchestrator.
"""

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass(frozen=True)
class TriggerContext:
    """Explicit description of the run that triggered the action."""
    token: str
    repository_owner: str
    repository_name: str
    triggering_ref: str

    @property
    def target_branch(self) -> str:
        """Branch name taken from the last segment of the triggering ref."""
        return self.triggering_ref.split("/")[-1]

    @property
    def repo_full_name(self) -> str:
        """Get the full repository name."""
        return f"{self.repository_owner}/{self.repository_name}"

    def __repr__(self) -> str:
        return (f"TriggerContext(repository={self.repo_full_name!r}, "
                f"triggering_ref={self.triggering_ref!r})")


@dataclass(frozen=True)
class PullRequest:
    """An open pull request as listed by GitHub."""
    number: int
    title: str
    author_login: str
    head_owner: str
    head_repo: str
    head_ref: str
    base_ref: Optional[str] = None
    html_url: Optional[str] = None

    @property
    def head_git_ref(self) -> str:
        """Git ref of the head branch, as used by the git data API."""
        return f"heads/{self.head_ref}"

    @property
    def head_full_name(self) -> str:
        return f"{self.head_owner}/{self.head_repo}"


@dataclass(frozen=True)
class BranchRef:
    """A branch pointer and the commit it points to."""
    owner: str
    repo: str
    ref: str
    sha: str


@dataclass(frozen=True)
class CommitTree:
    """Tree of an existing commit."""
    sha: str
    commit_sha: str


@dataclass(frozen=True)
class EmptyCommit:
    """A commit whose tree is identical to the tree of its only parent."""
    sha: str
    tree_sha: str
    parent_sha: str
    message: str
    branch: BranchRef

    @property
    def short_sha(self) -> str:
        return self.sha[:7]


@dataclass(frozen=True)
class RetriggerResult:
    """Outcome of re-triggering a single pull request."""
    pull_request: PullRequest
    commit: EmptyCommit


@dataclass
class RunResult:
    """Result of a complete run."""
    target_branch: str
    pull_requests: List[PullRequest] = field(default_factory=list)
    results: List[RetriggerResult] = field(default_factory=list)
    processing_time: Optional[float] = None

    @property
    def total_commits(self) -> int:
        """Get number of empty commits created."""
        return len(self.results)
