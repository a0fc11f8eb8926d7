"""
PR Workflow Re-trigger Package

A GitHub Action that re-runs CI on open pull requests after their base branch
moves, by appending an empty commit to each pull request's head branch.
"""

__version__ = "1.0.0"
__description__ = "Re-trigger pull request workflows with empty commits"

from .config import Config, GitHubConfig, RetriggerConfig, LoggingConfig, load_trigger_context
from .models import (
    TriggerContext, PullRequest, BranchRef, CommitTree, EmptyCommit,
    RetriggerResult, RunResult
)
from .github_client import (
    GitHubClient, GitHubClientError, NotFoundError, ConflictError, RateLimitError
)
from .pr_finder import PRFinder, AuthorFilter
from .committer import RetriggerCommitter, InvalidParametersError
from .orchestrator import RetriggerOrchestrator

__all__ = [
    # Configuration
    'Config', 'GitHubConfig', 'RetriggerConfig', 'LoggingConfig', 'load_trigger_context',

    # Data models
    'TriggerContext', 'PullRequest', 'BranchRef', 'CommitTree', 'EmptyCommit',
    'RetriggerResult', 'RunResult',

    # Components
    'GitHubClient', 'GitHubClientError', 'NotFoundError', 'ConflictError', 'RateLimitError',
    'PRFinder', 'AuthorFilter',
    'RetriggerCommitter', 'InvalidParametersError',
    'RetriggerOrchestrator',
]
