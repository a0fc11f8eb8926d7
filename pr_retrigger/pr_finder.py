"""
Discovery of the pull requests that need their workflows re-triggered.
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence

from .config import DEFAULT_EXCLUDED_AUTHOR_MARKERS
from .github_client import GitHubClient
from .models import PullRequest


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuthorFilter:
    """Decides which pull request authors are automation accounts.

    A login is excluded when it contains any of ``excluded_markers`` or equals
    one of ``excluded_logins``. Marker matching is a plain substring test, so
    ``"dependabot"`` also matches a user called ``superdependabotfan``; list
    exact logins in ``excluded_logins`` and clear the markers for a strict
    filter.
    """
    excluded_markers: Sequence[str] = field(
        default_factory=lambda: tuple(DEFAULT_EXCLUDED_AUTHOR_MARKERS)
    )
    excluded_logins: Sequence[str] = field(default_factory=tuple)

    def is_excluded(self, login: str) -> bool:
        if login in self.excluded_logins:
            return True
        return any(marker and marker in login for marker in self.excluded_markers)

    def __call__(self, login: str) -> bool:
        return self.is_excluded(login)


class PRFinder:
    """Lists open pull requests targeting a branch, minus automation authors."""

    def __init__(self, client_factory: Callable[[str], GitHubClient],
                 author_filter: Optional[Callable[[str], bool]] = None):
        self._client_factory = client_factory
        self._author_filter = author_filter or AuthorFilter()

    def find_open_pull_requests(self, owner: str, repo: str, branch: str,
                                token: str) -> List[PullRequest]:
        """Return open PRs whose base is `branch`, in GitHub's listing order."""
        with self._client_factory(token) as client:
            pull_requests = client.list_open_pull_requests(owner, repo, branch)

        selected = []
        for pr in pull_requests:
            if self._author_filter(pr.author_login):
                logger.debug(f"Skipping #{pr.number} authored by {pr.author_login}")
                continue
            selected.append(pr)
        return selected
