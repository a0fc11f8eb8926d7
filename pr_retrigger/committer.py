"""
Empty commit creation on a pull request's head branch.

The commit reuses the tree of the current tip, so pushing it changes nothing in
the pull request's diff but still counts as a new push for CI. The sequence is:

1. resolve the branch ref to its tip commit
2. read the tree of that commit
3. create a commit with that tree and the tip as its only parent
4. fast-forward the ref to the new commit (never forced)

A failure at any step stops the sequence. Steps 1-3 never move the branch; a
failure at step 4 leaves an unreferenced commit object behind.
"""

import logging
from typing import Callable

from .github_client import GitHubClient
from .models import EmptyCommit


logger = logging.getLogger(__name__)


class InvalidParametersError(ValueError):
    """Exception raised when a required parameter is missing."""
    pass


class RetriggerCommitter:
    """Appends an empty commit to a branch through the git data API."""

    def __init__(self, client_factory: Callable[[str], GitHubClient]):
        self._client_factory = client_factory

    def create_empty_commit(self, owner: str, repo: str, ref: str, message: str,
                            token: str) -> EmptyCommit:
        """Create an empty commit on `ref` and move the ref to it."""
        if not all([owner, repo, ref, message, token]):
            raise InvalidParametersError("Invalid parameters")

        with self._client_factory(token) as client:
            branch = client.get_ref(owner, repo, ref)
            tree = client.get_commit_tree(owner, repo, branch.sha)
            new_sha = client.create_commit(owner, repo, message, tree.sha, [tree.commit_sha])
            updated = client.update_ref(owner, repo, ref, new_sha, force=False)

        logger.debug(f"{owner}/{repo}#{ref} moved from {branch.sha} to {updated.sha}")
        return EmptyCommit(
            sha=new_sha,
            tree_sha=tree.sha,
            parent_sha=tree.commit_sha,
            message=message,
            branch=updated
        )
