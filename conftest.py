"""
Shared fixtures: an in-memory stand-in for the GitHub client.
"""

import itertools
import os
import sys

import pytest

# Add the current directory to the path
sys.path.insert(0, os.path.dirname(__file__))

from pr_retrigger.github_client import ConflictError, NotFoundError
from pr_retrigger.models import BranchRef, CommitTree, PullRequest


TEST_TOKEN = "ghp_" + "a" * 36

ENV_VARS = [
    "INPUT_GITHUB_TOKEN", "GITHUB_TOKEN", "GITHUB_REPOSITORY", "GITHUB_REF",
    "GITHUB_API_URL", "GITHUB_TIMEOUT", "EXCLUDED_AUTHOR_MARKERS",
    "INPUT_EXCLUDED_AUTHOR_MARKERS", "EXCLUDED_AUTHORS", "INPUT_EXCLUDED_AUTHORS",
    "COMMIT_MESSAGE", "INPUT_COMMIT_MESSAGE", "MAX_CONCURRENT_PRS", "LOG_LEVEL",
    "ENABLE_FILE_LOGGING",
]


class FakeGitHub:
    """Keeps refs and commits in dicts and records every call made."""

    def __init__(self, pulls=None):
        self.pulls = list(pulls or [])
        self.refs = {}
        self.commits = {}
        self.calls = []
        self.tokens = []
        self.moved_refs = set()
        self.closed = 0
        self._ids = itertools.count(1)

    def factory(self, token):
        self.tokens.append(token)
        return self

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.closed += 1
        return False

    def _new_sha(self):
        return f"{next(self._ids):040x}"

    def add_branch(self, owner, repo, branch, tree="tree-0"):
        sha = self._new_sha()
        self.commits[sha] = {"tree": tree, "parents": [], "message": "initial"}
        self.refs[(owner, repo, f"heads/{branch}")] = sha
        return sha

    def list_open_pull_requests(self, owner, repo, branch):
        self.calls.append(("list_open_pull_requests", owner, repo, branch))
        return [pr for pr in self.pulls if pr.base_ref == branch]

    def get_ref(self, owner, repo, ref):
        self.calls.append(("get_ref", owner, repo, ref))
        key = (owner, repo, ref)
        if key not in self.refs:
            raise NotFoundError(f"Not found: {ref}", status_code=404)
        return BranchRef(owner=owner, repo=repo, ref=ref, sha=self.refs[key])

    def get_commit_tree(self, owner, repo, sha):
        self.calls.append(("get_commit_tree", owner, repo, sha))
        if sha not in self.commits:
            raise NotFoundError(f"Not found: {sha}", status_code=404)
        return CommitTree(sha=self.commits[sha]["tree"], commit_sha=sha)

    def create_commit(self, owner, repo, message, tree_sha, parents):
        self.calls.append(("create_commit", owner, repo, message, tree_sha, list(parents)))
        sha = self._new_sha()
        self.commits[sha] = {"tree": tree_sha, "parents": list(parents), "message": message}
        return sha

    def update_ref(self, owner, repo, ref, sha, force=False):
        self.calls.append(("update_ref", owner, repo, ref, sha, force))
        key = (owner, repo, ref)
        if key in self.moved_refs:
            self.refs[key] = self._new_sha()
        if not force and self.refs.get(key) not in self.commits[sha]["parents"]:
            raise ConflictError("Update is not a fast forward", status_code=422)
        self.refs[key] = sha
        return BranchRef(owner=owner, repo=repo, ref=ref, sha=sha)

    def calls_named(self, name):
        return [call for call in self.calls if call[0] == name]


def make_pull_request(number, author="alice", head_owner=None, head_repo="widgets",
                      head_ref=None, base_ref="main", title=None):
    return PullRequest(
        number=number,
        title=title or f"PR {number}",
        author_login=author,
        head_owner=head_owner or author,
        head_repo=head_repo,
        head_ref=head_ref or f"feature-{number}",
        base_ref=base_ref,
    )


@pytest.fixture
def fake_github():
    return FakeGitHub()


@pytest.fixture
def clean_env(monkeypatch):
    """Remove every variable the action reads from the environment."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch
