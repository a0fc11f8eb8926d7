"""
GitHub API client for the PR workflow re-trigger action.

This module handles all GitHub API interactions: listing open pull requests
and the git data calls (refs and commits) used to append an empty commit to a
branch. No call is retried; every failure is raised as a GitHubClientError.
"""

import logging
from typing import List, Dict, Any, Optional
from urllib.parse import quote

import requests
from github import Auth, Github, GithubException

from .config import GitHubConfig
from .models import BranchRef, CommitTree, PullRequest


logger = logging.getLogger(__name__)


class GitHubClientError(Exception):
    """Base exception for GitHub client errors."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class NotFoundError(GitHubClientError):
    """Exception raised when a ref or commit does not exist."""
    pass


class ConflictError(GitHubClientError):
    """Exception raised when a ref moved since it was read."""
    pass


class RateLimitError(GitHubClientError):
    """Exception raised when GitHub API rate limit is exceeded."""
    pass


class GitHubClient:
    """GitHub API client without retries."""

    def __init__(self, config: GitHubConfig):
        """Initialize GitHub client with configuration."""
        self.config = config

        # None disables PyGithub's own default timeout
        self._client = Github(
            auth=Auth.Token(config.token),
            base_url=config.api_base_url,
            timeout=config.timeout,
            retry=None
        )

        self._session = requests.Session()
        self._session.headers.update({
            'Authorization': f'Bearer {config.token}',
            'User-Agent': 'PR-Workflow-Retrigger/1.0',
            'Accept': 'application/vnd.github+json',
            'X-GitHub-Api-Version': '2022-11-28'
        })

        logger.debug("Initialized GitHub client")

    def list_open_pull_requests(self, owner: str, repo: str, branch: str) -> List[PullRequest]:
        """List open pull requests whose base branch is `branch`, in GitHub's order."""
        repo_name = f"{owner}/{repo}"
        logger.debug(f"Listing open pull requests for {repo_name} targeting '{branch}'")

        try:
            repo_obj = self._client.get_repo(repo_name, lazy=True)
            pulls = repo_obj.get_pulls(state="open", base=branch)
            return [self._to_pull_request(pr, repo) for pr in pulls]
        except GithubException as e:
            message = self._github_exception_message(e)
            raise GitHubClientError(
                f"Failed to list pull requests for {repo_name}: {message}",
                status_code=e.status
            ) from e
        except requests.exceptions.RequestException as e:
            raise GitHubClientError(f"Failed to list pull requests for {repo_name}: {str(e)}") from e

    @staticmethod
    def _to_pull_request(pr, fallback_repo: str) -> PullRequest:
        """Convert a PyGithub pull request into a PullRequest record."""
        try:
            head = pr.head
            # Deleted forks come back without a head repository
            head_repo = head.repo.name if head.repo is not None else fallback_repo
            return PullRequest(
                number=pr.number,
                title=pr.title or "",
                author_login=pr.user.login,
                head_owner=head.user.login,
                head_repo=head_repo,
                head_ref=head.ref,
                base_ref=pr.base.ref,
                html_url=pr.html_url
            )
        except AttributeError as e:
            raise GitHubClientError(f"Malformed pull request payload: {str(e)}") from e

    def get_ref(self, owner: str, repo: str, ref: str) -> BranchRef:
        """Resolve `ref` (e.g. ``heads/main``) to the commit it points to."""
        logger.info(f"Getting ref for {owner}/{repo}#{ref}")
        data = self._request("GET", f"/repos/{owner}/{repo}/git/ref/{quote(ref, safe='/')}")
        sha = self._field(data, "object", "sha")
        return BranchRef(owner=owner, repo=repo, ref=ref, sha=sha)

    def get_commit_tree(self, owner: str, repo: str, sha: str) -> CommitTree:
        """Get the tree of commit `sha` through the repository commits endpoint."""
        logger.info(f"Getting commit tree for {owner}/{repo}#{sha}")
        data = self._request("GET", f"/repos/{owner}/{repo}/commits/{sha}")
        tree_sha = self._field(data, "commit", "tree", "sha")
        return CommitTree(sha=tree_sha, commit_sha=sha)

    def create_commit(self, owner: str, repo: str, message: str, tree_sha: str,
                      parents: List[str]) -> str:
        """Create a commit object and return its sha. The branch is not moved."""
        logger.info(f"Creating empty commit... {owner}/{repo}#{tree_sha}->{','.join(parents)}")
        data = self._request("POST", f"/repos/{owner}/{repo}/git/commits", {
            'message': message,
            'tree': tree_sha,
            'parents': parents
        })
        return self._field(data, "sha")

    def update_ref(self, owner: str, repo: str, ref: str, sha: str,
                   force: bool = False) -> BranchRef:
        """Move `ref` to `sha`. Without force GitHub rejects non fast-forward updates."""
        logger.info(f"Updating ref... {owner}/{repo}#{ref}-{sha}")
        try:
            data = self._request("PATCH", f"/repos/{owner}/{repo}/git/refs/{quote(ref, safe='/')}", {
                'sha': sha,
                'force': force
            })
        except GitHubClientError as e:
            rejected = e.status_code == 409 or (
                e.status_code == 422 and "fast forward" in str(e).lower()
            )
            if e.status_code == 422 and "reference does not exist" in str(e).lower():
                raise NotFoundError(
                    f"Ref {owner}/{repo}#{ref} no longer exists: {str(e)}",
                    status_code=e.status_code
                ) from e
            if rejected:
                raise ConflictError(
                    f"Ref {owner}/{repo}#{ref} was not updated to {sha}: {str(e)}",
                    status_code=e.status_code
                ) from e
            raise
        return BranchRef(owner=owner, repo=repo, ref=ref, sha=self._field(data, "object", "sha"))

    def _request(self, method: str, path: str,
                 payload: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Perform a REST call and map failures onto GitHubClientError."""
        url = f"{self.config.api_base_url}{path}"
        logger.debug(f"{method} {url}")

        try:
            response = self._session.request(method, url, json=payload, timeout=self.config.timeout)
        except requests.exceptions.RequestException as e:
            logger.error(f"Request failed: {method} {path}: {str(e)}")
            raise GitHubClientError(f"Request to {path} failed: {str(e)}") from e

        if response.status_code == 404:
            raise NotFoundError(f"Not found: {path}", status_code=404)
        if response.status_code == 403 and "rate limit" in response.text.lower():
            raise RateLimitError("GitHub API rate limit exceeded", status_code=403)
        if not 200 <= response.status_code < 300:
            logger.debug(f"Response content: {response.text[:500]}...")
            raise GitHubClientError(
                f"GitHub API error {response.status_code}: {self._error_message(response)}",
                status_code=response.status_code
            )

        try:
            return response.json()
        except ValueError as e:
            raise GitHubClientError(f"Malformed response from {path}") from e

    @staticmethod
    def _field(data: Any, *keys: str) -> Any:
        """Walk nested keys of a JSON payload."""
        value = data
        for key in keys:
            if not isinstance(value, dict) or key not in value:
                raise GitHubClientError(f"Malformed response: missing '{'.'.join(keys)}'")
            value = value[key]
        return value

    @staticmethod
    def _error_message(response: requests.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            return response.text[:200] or response.reason or ""
        if isinstance(body, dict) and body.get("message"):
            return str(body["message"])
        return response.reason or ""

    @staticmethod
    def _github_exception_message(error: GithubException) -> str:
        data = error.data
        if isinstance(data, dict) and data.get("message"):
            return str(data["message"])
        return str(error)

    def close(self):
        """Clean up resources."""
        self._session.close()
        self._client.close()
        logger.debug("GitHub client closed")

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()
