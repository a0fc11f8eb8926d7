"""
Main orchestrator for the PR workflow re-trigger action.

This module contains the RetriggerOrchestrator class that finds the open pull
requests targeting the pushed branch and appends an empty commit to each of
them concurrently.
"""

import asyncio
import dataclasses
import logging
import time
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional

from .committer import RetriggerCommitter
from .config import Config
from .github_client import GitHubClient
from .models import PullRequest, RetriggerResult, RunResult, TriggerContext
from .pr_finder import AuthorFilter, PRFinder


logger = logging.getLogger(__name__)


class RetriggerOrchestrator:
    """Coordinates the finder and the committer for one run."""

    def __init__(self, config: Config, finder: Optional[PRFinder] = None,
                 committer: Optional[RetriggerCommitter] = None):
        """Initialize the orchestrator with configuration."""
        self.config = config

        author_filter = AuthorFilter(
            excluded_markers=tuple(config.retrigger.excluded_author_markers),
            excluded_logins=tuple(config.retrigger.excluded_authors)
        )
        self.finder = finder or PRFinder(self._create_client, author_filter)
        self.committer = committer or RetriggerCommitter(self._create_client)

        self._executors: List[ThreadPoolExecutor] = []

    def _create_client(self, token: str) -> GitHubClient:
        return GitHubClient(dataclasses.replace(self.config.github, token=token))

    async def run(self, context: TriggerContext) -> RunResult:
        """Re-trigger workflows on every open PR targeting the pushed branch.

        The first failing pull request fails the whole run. Commits already
        created for other pull requests are kept.
        """
        start_time = time.time()
        branch = context.target_branch
        loop = asyncio.get_running_loop()

        pull_requests = await loop.run_in_executor(
            None,
            self.finder.find_open_pull_requests,
            context.repository_owner, context.repository_name, branch, context.token
        )
        logger.info(f"Found {len(pull_requests)} open PR(s) targeting '{branch}'")

        executor = self._create_executor(len(pull_requests))
        message = self.config.retrigger.commit_message(branch)
        results = await asyncio.gather(*(
            self._retrigger(pr, message, context.token, executor) for pr in pull_requests
        ))

        return RunResult(
            target_branch=branch,
            pull_requests=pull_requests,
            results=list(results),
            processing_time=time.time() - start_time
        )

    def _create_executor(self, pull_request_count: int) -> ThreadPoolExecutor:
        """One worker per pull request unless max_concurrent_prs caps it."""
        max_workers = self.config.retrigger.max_concurrent_prs or max(pull_request_count, 1)
        executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="retrigger")
        self._executors.append(executor)
        return executor

    async def _retrigger(self, pr: PullRequest, message: str, token: str,
                         executor: ThreadPoolExecutor) -> RetriggerResult:
        """Append an empty commit to the head branch of a single pull request."""
        logger.info(f"Re-triggering workflows on #{pr.number}: {pr.title}")
        loop = asyncio.get_running_loop()

        commit = await loop.run_in_executor(
            executor,
            self.committer.create_empty_commit,
            pr.head_owner, pr.head_repo, pr.head_git_ref, message, token
        )

        logger.info(f"Created {commit.sha} on #{pr.number}: {pr.title}")
        return RetriggerResult(pull_request=pr, commit=commit)

    def close(self):
        """Clean up resources."""
        for executor in self._executors:
            executor.shutdown(wait=True)
        self._executors.clear()
        logger.debug("RetriggerOrchestrator closed")

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()
