#!/usr/bin/env python3
"""
PR Workflow Re-trigger - Main Entry Point

A GitHub Action that, after a push to a branch, appends an empty commit to every
open pull request targeting that branch so their CI workflows run again.
"""

import asyncio
import logging
import logging.handlers
import os
import sys

from pr_retrigger import Config, RetriggerOrchestrator, RunResult, load_trigger_context
from pr_retrigger.actions import get_input, set_failed


def setup_logging_from_config(config: Config):
    """Set up logging based on configuration."""
    log_handlers = [logging.StreamHandler(sys.stdout)]

    # Add file handler if enabled
    if config.logging.enable_file_logging:
        try:
            file_handler = logging.handlers.RotatingFileHandler(
                config.logging.log_file_path,
                maxBytes=config.logging.max_log_size,
                backupCount=config.logging.backup_count
            )
            log_handlers.append(file_handler)
        except OSError as e:
            print(f"Warning: Could not setup file logging: {e}")

    logging.basicConfig(
        level=getattr(logging, config.logging.level.value),
        format=config.logging.format,
        handlers=log_handlers,
        force=True
    )

    # Set specific log levels for external libraries
    logging.getLogger('github').setLevel(logging.WARNING)
    logging.getLogger('requests').setLevel(logging.WARNING)
    logging.getLogger('urllib3').setLevel(logging.WARNING)


def validate_environment() -> bool:
    """Validate that all required environment variables are present."""
    missing_vars = []

    if not (get_input("github_token") or os.environ.get("GITHUB_TOKEN")):
        missing_vars.append("INPUT_GITHUB_TOKEN or GITHUB_TOKEN")

    for var in ["GITHUB_REPOSITORY", "GITHUB_REF"]:
        if not os.environ.get(var):
            missing_vars.append(var)

    if missing_vars:
        set_failed(f"Missing required environment variables: {', '.join(missing_vars)}")
        return False

    return True


async def main_async() -> int:
    """Main async function for the re-trigger process."""
    if not validate_environment():
        return 1

    try:
        config = Config.from_environment()

        setup_logging_from_config(config)
        logger = logging.getLogger(__name__)

        logger.debug(f"Configuration loaded: {config.to_dict()}")

        context = load_trigger_context(config.github.token)

        with RetriggerOrchestrator(config) as orchestrator:
            result = await orchestrator.run(context)

        _log_run_results(result)
        logger.info("Finished.")
        return 0

    except Exception as e:
        set_failed(str(e))
        logging.getLogger(__name__).debug("Fatal error details:", exc_info=True)
        return 1


def _log_run_results(result: RunResult):
    """Log a summary of the run."""
    logger = logging.getLogger(__name__)

    logger.debug(f"Target branch: {result.target_branch}")
    logger.debug(f"Empty commits created: {result.total_commits}")
    for item in result.results:
        logger.debug(f"  #{item.pull_request.number} -> "
                     f"{item.commit.branch.owner}/{item.commit.branch.repo}@{item.commit.short_sha}")
    processing_time = result.processing_time or 0.0
    logger.debug(f"Processing time: {processing_time:.2f}s")


def main() -> int:
    """Main synchronous entry point."""
    try:
        return asyncio.run(main_async())
    except KeyboardInterrupt:
        print("\nRe-trigger interrupted by user")
        return 130  # Standard exit code for Ctrl+C


if __name__ == "__main__":
    exit_code = main()
    sys.exit(exit_code)
