"""
Configuration management for the PR workflow re-trigger action.

This module handles all configuration aspects including environment variables,
action inputs, validation, and default settings.
"""

import os
import logging
import string
from dataclasses import dataclass, field
from typing import List, Dict, Any, Optional
from enum import Enum

from .actions import get_input
from .models import TriggerContext


DEFAULT_COMMIT_MESSAGE = "New commit on '{branch}'. Re-triggering workflows"
DEFAULT_EXCLUDED_AUTHOR_MARKERS = ["dependabot"]


class LogLevel(Enum):
    """Available log levels."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


@dataclass
class GitHubConfig:
    """Configuration for GitHub integration."""
    token: str
    api_base_url: str = "https://api.github.com"
    timeout: Optional[int] = None

    def __post_init__(self):
        """Validate GitHub configuration."""
        if not self.token:
            raise ValueError("GitHub token is required")

        if not self._validate_token_format(self.token):
            raise ValueError("Invalid GitHub token format")

        self.api_base_url = self.api_base_url.rstrip("/")

        if self.timeout is not None and self.timeout <= 0:
            raise ValueError("timeout must be positive")

    @staticmethod
    def _validate_token_format(token: str) -> bool:
        """Validate GitHub token format."""
        if not token or not isinstance(token, str):
            return False
        # Classic tokens are 40 characters, newer ones carry a type prefix
        return len(token) >= 4 and (
            len(token) == 40 or
            token.startswith(('ghp_', 'ghs_', 'gho_', 'ghu_', 'github_pat_'))
        )


@dataclass
class RetriggerConfig:
    """Configuration for which pull requests get an empty commit and how."""
    excluded_author_markers: List[str] = field(
        default_factory=lambda: list(DEFAULT_EXCLUDED_AUTHOR_MARKERS)
    )
    excluded_authors: List[str] = field(default_factory=list)
    commit_message_template: str = DEFAULT_COMMIT_MESSAGE
    max_concurrent_prs: Optional[int] = None

    def __post_init__(self):
        """Validate re-trigger configuration."""
        if not self.commit_message_template or not self.commit_message_template.strip():
            raise ValueError("commit_message_template must not be empty")

        fields = {
            name for _, name, _, _ in string.Formatter().parse(self.commit_message_template)
            if name is not None
        }
        unknown = fields - {"branch"}
        if unknown:
            raise ValueError(
                f"Unknown placeholder(s) in commit message template: {', '.join(sorted(unknown))}"
            )

        if self.max_concurrent_prs is not None and self.max_concurrent_prs <= 0:
            self.max_concurrent_prs = 1

    def commit_message(self, branch: str) -> str:
        """Render the commit message for the given target branch."""
        return self.commit_message_template.format(branch=branch)


@dataclass
class LoggingConfig:
    """Configuration for logging."""
    level: LogLevel = LogLevel.INFO
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    enable_file_logging: bool = False
    log_file_path: str = "pr_retrigger.log"
    max_log_size: int = 10 * 1024 * 1024  # 10MB
    backup_count: int = 3


@dataclass
class Config:
    """Main configuration class that combines all configuration sections."""
    github: GitHubConfig
    retrigger: RetriggerConfig = field(default_factory=RetriggerConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_environment(cls) -> 'Config':
        """Create configuration from action inputs and environment variables."""
        github_token = get_input("github_token") or os.environ.get("GITHUB_TOKEN", "")
        if not github_token:
            raise ValueError("github_token input or GITHUB_TOKEN environment variable is required")

        timeout_raw = os.environ.get("GITHUB_TIMEOUT", "")
        github_config = GitHubConfig(
            token=github_token,
            api_base_url=os.environ.get("GITHUB_API_URL", "https://api.github.com"),
            timeout=int(timeout_raw) if timeout_raw else None
        )

        markers_raw = _first_set("EXCLUDED_AUTHOR_MARKERS", "excluded_author_markers")
        markers = (
            _split_list(markers_raw) if markers_raw is not None
            else list(DEFAULT_EXCLUDED_AUTHOR_MARKERS)
        )
        excluded_authors = _split_list(_first_set("EXCLUDED_AUTHORS", "excluded_authors") or "")

        max_concurrent_raw = os.environ.get("MAX_CONCURRENT_PRS", "")
        retrigger_config = RetriggerConfig(
            excluded_author_markers=markers,
            excluded_authors=excluded_authors,
            commit_message_template=(
                _first_set("COMMIT_MESSAGE", "commit_message") or DEFAULT_COMMIT_MESSAGE
            ),
            max_concurrent_prs=int(max_concurrent_raw) if max_concurrent_raw else None
        )

        log_level_str = os.environ.get("LOG_LEVEL", "INFO").upper()
        log_level = LogLevel.INFO
        try:
            log_level = LogLevel(log_level_str)
        except ValueError:
            logging.warning(f"Invalid log level '{log_level_str}', using 'INFO'")

        logging_config = LoggingConfig(
            level=log_level,
            enable_file_logging=os.environ.get("ENABLE_FILE_LOGGING", "false").lower() == "true"
        )

        return cls(
            github=github_config,
            retrigger=retrigger_config,
            logging=logging_config
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        return {
            "github": {
                "api_base_url": self.github.api_base_url,
                "timeout": self.github.timeout,
            },
            "retrigger": {
                "excluded_author_markers": self.retrigger.excluded_author_markers,
                "excluded_authors": self.retrigger.excluded_authors,
                "commit_message_template": self.retrigger.commit_message_template,
                "max_concurrent_prs": self.retrigger.max_concurrent_prs,
            },
            "logging": {
                "level": self.logging.level.value,
                "enable_file_logging": self.logging.enable_file_logging,
            }
        }


def load_trigger_context(token: str) -> TriggerContext:
    """Build the trigger context from the variables set by the Actions runner."""
    repo_full_name = os.environ.get("GITHUB_REPOSITORY", "")
    triggering_ref = os.environ.get("GITHUB_REF", "")

    if not repo_full_name or "/" not in repo_full_name:
        raise ValueError(f"Invalid repository name: {repo_full_name}")
    if not triggering_ref:
        raise ValueError("GITHUB_REF environment variable is required")

    owner, repo = repo_full_name.split("/", 1)
    return TriggerContext(
        token=token,
        repository_owner=owner,
        repository_name=repo,
        triggering_ref=triggering_ref
    )


def _first_set(env_name: str, input_name: str) -> Optional[str]:
    """Return the environment variable, else the action input, else None."""
    if env_name in os.environ:
        return os.environ[env_name]
    value = get_input(input_name)
    return value if value else None


def _split_list(raw: str) -> List[str]:
    return [item.strip() for item in raw.split(",") if item.strip()]
