"""Helpers for talking to the GitHub Actions runner."""

import os
import sys


def get_input(name: str, default: str = "") -> str:
    """Read an action input exposed by the runner as INPUT_<NAME>."""
    env_name = f"INPUT_{name.replace(' ', '_').upper()}"
    return os.environ.get(env_name, default).strip()


def _escape_data(message: str) -> str:
    return message.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def set_failed(message: str) -> None:
    """Mark the step as failed with an error annotation."""
    sys.stdout.write(f"::error::{_escape_data(message)}\n")
    sys.stdout.flush()
