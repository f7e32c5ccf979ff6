"""
Git command runner with dubious ownership handling.

git refuses to operate on repositories owned by another user ("dubious
ownership"), which is common under sudo, in containers and on CI. Commands run
through this module mark the scanned tree as a safe directory while keeping any
GIT_CONFIG_* entries the caller already set.
"""

import os
import subprocess
from pathlib import Path
from typing import Dict, List, Optional


def get_git_environment(safe_directory: Optional[Path] = None) -> Dict[str, str]:
    """
    Get environment variables for git commands.

    Args:
        safe_directory: Directory to trust regardless of ownership. When None
            the current environment is returned unchanged.

    Returns:
        Dictionary of environment variables for git commands
    """
    env = os.environ.copy()
    if safe_directory is None:
        return env

    env["GIT_CONFIG_KEY_0"] = "safe.directory"
    env["GIT_CONFIG_VALUE_0"] = str(safe_directory.resolve())

    # Shift caller-provided GIT_CONFIG_KEY_<n>/VALUE_<n> up by one so index 0
    # stays ours
    config_count = 1
    for key in os.environ:
        if not key.startswith("GIT_CONFIG_KEY_"):
            continue
        idx = key[len("GIT_CONFIG_KEY_") :]
        if not idx.isdigit():
            continue
        new_idx = int(idx) + 1
        env[f"GIT_CONFIG_KEY_{new_idx}"] = os.environ[key]
        value_key = f"GIT_CONFIG_VALUE_{idx}"
        if value_key in os.environ:
            env[f"GIT_CONFIG_VALUE_{new_idx}"] = os.environ[value_key]
        config_count = max(config_count, new_idx + 1)

    env["GIT_CONFIG_COUNT"] = str(config_count)
    return env


def run_git_command(
    cmd: List[str],
    cwd: Path,
    safe_directory: Optional[Path] = None,
    timeout: Optional[float] = None,
) -> subprocess.CompletedProcess:
    """
    Run a git command and capture its output as text.

    The exit status is not checked; callers inspect ``returncode`` themselves
    so they can report stderr in their own error types.

    Args:
        cmd: Git command as a list (e.g., ["git", "blame", ...])
        cwd: Working directory for the command
        safe_directory: Directory to register as safe.directory
        timeout: Optional timeout in seconds

    Returns:
        CompletedProcess with decoded stdout and stderr

    Raises:
        ValueError: If cmd does not start with "git"
        FileNotFoundError: If git is not installed
        subprocess.TimeoutExpired: If timeout is exceeded
    """
    if not cmd or cmd[0] != "git":
        raise ValueError("Command must start with 'git'")

    return subprocess.run(
        cmd,
        cwd=cwd,
        check=False,
        capture_output=True,
        text=True,
        encoding="utf-8",
        errors="replace",
        timeout=timeout,
        env=get_git_environment(safe_directory),
    )
