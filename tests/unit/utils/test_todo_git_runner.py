"""Unit tests for the git runner environment handling."""

import subprocess
from pathlib import Path
from unittest.mock import patch

import pytest

from ye_olde_todos.utils.git_runner import get_git_environment, run_git_command


@pytest.fixture
def clean_git_env(monkeypatch):
    import os

    for key in list(os.environ):
        if key.startswith("GIT_CONFIG_"):
            monkeypatch.delenv(key)


class TestGetGitEnvironment:
    def test_no_safe_directory_leaves_env_alone(self, clean_git_env):
        env = get_git_environment(None)

        assert "GIT_CONFIG_COUNT" not in env

    def test_registers_safe_directory(self, tmp_path, clean_git_env):
        env = get_git_environment(tmp_path)

        assert env["GIT_CONFIG_COUNT"] == "1"
        assert env["GIT_CONFIG_KEY_0"] == "safe.directory"
        assert env["GIT_CONFIG_VALUE_0"] == str(tmp_path.resolve())

    def test_preserves_existing_config_entries(self, tmp_path, clean_git_env, monkeypatch):
        monkeypatch.setenv("GIT_CONFIG_COUNT", "2")
        monkeypatch.setenv("GIT_CONFIG_KEY_0", "core.quotepath")
        monkeypatch.setenv("GIT_CONFIG_VALUE_0", "off")
        monkeypatch.setenv("GIT_CONFIG_KEY_1", "blame.coloring")
        monkeypatch.setenv("GIT_CONFIG_VALUE_1", "none")

        env = get_git_environment(tmp_path)

        assert env["GIT_CONFIG_COUNT"] == "3"
        assert env["GIT_CONFIG_KEY_0"] == "safe.directory"
        assert env["GIT_CONFIG_KEY_1"] == "core.quotepath"
        assert env["GIT_CONFIG_VALUE_1"] == "off"
        assert env["GIT_CONFIG_KEY_2"] == "blame.coloring"
        assert env["GIT_CONFIG_VALUE_2"] == "none"


class TestRunGitCommand:
    def test_rejects_non_git_commands(self, tmp_path):
        with pytest.raises(ValueError, match="must start with 'git'"):
            run_git_command(["ls"], cwd=tmp_path)

    def test_runs_without_checking_exit_status(self, tmp_path):
        fake = subprocess.CompletedProcess(args=[], returncode=1, stdout="", stderr="")
        with patch("subprocess.run", return_value=fake) as run:
            result = run_git_command(
                ["git", "blame", "-L", "1,1", "x.py"], cwd=tmp_path, timeout=3
            )

        assert result is fake
        kwargs = run.call_args.kwargs
        assert kwargs["cwd"] == tmp_path
        assert kwargs["check"] is False
        assert kwargs["capture_output"] is True
        assert kwargs["timeout"] == 3
        assert kwargs["errors"] == "replace"

    def test_real_git_version(self, tmp_path):
        import shutil

        if shutil.which("git") is None:
            pytest.skip("git is not installed")

        result = run_git_command(["git", "--version"], cwd=Path(tmp_path))

        assert result.returncode == 0
        assert result.stdout.startswith("git version")
