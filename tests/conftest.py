"""
Shared pytest fixtures for Ye Olde Todos tests.

Provides a fixed clock, a factory for attributed TODOs and helpers that fake
git blame subprocess results.
"""

import subprocess
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Callable, List, Optional

import pytest

from ye_olde_todos.models import Todo

NOW = datetime(2026, 6, 1, 12, 0, 0, tzinfo=timezone.utc)


def _blame_output(
    author: str,
    timestamp: str,
    line_number: int = 1,
    code: str = "# TODO: something",
    commit: str = "1a2b3c4d",
) -> str:
    """Build a line of default-format git blame output."""
    return f"{commit} ({author} {timestamp} {line_number}) {code}\n"


def _completed(
    stdout: str = "", stderr: str = "", returncode: int = 0
) -> subprocess.CompletedProcess:
    return subprocess.CompletedProcess(
        args=["git", "blame"], returncode=returncode, stdout=stdout, stderr=stderr
    )


@pytest.fixture
def blame_output() -> Callable[..., str]:
    return _blame_output


@pytest.fixture
def git_result() -> Callable[..., subprocess.CompletedProcess]:
    """Factory for CompletedProcess values as returned by run_git_command."""
    return _completed


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def fixed_clock() -> Callable[[], datetime]:
    return lambda: NOW


@pytest.fixture
def make_todo() -> Callable[..., Todo]:
    """Factory for Todo values aged relative to NOW."""

    def _make(
        author: str = "Jane Q. Public",
        age: Optional[timedelta] = None,
        days: int = 0,
        path: Path = Path("src/app.py"),
        line_number: int = 1,
        text: str = "# TODO: refactor",
    ) -> Todo:
        age = age if age is not None else timedelta(days=days)
        return Todo(
            path=path,
            line_number=line_number,
            text=text,
            author=author,
            timestamp=NOW - age,
            age=age,
        )

    return _make


@pytest.fixture
def source_tree(tmp_path) -> Callable[[dict], List[Path]]:
    """Write ``{relative_path: content}`` under tmp_path and return the paths."""

    def _write(files: dict) -> List[Path]:
        written = []
        for relative, content in files.items():
            path = tmp_path / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            if isinstance(content, bytes):
                path.write_bytes(content)
            else:
                path.write_text(content, encoding="utf-8")
            written.append(path)
        return written

    return _write
