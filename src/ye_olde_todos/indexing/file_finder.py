"""Candidate file discovery honouring exclude dirs, .gitignore and info/exclude."""

import logging
import os
from pathlib import Path
from typing import Iterator, List

import pathspec

from ..config import Config
from ..errors import InvalidRootError

logger = logging.getLogger(__name__)

# Never worth scanning for TODO comments
COMMON_EXCLUDE_PATTERNS = [
    # Python bytecode and cache
    "*.pyc",
    "*.pyo",
    "*.pyd",
    ".mypy_cache/",
    ".pytest_cache/",
    ".tox/",
    ".nox/",
    # Compiled binaries and archives
    "*.so",
    "*.dylib",
    "*.dll",
    "*.exe",
    "*.o",
    "*.a",
    "*.class",
    "*.jar",
    "*.zip",
    "*.gz",
    # Images
    "*.png",
    "*.jpg",
    "*.jpeg",
    "*.gif",
    "*.ico",
    # OS artifacts
    ".DS_Store",
    "Thumbs.db",
    # Editor temporary files
    "*.swp",
    "*.swo",
    "*~",
]


class FileFinder:
    """Finds files under the codebase directory that should be scanned."""

    def __init__(self, config: Config):
        self.config = config
        self.root = config.codebase_dir
        self._create_exclude_spec()

    def _create_exclude_spec(self) -> None:
        """Create pathspec for excluded directories, globs and root-level ignores.

        Nested ``.gitignore`` files are added while walking, see
        ``find_files``.
        """
        patterns: List[str] = []

        for exclude_dir in self.config.exclude_dirs:
            # Matches both from root and nested anywhere in the tree
            patterns.append(f"{exclude_dir}/")
            patterns.append(f"**/{exclude_dir}/")

        patterns.extend(COMMON_EXCLUDE_PATTERNS)

        if self.config.respect_gitignore:
            # Root-relative, like the root .gitignore
            info_exclude = self.root / ".git" / "info" / "exclude"
            patterns.extend(self._read_ignore_file(info_exclude))

        self._patterns = patterns
        self.exclude_spec = pathspec.GitIgnoreSpec.from_lines(patterns)

    @staticmethod
    def _read_ignore_file(ignore_path: Path) -> List[str]:
        if not ignore_path.is_file():
            return []
        lines = []
        try:
            with open(ignore_path, "r", encoding="utf-8", errors="ignore") as f:
                for line in f:
                    line = line.strip()
                    if not line or line.startswith("#"):
                        continue
                    lines.append(line)
        except OSError as e:
            logger.debug("Could not read %s: %s", ignore_path, e)
        return lines

    @staticmethod
    def _anchor_pattern(pattern: str, relative_dir: str) -> str:
        """Rewrite a pattern from ``relative_dir/.gitignore`` to be root-relative.

        Patterns with a slash before their last character are relative to
        their own directory; the rest match at any depth below it.
        """
        negated = pattern.startswith("!")
        if negated:
            pattern = pattern[1:]
        if "/" in pattern.rstrip("/"):
            anchored = f"{relative_dir}/{pattern.lstrip('/')}"
        else:
            anchored = f"{relative_dir}/**/{pattern}"
        return f"!{anchored}" if negated else anchored

    def _add_gitignore_patterns(self, directory: Path) -> None:
        """Add patterns from ``directory/.gitignore`` to the exclude spec."""
        lines = self._read_ignore_file(directory / ".gitignore")
        if not lines:
            return
        if directory != self.root:
            relative_dir = directory.relative_to(self.root).as_posix()
            lines = [self._anchor_pattern(line, relative_dir) for line in lines]
        self._patterns.extend(lines)
        self.exclude_spec = pathspec.GitIgnoreSpec.from_lines(self._patterns)

    def _is_excluded(self, relative_path: str) -> bool:
        return self.exclude_spec.match_file(relative_path)

    def _is_small_enough(self, file_path: Path) -> bool:
        try:
            return file_path.stat().st_size <= self.config.max_file_size
        except OSError:
            # Let the scanner report it as unreadable
            return True

    def find_files(self) -> Iterator[Path]:
        """Yield candidate files in a deterministic (sorted) walk order.

        Every ``.gitignore`` reached by the walk applies to its own subtree.

        Raises:
            InvalidRootError: If the codebase directory is missing or not a
                directory.
        """
        if not self.root.exists():
            raise InvalidRootError(f"Path does not exist: {self.root}")
        if not self.root.is_dir():
            raise InvalidRootError(f"Path is not a directory: {self.root}")

        self._create_exclude_spec()
        for current, dirs, files in os.walk(self.root):
            current_path = Path(current)
            if self.config.respect_gitignore:
                self._add_gitignore_patterns(current_path)

            # Prune in place so os.walk never descends into excluded dirs
            kept_dirs = []
            for dir_name in sorted(dirs):
                relative_dir = (current_path / dir_name).relative_to(self.root)
                if not self._is_excluded(relative_dir.as_posix() + "/"):
                    kept_dirs.append(dir_name)
            dirs[:] = kept_dirs

            for file_name in sorted(files):
                file_path = current_path / file_name
                relative_file = file_path.relative_to(self.root).as_posix()
                if self._is_excluded(relative_file):
                    continue
                if not self._is_small_enough(file_path):
                    logger.debug("Skipping large file %s", file_path)
                    continue
                yield file_path
