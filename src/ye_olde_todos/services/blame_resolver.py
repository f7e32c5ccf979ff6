"""
Attribution of TODO occurrences via git blame.

Runs ``git blame -L <n>,<n>`` for a single line and parses the default
(non-porcelain) output::

    <hash> (<author> <date> <time> <tz> <line>) <code...>

Parsing is positional: the four trailing fields inside the parentheses are
peeled off from the right so that author names may contain spaces.
"""

import logging
import re
import subprocess
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Optional

from ..errors import (
    AttributionSubprocessError,
    EmptyAttributionOutputError,
    MalformedAttributionLineError,
    PathResolutionError,
    TimestampParseError,
)
from ..models import BlameInfo, Todo, TodoLocation
from ..utils.git_runner import run_git_command

logger = logging.getLogger(__name__)

BLAME_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S %z"
# strptime alone accepts single-digit fields and "Z"/"+00:00" offsets
_BLAME_TIMESTAMP_SHAPE = re.compile(r"\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2} [+-]\d{4}")


def parse_blame_timestamp(value: str, path: Optional[Path] = None) -> datetime:
    """Parse ``YYYY-MM-DD HH:MM:SS +HHMM`` into an aware UTC datetime."""
    if not _BLAME_TIMESTAMP_SHAPE.fullmatch(value):
        raise TimestampParseError(path, f"invalid blame timestamp: {value!r}")
    try:
        parsed = datetime.strptime(value, BLAME_TIMESTAMP_FORMAT)
        # Year 1 or 9999 can leave the datetime range once shifted to UTC
        return parsed.astimezone(timezone.utc)
    except (ValueError, OverflowError) as e:
        raise TimestampParseError(
            path, f"invalid blame timestamp: {value!r} ({e})"
        ) from e


def parse_blame_line(line: str, path: Optional[Path] = None) -> BlameInfo:
    """Extract author and commit timestamp from one line of git blame output.

    Args:
        line: A line such as
            ``abc123 (Jane Q. Public 2024-01-15 09:30:00 +0000 7) code``
        path: File the line belongs to, used only in error messages

    Raises:
        MalformedAttributionLineError: If the parentheses are missing or hold
            fewer than five space-separated fields.
        TimestampParseError: If date, time and offset do not form an exact
            ``YYYY-MM-DD HH:MM:SS +HHMM`` timestamp.
    """
    start = line.find("(")
    if start == -1:
        raise MalformedAttributionLineError(
            path, "blame line has no opening parenthesis", line=line
        )
    end = line.find(")", start + 1)
    if end == -1:
        raise MalformedAttributionLineError(
            path, "blame line has no closing parenthesis", line=line
        )
    info = line[start + 1 : end]

    # author | date | time | tz | line number
    parts = info.rsplit(" ", 4)
    if len(parts) < 5:
        raise MalformedAttributionLineError(
            path,
            f"expected author, date, time, timezone and line number in {info!r}",
            line=line,
        )
    author, date, time, tz, _line_number = parts

    timestamp = parse_blame_timestamp(f"{date} {time} {tz}", path)
    return BlameInfo(author=author.strip(), timestamp=timestamp)


class BlameResolver:
    """Resolves TodoLocations into Todos, one git blame call each."""

    def __init__(
        self,
        safe_directory: Optional[Path] = None,
        timeout: Optional[float] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """
        Args:
            safe_directory: Tree trusted by git despite foreign ownership
            timeout: Seconds before a blame call is abandoned; None waits forever
            clock: Returns the current aware time; used to compute ages
        """
        self.safe_directory = safe_directory
        self.timeout = timeout
        self.clock = clock or (lambda: datetime.now(timezone.utc))

    def blame_line(self, path: Path, line_number: int) -> str:
        """Return the first line of ``git blame`` output for one line of a file."""
        try:
            absolute_path = path.resolve(strict=True)
        except (OSError, RuntimeError) as e:
            raise PathResolutionError(path, f"cannot resolve path: {e}") from e

        # git finds the repository from its working directory, not the argument
        cmd = [
            "git",
            "blame",
            "-L",
            f"{line_number},{line_number}",
            str(absolute_path),
        ]
        try:
            result = run_git_command(
                cmd,
                cwd=absolute_path.parent,
                safe_directory=self.safe_directory,
                timeout=self.timeout,
            )
        except FileNotFoundError as e:
            raise AttributionSubprocessError(path, f"git is not available: {e}") from e
        except subprocess.TimeoutExpired as e:
            raise AttributionSubprocessError(
                path, f"git blame timed out after {self.timeout}s"
            ) from e
        except OSError as e:
            raise AttributionSubprocessError(path, f"git blame failed: {e}") from e

        if result.returncode != 0:
            stderr = (result.stderr or "").strip()
            raise AttributionSubprocessError(
                path,
                f"git blame failed: {stderr}",
                returncode=result.returncode,
                stderr=stderr,
            )

        lines = (result.stdout or "").splitlines()
        if not lines:
            raise EmptyAttributionOutputError(path, "git blame returned no output")
        return lines[0]

    def resolve(self, location: TodoLocation) -> Todo:
        """Attribute one TODO occurrence.

        Raises:
            AttributionError: Any subclass; the occurrence should be dropped.
        """
        blame_line = self.blame_line(location.path, location.line_number)
        blame = parse_blame_line(blame_line, location.path)
        return Todo.from_location(location, blame, self.clock())
