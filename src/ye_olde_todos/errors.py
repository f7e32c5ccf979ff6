"""Error kinds raised while scanning, attributing and reporting TODOs.

Per-file and per-occurrence errors are recoverable: the pipeline logs them and
moves on. Subclasses of ``FatalError`` abort the whole run.
"""

from pathlib import Path
from typing import Optional, Union

PathLike = Union[str, Path]


class YeOldeTodosError(Exception):
    """Base class for all errors raised by ye_olde_todos."""


class FileUnreadableError(YeOldeTodosError):
    """A candidate file could not be opened or read."""

    def __init__(self, path: PathLike, cause: Exception):
        self.path = Path(path)
        self.cause = cause
        super().__init__(f"{self.path}: {cause}")


class BinaryFileError(FileUnreadableError):
    """A candidate file holds binary content and was not scanned."""

    def __init__(self, path: PathLike):
        super().__init__(path, ValueError("binary content (NUL byte)"))


class AttributionError(YeOldeTodosError):
    """A single TODO occurrence could not be attributed via git blame."""

    def __init__(self, path: Optional[PathLike], message: str):
        self.path = Path(path) if path is not None else None
        self.message = message
        super().__init__(message)


class PathResolutionError(AttributionError):
    """The occurrence's path does not exist or cannot be canonicalized."""


class AttributionSubprocessError(AttributionError):
    """git blame could not be run or exited with a non-zero status."""

    def __init__(
        self,
        path: Optional[PathLike],
        message: str,
        returncode: Optional[int] = None,
        stderr: str = "",
    ):
        self.returncode = returncode
        self.stderr = stderr
        super().__init__(path, message)


class EmptyAttributionOutputError(AttributionError):
    """git blame succeeded but printed nothing."""


class MalformedAttributionLineError(AttributionError):
    """A blame line does not have the ``hash (author date time tz line)`` shape."""

    def __init__(self, path: Optional[PathLike], message: str, line: str = ""):
        self.line = line
        super().__init__(path, message)


class TimestampParseError(AttributionError):
    """The blame timestamp is not exactly ``YYYY-MM-DD HH:MM:SS +HHMM``."""


class FatalError(YeOldeTodosError):
    """Setup or output failure that aborts the run."""


class InvalidRootError(FatalError):
    """The root path to scan is missing or is not a directory."""


class DisplayWidthError(FatalError):
    """The width of the display surface could not be determined."""


class ConfigError(FatalError):
    """A configuration file exists but could not be loaded."""
