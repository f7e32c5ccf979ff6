"""Line-level TODO marker detection for a single file."""

import logging
from pathlib import Path
from typing import Iterator, Sequence

from ..errors import BinaryFileError, FileUnreadableError
from ..models import TodoLocation

logger = logging.getLogger(__name__)

DEFAULT_MARKERS = ("// TODO", "# TODO")

# Bytes sniffed for NUL when deciding whether a file is binary
BINARY_SNIFF_BYTES = 1024


def line_has_marker(line: str, markers: Sequence[str] = DEFAULT_MARKERS) -> bool:
    """Case-sensitive substring check; "# TODO" also matches "# TODO:"."""
    return any(marker in line for marker in markers)


def scan_file(
    path: Path, markers: Sequence[str] = DEFAULT_MARKERS
) -> Iterator[TodoLocation]:
    """Yield a TodoLocation for every line of ``path`` containing a marker.

    Line numbers count physical lines, including lines that are not valid
    UTF-8; such lines are skipped without shifting later line numbers.
    Binary files yield nothing and are reported like unreadable ones.

    Raises:
        BinaryFileError: If a NUL byte appears in the first
            ``BINARY_SNIFF_BYTES`` bytes.
        FileUnreadableError: If the file cannot be opened or read. Raised on
            first iteration, since this is a generator.
    """
    try:
        with open(path, "rb") as f:
            head = f.read(BINARY_SNIFF_BYTES)
            if b"\x00" in head:
                raise BinaryFileError(path)
            f.seek(0)

            for line_number, raw_line in enumerate(f, start=1):
                try:
                    line = raw_line.decode("utf-8")
                except UnicodeDecodeError:
                    continue
                if line_has_marker(line, markers):
                    yield TodoLocation(
                        path=path, line_number=line_number, text=line.strip()
                    )
    except OSError as e:
        raise FileUnreadableError(path, e) from e
