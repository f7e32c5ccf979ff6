"""Value types flowing through the scan, blame and report stages."""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any, Dict, List, Optional

_DAY = timedelta(days=1)
_HOUR = timedelta(hours=1)
_MINUTE = timedelta(minutes=1)
_SECOND = timedelta(seconds=1)
_MILLISECOND = timedelta(milliseconds=1)


def _whole(age: timedelta, unit: timedelta) -> int:
    # Truncates toward zero
    return int(age / unit)


@dataclass(frozen=True)
class TodoLocation:
    """A line in a file that contains a TODO marker."""

    path: Path
    line_number: int  # 1-based
    text: str


@dataclass(frozen=True)
class BlameInfo:
    """Author and commit time extracted from one git blame line."""

    author: str
    timestamp: datetime


@dataclass(frozen=True)
class Todo:
    """A TODO marker attributed to the commit that introduced it."""

    path: Path
    line_number: int
    text: str
    author: str
    timestamp: datetime  # timezone-aware, UTC
    age: timedelta

    @classmethod
    def from_location(
        cls, location: TodoLocation, blame: BlameInfo, now: datetime
    ) -> "Todo":
        return cls(
            path=location.path,
            line_number=location.line_number,
            text=location.text,
            author=blame.author,
            timestamp=blame.timestamp,
            age=now - blame.timestamp,
        )

    @property
    def filename(self) -> str:
        return self.path.name

    @property
    def filename_with_line_number(self) -> str:
        return f"{self.filename}:{self.line_number}"

    @property
    def age_days(self) -> int:
        return _whole(self.age, _DAY)

    @property
    def age_hours(self) -> int:
        return _whole(self.age, _HOUR)

    @property
    def age_minutes(self) -> int:
        return _whole(self.age, _MINUTE)

    @property
    def age_seconds(self) -> int:
        return _whole(self.age, _SECOND)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize for JSON output; age is reported in milliseconds."""
        return {
            "path": str(self.path),
            "line_number": self.line_number,
            "text": self.text,
            "author": self.author,
            "timestamp": self.timestamp.isoformat(),
            "age": _whole(self.age, _MILLISECOND),
        }


@dataclass(frozen=True)
class TodoStats:
    """Age statistics over the displayed TODOs."""

    mean_age_days: float
    median_age_days: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "mean_age_days": self.mean_age_days,
            "median_age_days": self.median_age_days,
        }


@dataclass(frozen=True)
class TodoLayout:
    """Column widths shared by every rendered TODO line.

    Computed once per run from the full set of TODOs so that all lines align,
    then passed explicitly to the renderer.
    """

    name_width: int
    path_width: int
    total_width: int

    # Columns reserved for the age label and separators
    RESERVED_WIDTH = 30

    @property
    def text_width(self) -> int:
        return self.total_width - self.name_width - self.path_width - self.RESERVED_WIDTH


@dataclass
class TodoReport:
    """Final result of a run, in display order."""

    todos: List[Todo] = field(default_factory=list)
    stats: Optional[TodoStats] = None
    total_count: int = 0

    @property
    def filtered_count(self) -> int:
        return len(self.todos)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "stats": self.stats.to_dict() if self.stats is not None else None,
            "todos": [todo.to_dict() for todo in self.todos],
            "filtered_count": self.filtered_count,
            "total_count": self.total_count,
        }
