"""Display utilities for TODO reports.

Each TODO renders as one aligned line::

    <age>      <author>   <file:line>       <text...>

Column widths come from a TodoLayout computed once for the whole report.
"""

from typing import Optional, Sequence

from rich.console import Console
from rich.style import Style
from rich.text import Text

from ..errors import DisplayWidthError
from ..models import Todo, TodoLayout, TodoReport
from ..services.todo_stats import format_stats

AGE_WIDTH = 10
MIN_PATH_WIDTH = 15
# Widths used when there is nothing to measure
EMPTY_NAME_WIDTH = 10
EMPTY_PATH_WIDTH = 20
ELLIPSIS = "..."

OLD_DAYS = 364
WARNING_DAYS = 60


def get_display_width(console: Console) -> int:
    """Width of the display surface in columns."""
    width = console.size.width
    if not width or width <= 0:
        raise DisplayWidthError("Unable to determine terminal width")
    return width


def compute_layout(todos: Sequence[Todo], display_width: int) -> TodoLayout:
    """Column widths that fit every TODO; total never below the fixed columns."""
    if todos:
        name_width = max(len(todo.author) for todo in todos) + 1
        path_width = max(
            max(len(todo.filename_with_line_number) for todo in todos),
            MIN_PATH_WIDTH,
        )
    else:
        name_width = EMPTY_NAME_WIDTH
        path_width = EMPTY_PATH_WIDTH
    min_width = name_width + path_width + TodoLayout.RESERVED_WIDTH
    return TodoLayout(
        name_width=name_width,
        path_width=path_width,
        total_width=max(display_width, min_width),
    )


def age_label(todo: Todo) -> Text:
    """Age in days, colored by severity; hours/minutes/seconds under a day."""
    days = todo.age_days
    if days > 0:
        label = f"{f'{days} days':<{AGE_WIDTH}}"
        if days > OLD_DAYS:
            return Text(label, style="red")
        if days > WARNING_DAYS:
            return Text(label, style="yellow")
        return Text(label, style="green")

    hours = todo.age_hours
    if hours > 0:
        return Text(f"{hours} hours")
    minutes = todo.age_minutes
    if minutes > 0:
        return Text(f"{minutes} minutes")
    return Text(f"{todo.age_seconds} seconds")


def truncate_text(text: str, max_width: int) -> str:
    """Clip ``text`` to ``max_width`` characters, ending in "..." when clipped."""
    if len(text) <= max_width:
        return text
    if max_width <= len(ELLIPSIS):
        return ELLIPSIS
    return text[: max_width - len(ELLIPSIS)] + ELLIPSIS


def file_link(todo: Todo) -> str:
    """file:// URI for the TODO's file, canonical when possible."""
    try:
        absolute_path = todo.path.resolve(strict=True)
    except (OSError, RuntimeError):
        absolute_path = todo.path
    return f"file://{absolute_path}"


def format_todo(todo: Todo, layout: TodoLayout) -> Text:
    """Render one TODO as a single line according to ``layout``."""
    text_width = layout.text_width

    line = Text()
    line.append_text(age_label(todo))
    # Sub-day labels are unpadded; keep the author column aligned anyway
    line.pad_right(max(AGE_WIDTH - line.cell_len, 0))
    line.append(" ")
    line.append(f"{todo.author:<{layout.name_width}}")
    line.append(" ")
    line.append(
        f"{todo.filename_with_line_number:<{layout.path_width}}",
        style=Style(color="blue", link=file_link(todo)),
    )
    line.append(" ")
    line.append(
        f"{truncate_text(todo.text, text_width):<{text_width}}", style="italic"
    )
    return line


def display_todo_report(
    report: TodoReport,
    layout: TodoLayout,
    console: Optional[Console] = None,
) -> None:
    """Print the optional stats line followed by one line per TODO."""
    console = console or Console()
    if report.stats is not None:
        console.print(
            format_stats(report.stats, report.filtered_count, report.total_count)
        )
    for todo in report.todos:
        console.print(format_todo(todo, layout))
