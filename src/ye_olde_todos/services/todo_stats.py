"""Mean and median age over a set of TODOs."""

from typing import Sequence

from rich.text import Text

from ..models import Todo, TodoStats

VALUE_STYLE = "bold green"


def summarize_ages(ages: Sequence[int]) -> TodoStats:
    """Compute statistics over whole-day ages.

    Mean is a float average; median is the middle value, or the floor of the
    mean of the two middle values for an even count. Empty input gives zeros.
    """
    ordered = sorted(ages)
    count = len(ordered)
    if count == 0:
        return TodoStats(mean_age_days=0.0, median_age_days=0)

    mean = sum(ordered) / count
    mid = count // 2
    if count % 2 == 0:
        median = (ordered[mid - 1] + ordered[mid]) // 2
    else:
        median = ordered[mid]
    return TodoStats(mean_age_days=float(mean), median_age_days=median)


def calculate_stats(todos: Sequence[Todo]) -> TodoStats:
    """Statistics over exactly the TODOs given (i.e. the displayed ones)."""
    return summarize_ages([todo.age_days for todo in todos])


def format_stats(stats: TodoStats, filtered_count: int, total_count: int) -> Text:
    """Summary line: ``Todos: 3/5  ||  Mean: 12.3 days  ||  Median: 9 days``."""
    text = Text()
    text.append("Todos: ")
    text.append(f"{filtered_count}/{total_count}", style=VALUE_STYLE)
    text.append("  ||  Mean: ")
    text.append(f"{stats.mean_age_days:.1f} days", style=VALUE_STYLE)
    text.append("  ||  Median: ")
    text.append(f"{stats.median_age_days} days", style=VALUE_STYLE)
    text.append("\n")
    return text
