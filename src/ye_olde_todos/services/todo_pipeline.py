"""
Discovery-to-attribution pipeline.

Files are scanned and TODOs blamed on thread pools. Each item yields either a
result or None, so one bad file or one failed git blame is logged and dropped
without affecting the rest of the batch. Ordering is imposed afterwards by a
stable sort on commit time.
"""

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Iterable, List, Optional, Sequence

from ..config import Config
from ..errors import AttributionError, FileUnreadableError
from ..indexing.file_finder import FileFinder
from ..indexing.marker_scanner import DEFAULT_MARKERS, scan_file
from ..models import Todo, TodoLocation, TodoReport
from .blame_resolver import BlameResolver
from .todo_stats import calculate_stats

logger = logging.getLogger(__name__)


def _scan_one(path: Path, markers: Sequence[str]) -> List[TodoLocation]:
    try:
        return list(scan_file(path, markers))
    except FileUnreadableError as e:
        logger.warning("couldn't read %s: %s", e.path, e.cause)
        return []


def scan_for_todos(
    paths: Iterable[Path],
    markers: Sequence[str] = DEFAULT_MARKERS,
    max_workers: int = 8,
) -> List[TodoLocation]:
    """Scan files concurrently; results keep the order of ``paths``."""
    with ThreadPoolExecutor(
        max_workers=max_workers, thread_name_prefix="TodoScan"
    ) as executor:
        per_file = executor.map(lambda path: _scan_one(path, markers), paths)
        return [location for locations in per_file for location in locations]


def _resolve_one(resolver: BlameResolver, location: TodoLocation) -> Optional[Todo]:
    try:
        return resolver.resolve(location)
    except AttributionError as e:
        logger.warning("couldn't get git blame for %s: %s", location.path, e)
        return None


def populate_metadata(
    locations: Sequence[TodoLocation],
    resolver: BlameResolver,
    max_workers: int = 8,
) -> List[Todo]:
    """Blame every location concurrently, dropping the ones that fail.

    The returned list keeps discovery order among the successes.
    """
    with ThreadPoolExecutor(
        max_workers=max_workers, thread_name_prefix="TodoBlame"
    ) as executor:
        outcomes = list(
            executor.map(lambda location: _resolve_one(resolver, location), locations)
        )
    todos = [todo for todo in outcomes if todo is not None]
    if len(todos) < len(outcomes):
        logger.debug(
            "Dropped %d of %d TODOs that could not be attributed",
            len(outcomes) - len(todos),
            len(outcomes),
        )
    return todos


def sort_todos(todos: Iterable[Todo]) -> List[Todo]:
    """Oldest first; ties keep their incoming order."""
    return sorted(todos, key=lambda todo: todo.timestamp)


def apply_limit(todos: Sequence[Todo], limit: Optional[int]) -> List[Todo]:
    """Keep the first ``limit`` TODOs (the oldest, once sorted)."""
    if limit is None:
        return list(todos)
    return list(todos[:limit])


def collect_todos(config: Config, resolver: Optional[BlameResolver] = None) -> List[Todo]:
    """Find, scan and blame everything under ``config.codebase_dir``.

    Raises:
        InvalidRootError: If the codebase directory is missing or not a dir.
    """
    start_time = time.time()
    finder = FileFinder(config)
    paths = list(finder.find_files())
    logger.debug("Found %d candidate files under %s", len(paths), config.codebase_dir)

    locations = scan_for_todos(paths, config.markers, config.scan_threads)
    logger.debug("Found %d TODO markers", len(locations))

    if resolver is None:
        resolver = BlameResolver(
            safe_directory=config.codebase_dir, timeout=config.blame_timeout
        )
    todos = sort_todos(populate_metadata(locations, resolver, config.blame_threads))
    logger.debug(
        "Attributed %d TODOs in %.2fs", len(todos), time.time() - start_time
    )
    return todos


def build_report(
    todos: Sequence[Todo], limit: Optional[int] = None, with_stats: bool = True
) -> TodoReport:
    """Apply the limit to sorted TODOs and compute stats over what is kept."""
    shown = apply_limit(todos, limit)
    stats = calculate_stats(shown) if with_stats else None
    return TodoReport(todos=shown, stats=stats, total_count=len(todos))
