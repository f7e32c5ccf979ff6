"""Command line interface for Ye Olde Todos."""

import json
import logging
import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.text import Text

from . import __version__
from .config import ConfigManager
from .errors import FatalError
from .services.todo_pipeline import build_report, collect_todos
from .utils.todo_display import compute_layout, display_todo_report, get_display_width

logger = logging.getLogger(__name__)


def _fail(message: str) -> None:
    error_console = Console(stderr=True, highlight=False, soft_wrap=True)
    # Paths and pydantic details may contain square brackets
    error_console.print(Text(f"❌ {message}", style="red"))
    sys.exit(1)


@click.command(
    name="ye-olde-todos", context_settings=dict(help_option_names=["-h", "--help"])
)
@click.option(
    "--limit",
    "-l",
    type=click.IntRange(min=0),
    default=None,
    help="Show at most this many TODOs (oldest first)",
)
@click.option(
    "--path",
    "-p",
    "path",
    type=click.Path(path_type=Path),
    default=Path("."),
    show_default=True,
    help="Root directory to scan",
)
@click.option("--no-stats", is_flag=True, help="Do not compute or show age statistics")
@click.option(
    "--json", "as_json", is_flag=True, help="Print a JSON document instead of text"
)
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Config file (default: <path>/.ye-olde-todos.json if present)",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.version_option(version=__version__, prog_name="ye-olde-todos")
def main(
    limit: Optional[int],
    path: Path,
    no_stats: bool,
    as_json: bool,
    config_path: Optional[Path],
    verbose: bool,
):
    """Find TODO comments and list them by age, oldest first.

    \b
    Every line containing "// TODO" or "# TODO" is attributed with git blame
    to the commit that introduced it. Lines that cannot be blamed are reported
    as warnings on stderr and left out of the report.

    \b
    EXAMPLES:
      ye-olde-todos                  # Scan the current directory
      ye-olde-todos -p ../project    # Scan another tree
      ye-olde-todos -l 10            # Ten oldest TODOs
      ye-olde-todos --json --no-stats > todos.json
    """
    # Diagnostics go to stderr
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s:%(name)s:%(message)s",
        stream=sys.stderr,
    )

    if not path.exists():
        _fail(f"Path does not exist: {path}")
    if not path.is_dir():
        _fail(f"Path is not a directory: {path}")

    try:
        manager = (
            ConfigManager(config_path) if config_path else ConfigManager.for_root(path)
        )
        config = manager.load().model_copy(update={"codebase_dir": path})
        logger.debug("Scanning %s for %s", path, ", ".join(config.markers))

        todos = collect_todos(config)
        report = build_report(todos, limit=limit, with_stats=not no_stats)

        if as_json:
            try:
                document = json.dumps(report.to_dict(), indent=2)
            except (TypeError, ValueError) as e:
                _fail(f"Failed to write report: {e}")
            click.echo(document)
            return

        console = Console(highlight=False, soft_wrap=True)
        # Layout spans every attributed TODO, not just the ones shown
        layout = compute_layout(todos, get_display_width(console))
        display_todo_report(report, layout, console)
    except FatalError as e:
        _fail(str(e))


if __name__ == "__main__":
    main()
