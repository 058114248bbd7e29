"""User-facing status output for CLI operations.

Usage::

    from cloverlens.core.progress import status, task

    status("Reading clover.xml")
    status("Ready", style="success")  # ✓ Ready

    with task("Running phpunit"):
        run()
    # Prints: ✓ Running phpunit (3.2s)
"""

from __future__ import annotations

import sys
import time
from collections.abc import Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING

from rich.console import Console
from rich.markup import escape
from rich.table import Table

if TYPE_CHECKING:
    from structlog.stdlib import BoundLogger

_console = Console(stderr=True)

_STYLES = {
    "success": "[green]✓[/green] ",
    "error": "[red]✗[/red] ",
    "warning": "[yellow]![/yellow] ",
    "info": "  ",
    "none": "",
}

def _get_logger() -> BoundLogger:
    from cloverlens.core.logging import get_logger

    return get_logger("progress")


def _is_tty() -> bool:
    return hasattr(sys.stderr, "isatty") and sys.stderr.isatty()


def get_console() -> Console:
    """Get the shared Rich console instance."""
    return _console


def status(message: str, *, style: str = "info", indent: int = 0) -> None:
    """Print a styled status message to stderr."""
    prefix = _STYLES.get(style, "")
    padding = " " * indent
    _console.print(f"{padding}{prefix}{escape(message)}", highlight=False)

    _get_logger().debug("status", message=message, style=style)


def pluralize(count: int, singular: str, plural: str | None = None) -> str:
    """Return "1 file" or "3 files"."""
    if plural is None:
        plural = singular + "s"
    word = singular if count == 1 else plural
    return f"{count} {word}"


@contextmanager
def task(name: str) -> Iterator[None]:
    """Context manager for a named task with timing."""
    log = _get_logger()
    log.debug("task_start", task=name)
    status(f"{name}...", style="none")
    start = time.perf_counter()

    try:
        yield
        elapsed = time.perf_counter() - start
        status(f"{name} ({elapsed:.1f}s)", style="success")
        log.debug("task_done", task=name, elapsed_s=elapsed)
    except Exception as e:
        elapsed = time.perf_counter() - start
        status(f"{name} failed: {e}", style="error")
        log.error("task_failed", task=name, elapsed_s=elapsed, error=str(e))
        raise


def make_metrics_table(metrics: dict[str, int | float], *, title: str | None = None) -> Table:
    """Build a two-column table of metric name → value."""
    table = Table(title=title, show_header=True, header_style="bold", box=None, pad_edge=False)
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")
    for name in sorted(metrics):
        value = metrics[name]
        shown = f"{value:.2%}" if isinstance(value, float) else str(value)
        table.add_row(name, shown)
    return table
