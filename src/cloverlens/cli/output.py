"""Shared rendering and error handling for CLI commands."""

from __future__ import annotations

import functools
import json
from collections.abc import Callable
from pathlib import Path
from typing import Any, TypeVar

import click

from cloverlens.config import CloverLensConfig, load_config
from cloverlens.config.constants import CLASS_COVERAGE_METRIC, ELEMENT_CLASS, metric_name
from cloverlens.core.errors import CloverLensError
from cloverlens.core.logging import configure_logging
from cloverlens.core.progress import get_console, make_metrics_table, pluralize, status
from cloverlens.coverage import AnalysisSummary
from cloverlens.model import Project

F = TypeVar("F", bound=Callable[..., Any])


def handle_errors(func: F) -> F:
    """Turn CloverLensError into a one-line message and exit code 1."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except CloverLensError as exc:
            raise click.ClickException(str(exc)) from exc

    return wrapper  # type: ignore[return-value]


def load_cli_config(ctx: click.Context, repo_root: Path) -> CloverLensConfig:
    config_file: Path | None = ctx.obj.get("config_file")
    config = load_config(repo_root, config_file=config_file)
    configure_logging(config.logging, verbose=ctx.obj.get("verbose", False))
    return config


def emit_result(project: Project, summary: AnalysisSummary | None, *, as_json: bool) -> None:
    if as_json:
        payload = {
            "summary": summary.to_dict() if summary else None,
            "project": project.to_dict(),
        }
        click.echo(json.dumps(payload, indent=2, sort_keys=True))
        return

    if summary is None:
        status("Tests passed but no coverage report was produced", style="warning")
        return

    console = get_console()
    if summary.project_metrics:
        console.print(make_metrics_table(summary.project_metrics, title="Project coverage"))

    classes = [e for e in project.code_elements if e.kind == ELEMENT_CLASS]
    for element in sorted(classes, key=lambda e: e.name):
        ratio = element.metrics.get(metric_name(CLASS_COVERAGE_METRIC))
        shown = f"{ratio:.0%}" if isinstance(ratio, float) else "-"
        console.print(f"  {element.name:<60} {shown:>5}", highlight=False)

    status(
        f"Annotated {pluralize(summary.files_annotated, 'file')}, "
        f"resolved {pluralize(summary.classes, 'class', 'classes')} "
        f"and {pluralize(summary.methods, 'method')}",
        style="success",
    )
    if summary.spurious_methods:
        status(
            f"Discarded {pluralize(summary.spurious_methods, 'closure entry', 'closure entries')}",
            style="info",
        )
    for message in summary.malformed:
        status(message, style="warning")
