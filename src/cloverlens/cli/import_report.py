"""cloverlens import - analyze an existing Clover report."""

from pathlib import Path

import click

from cloverlens.cli.output import emit_result, handle_errors, load_cli_config
from cloverlens.core.logging import set_run_id
from cloverlens.coverage import CodeCoverageAnalyzer
from cloverlens.model import Project


@click.command()
@click.argument("report", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--root",
    "root",
    default=".",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help="Project root the report's absolute paths start with.",
)
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
@handle_errors
def import_command(ctx: click.Context, report: Path, root: Path, as_json: bool) -> None:
    """Correlate the Clover REPORT with the sources under --root."""
    repo_root = root.resolve()
    config = load_cli_config(ctx, repo_root)
    set_run_id()

    project = Project(repo_root)
    summary = CodeCoverageAnalyzer(config).process_clover(project, report.read_bytes())
    emit_result(project, summary, as_json=as_json)
