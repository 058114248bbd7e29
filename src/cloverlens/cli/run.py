"""cloverlens run - execute the test suite with coverage and analyze it."""

from pathlib import Path

import click

from cloverlens.cli.output import emit_result, handle_errors, load_cli_config
from cloverlens.core.logging import set_run_id
from cloverlens.core.progress import task
from cloverlens.coverage import CodeCoverageAnalyzer
from cloverlens.model import Project


@click.command()
@click.argument("path", default=".", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
@handle_errors
def run_command(ctx: click.Context, path: Path, as_json: bool) -> None:
    """Run the configured test command with coverage and analyze the report.

    PATH is the project root (default: current directory).
    """
    repo_root = path.resolve()
    config = load_cli_config(ctx, repo_root)
    set_run_id()

    project = Project(repo_root)
    analyzer = CodeCoverageAnalyzer(config)
    with task(f"Running {config.coverage.test_command}"):
        summary = analyzer.scrutinize(project)

    emit_result(project, summary, as_json=as_json)
