"""PHP code coverage analyzer.

Runs the project's test command with ``--coverage-clover``, then correlates
the Clover report with the project's source files:

1. every reported file line is annotated with its hit count,
2. project metrics are stored,
3. each package/file/class gets class metrics and resolved methods.

Malformed fragments are logged and skipped so that partial results survive;
environment and process failures abort the run.
"""

from __future__ import annotations

import os
import shlex
import tempfile
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import structlog

from cloverlens.config.constants import ANALYZER_NAME, ELEMENT_PACKAGE
from cloverlens.config.models import CloverLensConfig
from cloverlens.core.errors import MalformedReportError, ProcessFailedError
from cloverlens.core.logging import get_logger
from cloverlens.coverage.annotate import annotate_file
from cloverlens.coverage.methods import resolve_file
from cloverlens.coverage.metrics import store_project_metrics
from cloverlens.coverage.paths import relative_path
from cloverlens.coverage.report import parse_report
from cloverlens.model import Project
from cloverlens.runner import ProcessResult, ensure_coverage_driver, run_command

Runner = Callable[..., ProcessResult]
DriverCheck = Callable[[str, list[str]], str]


@dataclass(slots=True)
class AnalysisSummary:
    files_annotated: int = 0
    files_skipped: int = 0
    lines_annotated: int = 0
    classes: int = 0
    methods: int = 0
    spurious_methods: int = 0
    project_metrics: dict[str, int] = field(default_factory=dict)
    malformed: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "files_annotated": self.files_annotated,
            "files_skipped": self.files_skipped,
            "lines_annotated": self.lines_annotated,
            "classes": self.classes,
            "methods": self.methods,
            "spurious_methods": self.spurious_methods,
            "project_metrics": dict(self.project_metrics),
            "malformed": list(self.malformed),
        }


class CodeCoverageAnalyzer:
    """Collects code coverage information for a PHP project."""

    name = ANALYZER_NAME

    def __init__(
        self,
        config: CloverLensConfig | None = None,
        *,
        logger: structlog.stdlib.BoundLogger | None = None,
        runner: Runner | None = None,
        driver_check: DriverCheck | None = None,
    ) -> None:
        self._config = config or CloverLensConfig()
        self._log = logger or get_logger(ANALYZER_NAME)
        self._runner = runner or run_command
        self._driver_check = driver_check or ensure_coverage_driver

    @property
    def config(self) -> CloverLensConfig:
        return self._config

    def build_command(self, output_file: Path | str) -> str:
        coverage = self._config.coverage
        command = coverage.test_command
        if coverage.config_path:
            command += f" --configuration {shlex.quote(coverage.config_path)}"
        return f"{command} --coverage-clover {shlex.quote(str(output_file))}"

    def scrutinize(self, project: Project) -> AnalysisSummary | None:
        """Run the test suite with coverage and process the resulting report.

        Returns None when the run succeeded without producing a report.

        Raises:
            EnvironmentUnavailableError: No coverage driver is loaded.
            ProcessFailedError: The run timed out, or failed without a report.
        """
        coverage = self._config.coverage
        driver = self._driver_check(coverage.php_binary, coverage.drivers)
        self._log.debug("coverage_driver_found", driver=driver)

        if coverage.only_changesets:
            self._log.warning(
                "deprecated_option",
                option="only_changesets",
                message=f'The "only_changesets" option for "{ANALYZER_NAME}" was deprecated.',
            )

        fd, output_name = tempfile.mkstemp(prefix="php-code-coverage", suffix=".xml")
        os.close(fd)
        output_file = Path(output_name)
        try:
            command = self.build_command(output_file)
            self._log.info("test_command_start", command=command, cwd=project.dir)
            result = self._runner(
                command,
                project.dir,
                timeout_sec=self._config.timeouts.run_sec,
                idle_timeout_sec=self._config.timeouts.idle_sec,
                on_output=lambda line: self._log.info("test_output", line=line),
            )
            self._log.info(
                "test_command_done",
                exit_code=result.exit_code,
                duration_s=round(result.duration_sec, 2),
            )
            content = output_file.read_bytes() if output_file.exists() else b""
        finally:
            output_file.unlink(missing_ok=True)

        if not content.strip():
            if result.exit_code != 0:
                raise ProcessFailedError.failed(command, result.exit_code, result.output)
            self._log.info("clover_report_empty")
            return None

        return self.process_clover(project, content)

    def process_clover(self, project: Project, content: bytes | str) -> AnalysisSummary:
        """Correlate Clover *content* with *project*.

        Raises:
            MalformedReportError: The content is not parseable XML.
        """
        report = parse_report(content)
        summary = AnalysisSummary()
        root = project.dir

        for report_file in report.files:
            if not report_file.lines:
                continue
            relative = self._relative(report_file.name, root, summary)
            if relative is None:
                continue
            written = annotate_file(project, report_file, relative)
            if project.get_file(relative) is None:
                summary.files_skipped += 1
                self._log.debug("clover_file_not_tracked", path=relative)
                continue
            summary.files_annotated += 1
            summary.lines_annotated += written

        for metrics in report.project_metrics:
            try:
                summary.project_metrics = store_project_metrics(project, metrics)
            except MalformedReportError as e:
                self._log.warning("clover_project_metrics_malformed", error=e.message)
                summary.malformed.append(e.message)

        for package in report.packages:
            package_element = project.get_or_create_code_element(ELEMENT_PACKAGE, package.name)

            for report_file in package.files:
                relative = self._relative(report_file.name, root, summary)
                if relative is None:
                    continue
                project_file = project.get_file(relative)
                if project_file is None:
                    continue

                resolution = resolve_file(
                    project,
                    package_element,
                    package.name,
                    report_file,
                    project_file,
                    logger=self._log,
                )
                summary.malformed.extend(e.message for e in resolution.malformed)
                for class_resolution in resolution.classes:
                    summary.classes += 1
                    summary.methods += len(class_resolution.emitted)
                    summary.spurious_methods += class_resolution.spurious

        self._log.info(
            "clover_report_processed",
            files=summary.files_annotated,
            skipped=summary.files_skipped,
            classes=summary.classes,
            methods=summary.methods,
            malformed=len(summary.malformed),
        )
        return summary

    def _relative(self, report_path: str, root: str, summary: AnalysisSummary) -> str | None:
        try:
            return relative_path(report_path, root)
        except MalformedReportError as e:
            if e.message not in summary.malformed:
                self._log.warning("clover_path_outside_root", path=report_path, root=root)
                summary.malformed.append(e.message)
            return None
