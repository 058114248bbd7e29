"""Attach per-line hit counts from the report to project files."""

from __future__ import annotations

from cloverlens.config.constants import LINE_ATTRIBUTE
from cloverlens.coverage.report import ReportFile
from cloverlens.model import Project


def annotate_file(project: Project, report_file: ReportFile, relative: str) -> int:
    """Set ``coverage_count`` on every reported line of the tracked file.

    Returns the number of line attributes written; 0 when the file is not
    tracked by *project*.
    """
    project_file = project.get_file(relative)
    if project_file is None:
        return 0

    written = 0
    for line in report_file.lines:
        if line.hit_count is None:
            continue
        project_file.set_line_attribute(line.line_number, LINE_ATTRIBUTE, line.hit_count)
        written += 1
    return written
