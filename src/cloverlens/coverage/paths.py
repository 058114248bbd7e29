"""Map absolute report paths to project-relative file identifiers."""

from __future__ import annotations

from cloverlens.core.errors import MalformedReportError


def relative_path(report_path: str, root_dir: str) -> str:
    """Strip *root_dir* and the following separator from *report_path*.

    Clover reports carry absolute paths as seen by the test run; the project
    model is keyed by paths relative to its root.

    Raises:
        MalformedReportError: *report_path* does not live under *root_dir*.
    """
    root = root_dir.rstrip("/")
    prefix = f"{root}/"
    if not report_path.startswith(prefix) or len(report_path) == len(prefix):
        raise MalformedReportError.path_outside_root(report_path, root_dir)
    return report_path[len(prefix) :]
