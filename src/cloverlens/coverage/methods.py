"""Resolve Clover method entries against the lexical structure of a file.

PHPUnit's Clover output reports closures (and their arguments) as methods
of the declaring class, sometimes under the enclosing method's name. Only
entries that line up with a real ``function <name>`` declaration, in file
order, are accepted; the class's method counters are corrected for the
rest.

A file is resolved in one call: its source is tokenized once and a single
forward-only cursor is shared by all classes of the file. Every class walks
all method lines of the file; the outcome of each line is decided the first
time it is seen and replayed for later classes, so the cursor never needs
to rewind.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import structlog

from cloverlens.config.constants import (
    COVERED_METHODS_METRIC,
    ELEMENT_CLASS,
    ELEMENT_OPERATION,
    METHOD_COUNT_METRIC,
    METHOD_CRAP_METRIC,
    METHODS_METRIC,
    metric_name,
)
from cloverlens.core.errors import MalformedReportError
from cloverlens.core.logging import get_logger
from cloverlens.coverage.metrics import ClassCoverage, read_class_coverage, store_class_metrics
from cloverlens.coverage.report import LineHit, ReportFile
from cloverlens.coverage.tokens import Token, TokenCursor, find_function_declaration, tokenize
from cloverlens.model import CodeElement, Project, ProjectFile


@dataclass(frozen=True, slots=True)
class MethodCoverage:
    name: str  # Package\Class::method
    change_risk_anti_pattern: int
    count: int


@dataclass(slots=True)
class MethodResolution:
    """Outcome for one class."""

    class_name: str
    methods: int
    covered_methods: int
    emitted: list[MethodCoverage] = field(default_factory=list)
    spurious: int = 0


@dataclass(slots=True)
class FileResolution:
    """Outcome for one file."""

    path: str
    classes: list[MethodResolution] = field(default_factory=list)
    malformed: list[MalformedReportError] = field(default_factory=list)
    added_methods: int = 0


class DeclarationScanner:
    """Per-file lexical matcher for method lines.

    Wraps the file's cursor and remembers the outcome for each method line
    (keyed by its index among the file's method lines) so that every class
    sees the same answer for the same line.
    """

    def __init__(self, source: str) -> None:
        self._cursor = TokenCursor(tokenize(source))
        self._outcomes: dict[int, Token | None] = {}

    def match(self, index: int, line: LineHit) -> Token | None:
        if index not in self._outcomes:
            token = None
            if line.name:
                token = find_function_declaration(self._cursor, line.name)
            self._outcomes[index] = token
        return self._outcomes[index]


def resolve_class_methods(
    project: Project,
    class_element: CodeElement,
    coverage: ClassCoverage,
    method_lines: list[LineHit],
    scanner: DeclarationScanner,
    added_for_file: int,
    logger: structlog.stdlib.BoundLogger | None = None,
) -> tuple[MethodResolution, int]:
    """Emit method coverage for one class and correct its method counters.

    Args:
        added_for_file: Methods already emitted for earlier classes of the
            same file. Lexical matches below this ordinal belong to those
            classes and are skipped.

    Returns:
        The class resolution and the updated ``added_for_file``.
    """
    log = logger or get_logger(__name__)
    class_name = class_element.name
    short_name = class_name.rsplit("\\", 1)[-1].lower()
    resolution = MethodResolution(
        class_name=class_name,
        methods=coverage.declared_methods,
        covered_methods=coverage.declared_covered_methods,
    )
    added_at_start = added_for_file
    matched = -1
    added_for_class = 0

    for index, line in enumerate(method_lines):
        token = scanner.match(index, line)

        if token is None:
            # Still inside methods owned by an earlier class of this file;
            # that class already accounted for this entry.
            if added_at_start > 0 and matched < added_at_start:
                continue
            resolution.methods -= 1
            if (line.hit_count or 0) > 0:
                resolution.covered_methods -= 1
            resolution.spurious += 1
            log.debug(
                "clover_method_discarded",
                class_name=class_name,
                method=line.name,
                line=line.line_number,
            )
            continue

        matched += 1
        if matched < added_for_file:
            continue

        # Another class's declaration is never emitted here; after this
        # class's own methods it ends the walk.
        if token.owner is not None and token.owner.lower() != short_name:
            if added_for_class:
                break
            continue

        if added_for_class >= coverage.declared_methods:
            break

        method_name = f"{class_name}::{line.name}"
        method = project.get_or_create_code_element(ELEMENT_OPERATION, method_name)
        class_element.add_child(method)
        crap = line.crap or 0
        count = line.hit_count or 0
        method.set_metric(metric_name(METHOD_CRAP_METRIC), crap)
        method.set_metric(metric_name(METHOD_COUNT_METRIC), count)
        resolution.emitted.append(
            MethodCoverage(name=method_name, change_risk_anti_pattern=crap, count=count)
        )
        added_for_class += 1
        added_for_file += 1

    class_element.set_metric(metric_name(METHODS_METRIC), resolution.methods)
    class_element.set_metric(metric_name(COVERED_METHODS_METRIC), resolution.covered_methods)
    return resolution, added_for_file


def resolve_file(
    project: Project,
    package_element: CodeElement,
    package_name: str,
    report_file: ReportFile,
    project_file: ProjectFile,
    logger: structlog.stdlib.BoundLogger | None = None,
) -> FileResolution:
    """Aggregate class metrics and resolve methods for every class of a file.

    A class with malformed metrics is logged, recorded, and skipped; the
    remaining classes of the file are still resolved.
    """
    log = logger or get_logger(__name__)
    result = FileResolution(path=project_file.path)
    if not report_file.classes:
        return result

    scanner = DeclarationScanner(project_file.content)
    method_lines = report_file.method_lines
    added_for_file = 0

    for report_class in report_file.classes:
        class_name = f"{package_name}\\{report_class.name}"
        try:
            if report_class.metrics is None:
                raise MalformedReportError.missing_attribute(
                    f"class '{report_class.name}' in {report_file.name}", "metrics"
                )
            coverage = read_class_coverage(class_name, report_class.metrics)
        except MalformedReportError as e:
            log.warning(
                "clover_class_malformed",
                class_name=class_name,
                path=project_file.path,
                error=e.message,
            )
            result.malformed.append(e)
            continue

        class_element = project.get_or_create_code_element(ELEMENT_CLASS, class_name)
        package_element.add_child(class_element)
        class_element.set_location(project_file.path)
        store_class_metrics(class_element, coverage)

        resolution, added_for_file = resolve_class_methods(
            project,
            class_element,
            coverage,
            method_lines,
            scanner,
            added_for_file,
            logger=log,
        )
        result.classes.append(resolution)
        log.debug(
            "clover_class_resolved",
            class_name=class_name,
            methods=resolution.methods,
            covered_methods=resolution.covered_methods,
            emitted=len(resolution.emitted),
        )

    result.added_methods = added_for_file
    return result
