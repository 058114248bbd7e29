"""Project- and class-level coverage metrics."""

from __future__ import annotations

from dataclasses import dataclass

from cloverlens.config.constants import (
    CLASS_COVERAGE_METRIC,
    CLASS_METRICS,
    PROJECT_METRICS,
    metric_name,
)
from cloverlens.coverage.report import ReportMetrics
from cloverlens.model import CodeElement, Project


@dataclass(frozen=True, slots=True)
class ClassCoverage:
    """Class metrics as reported, before method resolution corrects them."""

    name: str
    declared_methods: int
    declared_covered_methods: int
    conditionals: int
    covered_conditionals: int
    statements: int
    covered_statements: int
    elements: int
    covered_elements: int
    coverage: float


def coverage_ratio(covered: int, total: int) -> float:
    """Covered fraction in [0, 1]; classes without statements count as fully covered."""
    if total <= 0:
        return 1.0
    return min(1.0, max(0.0, covered / total))


def store_project_metrics(project: Project, metrics: ReportMetrics) -> dict[str, int]:
    """Store the twelve project counters. Later calls overwrite earlier ones.

    Raises:
        MalformedReportError: A counter is missing or not numeric. Nothing is
            written in that case.
    """
    values = metrics.require(*PROJECT_METRICS)
    stored: dict[str, int] = {}
    for attribute, name in PROJECT_METRICS.items():
        full_name = metric_name(name)
        project.set_simple_valued_metric(full_name, values[attribute])
        stored[full_name] = values[attribute]
    return stored


def read_class_coverage(name: str, metrics: ReportMetrics) -> ClassCoverage:
    """Read a class's <metrics> counters and derive its coverage ratio.

    Raises:
        MalformedReportError: A required counter is missing or not numeric.
    """
    values = metrics.require("methods", "coveredmethods", *CLASS_METRICS)
    return ClassCoverage(
        name=name,
        declared_methods=values["methods"],
        declared_covered_methods=values["coveredmethods"],
        conditionals=values["conditionals"],
        covered_conditionals=values["coveredconditionals"],
        statements=values["statements"],
        covered_statements=values["coveredstatements"],
        elements=values["elements"],
        covered_elements=values["coveredelements"],
        coverage=coverage_ratio(values["coveredstatements"], values["statements"]),
    )


def store_class_metrics(element: CodeElement, coverage: ClassCoverage) -> None:
    """Store statement/conditional/element counters and the coverage ratio.

    Method counters are not stored here; method resolution writes them once
    closures have been filtered out.
    """
    element.set_metric(metric_name("conditionals"), coverage.conditionals)
    element.set_metric(metric_name("covered_conditionals"), coverage.covered_conditionals)
    element.set_metric(metric_name("statements"), coverage.statements)
    element.set_metric(metric_name("covered_statements"), coverage.covered_statements)
    element.set_metric(metric_name("elements"), coverage.elements)
    element.set_metric(metric_name("covered_elements"), coverage.covered_elements)
    element.set_metric(metric_name(CLASS_COVERAGE_METRIC), coverage.coverage)
