"""Clover coverage correlation.

Usage:
    from cloverlens.coverage import CodeCoverageAnalyzer
    from cloverlens.model import Project

    project = Project("/path/to/php-project")
    summary = CodeCoverageAnalyzer().process_clover(project, Path("clover.xml").read_bytes())
"""

from cloverlens.coverage.analyzer import AnalysisSummary, CodeCoverageAnalyzer
from cloverlens.coverage.annotate import annotate_file
from cloverlens.coverage.methods import (
    DeclarationScanner,
    FileResolution,
    MethodCoverage,
    MethodResolution,
    resolve_class_methods,
    resolve_file,
)
from cloverlens.coverage.metrics import (
    ClassCoverage,
    coverage_ratio,
    read_class_coverage,
    store_class_metrics,
    store_project_metrics,
)
from cloverlens.coverage.paths import relative_path
from cloverlens.coverage.report import (
    CoverageReport,
    LineHit,
    LineKind,
    ReportClass,
    ReportFile,
    ReportMetrics,
    ReportPackage,
    parse_report,
)
from cloverlens.coverage.tokens import (
    Token,
    TokenCursor,
    TokenKind,
    find_function_declaration,
    tokenize,
)

__all__ = [
    # Analyzer
    "AnalysisSummary",
    "CodeCoverageAnalyzer",
    # Report
    "CoverageReport",
    "LineHit",
    "LineKind",
    "ReportClass",
    "ReportFile",
    "ReportMetrics",
    "ReportPackage",
    "parse_report",
    # Paths / lines
    "annotate_file",
    "relative_path",
    # Metrics
    "ClassCoverage",
    "coverage_ratio",
    "read_class_coverage",
    "store_class_metrics",
    "store_project_metrics",
    # Methods
    "DeclarationScanner",
    "FileResolution",
    "MethodCoverage",
    "MethodResolution",
    "resolve_class_methods",
    "resolve_file",
    # Tokens
    "Token",
    "TokenCursor",
    "TokenKind",
    "find_function_declaration",
    "tokenize",
]
