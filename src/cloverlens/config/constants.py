"""Configuration constants.

Values here are fixed by the Clover format and by the metric names consumers
of the code model rely on. They are not user-configurable.
"""

ANALYZER_NAME = "php_code_coverage"
"""Analyzer name, also the prefix of every metric it writes."""

METRIC_PREFIX = f"{ANALYZER_NAME}."

LINE_ATTRIBUTE = "coverage_count"
"""Line attribute holding the hit count of a source line."""

# =============================================================================
# Code element kinds
# =============================================================================

ELEMENT_PACKAGE = "package"
ELEMENT_CLASS = "class"
ELEMENT_OPERATION = "operation"

# =============================================================================
# Metric names
# =============================================================================
# Clover <project><metrics> attribute -> stored project metric

PROJECT_METRICS: dict[str, str] = {
    "files": "files",
    "loc": "lines_of_code",
    "ncloc": "non_comment_lines_of_code",
    "classes": "classes",
    "methods": "methods",
    "coveredmethods": "covered_methods",
    "conditionals": "conditionals",
    "coveredconditionals": "covered_conditionals",
    "statements": "statements",
    "coveredstatements": "covered_statements",
    "elements": "elements",
    "coveredelements": "covered_elements",
}

# Clover <class><metrics> attribute -> stored class metric
CLASS_METRICS: dict[str, str] = {
    "conditionals": "conditionals",
    "coveredconditionals": "covered_conditionals",
    "statements": "statements",
    "coveredstatements": "covered_statements",
    "elements": "elements",
    "coveredelements": "covered_elements",
}

CLASS_COVERAGE_METRIC = "coverage"
METHODS_METRIC = "methods"
COVERED_METHODS_METRIC = "covered_methods"
METHOD_CRAP_METRIC = "change_risk_anti_pattern"
METHOD_COUNT_METRIC = "count"

# =============================================================================
# Test run defaults
# =============================================================================

DEFAULT_RUN_TIMEOUT_SEC = 1800.0
DEFAULT_IDLE_TIMEOUT_SEC = 300.0

REPO_CONFIG_NAME = ".cloverlens.yaml"


def metric_name(name: str) -> str:
    """Return the fully prefixed metric name, e.g. 'php_code_coverage.methods'."""
    return f"{METRIC_PREFIX}{name}"
