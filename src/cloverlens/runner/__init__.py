"""External process collaborators: test command runner and PHP driver check."""

from cloverlens.runner.environment import ensure_coverage_driver, loaded_extensions
from cloverlens.runner.process import ProcessResult, run_command, run_command_async

__all__ = [
    "ProcessResult",
    "ensure_coverage_driver",
    "loaded_extensions",
    "run_command",
    "run_command_async",
]
