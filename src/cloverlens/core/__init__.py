"""Core module exports."""

from cloverlens.core.errors import (
    CloverLensError,
    ConfigError,
    EnvironmentUnavailableError,
    ErrorCode,
    MalformedReportError,
    ProcessFailedError,
)
from cloverlens.core.logging import (
    configure_logging,
    get_logger,
    get_run_id,
    set_run_id,
)
from cloverlens.core.progress import status, task

__all__ = [
    # Errors
    "CloverLensError",
    "ConfigError",
    "EnvironmentUnavailableError",
    "ErrorCode",
    "MalformedReportError",
    "ProcessFailedError",
    # Logging
    "configure_logging",
    "get_logger",
    "get_run_id",
    "set_run_id",
    # Progress
    "status",
    "task",
]
