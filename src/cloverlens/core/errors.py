"""CloverLens error types with typed error codes.

Error code ranges:
- 2xxx: Config
- 3xxx: Environment
- 4xxx: Process
- 5xxx: Report
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any

# Cap on captured test output carried inside error details
_OUTPUT_TAIL_CHARS = 4000


class ErrorCode(IntEnum):
    """Typed error codes for programmatic handling."""

    # Config (2xxx)
    CONFIG_PARSE_ERROR = 2001
    CONFIG_INVALID_VALUE = 2002
    CONFIG_FILE_NOT_FOUND = 2004

    # Environment (3xxx)
    COVERAGE_DRIVER_MISSING = 3001
    PHP_BINARY_MISSING = 3002

    # Process (4xxx)
    PROCESS_FAILED = 4001
    PROCESS_TIMEOUT = 4002
    PROCESS_IDLE_TIMEOUT = 4003

    # Report (5xxx)
    REPORT_PARSE_ERROR = 5001
    REPORT_MISSING_ATTRIBUTE = 5002
    REPORT_PATH_OUTSIDE_ROOT = 5003


# Must stay mutable and unslotted: raising assigns __traceback__ on the instance.
@dataclass(eq=False)
class CloverLensError(Exception):
    """Base error with structured context for CLI and JSON output."""

    code: ErrorCode
    message: str
    retryable: bool = False
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def error_name(self) -> str:
        """String identifier for logging (e.g., 'REPORT_PARSE_ERROR')."""
        return self.code.name

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON responses."""
        return {
            "code": self.code.value,
            "error": self.error_name,
            "message": self.message,
            "retryable": self.retryable,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.error_name}: {self.message}"


class ConfigError(CloverLensError):
    """Configuration-related errors."""

    @classmethod
    def parse_error(cls, path: str, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message=f"Failed to parse config at {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def invalid_value(cls, field: str, value: Any, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_INVALID_VALUE,
            message=f"Invalid value for '{field}': {reason}",
            details={"field": field, "value": str(value), "reason": reason},
        )

    @classmethod
    def file_not_found(cls, path: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_FILE_NOT_FOUND,
            message=f"Config file not found: {path}",
            details={"path": path},
        )


class EnvironmentUnavailableError(CloverLensError):
    """A capability required to capture coverage is not available."""

    @classmethod
    def driver_missing(cls, drivers: list[str], php_binary: str) -> "EnvironmentUnavailableError":
        names = " or ".join(drivers)
        return cls(
            code=ErrorCode.COVERAGE_DRIVER_MISSING,
            message=f"The {names} extension must be loaded for generating code coverage.",
            details={"drivers": list(drivers), "php_binary": php_binary},
        )

    @classmethod
    def php_missing(cls, php_binary: str, reason: str) -> "EnvironmentUnavailableError":
        return cls(
            code=ErrorCode.PHP_BINARY_MISSING,
            message=f"Cannot run '{php_binary}': {reason}",
            details={"php_binary": php_binary, "reason": reason},
        )


class ProcessFailedError(CloverLensError):
    """The external test run failed or could not complete."""

    @property
    def exit_code(self) -> int | None:
        return self.details.get("exit_code")

    @property
    def output(self) -> str:
        return self.details.get("output", "")

    @classmethod
    def failed(cls, command: str, exit_code: int | None, output: str) -> "ProcessFailedError":
        return cls(
            code=ErrorCode.PROCESS_FAILED,
            message=f'The command "{command}" failed with exit code {exit_code}.',
            details={
                "command": command,
                "exit_code": exit_code,
                "output": output[-_OUTPUT_TAIL_CHARS:],
            },
        )

    @classmethod
    def could_not_start(cls, command: str, reason: str) -> "ProcessFailedError":
        return cls(
            code=ErrorCode.PROCESS_FAILED,
            message=f'The command "{command}" could not be started: {reason}',
            details={"command": command, "exit_code": None, "reason": reason},
        )

    @classmethod
    def timed_out(cls, command: str, timeout_sec: float, output: str) -> "ProcessFailedError":
        return cls(
            code=ErrorCode.PROCESS_TIMEOUT,
            message=f'The command "{command}" exceeded the timeout of {timeout_sec:g} seconds.',
            details={
                "command": command,
                "exit_code": None,
                "timeout_sec": timeout_sec,
                "output": output[-_OUTPUT_TAIL_CHARS:],
            },
        )

    @classmethod
    def idle_timed_out(
        cls, command: str, idle_timeout_sec: float, output: str
    ) -> "ProcessFailedError":
        return cls(
            code=ErrorCode.PROCESS_IDLE_TIMEOUT,
            message=(
                f'The command "{command}" produced no output for {idle_timeout_sec:g} seconds.'
            ),
            details={
                "command": command,
                "exit_code": None,
                "idle_timeout_sec": idle_timeout_sec,
                "output": output[-_OUTPUT_TAIL_CHARS:],
            },
        )


class MalformedReportError(CloverLensError):
    """The coverage report, or one of its fragments, has an unexpected shape."""

    @classmethod
    def parse_error(cls, reason: str) -> "MalformedReportError":
        return cls(
            code=ErrorCode.REPORT_PARSE_ERROR,
            message=f"Invalid Clover XML: {reason}",
            details={"reason": reason},
        )

    @classmethod
    def missing_attribute(cls, fragment: str, attribute: str) -> "MalformedReportError":
        return cls(
            code=ErrorCode.REPORT_MISSING_ATTRIBUTE,
            message=f"Missing or non-integer attribute '{attribute}' on {fragment}",
            details={"fragment": fragment, "attribute": attribute},
        )

    @classmethod
    def path_outside_root(cls, path: str, root: str) -> "MalformedReportError":
        return cls(
            code=ErrorCode.REPORT_PATH_OUTSIDE_ROOT,
            message=f"Report path '{path}' is not inside project root '{root}'",
            details={"path": path, "root": root},
        )

