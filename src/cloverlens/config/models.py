"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config()
2. Environment variables (CLOVERLENS__SECTION__KEY)
3. Repo YAML (.cloverlens.yaml)
4. Global YAML (~/.config/cloverlens/config.yaml)
5. Built-in defaults (this file)

Examples:
    CLOVERLENS__LOGGING__LEVEL=DEBUG
    CLOVERLENS__COVERAGE__TEST_COMMAND="vendor/bin/phpunit"
    CLOVERLENS__TIMEOUTS__IDLE_SEC=600
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from cloverlens.config.constants import DEFAULT_IDLE_TIMEOUT_SEC, DEFAULT_RUN_TIMEOUT_SEC

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class LogOutputConfig(BaseModel):
    """Single logging output configuration."""

    format: Literal["json", "console"] = "console"
    destination: str = "stderr"  # stderr, stdout, or absolute file path
    level: LogLevel | None = None  # Inherits from parent if None

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, v: str) -> str:
        if v in ("stderr", "stdout"):
            return v
        path = Path(v).expanduser()
        if not path.is_absolute():
            raise ValueError(f"File destination must be absolute path: {v}")
        return str(path)


class LoggingConfig(BaseModel):
    """Logging configuration.

    Env vars:
        CLOVERLENS__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="INFO",
        description="Root log level. INFO includes every line of test runner output.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class CoverageConfig(BaseModel):
    """PHP code coverage settings.

    Env vars:
        CLOVERLENS__COVERAGE__TEST_COMMAND: Command that runs the test suite
        CLOVERLENS__COVERAGE__CONFIG_PATH: PHPUnit configuration file
        CLOVERLENS__COVERAGE__PHP_BINARY: PHP interpreter used for the driver check
    """

    test_command: str = Field(
        default="phpunit",
        description="Test command. '--coverage-clover <file>' is appended to it.",
    )
    config_path: str | None = Field(
        default=None,
        description="PHPUnit configuration file, passed as --configuration when set.",
    )
    only_changesets: bool = Field(
        default=False,
        description="(deprecated) Whether coverage should only be generated for changesets. "
        "Ignored.",
    )
    php_binary: str = Field(
        default="php",
        description="PHP interpreter queried with 'php -m' for a loaded coverage driver.",
    )
    drivers: list[str] = Field(
        default_factory=lambda: ["xdebug"],
        description="Extensions accepted as coverage drivers. One must be loaded.",
    )

    @field_validator("test_command")
    @classmethod
    def validate_test_command(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("test_command must not be empty")
        return v.strip()

    @field_validator("drivers")
    @classmethod
    def validate_drivers(cls, v: list[str]) -> list[str]:
        drivers = [d.strip().lower() for d in v if d.strip()]
        if not drivers:
            raise ValueError("At least one coverage driver must be listed")
        return drivers


class TimeoutsConfig(BaseModel):
    """Timeouts for the external test run.

    Env vars:
        CLOVERLENS__TIMEOUTS__RUN_SEC: Overall limit for the test command
        CLOVERLENS__TIMEOUTS__IDLE_SEC: Limit on time without any output
    """

    run_sec: float = Field(
        default=DEFAULT_RUN_TIMEOUT_SEC,
        description="Overall test run timeout (30 min default).",
    )
    idle_sec: float = Field(
        default=DEFAULT_IDLE_TIMEOUT_SEC,
        description="Fail the run when the command is silent this long (5 min default).",
    )

    @field_validator("run_sec", "idle_sec")
    @classmethod
    def validate_positive(cls, v: float) -> float:
        if v <= 0:
            raise ValueError(f"Timeout must be positive, got {v}")
        return v


class CloverLensConfig(BaseModel):
    """Root configuration for CloverLens."""

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    coverage: CoverageConfig = Field(default_factory=CoverageConfig)
    timeouts: TimeoutsConfig = Field(default_factory=TimeoutsConfig)
