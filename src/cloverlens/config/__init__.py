"""Config module exports."""

from cloverlens.config.loader import load_config
from cloverlens.config.models import (
    CloverLensConfig,
    CoverageConfig,
    LoggingConfig,
    TimeoutsConfig,
)

__all__ = [
    "load_config",
    "CloverLensConfig",
    "CoverageConfig",
    "LoggingConfig",
    "TimeoutsConfig",
]
