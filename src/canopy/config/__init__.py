"""Config module exports."""

from canopy.config.loader import load_config
from canopy.config.models import (
    AnalysisConfig,
    CanopyConfig,
    CoverageConfig,
    LoggingConfig,
    LogOutputConfig,
    OutputConfig,
)

__all__ = [
    "load_config",
    "AnalysisConfig",
    "CanopyConfig",
    "CoverageConfig",
    "LoggingConfig",
    "LogOutputConfig",
    "OutputConfig",
]
