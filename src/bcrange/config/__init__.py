"""Config module exports."""

from bcrange.config.loader import load_config
from bcrange.config.models import (
    AnalysisConfig,
    BcRangeConfig,
    LoggingConfig,
    ScanConfig,
)

__all__ = [
    "load_config",
    "AnalysisConfig",
    "BcRangeConfig",
    "LoggingConfig",
    "ScanConfig",
]
