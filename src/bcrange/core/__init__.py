"""Core module exports."""

from bcrange.core.errors import (
    BcRangeError,
    ConfigError,
    ErrorCode,
    ManifestError,
    WorkspaceError,
)
from bcrange.core.logging import (
    analysis_pass,
    configure_logging,
    get_logger,
    get_pass_id,
)

__all__ = [
    # Errors
    "BcRangeError",
    "ConfigError",
    "ErrorCode",
    "ManifestError",
    "WorkspaceError",
    # Logging
    "analysis_pass",
    "configure_logging",
    "get_logger",
    "get_pass_id",
]
