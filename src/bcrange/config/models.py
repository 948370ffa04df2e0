"""Configuration sections.

Every field can be set from YAML or from the environment as
BCRANGE__<SECTION>__<KEY>, e.g. BCRANGE__SCAN__MAX_WORKERS=4. See loader.py
for how the layers combine.
"""

import codecs
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

DEFAULT_EXCLUDE_PATTERNS = [
    "**/node_modules/**",
    "**/.altestrunner/**",
    "**/.alpackages/**",
]


class LogOutputConfig(BaseModel):
    """One log sink: a stream or an absolute file path."""

    format: Literal["json", "console"] = "console"
    destination: str = "stderr"
    level: LogLevel | None = None  # None: use LoggingConfig.level

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, v: str) -> str:
        if v in ("stderr", "stdout"):
            return v
        path = Path(v).expanduser()
        if not path.is_absolute():
            raise ValueError(f"log file must be an absolute path, got {v!r}")
        return str(path)


class LoggingConfig(BaseModel):
    """Logging configuration.

    Env vars:
        BCRANGE__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="WARNING",
        description="Root log level. INFO logs one line per project, DEBUG every scanned file.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class ScanConfig(BaseModel):
    """Workspace scanning configuration.

    Env vars:
        BCRANGE__SCAN__MAX_WORKERS: Parallel source file readers
        BCRANGE__SCAN__ENCODING: Source file encoding
    """

    manifest_name: str = Field(
        default="app.json",
        description="File name that marks a project root.",
    )
    source_suffix: str = Field(
        default=".al",
        description="Suffix of source files scanned for declarations.",
    )
    exclude_patterns: list[str] = Field(
        default_factory=lambda: list(DEFAULT_EXCLUDE_PATTERNS),
        description="Glob patterns (with ** support) matched case-insensitively "
        "against the forward-slash path relative to the workspace root.",
    )
    exclude_folders: list[str] = Field(
        default_factory=list,
        description="Folder names excluded wherever they appear in a path (case-insensitive).",
    )
    max_workers: int = Field(
        default=8,
        description="Parallel source file readers. Scanning is I/O-bound.",
    )
    encoding: str = Field(
        default="utf-8",
        description="Encoding used to decode source files. Undecodable bytes are replaced.",
    )

    @field_validator("max_workers")
    @classmethod
    def validate_max_workers(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"max_workers must be >= 1, got {v}")
        return v

    @field_validator("encoding")
    @classmethod
    def validate_encoding(cls, v: str) -> str:
        try:
            codecs.lookup(v)
        except LookupError as e:
            raise ValueError(f"unknown encoding {v!r}") from e
        return v

    @field_validator("source_suffix")
    @classmethod
    def validate_source_suffix(cls, v: str) -> str:
        if not v.startswith("."):
            raise ValueError(f"source_suffix must start with '.', got {v!r}")
        return v.lower()


class AnalysisConfig(BaseModel):
    """Range and conflict analysis configuration.

    Env vars:
        BCRANGE__ANALYSIS__SHARED_RANGE_MODE: Merge ranges of all projects
    """

    shared_range_mode: bool = Field(
        default=False,
        description="Treat the ranges of all projects as one shared id space. "
        "Enables per-kind shared gaps and cross-project conflict detection.",
    )


class BcRangeConfig(BaseModel):
    """Resolved configuration for one workspace."""

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    scan: ScanConfig = Field(default_factory=ScanConfig)
    analysis: AnalysisConfig = Field(default_factory=AnalysisConfig)
