"""Error types for config, manifest and workspace failures.

Codes are grouped by the thousand:
- 2xxx: Config
- 3xxx: Manifest
- 4xxx: Workspace

Almost every failure is about one file, so the offending path and a short
reason are first-class fields. Anything else goes in ``details``.
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any

_CATEGORIES = {2: "config", 3: "manifest", 4: "workspace"}


class ErrorCode(IntEnum):
    CONFIG_PARSE_ERROR = 2001
    CONFIG_INVALID_VALUE = 2002

    MANIFEST_PARSE_ERROR = 3001
    MANIFEST_INVALID = 3002

    WORKSPACE_NOT_FOUND = 4001
    WORKSPACE_UNREADABLE = 4002

    @property
    def category(self) -> str:
        return _CATEGORIES[self.value // 1000]


@dataclass(frozen=True, slots=True)
class BcRangeError(Exception):
    """Base error. Raised by loaders; the CLI turns it into a usage message."""

    code: ErrorCode
    message: str
    path: str | None = None
    reason: str | None = None
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def error_name(self) -> str:
        return self.code.name

    def log_fields(self) -> dict[str, Any]:
        """Keyword arguments for a structlog event describing this error."""
        fields: dict[str, Any] = {"error": self.error_name, "path": self.path}
        if self.reason is not None:
            fields["reason"] = self.reason
        return fields

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code.value,
            "error": self.error_name,
            "category": self.code.category,
            "message": self.message,
            "path": self.path,
            "reason": self.reason,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.message}"


class ConfigError(BcRangeError):
    """Bad YAML or a value the config models reject."""

    @classmethod
    def parse_error(cls, path: str, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message=f"Cannot parse config file {path}: {reason}",
            path=path,
            reason=reason,
        )

    @classmethod
    def invalid_value(cls, setting: str, value: Any, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_INVALID_VALUE,
            message=f"Bad value for setting '{setting}': {reason}",
            reason=reason,
            details={"setting": setting, "value": str(value)},
        )


class ManifestError(BcRangeError):
    """An app.json that cannot be read, decoded or validated."""

    @classmethod
    def parse_error(cls, path: str, reason: str) -> "ManifestError":
        return cls(
            code=ErrorCode.MANIFEST_PARSE_ERROR,
            message=f"{path} is not a readable JSON manifest: {reason}",
            path=path,
            reason=reason,
        )

    @classmethod
    def invalid(cls, path: str, field: str, reason: str) -> "ManifestError":
        return cls(
            code=ErrorCode.MANIFEST_INVALID,
            message=f"{path}: '{field}' {reason}",
            path=path,
            reason=reason,
            details={"field": field},
        )


class WorkspaceError(BcRangeError):
    @classmethod
    def not_found(cls, path: str) -> "WorkspaceError":
        return cls(
            code=ErrorCode.WORKSPACE_NOT_FOUND,
            message=f"No workspace directory at {path}",
            path=path,
        )

    @classmethod
    def unreadable(cls, path: str, reason: str) -> "WorkspaceError":
        return cls(
            code=ErrorCode.WORKSPACE_UNREADABLE,
            message=f"Cannot read source file {path}: {reason}",
            path=path,
            reason=reason,
        )
