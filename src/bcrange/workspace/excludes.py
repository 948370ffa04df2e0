"""Path exclusion rules for workspace discovery.

Tiered Architecture:
- PRUNED_DIRS: Never traversed, not user-configurable (VCS internals, .bcrange)
- exclude_patterns: Globs matched case-insensitively against the forward-slash
  path relative to the workspace root (default: node_modules, .altestrunner,
  .alpackages)
- exclude_folders: Folder names excluded wherever they occur in a path
"""

from __future__ import annotations

import fnmatch
from collections.abc import Iterable
from pathlib import Path

PRUNED_DIRS: frozenset[str] = frozenset(
    (
        # VCS internals
        ".git",
        ".svn",
        ".hg",
        # bcrange data
        ".bcrange",
    )
)


def normalize_path(path: str | Path) -> str:
    """Forward slashes, lower case."""
    return str(path).replace("\\", "/").lower()


def matches_glob(path: str, pattern: str) -> bool:
    """Check if a normalized path matches a glob pattern, with ** support."""
    pattern = normalize_path(pattern)
    if fnmatch.fnmatchcase(path, pattern):
        return True
    # Handle **/pattern for any-depth matching, including at the path root
    if pattern.startswith("**/"):
        return fnmatch.fnmatchcase(path, pattern[3:])
    return False


class ExclusionRules:
    """Decides whether a path is excluded from discovery.

    Directories should be checked with a trailing slash so that patterns
    like ``**/node_modules/**`` match the directory itself.
    """

    def __init__(
        self,
        patterns: Iterable[str] = (),
        folders: Iterable[str] = (),
    ) -> None:
        self._patterns = [p for p in patterns if p]
        self._folders = frozenset(f.lower() for f in folders if f)

    def is_excluded(self, path: str | Path) -> bool:
        normalized = normalize_path(path)
        if self._folders:
            segments = (s for s in normalized.split("/") if s)
            if any(segment in self._folders for segment in segments):
                return True
        return any(matches_glob(normalized, pattern) for pattern in self._patterns)

    def is_excluded_dir(self, path: str | Path) -> bool:
        return self.is_excluded(f"{normalize_path(path).rstrip('/')}/")
