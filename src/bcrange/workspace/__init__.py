"""Workspace module - manifests, exclusion rules and project discovery."""

from bcrange.workspace.discovery import WorkspaceScanner
from bcrange.workspace.excludes import ExclusionRules, matches_glob
from bcrange.workspace.manifest import (
    Manifest,
    load_manifest,
    parse_manifest,
    validate_manifest,
)

__all__ = [
    "ExclusionRules",
    "Manifest",
    "WorkspaceScanner",
    "load_manifest",
    "matches_glob",
    "parse_manifest",
    "validate_manifest",
]
