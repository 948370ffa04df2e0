"""Workspace discovery: manifests, source files and project records.

A project is a directory holding a manifest (``app.json``). Its sources are
the ``.al`` files below it, except those under a nested project or an
excluded path. Source files are read and scanned in parallel; results are
reassembled in path order so the output is deterministic.
"""

from __future__ import annotations

import os
from collections.abc import Iterator
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from bcrange.analysis.models import Project
from bcrange.config.models import ScanConfig
from bcrange.core.errors import ManifestError, WorkspaceError
from bcrange.core.logging import get_logger
from bcrange.parsing.models import Declaration
from bcrange.parsing.scanner import scan
from bcrange.workspace.excludes import PRUNED_DIRS, ExclusionRules
from bcrange.workspace.manifest import load_manifest

log = get_logger("workspace")


def _declaration_sort_key(decl: Declaration) -> tuple[str, int]:
    return (decl.kind.value, decl.id)


class WorkspaceScanner:
    """Finds projects below a workspace root and scans their sources."""

    def __init__(self, root: Path, config: ScanConfig | None = None) -> None:
        if not root.is_dir():
            raise WorkspaceError.not_found(str(root))
        self.root = root.resolve()
        self.config = config or ScanConfig()
        self._rules = ExclusionRules(self.config.exclude_patterns, self.config.exclude_folders)

    def _relative(self, path: Path) -> str:
        """Forward-slash path relative to the workspace root; rules match against this."""
        if not path.is_relative_to(self.root):
            return path.as_posix()
        return path.relative_to(self.root).as_posix()

    def _walk(self, top: Path, *, skip_nested_projects: bool) -> Iterator[tuple[Path, list[str]]]:
        """Yield (directory, sorted file names), pruning excluded directories."""
        for dirpath, dirnames, filenames in os.walk(top):
            current = Path(dirpath)
            kept: list[str] = []
            for name in sorted(dirnames):
                if name in PRUNED_DIRS:
                    continue
                sub = current / name
                if self._rules.is_excluded_dir(self._relative(sub)):
                    continue
                if skip_nested_projects and (sub / self.config.manifest_name).is_file():
                    continue
                kept.append(name)
            dirnames[:] = kept
            yield current, sorted(filenames)

    def find_manifests(self) -> list[Path]:
        """All manifest files below the root that are not excluded."""
        manifests: list[Path] = []
        for directory, filenames in self._walk(self.root, skip_nested_projects=False):
            if self.config.manifest_name not in filenames:
                continue
            path = directory / self.config.manifest_name
            if self._rules.is_excluded(self._relative(path)):
                log.debug("manifest_excluded", path=str(path))
                continue
            manifests.append(path)
        return sorted(manifests)

    def find_sources(self, project_root: Path) -> list[Path]:
        """Source files owned by the project rooted at project_root."""
        suffix = self.config.source_suffix
        sources: list[Path] = []
        for directory, filenames in self._walk(project_root, skip_nested_projects=True):
            for name in filenames:
                if not name.lower().endswith(suffix):
                    continue
                path = directory / name
                if self._rules.is_excluded(self._relative(path)):
                    continue
                sources.append(path)
        return sorted(sources)

    def read_source(self, path: Path) -> list[Declaration]:
        """Read and scan one source file.

        Raises:
            WorkspaceError: If the file cannot be read.
        """
        try:
            text = path.read_text(encoding=self.config.encoding, errors="replace")
        except OSError as e:
            raise WorkspaceError.unreadable(str(path), str(e)) from e
        declarations = scan(text, str(path))
        log.debug("source_scanned", path=str(path), declarations=len(declarations))
        return declarations

    def scan_sources(self, paths: list[Path]) -> list[Declaration]:
        """Scan files in parallel. Unreadable files are logged and skipped."""
        if not paths:
            return []
        declarations: list[Declaration] = []
        workers = min(self.config.max_workers, len(paths))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="bcrange-scan") as pool:
            futures = [pool.submit(self.read_source, path) for path in paths]
            for future in futures:
                try:
                    declarations.extend(future.result())
                except WorkspaceError as e:
                    log.warning("source_skipped", **e.log_fields())
        return declarations

    def scan_project(self, manifest_path: Path) -> Project | None:
        """Build the project record for one manifest, or None if it is invalid."""
        try:
            manifest = load_manifest(manifest_path)
        except ManifestError as e:
            log.warning("project_skipped", **e.log_fields())
            return None

        project_root = manifest_path.parent
        sources = self.find_sources(project_root)
        declarations = sorted(self.scan_sources(sources), key=_declaration_sort_key)
        log.info(
            "project_scanned",
            project=manifest.name,
            files=len(sources),
            declarations=len(declarations),
            ranges=len(manifest.id_ranges),
        )
        return Project(
            name=manifest.name,
            id_ranges=manifest.id_ranges,
            declarations=tuple(declarations),
            root=project_root,
        )

    def scan(self) -> list[Project]:
        """Scan every valid project below the root, sorted by name."""
        projects: list[Project] = []
        for manifest_path in self.find_manifests():
            project = self.scan_project(manifest_path)
            if project is not None:
                projects.append(project)
        projects.sort(key=lambda p: p.name.lower())
        return projects
