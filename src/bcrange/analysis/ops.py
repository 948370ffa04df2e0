"""Range analysis operations over project records."""

from __future__ import annotations

import time
from collections.abc import Sequence

from bcrange.analysis.conflicts import (
    find_conflicts,
    find_field_conflicts,
    find_value_conflicts,
)
from bcrange.analysis.models import Gap, IdRange, Project, WorkspaceAnalysis
from bcrange.analysis.ranges import find_gaps, merge_ranges, next_available
from bcrange.core.logging import analysis_pass, get_logger
from bcrange.parsing.kinds import ALL_KINDS, DeclarationKind
from bcrange.parsing.models import Declaration

log = get_logger("analysis")


class RangeAnalyzer:
    """Computes gaps, shared ranges and conflicts for a set of projects.

    Holds no state between calls; construct one wherever it is needed.
    """

    def project_gaps(self, project: Project) -> list[Gap]:
        """Unused ids in a project's own ranges (ids of every kind count as used)."""
        return find_gaps(project.id_ranges, project.used_ids)

    def next_available_id(self, project: Project) -> int | None:
        return next_available(project.id_ranges, project.used_ids)

    def shared_ranges(self, projects: Sequence[Project]) -> list[IdRange]:
        """Union of every project's ranges, merged."""
        return merge_ranges(r for project in projects for r in project.id_ranges)

    def _used_ids_for_kind(self, projects: Sequence[Project], kind: DeclarationKind) -> set[int]:
        return {
            decl.id for project in projects for decl in project.declarations if decl.kind is kind
        }

    def shared_gaps(self, projects: Sequence[Project], kind: DeclarationKind) -> list[Gap]:
        """Unused ids of one kind across the merged ranges of all projects."""
        return find_gaps(self.shared_ranges(projects), self._used_ids_for_kind(projects, kind))

    def next_available_id_for_kind(
        self, projects: Sequence[Project], kind: DeclarationKind
    ) -> int | None:
        return next_available(
            self.shared_ranges(projects), self._used_ids_for_kind(projects, kind)
        )

    def analyze(self, projects: Sequence[Project], *, shared_mode: bool) -> WorkspaceAnalysis:
        """Run one full analysis pass.

        Conflicts and shared gaps are only computed in shared range mode;
        otherwise those lists stay empty.
        """
        with analysis_pass(shared_mode=shared_mode) as pass_id:
            start_time = time.perf_counter()
            result = WorkspaceAnalysis(
                projects=list(projects), shared_mode=shared_mode, pass_id=pass_id
            )
            for project in projects:
                result.gaps_by_project[project.name] = self.project_gaps(project)

            if shared_mode:
                self._analyze_shared(projects, result)

            log.info(
                "analysis_complete",
                projects=len(result.projects),
                conflicts=result.total_conflicts,
                duration_ms=round((time.perf_counter() - start_time) * 1000, 1),
            )
        return result

    def _analyze_shared(self, projects: Sequence[Project], result: WorkspaceAnalysis) -> None:
        result.shared_ranges = self.shared_ranges(projects)
        for kind in ALL_KINDS:
            used = self._used_ids_for_kind(projects, kind)
            result.shared_gaps_by_kind[kind] = find_gaps(result.shared_ranges, used)

        # Projects sharing a manifest name count as one project
        by_project: dict[str, list[Declaration]] = {}
        for project in projects:
            by_project.setdefault(project.name, []).extend(project.declarations)
        result.conflicts = find_conflicts(by_project)
        result.field_conflicts = find_field_conflicts(by_project)
        result.value_conflicts = find_value_conflicts(by_project)
